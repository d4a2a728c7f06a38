"""Error taxonomy for request handling.

Validation failures map to a 404 outcome, everything raised while talking
to the database maps to a 500 outcome.
"""


class CratesiteError(Exception):
    """Base class for all cratesite errors."""


class NotFoundError(CratesiteError):
    """Requested resource does not exist or the request is malformed.

    Raised before any I/O is performed.
    """

    def __init__(
        self,
        title: str = "The requested resource does not exist",
        message: str | None = None,
    ) -> None:
        super().__init__(title)
        self.title = title
        self.message = message


class InternalError(CratesiteError):
    """Failure in a collaborator that the request cannot recover from."""


class QueryError(InternalError):
    """The release aggregation query failed."""


class WorkerError(InternalError):
    """The worker running a blocking call could not be joined."""


class ConfigLookupError(InternalError):
    """Reading a value from the configuration store failed."""

"""About page lookup.

Maps the last path segment of an ``/about`` URL to a template. The
resolved name also selects the highlighted navigation tab.
"""

from dataclasses import dataclass

from cratesite.errors import NotFoundError

ABOUT_TEMPLATE_DIR = "core/about"

ABOUT_PAGES = frozenset({"badges", "metadata", "redirections", "download"})

ABOUT_NOT_FOUND_TITLE = "The requested page does not exist"
ABOUT_NOT_FOUND_MESSAGE = (
    "This /about page does not exist. Perhaps you are interested in "
    '<a href="https://github.com/rust-lang/docs.rs/tree/master/templates/core/about">'
    "creating</a> it?"
)


@dataclass(frozen=True)
class TemplateRef:
    """Template to render and the navigation tab it activates."""

    template: str
    active_tab: str


@dataclass(frozen=True)
class ErrorPage:
    """User-facing error page payload."""

    title: str
    message: str | None
    status: int

    @classmethod
    def from_error(cls, error: NotFoundError) -> "ErrorPage":
        return cls(title=error.title, message=error.message, status=404)


def resolve_about_page(name: str) -> TemplateRef:
    """Resolve an about page name to its template.

    ``about`` and ``index`` both name the index page.

    Raises:
        NotFoundError: If no such about page exists
    """
    if name in ("about", "index"):
        page = "index"
    elif name in ABOUT_PAGES:
        page = name
    else:
        raise NotFoundError(ABOUT_NOT_FOUND_TITLE, ABOUT_NOT_FOUND_MESSAGE)
    return TemplateRef(template=f"{ABOUT_TEMPLATE_DIR}/{page}.html", active_tab=page)


def about_page(name: str) -> TemplateRef | ErrorPage:
    """Like resolve_about_page(), but return the error page instead of raising."""
    try:
        return resolve_about_page(name)
    except NotFoundError as e:
        return ErrorPage.from_error(e)

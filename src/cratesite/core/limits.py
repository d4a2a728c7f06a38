"""Default build limits shown on the builds page."""

from dataclasses import dataclass

DEFAULT_MAX_TARGETS = 10


@dataclass(frozen=True)
class Limits:
    """Resource limits applied to a documentation build."""

    memory: int = 3 * 1024 * 1024 * 1024
    targets: int = DEFAULT_MAX_TARGETS
    timeout: int = 15 * 60
    networking: bool = False
    max_log_size: int = 100 * 1024

    def for_display(self) -> dict[str, str]:
        """Human-readable limits, keyed by label."""
        return {
            "Available RAM": _format_bytes(self.memory),
            "Maximum rustdoc execution time": _format_duration(self.timeout),
            "Maximum size of a build log": _format_bytes(self.max_log_size),
            "Network access": "allowed" if self.networking else "blocked",
            "Maximum number of build targets": str(self.targets),
        }


def _format_bytes(size: int) -> str:
    for unit in ("bytes", "KB", "MB"):
        if size < 1024:
            return f"{size} {unit}"
        size //= 1024
    return f"{size} GB"


def _format_duration(seconds: int) -> str:
    hours, rest = divmod(seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if seconds or not parts:
        parts.append(f"{seconds}s")
    return " ".join(parts)

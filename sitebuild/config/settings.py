"""
Runtime settings shared by the CLI, the orchestrator and the dev server.
"""

from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_SITENAME = "onbase"
DEFAULT_PORT = 3000
DEFAULT_LIVERELOAD_PORT = 35729
DEFAULT_HOST = "127.0.0.1"

# Wait one second of quiet before rebuilding or reloading
DEFAULT_DEBOUNCE = 1.0


@dataclass(frozen=True)
class Settings:
    """Process-wide settings, fixed at startup."""

    root: Path = field(default_factory=Path.cwd)
    sitename: str = DEFAULT_SITENAME
    proxy: str | None = None
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    liveport: int = DEFAULT_LIVERELOAD_PORT
    debounce: float = DEFAULT_DEBOUNCE
    notify: bool = True
    open_browser: bool = False

    @property
    def proxy_target(self) -> str:
        """Upstream host proxied by the dev server."""
        target = self.proxy or f"{self.sitename}.dev"
        if "://" not in target:
            target = f"http://{target}"
        return target.rstrip("/")

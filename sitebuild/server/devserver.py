"""
Live-reload development server.

Proxies the configured host, injects the live-reload script into HTML
responses and reloads browsers when published output changes. Changed
stylesheets are injected without a full page reload.
"""

from livereload import Server

from sitebuild.config.paths import PathTable
from sitebuild.config.settings import Settings
from sitebuild.server.proxy import ProxyApp
from sitebuild.utils.logging import logger


class DevServer:
    """
    Wraps a livereload Server around the proxy app.

    The output tree is watched rather than the sources, so browsers reload
    only after a task has written its results.
    """

    def __init__(self, table: PathTable, settings: Settings) -> None:
        self.table = table
        self.settings = settings

    def build(self) -> Server:
        server = Server(app=ProxyApp(self.settings.proxy_target))
        self.table.public_dir.mkdir(parents=True, exist_ok=True)
        server.watch(str(self.table.public_dir), delay=self.settings.debounce)
        return server

    def serve(self) -> None:
        """Run the server; blocks until interrupted."""
        server = self.build()
        logger.info(
            f"Proxying {self.settings.proxy_target} at "
            f"http://{self.settings.host}:{self.settings.port}"
        )
        server.serve(
            port=self.settings.port,
            liveport=self.settings.liveport,
            host=self.settings.host,
            open_url_delay=1 if self.settings.open_browser else None,
            live_css=True,
        )

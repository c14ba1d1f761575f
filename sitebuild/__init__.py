"""
sitebuild - front-end asset build pipeline.

Compiles stylesheets, bundles scripts, optimizes images, publishes markup and
fonts, lints sources and serves a live-reload development server.
"""

__version__ = "0.1.0"

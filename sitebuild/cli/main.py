"""
Main CLI entry point for sitebuild.
"""

from pathlib import Path

import click

from sitebuild import __version__
from sitebuild.config.settings import (
    DEFAULT_DEBOUNCE,
    DEFAULT_PORT,
    DEFAULT_SITENAME,
    Settings,
)
from sitebuild.utils.logging import set_verbose


def _graph(settings: Settings):
    from sitebuild.config.paths import PathTable
    from sitebuild.pipeline.tasks import build_task_graph

    table = PathTable(settings.root, settings.sitename)
    return table, build_task_graph(table)


def _run(ctx: click.Context, name: str) -> None:
    from sitebuild.pipeline.runner import run_oneshot

    _, graph = _graph(ctx.obj)
    if name not in graph:
        raise click.UsageError(f"Unknown task: {name}")
    run_oneshot(graph, name)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__)
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
    envvar="SITEBUILD_ROOT",
    show_default=True,
    help="Project root containing src/ and public/.",
)
@click.option(
    "--sitename",
    default=DEFAULT_SITENAME,
    envvar="SITEBUILD_SITENAME",
    show_default=True,
    help="Namespace for public/assets/<sitename>/.",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx, root, sitename, verbose):
    """Front-end asset build pipeline."""
    set_verbose(verbose)
    ctx.obj = Settings(root=root.resolve(), sitename=sitename)
    if ctx.invoked_subcommand is None:
        # Parse an empty argument list so envvars and defaults resolve as for `watch`
        with watch.make_context("watch", [], parent=ctx) as watch_ctx:
            watch.invoke(watch_ctx)


@cli.command()
@click.option(
    "--proxy",
    default=None,
    envvar="SITEBUILD_PROXY",
    help="Host proxied by the dev server. Defaults to <sitename>.dev.",
)
@click.option("--port", type=int, default=DEFAULT_PORT, show_default=True, help="Dev server port.")
@click.option(
    "--debounce",
    type=float,
    default=DEFAULT_DEBOUNCE,
    show_default=True,
    help="Seconds of quiet before rebuilding.",
)
@click.option("--no-server", is_flag=True, help="Watch and rebuild without the dev server.")
@click.option("--no-notify", is_flag=True, help="Disable desktop notifications.")
@click.option("--open", "open_browser", is_flag=True, help="Open the site in a browser.")
@click.pass_context
def watch(ctx, proxy, port, debounce, no_server, no_notify, open_browser):
    """Rebuild on source changes and serve with live reload."""
    from dataclasses import replace

    from sitebuild.pipeline.errors import ErrorHandler
    from sitebuild.pipeline.watch import Orchestrator
    from sitebuild.server.devserver import DevServer
    from sitebuild.utils.notify import DesktopNotifier

    settings = replace(
        ctx.obj,
        proxy=proxy,
        port=port,
        debounce=debounce,
        notify=not no_notify,
        open_browser=open_browser,
    )
    table, graph = _graph(settings)
    handler = ErrorHandler(DesktopNotifier() if settings.notify else None)
    server = None if no_server else DevServer(table, settings)

    Orchestrator(
        graph,
        table,
        debounce=settings.debounce,
        error_handler=handler,
        server=server,
    ).run_forever()


cli.add_command(watch, "default")


@cli.command("build:all")
@click.pass_context
def build_all(ctx):
    """Build fonts, styles, scripts, images and markup."""
    _run(ctx, "build:all")


@cli.command()
@click.pass_context
def fonts(ctx):
    """Publish font files."""
    _run(ctx, "fonts")


@cli.command()
@click.pass_context
def styles(ctx):
    """Compile, prefix and minify stylesheets."""
    _run(ctx, "styles")


@cli.command()
@click.pass_context
def scripts(ctx):
    """Bundle and minify JavaScript."""
    _run(ctx, "scripts")


@cli.command()
@click.pass_context
def images(ctx):
    """Optimize images for web use."""
    _run(ctx, "images")


@cli.command()
@click.pass_context
def markup(ctx):
    """Publish HTML markup."""
    _run(ctx, "markup")


@cli.command()
@click.pass_context
def lint(ctx):
    """Lint Sass and JavaScript sources."""
    _run(ctx, "lint")


@cli.command("run")
@click.argument("name")
@click.pass_context
def run_task(ctx, name):
    """Run any registered task by name."""
    _run(ctx, name)


@cli.command("tasks")
@click.pass_context
def list_tasks(ctx):
    """List registered tasks and their dependencies."""
    _, graph = _graph(ctx.obj)
    for task in sorted(graph, key=lambda t: t.name):
        deps = f" <- {', '.join(task.dependencies)}" if task.dependencies else ""
        click.echo(f"{task.name:<16} {task.description}{deps}")


def main():  # pragma: no cover
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()

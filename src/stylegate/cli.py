"""stylegate CLI.

Installed as ``stylegate`` console_script.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.markup import escape

from stylegate import __version__
from stylegate import log
from stylegate.config import Config, load_config
from stylegate.errors import ConfigError, format_plugin_error
from stylegate.run import RunChannel
from stylegate.runner import Runner
from stylegate.tools.registry import default_toolchain


CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])

TASK_ARGUMENT = click.argument("task_names", metavar="[TASK]...", nargs=-1)


def _runner(ctx: click.Context) -> Runner:
    """Build the runner from the group options, exiting on configuration problems."""
    params = ctx.find_root().params
    try:
        cfg = load_config(Path(params["config_file"]) if params["config_file"] else None)
    except ConfigError as exc:
        log.error(str(exc))
        sys.exit(1)
    if params["no_sourcemaps"]:
        cfg.sourcemaps = False

    tools = default_toolchain(cfg, notifications=not params["no_notify"])
    missing = tools.missing_tools()
    if missing:
        for err in missing:
            log.error(err)
        log.error("Install the build tools first: npm install -g sass sass-lint postcss-cli")
        sys.exit(1)
    return Runner(cfg, tools)


def _finish(channel: RunChannel) -> None:
    """Turn recorded run errors into the process exit code."""
    if not channel.failed:
        return
    for err in channel.errors:
        log.error(format_plugin_error(err))
    sys.exit(1)


def _run(ctx: click.Context, task_names: tuple[str, ...], func: str) -> None:
    runner = _runner(ctx)
    try:
        channel = runner.run(task_names, func)
    except ConfigError as exc:
        log.error(str(exc))
        sys.exit(1)
    _finish(channel)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option(
    "-c", "--config", "config_file", default="",
    help="Path to stylegate.json (default: search upwards from the working directory)",
)
@click.option("--no-sourcemaps", is_flag=True, help="Never embed source maps")
@click.option("--no-notify", is_flag=True, help="Disable desktop notifications")
@click.option("-v", "--verbose", is_flag=True, help="Show debug output")
@click.version_option(__version__, prog_name="stylegate")
@click.pass_context
def main(
    ctx: click.Context,
    config_file: str,
    no_sourcemaps: bool,
    no_notify: bool,
    verbose: bool,
) -> None:
    """stylegate: lint-gated SCSS builds.

    Lints the task's sources first; compilation only runs on a clean lint.

    \b
    EXAMPLES:
      stylegate lint app              # Lint the "app" task
      stylegate nest                  # Development build of every task
      stylegate compress app          # Minified build (*.min.css)
      stylegate build                 # lint, nest, compress
      stylegate watch app             # Rebuild on change
    """
    log.set_verbose(verbose)


@main.command()
@TASK_ARGUMENT
@click.pass_context
def lint(ctx: click.Context, task_names: tuple[str, ...]) -> None:
    """Lint the sources of each task."""
    _run(ctx, task_names, "lint")


@main.command()
@TASK_ARGUMENT
@click.pass_context
def nest(ctx: click.Context, task_names: tuple[str, ...]) -> None:
    """Build readable CSS (nested output, source maps when enabled)."""
    _run(ctx, task_names, "nest")


@main.command()
@TASK_ARGUMENT
@click.pass_context
def compress(ctx: click.Context, task_names: tuple[str, ...]) -> None:
    """Build minified CSS with a .min suffix."""
    _run(ctx, task_names, "compress")


@main.command()
@TASK_ARGUMENT
@click.pass_context
def build(ctx: click.Context, task_names: tuple[str, ...]) -> None:
    """Lint, then run the nested and minified builds."""
    _run(ctx, task_names, "build")


@main.command()
@TASK_ARGUMENT
@click.pass_context
def watch(ctx: click.Context, task_names: tuple[str, ...]) -> None:
    """Re-lint and rebuild (nested) whenever a source file changes."""
    runner = _runner(ctx)
    try:
        runner.watch(task_names)
    except ConfigError as exc:
        log.error(str(exc))
        sys.exit(1)
    except KeyboardInterrupt:
        log.info("Stopped watching")


@main.command(name="tasks")
@click.pass_context
def list_tasks(ctx: click.Context) -> None:
    """List the tasks configured in stylegate.json."""
    params = ctx.find_root().params
    try:
        cfg: Config = load_config(Path(params["config_file"]) if params["config_file"] else None)
    except ConfigError as exc:
        log.error(str(exc))
        sys.exit(1)
    if not cfg.tasks:
        log.warn("No tasks configured")
        return
    for name in sorted(cfg.tasks):
        task = cfg.tasks[name]
        src = task.get("src", "")
        src_text = ", ".join(src) if isinstance(src, list) else src
        target = f"{src_text} -> {task.get('dst', '')}"
        log.console.print(f"  [bold]{escape(name)}[/bold]  {escape(target)}")

"""Command line entry point for cgroupinfo."""

import click

from cgroupinfo import __version__
from cgroupinfo.config import DEFAULT_SAMPLE_INTERVAL, CgroupConfig
from cgroupinfo.inspector import CgroupInspector
from cgroupinfo.logger_setup import setup_logger
from cgroupinfo.models import FailedReport
from cgroupinfo.render import render_text
from cgroupinfo.web import DEFAULT_HOST, DEFAULT_PORT
from cgroupinfo.web import serve as run_server

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@click.group(invoke_without_command=True)
@click.option(
    "-l",
    "--log-level",
    "log_level",
    type=click.Choice(LOG_LEVELS),
    default="WARNING",
    help="Logging level for diagnostics written to stderr.",
)
@click.option(
    "-i",
    "--interval",
    "interval",
    type=click.FloatRange(min=0, min_open=True),
    default=DEFAULT_SAMPLE_INTERVAL,
    show_default=True,
    help="Seconds between the two CPU usage samples.",
)
@click.version_option(__version__, prog_name="cgroupinfo")
@click.pass_context
def cli_start(ctx: click.Context, log_level: str, interval: float) -> None:
    """
    Print the cgroup CPU and memory limits of this process.

    Without a subcommand, the report is printed once to stdout.
    """
    setup_logger(log_level)
    ctx.obj = CgroupConfig(sample_interval=interval)

    if ctx.invoked_subcommand is None:
        report = CgroupInspector(ctx.obj).inspect()
        click.echo(render_text(report), nl=False)
        if isinstance(report, FailedReport):
            ctx.exit(1)


@cli_start.command()
@click.option("--host", default=DEFAULT_HOST, show_default=True, help="Interface to bind.")
@click.option("-p", "--port", type=int, default=DEFAULT_PORT, show_default=True, help="TCP port to listen on.")
@click.pass_obj
def serve(config: CgroupConfig, host: str, port: int) -> None:
    """Serve the report as an HTML page on GET /."""
    run_server(config, host=host, port=port)


@cli_start.command()
@click.option(
    "-r",
    "--refresh",
    type=click.FloatRange(min=0.1),
    default=1.0,
    show_default=True,
    help="Pause between reports, in seconds.",
)
@click.pass_obj
def watch(config: CgroupConfig, refresh: float) -> None:
    """Show a live dashboard that refreshes the report."""
    from cgroupinfo.app import CgroupInfoApp

    CgroupInfoApp(CgroupInspector(config), refresh_rate=refresh).run()


def main() -> None:
    cli_start()


if __name__ == "__main__":
    main()

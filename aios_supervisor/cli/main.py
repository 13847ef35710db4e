"""
aiOS CLI supervisor - command line entry point

Daemon lifecycle commands plus pass-through commands for the managed CLI.
"""

import click

from aios_supervisor import __version__
from aios_supervisor.config import get_settings
from aios_supervisor.utils.logger import get_logger, setup_logging
from aios_supervisor.cli.commands import (
    service_commands,
    aios_commands,
    models_group,
    hive_group,
)


@click.group()
@click.version_option(version=__version__, prog_name="aios-supervisor")
@click.option("--log-level", default=None, help="Log level (DEBUG, INFO, WARNING, ERROR)")
@click.pass_context
def cli(ctx, log_level):
    """aiOS CLI supervisor

    Runs the managed CLI's daemon in the background, tracks it through a PID
    file, and passes model, hive and inference commands through to it.
    """
    settings = get_settings()
    level = (log_level or settings.log_level.value).upper()

    ctx.ensure_object(dict)
    ctx.obj['settings'] = settings
    ctx.obj['log_level'] = level

    setup_logging(settings.get_logs_dir(), level)
    logger = get_logger("cli")
    logger.debug(f"aios-supervisor CLI started (log level: {level})")


# ========== Daemon lifecycle ==========
for command in service_commands:
    cli.add_command(command)

# ========== Managed CLI pass-through ==========
for command in aios_commands:
    cli.add_command(command)

cli.add_command(models_group)
cli.add_command(hive_group)


if __name__ == "__main__":
    cli()

"""
Daemon lifecycle commands (start, stop, restart, status, logs)
"""

from collections import deque

import click

from aios_supervisor.daemon import StartOutcome, StartResult
from aios_supervisor.utils.logger import get_logger
from .utils import (
    build_supervisor,
    current_settings,
    echo_delegate_output,
    format_status,
    handle_errors,
)


def _echo_start_result(result: StartResult):
    if result.outcome == StartOutcome.ALREADY_RUNNING:
        click.echo(f"⚠️  Daemon is already running with PID {result.process_id}.")
        return
    click.echo(f"✅ Daemon started (PID: {result.process_id}).")
    click.echo(f"   📝 Logs: {result.log_file}")
    click.echo(f"   📍 PID file: {result.pid_file}")


@click.command()
@handle_errors
def start():
    """Start the managed daemon in the background."""
    logger = get_logger("cli")
    logger.info("Daemon start requested")

    click.echo("🚀 Starting aiOS CLI daemon in the background...")
    _echo_start_result(build_supervisor().start())


@click.command()
@click.option("--force", is_flag=True, help="Terminate the process if it does not exit in time")
@handle_errors
def stop(force):
    """Ask the managed daemon to shut down."""
    logger = get_logger("cli")
    logger.info("Daemon stop requested")

    click.echo("🛑 Stopping daemon...")
    stopped = build_supervisor().stop(force=force)
    click.echo(format_status(stopped, "Daemon stopped.", "Daemon is still running (try --force)."))
    if not stopped:
        raise click.exceptions.Exit(1)


@click.command()
@click.option("--force", is_flag=True, help="Terminate the old process if it does not exit in time")
@handle_errors
def restart(force):
    """Stop and start the managed daemon."""
    logger = get_logger("cli")
    logger.info("Daemon restart requested")

    click.echo("🔄 Restarting daemon...")
    _echo_start_result(build_supervisor().restart(force=force))


@click.command()
def status():
    """Show daemon status from the PID file and the managed CLI."""
    logger = get_logger("cli")
    logger.info("Daemon status requested")

    report = build_supervisor().status()

    click.echo("📊 Daemon status:")
    if report.running:
        click.echo("   🟢 State: running")
        click.echo(f"   📍 PID: {report.process_id}")
        details = report.details
        if details.get('uptime'):
            click.echo(f"   ⏱️  Uptime: {details['uptime']}")
        if details.get('memory_usage'):
            click.echo(f"   💾 Memory: {details['memory_usage']}")
        if details.get('cpu_usage'):
            click.echo(f"   🖥️  CPU: {details['cpu_usage']}")
    else:
        click.echo("   🔴 State: not running (no live PID recorded)")

    if report.delegate is not None:
        click.echo("\n🔍 Managed CLI status:")
        echo_delegate_output(report.delegate)
    elif report.delegate_error:
        click.echo(f"\n⚠️  Managed CLI status unavailable: {report.delegate_error}")


@click.command()
@click.option('--lines', '-n', default=50, show_default=True, help='Number of lines to show')
def logs(lines):
    """Show the tail of the managed daemon's log file."""
    log_file = current_settings().get_log_file()

    if not log_file.exists():
        click.echo(f"❌ No log file yet: {log_file}")
        return

    click.echo(f"📄 Last {lines} lines of {log_file}:")
    click.echo("-" * 50)
    with open(log_file, 'r', encoding='utf-8', errors='replace') as f:
        tail = deque(f, maxlen=lines)
    for line in tail:
        click.echo(line.rstrip("\n"))


service_commands = [
    start,
    stop,
    restart,
    status,
    logs,
]

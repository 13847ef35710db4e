"""
Shared helpers for CLI commands
"""

from functools import wraps
from typing import Sequence

import click

from aios_supervisor.config import Settings, get_settings
from aios_supervisor.daemon import DaemonSupervisor
from aios_supervisor.managed_process import DelegateResult, ManagedProcess
from aios_supervisor.utils.error_handler import DelegateError, SupervisorError, handle_error


def handle_errors(f):
    """Turn fatal supervisor errors into a ❌ line and exit status 1"""
    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except SupervisorError as e:
            handle_error(e, f.__name__)
            click.echo(f"❌ {e.message}", err=True)
            raise click.exceptions.Exit(1)
    return wrapper


def current_settings() -> Settings:
    ctx = click.get_current_context(silent=True)
    if ctx is not None and ctx.obj and 'settings' in ctx.obj:
        return ctx.obj['settings']
    return get_settings()


def build_supervisor() -> DaemonSupervisor:
    return DaemonSupervisor.from_settings(current_settings())


def build_managed_process() -> ManagedProcess:
    settings = current_settings()
    return ManagedProcess(settings.managed_cli, list(settings.start_args))


def echo_delegate_output(result: DelegateResult):
    """Relay a managed CLI subcommand's stdout and stderr as received"""
    if result.stdout:
        click.echo(result.stdout.rstrip("\n"))
    if result.stderr:
        click.echo(result.stderr.rstrip("\n"), err=True)


def run_delegate(args: Sequence[str], failure: str, interactive: bool = False) -> bool:
    """Run a managed CLI subcommand, echoing its output.

    A failure is reported as a warning and never aborts the command.
    """
    try:
        result = build_managed_process().run(args, capture=not interactive)
    except DelegateError as e:
        handle_error(e, ' '.join(args))
        click.echo(f"⚠️  {failure}", err=True)
        return False

    echo_delegate_output(result)
    return True


def format_status(status: bool, success_msg: str, fail_msg: str) -> str:
    if status:
        return f"✅ {success_msg}"
    else:
        return f"❌ {fail_msg}"

"""
Managed CLI pass-through commands (check, system-info, models, hive, infer)
"""

import os
from pathlib import Path

import click

from aios_supervisor.utils.logger import get_logger
from .utils import build_managed_process, current_settings, run_delegate


GPU_TIERS = {
    1: "30GB",
    2: "20GB",
    3: "8GB",
    4: "4GB",
    5: "2GB",
}
FALLBACK_TIER = 5


@click.command()
def check():
    """Check that the managed CLI is installed and on PATH."""
    process = build_managed_process()
    location = process.resolve()
    if location is None:
        click.echo(f"❌ {process.executable} is not detected. Please check the installation.", err=True)
        raise click.exceptions.Exit(1)
    click.echo(f"✅ {process.executable} is installed and available globally ({location}).")


@click.command("system-info")
def system_info():
    """Show system information reported by the managed CLI."""
    click.echo("🖥️  Fetching system information...")
    run_delegate(["system-info"], "Unable to retrieve system information.")


@click.group("models")
def models_group():
    """Model management (delegated to the managed CLI)."""
    pass


@models_group.command("available")
def models_available():
    """List models available to download."""
    click.echo("📦 Fetching available models...")
    run_delegate(["models", "available"], "Failed to fetch available models.")


@models_group.command("add")
@click.argument("model", required=False)
def models_add(model):
    """Add MODEL, or the default model when none is given."""
    logger = get_logger("cli")

    if not model:
        default_model = current_settings().default_model
        if click.confirm("Do you want to add the default model?", default=True):
            model = default_model
        else:
            model = click.prompt(f"Enter the model to install (e.g., {default_model})")

    logger.info(f"Adding model: {model}")
    click.echo(f"➕ Adding model: {model}")
    if run_delegate(["models", "add", model], f"Failed to add model {model}."):
        click.echo(f"✅ Model {model} added successfully.")


@click.group("hive")
def hive_group():
    """Hive network commands (delegated to the managed CLI)."""
    pass


def _save_private_key(key_file, private_key: str):
    key_file.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(key_file, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, 'w') as f:
        f.write(private_key.strip() + "\n")
    os.chmod(key_file, 0o600)


@hive_group.command("import-keys")
@click.option("--key-file", type=click.Path(dir_okay=False), default=None,
              help="Key file to import (default: AIOS_KEY_FILE)")
def hive_import_keys(key_file):
    """Import a private key into the managed CLI."""
    logger = get_logger("cli")
    key_path = Path(key_file) if key_file else current_settings().key_file

    click.echo("🔑 Configuring Hive...")
    if click.confirm("Do you have a private key already?", default=False):
        private_key = click.prompt("Paste your private key", hide_input=True)
        _save_private_key(key_path, private_key)
        logger.info(f"Private key saved to {key_path}")
        click.echo(f"✅ Private key saved to {key_path}")

    if run_delegate(["hive", "import-keys", str(key_path)], "Failed to import private key."):
        click.echo("✅ Private key imported successfully.")


@hive_group.command("login")
def hive_login():
    """Log in to Hive and connect to the network."""
    click.echo("🌐 Logging into Hive...")
    logged_in = run_delegate(["hive", "login"], "Failed to login to Hive.", interactive=True)
    connected = run_delegate(["hive", "connect"], "Failed to connect to Hive network.", interactive=True)
    if logged_in and connected:
        click.echo("✅ Hive login and connection successful.")


@hive_group.command("select-tier")
@click.argument("tier", required=False)
def hive_select_tier(tier):
    """Select the GPU memory TIER (1-5)."""
    if tier is None:
        click.echo("Select GPU Memory Tier:")
        for number, memory in GPU_TIERS.items():
            click.echo(f"{number} : {memory}")
        tier = click.prompt("Enter your choice (1-5)", default=str(FALLBACK_TIER))

    try:
        tier_number = int(tier)
    except (TypeError, ValueError):
        tier_number = None
    if tier_number not in GPU_TIERS:
        click.echo(f"⚠️  Invalid choice. Defaulting to Tier {FALLBACK_TIER}.")
        tier_number = FALLBACK_TIER

    if run_delegate(["hive", "select-tier", str(tier_number)], f"Failed to select Tier {tier_number}."):
        click.echo(f"✅ Tier {tier_number} ({GPU_TIERS[tier_number]}) selected successfully.")


@click.command()
@click.option("--model", prompt="Enter the model to use for inference", help="Model to run")
@click.option("--prompt", "user_prompt", prompt="Enter your prompt", help="Prompt text")
def infer(model, user_prompt):
    """Run an inference request through the managed CLI."""
    if run_delegate(["infer", "--model", model, "--prompt", user_prompt], "Failed to run inference."):
        click.echo("✅ Inference completed.")


aios_commands = [
    check,
    system_info,
    infer,
]

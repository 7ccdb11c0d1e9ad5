"""
DevPulse CLI: `devpulse` command.

Commands:
  devpulse init --dsn URL      Save the DSN and environment
  devpulse status              Show the resolved configuration
  devpulse parse [FILE]        Parse a stack trace into frames
  devpulse send <message>      Send a message event
  devpulse vital <name> <val>  Send a performance event
"""

import asyncio
import json
import os
from pathlib import Path
from typing import Any, Optional

try:
    import click
    from rich.console import Console
except ImportError:
    raise SystemExit("CLI requires extras: pip install devpulse[cli]")

from devpulse import __version__
from devpulse.client import DevPulse
from devpulse.errors import ConfigError

console = Console()
CONFIG_FILE = Path.home() / ".devpulse" / "config.json"


def _load_config() -> dict:
    try:
        return json.loads(CONFIG_FILE.read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def _save_config(cfg: dict) -> None:
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.write_text(json.dumps(cfg, indent=2))


def _resolve(dsn: Optional[str], environment: Optional[str] = None) -> dict[str, Any]:
    """--dsn > DEVPULSE_DSN > config file."""
    cfg = _load_config()
    return {
        "dsn": dsn or os.getenv("DEVPULSE_DSN") or cfg.get("dsn"),
        "environment": environment or os.getenv("DEVPULSE_ENVIRONMENT") or cfg.get("environment"),
        "release": os.getenv("DEVPULSE_RELEASE") or cfg.get("release"),
    }


def _get_client(dsn: Optional[str], environment: Optional[str] = None) -> DevPulse:
    options = _resolve(dsn, environment)
    if not options["dsn"]:
        console.print("[red]No DSN configured. Pass --dsn or run `devpulse init` first.[/red]")
        raise SystemExit(1)
    client = DevPulse()
    try:
        client.init(install_handlers=False, track_vitals=False, **options)
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)
    return client


def _run(coro):
    return asyncio.run(coro)


@click.group()
@click.version_option(__version__)
def main():
    """DevPulse CLI: inspect traces and send telemetry events."""


@main.command("init")
@click.option("--dsn", required=True, help="Ingestion endpoint URL, including its key")
@click.option("--environment", default="production", show_default=True)
@click.option("--release", default=None)
def init_cmd(dsn: str, environment: str, release: Optional[str]):
    """Save the DSN to ~/.devpulse/config.json."""
    cfg = {**_load_config(), "dsn": dsn, "environment": environment}
    if release:
        cfg["release"] = release
    _save_config(cfg)
    console.print(f"[green]Saved DSN for {environment}.[/green]")


@main.command("status")
def status_cmd():
    """Show the resolved configuration."""
    options = _resolve(None)
    if not options["dsn"]:
        console.print("[yellow]No DSN configured. Run `devpulse init --dsn ...`.[/yellow]")
        return
    console.print(f"[green]DSN[/green] {options['dsn']}")
    console.print(f"[dim]environment: {options['environment'] or 'production'}, "
                  f"release: {options['release'] or '-'}[/dim]")


# Register subcommands from separate modules
from devpulse.cli.events import send_cmd, vital_cmd
from devpulse.cli.stack import parse_cmd

main.add_command(parse_cmd)
main.add_command(send_cmd)
main.add_command(vital_cmd)


if __name__ == "__main__":
    main()

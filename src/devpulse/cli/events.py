"""CLI: devpulse send, devpulse vital"""

from typing import Optional

import click
from rich.console import Console

console = Console()


def _get_client(dsn: Optional[str], environment: Optional[str] = None):
    from devpulse.cli.main import _get_client
    return _get_client(dsn, environment)


def _run(coro):
    from devpulse.cli.main import _run
    return _run(coro)


@click.command("send")
@click.argument("message")
@click.option("--level", type=click.Choice(["info", "warning", "error"]), default="info", show_default=True)
@click.option("--dsn", default=None, help="Overrides DEVPULSE_DSN and the saved config")
@click.option("--environment", default=None)
@click.option("--timeout", default=5.0, show_default=True, help="Seconds to wait for delivery")
def send_cmd(message: str, level: str, dsn: Optional[str], environment: Optional[str], timeout: float):
    """Send a message event."""
    client = _get_client(dsn, environment)

    async def _send():
        client.capture_message(message, level)
        with console.status("Sending..."):
            return await client.flush(timeout)

    if _run(_send()):
        console.print(f"[green]Sent {level} message.[/green]")
    else:
        console.print("[yellow]Send still in flight when the timeout expired.[/yellow]")


@click.command("vital")
@click.argument("name")
@click.argument("value", type=float)
@click.option("--unit", type=click.Choice(["ms", "none"]), default="ms", show_default=True,
              help="'none' for unitless scores such as CLS")
@click.option("--dsn", default=None, help="Overrides DEVPULSE_DSN and the saved config")
@click.option("--environment", default=None)
@click.option("--timeout", default=5.0, show_default=True, help="Seconds to wait for delivery")
def vital_cmd(name: str, value: float, unit: str, dsn: Optional[str], environment: Optional[str], timeout: float):
    """Send a performance measurement."""
    client = _get_client(dsn, environment)

    async def _send():
        client.capture_performance(name, value, unit="" if unit == "none" else unit)
        with console.status("Sending..."):
            return await client.flush(timeout)

    if _run(_send()):
        console.print(f"[green]Sent {name}.[/green]")
    else:
        console.print("[yellow]Send still in flight when the timeout expired.[/yellow]")

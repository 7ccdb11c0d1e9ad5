"""CLI: devpulse parse"""

import json
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from devpulse.models.frame import StackFrame
from devpulse.stack import parse_stack

console = Console()


@click.command("parse")
@click.argument("trace_file", type=click.File("r"), default="-")
@click.option("--json", "as_json", is_flag=True, help="Print frames as JSON")
def parse_cmd(trace_file, as_json: bool):
    """Parse a stack trace (file or stdin) into frames."""
    frames = parse_stack(trace_file.read())
    if as_json:
        click.echo(json.dumps([f.model_dump() for f in frames], indent=2))
        return
    if not frames:
        console.print("[yellow]No frames found.[/yellow]")
        return

    table = Table("#", "function", "file", "line", "column")
    for i, frame in enumerate(frames):
        if isinstance(frame, StackFrame):
            table.add_row(str(i), frame.function or "[dim]<anonymous>[/dim]", frame.file,
                          _cell(frame.line), _cell(frame.column))
        else:
            table.add_row(str(i), "[dim]raw[/dim]", frame.raw, "", "")
    console.print(table)


def _cell(value: Optional[int]) -> str:
    return "" if value is None else str(value)

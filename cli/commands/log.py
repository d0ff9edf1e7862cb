"""
Operation log commands: append, tail, verify
"""

import json
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from contract_engine.config import Settings
from contract_engine.core import ContractError, LogIntegrityError, Operation
from contract_engine.ledger import FileOperationLog

app = typer.Typer()
console = Console()

_OPS_HELP = "Path to operation log file (default: $CONTRACT_OPS_LOG)"


def _ops_path(ops_path: Optional[str]) -> str:
    return ops_path or Settings.from_env().ops_log


@app.command()
def append(
    ops_path: Optional[str] = typer.Option(None, "--ops", "-o", help=_OPS_HELP),
    call: Optional[str] = typer.Option(None, "--call", "-c", help="Direct call to this function"),
    feature: Optional[str] = typer.Option(None, "--feature", "-f", help="Feature event from this feature"),
    message: bool = typer.Option(False, "--message", "-m", help="Peer message"),
    payload: str = typer.Option("{}", "--payload", "-p", help="JSON payload"),
    origin: Optional[str] = typer.Option(None, "--origin", help="Submitter address"),
):
    """
    Admit one operation to the log.

    Examples:
        contract-engine log append --call syncDeliveryLane -p '{"status": "in_transit", "note": "left warehouse"}' --origin addr1
        contract-engine log append --feature timer_feature -p '{"key": "currentTime", "value": 1700000000000}'
        contract-engine log append --message -p '{"type": "msg", "msg": "hello"}'
    """
    if sum([call is not None, feature is not None, message]) != 1:
        console.print("[red]Error:[/red] pass exactly one of --call, --feature, --message")
        raise typer.Exit(2)

    try:
        body = json.loads(payload)
    except ValueError as e:
        console.print(f"[red]Error: invalid JSON payload:[/red] {e}")
        raise typer.Exit(2)

    try:
        if call is not None:
            op = Operation.call(call, body, origin_address=origin)
        elif feature is not None:
            op = Operation.feature(feature, body)
        else:
            op = Operation.message(body, origin_address=origin)
        op = FileOperationLog(_ops_path(ops_path)).append(op)
    except ContractError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)

    console.print(f"[green]✓ Appended operation {op.seq}[/green] ({op.kind.value}) [dim]{op.digest()[:16]}[/dim]")


@app.command()
def tail(
    ops_path: Optional[str] = typer.Option(None, "--ops", "-o", help=_OPS_HELP),
    lines: Optional[int] = typer.Option(None, "--lines", "-n", help="Number of operations to show"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show the last operations in the log.

    Examples:
        contract-engine log tail
        contract-engine log tail --lines 10 --json
    """
    log = FileOperationLog(_ops_path(ops_path))
    ops = list(log.read())
    if lines:
        ops = ops[-lines:]

    if json_output:
        print(json.dumps({"operations": [op.to_dict() for op in ops], "count": len(ops)}, indent=2))
        return

    if not ops:
        console.print("[yellow]Operation log is empty[/yellow]")
        return

    table = Table(title=f"Operation Log: {log.path}")
    table.add_column("Seq", style="cyan")
    table.add_column("Kind", style="green")
    table.add_column("Name", style="yellow")
    table.add_column("Origin")
    table.add_column("Digest (prefix)", style="dim")

    for op in ops:
        table.add_row(
            str(op.seq),
            op.kind.value,
            op.function_name or op.feature_name or "-",
            op.origin_address or "-",
            op.digest()[:16],
        )

    console.print(table)
    console.print(f"\n[bold]Total operations:[/bold] {len(ops)}")


@app.command()
def verify(
    ops_path: Optional[str] = typer.Option(None, "--ops", "-o", help=_OPS_HELP),
):
    """Verify the operation log hash chain."""
    log = FileOperationLog(_ops_path(ops_path))
    try:
        count = log.verify()
    except LogIntegrityError as e:
        console.print(f"[red]✗ Integrity check failed:[/red] {e}")
        raise typer.Exit(1)
    console.print(f"[green]✓ Verified {count} operations[/green]")

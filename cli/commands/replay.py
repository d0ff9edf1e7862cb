"""
Replay command: run the operation log through the sample contract
"""

import asyncio
import json
from collections import Counter
from typing import Optional

import typer
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from contract_engine.config import Settings
from contract_engine.core import ContractError
from contract_engine.ledger import FileOperationLog, replay
from contract_engine.sample import DeliveryLaneContract
from contract_engine.store import FileStore, KeyValueStore, MemoryStore

console = Console()


def replay_command(
    ops_path: Optional[str] = typer.Option(None, "--ops", "-o", help="Path to operation log file"),
    store_path: Optional[str] = typer.Option(
        None, "--store", "-s", help="Fresh durable store file (default: $CONTRACT_STORE_PATH, else in-memory)"
    ),
    until: Optional[int] = typer.Option(None, "--until", "-u", help="Replay until sequence number"),
    show_state: bool = typer.Option(False, "--show-state", help="Show final state"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Replay the operation log and report the resulting state hash.

    Examples:
        contract-engine replay
        contract-engine replay --until 10
        contract-engine replay --store /tmp/state.log --show-state
        contract-engine replay --json
    """
    settings = Settings.from_env()
    ops_path = ops_path or settings.ops_log
    store_path = store_path or settings.store_path

    try:
        store: KeyValueStore = FileStore(store_path) if store_path else MemoryStore()
        if store.snapshot():
            # replay always starts from empty state
            raise ContractError(f"store {store_path} is not empty, replay needs a fresh store")
        contract = DeliveryLaneContract(store)
        result = asyncio.run(replay(FileOperationLog(ops_path), contract, to_seq=until))
    except ContractError as e:
        if json_output:
            print(json.dumps({"error": str(e)}))
        else:
            console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)

    routes = Counter(r.route.value for r in result.results)
    state = store.snapshot()

    if json_output:
        output = {
            "success": True,
            "operations_replayed": result.applied,
            "executed": result.executed,
            "declined": result.declined,
            "state_hash": result.state_hash,
            "route_counts": dict(sorted(routes.items())),
        }
        if show_state:
            output["state"] = state
        print(json.dumps(output, indent=2))
        return

    console.print(f"[green]✓ Replayed {result.applied} operations[/green]")
    console.print(f"  Executed: [cyan]{result.executed}[/cyan]  Declined: [yellow]{result.declined}[/yellow]")
    console.print(f"  State hash: [yellow]{result.state_hash}[/yellow]")

    table = Table(title="Route Counts")
    table.add_column("Route", style="green")
    table.add_column("Count", style="cyan", justify="right")
    for route in sorted(routes):
        table.add_row(route, str(routes[route]))
    console.print(table)

    if show_state:
        console.print("\n[bold]Final State:[/bold]")
        console.print(Syntax(json.dumps(state, indent=2, sort_keys=True), "json", theme="monokai"))

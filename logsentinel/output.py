"""Console rendering for analysis results and stored alerts."""

from typing import List

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .analysis import AnalysisResult


def print_result(result: AnalysisResult, console: Console) -> None:
    alert_color = "red" if result.alerts else "green"
    console.print(Panel.fit(
        f"Total Lines: [cyan]{result.total_lines:,}[/]\n"
        f"Failed Logins: [cyan]{result.events:,}[/]\n"
        f"Suspicious IPs: [{alert_color}]{len(result.alerts):,}[/]",
        title="Log Analyzed",
        border_style="cyan",
    ))

    if result.alerts:
        table = Table(title="Brute Force Bursts", box=box.ROUNDED)
        table.add_column("IP Address", style="red")
        table.add_column("Attempts", style="yellow", justify="right")
        table.add_column("Window", justify="right")
        for alert in result.alerts:
            table.add_row(
                alert.source_address,
                str(alert.attempt_count),
                f"{alert.window_seconds:.2f}s",
            )
        console.print(table)

    if result.preview:
        console.print("\nPreview", style="bold")
        for line in result.preview:
            console.print(f"  {line}", markup=False, highlight=False)


def print_alerts(records: List[dict], console: Console) -> None:
    table = Table(title=f"Stored Alerts ({len(records)})", box=box.ROUNDED)
    table.add_column("Detected At", style="cyan")
    table.add_column("IP Address", style="red")
    table.add_column("Attempts", style="yellow", justify="right")
    table.add_column("Window", justify="right")
    for record in records:
        table.add_row(
            str(record.get("detected_at", "")),
            str(record.get("ip", "")),
            str(record.get("attempt_count", "")),
            f"{record.get('window_seconds', 0):.2f}s",
        )
    console.print(table)

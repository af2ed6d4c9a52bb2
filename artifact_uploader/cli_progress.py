"""Console rendering helpers for the artifact-up CLI."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .models import ResolvedUploadDescriptor, UploadResult, UploadStatus

console = Console()

RESPONSE_PREVIEW_LIMIT = 500


def _echo(message: str) -> None:
    console.print(message)


def _human_size(value: int) -> str:
    size = float(max(value, 0))
    units = ["B", "KB", "MB", "GB", "TB"]
    unit_idx = 0
    while size >= 1024.0 and unit_idx < len(units) - 1:
        size /= 1024.0
        unit_idx += 1
    if unit_idx == 0:
        return f"{int(size)} {units[unit_idx]}"
    return f"{size:.2f} {units[unit_idx]}"


def render_configuration_summary(config: Dict[str, Any]) -> None:
    """Render startup configuration summary."""
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold cyan", justify="right")
    table.add_column(style="white")

    for key, value in config.items():
        rendered = "-" if value is None else escape(str(value))
        table.add_row(key, rendered)

    panel = Panel(
        table,
        title="[bold green]artifact-up[/bold green]",
        subtitle="[dim]artifact uploader CLI[/dim]",
        border_style="blue",
    )
    console.print(panel)


class UploadResultDisplay:
    """Per-descriptor console output, fed by the orchestrator callback."""

    def __init__(self, response_limit: int = RESPONSE_PREVIEW_LIMIT):
        self._response_limit = response_limit
        self._results: List[UploadResult] = []

    def on_result(self, descriptor: ResolvedUploadDescriptor, endpoint: str, result: UploadResult) -> None:
        self._results.append(result)
        label = escape(descriptor.id or "(primary)")
        try:
            size = _human_size(descriptor.file.stat().st_size)
        except OSError:
            size = "?"

        _echo(f"[bold cyan]{label}[/bold cyan] {escape(descriptor.filename)} ({size})")
        _echo(f"  summary: {escape(descriptor.summary)}")
        _echo(f"  labels:  {escape(', '.join(descriptor.labels) or '-')}")
        _echo(f"  url:     {escape(endpoint)}")

        if result.status == UploadStatus.DRY_RUN:
            _echo("  [yellow]Dry run:[/yellow] not uploaded")
            return
        if result.status == UploadStatus.SKIPPED:
            _echo(f"  [yellow]Skipped:[/yellow] {escape(result.error or '')}")
            return
        if result.success:
            _echo("  [green]Uploaded[/green]")
        else:
            _echo(f"  [red]Failed:[/red] {escape(result.error or '')}")

        body = result.truncated_body(self._response_limit)
        if body:
            _echo(f"  [dim]response: {escape(body)}[/dim]")

    def on_finish(self, results: Optional[List[UploadResult]] = None) -> None:
        results = results if results is not None else self._results
        ok = sum(1 for result in results if result.success)
        failed = len(results) - ok
        colour = "green" if failed == 0 else "red"
        _echo(f"[{colour}]Done:[/{colour}] {ok} succeeded, {failed} failed")

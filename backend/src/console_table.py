import os
from datetime import timedelta

from rich.console import Console
from rich.table import Table

from hunter_analysis.events import EventType
from hunter_analysis.thresholds import Severity, Unit
from report import get_ability_name

# Don't print report to console if in lambda
SHOULD_PRINT = os.environ.get("AWS_EXECUTION_ENV") is None

console = Console(quiet=not SHOULD_PRINT)


class EventsTable:
    def __init__(self):
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Time", style="dim")
        table.add_column("Ability")
        table.add_column("Target")
        table.add_column("Notes")
        self._table = table

    def _format_timestamp(self, timestamp):
        time = timedelta(milliseconds=timestamp)
        minutes, seconds = divmod(time.seconds, 60)
        milliseconds = time.microseconds // 1000
        return f"{minutes:02}:{seconds:02}.{milliseconds:03}"

    def add_event(self, event):
        notes = []
        ability = get_ability_name(event.ability_id)

        if event.type == EventType.APPLY_DEBUFF:
            ability = f"[dim]{ability} applied[/dim]"
        elif event.type == EventType.REFRESH_DEBUFF:
            ability = f"[blue]{ability} refreshed[/blue]"
        elif event.type == EventType.REMOVE_DEBUFF:
            ability = f"[bold grey0 on red]{ability} drops[/bold grey0 on red]"

        if event.target_instance > 1:
            notes.append(f"instance {event.target_instance}")

        self._table.add_row(
            self._format_timestamp(event.timestamp),
            ability,
            str(event.target_id),
            ", ".join(notes),
        )

    @property
    def row_count(self):
        return self._table.row_count

    def print(self):
        console.print(self._table)


SEVERITY_COLORS = {
    Severity.MINOR: "yellow1",
    Severity.AVERAGE: "dark_orange",
    Severity.MAJOR: "red",
}


def print_suggestions(suggestions):
    for suggestion in suggestions:
        if not suggestion.is_triggered:
            continue

        color = SEVERITY_COLORS[suggestion.severity]
        threshold = suggestion.threshold
        if threshold.unit == Unit.PERCENTAGE:
            actual = f"{threshold.actual:.2%}"
        else:
            actual = f"{threshold.actual}"
        console.print(
            f"  [{color}]{suggestion.severity.name.lower()}[/{color}]"
            f" {suggestion.name}: {actual}"
        )

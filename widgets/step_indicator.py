# widgets/step_indicator.py
from __future__ import annotations
from textual.widgets import Static


def render_steps(current: int, total: int, label: str) -> str:
    """``current`` is zero-based; filled dots mark completed and active steps."""
    dots = " ".join(
        "[bold green]●[/bold green]" if i <= current else "[dim]○[/dim]"
        for i in range(total)
    )
    return f"{dots}   {label}"


class StepIndicator(Static):
    DEFAULT_CSS = """
    StepIndicator {
        margin: 0 2;
        height: 1;
    }
    """

    def show(self, current: int, total: int, label: str) -> None:
        self.update(render_steps(current, total, label))

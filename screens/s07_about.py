# screens/s07_about.py
from __future__ import annotations
import asyncio
import time
from textual.app import ComposeResult
from textual.widgets import Button, DataTable, Footer, Input, Static
from textual.containers import Horizontal, VerticalScroll
from widgets.kisan_header import KisanHeader
from screens.step_base import TranslatedScreen
from content import AboutContent, ContentService, fill_defaults, filter_milestones
from counter import TICK_INTERVAL, counter_values, format_count, is_finished
from logger import log

TESTIMONIAL_INTERVAL = 8.0
METRIC_KEYS = ("farmers", "villages", "programs", "states")


class AboutScreen(TranslatedScreen):
    """Impact counters, rotating testimonials and the searchable milestone list."""

    BINDINGS = [("escape", "go_back", "Back")]

    LABELS = {
        "impact_title": "our_impact",
        "testimonials_title": "testimonials",
        "milestones_title": "milestones",
        "inp_search": "search",
        "btn_back": "back",
    }

    def __init__(self) -> None:
        super().__init__()
        self.about: AboutContent = fill_defaults()
        self.testimonial_index = 0
        self._started_at = 0.0
        self._counter_timer = None

    def compose(self) -> ComposeResult:
        yield KisanHeader()
        with VerticalScroll(id="content"):
            yield Static("", id="impact_title", classes="title")
            yield Static("", id="counters")
            yield Static("", id="community")
            yield Static("", id="testimonials_title", classes="title")
            yield Static("", id="testimonial")
            yield Static("", id="milestones_title", classes="title")
            yield Input(id="inp_search")
            yield DataTable(id="milestone_table")
            yield Static("", id="err_msg")
        with Horizontal(id="nav_buttons"):
            yield Button("", id="btn_back", variant="default")
        yield Footer()

    async def on_mount(self) -> None:
        table = self.query_one("#milestone_table", DataTable)
        table.add_columns("Year", "Milestone", "")
        self._show_milestones()
        self._restart_counters()
        self.set_interval(TESTIMONIAL_INTERVAL, self._rotate_testimonial)
        asyncio.create_task(self._load())

    async def _load(self) -> None:
        about = await ContentService(self.app.api).load_about()
        if self._torn_down:
            return
        log.info("About: content loaded (defaults=%s)", about.from_defaults)
        self.about = about
        self.testimonial_index = 0
        self._show_milestones()
        self._show_testimonial()
        self._show_community()
        self._restart_counters()

    # -- Counters -------------------------------------------------------------------

    def _restart_counters(self) -> None:
        if self._counter_timer is not None:
            self._counter_timer.stop()
        self._started_at = time.monotonic()
        self._tick()
        self._counter_timer = self.set_interval(TICK_INTERVAL, self._tick)

    def _tick(self) -> None:
        if self._torn_down:
            return
        elapsed = time.monotonic() - self._started_at
        values = counter_values(self.about.impact_metrics.as_dict(), elapsed)
        self.query_one("#counters", Static).update(
            "   ".join(
                f"[bold green]{format_count(values[k])}[/bold green] {self.t(k)}"
                for k in METRIC_KEYS
            )
        )
        if is_finished(elapsed) and self._counter_timer is not None:
            self._counter_timer.stop()
            self._counter_timer = None

    # -- Testimonials ---------------------------------------------------------------

    def _rotate_testimonial(self) -> None:
        if not self.about.testimonials:
            return
        self.testimonial_index = (self.testimonial_index + 1) % len(self.about.testimonials)
        self._show_testimonial()

    def _show_testimonial(self) -> None:
        if self._torn_down or not self.about.testimonials:
            return
        item = self.about.testimonials[self.testimonial_index]
        loc = self.app.lang.localized
        lines = [
            f"[italic]“{loc(item.quote, item.hindi_quote)}”[/italic]",
            f"  - [bold]{loc(item.author, item.hindi_author)}[/bold], {loc(item.role, item.hindi_role)}",
        ]
        impact = loc(item.impact, item.hindi_impact)
        if impact:
            lines.append(f"  [green]{impact}[/green]")
        self.query_one("#testimonial", Static).update("\n".join(lines))

    def _show_community(self) -> None:
        stats = self.about.community_stats
        self.query_one("#community", Static).update(self.t(
            "community_stats",
            stories=format_count(stats.success_stories),
            satisfaction=stats.satisfaction_rate,
            income=stats.income_increase,
        ))

    # -- Milestones -----------------------------------------------------------------

    def _show_milestones(self) -> None:
        if self._torn_down:
            return
        query = self.query_one("#inp_search", Input).value
        table = self.query_one("#milestone_table", DataTable)
        table.clear()
        for m in filter_milestones(self.about.milestones, query):
            table.add_row(str(m.year), m.title, m.description)

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "inp_search":
            self._show_milestones()

    def apply_language(self) -> None:
        super().apply_language()
        self._show_testimonial()
        self._show_community()
        if self._counter_timer is None:
            self._tick()

    def action_go_back(self) -> None:
        self.app.pop_screen()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn_back":
            self.action_go_back()

# screens/s01_home.py
from textual.app import ComposeResult
from textual.widgets import Footer, Button, Static
from textual.containers import Horizontal, Vertical
from widgets.kisan_header import KisanHeader
from screens.step_base import TranslatedScreen
from logger import log


class HomeScreen(TranslatedScreen):
    """Landing screen: pick a flow, read about the movement, or switch language."""

    BINDINGS = [
        ("m", "start_member", "Member"),
        ("y", "start_youth", "Youth"),
        ("a", "about", "About"),
    ]

    LABELS = {
        "home_title": "app_title",
        "home_tagline": "join_community",
        "btn_member": "become_member",
        "btn_youth": "youth_program",
        "btn_about": "about_us",
        "btn_lang": "language_toggle",
        "btn_quit": "quit",
    }

    def compose(self) -> ComposeResult:
        yield KisanHeader()
        with Vertical(id="content"):
            yield Static("", id="home_title", classes="title")
            yield Static("", id="home_tagline")
            with Vertical(id="home_menu"):
                yield Button("", id="btn_member", variant="primary")
                yield Button("", id="btn_youth", variant="success")
                yield Button("", id="btn_about", variant="default")
            yield Static("", id="err_msg")
        with Horizontal(id="footer_buttons"):
            yield Button("", id="btn_lang", variant="default")
            yield Button("", id="btn_quit", variant="error")
        yield Footer()

    def action_start_member(self) -> None:
        log.info("Home: member registration chosen")
        self.app.start_flow("member")

    def action_start_youth(self) -> None:
        log.info("Home: youth programme application chosen")
        self.app.start_flow("youth")

    def action_about(self) -> None:
        from screens.s07_about import AboutScreen
        self.app.push_screen(AboutScreen())

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn_member":
            self.action_start_member()
        elif event.button.id == "btn_youth":
            self.action_start_youth()
        elif event.button.id == "btn_about":
            self.action_about()
        elif event.button.id == "btn_lang":
            self.app.action_toggle_language()
        elif event.button.id == "btn_quit":
            self.app.exit()

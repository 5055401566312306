# screens/s04_background.py
from __future__ import annotations
from textual.app import ComposeResult
from textual.widgets import Footer, Button, Static, Input, Label, TextArea
from textual.containers import Horizontal, VerticalScroll
from widgets.kisan_header import KisanHeader
from widgets.step_indicator import StepIndicator
from screens.step_base import StepScreen


class BackgroundScreen(StepScreen):
    """Youth programme only: age, education, farming experience and motivation."""

    LABELS = {
        "step_title": "background_info",
        "lbl_age": "age",
        "lbl_education": "education",
        "lbl_experience": "experience",
        "lbl_motivation": "motivation",
        "btn_back": "back",
        "btn_next": "next",
    }

    def compose(self) -> ComposeResult:
        yield KisanHeader()
        yield StepIndicator("")
        with VerticalScroll(id="form"):
            yield Static("", id="step_title", classes="title")
            yield Label("", id="lbl_age")
            yield Input(placeholder="18-35", max_length=3, id="inp_age")
            yield Static("", id="err_age", classes="field_err")
            yield Label("", id="lbl_education")
            yield Input(placeholder="12th Pass, Graduate, …", id="inp_education")
            yield Static("", id="err_education", classes="field_err")
            yield Label("", id="lbl_experience")
            yield TextArea(id="inp_experience")
            yield Static("", id="err_experience", classes="field_err")
            yield Label("", id="lbl_motivation")
            yield TextArea(id="inp_motivation")
            yield Static("", id="err_motivation", classes="field_err")
            yield Static("", id="err_msg")
        with Horizontal(id="nav_buttons"):
            yield Button("", id="btn_back", variant="default")
            yield Button("", id="btn_next", variant="primary")
        yield Footer()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn_back":
            self.action_go_back()
        elif event.button.id == "btn_next":
            self._next()

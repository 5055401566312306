# screens/s02_identity.py
from __future__ import annotations
from textual.app import ComposeResult
from textual.widgets import Footer, Button, Static, Input, Checkbox, Label, TextArea
from textual.containers import Horizontal, VerticalScroll
from widgets.kisan_header import KisanHeader
from widgets.step_indicator import StepIndicator
from screens.step_base import StepScreen


class IdentityScreen(StepScreen):
    """Name, place and mobile number; the member flow also asks for problem details."""

    LABELS = {
        "step_title": "personal_information",
        "lbl_name": "full_name",
        "lbl_village": "village",
        "lbl_city": "city",
        "lbl_phone": "mobile_number",
        "lbl_details": "problem_details",
        "inp_terms_accepted": "accept_terms",
        "btn_back": "back",
        "btn_next": "next",
    }

    def compose(self) -> ComposeResult:
        fields = self.step_def.fields
        yield KisanHeader()
        yield StepIndicator("")
        with VerticalScroll(id="form"):
            yield Static("", id="step_title", classes="title")
            yield Label("", id="lbl_name")
            yield Input(placeholder="Ramesh Patel", id="inp_name")
            yield Static("", id="err_name", classes="field_err")
            yield Label("", id="lbl_village")
            yield Input(id="inp_village")
            yield Static("", id="err_village", classes="field_err")
            yield Label("", id="lbl_city")
            yield Input(id="inp_city")
            yield Static("", id="err_city", classes="field_err")
            yield Label("", id="lbl_phone")
            yield Input(placeholder="9876543210", max_length=10, id="inp_phone")
            yield Static("", id="err_phone", classes="field_err")
            if "details" in fields:
                yield Label("", id="lbl_details")
                yield TextArea(id="inp_details")
                yield Static("", id="err_details", classes="field_err")
            yield Checkbox("", id="inp_terms_accepted", value=False)
            yield Static("", id="err_terms_accepted", classes="field_err")
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

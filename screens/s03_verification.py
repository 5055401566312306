# screens/s03_verification.py
from __future__ import annotations
import asyncio
from textual.app import ComposeResult
from textual.widgets import Footer, Button, Static, Input, Label
from textual.containers import Horizontal, Vertical
from widgets.kisan_header import KisanHeader
from widgets.step_indicator import StepIndicator
from screens.step_base import StepScreen
from errors import ApiError
from flows import CODE_RULE
from validators import check_field
from logger import log


class VerificationScreen(StepScreen):
    """Send a one-time code to the mobile number and confirm it with the server."""

    LABELS = {
        "step_title": "verify_mobile",
        "lbl_code": "verification_code",
        "btn_back": "back",
        "btn_resend": "resend_code",
        "btn_next": "next",
    }

    def __init__(self) -> None:
        super().__init__()
        self._busy = False

    def compose(self) -> ComposeResult:
        yield KisanHeader()
        yield StepIndicator("")
        with Vertical(id="form"):
            yield Static("", id="step_title", classes="title")
            yield Static("", id="code_status")
            yield Label("", id="lbl_code")
            yield Input(placeholder="123456", max_length=6, id="inp_code")
            yield Static("", id="err_code", classes="field_err")
            yield Static("", id="err_msg")
        with Horizontal(id="nav_buttons"):
            yield Button("", id="btn_back", variant="default")
            yield Button("", id="btn_resend", variant="default")
            yield Button("", id="btn_next", variant="primary")
        yield Footer()

    async def on_mount(self) -> None:
        asyncio.create_task(self._send_code())

    async def _send_code(self) -> None:
        phone = str(self.wizard.data.get("phone", ""))
        status = self.query_one("#code_status", Static)
        status.update(self.t("sending_code"))
        self.query_one("#btn_resend", Button).disabled = True
        try:
            await self.app.verifier.request(phone)
        except ApiError as e:
            log.error("Step verification: sending code failed: %s", e)
            if not self._torn_down:
                status.update(f"[red]{self.t('code_send_failed', error=e.message)}[/red]")
        else:
            if not self._torn_down:
                status.update(self.t("code_sent", phone=phone))
        finally:
            if not self._torn_down:
                self.query_one("#btn_resend", Button).disabled = False

    async def _confirm_and_advance(self) -> None:
        wizard = self.wizard
        code = self.query_one("#inp_code", Input).value.strip()
        msg = check_field(code, CODE_RULE, self.t)
        if msg:
            # Format problems never reach the server; the step validator reports them.
            self._next()
            return
        self._busy = True
        self.query_one("#btn_next", Button).disabled = True
        self._show_error("")
        try:
            await self.app.verifier.confirm(code)
        except ApiError as e:
            log.error("Step verification: confirming code failed: %s", e)
            self._show_error(self.t(e.message_key, message=e.message))
            return
        finally:
            self._busy = False
            if not self._torn_down:
                self.query_one("#btn_next", Button).disabled = False
        if self._torn_down or wizard is not self.wizard:
            return
        self._next()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn_back":
            self.action_go_back()
        elif event.button.id == "btn_resend":
            asyncio.create_task(self._send_code())
        elif event.button.id == "btn_next":
            if not self._busy:
                asyncio.create_task(self._confirm_and_advance())

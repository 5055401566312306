# screens/s06_complete.py
from __future__ import annotations
import asyncio
from textual.app import ComposeResult
from textual.widgets import Button, Footer, Static
from textual.containers import Vertical, Horizontal
from widgets.kisan_header import KisanHeader
from screens.step_base import TranslatedScreen
from receipts import ReceiptStatus
from state import SubmissionStatus
from logger import log

STATUS_KEYS = {
    SubmissionStatus.PENDING: "status_pending",
    SubmissionStatus.ACCEPTED: "status_accepted",
    SubmissionStatus.REJECTED: "status_rejected",
}


class CompleteScreen(TranslatedScreen):
    """
    Success view for a finished submission.

    Renders the reference id and status the server returned and drives the
    receipt job: one generation on first display, further attempts only
    through the retry button after a failure.
    """

    BINDINGS = [("escape", "return_home", "Home")]

    LABELS = {
        "verification_message": "verification_message",
        "btn_retry_receipt": "retry_receipt",
        "btn_home": "return_home",
    }

    def __init__(self) -> None:
        super().__init__()
        self.wizard = self.app.wizard
        self.flow = self.app.flow

    def compose(self) -> ComposeResult:
        yield KisanHeader()
        with Vertical(id="content"):
            yield Static("", id="success_title", classes="title")
            yield Static("", id="summary")
            yield Static("", id="verification_message")
            yield Static("", id="receipt_status")
            yield Static("", id="err_msg")
        with Horizontal(id="nav_buttons"):
            yield Button("", id="btn_retry_receipt", variant="warning")
            yield Button("", id="btn_home", variant="primary")
        yield Footer()

    async def on_mount(self) -> None:
        job = self.wizard.receipt
        if job is not None and job.status is ReceiptStatus.IDLE:
            asyncio.create_task(self._receipt(job.run))

    def apply_language(self) -> None:
        super().apply_language()
        result = self.wizard.result
        self.query_one("#success_title", Static).update(
            f"[bold green]✓ {self.t(self.flow.success_title)}[/bold green]"
        )
        self.query_one("#summary", Static).update(
            f"  {self.t('reference_id')} : [cyan]{result.reference_id}[/cyan]\n"
            f"  {self.t('status')}       : {self.t(STATUS_KEYS[result.status])}"
        )
        self._render_receipt()

    def _render_receipt(self) -> None:
        if self._torn_down:
            return
        job = self.wizard.receipt
        retry = self.query_one("#btn_retry_receipt", Button)
        label = self.query_one("#receipt_status", Static)
        if job is None:
            label.update("")
            retry.display = False
            return
        if job.status is ReceiptStatus.SUCCEEDED:
            label.update(f"[green]{self.t('receipt_succeeded', path=job.path)}[/green]")
        elif job.status is ReceiptStatus.FAILED:
            label.update(f"[red]{self.t('receipt_failed', error=job.error)}[/red]")
        elif job.status is ReceiptStatus.PENDING:
            label.update(f"[cyan]{self.t('receipt_pending')}[/cyan]")
        else:
            label.update(self.t("receipt_idle"))
        retry.display = job.status is ReceiptStatus.FAILED

    async def _receipt(self, action) -> None:
        self._render_receipt()
        await action()
        self._render_receipt()

    def action_return_home(self) -> None:
        log.info("Completion: returning home")
        self.app.return_home()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn_retry_receipt":
            job = self.wizard.receipt
            if job is not None and job.status is ReceiptStatus.FAILED:
                asyncio.create_task(self._receipt(job.retry))
        elif event.button.id == "btn_home":
            self.action_return_home()

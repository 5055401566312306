# screens/s05_upload.py
from __future__ import annotations
import asyncio
from textual.app import ComposeResult
from textual.widgets import Footer, Button, Static, Input, Label, Select, DataTable
from textual.containers import Horizontal, VerticalScroll
from widgets.kisan_header import KisanHeader
from widgets.step_indicator import StepIndicator
from screens.step_base import StepScreen
from errors import UploadError
from uploads import DOCUMENT_TYPES, NO_DOCUMENT, open_attachment
from logger import log


class UploadScreen(StepScreen):
    """
    Optional identity document, then final submission.

    Attachments are validated before they join the set; a rejected file
    leaves the set untouched. Skip discards every attachment and submits
    without a document.
    """

    LABELS = {
        "step_title": "document_upload",
        "upload_desc": "upload_desc",
        "lbl_path": "file_path",
        "lbl_document_type": "document_type",
        "btn_attach": "attach",
        "btn_remove": "remove",
        "btn_back": "back",
        "btn_skip": "skip",
        "btn_next": "submit",
    }

    def __init__(self) -> None:
        super().__init__()
        self._submitting = False

    def compose(self) -> ComposeResult:
        yield KisanHeader()
        yield StepIndicator("")
        with VerticalScroll(id="form"):
            yield Static("", id="step_title", classes="title")
            yield Static("", id="upload_desc")
            yield Label("", id="lbl_document_type")
            yield Select(
                options=[(d, d) for d in DOCUMENT_TYPES],
                id="inp_document_type",
                prompt="…",
            )
            yield Static("", id="err_document_type", classes="field_err")
            yield Label("", id="lbl_path")
            with Horizontal(id="attach_row"):
                yield Input(placeholder="~/Documents/aadhaar.pdf", id="inp_path")
                yield Button("", id="btn_attach", variant="default")
            yield DataTable(id="att_table", cursor_type="row")
            yield Button("", id="btn_remove", variant="warning")
            yield Static("", id="err_msg")
        with Horizontal(id="nav_buttons"):
            yield Button("", id="btn_back", variant="default")
            yield Button("", id="btn_skip", variant="default")
            yield Button("", id="btn_next", variant="success")
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#att_table", DataTable)
        table.add_columns("File", "Type", "Size")
        self._refresh_table()

    def _refresh_table(self) -> None:
        if self._torn_down:
            return
        table = self.query_one("#att_table", DataTable)
        table.clear()
        for att in self.wizard.attachments:
            table.add_row(att.name, att.mime_type, att.size_label, key=att.name)
        self.query_one("#btn_remove", Button).disabled = table.row_count == 0

    def _document_type(self) -> str:
        value = self.query_one("#inp_document_type", Select).value
        if value is Select.BLANK or value is None:
            return NO_DOCUMENT
        return str(value)

    # -- Attachments --------------------------------------------------------------

    def _attach_file(self) -> None:
        path = self.query_one("#inp_path", Input).value.strip()
        if not path:
            return
        try:
            att = open_attachment(path)
            self.wizard.attachments.add(att)
        except UploadError as e:
            log.warning("Upload step: rejected %s", e)
            self._show_error(self.t(e.message_key))
            return
        except OSError as e:
            log.warning("Upload step: cannot open %s: %s", path, e)
            self._show_error(self.t("err_file_missing", path=path))
            return
        self._show_error("")
        self.query_one("#inp_path", Input).value = ""
        self._refresh_table()

    def _remove_selected(self) -> None:
        names = self.wizard.attachments.names
        table = self.query_one("#att_table", DataTable)
        if not names or table.cursor_row is None or table.cursor_row >= len(names):
            return
        self.wizard.attachments.remove(names[table.cursor_row])
        self._refresh_table()

    # -- Submission ---------------------------------------------------------------

    def _submit(self) -> None:
        if self._submitting or self.wizard.submitting:
            return
        step_input = {
            "attachments": self.wizard.attachments.names,
            "document_type": self._document_type(),
        }
        if not self.wizard.advance(step_input):
            self._render_errors()
            return
        self._start_submission()

    def _skip(self) -> None:
        if self._submitting or self.wizard.submitting:
            return
        if self.wizard.skip():
            self._refresh_table()
            self._start_submission()

    def _start_submission(self) -> None:
        self._submitting = True
        self._set_busy(True)
        asyncio.create_task(self._run_submission())

    def _set_busy(self, busy: bool) -> None:
        if self._torn_down:
            return
        for btn_id in ("btn_back", "btn_skip", "btn_next", "btn_attach", "btn_remove"):
            self.query_one(f"#{btn_id}", Button).disabled = busy
        self.query_one("#btn_next", Button).label = self.t("submitting" if busy else "submit")
        if not busy:
            self._refresh_table()

    async def _run_submission(self) -> None:
        wizard = self.wizard
        self._show_error("")
        try:
            result = await wizard.submit_final()
        except Exception as e:
            log.error("Upload step: submission crashed: %s", e)
            if not (self._torn_down or wizard.torn_down):
                self._set_busy(False)
                self._show_error(self.t("err_submission", message=str(e) or type(e).__name__))
            return
        finally:
            self._submitting = False
        if self._torn_down or wizard.torn_down:
            return
        if result is not None:
            log.info("Upload step: submission accepted as %s", result.reference_id)
            self.app.show_completion()
            return
        self._set_busy(False)
        err = wizard.last_error
        if err is None:
            return
        self._show_error(self.t(err.message_key, message=err.message))
        self._render_errors()

    def action_go_back(self) -> None:
        if self._submitting:
            return
        super().action_go_back()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn_back":
            self.action_go_back()
        elif event.button.id == "btn_attach":
            self._attach_file()
        elif event.button.id == "btn_remove":
            self._remove_selected()
        elif event.button.id == "btn_skip":
            self._skip()
        elif event.button.id == "btn_next":
            self._submit()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "inp_path":
            self._attach_file()

    def on_select_changed(self, event: Select.Changed) -> None:
        self._field_edited(event.select.id, event.value)

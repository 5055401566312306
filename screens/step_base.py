# screens/step_base.py
from __future__ import annotations
from typing import Any, Dict, Mapping
from textual.screen import Screen
from textual.widgets import Button, Checkbox, Input, Label, Static, TextArea
from widgets.step_indicator import StepIndicator
from logger import log


class TranslatedScreen(Screen):
    """
    Screen whose visible strings come from the app's LanguageContext.

    ``LABELS`` maps widget ids to translation keys; ``apply_language`` is
    called on mount and again by the app whenever the language changes.
    """

    LABELS: Dict[str, str] = {}

    def __init__(self) -> None:
        super().__init__()
        self._torn_down = False
        self.last_error_message = ""

    def t(self, key: str, **params) -> str:
        return self.app.lang.t(key, **params)

    def on_mount(self) -> None:
        self.apply_language()

    def on_unmount(self) -> None:
        self._torn_down = True

    def apply_language(self) -> None:
        for widget_id, key in self.LABELS.items():
            for widget in self.query(f"#{widget_id}"):
                if isinstance(widget, (Button, Checkbox)):
                    widget.label = self.t(key)
                elif isinstance(widget, Input):
                    widget.placeholder = self.t(key)
                elif isinstance(widget, (Static, Label)):
                    widget.update(self.t(key))

    def _show_error(self, msg: str) -> None:
        self.last_error_message = msg
        if self._torn_down:
            return
        if msg:
            self.query_one("#err_msg", Static).update(f"[red]{msg}[/red]")
        else:
            self.query_one("#err_msg", Static).update("")


class StepScreen(TranslatedScreen):
    """A screen bound to one step of the active WizardController."""

    BINDINGS = [
        ("escape", "go_back", "Back"),
    ]

    @property
    def wizard(self):
        return self.app.wizard

    def __init__(self) -> None:
        super().__init__()
        self.step_def = self.wizard.current_step
        self.step_index = self.wizard.index
        self.step_count = len(self.wizard.state.steps)
        self.field_messages: Dict[str, str] = {}

    # Textual also runs TranslatedScreen.on_mount, which applies the language.
    def on_mount(self) -> None:
        self._prefill(self.wizard.data)
        self._render_errors()

    # Screens reached by going back are resumed, not remounted. Rejections
    # from the final submission may have left errors on their fields.
    def on_screen_resume(self) -> None:
        self._render_errors()

    def apply_language(self) -> None:
        super().apply_language()
        label = self.t("step_of", current=self.step_index + 1, total=self.step_count)
        if self.app.flow is not None:
            label = f"{self.t(self.app.flow.title)}  {label}"
        for indicator in self.query(StepIndicator):
            indicator.show(self.step_index, self.step_count, label)

    # -- Field plumbing -----------------------------------------------------------

    def _collect(self) -> Dict[str, Any]:
        """Read every field of the current step from its input widget."""
        data: Dict[str, Any] = {}
        for name in self.step_def.fields:
            for widget in self.query(f"#inp_{name}"):
                if isinstance(widget, Checkbox):
                    data[name] = widget.value
                elif isinstance(widget, TextArea):
                    data[name] = widget.text.strip()
                elif isinstance(widget, Input):
                    data[name] = widget.value.strip()
        return data

    def _prefill(self, data: Mapping[str, Any]) -> None:
        for name in self.step_def.fields:
            value = data.get(name)
            if value is None:
                continue
            for widget in self.query(f"#inp_{name}"):
                if isinstance(widget, Checkbox):
                    widget.value = bool(value)
                elif isinstance(widget, TextArea):
                    widget.text = str(value)
                elif isinstance(widget, Input):
                    widget.value = str(value)

    def _render_errors(self) -> None:
        if self._torn_down or self.wizard is None:
            return
        errors = self.wizard.errors
        for name in self.step_def.fields:
            msg = errors.get(name, "")
            self.field_messages[name] = msg
            for widget in self.query(f"#err_{name}"):
                widget.update(f"[red]{msg}[/red]" if msg else "")

    def _field_edited(self, widget_id: str, value: Any) -> None:
        if not widget_id or not widget_id.startswith("inp_") or self.wizard is None:
            return
        name = widget_id[len("inp_"):]
        if name in self.wizard.errors:
            self.wizard.set_field(name, value)
            self._render_errors()

    def on_input_changed(self, event: Input.Changed) -> None:
        self._field_edited(event.input.id, event.value)

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        self._field_edited(event.text_area.id, event.text_area.text)

    def on_checkbox_changed(self, event: Checkbox.Changed) -> None:
        self._field_edited(event.checkbox.id, event.value)

    # -- Navigation ---------------------------------------------------------------

    def _next(self) -> None:
        wizard = self.wizard
        step = wizard.current_step.id
        if wizard.advance(self._collect()):
            log.info("Step %s: accepted", step)
            self.app.show_current_step()
        else:
            self._render_errors()

    def action_go_back(self) -> None:
        if self.wizard is None or self.wizard.index == 0:
            self.app.return_home()
            return
        self.wizard.retreat()
        self.app.pop_screen()

"""
Linear wizard controller shared by the registration and application flows.

The controller is the only writer of its WizardState. Screens hand it the
values they collected and render whatever it reports back.
"""
from __future__ import annotations
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Mapping, Optional, Sequence
from errors import FlowStateError, ApiError, SubmissionRejected
from receipts import ReceiptGenerator, ReceiptJob
from state import CreatedResource, StepDefinition, SubmissionResult, WizardState
from uploads import AttachmentSet, UploadAttachment
from logger import log

Submitter = Callable[
    [Mapping[str, Any], Sequence[UploadAttachment]], Awaitable[CreatedResource]
]


class WizardController:

    def __init__(
        self,
        steps: List[StepDefinition],
        submitter: Submitter,
        *,
        name: str = "wizard",
        initial_data: Optional[Mapping[str, Any]] = None,
        receipt_generator: Optional[ReceiptGenerator] = None,
        receipts_dir: Optional[Path] = None,
        attachments: Optional[AttachmentSet] = None,
    ) -> None:
        self.name = name
        self.state = WizardState(steps=steps, aggregate_data=dict(initial_data or {}))
        self.attachments = attachments if attachments is not None else AttachmentSet()
        self._submitter = submitter
        self._receipt_generator = receipt_generator
        self._receipts_dir = receipts_dir or Path(".")
        self.submitting = False
        self.result: Optional[SubmissionResult] = None
        self.receipt: Optional[ReceiptJob] = None
        self.last_error: Optional[ApiError] = None
        self.torn_down = False

    # -- Read-only views ----------------------------------------------------------

    @property
    def current_step(self) -> StepDefinition:
        return self.state.current_step

    @property
    def index(self) -> int:
        return self.state.current_step_index

    @property
    def data(self) -> Mapping[str, Any]:
        return self.state.aggregate_data

    @property
    def errors(self) -> Mapping[str, str]:
        return self.state.errors

    @property
    def is_complete(self) -> bool:
        return self.result is not None

    # -- Transitions ----------------------------------------------------------

    def set_field(self, name: str, value: Any) -> None:
        """A field was edited on the current step: its error no longer applies."""
        if name in self.state.errors:
            del self.state.errors[name]

    def advance(self, step_input: Mapping[str, Any]) -> bool:
        step = self.current_step
        errors = step.validate(step_input)
        if errors:
            self.state.errors = dict(errors)
            log.info("%s: step %s rejected - %s", self.name, step.id, sorted(errors))
            return False
        self.state.aggregate_data.update(step_input)
        self.state.errors = {}
        self._move_forward()
        return True

    def retreat(self) -> None:
        if self.state.current_step_index > 0:
            self.state.current_step_index -= 1
            log.info("%s: back to step %s", self.name, self.current_step.id)

    def skip(self) -> bool:
        step = self.current_step
        if not step.optional:
            log.warning("%s: skip refused on required step %s", self.name, step.id)
            return False
        if step.accepts_attachments:
            self.attachments.clear()
        self.state.errors = {}
        log.info("%s: step %s skipped", self.name, step.id)
        self._move_forward()
        return True

    def _move_forward(self) -> None:
        if self.state.current_step_index < self.state.last_index:
            self.state.current_step_index += 1
            log.info("%s: advanced to step %s", self.name, self.current_step.id)

    # -- Submission -------------------------------------------------------------

    async def submit_final(self) -> Optional[SubmissionResult]:
        if self.result is not None:
            return self.result
        if not self.state.is_last_step:
            raise FlowStateError(
                f"submit_final called on step {self.current_step.id}, not the last step"
            )
        if self.submitting:
            log.warning("%s: duplicate submission suppressed", self.name)
            return None

        self.submitting = True
        self.last_error = None
        snapshot = dict(self.state.aggregate_data)
        try:
            created = await self._submitter(snapshot, list(self.attachments))
        except ApiError as e:
            self.last_error = e
            if isinstance(e, SubmissionRejected) and e.field_errors:
                self.state.errors = dict(e.field_errors)
            log.error("%s: submission failed (%s): %s", self.name, type(e).__name__, e)
            return None
        finally:
            self.submitting = False

        self.result = SubmissionResult.create(created, snapshot)
        log.info(
            "%s: submitted - reference=%s status=%s",
            self.name, self.result.reference_id, self.result.status.value,
        )
        if self._receipt_generator is not None:
            self.receipt = ReceiptJob(
                self.result, self._receipt_generator, self._receipts_dir
            )
        return self.result

    def teardown(self) -> None:
        """Release attachment handles; later completions must not touch the UI."""
        self.attachments.clear()
        self.torn_down = True
        log.info("%s: torn down", self.name)

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Optional, Tuple

Validator = Callable[[Mapping[str, Any]], Dict[str, str]]


def _no_errors(data: Mapping[str, Any]) -> Dict[str, str]:
    return {}


@dataclass(frozen=True)
class StepDefinition:
    id: str
    title: str = ""                    # translation key
    fields: Tuple[str, ...] = ()
    required_fields: FrozenSet[str] = frozenset()
    optional: bool = False
    validate: Validator = _no_errors
    accepts_attachments: bool = False


@dataclass
class WizardState:
    steps: List[StepDefinition]
    current_step_index: int = 0
    aggregate_data: Dict[str, Any] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.steps:
            raise ValueError("A wizard needs at least one step")
        self.steps = list(self.steps)

    @property
    def current_step(self) -> StepDefinition:
        return self.steps[self.current_step_index]

    @property
    def last_index(self) -> int:
        return len(self.steps) - 1

    @property
    def is_last_step(self) -> bool:
        return self.current_step_index == self.last_index


class SubmissionStatus(str, Enum):
    PENDING = "Pending"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"

    @classmethod
    def from_backend(cls, raw: Optional[str]) -> "SubmissionStatus":
        """Map the backend's application status onto the three client states."""
        value = (raw or "").strip().lower()
        if value in ("approved", "accepted"):
            return cls.ACCEPTED
        if value == "rejected":
            return cls.REJECTED
        return cls.PENDING   # "Pending", "Under Review", unknown


@dataclass(frozen=True)
class CreatedResource:
    """What the submission collaborator returns on success."""
    reference_id: str
    status: SubmissionStatus = SubmissionStatus.PENDING
    message: str = ""
    document_ref: str = ""    # stored-object reference of the uploaded document


@dataclass(frozen=True)
class SubmissionResult:
    reference_id: str
    status: SubmissionStatus
    submitted_fields: Mapping[str, Any]
    document_ref: str = ""

    @classmethod
    def create(
        cls, created: CreatedResource, fields: Mapping[str, Any]
    ) -> "SubmissionResult":
        return cls(
            reference_id=created.reference_id,
            status=created.status,
            submitted_fields=MappingProxyType(dict(fields)),
            document_ref=created.document_ref,
        )

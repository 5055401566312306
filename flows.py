from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping
from state import StepDefinition
from uploads import NO_DOCUMENT
from validators import (
    CODE_PATTERN, PHONE_PATTERN, FieldRule, Translator, english,
    check_field, check_fields, is_blank,
)
from verification import CodeVerifier

GENERAL_MEMBER = "General Member"
YOUTH_PROGRAM = "Kisan Youth Leadership Program"

IDENTITY_RULES: Dict[str, FieldRule] = {
    "name": FieldRule("full_name", required=True, min_len=2),
    "village": FieldRule("village", required=True),
    "city": FieldRule("city", required=True),
    "phone": FieldRule("mobile_number", required=True, pattern=PHONE_PATTERN,
                       message="err_phone"),
    "details": FieldRule("problem_details"),
    "terms_accepted": FieldRule("accept_terms", required=True, message="err_terms"),
}

BACKGROUND_RULES: Dict[str, FieldRule] = {
    "age": FieldRule("age", required=True, integer=True, min_value=18, max_value=35),
    "education": FieldRule("education", required=True),
    "experience": FieldRule("experience", required=True, min_len=50),
    "motivation": FieldRule("motivation", required=True, min_len=100),
}

CODE_RULE = FieldRule("verification_code", required=True, pattern=CODE_PATTERN,
                      message="err_code_format")


def identity_step(
    fields: Iterable[str] = ("name", "village", "city", "phone", "terms_accepted"),
    t: Translator = english,
) -> StepDefinition:
    rules = {f: IDENTITY_RULES[f] for f in fields}

    def validate(data: Mapping[str, Any]) -> Dict[str, str]:
        return check_fields(data, rules, t)

    return StepDefinition(
        id="identity",
        title="personal_information",
        fields=tuple(rules),
        required_fields=frozenset(f for f, r in rules.items() if r.required),
        validate=validate,
    )


def verification_step(verifier: CodeVerifier, t: Translator = english) -> StepDefinition:
    def validate(data: Mapping[str, Any]) -> Dict[str, str]:
        code = data.get("code")
        msg = check_field(code, CODE_RULE, t)
        if msg:
            return {"code": msg}
        if not verifier.check(str(code).strip()):
            return {"code": t("err_code_invalid")}
        return {}

    return StepDefinition(
        id="verification",
        title="verify_mobile",
        fields=("code",),
        required_fields=frozenset({"code"}),
        validate=validate,
    )


def background_step(t: Translator = english) -> StepDefinition:
    def validate(data: Mapping[str, Any]) -> Dict[str, str]:
        return check_fields(data, BACKGROUND_RULES, t)

    return StepDefinition(
        id="background",
        title="background_info",
        fields=tuple(BACKGROUND_RULES),
        required_fields=frozenset(BACKGROUND_RULES),
        validate=validate,
    )


def upload_step(t: Translator = english) -> StepDefinition:
    """Optional document step; a document type is needed only with attachments."""
    def validate(data: Mapping[str, Any]) -> Dict[str, str]:
        names = data.get("attachments") or []
        doc_type = data.get("document_type")
        if names and (is_blank(doc_type) or doc_type == NO_DOCUMENT):
            return {"document_type": t("err_document_type")}
        return {}

    return StepDefinition(
        id="upload",
        title="document_upload",
        fields=("document_type",),
        optional=True,
        validate=validate,
        accepts_attachments=True,
    )


@dataclass(frozen=True)
class Flow:
    key: str
    membership_type: str
    title: str          # translation key
    success_title: str  # translation key

    def build_steps(self, verifier: CodeVerifier, t: Translator = english) -> List[StepDefinition]:
        if self.key == "youth":
            return [
                identity_step(t=t),
                verification_step(verifier, t),
                background_step(t),
                upload_step(t),
            ]
        return [
            identity_step(("name", "village", "city", "phone", "details", "terms_accepted"), t),
            verification_step(verifier, t),
            upload_step(t),
        ]

    def initial_data(self) -> Dict[str, Any]:
        return {"membership_type": self.membership_type, "document_type": NO_DOCUMENT}


FLOWS: Dict[str, Flow] = {
    "member": Flow("member", GENERAL_MEMBER, "become_member", "registration_successful"),
    "youth": Flow("youth", YOUTH_PROGRAM, "youth_program", "application_submitted"),
}

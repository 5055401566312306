from __future__ import annotations
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Tuple
from i18n import translate

Translator = Callable[..., str]

PHONE_PATTERN = r"^[6-9]\d{9}$"
CODE_PATTERN = r"^\d{6}$"


def english(key: str, **params) -> str:
    return translate(key, "en", **params)


def is_blank(value: Any) -> bool:
    """None, empty and whitespace-only strings, False and empty collections are blank."""
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False

def validate_required(value: Any, label: str, t: Translator = english) -> Tuple[bool, str]:
    if is_blank(value):
        return False, t("err_required", label=label)
    return True, ""

def validate_length(
    value: str, label: str, min_len: Optional[int] = None,
    max_len: Optional[int] = None, t: Translator = english,
) -> Tuple[bool, str]:
    length = len(str(value).strip())
    if min_len is not None and length < min_len:
        return False, t("err_min_length", label=label, min=min_len)
    if max_len is not None and length > max_len:
        return False, t("err_max_length", label=label, max=max_len)
    return True, ""

def validate_range(
    value: Any, label: str, low: Optional[float] = None,
    high: Optional[float] = None, t: Translator = english,
) -> Tuple[bool, str]:
    try:
        number = float(str(value).strip())
    except ValueError:
        return False, t("err_number", label=label)
    if not math.isfinite(number):
        return False, t("err_number", label=label)
    if (low is not None and number < low) or (high is not None and number > high):
        return False, t("err_range", label=label, min=_fmt(low), max=_fmt(high))
    return True, ""

def validate_integer(value: Any, label: str, t: Translator = english) -> Tuple[bool, str]:
    if re.fullmatch(r"[+-]?\d+", str(value).strip()) is None:
        return False, t("err_integer", label=label)
    return True, ""

def validate_pattern(value: Any, pattern: str, message: str) -> Tuple[bool, str]:
    if re.fullmatch(pattern, str(value).strip()) is None:
        return False, message
    return True, ""

def validate_phone(value: str, t: Translator = english) -> Tuple[bool, str]:
    return validate_pattern(value, PHONE_PATTERN, t("err_phone"))

def _fmt(n: Optional[float]) -> str:
    if n is None:
        return ""
    return str(int(n)) if float(n).is_integer() else str(n)


@dataclass(frozen=True)
class FieldRule:
    """Declared constraints for one field. ``label`` is a translation key."""
    label: str
    required: bool = False
    min_len: Optional[int] = None
    max_len: Optional[int] = None
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    integer: bool = False
    pattern: Optional[str] = None
    message: Optional[str] = None   # translation key used for pattern mismatches


def check_field(value: Any, rule: FieldRule, t: Translator = english) -> Optional[str]:
    """Return the first failing constraint's message, or None."""
    label = t(rule.label)
    if is_blank(value):
        if not rule.required:
            return None
        # unticked checkboxes carry their own message
        if isinstance(value, bool) and rule.message:
            return t(rule.message)
        _, msg = validate_required(value, label, t)
        return msg

    if rule.min_len is not None or rule.max_len is not None:
        ok, msg = validate_length(value, label, rule.min_len, rule.max_len, t)
        if not ok:
            return msg
    if rule.integer:
        ok, msg = validate_integer(value, label, t)
        if not ok:
            return msg
    if rule.min_value is not None or rule.max_value is not None:
        ok, msg = validate_range(value, label, rule.min_value, rule.max_value, t)
        if not ok:
            return msg
    if rule.pattern is not None:
        message = t(rule.message) if rule.message else t("err_pattern", label=label)
        ok, msg = validate_pattern(value, rule.pattern, message)
        if not ok:
            return msg
    return None


def check_fields(
    data: Mapping[str, Any], rules: Mapping[str, FieldRule], t: Translator = english,
) -> Dict[str, str]:
    """Validate every ruled field of ``data``; returns {field: message} for failures."""
    errors: Dict[str, str] = {}
    for name, rule in rules.items():
        msg = check_field(data.get(name), rule, t)
        if msg:
            errors[name] = msg
    return errors

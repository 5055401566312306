import pytest
import sys, os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from validators import (
    FieldRule, check_field, check_fields, is_blank,
    validate_integer, validate_length, validate_pattern, validate_phone, validate_range,
    validate_required,
)
from flows import BACKGROUND_RULES, CODE_RULE, IDENTITY_RULES
from i18n import translate

def test_blank_values():
    assert is_blank(None)
    assert is_blank("   ")
    assert is_blank(False)
    assert is_blank([])
    assert not is_blank(0)
    assert not is_blank("x")

def test_required_fails_on_whitespace():
    ok, msg = validate_required("  ", "Village")
    assert not ok
    assert msg == "Village is required"

def test_length_bounds():
    ok, msg = validate_length("A", "Full Name", min_len=2)
    assert not ok and "at least 2" in msg
    ok, _ = validate_length("Ravi", "Full Name", min_len=2, max_len=10)
    assert ok

def test_range_rejects_non_numbers():
    ok, msg = validate_range("abc", "Age", 18, 35)
    assert not ok
    assert "number" in msg

def test_range_bounds_inclusive():
    assert validate_range("18", "Age", 18, 35)[0]
    assert validate_range("35", "Age", 18, 35)[0]
    ok, msg = validate_range("36", "Age", 18, 35)
    assert not ok
    assert msg == "Age must be between 18 and 35"

@pytest.mark.parametrize("phone", ["9876543210", "6000000000"])
def test_valid_phone(phone):
    ok, msg = validate_phone(phone)
    assert ok and msg == ""

@pytest.mark.parametrize("phone", ["5876543210", "98765", "98765432101", "98765abcde"])
def test_invalid_phone(phone):
    ok, msg = validate_phone(phone)
    assert not ok
    assert "10-digit" in msg

def test_pattern_uses_given_message():
    ok, msg = validate_pattern("12a456", r"^\d{6}$", "bad code")
    assert (ok, msg) == (False, "bad code")

def test_optional_field_blank_is_fine():
    assert check_field("", FieldRule("problem_details")) is None

def test_unticked_terms_uses_own_message():
    msg = check_field(False, IDENTITY_RULES["terms_accepted"])
    assert msg == "You must accept the terms and conditions"

def test_first_failing_constraint_wins():
    rule = FieldRule("experience", required=True, min_len=50)
    assert check_field("", rule) == "Agricultural Experience is required"
    assert "at least 50" in check_field("short", rule)

def test_code_rule():
    assert check_field("123456", CODE_RULE) is None
    assert check_field("12345", CODE_RULE) == "Enter the 6-digit code"

def test_check_fields_reports_every_failure():
    errors = check_fields(
        {"age": "17", "education": "", "experience": "x" * 50, "motivation": "too short"},
        BACKGROUND_RULES,
    )
    assert set(errors) == {"age", "education", "motivation"}

def test_messages_follow_translator():
    hindi = lambda key, **params: translate(key, "hi", **params)
    msg = check_field("", IDENTITY_RULES["village"], hindi)
    assert msg == translate("err_required", "hi", label=translate("village", "hi"))
    assert msg != check_field("", IDENTITY_RULES["village"])

@pytest.mark.parametrize("value", ["nan", "inf", "-inf"])
def test_range_rejects_non_finite(value):
    ok, msg = validate_range(value, "Age", 18, 35)
    assert not ok
    assert "number" in msg

def test_integer_check():
    assert validate_integer("24", "Age")[0]
    assert validate_integer(" 24 ", "Age")[0]
    ok, msg = validate_integer("20.5", "Age")
    assert not ok
    assert msg == "Age must be a whole number"

@pytest.mark.parametrize("age", ["20.5", "2e1", "nan", "24 years"])
def test_background_age_must_be_whole_number(age):
    errors = check_fields(
        {"age": age, "education": "Graduate", "experience": "x" * 50, "motivation": "y" * 100},
        BACKGROUND_RULES,
    )
    assert set(errors) == {"age"}

def test_background_age_in_range_passes():
    errors = check_fields(
        {"age": "18", "education": "Graduate", "experience": "x" * 50, "motivation": "y" * 100},
        BACKGROUND_RULES,
    )
    assert errors == {}

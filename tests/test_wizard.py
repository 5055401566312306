"""
Controller tests: step navigation, validation gating, submission and
receipt bookkeeping. No UI involved.
"""
from __future__ import annotations

import asyncio

import pytest

from errors import FlowStateError, SubmissionRejected, TransportFailure
from flows import FLOWS, identity_step, upload_step, verification_step
from receipts import ReceiptStatus
from state import StepDefinition, SubmissionStatus
from uploads import UploadAttachment
from verification import RemoteCodeVerifier
from wizard import WizardController


def _require(*names):
    def validate(data):
        return {n: f"{n} is required" for n in names if not data.get(n)}
    return validate


def _simple_steps():
    return [
        StepDefinition("a", fields=("x",), required_fields=frozenset({"x"}), validate=_require("x")),
        StepDefinition("b", fields=("y",), required_fields=frozenset({"y"}), validate=_require("y")),
        upload_step(),
    ]


def _controller(api, steps=None, **kwargs):
    return WizardController(
        steps or _simple_steps(),
        api.submit_application,
        receipt_generator=api.generate_receipt,
        **kwargs,
    )


IDENTITY = {
    "name": "Ravi Kumar",
    "village": "Rampur",
    "city": "Lucknow",
    "phone": "9876543210",
    "terms_accepted": True,
}

BACKGROUND = {
    "age": "24",
    "education": "Graduate",
    "experience": "I have grown wheat and mustard on our family farm for six seasons now.",
    "motivation": (
        "I want to help the young farmers of my district adopt water-saving irrigation "
        "and reach better markets for their produce through cooperatives."
    ),
}


# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------

def test_advance_rejects_invalid_input(fake_api):
    wiz = _controller(fake_api)
    assert wiz.advance({"x": ""}) is False
    assert wiz.index == 0
    assert wiz.errors == {"x": "x is required"}
    assert "x" not in wiz.data


def test_advance_merges_and_moves(fake_api):
    wiz = _controller(fake_api)
    assert wiz.advance({"x": "1"})
    assert wiz.index == 1
    assert wiz.data["x"] == "1"
    assert wiz.errors == {}


def test_set_field_clears_only_that_error(fake_api):
    steps = [StepDefinition("a", validate=_require("x", "z")), upload_step()]
    wiz = _controller(fake_api, steps)
    wiz.advance({})
    assert set(wiz.errors) == {"x", "z"}
    wiz.set_field("x", "typed")
    assert set(wiz.errors) == {"z"}


def test_retreat_keeps_data_and_floors_at_zero(fake_api):
    wiz = _controller(fake_api)
    wiz.advance({"x": "1"})
    wiz.retreat()
    assert wiz.index == 0
    assert wiz.data["x"] == "1"
    wiz.retreat()
    assert wiz.index == 0


def test_advance_on_last_step_stays_put(fake_api):
    wiz = _controller(fake_api)
    wiz.advance({"x": "1"})
    wiz.advance({"y": "2"})
    assert wiz.state.is_last_step
    assert wiz.advance({"document_type": "Not Provided"})
    assert wiz.index == wiz.state.last_index


def test_skip_refused_on_required_step(fake_api):
    wiz = _controller(fake_api)
    assert wiz.skip() is False
    assert wiz.index == 0


def test_skip_upload_discards_attachments(fake_api, pdf_file):
    wiz = _controller(fake_api)
    wiz.advance({"x": "1"})
    wiz.advance({"y": "2"})
    handle = open(pdf_file, "rb")
    wiz.attachments.add(UploadAttachment("aadhaar.pdf", 2057, "application/pdf", handle))
    assert wiz.skip()
    assert len(wiz.attachments) == 0
    assert handle.closed


def test_index_stays_in_bounds_under_any_sequence(fake_api):
    wiz = _controller(fake_api)
    moves = ["advance", "retreat", "advance", "advance", "advance", "skip", "retreat",
             "retreat", "retreat", "skip", "advance"]
    for move in moves:
        if move == "advance":
            wiz.advance({"x": "1", "y": "2"})
        elif move == "retreat":
            wiz.retreat()
        else:
            wiz.skip()
        assert 0 <= wiz.index <= wiz.state.last_index


def test_upload_step_needs_document_type_with_attachments():
    step = upload_step()
    assert step.validate({"attachments": []}) == {}
    errors = step.validate({"attachments": ["pan.png"], "document_type": "Not Provided"})
    assert "document_type" in errors
    assert step.validate({"attachments": ["pan.png"], "document_type": "PAN"}) == {}


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_submit_before_last_step_raises(fake_api):
    wiz = _controller(fake_api)
    with pytest.raises(FlowStateError):
        await wiz.submit_final()
    assert fake_api.submissions == []


@pytest.mark.asyncio
async def test_submit_creates_result_and_receipt_job(fake_api, tmp_path):
    wiz = _controller(fake_api, receipts_dir=tmp_path)
    wiz.advance({"x": "1"})
    wiz.advance({"y": "2"})
    result = await wiz.submit_final()
    assert result.reference_id == "KM-2024-0001"
    assert result.submitted_fields["x"] == "1"
    assert wiz.is_complete
    assert wiz.receipt is not None
    assert wiz.receipt.status is ReceiptStatus.IDLE
    assert fake_api.receipt_calls == 0


@pytest.mark.asyncio
async def test_submit_twice_returns_same_result(fake_api):
    wiz = _controller(fake_api)
    wiz.advance({"x": "1"})
    wiz.advance({"y": "2"})
    first = await wiz.submit_final()
    second = await wiz.submit_final()
    assert first is second
    assert len(fake_api.submissions) == 1


@pytest.mark.asyncio
async def test_concurrent_submit_is_suppressed(fake_api):
    fake_api.submit_gate = asyncio.Event()
    wiz = _controller(fake_api)
    wiz.advance({"x": "1"})
    wiz.advance({"y": "2"})
    task = asyncio.create_task(wiz.submit_final())
    await asyncio.sleep(0)
    assert wiz.submitting
    assert await wiz.submit_final() is None
    fake_api.submit_gate.set()
    assert (await task).reference_id == "KM-2024-0001"
    assert len(fake_api.submissions) == 1


@pytest.mark.asyncio
async def test_network_failure_keeps_data_and_allows_retry(fake_api):
    fake_api.submit_error = TransportFailure("timed out")
    wiz = _controller(fake_api)
    wiz.advance({"x": "1"})
    wiz.advance({"y": "2"})
    assert await wiz.submit_final() is None
    assert isinstance(wiz.last_error, TransportFailure)
    assert not wiz.submitting
    assert wiz.data["y"] == "2"

    fake_api.submit_error = None
    result = await wiz.submit_final()
    assert result is not None
    assert wiz.last_error is None
    assert len(fake_api.submissions) == 2


@pytest.mark.asyncio
async def test_rejection_copies_field_errors(fake_api):
    fake_api.submit_error = SubmissionRejected(
        "Phone number already registered", 400, {"phone": "already registered"}
    )
    wiz = _controller(fake_api)
    wiz.advance({"x": "1"})
    wiz.advance({"y": "2"})
    assert await wiz.submit_final() is None
    assert wiz.errors == {"phone": "already registered"}
    assert wiz.last_error.message == "Phone number already registered"


@pytest.mark.asyncio
async def test_teardown_releases_attachments(fake_api, pdf_file):
    wiz = _controller(fake_api)
    handle = open(pdf_file, "rb")
    wiz.attachments.add(UploadAttachment("aadhaar.pdf", 2057, "application/pdf", handle))
    wiz.teardown()
    assert wiz.torn_down
    assert handle.closed
    assert len(wiz.attachments) == 0


# ---------------------------------------------------------------------------
# Flows
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_youth_flow_end_to_end_with_skip(fake_api, tmp_path):
    flow = FLOWS["youth"]
    verifier = RemoteCodeVerifier(fake_api)
    wiz = WizardController(
        flow.build_steps(verifier),
        fake_api.submit_application,
        initial_data=flow.initial_data(),
        receipt_generator=fake_api.generate_receipt,
        receipts_dir=tmp_path,
    )
    assert [s.id for s in wiz.state.steps] == ["identity", "verification", "background", "upload"]

    assert wiz.advance(IDENTITY)
    await verifier.request(IDENTITY["phone"])
    assert fake_api.sent_to == ["9876543210"]

    assert not wiz.advance({"code": "000000"})
    assert wiz.errors["code"] == "Invalid verification code"
    assert await verifier.confirm("123456")
    assert wiz.advance({"code": "123456"})

    assert not wiz.advance(dict(BACKGROUND, age="40"))
    assert "age" in wiz.errors
    assert wiz.advance(BACKGROUND)

    assert wiz.skip()
    result = await wiz.submit_final()
    fields, attachments = fake_api.submissions[0]
    assert fields["membership_type"] == "Kisan Youth Leadership Program"
    assert fields["document_type"] == "Not Provided"
    assert attachments == []
    assert result.submitted_fields["name"] == "Ravi Kumar"


def test_member_flow_asks_for_details_not_background(fake_api):
    steps = FLOWS["member"].build_steps(RemoteCodeVerifier(fake_api))
    assert [s.id for s in steps] == ["identity", "verification", "upload"]
    assert "details" in steps[0].fields
    assert "details" not in steps[0].required_fields


@pytest.mark.asyncio
async def test_identity_verification_upload_scenario(fake_api):
    verifier = RemoteCodeVerifier(fake_api)
    steps = [
        identity_step(("name", "phone")),
        verification_step(verifier),
        upload_step(),
    ]
    wiz = WizardController(steps, fake_api.submit_application)

    assert not wiz.advance({"name": "", "phone": "9876543210"})
    assert list(wiz.errors) == ["name"]
    assert wiz.advance({"name": "Ravi", "phone": "9876543210"})
    assert wiz.index == 1

    await verifier.request(wiz.data["phone"])
    assert not await verifier.confirm("000000")
    assert not wiz.advance({"code": "000000"})
    assert wiz.errors == {"code": "Invalid verification code"}
    assert await verifier.confirm("123456")
    assert wiz.advance({"code": "123456"})
    assert wiz.index == 2

    assert wiz.skip()
    result = await wiz.submit_final()
    assert result.status is SubmissionStatus.PENDING
    assert fake_api.submissions[0][1] == []


@pytest.mark.asyncio
async def test_aggregate_data_only_grows(fake_api):
    flow = FLOWS["youth"]
    verifier = RemoteCodeVerifier(fake_api)
    wiz = WizardController(
        flow.build_steps(verifier), fake_api.submit_application,
        initial_data=flow.initial_data(),
    )
    await verifier.request(IDENTITY["phone"])
    await verifier.confirm("123456")

    snapshots = [dict(wiz.data)]
    for step_input in (IDENTITY, {"code": "123456"}, BACKGROUND,
                       {"attachments": [], "document_type": "Not Provided"}):
        assert wiz.advance(step_input)
        snapshots.append(dict(wiz.data))

    for prev, cur in zip(snapshots, snapshots[1:]):
        assert prev.items() <= cur.items()
    assert snapshots[-1]["name"] == "Ravi Kumar"
    assert snapshots[-1]["age"] == "24"

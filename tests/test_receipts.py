import pytest

from receipts import ReceiptJob, ReceiptStatus, receipt_filename
from state import CreatedResource, SubmissionResult, SubmissionStatus


def _result():
    return SubmissionResult.create(
        CreatedResource("KM-7", SubmissionStatus.PENDING), {"name": "Ravi"}
    )


@pytest.mark.asyncio
async def test_run_writes_receipt_once(fake_api, tmp_path):
    job = ReceiptJob(_result(), fake_api.generate_receipt, tmp_path / "out")
    path = await job.run()
    assert job.status is ReceiptStatus.SUCCEEDED
    assert path == tmp_path / "out" / receipt_filename("KM-7")
    assert path.read_bytes().startswith(b"%PDF")

    # Re-rendering the completion view calls run again; no new generation.
    assert await job.run() == path
    assert fake_api.receipt_calls == 1


@pytest.mark.asyncio
async def test_failure_then_retry(fake_api, tmp_path):
    fake_api.receipt_failures = 1
    job = ReceiptJob(_result(), fake_api.generate_receipt, tmp_path)
    assert await job.run() is None
    assert job.status is ReceiptStatus.FAILED
    assert "unavailable" in job.error

    assert await job.run() is None
    assert fake_api.receipt_calls == 1

    path = await job.retry()
    assert job.status is ReceiptStatus.SUCCEEDED
    assert path.exists()
    assert job.attempts == 2


@pytest.mark.asyncio
async def test_retry_is_noop_unless_failed(fake_api, tmp_path):
    job = ReceiptJob(_result(), fake_api.generate_receipt, tmp_path)
    assert await job.retry() is None
    assert job.status is ReceiptStatus.IDLE
    await job.run()
    await job.retry()
    assert fake_api.receipt_calls == 1


@pytest.mark.asyncio
async def test_unwritable_directory_marks_failure(fake_api, tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("")
    job = ReceiptJob(_result(), fake_api.generate_receipt, blocker / "sub")
    assert await job.run() is None
    assert job.status is ReceiptStatus.FAILED


def test_submitted_fields_are_read_only():
    result = _result()
    with pytest.raises(TypeError):
        result.submitted_fields["name"] = "changed"


@pytest.mark.asyncio
async def test_receipt_carries_submission_status(tmp_path):
    seen = {}

    async def generator(reference_id, details):
        seen.update(details)
        return b"%PDF-1.4"

    result = SubmissionResult.create(
        CreatedResource("KM-8", SubmissionStatus.ACCEPTED), {"name": "Ravi"}
    )
    await ReceiptJob(result, generator, tmp_path).run()
    assert seen["status"] == "Accepted"
    assert seen["name"] == "Ravi"
    assert "status" not in result.submitted_fields


@pytest.mark.asyncio
async def test_unexpected_error_fails_and_allows_retry(fake_api, tmp_path):
    calls = []

    async def generator(reference_id, details):
        calls.append(reference_id)
        if len(calls) == 1:
            raise RuntimeError("garbled response")
        return await fake_api.generate_receipt(reference_id, details)

    job = ReceiptJob(_result(), generator, tmp_path)
    assert await job.run() is None
    assert job.status is ReceiptStatus.FAILED
    assert job.error == "garbled response"

    assert (await job.retry()).exists()
    assert job.status is ReceiptStatus.SUCCEEDED

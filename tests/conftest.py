# tests/conftest.py
import sys, os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from config import Settings
from errors import ReceiptError
from state import CreatedResource, SubmissionStatus


class FakeApi:
    """Stands in for ApiClient: records calls and answers from canned data."""

    def __init__(self, otp="123456", reference="KM-2024-0001", receipt_failures=0):
        self.otp = otp
        self.reference = reference
        self.receipt_failures = receipt_failures
        self.submit_error = None
        self.submit_gate = None
        self.sent_to = []
        self.submissions = []
        self.receipt_calls = 0
        self.about = {}
        self.milestones = []
        self.closed = False

    async def send_otp(self, phone):
        self.sent_to.append(phone)

    async def verify_otp(self, phone, code):
        return code == self.otp

    async def submit_application(self, fields, attachments):
        self.submissions.append((dict(fields), [a.name for a in attachments]))
        if self.submit_gate is not None:
            await self.submit_gate.wait()
        if self.submit_error is not None:
            raise self.submit_error
        return CreatedResource(self.reference, SubmissionStatus.PENDING)

    async def generate_receipt(self, reference_id, snapshot):
        self.receipt_calls += 1
        if self.receipt_failures > 0:
            self.receipt_failures -= 1
            raise ReceiptError("receipt service unavailable")
        return b"%PDF-1.4 receipt " + reference_id.encode()

    async def fetch_about(self):
        return self.about

    async def fetch_milestones(self):
        return self.milestones

    async def aclose(self):
        self.closed = True


@pytest.fixture
def fake_api():
    return FakeApi()


@pytest.fixture
def settings(tmp_path):
    return Settings(
        api_base_url="http://api.test",
        receipts_dir=tmp_path / "receipts",
        language="en",
        prefs_path=tmp_path / "prefs.yaml",
    )


@pytest.fixture
def pdf_file(tmp_path):
    path = tmp_path / "aadhaar.pdf"
    path.write_bytes(b"%PDF-1.4\n" + b"0" * 2048)
    return path

from __future__ import annotations
import asyncio
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Callable, Mapping, Optional
from errors import ReceiptError
from state import SubmissionResult
from logger import log

ReceiptGenerator = Callable[[str, Mapping[str, Any]], Awaitable[bytes]]


class ReceiptStatus(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def receipt_filename(reference_id: str) -> str:
    return f"application_receipt_{reference_id}.pdf"


class ReceiptJob:
    """
    The single receipt generation belonging to one successful submission.

    ``run`` does the work at most once; only ``retry`` (after a failure)
    calls the generator again. The submission itself is never touched.
    """

    def __init__(
        self,
        result: SubmissionResult,
        generator: ReceiptGenerator,
        out_dir: Path,
    ) -> None:
        self.result = result
        self._generator = generator
        self._out_dir = Path(out_dir)
        self.status = ReceiptStatus.IDLE
        self.path: Optional[Path] = None
        self.error: str = ""
        self.attempts = 0

    async def run(self) -> Optional[Path]:
        if self.status is not ReceiptStatus.IDLE:
            return self.path
        return await self._generate()

    async def retry(self) -> Optional[Path]:
        if self.status is not ReceiptStatus.FAILED:
            return self.path
        log.info("Retrying receipt for %s", self.result.reference_id)
        return await self._generate()

    async def _generate(self) -> Optional[Path]:
        self.status = ReceiptStatus.PENDING
        self.error = ""
        self.attempts += 1
        ref = self.result.reference_id
        try:
            details = dict(self.result.submitted_fields, status=self.result.status.value)
            pdf = await self._generator(ref, details)
            target = self._out_dir / receipt_filename(ref)
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(
                None,
                lambda: (
                    target.parent.mkdir(parents=True, exist_ok=True),
                    target.write_bytes(pdf),
                )
            )
        except (ReceiptError, OSError) as e:
            self.status = ReceiptStatus.FAILED
            self.error = str(e)
            log.error("Receipt for %s failed: %s", ref, e)
            return None
        except Exception as e:
            self.status = ReceiptStatus.FAILED
            self.error = str(e) or type(e).__name__
            log.error("Receipt for %s failed unexpectedly: %s", ref, e)
            return None
        self.path = target
        self.status = ReceiptStatus.SUCCEEDED
        log.info("Receipt for %s written to %s", ref, target)
        return target

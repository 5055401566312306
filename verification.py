from __future__ import annotations
from typing import Optional, Protocol
from logger import log


class CodeVerifier(Protocol):
    def check(self, code: str) -> bool: ...


class VerificationApi(Protocol):
    async def send_otp(self, phone: str) -> None: ...
    async def verify_otp(self, phone: str, code: str) -> bool: ...


class RemoteCodeVerifier:
    """
    One-time-code check backed by the API's OTP endpoints.

    ``confirm`` talks to the server; ``check`` is the synchronous answer the
    verification step's validator reads afterwards.
    """

    def __init__(self, api: VerificationApi) -> None:
        self._api = api
        self.phone: Optional[str] = None
        self._confirmed: Optional[str] = None

    async def request(self, phone: str) -> None:
        self.phone = phone
        self._confirmed = None
        await self._api.send_otp(phone)
        log.info("Verification code requested for %s", phone)

    async def confirm(self, code: str) -> bool:
        if not self.phone:
            return False
        ok = await self._api.verify_otp(self.phone, code)
        self._confirmed = code if ok else None
        log.info("Verification for %s %s", self.phone, "passed" if ok else "failed")
        return ok

    def check(self, code: str) -> bool:
        return self._confirmed is not None and code == self._confirmed

from __future__ import annotations
import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple
import httpx
from errors import (
    ApiError, NumberNotRegistered, ReceiptError, SubmissionRejected, TransportFailure,
)
from state import CreatedResource, SubmissionStatus
from uploads import NO_DOCUMENT, UploadAttachment
from logger import log

MEMBERS_PATH = "/api/members"
SEND_OTP_PATH = "/api/members/send-otp"
VERIFY_OTP_PATH = "/api/members/verify-otp"
RECEIPT_PATH = "/api/pdf/application-receipt"
ABOUT_PATH = "/api/about"
TIMELINE_PATH = "/api/timeline"

# multipart file fields on MEMBERS_PATH
DOCUMENT_FIELD = "documentPhoto"
EXTRA_DOCUMENTS_FIELD = "documentPhotos"

# aggregate field name -> backend field name
WIRE_NAMES = {
    "name": "name",
    "village": "village",
    "city": "city",
    "phone": "phoneNumber",
    "details": "details",
    "membership_type": "membershipType",
    "document_type": "documentType",
    "age": "age",
    "education": "education",
    "experience": "experience",
    "motivation": "motivation",
}
FIELD_NAMES = {wire: field for field, wire in WIRE_NAMES.items()}


def to_wire(fields: Mapping[str, Any]) -> Dict[str, Any]:
    payload: Dict[str, Any] = {}
    for name, value in fields.items():
        wire = WIRE_NAMES.get(name)
        if wire is None or value is None or value == "":
            continue
        payload[wire] = value.strip() if isinstance(value, str) else value
    if "age" in payload:
        try:
            payload["age"] = int(payload["age"])
        except (TypeError, ValueError):
            pass
    return payload


def _json(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return None


def raise_for_rejection(resp: httpx.Response) -> None:
    """Turn a 4xx/5xx answer into SubmissionRejected with field-level messages."""
    if resp.status_code < 400:
        return
    body = _json(resp)
    message = ""
    field_errors: Dict[str, str] = {}
    if isinstance(body, dict):
        message = str(body.get("message") or "")
        raw = body.get("errors")
        if isinstance(raw, dict):
            for wire, msg in raw.items():
                if isinstance(msg, dict):
                    msg = msg.get("message", "")
                field_errors[FIELD_NAMES.get(wire, wire)] = str(msg)
    raise SubmissionRejected(
        message or f"HTTP {resp.status_code}",
        status_code=resp.status_code,
        field_errors=field_errors,
    )


class ApiClient:
    """
    Backend API collaborator.

    Every call tries the primary base URL first and the fallback base URL
    only when the primary cannot be reached. Unreachable on all bases
    raises TransportFailure; an answer with an error status raises
    SubmissionRejected.
    """

    def __init__(
        self,
        base_url: str,
        fallback_url: Optional[str] = None,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._bases: List[str] = [base_url.rstrip("/")]
        if fallback_url and fallback_url.rstrip("/") not in self._bases:
            self._bases.append(fallback_url.rstrip("/"))
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        last_error: Optional[Exception] = None
        for base in self._bases:
            url = f"{base}{path}"
            try:
                resp = await self._client.request(method, url, **kwargs)
            except httpx.TransportError as e:
                log.warning("%s %s unreachable: %s", method, url, e)
                last_error = e
                continue
            except httpx.HTTPError as e:
                log.error("%s %s failed: %s", method, url, e)
                raise TransportFailure(str(e) or type(e).__name__) from e
            log.debug("%s %s -> %s", method, url, resp.status_code)
            return resp
        detail = str(last_error) or type(last_error).__name__
        raise TransportFailure(detail)

    # -- Verification ---------------------------------------------------------

    async def send_otp(self, phone: str) -> None:
        resp = await self._request("POST", SEND_OTP_PATH, json={"phoneNumber": phone})
        raise_for_rejection(resp)

    async def verify_otp(self, phone: str, code: str) -> bool:
        resp = await self._request(
            "POST", VERIFY_OTP_PATH, json={"phoneNumber": phone, "otp": code}
        )
        if resp.status_code == 400:
            return False
        if resp.status_code == 404:
            body = _json(resp)
            message = body.get("message") if isinstance(body, dict) else None
            raise NumberNotRegistered(str(message or "HTTP 404"))
        raise_for_rejection(resp)
        return True

    # -- Submission -------------------------------------------------------------

    async def _document_parts(
        self, attachments: Sequence[UploadAttachment]
    ) -> List[Tuple[str, Tuple[str, bytes, str]]]:
        """Multipart file parts: the first attachment is ``documentPhoto``."""
        loop = asyncio.get_running_loop()
        parts = []
        for i, att in enumerate(attachments):
            content = await loop.run_in_executor(None, att.read)
            field = DOCUMENT_FIELD if i == 0 else EXTRA_DOCUMENTS_FIELD
            parts.append((field, (att.name, content, att.mime_type)))
        return parts

    async def submit_application(
        self, fields: Mapping[str, Any], attachments: Sequence[UploadAttachment]
    ) -> CreatedResource:
        payload = to_wire(fields)
        if attachments:
            files = await self._document_parts(attachments)
            data = {k: str(v) for k, v in payload.items()}
            resp = await self._request("POST", MEMBERS_PATH, data=data, files=files)
        else:
            payload["documentType"] = NO_DOCUMENT
            resp = await self._request("POST", MEMBERS_PATH, json=payload)
        raise_for_rejection(resp)
        body = _json(resp)
        member = body.get("member") if isinstance(body, dict) else None
        if not isinstance(member, dict):
            raise SubmissionRejected("Unexpected response from server", resp.status_code)
        reference = member.get("applicationId") or member.get("_id")
        if not reference:
            raise SubmissionRejected("Server response carried no application id",
                                     resp.status_code)
        document_ref = str(member.get("documentPhoto") or "")
        if attachments:
            log.info("Document for %s stored at %s", reference, document_ref or "?")
        return CreatedResource(
            reference_id=str(reference),
            status=SubmissionStatus.from_backend(member.get("status")),
            message=str(body.get("message") or ""),
            document_ref=document_ref,
        )

    # -- Receipt ---------------------------------------------------------------

    async def generate_receipt(self, reference_id: str, snapshot: Mapping[str, Any]) -> bytes:
        payload = to_wire(snapshot)
        payload.update({
            "applicationId": reference_id,
            "applicationDate": datetime.now(timezone.utc).isoformat(),
            "status": snapshot.get("status", SubmissionStatus.PENDING.value),
        })
        try:
            resp = await self._request("POST", RECEIPT_PATH, json=payload)
            raise_for_rejection(resp)
        except ApiError as e:
            raise ReceiptError(e.message) from e
        if not resp.content:
            raise ReceiptError("Empty receipt document")
        return resp.content

    # -- Content ---------------------------------------------------------------

    async def fetch_about(self) -> Dict[str, Any]:
        resp = await self._request("GET", ABOUT_PATH)
        if resp.status_code == 404:
            return {}
        raise_for_rejection(resp)
        body = _json(resp)
        data = body.get("data") if isinstance(body, dict) else None
        return data if isinstance(data, dict) else {}

    async def fetch_milestones(self) -> List[Dict[str, Any]]:
        resp = await self._request("GET", TIMELINE_PATH, params={"isKeyMilestone": "true"})
        if resp.status_code == 404:
            return []
        raise_for_rejection(resp)
        body = _json(resp)
        data = body.get("data") if isinstance(body, dict) else body
        return data if isinstance(data, list) else []

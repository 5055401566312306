from __future__ import annotations
import mimetypes
import os
from dataclasses import dataclass
from typing import BinaryIO, Iterator, List, Optional
from errors import TooLarge, UnsupportedType
from logger import log

MAX_UPLOAD_BYTES = 5 * 1024 * 1024
ALLOWED_MIME_TYPES = frozenset({"image/jpeg", "image/png", "application/pdf"})
DOCUMENT_TYPES = ["Aadhaar", "PAN", "Ration Card", "Other"]
NO_DOCUMENT = "Not Provided"


@dataclass
class UploadAttachment:
    name: str
    size_bytes: int
    mime_type: str
    handle: Optional[BinaryIO] = None

    @property
    def released(self) -> bool:
        return self.handle is None or self.handle.closed

    @property
    def size_label(self) -> str:
        return f"{self.size_bytes / 1024:.1f} KB"

    def read(self) -> bytes:
        if self.released:
            raise ValueError(f"Attachment {self.name} has been released")
        self.handle.seek(0)
        return self.handle.read()

    def release(self) -> None:
        if self.handle is not None and not self.handle.closed:
            self.handle.close()
            log.debug("Released attachment handle %s", self.name)


def check_attachment(
    name: str,
    size_bytes: int,
    mime_type: str,
    allowed_types: frozenset = ALLOWED_MIME_TYPES,
    max_bytes: int = MAX_UPLOAD_BYTES,
) -> None:
    """Raise UnsupportedType or TooLarge if the attachment breaks a constraint."""
    if mime_type not in allowed_types:
        raise UnsupportedType(name, f"type {mime_type or 'unknown'} is not allowed")
    if size_bytes > max_bytes:
        raise TooLarge(name, f"{size_bytes} bytes exceeds {max_bytes}")


def open_attachment(path: str) -> UploadAttachment:
    """Validate a file on disk, then open it. Nothing is opened for rejected files."""
    path = os.path.expanduser(path)
    name = os.path.basename(path)
    mime_type, _ = mimetypes.guess_type(name)
    size = os.path.getsize(path)   # raises OSError for missing files
    check_attachment(name, size, mime_type or "")
    return UploadAttachment(
        name=name, size_bytes=size, mime_type=mime_type, handle=open(path, "rb")
    )


class AttachmentSet:
    """Attachments chosen on the upload step, keyed by file name."""

    def __init__(
        self,
        allowed_types: frozenset = ALLOWED_MIME_TYPES,
        max_bytes: int = MAX_UPLOAD_BYTES,
    ) -> None:
        self.allowed_types = allowed_types
        self.max_bytes = max_bytes
        self._items: List[UploadAttachment] = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[UploadAttachment]:
        return iter(list(self._items))

    def __contains__(self, name: str) -> bool:
        return any(a.name == name for a in self._items)

    @property
    def names(self) -> List[str]:
        return [a.name for a in self._items]

    def _check(self, att: UploadAttachment) -> None:
        check_attachment(
            att.name, att.size_bytes, att.mime_type,
            allowed_types=self.allowed_types, max_bytes=self.max_bytes,
        )

    def add(self, att: UploadAttachment) -> None:
        """Add ``att``; an attachment with the same name is replaced."""
        self._check(att)
        for i, existing in enumerate(self._items):
            if existing.name == att.name:
                if existing is not att:
                    existing.release()
                self._items[i] = att
                log.info("Replaced attachment %s (%s)", att.name, att.size_label)
                return
        self._items.append(att)
        log.info("Added attachment %s (%s, %s)", att.name, att.mime_type, att.size_label)

    def replace(self, old_name: str, att: UploadAttachment) -> None:
        self._check(att)
        for i, existing in enumerate(self._items):
            if existing.name == old_name:
                existing.release()
                self._items[i] = att
                log.info("Replaced attachment %s with %s", old_name, att.name)
                return
        raise KeyError(old_name)

    def remove(self, name: str) -> None:
        for existing in self._items:
            if existing.name == name:
                existing.release()
                self._items.remove(existing)
                log.info("Removed attachment %s", name)
                return
        raise KeyError(name)

    def clear(self) -> None:
        for existing in self._items:
            existing.release()
        self._items.clear()

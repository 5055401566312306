import pytest

from errors import TooLarge, UnsupportedType
from uploads import (
    MAX_UPLOAD_BYTES, AttachmentSet, UploadAttachment, check_attachment, open_attachment,
)

def _att(name="pan.png", size=1024, mime="image/png"):
    return UploadAttachment(name, size, mime)

def test_allowed_types_pass():
    for mime in ("image/jpeg", "image/png", "application/pdf"):
        check_attachment("doc", 10, mime)

def test_exactly_five_megabytes_is_allowed():
    check_attachment("scan.pdf", MAX_UPLOAD_BYTES, "application/pdf")

def test_six_megabytes_is_too_large():
    with pytest.raises(TooLarge):
        check_attachment("scan.pdf", 6 * 1024 * 1024, "application/pdf")

def test_disallowed_type_is_rejected_before_size():
    with pytest.raises(UnsupportedType):
        check_attachment("notes.docx", 6 * 1024 * 1024, "application/msword")

def test_rejected_add_leaves_set_unchanged():
    atts = AttachmentSet()
    atts.add(_att())
    with pytest.raises(TooLarge):
        atts.add(_att("big.pdf", 6 * 1024 * 1024, "application/pdf"))
    with pytest.raises(UnsupportedType):
        atts.add(_att("run.exe", 10, "application/x-msdownload"))
    assert atts.names == ["pan.png"]

def test_same_name_replaces(pdf_file):
    atts = AttachmentSet()
    old = UploadAttachment("aadhaar.pdf", 10, "application/pdf", open(pdf_file, "rb"))
    atts.add(old)
    atts.add(_att("aadhaar.pdf", 20, "application/pdf"))
    assert len(atts) == 1
    assert old.released

def test_replace_and_remove():
    atts = AttachmentSet()
    atts.add(_att("a.png"))
    atts.replace("a.png", _att("b.jpg", mime="image/jpeg"))
    assert "b.jpg" in atts and "a.png" not in atts
    atts.remove("b.jpg")
    assert len(atts) == 0
    with pytest.raises(KeyError):
        atts.remove("b.jpg")

def test_replace_unknown_name_raises():
    with pytest.raises(KeyError):
        AttachmentSet().replace("missing.png", _att())

def test_open_attachment_reads_file(pdf_file):
    att = open_attachment(str(pdf_file))
    try:
        assert att.mime_type == "application/pdf"
        assert att.size_bytes == pdf_file.stat().st_size
        assert att.read().startswith(b"%PDF")
    finally:
        att.release()
    assert att.released

def test_open_attachment_rejects_type_without_opening(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("hello")
    with pytest.raises(UnsupportedType):
        open_attachment(str(path))

def test_open_missing_file_raises_oserror(tmp_path):
    with pytest.raises(OSError):
        open_attachment(str(tmp_path / "nope.pdf"))

def test_read_after_release_fails(pdf_file):
    att = open_attachment(str(pdf_file))
    att.release()
    with pytest.raises(ValueError):
        att.read()

"""Local attachment storage."""

import pytest

from campus_complaints.core.exceptions import ErrorCode, ValidationError
from campus_complaints.services.file.file_storage import PUBLIC_PREFIX, LocalFileStorage


@pytest.fixture
def storage(tmp_path):
    return LocalFileStorage(tmp_path / "uploads", max_size=16, allowed_extensions={"pdf", "png"})


def test_save_writes_unique_file(storage):
    first = storage.save("report.pdf", b"%PDF-1.4")
    second = storage.save("report.pdf", b"%PDF-1.5")

    assert first != second
    for path, content in ((first, b"%PDF-1.4"), (second, b"%PDF-1.5")):
        assert path.startswith(f"{PUBLIC_PREFIX}/")
        assert path.endswith("_report.pdf")
        assert (storage.upload_dir / path.rsplit("/", 1)[1]).read_bytes() == content


@pytest.mark.parametrize(
    "filename, stored_suffix",
    [
        ("../../etc/passwd.png", "_passwd.png"),
        ("C:\\Users\\me\\scan.PDF", "_scan.PDF"),
    ],
)
def test_directories_are_stripped(storage, filename, stored_suffix):
    path = storage.save(filename, b"data")

    assert path.endswith(stored_suffix)
    assert "/" not in path[len(PUBLIC_PREFIX) + 1:]


@pytest.mark.parametrize(
    "filename, content",
    [
        ("empty.pdf", b""),
        ("big.pdf", b"x" * 17),
        ("script.sh", b"echo"),
        ("noext", b"data"),
        ("", b"data"),
    ],
)
def test_rejected_files(storage, filename, content):
    with pytest.raises(ValidationError) as exc:
        storage.save(filename, content)

    assert exc.value.error_code == ErrorCode.INVALID_FILE
    assert exc.value.field == "attachment"
    assert not storage.upload_dir.exists() or not any(storage.upload_dir.iterdir())


def test_any_extension_when_unrestricted(tmp_path):
    storage = LocalFileStorage(tmp_path, max_size=16)

    assert storage.save("notes.md", b"# hi").endswith("_notes.md")


def test_from_settings(settings):
    storage = LocalFileStorage.from_settings(settings)

    assert str(storage.upload_dir) == settings.UPLOAD_DIR
    assert storage.save("a.txt", b"ok").startswith(PUBLIC_PREFIX)


def test_delete_removes_saved_file(storage):
    path = storage.save("report.pdf", b"%PDF-1.4")

    assert storage.delete(path) is True
    assert list(storage.upload_dir.iterdir()) == []
    assert storage.delete(path) is False


def test_delete_stays_inside_upload_dir(storage, tmp_path):
    outside = tmp_path / "keep.pdf"
    outside.write_bytes(b"%PDF")
    storage.save("report.pdf", b"%PDF-1.4")

    assert storage.delete(f"{PUBLIC_PREFIX}/../keep.pdf") is False
    assert outside.exists()
    assert len(list(storage.upload_dir.iterdir())) == 1

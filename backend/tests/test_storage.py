"""Unit tests for the file storage layer."""
import pytest

from fleetoffice.exceptions import FileValidationError, NotFoundError
from fleetoffice.storage import FileStorage, FileValidator, base_name

PDF = b"%PDF-1.4 test"


@pytest.fixture
def file_storage(tmp_path) -> FileStorage:
    return FileStorage(tmp_path, FileValidator(max_document_size=1024, max_image_size=16))


def test_base_name_strips_client_directories() -> None:
    assert base_name("C:\\Users\\me\\scan.pdf") == "scan.pdf"
    assert base_name("../../etc/passwd") == "passwd"
    assert base_name(None) == ""


def test_store_and_resolve(file_storage: FileStorage) -> None:
    relative = file_storage.store("employees/1/docs", "id card.pdf", PDF, "application/pdf")

    assert relative.startswith("employees/1/docs/")
    assert relative.endswith("_id card.pdf")
    assert file_storage.resolve(relative).read_bytes() == PDF


def test_same_name_in_same_millisecond_gets_distinct_files(file_storage: FileStorage, monkeypatch) -> None:
    monkeypatch.setattr("fleetoffice.storage.time.time", lambda: 1700000000.0)

    first = file_storage.store("docs", "a.pdf", PDF, "application/pdf")
    second = file_storage.store("docs", "a.pdf", b"%PDF second", "application/pdf")

    assert first == "docs/1700000000000_a.pdf"
    assert second == "docs/1700000000001_a.pdf"
    assert file_storage.resolve(first).read_bytes() == PDF
    assert file_storage.resolve(second).read_bytes() == b"%PDF second"


@pytest.mark.parametrize(
    "filename, content_type, data, message",
    [
        ("empty.pdf", "application/pdf", b"", "File is empty"),
        ("bad$name.pdf", "application/pdf", PDF, "Filename contains invalid characters"),
        ("script.exe", "application/pdf", PDF, "File extension not allowed: exe"),
        ("notes.txt", "text/plain", PDF, "File type not allowed: text/plain"),
        ("big.pdf", "application/pdf", b"x" * 2048, "File exceeds the maximum size of 0 MB"),
    ],
)
def test_store_rejects_invalid_uploads(file_storage, filename, content_type, data, message) -> None:
    with pytest.raises(FileValidationError) as exc_info:
        file_storage.store("docs", filename, data, content_type)
    assert exc_info.value.message == message


def test_images_use_image_rules(file_storage: FileStorage) -> None:
    with pytest.raises(FileValidationError):
        file_storage.store("vehicles/1/docs", "car.pdf", PDF, "application/pdf", image=True)
    with pytest.raises(FileValidationError):
        file_storage.store("vehicles/1/docs", "car.png", b"x" * 32, "image/png", image=True)

    relative = file_storage.store("vehicles/1/docs", "car.png", b"png", "image/png", image=True)
    assert file_storage.resolve(relative).name.endswith("_car.png")


def test_traversal_is_rejected(file_storage: FileStorage) -> None:
    file_storage.store("employees/1/docs", "cv.pdf", PDF, "application/pdf")

    with pytest.raises(FileValidationError):
        file_storage.resolve("../outside.pdf")
    with pytest.raises(FileValidationError):
        file_storage.resolve_in("employees/1/docs", "../../2/docs/cv.pdf")
    with pytest.raises(NotFoundError):
        file_storage.resolve_in("employees/1/docs", "missing.pdf")


def test_delete_is_best_effort(file_storage: FileStorage) -> None:
    relative = file_storage.store("docs", "a.pdf", PDF, "application/pdf")

    assert file_storage.delete(relative) is True
    assert file_storage.delete(relative) is False
    assert file_storage.delete(None) is False
    assert file_storage.delete("../elsewhere.pdf") is False


def test_delete_directory(file_storage: FileStorage, tmp_path) -> None:
    file_storage.store("projects/3/docs", "a.pdf", PDF, "application/pdf")

    file_storage.delete_directory("projects/3/docs")
    file_storage.delete_directory("projects/3/docs")
    file_storage.delete_directory("..")

    assert not (tmp_path / "projects" / "3" / "docs").exists()
    assert tmp_path.exists()

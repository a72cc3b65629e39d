import pytest

from carlot.services.errors import AttachmentMissing, EmptyFile, FileTooLarge, UnsupportedFileType
from carlot.services.storage import IMAGE_BUCKET, INVOICE_BUCKET

PDF = b"%PDF-1.4\n%test\n"
PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


def test_image_upload_writes_file_and_builds_url(storage):
    blob = storage.upload_car_image("u1", "c1", PNG, "image/png")

    assert blob.path.read_bytes() == PNG
    assert blob.bucket == IMAGE_BUCKET
    assert blob.key.startswith("u1/c1/") and blob.key.endswith(".png")
    assert blob.url == f"http://testserver/storage/{IMAGE_BUCKET}/{blob.key}"
    assert blob.size == len(PNG)


def test_image_type_is_checked(storage):
    with pytest.raises(UnsupportedFileType):
        storage.upload_car_image("u1", "c1", b"GIF89a", "image/gif")


def test_invoice_upload(storage):
    blob = storage.upload_invoice("u1", "c1", PDF, "application/pdf")
    assert blob.bucket == INVOICE_BUCKET
    assert blob.path.name.startswith("invoice_") and blob.path.suffix == ".pdf"


def test_invoice_must_be_a_pdf(storage):
    with pytest.raises(UnsupportedFileType):
        storage.upload_invoice("u1", "c1", PDF, "image/png")
    with pytest.raises(UnsupportedFileType):
        storage.upload_invoice("u1", "c1", b"not a pdf", "application/pdf")


def test_empty_and_oversized_files(storage):
    with pytest.raises(EmptyFile):
        storage.upload_car_image("u1", "c1", b"", "image/jpeg")
    with pytest.raises(FileTooLarge):
        storage.upload_car_image("u1", "c1", b"x" * (storage.max_size + 1), "image/jpeg")


def test_path_for_url_round_trip(storage):
    blob = storage.upload_invoice("u1", "c1", PDF, "application/pdf")
    assert storage.path_for_url(blob.url) == blob.path.resolve()


def test_path_for_url_missing_file(storage):
    blob = storage.upload_invoice("u1", "c1", PDF, "application/pdf")
    blob.path.unlink()
    with pytest.raises(AttachmentMissing, match="missing"):
        storage.path_for_url(blob.url)


@pytest.mark.parametrize("url", ["", "https://elsewhere.example/file.pdf", "http://testserver/storage/../../etc/passwd"])
def test_path_for_url_rejects_foreign_urls(storage, url):
    with pytest.raises(AttachmentMissing):
        storage.path_for_url(url)


def test_delete_car_files(storage):
    image = storage.upload_car_image("u1", "c1", PNG, "image/png")
    invoice = storage.upload_invoice("u1", "c1", PDF, "application/pdf")
    keep = storage.upload_car_image("u1", "c2", PNG, "image/png")

    storage.delete_car_files("u1", "c1")

    assert not image.path.exists()
    assert not invoice.path.exists()
    assert keep.path.exists()


def test_invoice_path_only_accepts_the_cars_own_invoices(storage):
    invoice = storage.upload_invoice("u1", "c1", PDF, "application/pdf")
    image = storage.upload_car_image("u1", "c1", PNG, "image/png")
    other_car = storage.upload_invoice("u1", "c2", PDF, "application/pdf")

    assert storage.invoice_path("u1", "c1", invoice.url) == invoice.path.resolve()
    with pytest.raises(AttachmentMissing):
        storage.invoice_path("u1", "c1", image.url)
    with pytest.raises(AttachmentMissing):
        storage.invoice_path("u1", "c1", other_car.url)
    with pytest.raises(AttachmentMissing):
        storage.invoice_path("u2", "c1", invoice.url)


def test_invoice_path_rejects_non_pdf_content(storage):
    invoice = storage.upload_invoice("u1", "c1", PDF, "application/pdf")
    invoice.path.write_bytes(PNG)
    with pytest.raises(AttachmentMissing, match="not a valid PDF"):
        storage.invoice_path("u1", "c1", invoice.url)


def test_discard_stays_inside_the_cars_folder(storage):
    mine = storage.upload_car_image("u1", "c1", PNG, "image/png")
    theirs = storage.upload_car_image("u2", "c9", PNG, "image/png")

    assert storage.discard(IMAGE_BUCKET, "u1", "c1", theirs.url) is False
    assert theirs.path.exists()

    assert storage.discard(IMAGE_BUCKET, "u1", "c1", mine.url) is True
    assert not mine.path.exists()
    assert storage.discard(IMAGE_BUCKET, "u1", "c1", mine.url) is False

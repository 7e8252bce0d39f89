from __future__ import annotations

import pytest

from cardfolio.client.session import AppSession
from cardfolio.client.storage import CredentialStore
from cardfolio.client.uploader import ImageUploader, LocalFile
from cardfolio.domain.uploads import (
    LOGO_RULES,
    RASTER_RULES,
    UploadRejected,
    has_valid_signature,
    validate_image,
)
from cardfolio.services.upload_service import UploadService

PNG_HEADER = b"\x89PNG\r\n\x1a\n"


class NoNetwork:
    def request(self, *args, **kwargs):
        raise AssertionError("no request expected")


def _uploader(rules=RASTER_RULES, logged_in=True):
    store = CredentialStore()
    if logged_in:
        store.save_login("tok", {"id": "u1"})
    session = AppSession(store, base_url="http://api.test", http_session=NoNetwork())
    return ImageUploader(session, "/api/blogs/upload", "image", rules), session


@pytest.mark.parametrize(
    "file, message",
    [
        (
            LocalFile("big.png", PNG_HEADER + b"\0" * (5 * 1024 * 1024), "image/png"),
            "File size exceeds 5MB limit",
        ),
        (LocalFile("notes.txt", b"a" * 500, "text/plain"), "Only image files are allowed"),
        (
            LocalFile("scan.tiff", b"a" * 500, "image/tiff"),
            "Only JPEG, PNG, GIF, WebP, and BMP images are allowed",
        ),
        (LocalFile("tiny.png", PNG_HEADER, "image/png"), "File appears to be too small or corrupt"),
        (
            LocalFile("logo.svg", b"<svg>" + b" " * 200 + b"</svg>", "image/svg+xml"),
            "Only JPEG, PNG, GIF, WebP, and BMP images are allowed",
        ),
    ],
)
def test_rejected_before_any_request(file, message):
    uploader, session = _uploader()
    assert uploader.upload(file) is None
    assert session.notifier.messages("error") == [message]


def test_upload_without_login_sends_nothing():
    uploader, session = _uploader(logged_in=False)
    ok_file = LocalFile("photo.png", PNG_HEADER + b"\0" * 500, "image/png")
    assert uploader.upload(ok_file) is None
    assert session.notifier.last.message == "Please log in to access this page"


def test_logo_rules_accept_svg():
    uploader, _ = _uploader(LOGO_RULES)
    svg = LocalFile("logo.svg", b"<svg>" + b" " * 200 + b"</svg>", "image/svg+xml")
    assert uploader.check(svg) is None
    assert "SVG" in LOGO_RULES.extension_message()


def test_validate_image_normalizes_extension():
    assert validate_image("Photo.JPEG", "image/jpeg", 2048) == "jpeg"
    with pytest.raises(UploadRejected):
        validate_image("photo", "image/jpeg", 2048)


def test_signatures():
    assert has_valid_signature(PNG_HEADER + b"rest", "png")
    assert not has_valid_signature(b"GIF89a", "png")
    assert has_valid_signature(b"RIFF\0\0\0\0WEBPVP8 ", "webp")
    assert has_valid_signature(b'  <?xml version="1.0"?><svg/>', "svg")
    assert not has_valid_signature(b"\xFF\xD8\xFF", "tiff")


def test_upload_service_keeps_files_in_owner_folder(tmp_path, make_png):
    service = UploadService(str(tmp_path))
    path = service.store_image("blog", "bob", "cover.png", "image/png", make_png())
    assert path.startswith("/uploads/blog/bob/")
    assert (tmp_path / "blog" / "bob").is_dir()

    assert service.owns(path, "bob")
    assert not service.owns(path, "alice")
    assert service.remove(path, "alice") is False
    assert service.local_path(path) and (tmp_path / path[len("/uploads/"):]).is_file()

    assert service.remove("/uploads/../outside.png", "bob") is False
    assert service.remove(path, "bob") is True
    assert service.remove(path, "bob") is False


def test_upload_service_rejects_unsafe_owner(tmp_path, make_png):
    service = UploadService(str(tmp_path))
    with pytest.raises(UploadRejected):
        service.store_image("blog", "../bob", "cover.png", "image/png", make_png())

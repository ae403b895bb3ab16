import os

import pytest

from config import settings


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    return tmp_path


def test_upload_post_image(client, make_user, auth_headers, upload_dir):
    alice = make_user("alice")

    response = client.post(
        "/uploads/post",
        files={"file": ("sunset.JPG", b"\xff\xd8\xff fake jpeg", "image/jpeg")},
        headers=auth_headers(alice),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["mediaType"] == "image"
    assert body["fileUrl"].startswith(f"/media/posts/{alice.id}-")
    assert body["fileUrl"].endswith(".jpg")
    stored = upload_dir / "posts" / os.path.basename(body["fileUrl"])
    assert stored.read_bytes() == b"\xff\xd8\xff fake jpeg"


def test_profile_upload_updates_picture(client, make_user, auth_headers):
    alice = make_user("alice")

    response = client.post(
        "/uploads/profile",
        files={"file": ("me.png", b"\x89PNG", "image/png")},
        headers=auth_headers(alice),
    )

    body = response.json()
    assert body["fileUrl"].startswith("/media/profile-images/")
    assert body["user"]["profilePicture"] == body["fileUrl"]
    assert client.get(f"/users/{alice.id}").json()["profilePicture"] == body["fileUrl"]


def test_video_upload_rejects_images(client, make_user, auth_headers, upload_dir):
    alice = make_user("alice")

    response = client.post(
        "/uploads/video",
        files={"file": ("me.png", b"\x89PNG", "image/png")},
        headers=auth_headers(alice),
    )

    assert response.status_code == 400
    assert not (upload_dir / "videos").exists()


def test_mime_type_is_guessed_from_extension(client, make_user, auth_headers):
    alice = make_user("alice")

    response = client.post(
        "/uploads/story",
        files={"file": ("clip.mp4", b"\x00\x00", "application/octet-stream")},
        headers=auth_headers(alice),
    )

    assert response.status_code == 200
    assert response.json()["mediaType"] == "video"


def test_oversized_upload_is_rejected(client, make_user, auth_headers, upload_dir, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE", 4)
    alice = make_user("alice")

    response = client.post(
        "/uploads/post",
        files={"file": ("big.jpg", b"0123456789", "image/jpeg")},
        headers=auth_headers(alice),
    )

    assert response.status_code == 413
    assert list((upload_dir / "posts").iterdir()) == []


def test_unknown_upload_kind(client, make_user, auth_headers):
    alice = make_user("alice")

    response = client.post(
        "/uploads/banner",
        files={"file": ("a.jpg", b"x", "image/jpeg")},
        headers=auth_headers(alice),
    )

    assert response.status_code == 404


def test_upload_requires_authentication(client):
    response = client.post("/uploads/post", files={"file": ("a.jpg", b"x", "image/jpeg")})
    assert response.status_code == 401

"""
Pytest configuration and shared fixtures for Portrait Studio tests.

Provides synthetic images, a stub image editor standing in for the
remote service, and an API client backed by an in-memory credential store.
"""

import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from portrait_studio.accounts import InMemoryUserRepository
from portrait_studio.editing.base import BaseImageEditor, EditResult
from portrait_studio.main import create_app


def make_image_bytes(width: int = 60, height: int = 80, fmt: str = "PNG") -> bytes:
    """Encode a solid-color image of the given size."""
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), (200, 120, 40)).save(buffer, format=fmt)
    return buffer.getvalue()


class StubImageEditor(BaseImageEditor):
    """Editor that records calls and returns a canned result or raises."""

    name = "stub"
    display_name = "Stub editor"

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[tuple[bytes, str, str]] = []
        self.result = EditResult(
            image_bytes=make_image_bytes(120, 160),
            mime_type="image/png",
            text="Here is your edited photo.",
        )
        self.error: Exception | None = None

    def load(self) -> None:
        self._loaded = True

    def unload(self) -> None:
        self._loaded = False

    async def edit(self, image_bytes: bytes, mime_type: str, prompt: str) -> EditResult:
        self.calls.append((image_bytes, mime_type, prompt))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def png_bytes():
    return make_image_bytes()


@pytest.fixture
def image_factory():
    return make_image_bytes


@pytest.fixture
def stub_editor():
    return StubImageEditor()


@pytest.fixture
def repository():
    return InMemoryUserRepository()


@pytest.fixture
def client(repository, stub_editor):
    """API client; entering the context runs the lifespan (admin seeding)."""
    app = create_app(repository=repository, editor=stub_editor)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers(client):
    response = client.post("/accounts/login", json={"username": "admin", "password": "12345"})
    assert response.status_code == 200
    return {"X-Session-Token": response.json()["token"]}


@pytest.fixture
def workspace_id(client, admin_headers):
    response = client.post("/workspaces", headers=admin_headers)
    assert response.status_code == 201
    return response.json()["id"]

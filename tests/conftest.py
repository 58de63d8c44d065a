import json

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from linktrend.core.config import settings
from linktrend.core.db import Base, Database, get_db
from linktrend.core.exceptions import Unauthenticated
from linktrend.core.storage import BunnyStorage, get_storage
from linktrend.main import create_app
from linktrend.modules.admin import models as admin_models  # noqa: F401
from linktrend.modules.auth import models as auth_models  # noqa: F401
from linktrend.modules.auth.google import IdentityClaims, get_identity_verifier
from linktrend.modules.transactions import models as transaction_models  # noqa: F401
from linktrend.modules.videos import models as video_models  # noqa: F401

CDN_HOSTNAME = "cdn.test"
STORAGE_ZONE = "test-zone"
ADMIN_CREDENTIALS = {"username": "admin", "password": "s3cret"}


class StorageBackend:
    """In-memory stand-in for the storage zone, served through httpx.MockTransport."""

    def __init__(self):
        self.files = {}
        self.deleted = []
        self.fail_deletes = False
        self.status_override = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if self.status_override is not None:
            return httpx.Response(self.status_override, text="forced failure")

        # /<zone>/<key>
        key = request.url.path.split("/", 2)[2]
        if request.method == "PUT":
            self.files[key] = request.content
            return httpx.Response(201, json={"HttpCode": 201, "Message": "File uploaded."})
        if request.method == "DELETE":
            if self.fail_deletes:
                return httpx.Response(500, text="storage unavailable")
            if key not in self.files:
                return httpx.Response(404, text="Object Not Found")
            del self.files[key]
            self.deleted.append(key)
            return httpx.Response(200)
        if request.method == "GET":
            listing = [{"ObjectName": name, "Length": len(data)} for name, data in self.files.items()]
            return httpx.Response(200, content=json.dumps(listing), headers={"Content-Type": "application/json"})
        return httpx.Response(405)


class FakeVerifier:
    def __init__(self):
        self.identities = {}

    def register(self, email: str, name: str) -> str:
        credential = f"google-token-{email}"
        self.identities[credential] = IdentityClaims(email=email, name=name)
        return credential

    async def verify(self, credential: str) -> IdentityClaims:
        claims = self.identities.get(credential)
        if claims is None:
            raise Unauthenticated("Failed to verify Google credentials")
        return claims


@pytest.fixture
async def database(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    db.connect()
    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield db
    await db.disconnect()


@pytest.fixture
def storage_backend():
    return StorageBackend()


@pytest.fixture
def storage(storage_backend):
    return BunnyStorage(
        storage_zone=STORAGE_ZONE,
        api_key="test-key",
        cdn_hostname=CDN_HOSTNAME,
        endpoint="https://storage.test",
        transport=httpx.MockTransport(storage_backend),
    )


@pytest.fixture
def verifier():
    return FakeVerifier()


@pytest.fixture
def admin_credentials(monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_USERNAME", ADMIN_CREDENTIALS["username"])
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", ADMIN_CREDENTIALS["password"])
    return dict(ADMIN_CREDENTIALS)


@pytest.fixture
def build_app(database, storage, verifier, admin_credentials):
    def _build():
        app = create_app(database)

        async def override_get_db():
            async with database.session() as session:
                yield session

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_storage] = lambda: storage
        app.dependency_overrides[get_identity_verifier] = lambda: verifier
        return app

    return _build


@pytest.fixture
def app(build_app):
    return build_app()


@pytest.fixture
async def make_client(app):
    clients = []

    def _make(target_app=None) -> AsyncClient:
        client = AsyncClient(transport=ASGITransport(app=target_app or app), base_url="http://test")
        clients.append(client)
        return client

    yield _make

    for client in clients:
        await client.aclose()


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def login(make_client, verifier):
    async def _login(email: str = "viewer@example.com", name: str = "Test Viewer"):
        user_client = make_client()
        credential = verifier.register(email, name)
        response = await user_client.post("/api/auth/login", json={"credential": credential})
        assert response.status_code == 200, response.text
        return user_client, response.json()

    return _login


@pytest.fixture
async def admin_client(make_client, admin_credentials):
    client = make_client()
    response = await client.post("/api/auth/login", json=admin_credentials)
    assert response.status_code == 200, response.text
    return client


@pytest.fixture
def create_video(client):
    async def _create(**overrides):
        payload = {
            "title": "Sunset over Cox's Bazar",
            "description": "A timelapse",
            "price": 0,
            "creator": "Rahim",
            "creator_id": "creator-1",
            "thumbnail_url": f"https://{CDN_HOSTNAME}/thumbnails/1_sunset.jpg",
            "video_url": f"https://{CDN_HOSTNAME}/videos/1_sunset.mp4",
            "duration": "03:15",
        }
        payload.update(overrides)
        response = await client.post("/api/videos", json=payload)
        assert response.status_code == 200, response.text
        return response.json()

    return _create

"""Tests for the site management API, health endpoint and app wiring."""

import uuid
from pathlib import Path

import pytest
from fastapi import FastAPI, UploadFile
from fastapi.testclient import TestClient

from src.sitehost.api.dependencies import get_site_service, get_sites_config
from src.sitehost.core.config import Settings, SitesConfig
from src.sitehost.core.exceptions import (
    DeploymentInProgressError,
    InvalidUploadError,
    SiteAlreadyExistsError,
    SiteNotFoundError,
    UploadTooLargeError,
)
from src.sitehost.core.health import _storage_status
from src.sitehost.main import create_app
from src.sitehost.models import RoutingMode, Site
from tests.factories import SiteFactory

pytestmark = pytest.mark.unit

CONFIG = SitesConfig(base_domain="example.com", static_root=Path("static"))


class FakeSiteService:
    """In-memory stand-in for SiteService."""

    def __init__(self):
        self.sites: dict[str, Site] = {}
        self.deploy_error: Exception | None = None
        self.uploads: list[tuple[str, bytes]] = []

    async def create_site(self, name: str, subdomain: str, routing_mode: RoutingMode) -> Site:
        if subdomain in self.sites:
            raise SiteAlreadyExistsError(f"Site with subdomain '{subdomain}' already exists")
        site = SiteFactory.pending(name=name, subdomain=subdomain, routing_mode=routing_mode.value)
        self.sites[subdomain] = site
        return site

    async def list_sites(self) -> list[Site]:
        return list(self.sites.values())

    async def get_site(self, subdomain: str) -> Site:
        if subdomain not in self.sites:
            raise SiteNotFoundError(f"Site '{subdomain}' not found")
        return self.sites[subdomain]

    async def update_site(self, subdomain: str, name=None, routing_mode=None) -> Site:
        site = await self.get_site(subdomain)
        if name is not None:
            site.name = name
        if routing_mode is not None:
            site.routing_mode = routing_mode.value
        return site

    async def delete_site(self, subdomain: str) -> None:
        await self.get_site(subdomain)
        del self.sites[subdomain]

    async def schedule_deployment(self, subdomain: str, upload: UploadFile) -> str:
        await self.get_site(subdomain)
        if self.deploy_error is not None:
            raise self.deploy_error
        self.uploads.append((subdomain, await upload.read()))
        return f"site-deploy-{subdomain}"


@pytest.fixture
def service() -> FakeSiteService:
    return FakeSiteService()


@pytest.fixture
def app(service: FakeSiteService) -> FastAPI:
    async def lookup(subdomain: str) -> Site | None:
        return service.sites.get(subdomain)

    app = create_app(site_lookup=lookup)
    app.dependency_overrides[get_site_service] = lambda: service
    app.dependency_overrides[get_sites_config] = lambda: CONFIG
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


def archive_file(data: bytes = b"\x1f\x8b archive") -> dict:
    return {"archive": ("site.tar.gz", data, "application/gzip")}


class TestSiteCrud:
    def test_create_site(self, client: TestClient):
        response = client.post(
            "/api/v1/sites", json={"name": "Acme", "subdomain": "acme", "routing_mode": "both"}
        )

        assert response.status_code == 201
        data = response.json()
        assert data["subdomain"] == "acme"
        assert data["routing_mode"] == "both"
        assert data["deployment_status"] == "pending"
        assert data["url"] == "https://acme.example.com"
        assert data["subpath_url"] == "https://example.com/sites/acme"

    def test_create_duplicate(self, client: TestClient):
        client.post("/api/v1/sites", json={"name": "Acme", "subdomain": "acme"})

        response = client.post("/api/v1/sites", json={"name": "Other", "subdomain": "acme"})

        assert response.status_code == 409
        assert response.json()["request_id"]

    def test_create_rejects_invalid_subdomain(self, client: TestClient):
        response = client.post("/api/v1/sites", json={"name": "Acme", "subdomain": "Acme_Site"})
        assert response.status_code == 422

    def test_list_sites(self, client: TestClient):
        client.post("/api/v1/sites", json={"name": "Acme", "subdomain": "acme"})
        client.post("/api/v1/sites", json={"name": "Beta", "subdomain": "beta"})

        response = client.get("/api/v1/sites")

        assert response.status_code == 200
        assert [site["subdomain"] for site in response.json()] == ["acme", "beta"]

    def test_get_missing_site(self, client: TestClient):
        response = client.get("/api/v1/sites/ghost")

        assert response.status_code == 404
        data = response.json()
        assert data["detail"] == "Site 'ghost' not found"
        assert data["request_id"]

    def test_update_routing_mode(self, client: TestClient):
        client.post("/api/v1/sites", json={"name": "Acme", "subdomain": "acme"})

        response = client.patch("/api/v1/sites/acme", json={"routing_mode": "subpath"})

        assert response.status_code == 200
        assert response.json()["routing_mode"] == "subpath"
        assert response.json()["url"] == "https://example.com/sites/acme"

    def test_delete_site(self, client: TestClient, service: FakeSiteService):
        client.post("/api/v1/sites", json={"name": "Acme", "subdomain": "acme"})

        response = client.delete("/api/v1/sites/acme")

        assert response.status_code == 204
        assert service.sites == {}

    def test_status(self, client: TestClient, service: FakeSiteService):
        service.sites["acme"] = SiteFactory.failed(subdomain="acme")

        response = client.get("/api/v1/sites/acme/status")

        assert response.status_code == 200
        assert response.json()["status"] == "failed"
        assert response.json()["error"] == "no HTML files found"


class TestDeployments:
    def test_accepted(self, client: TestClient, service: FakeSiteService):
        service.sites["acme"] = SiteFactory.pending(subdomain="acme")

        response = client.post(
            "/api/v1/sites/acme/deployments", files=archive_file(b"\x1f\x8bdata")
        )

        assert response.status_code == 202
        assert response.json() == {
            "workflow_id": "site-deploy-acme",
            "subdomain": "acme",
            "status": "pending",
        }
        assert service.uploads == [("acme", b"\x1f\x8bdata")]

    def test_missing_archive_field(self, client: TestClient, service: FakeSiteService):
        service.sites["acme"] = SiteFactory.pending(subdomain="acme")
        response = client.post("/api/v1/sites/acme/deployments")
        assert response.status_code == 422

    def test_unknown_site(self, client: TestClient):
        response = client.post("/api/v1/sites/ghost/deployments", files=archive_file())
        assert response.status_code == 404

    @pytest.mark.parametrize(
        ("error", "status_code"),
        [
            (InvalidUploadError("Invalid file format"), 400),
            (UploadTooLargeError("Archive exceeds the 500.0 MB upload limit"), 413),
            (DeploymentInProgressError("A deployment for 'acme' is already in progress"), 409),
        ],
    )
    def test_rejections(
        self, client: TestClient, service: FakeSiteService, error: Exception, status_code: int
    ):
        service.sites["acme"] = SiteFactory.pending(subdomain="acme")
        service.deploy_error = error

        response = client.post("/api/v1/sites/acme/deployments", files=archive_file())

        assert response.status_code == status_code
        assert response.json()["detail"] == str(error)


class TestAdminKey:
    @pytest.fixture(autouse=True)
    def admin_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        settings = Settings(
            _env_file=None,
            database_url="postgresql+asyncpg://localhost/sitehost",
            admin_api_key="s3cret",
        )
        monkeypatch.setattr("src.sitehost.api.dependencies.auth.get_settings", lambda: settings)

    def test_missing_key(self, client: TestClient):
        response = client.get("/api/v1/sites")
        assert response.status_code == 401

    def test_wrong_key(self, client: TestClient):
        response = client.get("/api/v1/sites", headers={"X-Admin-Key": "guess"})
        assert response.status_code == 401

    def test_valid_key(self, client: TestClient):
        response = client.get("/api/v1/sites", headers={"X-Admin-Key": "s3cret"})
        assert response.status_code == 200


class TestAppWiring:
    def test_undeployed_site_host_falls_through(
        self, client: TestClient, service: FakeSiteService
    ):
        service.sites["acme"] = SiteFactory.pending(subdomain="acme")

        response = client.get("/api/v1/sites", headers={"host": "acme.localhost"})

        assert response.status_code == 200

    def test_deployed_site_host_is_served_by_middleware(
        self, client: TestClient, service: FakeSiteService
    ):
        service.sites["zzz-unwritten"] = SiteFactory.build(subdomain="zzz-unwritten")

        response = client.get("/missing.html", headers={"host": "zzz-unwritten.localhost"})

        assert response.status_code == 404
        assert "text/html" in response.headers["content-type"]
        assert "Page not found" in response.text

    def test_request_id_header(self, client: TestClient):
        request_id = str(uuid.uuid4())
        response = client.get("/api/v1/sites/ghost", headers={"X-Request-ID": request_id})
        assert response.json()["request_id"] == request_id


class TestHealth:
    @pytest.fixture
    def checks(self, monkeypatch: pytest.MonkeyPatch):
        results = {"database": "healthy", "storage": "healthy", "temporal": "healthy"}

        async def check_database() -> str:
            return results["database"]

        async def check_temporal() -> str:
            return results["temporal"]

        async def check_storage() -> str:
            return results["storage"]

        monkeypatch.setattr("src.sitehost.core.health.check_database", check_database)
        monkeypatch.setattr("src.sitehost.core.health.check_temporal", check_temporal)
        monkeypatch.setattr("src.sitehost.core.health.check_storage", check_storage)
        return results

    def test_healthy(self, client: TestClient, checks):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["cached"] is False

    def test_cached(self, client: TestClient, checks):
        client.get("/health")
        response = client.get("/health")
        assert response.json()["cached"] is True

    def test_temporal_down_is_degraded(self, client: TestClient, checks):
        checks["temporal"] = "unhealthy: connection refused"

        response = client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "degraded"

    def test_database_down_is_unhealthy(self, client: TestClient, checks):
        checks["database"] = "unhealthy: connection refused"

        response = client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"

    def test_unreadable_static_root_is_unhealthy(self, client: TestClient, checks):
        checks["storage"] = "unhealthy: static/sites is not a directory"

        response = client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"


def test_storage_status(tmp_path: Path):
    assert _storage_status(str(tmp_path / "missing")) == "healthy"
    assert _storage_status(str(tmp_path)) == "healthy"
    (tmp_path / "file").write_text("x")
    assert _storage_status(str(tmp_path / "file")).startswith("unhealthy")


def test_validation_errors_include_request_id(client: TestClient):
    response = client.post("/api/v1/sites", json={"name": "Acme"})

    assert response.status_code == 422
    assert response.json()["request_id"]
    assert response.json()["detail"][0]["loc"] == ["body", "subdomain"]

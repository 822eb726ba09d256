from unittest.mock import create_autospec

from fastapi.testclient import TestClient

from sitegrades.core.exceptions.exceptions import AppError
from sitegrades.main import app
from sitegrades.models.site import Site
from sitegrades.services.site_store import SiteStore, get_site_store


class ResolverError(AppError):
    pass


def test_lifespan_starts_and_stops():
    with TestClient(app) as client:
        assert client.get("/openapi.json").status_code == 200


def test_unhandled_app_error_answers_500(client):
    broken = create_autospec(SiteStore, instance=True)
    broken.fetch_site.return_value = Site(domain="example.com")
    broken.fetch_servers.side_effect = ResolverError("resolver timeout")
    app.dependency_overrides[get_site_store] = lambda: broken

    resp = client.get("/servers/example.com")

    assert resp.status_code == 500
    assert resp.json() == {"detail": "Internal server error"}


def test_large_responses_are_gzipped(client, store):
    for i in range(12):
        store.insert_site(Site(domain=f"site{i:02d}.com", title="A fairly long site title for padding"))

    resp = client.get("/servers", headers={"Accept-Encoding": "gzip"})

    assert resp.status_code == 200
    assert resp.headers["content-encoding"] == "gzip"
    assert len(resp.json()) == 12

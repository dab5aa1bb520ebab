"""
Integration tests for site management endpoints.
"""
from unittest.mock import patch

import pytest
from httpx import AsyncClient

from cmsites.core.exceptions import SeedingError
from cmsites.services.seeder import SiteSeeder


async def failing_seed(self, site):
    raise SeedingError("Could not create default content", site)


class TestCreateSite:
    """Test POST /api/v1/sites."""

    @pytest.mark.asyncio
    async def test_create_site(self, async_client: AsyncClient):
        response = await async_client.post("/api/v1/sites", json={"hostname": "My-Site.com"})

        assert response.status_code == 201
        data = response.json()
        assert data["identifier"] == "my-site-com"
        assert data["label"] == "My Site Com"
        assert data["hostname"] == "My-Site.com"
        assert data["path"] == ""
        assert data["is_mirrored"] is False
        assert data["url"] == "//My-Site.com/"

    @pytest.mark.asyncio
    async def test_create_site_seeds_content(self, async_client: AsyncClient):
        response = await async_client.post("/api/v1/sites", json={"identifier": "academy"})
        site_id = response.json()["id"]

        layouts = (await async_client.get(f"/api/v1/sites/{site_id}/layouts")).json()
        pages = (await async_client.get(f"/api/v1/sites/{site_id}/pages")).json()
        assert [l["identifier"] for l in layouts] == ["module", "lesson", "activity"]
        assert [(p["full_path"], p["label"]) for p in pages] == [("/", "Academy")]

    @pytest.mark.asyncio
    async def test_create_site_with_path(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/v1/sites",
            json={"identifier": "blog", "hostname": "example.com", "path": "blog//en/"},
        )

        assert response.status_code == 201
        assert response.json()["path"] == "blog/en"
        assert response.json()["url"] == "//example.com/blog/en"

    @pytest.mark.asyncio
    async def test_create_site_all_blank(self, async_client: AsyncClient):
        response = await async_client.post("/api/v1/sites", json={})

        assert response.status_code == 422
        errors = response.json()["errors"]
        assert errors["identifier"] == ["can't be blank"]
        assert errors["hostname"] == ["can't be blank"]

    @pytest.mark.asyncio
    async def test_create_site_duplicate_host_and_path(self, async_client: AsyncClient):
        await async_client.post("/api/v1/sites", json={"hostname": "example.com"})

        response = await async_client.post(
            "/api/v1/sites", json={"identifier": "second", "hostname": "example.com"}
        )

        assert response.status_code == 422
        assert response.json()["errors"] == {"hostname": ["has already been taken"]}

    @pytest.mark.asyncio
    async def test_create_site_seeding_failure(self, async_client: AsyncClient):
        with patch.object(SiteSeeder, "create_default_layouts_and_page", failing_seed):
            response = await async_client.post("/api/v1/sites", json={"identifier": "academy"})

        assert response.status_code == 500
        site_id = response.json()["detail"]["site_id"]

        response = await async_client.get(f"/api/v1/sites/{site_id}")
        assert response.status_code == 200
        assert response.json()["identifier"] == "academy"

        response = await async_client.post(f"/api/v1/sites/{site_id}/seed")
        assert response.status_code == 200
        layouts = (await async_client.get(f"/api/v1/sites/{site_id}/layouts")).json()
        assert len(layouts) == 3


class TestSiteEndpoints:
    """Test the remaining site endpoints."""

    @pytest.mark.asyncio
    async def test_list_sites(self, async_client: AsyncClient):
        await async_client.post("/api/v1/sites", json={"hostname": "one.test"})
        await async_client.post("/api/v1/sites", json={"hostname": "two.test"})

        response = await async_client.get("/api/v1/sites", params={"per_page": 1})

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert data["pages"] == 2
        assert [s["hostname"] for s in data["items"]] == ["one.test"]

    @pytest.mark.asyncio
    async def test_get_site_not_found(self, async_client: AsyncClient, random_id: str):
        response = await async_client.get(f"/api/v1/sites/{random_id}")

        assert response.status_code == 404
        assert response.json()["detail"] == "Site not found"

    @pytest.mark.asyncio
    async def test_update_site(self, async_client: AsyncClient):
        site_id = (await async_client.post("/api/v1/sites", json={"hostname": "one.test"})).json()["id"]

        response = await async_client.patch(f"/api/v1/sites/{site_id}", json={"label": "Renamed"})

        assert response.status_code == 200
        assert response.json()["label"] == "Renamed"
        assert response.json()["identifier"] == "one-test"

    @pytest.mark.asyncio
    async def test_update_site_invalid(self, async_client: AsyncClient):
        site_id = (await async_client.post("/api/v1/sites", json={"hostname": "one.test"})).json()["id"]

        response = await async_client.patch(f"/api/v1/sites/{site_id}", json={"hostname": "bad host"})

        assert response.status_code == 422
        assert response.json()["errors"] == {"hostname": ["is invalid"]}

    @pytest.mark.asyncio
    async def test_delete_site(self, async_client: AsyncClient):
        site_id = (await async_client.post("/api/v1/sites", json={"hostname": "one.test"})).json()["id"]

        response = await async_client.delete(f"/api/v1/sites/{site_id}")

        assert response.status_code == 200
        assert (await async_client.get(f"/api/v1/sites/{site_id}")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_site_not_found(self, async_client: AsyncClient, random_id: str):
        response = await async_client.delete(f"/api/v1/sites/{random_id}")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_seed_already_seeded(self, async_client: AsyncClient):
        site_id = (await async_client.post("/api/v1/sites", json={"hostname": "one.test"})).json()["id"]

        response = await async_client.post(f"/api/v1/sites/{site_id}/seed")

        assert response.status_code == 409


class TestMirroredSites:
    """Test mirroring through the API."""

    @pytest.mark.asyncio
    async def test_third_mirrored_site(self, async_client: AsyncClient):
        for identifier in ("one", "two"):
            response = await async_client.post(
                "/api/v1/sites", json={"identifier": identifier, "is_mirrored": True}
            )
            assert response.status_code == 201

        response = await async_client.post(
            "/api/v1/sites", json={"identifier": "three", "is_mirrored": True}
        )

        assert response.status_code == 422
        assert "is_mirrored" in response.json()["errors"]

    @pytest.mark.asyncio
    async def test_enabling_mirror_copies_structure(self, async_client: AsyncClient):
        one = (await async_client.post(
            "/api/v1/sites", json={"identifier": "one", "is_mirrored": True}
        )).json()["id"]
        two = (await async_client.post("/api/v1/sites", json={"identifier": "two"})).json()["id"]
        await async_client.post(
            f"/api/v1/sites/{two}/snippets",
            json={"identifier": "footer", "label": "Footer", "content": "(c)"},
        )

        response = await async_client.patch(f"/api/v1/sites/{two}", json={"is_mirrored": True})

        assert response.status_code == 200
        snippets = (await async_client.get(f"/api/v1/sites/{one}/snippets")).json()
        assert [(s["identifier"], s["content"]) for s in snippets] == [("footer", "(c)")]

    @pytest.mark.asyncio
    async def test_deleting_mirrored_site_keeps_partner(self, async_client: AsyncClient):
        one = (await async_client.post(
            "/api/v1/sites", json={"identifier": "one", "is_mirrored": True}
        )).json()["id"]
        two = (await async_client.post(
            "/api/v1/sites", json={"identifier": "two", "is_mirrored": True}
        )).json()["id"]

        response = await async_client.delete(f"/api/v1/sites/{one}")

        assert response.status_code == 200
        layouts = (await async_client.get(f"/api/v1/sites/{two}/layouts")).json()
        assert len(layouts) == 3

    @pytest.mark.asyncio
    async def test_seeding_mirrored_site_copies_partner_structure(self, async_client: AsyncClient):
        one = (await async_client.post(
            "/api/v1/sites", json={"identifier": "one", "is_mirrored": True}
        )).json()["id"]
        await async_client.post(
            f"/api/v1/sites/{one}/snippets",
            json={"identifier": "footer", "label": "Footer", "content": "(c)"},
        )
        with patch.object(SiteSeeder, "create_default_layouts_and_page", failing_seed):
            response = await async_client.post(
                "/api/v1/sites", json={"identifier": "two", "is_mirrored": True}
            )
        two = response.json()["detail"]["site_id"]

        response = await async_client.post(f"/api/v1/sites/{two}/seed")

        assert response.status_code == 200
        assert response.json()["is_mirrored"] is True
        snippets = (await async_client.get(f"/api/v1/sites/{two}/snippets")).json()
        assert [(s["identifier"], s["content"]) for s in snippets] == [("footer", "(c)")]

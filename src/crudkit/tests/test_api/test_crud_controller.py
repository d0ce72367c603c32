"""HTTP-level tests for the Widget CRUD routes built by CrudController."""

import pytest
from fastapi import FastAPI

from crudkit.api.v1.crud_controller import CrudController, Operation
from crudkit.main import create_app
from crudkit.services.base_service import BaseService

from ..test_fixtures.models import Widget, WidgetCreate, WidgetRead
from ..test_fixtures.service_fixtures import InMemoryRepository

WIDGET = {"sku": "W-100", "name": "Flange", "quantity": 2}


@pytest.mark.asyncio
class TestCreateRoute:

    async def test_create_returns_201_with_envelope(self, client):
        """
        Behavior:
            - POST / with a valid body stores the widget.
            - 201 and a SUCCESS envelope; `error` is omitted, `data.id` is assigned.
        """
        resp = await client.post("/widgets/", json=WIDGET)

        assert resp.status_code == 201
        body = resp.json()
        assert body["status"] == "SUCCESS"
        assert "error" not in body
        assert body["data"]["id"] is not None
        assert body["data"]["name"] == "Flange"

    async def test_create_ignores_id_in_body(self, client):
        resp = await client.post("/widgets/", json={**WIDGET, "id": 500})

        assert resp.status_code == 201
        assert resp.json()["data"]["id"] != 500

    async def test_duplicate_create_returns_403_with_one_detail(self, client):
        await client.post("/widgets/", json=WIDGET)

        resp = await client.post("/widgets/", json=WIDGET)

        assert resp.status_code == 403
        body = resp.json()
        assert body["status"] == "ERROR"
        assert "data" not in body
        assert body["error"] == [{"field": "Detail", "message": "Widget already exists"}]

    async def test_unique_violation_with_different_values_returns_403(self, client):
        """Same sku, different name: passes the value check, stopped by the unique constraint."""
        await client.post("/widgets/", json=WIDGET)

        resp = await client.post("/widgets/", json={**WIDGET, "name": "Other"})

        assert resp.status_code == 403
        assert resp.json()["error"][0]["message"] == "Widget already exists"

    async def test_invalid_body_returns_422_envelope(self, client):
        resp = await client.post("/widgets/", json={"sku": "", "quantity": -1})

        assert resp.status_code == 422
        body = resp.json()
        assert body["status"] == "ERROR"
        fields = {entry["field"] for entry in body["error"]}
        assert {"sku", "name", "quantity"} <= fields


@pytest.mark.asyncio
class TestReadRoutes:

    async def test_get_by_id(self, client):
        created = (await client.post("/widgets/", json=WIDGET)).json()["data"]

        resp = await client.get(f"/widgets/{created['id']}")

        assert resp.status_code == 200
        assert resp.json() == {"data": created, "status": "SUCCESS"}

    async def test_get_missing_returns_404_with_id_as_message(self, client):
        resp = await client.get("/widgets/12345")

        assert resp.status_code == 404
        assert resp.json() == {
            "status": "ERROR",
            "error": [{"field": "Detail", "message": "12345"}],
        }

    async def test_get_all_empty(self, client):
        resp = await client.get("/widgets/")

        assert resp.status_code == 200
        assert resp.json() == {"data": [], "status": "SUCCESS"}

    async def test_get_all_lists_created(self, client):
        for idx in range(3):
            await client.post("/widgets/", json={**WIDGET, "sku": f"W-{idx}"})

        resp = await client.get("/widgets/")

        assert [w["sku"] for w in resp.json()["data"]] == ["W-0", "W-1", "W-2"]


@pytest.mark.asyncio
class TestUpdateRoute:

    async def test_update_keeps_path_key(self, client):
        created = (await client.post("/widgets/", json=WIDGET)).json()["data"]

        resp = await client.put(
            f"/widgets/{created['id']}",
            json={**WIDGET, "name": "Renamed", "id": created["id"] + 100},
        )

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["id"] == created["id"]
        assert data["name"] == "Renamed"

    async def test_update_is_persisted(self, client):
        created = (await client.post("/widgets/", json=WIDGET)).json()["data"]
        await client.put(f"/widgets/{created['id']}", json={**WIDGET, "quantity": 9})

        resp = await client.get(f"/widgets/{created['id']}")

        assert resp.json()["data"]["quantity"] == 9

    async def test_update_missing_returns_404(self, client):
        resp = await client.put("/widgets/77", json=WIDGET)

        assert resp.status_code == 404
        assert resp.json()["error"][0]["message"] == "77"


@pytest.mark.asyncio
class TestDeleteRoute:

    async def test_delete_returns_204_empty_body(self, client):
        created = (await client.post("/widgets/", json=WIDGET)).json()["data"]

        resp = await client.delete(f"/widgets/{created['id']}")

        assert resp.status_code == 204
        assert resp.content == b""

    async def test_get_after_delete_returns_404(self, client):
        created = (await client.post("/widgets/", json=WIDGET)).json()["data"]
        await client.delete(f"/widgets/{created['id']}")

        resp = await client.get(f"/widgets/{created['id']}")

        assert resp.status_code == 404

    async def test_delete_missing_returns_404(self, client):
        resp = await client.delete("/widgets/3")

        assert resp.status_code == 404


@pytest.mark.asyncio
class TestDisabledOperations:

    @pytest.fixture
    def app(self, app: FastAPI) -> FastAPI:
        """Adds a read-only mount of the same model next to the full one."""
        read_only = CrudController(
            Widget,
            create_schema=WidgetCreate,
            read_schema=WidgetRead,
            prefix="/catalog",
            operations={Operation.READ, Operation.READ_ALL},
        )
        app.include_router(read_only.router)
        return app

    async def test_disabled_verb_returns_405_envelope(self, client):
        resp = await client.post("/catalog/", json=WIDGET)

        assert resp.status_code == 405
        body = resp.json()
        assert body["status"] == "ERROR"
        assert body["error"][0]["field"] == "Detail"
        assert "create" in body["error"][0]["message"]

    async def test_enabled_verbs_still_work(self, client):
        await client.post("/widgets/", json=WIDGET)

        resp = await client.get("/catalog/")

        assert resp.status_code == 200
        assert len(resp.json()["data"]) == 1

    async def test_disabled_delete_leaves_row(self, client):
        created = (await client.post("/widgets/", json=WIDGET)).json()["data"]

        resp = await client.delete(f"/catalog/{created['id']}")

        assert resp.status_code == 405
        assert (await client.get(f"/widgets/{created['id']}")).status_code == 200

    async def test_disabled_verb_wins_over_invalid_body(self, client):
        """
        Behavior:
            - The operation check runs before body validation.
            - A disabled POST with an invalid body answers 405, not 422.
        """
        resp = await client.post("/catalog/", json={"sku": "", "quantity": -1})

        assert resp.status_code == 405
        assert resp.json()["status"] == "ERROR"

    async def test_disabled_verb_wins_over_invalid_path(self, client):
        resp = await client.put("/catalog/not-a-number", json=WIDGET)

        assert resp.status_code == 405


class NullDeleteService(BaseService):
    """A service whose delete reports nothing, the one way to reach the 403 branch."""

    async def delete(self, entity_id):
        return None


def provide_null_delete_service() -> BaseService:
    return NullDeleteService(InMemoryRepository(), entity_name="Widget")


@pytest.mark.asyncio
class TestDeleteWithoutEnvelope:

    @pytest.fixture
    def app(self, app: FastAPI) -> FastAPI:
        controller = CrudController(
            Widget,
            create_schema=WidgetCreate,
            read_schema=WidgetRead,
            prefix="/ledger",
            service_provider=provide_null_delete_service,
        )
        app.include_router(controller.router)
        return app

    async def test_delete_returns_403_empty_body(self, client):
        """
        Behavior:
            - When the service returns no envelope, DELETE answers 403.
            - The body is empty, like the 204 case.
        """
        resp = await client.delete("/ledger/1")

        assert resp.status_code == 403
        assert resp.content == b""


def test_openapi_lists_crud_paths(test_settings, widget_controller):
    app = create_app(test_settings, controllers=[widget_controller])

    paths = app.openapi()["paths"]

    assert set(paths["/widgets/"]) == {"get", "post"}
    assert set(paths["/widgets/{entity_id}"]) == {"get", "put", "delete"}

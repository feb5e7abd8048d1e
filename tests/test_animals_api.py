"""Tests for the Animal Registry API endpoints."""

import pytest
from fastapi.testclient import TestClient

from animal_registry.api.v1.endpoints.animals import limiter
from animal_registry.config import settings
from animal_registry.main import app
from animal_registry.services.registry_service import RegistryService, get_registry

client = TestClient(app)

HEADERS = {"X-API-Key": settings.API_KEY}

REX = {"kind": "dog", "name": "Rex", "birthDate": "2020-01-01", "commands": ["sit", "stay"]}


@pytest.fixture(autouse=True)
def registry(tmp_path):
    """Serve a fresh registry backed by a temporary file for each test."""
    storage = getattr(limiter, "_storage", None)
    if storage is not None and hasattr(storage, "reset"):
        storage.reset()
    registry = RegistryService(tmp_path / "animals.json")
    app.dependency_overrides[get_registry] = lambda: registry
    yield registry
    app.dependency_overrides.clear()


def _create(payload: dict, headers: dict = HEADERS):
    return client.post("/api/v1/animals", json=payload, headers=headers)


class TestHealthCheck:
    """Health endpoint tests (no auth required)."""

    def test_health_returns_ok(self):
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestApiKeyAuth:
    """API key validation tests."""

    def test_missing_api_key(self):
        response = client.get("/api/v1/animals")
        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_wrong_api_key(self):
        response = client.get("/api/v1/animals", headers={"X-API-Key": "wrong-key"})
        assert response.status_code == 401


class TestCreateAnimal:
    """POST /api/v1/animals tests."""

    def test_create(self):
        response = _create(REX)
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["id"] == 1
        assert data["kind"] == "dog"
        assert data["typeLabel"] == "Dog"
        assert data["category"] == "pet"
        assert data["birthDate"] == "2020-01-01"
        assert data["commands"] == ["sit", "stay"]
        assert data["display"].startswith("1. Dog Rex, born 2020-01-01 (")

    def test_create_other_kind_same_name(self):
        _create(REX)
        response = _create({**REX, "kind": "cat", "commands": ["stay", "sit"]})
        assert response.status_code == 201
        assert response.json()["data"]["id"] == 2

    def test_duplicate_conflict(self):
        _create(REX)
        response = _create({**REX, "name": "REX", "commands": ["Stay", "sit"]})
        assert response.status_code == 409
        error = response.json()["detail"]["error"]
        assert error["code"] == "duplicate_found"
        assert error["existingId"] == 1

    def test_duplicate_allowed(self):
        _create(REX)
        _create(REX)
        response = _create({**REX, "allowDuplicate": True})
        assert response.status_code == 201
        assert response.json()["data"]["id"] == 2

    def test_invalid_kind(self):
        response = _create({**REX, "kind": "unicorn"})
        assert response.status_code == 422

    def test_invalid_date(self):
        response = _create({**REX, "birthDate": "2020-13-01"})
        assert response.status_code == 422

    def test_russian_display(self):
        response = client.post("/api/v1/animals", json=REX, headers={**HEADERS, "Accept-Language": "ru-RU,ru"})
        assert response.json()["data"]["display"].startswith("1. Собака Rex, рожд. 2020-01-01")


class TestListAnimals:
    """Listing endpoints."""

    def test_list_in_registry_order(self):
        _create({**REX, "birthDate": "2021-01-01"})
        _create({**REX, "kind": "horse", "name": "Bolt", "birthDate": "2015-01-01"})
        response = client.get("/api/v1/animals", headers=HEADERS)
        body = response.json()
        assert body["count"] == 2
        assert [a["name"] for a in body["data"]] == ["Rex", "Bolt"]

    def test_filter_by_kind(self):
        _create(REX)
        _create({**REX, "kind": "cat", "name": "Tom"})
        response = client.get("/api/v1/animals?kind=cat", headers=HEADERS)
        body = response.json()
        assert body["count"] == 1
        assert body["data"][0]["name"] == "Tom"

    def test_filter_by_invalid_kind(self):
        response = client.get("/api/v1/animals?kind=dragon", headers=HEADERS)
        assert response.status_code == 422

    def test_by_birth_date(self):
        _create({**REX, "name": "Young", "birthDate": "2023-01-01"})
        _create({**REX, "name": "Old", "birthDate": "2010-01-01"})
        _create({**REX, "name": "Twin", "birthDate": "2023-01-01"})
        response = client.get("/api/v1/animals/by-birth-date", headers=HEADERS)
        assert [a["name"] for a in response.json()["data"]] == ["Old", "Young", "Twin"]

    def test_summary(self):
        _create(REX)
        _create({**REX, "kind": "camel", "name": "Sahara"})
        response = client.get("/api/v1/animals/summary", headers=HEADERS)
        body = response.json()
        assert body["total"] == 2
        assert body["pets"] == 1
        assert body["packAnimals"] == 1
        assert body["byKind"]["camel"] == 1
        assert body["byKind"]["hamster"] == 0
        assert body["lines"][0] == "Total animals: 2"
        assert "    Hamsters: 0" not in body["lines"]

    def test_summary_empty(self):
        response = client.get("/api/v1/animals/summary", headers=HEADERS)
        assert response.json()["lines"] == ["No animals registered."]


class TestAnimalById:
    """Lookup, edit and delete."""

    def test_get(self):
        _create(REX)
        response = client.get("/api/v1/animals/1", headers=HEADERS)
        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Rex"

    def test_get_missing(self):
        response = client.get("/api/v1/animals/42", headers=HEADERS)
        assert response.status_code == 404
        assert response.json()["detail"]["error"]["code"] == "animal_not_found"

    def test_edit(self):
        _create(REX)
        response = client.put(
            "/api/v1/animals/1",
            json={"name": "Max", "birthDate": "2019-05-05", "commands": ["fetch"]},
            headers=HEADERS,
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == 1
        assert data["kind"] == "dog"
        assert data["name"] == "Max"
        assert data["commands"] == ["fetch"]

    def test_edit_missing(self):
        response = client.put(
            "/api/v1/animals/9",
            json={"name": "Max", "birthDate": "2019-05-05"},
            headers=HEADERS,
        )
        assert response.status_code == 404

    def test_delete_does_not_reuse_id(self):
        _create(REX)
        _create({**REX, "kind": "cat"})
        response = client.delete("/api/v1/animals/1", headers=HEADERS)
        assert response.status_code == 204
        assert client.get("/api/v1/animals/1", headers=HEADERS).status_code == 404
        created = _create({**REX, "kind": "horse"})
        assert created.json()["data"]["id"] == 3

    def test_delete_missing(self):
        response = client.delete("/api/v1/animals/1", headers=HEADERS)
        assert response.status_code == 404


class TestCommands:
    """Listing and training commands."""

    def test_list_commands(self):
        _create(REX)
        response = client.get("/api/v1/animals/1/commands", headers=HEADERS)
        assert response.json()["commands"] == ["sit", "stay"]

    def test_train(self):
        _create(REX)
        response = client.post("/api/v1/animals/1/commands", json={"command": " roll "}, headers=HEADERS)
        assert response.status_code == 201
        assert response.json()["commands"] == ["sit", "stay", "roll"]

    def test_train_already_known(self):
        _create(REX)
        response = client.post("/api/v1/animals/1/commands", json={"command": "SIT"}, headers=HEADERS)
        assert response.status_code == 409
        assert response.json()["detail"]["error"]["code"] == "command_already_known"
        commands = client.get("/api/v1/animals/1/commands", headers=HEADERS).json()["commands"]
        assert commands == ["sit", "stay"]

    def test_train_blank(self):
        _create(REX)
        response = client.post("/api/v1/animals/1/commands", json={"command": "   "}, headers=HEADERS)
        assert response.status_code == 400
        assert response.json()["detail"]["error"]["code"] == "invalid_command"

    def test_train_missing_animal(self):
        response = client.post("/api/v1/animals/5/commands", json={"command": "sit"}, headers=HEADERS)
        assert response.status_code == 404


class TestRegistryFile:
    """Save and load."""

    def test_save_and_load(self, registry):
        _create(REX)
        _create({**REX, "kind": "donkey", "name": "Eeyore"})
        response = client.post("/api/v1/registry/save", headers=HEADERS)
        assert response.status_code == 200
        assert response.json()["count"] == 2
        assert registry.path.exists()

        client.delete("/api/v1/animals/2", headers=HEADERS)
        response = client.post("/api/v1/registry/load", headers=HEADERS)
        body = response.json()
        assert body["count"] == 2
        assert body["nextId"] == 3
        names = [a["name"] for a in client.get("/api/v1/animals", headers=HEADERS).json()["data"]]
        assert names == ["Rex", "Eeyore"]

    def test_load_missing_file(self):
        _create(REX)
        response = client.post("/api/v1/registry/load", headers=HEADERS)
        assert response.status_code == 500
        assert response.json()["detail"]["error"]["code"] == "io_failure"
        assert client.get("/api/v1/animals", headers=HEADERS).json()["count"] == 1

    def test_load_corrupt_file(self, registry):
        registry.path.write_text("{broken", encoding="utf-8")
        response = client.post("/api/v1/registry/load", headers=HEADERS)
        assert response.status_code == 500
        assert response.json()["detail"]["error"]["code"] == "corrupt_data"

"""Integration tests for projects, profiles, auth and the end-to-end workflow."""

import pytest


class TestProjects:

    def test_create_trims_name(self, client):
        response = client.post("/api/projects", json={"name": "  Cozinha Silva  ", "client_phone": "912345678"})

        assert response.status_code == 201
        project = response.json()
        assert project["name"] == "Cozinha Silva"
        assert project["status"] == "ACTIVE"
        assert project["client_phone"] == "912345678"

    def test_blank_name(self, client):
        response = client.post("/api/projects", json={"name": "   "})
        assert response.status_code == 400
        assert response.json()["error"] == "bad_request"

    def test_geral_name_is_reserved(self, client):
        response = client.post("/api/projects", json={"name": "  geral "})
        assert response.status_code == 400
        assert response.json()["error"] == "bad_request"

    def test_get_missing(self, client):
        response = client.get("/api/projects/missing")
        assert response.status_code == 404
        assert response.json() == {"error": "not_found", "message": "Project missing not found"}

    def test_list_newest_first_with_counts(self, client, create_project, upload):
        first = create_project("A")
        second = create_project("B")
        document = upload()
        client.patch(f"/api/documents/{document['id']}/assign", json={"project_id": first["id"]})

        projects = client.get("/api/projects").json()
        ids = [p["id"] for p in projects]
        assert ids.index(second["id"]) < ids.index(first["id"])
        counts = {p["id"]: p["document_count"] for p in projects}
        assert counts[first["id"]] == 1
        assert counts[second["id"]] == 0

    def test_status_filter(self, client, create_project):
        project = create_project()
        response = client.patch(f"/api/projects/{project['id']}/status", json={"status": "ARCHIVED"})
        assert response.json()["status"] == "ARCHIVED"

        archived = client.get("/api/projects", params={"status": "archived"}).json()
        assert [p["id"] for p in archived] == [project["id"]]
        active_ids = [p["id"] for p in client.get("/api/projects", params={"status": "ACTIVE"}).json()]
        assert project["id"] not in active_ids

    def test_invalid_status_filter(self, client):
        assert client.get("/api/projects", params={"status": "closed"}).status_code == 400

    def test_update_details(self, client, create_project):
        project = create_project(address="Rua A")
        response = client.patch(f"/api/projects/{project['id']}/details", json={"client_phone": "210000000"})

        body = response.json()
        assert body["client_phone"] == "210000000"
        assert body["address"] == "Rua A"

    def test_delete_returns_documents_to_inbox(self, client, create_project, upload):
        project = create_project()
        document = upload()
        client.patch(f"/api/documents/{document['id']}/assign", json={"project_id": project["id"]})

        assert client.delete(f"/api/projects/{project['id']}").status_code == 204
        assert client.get(f"/api/projects/{project['id']}").status_code == 404
        assert client.get(f"/api/documents/{document['id']}").json()["project_id"] is None


class TestProfiles:

    def test_upsert_photo(self, client):
        assert client.get("/api/profiles").json() == []

        client.put("/api/profiles/Rui/photo", json={"photo_url": "/files/rui.jpg"})
        client.put("/api/profiles/Ana/photo", json={"photo_url": "/files/ana.jpg"})
        response = client.put("/api/profiles/Rui/photo", json={"photo_url": "/files/rui2.jpg"})

        assert response.status_code == 200
        profiles = client.get("/api/profiles").json()
        assert [(p["name"], p["photo_url"]) for p in profiles] == [
            ("Ana", "/files/ana.jpg"),
            ("Rui", "/files/rui2.jpg"),
        ]

    def test_get_profile(self, client):
        client.put("/api/profiles/Rui/photo", json={"photo_url": "/files/rui.jpg"})

        assert client.get("/api/profiles/Rui").json()["photo_url"] == "/files/rui.jpg"
        response = client.get("/api/profiles/Ana")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"


class TestApiKey:

    @pytest.fixture
    def protected(self, monkeypatch):
        from digpaper.core import settings
        monkeypatch.setattr(settings, "APP_API_KEY", "segredo")

    def test_missing_key(self, client, protected):
        response = client.get("/api/projects")
        assert response.status_code == 401
        assert response.json() == {"error": "unauthorized", "message": "Missing API key"}

    def test_wrong_key(self, client, protected):
        response = client.get("/api/projects", headers={"X-API-Key": "errada"})
        assert response.status_code == 401
        assert response.json() == {"error": "unauthorized", "message": "Invalid API key"}

    def test_valid_key(self, client, protected):
        response = client.get("/api/projects", headers={"X-API-Key": "segredo"})
        assert response.status_code == 200

    def test_public_endpoints(self, client, protected):
        assert client.get("/health").status_code == 200
        assert client.get("/api/email/status").status_code == 200
        response = client.post("/api/email/inbound", data={"from": "a@b.pt"})
        assert response.status_code == 200

    def test_email_management_is_protected(self, client, protected):
        assert client.get("/api/email/rules").status_code == 401
        assert client.get("/api/email/filters").status_code == 401


def test_end_to_end_workflow(client, create_project, upload):
    """Foto da oficina -> Inbox -> Obra X -> apagada"""
    project = create_project("Obra X")
    document = upload("IMG_001.jpg")

    assert [d["id"] for d in client.get("/api/documents/inbox").json()] == [document["id"]]

    client.patch(f"/api/documents/{document['id']}/assign", json={"project_id": project["id"]})
    assert client.get("/api/documents/inbox").json() == []

    documents = client.get(f"/api/projects/{project['id']}/documents").json()
    assert [d["id"] for d in documents] == [document["id"]]
    assert documents[0]["original_name"].startswith("Foto ")

    assert client.delete(f"/api/documents/{document['id']}").status_code == 204
    assert client.get(f"/api/projects/{project['id']}/documents").json() == []
    assert client.get(document["file_url"]).status_code == 404


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"

"""Integration tests for the inbound email webhook and rule/filter management."""

PHOTO = b"\xff\xd8\xff" + b"1" * 8000
TINY = b"\xff\xd8\xff" + b"1" * 1000


def _send(client, sender="cliente@exemplo.pt", subject="Fotos da obra", files=None, **fields):
    data = {"from": sender, "subject": subject, **fields}
    return client.post("/api/email/inbound", data=data, files=files or {})


class TestInbound:

    def test_attachment_without_rule_goes_to_inbox(self, client):
        response = _send(client, files={"attachment-1": ("planta.jpg", PHOTO, "image/jpeg")})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["documents_created"] == 1
        assert body["documents_filtered"] == 0

        inbox = client.get("/api/documents/inbox").json()
        assert len(inbox) == 1
        assert inbox[0]["original_name"] == "planta.jpg"
        assert inbox[0]["notes"] == "📧 Email de: cliente@exemplo.pt\n📋 Assunto: Fotos da obra"

    def test_rule_routes_to_project(self, client, create_project):
        project = create_project("Obra ACME")
        client.post("/api/email/rules", json={"sender_pattern": "*@acme.com", "project_id": project["id"]})

        response = _send(
            client,
            sender="Escritório <office@ACME.com>",
            files={"attachment1": ("orcamento.pdf", PHOTO, "application/pdf")}
        )

        assert response.json()["documents_created"] == 1
        documents = client.get(f"/api/projects/{project['id']}/documents").json()
        assert len(documents) == 1
        assert documents[0]["file_type"] == "pdf"
        assert client.get("/api/documents/inbox").json() == []

    def test_default_filters_reject_small_and_logo_files(self, client):
        files = [
            ("attachment-1", ("company_logo.png", PHOTO, "image/png")),
            ("attachment-2", ("pequena.jpg", TINY, "image/jpeg")),
            ("attachment-3", ("planta.jpg", PHOTO, "image/jpeg")),
        ]
        response = client.post(
            "/api/email/inbound",
            data={"from": "a@b.pt", "subject": "x"},
            files=files
        )

        body = response.json()
        assert body["documents_created"] == 1
        assert body["documents_filtered"] == 2

    def test_size_max_threshold(self, client):
        files = [
            ("1", ("a.jpg", b"1" * 4000, "image/jpeg")),
            ("2", ("b.jpg", b"1" * 6000, "image/jpeg")),
        ]
        response = client.post("/api/email/inbound", data={"from": "a@b.pt"}, files=files)

        assert response.json()["documents_created"] == 1
        assert response.json()["documents_filtered"] == 1

    def test_extension_filter(self, client):
        client.post("/api/email/filters", json={"pattern": "pdf", "filter_type": "extension"})

        response = _send(client, files={"attachment-1": ("report.pdf", PHOTO, "application/pdf")})

        assert response.json()["documents_created"] == 0
        assert response.json()["documents_filtered"] == 1

    def test_defaults_for_missing_sender_and_subject(self, client):
        response = client.post(
            "/api/email/inbound",
            data={"body-plain": "sem remetente"},
            files={"attachment-1": ("planta.jpg", PHOTO, "image/jpeg")}
        )

        assert response.json()["documents_created"] == 1
        notes = client.get("/api/documents/inbox").json()[0]["notes"]
        assert "unknown@email.com" in notes
        assert "Email sem assunto" in notes

    def test_unknown_fields_are_ignored_and_empty_attachments_filtered(self, client):
        files = [
            ("attachment-1", ("vazio.jpg", b"", "image/jpeg")),
            ("inline-image", ("planta.jpg", PHOTO, "image/jpeg")),
        ]
        response = client.post(
            "/api/email/inbound",
            data={"from": "a@b.pt", "X-Mailgun-Sid": "abc", "attachment-count": "2"},
            files=files
        )

        body = response.json()
        assert body["documents_created"] == 0
        assert body["documents_filtered"] == 1

    def test_oversized_attachment_is_filtered(self, client, monkeypatch):
        from digpaper.core import settings
        monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE_MB", 1)

        files = [
            ("attachment-1", ("grande.pdf", b"1" * (1024 * 1024 + 1), "application/pdf")),
            ("attachment-2", ("planta.jpg", PHOTO, "image/jpeg")),
        ]
        response = client.post("/api/email/inbound", data={"from": "a@b.pt"}, files=files)

        body = response.json()
        assert body["documents_created"] == 1
        assert body["documents_filtered"] == 1

    def test_failing_attachment_does_not_stop_the_rest(self, client, monkeypatch):
        from digpaper.services.storage import FileStore
        original = FileStore.save_bytes
        calls = []

        def flaky_save_bytes(self, data, extension, prefix=""):
            calls.append(extension)
            if len(calls) == 1:
                raise OSError("disk full")
            return original(self, data, extension, prefix)

        monkeypatch.setattr(FileStore, "save_bytes", flaky_save_bytes)

        files = [
            ("attachment-1", ("a.pdf", PHOTO, "application/pdf")),
            ("attachment-2", ("b.pdf", PHOTO, "application/pdf")),
        ]
        response = client.post("/api/email/inbound", data={"from": "a@b.pt"}, files=files)

        assert response.status_code == 200
        body = response.json()
        assert body["documents_created"] == 1
        assert body["documents_filtered"] == 0
        assert len(calls) == 2
        assert [d["original_name"] for d in client.get("/api/documents/inbox").json()] == ["b.pdf"]

    def test_extension_from_content_type(self, client):
        response = _send(client, files={"attachment-1": ("planta", PHOTO, "image/png")})

        assert response.json()["documents_created"] == 1
        assert client.get("/api/documents/inbox").json()[0]["file_path"].endswith(".png")

    def test_malformed_multipart_is_bad_request(self, client):
        response = client.post(
            "/api/email/inbound",
            content=b"--xyz\r\nnot a valid part",
            headers={"Content-Type": "multipart/form-data"}
        )
        assert response.status_code == 400

    def test_status_endpoint(self, client):
        body = client.get("/api/email/status").json()

        assert body["status"] == "active"
        assert body["endpoint"] == "/api/email/inbound"
        assert body["supported_services"] == ["mailgun", "sendgrid"]
        assert body["rules_count"] == 0
        assert body["filters_count"] == 11


class TestRulesAndFilters:

    def test_default_filters_are_seeded(self, client):
        filters = client.get("/api/email/filters").json()
        patterns = {(f["pattern"], f["filter_type"]) for f in filters}

        assert ("logo", "filename") in patterns
        assert ("twitter", "filename") in patterns
        assert ("5000", "size_max") in patterns
        assert len(filters) == 11

    def test_create_and_delete_rule(self, client, create_project):
        project = create_project()
        response = client.post(
            "/api/email/rules",
            json={"sender_pattern": "obras@cliente.pt", "project_id": project["id"], "description": "Cliente"}
        )
        assert response.status_code == 201
        rule = response.json()
        assert rule["active"] is True

        assert [r["id"] for r in client.get("/api/email/rules").json()] == [rule["id"]]
        assert client.delete(f"/api/email/rules/{rule['id']}").status_code == 204
        assert client.delete(f"/api/email/rules/{rule['id']}").status_code == 404

    def test_rule_for_missing_project(self, client):
        response = client.post("/api/email/rules", json={"sender_pattern": "a@b.pt", "project_id": "missing"})
        assert response.status_code == 404

    def test_rule_without_project_routes_to_inbox(self, client):
        response = client.post("/api/email/rules", json={"sender_pattern": "a@b.pt"})
        assert response.status_code == 201
        assert response.json()["project_id"] is None

    def test_blank_rule_pattern(self, client):
        response = client.post("/api/email/rules", json={"sender_pattern": "  "})
        assert response.status_code == 400

    def test_invalid_filter_type(self, client):
        response = client.post("/api/email/filters", json={"pattern": "x", "filter_type": "regex"})
        assert response.status_code == 400
        assert response.json()["error"] == "bad_request"

    def test_size_max_must_be_numeric(self, client):
        response = client.post("/api/email/filters", json={"pattern": "big", "filter_type": "size_max"})
        assert response.status_code == 400

    def test_delete_filter(self, client):
        created = client.post("/api/email/filters", json={"pattern": "gif", "filter_type": "extension"}).json()

        assert client.delete(f"/api/email/filters/{created['id']}").status_code == 204
        assert client.delete(f"/api/email/filters/{created['id']}").status_code == 404

    def test_deleting_project_deletes_its_rules(self, client, create_project):
        project = create_project()
        client.post("/api/email/rules", json={"sender_pattern": "a@b.pt", "project_id": project["id"]})

        assert client.delete(f"/api/projects/{project['id']}").status_code == 204
        assert client.get("/api/email/rules").json() == []

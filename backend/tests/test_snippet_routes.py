"""
DevHub Backend — Snippet API Tests
====================================

What:  End-to-end HTTP behaviour of /api/snippets through the ASGI app.

What we test:
    ✅ create → public list → delete → 404
    ✅ upload stores the file, copies its text into `code`, and sets blobLocator
    ✅ upload rejects empty / non-UTF-8 / oversized files before storing anything
    ✅ delete removes the uploaded file; PUT without blobLocator detaches it
    ✅ file-url returns a working signed URL; 404 without a file
    ✅ store failure → opaque 500
"""

from unittest.mock import AsyncMock, patch
from urllib.parse import urlparse

import pytest

from devhub.exceptions import StoreUnavailableError
from devhub.services.storage_service import parse_locator


def upload_form(**overrides):
    data = {"title": "Fib", "language": "python", "tags": ["algo", "dp"], "isPublic": "true"}
    data.update(overrides)
    return data


class TestSnippetCrud:

    @pytest.mark.asyncio
    async def test_create_list_public_delete(self, test_client, fib_snippet):
        create = await test_client.post("/api/snippets", json=fib_snippet)
        assert create.status_code == 201
        snippet_id = create.json()["id"]

        public = await test_client.get("/api/snippets/public")
        assert public.status_code == 200
        body = public.json()
        assert [s["id"] for s in body] == [snippet_id]
        assert body[0]["title"] == "Fib"
        assert body[0]["isPublic"] is True
        assert body[0]["createdAt"] is not None
        assert body[0]["createdAt"] == body[0]["updatedAt"]

        delete = await test_client.delete(f"/api/snippets/{snippet_id}")
        assert delete.status_code == 204

        missing = await test_client.get(f"/api/snippets/{snippet_id}")
        assert missing.status_code == 404
        assert missing.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_language_and_tag_filters(self, test_client, fib_snippet):
        await test_client.post("/api/snippets", json=fib_snippet)
        await test_client.post(
            "/api/snippets",
            json={"title": "Hello", "code": "class A {}", "language": "java", "tags": ["oop"]},
        )

        java = await test_client.get("/api/snippets/language/java")
        algo = await test_client.get("/api/snippets/tag/algo")
        public = await test_client.get("/api/snippets/public")

        assert [s["title"] for s in java.json()] == ["Hello"]
        assert [s["title"] for s in algo.json()] == ["Fib"]
        assert [s["title"] for s in public.json()] == ["Fib"]

    @pytest.mark.asyncio
    async def test_list_newest_first(self, test_client, fib_snippet):
        first = (await test_client.post("/api/snippets", json=fib_snippet)).json()["id"]
        second = (await test_client.post("/api/snippets", json={**fib_snippet, "title": "Later"})).json()["id"]

        listing = await test_client.get("/api/snippets")

        ids = [s["id"] for s in listing.json()]
        assert set(ids) == {first, second}
        created = [s["createdAt"] for s in listing.json()]
        assert created == sorted(created, reverse=True)

    @pytest.mark.asyncio
    async def test_missing_language_is_400(self, test_client):
        response = await test_client.post("/api/snippets", json={"title": "x", "code": "y"})

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert response.json()["details"]["field"] == "language"

    @pytest.mark.asyncio
    async def test_put_restamps_updated_at(self, test_client, fib_snippet):
        snippet_id = (await test_client.post("/api/snippets", json=fib_snippet)).json()["id"]
        original = (await test_client.get(f"/api/snippets/{snippet_id}")).json()

        response = await test_client.put(
            f"/api/snippets/{snippet_id}", json={**original, "code": "def f(n): return n"}
        )

        assert response.status_code == 200
        updated = response.json()
        assert updated["id"] == snippet_id
        assert updated["code"] == "def f(n): return n"
        assert updated["createdAt"] == original["createdAt"]
        assert updated["updatedAt"] >= original["updatedAt"]


class TestSnippetUpload:

    @pytest.mark.asyncio
    async def test_upload_creates_snippet_and_file(self, test_client, blob_store):
        response = await test_client.post(
            "/api/snippets/upload",
            data=upload_form(),
            files={"file": ("fib.py", b"def fib(n):\n    return n\n", "text/x-python")},
        )

        assert response.status_code == 201
        snippet = (await test_client.get(f"/api/snippets/{response.json()['id']}")).json()
        assert snippet["code"] == "def fib(n):\n    return n\n"
        assert snippet["tags"] == ["algo", "dp"]
        assert snippet["isPublic"] is True

        bucket, key = parse_locator(snippet["blobLocator"])
        assert bucket == "devhub-storage"
        assert key.startswith("snippets/") and key.endswith("-fib.py")
        assert await blob_store.read(bucket, key) == (
            b"def fib(n):\n    return n\n",
            "text/x-python",
        )

    @pytest.mark.asyncio
    async def test_upload_empty_file_is_400(self, test_client, blob_store):
        response = await test_client.post(
            "/api/snippets/upload",
            data=upload_form(),
            files={"file": ("empty.py", b"", "text/x-python")},
        )

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "file"
        assert not (blob_store.root / "devhub-storage").exists()

    @pytest.mark.asyncio
    async def test_upload_binary_file_is_400(self, test_client, document_store):
        response = await test_client.post(
            "/api/snippets/upload",
            data=upload_form(),
            files={"file": ("img.bin", b"\xff\xd8\xff\xe0\x00\x10JFIF", "image/jpeg")},
        )

        assert response.status_code == 400
        assert document_store.collections.get("snippets", {}) == {}

    @pytest.mark.asyncio
    async def test_upload_too_large_is_400(self, test_client):
        with patch("devhub.routes.snippets.settings") as mock_settings:
            mock_settings.max_file_size = 4
            response = await test_client.post(
                "/api/snippets/upload",
                data=upload_form(),
                files={"file": ("big.py", b"x = 12345", "text/x-python")},
            )

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "file"

    @pytest.mark.asyncio
    async def test_upload_without_title_stores_nothing(self, test_client, blob_store):
        response = await test_client.post(
            "/api/snippets/upload",
            data={"language": "python"},
            files={"file": ("fib.py", b"x = 1", "text/x-python")},
        )

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "title"
        assert not (blob_store.root / "devhub-storage").exists()

    @pytest.mark.asyncio
    async def test_create_failure_after_upload_leaves_blob(self, test_client, document_store, blob_store):
        failure = StoreUnavailableError(context={"store": "documents", "operation": "add"})
        with patch.object(document_store, "add", AsyncMock(side_effect=failure)):
            response = await test_client.post(
                "/api/snippets/upload",
                data=upload_form(),
                files={"file": ("fib.py", b"x = 1", "text/x-python")},
            )

        assert response.status_code == 500
        assert list((blob_store.root / "devhub-storage" / "snippets").iterdir())

    @pytest.mark.asyncio
    async def test_delete_removes_uploaded_file(self, test_client, blob_store):
        created = await test_client.post(
            "/api/snippets/upload",
            data=upload_form(),
            files={"file": ("fib.py", b"x = 1", "text/x-python")},
        )
        snippet_id = created.json()["id"]
        locator = (await test_client.get(f"/api/snippets/{snippet_id}")).json()["blobLocator"]
        bucket, key = parse_locator(locator)

        response = await test_client.delete(f"/api/snippets/{snippet_id}")

        assert response.status_code == 204
        assert await blob_store.exists(bucket, key) is False

    @pytest.mark.asyncio
    async def test_delete_with_malformed_locator_still_deletes_record(self, test_client, document_store):
        await document_store.set(
            "snippets",
            "bad",
            {"title": "t", "code": "c", "language": "go", "blobLocator": "not-a-locator"},
        )

        response = await test_client.delete("/api/snippets/bad")

        assert response.status_code == 204
        assert await document_store.get("snippets", "bad") is None

    @pytest.mark.asyncio
    async def test_put_without_locator_detaches_file_but_keeps_it(self, test_client, blob_store):
        created = await test_client.post(
            "/api/snippets/upload",
            data=upload_form(),
            files={"file": ("fib.py", b"x = 1", "text/x-python")},
        )
        snippet_id = created.json()["id"]
        original = (await test_client.get(f"/api/snippets/{snippet_id}")).json()
        bucket, key = parse_locator(original["blobLocator"])
        body = {k: v for k, v in original.items() if k != "blobLocator"}

        response = await test_client.put(f"/api/snippets/{snippet_id}", json=body)

        assert response.status_code == 200
        assert response.json().get("blobLocator") is None
        assert (await test_client.get(f"/api/snippets/{snippet_id}")).json().get("blobLocator") is None
        assert await blob_store.exists(bucket, key) is True

    @pytest.mark.asyncio
    async def test_put_with_locator_keeps_file_attached(self, test_client):
        created = await test_client.post(
            "/api/snippets/upload",
            data=upload_form(),
            files={"file": ("fib.py", b"x = 1", "text/x-python")},
        )
        snippet_id = created.json()["id"]
        original = (await test_client.get(f"/api/snippets/{snippet_id}")).json()

        response = await test_client.put(f"/api/snippets/{snippet_id}", json={**original, "title": "Renamed"})

        assert response.status_code == 200
        assert response.json()["blobLocator"] == original["blobLocator"]

    def test_put_documents_locator_detach(self, app):
        put = app.openapi()["paths"]["/api/snippets/{snippet_id}"]["put"]

        assert "blobLocator" in put["description"]

    @pytest.mark.asyncio
    async def test_upload_with_reserved_suffix_is_400(self, test_client, document_store):
        response = await test_client.post(
            "/api/snippets/upload",
            data=upload_form(),
            files={"file": ("notes.ctype", b"x = 1", "text/plain")},
        )

        assert response.status_code == 400
        assert not document_store.collections.get("snippets")

class TestSnippetFileUrl:

    @pytest.mark.asyncio
    async def test_signed_url_downloads_file(self, test_client):
        created = await test_client.post(
            "/api/snippets/upload",
            data=upload_form(),
            files={"file": ("fib.py", b"def fib(n): ...", "text/x-python")},
        )
        snippet_id = created.json()["id"]

        response = await test_client.get(f"/api/snippets/{snippet_id}/file-url", params={"minutes": 5})

        assert response.status_code == 200
        assert response.json()["expiresInMinutes"] == 5
        url = urlparse(response.json()["url"])
        download = await test_client.get(f"{url.path}?{url.query}")
        assert download.status_code == 200
        assert download.content == b"def fib(n): ..."
        assert download.headers["content-type"].startswith("text/x-python")

    @pytest.mark.asyncio
    async def test_default_duration(self, test_client, document_store):
        await document_store.set(
            "snippets",
            "s1",
            {"title": "t", "code": "c", "language": "go", "blobLocator": "blob://devhub-storage/k.go"},
        )

        response = await test_client.get("/api/snippets/s1/file-url")

        assert response.status_code == 200
        assert response.json()["expiresInMinutes"] == 15

    @pytest.mark.asyncio
    async def test_snippet_without_file_is_404(self, test_client, fib_snippet):
        snippet_id = (await test_client.post("/api/snippets", json=fib_snippet)).json()["id"]

        response = await test_client.get(f"/api/snippets/{snippet_id}/file-url")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_snippet_is_404(self, test_client):
        response = await test_client.get("/api/snippets/nope/file-url")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_malformed_locator_is_400(self, test_client, document_store):
        await document_store.set(
            "snippets",
            "bad",
            {"title": "t", "code": "c", "language": "go", "blobLocator": "ftp://x"},
        )

        response = await test_client.get("/api/snippets/bad/file-url")

        assert response.status_code == 400
        assert response.json()["error"] == "malformed_locator"

    @pytest.mark.asyncio
    async def test_tampered_signature_is_403(self, test_client):
        response = await test_client.get(
            "/api/files/devhub-storage/snippets/x.py",
            params={"expires": 9999999999, "signature": "0" * 64},
        )

        assert response.status_code == 403
        assert response.json()["error"] == "access_denied"

    @pytest.mark.asyncio
    async def test_valid_signature_missing_object_is_404(self, test_client, blob_store):
        url = urlparse(blob_store.sign_url("devhub-storage", "snippets/gone.py", 5))

        response = await test_client.get(f"{url.path}?{url.query}")

        assert response.status_code == 404


class TestStoreFailure:

    @pytest.mark.asyncio
    async def test_store_failure_is_opaque_500(self, failing_client):
        response = await failing_client.get("/api/snippets")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert "OperationalError" not in response.text
        assert "details" not in body
        assert body["request_id"] == response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_health_reports_unhealthy(self, failing_client):
        response = await failing_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "unhealthy"
        assert response.json()["database"] == "disconnected"
        assert response.json()["storage"] == "available"

"""Unit tests for multipart file uploads (ingest_files, update_files)."""

import io
import json

import httpx
import pytest
from structlog.testing import capture_logs

from conftest import BASE_URL, multipart_parts
from r2r_sdk import IngestFilesRequest, R2RClient, ServerError

pytestmark = pytest.mark.asyncio


def _named(name: str, data: bytes) -> io.BytesIO:
    handle = io.BytesIO(data)
    handle.name = name
    return handle


class TestIngestFiles:
    async def test_files_sent_in_order_with_stringified_fields(self, client, transport):
        metadatas = [{"title": "first"}, {"title": "second"}, {"tags": ["x", "y"]}]
        files = [
            ("a.txt", io.BytesIO(b"alpha")),
            ("b.txt", io.BytesIO(b"bravo")),
            ("c.txt", io.BytesIO(b"charlie")),
        ]

        result = await client.ingest_files(
            files,
            IngestFilesRequest(metadatas=metadatas, document_ids=["d1", "d2", "d3"]),
        )

        assert result == {"results": "ok"}
        sent = transport.last
        assert sent.method == "POST"
        assert sent.url == f"{BASE_URL}/v1/ingest_files"
        assert sent.headers["content-type"].startswith("multipart/form-data; boundary=")

        parts = multipart_parts(sent)
        file_parts = [(filename, payload) for name, filename, payload in parts if name == "files"]
        assert file_parts == [
            ("a.txt", b"alpha"),
            ("b.txt", b"bravo"),
            ("c.txt", b"charlie"),
        ]

        fields = {name: payload for name, filename, payload in parts if name != "files"}
        assert json.loads(fields["metadatas"]) == metadatas
        assert json.loads(fields["document_ids"]) == ["d1", "d2", "d3"]

    async def test_scalar_fields_are_json_encoded(self, client, transport):
        await client.ingest_files(
            [("a.txt", io.BytesIO(b"alpha"))],
            {"skip_document_info": True, "versions": ["v1"]},
        )

        fields = {
            name: payload
            for name, filename, payload in multipart_parts(transport.last)
            if name != "files"
        }
        assert fields == {"skip_document_info": b"true", "versions": b'["v1"]'}

    async def test_file_objects_use_their_basename(self, client, transport):
        await client.ingest_files([_named("/tmp/reports/q3.pdf", b"%PDF")])

        parts = multipart_parts(transport.last)
        assert parts == [("files", "q3.pdf", b"%PDF")]

    async def test_paths_are_opened_and_closed(self, client, transport, tmp_path, monkeypatch):
        path = tmp_path / "notes.md"
        path.write_bytes(b"# notes")
        opened = []
        real_open = open

        def tracking_open(*args, **kwargs):
            handle = real_open(*args, **kwargs)
            opened.append(handle)
            return handle

        monkeypatch.setattr("r2r_sdk.client.open", tracking_open, raising=False)

        await client.ingest_files([path])

        assert multipart_parts(transport.last) == [("files", "notes.md", b"# notes")]
        assert opened and all(handle.closed for handle in opened)

    async def test_preset_content_type_is_replaced(self, transport):
        http_client = httpx.AsyncClient(transport=transport)
        client = R2RClient(
            BASE_URL,
            headers={"Content-Type": "application/json"},
            http_client=http_client,
        )

        await client.ingest_files([("a.txt", io.BytesIO(b"alpha"))])
        await http_client.aclose()

        assert transport.last.headers["content-type"].startswith(
            "multipart/form-data; boundary="
        )

    async def test_server_error_is_logged_and_raised(self, client, transport):
        transport.responder = lambda request: httpx.Response(
            400, json={"detail": "unsupported file type"}
        )

        with capture_logs() as logs:
            with pytest.raises(ServerError) as excinfo:
                await client.ingest_files([("a.exe", io.BytesIO(b"MZ"))])

        assert excinfo.value.status_code == 400
        errors = [entry for entry in logs if entry["log_level"] == "error"]
        assert errors[0]["event"] == "Error in ingest_files"
        assert errors[0]["status_code"] == 400
        assert errors[0]["body"] == {"detail": "unsupported file type"}
        assert "headers" in errors[0]


class TestUpdateFiles:
    async def test_document_ids_and_metadatas(self, client, transport):
        metadatas = [{"v": 2}, {"v": 3}]

        await client.update_files(
            [("a.txt", io.BytesIO(b"new a")), ("b.txt", io.BytesIO(b"new b"))],
            document_ids=["d1", "d2"],
            metadatas=metadatas,
        )

        sent = transport.last
        assert sent.url == f"{BASE_URL}/v1/update_files"
        parts = multipart_parts(sent)
        assert [filename for name, filename, _ in parts if name == "files"] == [
            "a.txt",
            "b.txt",
        ]
        fields = {name: payload for name, _, payload in parts if name != "files"}
        assert json.loads(fields["document_ids"]) == ["d1", "d2"]
        assert json.loads(fields["metadatas"]) == metadatas

    async def test_metadatas_omitted_when_not_given(self, client, transport):
        await client.update_files([("a.txt", io.BytesIO(b"x"))], document_ids=["d1"])

        names = [name for name, _, _ in multipart_parts(transport.last)]
        assert "metadatas" not in names
        assert "document_ids" in names

    async def test_missing_path_is_logged_and_raised(self, client, transport, tmp_path):
        with capture_logs() as logs:
            with pytest.raises(FileNotFoundError):
                await client.update_files([tmp_path / "missing.txt"], document_ids=["d1"])

        assert transport.requests == []
        assert logs[-1]["event"] == "Error in update_files"

    async def test_no_files_still_sends_multipart(self, client, transport):
        await client.update_files([], document_ids=["d1"])

        sent = transport.last
        assert sent.headers["content-type"].startswith("multipart/form-data; boundary=")
        parts = multipart_parts(sent)
        assert [(name, filename) for name, filename, _ in parts] == [("document_ids", None)]
        assert json.loads(parts[0][2]) == ["d1"]

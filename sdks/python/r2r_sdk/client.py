"""R2R SDK client."""

import json
from collections.abc import Mapping, Sequence
from contextlib import ExitStack
from pathlib import Path
from typing import Any, BinaryIO, Union

import httpx
from pydantic import BaseModel, TypeAdapter

from .config import DEFAULT_PREFIX, DEFAULT_TIMEOUT, ClientSettings
from .exceptions import R2RError, ServerError, TransportError
from .logging_config import get_logger
from .models import (
    AnalyticsRequest,
    DeleteRequest,
    DocumentChunksRequest,
    DocumentsOverviewRequest,
    IngestDocumentsRequest,
    IngestFilesRequest,
    LogsRequest,
    RAGRequest,
    SearchRequest,
    UpdateDocumentsRequest,
    UpdatePromptRequest,
    UsersOverviewRequest,
)
from .streaming import ByteStream

logger = get_logger(__name__)

FileInput = Union[str, Path, BinaryIO, tuple[str, BinaryIO]]
Payload = Union[BaseModel, Mapping[str, Any]]

DEFAULT_MAX_RUNS = 100

_JSON_ADAPTER = TypeAdapter(Any)


def _to_payload(value: Any) -> Any:
    """Convert request models to JSON-ready data, keeping only fields the caller set."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", exclude_unset=True)
    if isinstance(value, Mapping):
        return {key: _to_payload(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_payload(item) for item in value]
    return _JSON_ADAPTER.dump_python(value, mode="json")


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def _stream_requested(request: Payload) -> bool:
    config = _field(request, "rag_generation_config")
    return config is not None and bool(_field(config, "stream"))


def _file_parts(
    files: Sequence[FileInput], stack: ExitStack
) -> list[tuple[str, tuple[str, BinaryIO]]]:
    """Build ordered ``files`` form parts, opening paths on ``stack``."""
    parts = []
    for item in files:
        if isinstance(item, tuple):
            filename, handle = item
        elif isinstance(item, (str, Path)):
            path = Path(item)
            handle = stack.enter_context(open(path, "rb"))
            filename = path.name
        else:
            handle = item
            filename = Path(str(getattr(item, "name", "upload"))).name
        parts.append(("files", (filename, handle)))
    return parts


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class R2RClient:
    """
    Async client for the R2R REST API.

    Every method issues a single HTTP request against
    ``{base_url}{prefix}`` and returns the decoded JSON body as-is.

    Usage:
        async with R2RClient("http://localhost:8000") as client:
            await client.ingest_files(["./report.pdf"])
            results = await client.search(SearchRequest(query="revenue"))

            stream = await client.rag(
                RAGRequest(
                    query="Summarize the report",
                    rag_generation_config=GenerationConfig(stream=True),
                )
            )
            async with stream:
                async for text in stream.iter_text():
                    print(text, end="")
    """

    def __init__(
        self,
        base_url: str,
        prefix: str = DEFAULT_PREFIX,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        headers: Mapping[str, str] | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._base_url = f"{base_url}{prefix}"
        self._headers = dict(headers or {})
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_env(cls, settings: ClientSettings | None = None, **kwargs: Any) -> "R2RClient":
        """Create a client from R2R_BASE_URL, R2R_API_PREFIX and R2R_TIMEOUT."""
        settings = settings or ClientSettings()
        return cls(
            settings.base_url,
            settings.prefix,
            timeout=settings.timeout,
            **kwargs,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def aclose(self) -> None:
        """Close the HTTP transport if this client created it."""
        if self._owns_http_client:
            await self._http.aclose()

    async def __aenter__(self) -> "R2RClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    async def _send(
        self,
        method: str,
        path: str,
        *,
        stream: bool = False,
        headers: Mapping[str, str] | None = None,
        files: list | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        url = self._url(path)
        merged = {**self._headers, **(headers or {})}
        if files is not None:
            # httpx only fills in the boundary-bearing value when none is set.
            merged = {k: v for k, v in merged.items() if k.lower() != "content-type"}

        logger.debug("Sending request", method=method, url=url, stream=stream)
        try:
            request = self._http.build_request(
                method, url, headers=merged, files=files, **kwargs
            )
            response = await self._http.send(request, stream=stream)
        except httpx.TimeoutException as exc:
            raise TransportError(f"Timeout calling {method} {url}: {exc}") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(f"Error calling {method} {url}: {exc}") from exc

        if not response.is_success:
            if stream:
                try:
                    await response.aread()
                except httpx.HTTPError as exc:
                    raise TransportError(
                        f"Error reading error response from {method} {url}: {exc}"
                    ) from exc
                finally:
                    await response.aclose()
            raise ServerError(
                f"{method} {url} returned HTTP {response.status_code}",
                status_code=response.status_code,
                body=_response_body(response),
                headers=dict(response.headers),
            )
        return response

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await self._send(method, path, **kwargs)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(
                f"Malformed JSON response from {method} {self._url(path)}: {exc}"
            ) from exc

    async def _upload(
        self,
        operation: str,
        path: str,
        files: Sequence[FileInput],
        fields: Mapping[str, Any],
    ) -> Any:
        # Form fields are flat strings; JSON keeps structured values intact.
        # They travel as filename-less parts so the body stays multipart even
        # when no files are given.
        form_fields = [
            (key, (None, json.dumps(value))) for key, value in fields.items()
        ]
        try:
            with ExitStack() as stack:
                parts = _file_parts(files, stack)
                result = await self._request(
                    "POST", path, files=form_fields + parts
                )
        except ServerError as exc:
            logger.error(
                f"Error in {operation}",
                status_code=exc.status_code,
                body=exc.body,
                headers=exc.headers,
            )
            raise
        except (R2RError, OSError) as exc:
            logger.error(f"Error in {operation}", error=str(exc))
            raise
        logger.info(f"{operation} succeeded", file_count=len(parts))
        return result

    # ------------------------------------------------------------------
    # Prompts
    # ------------------------------------------------------------------

    async def update_prompt(self, request: UpdatePromptRequest | Mapping[str, Any]) -> Any:
        return await self._request("POST", "/update_prompt", json=_to_payload(request))

    # ------------------------------------------------------------------
    # Ingestion and updates
    # ------------------------------------------------------------------

    async def ingest_documents(
        self, request: IngestDocumentsRequest | Mapping[str, Any]
    ) -> Any:
        """Ingest documents whose content is supplied inline."""
        return await self._request(
            "POST", "/ingest_documents", json=_to_payload(request)
        )

    async def ingest_files(
        self,
        files: Sequence[FileInput],
        request: IngestFilesRequest | Mapping[str, Any] | None = None,
    ) -> Any:
        """
        Upload files for ingestion.

        Args:
            files: Paths, binary file objects, or ``(filename, file)`` tuples.
                Paths are opened and closed by the client.
            request: Per-file metadata, ids, versions and flags. Each field is
                sent as a JSON-encoded form field.

        Returns:
            The decoded JSON response.
        """
        fields = _to_payload(request) if request is not None else {}
        return await self._upload("ingest_files", "/ingest_files", files, fields)

    async def update_documents(
        self, request: UpdateDocumentsRequest | Mapping[str, Any]
    ) -> Any:
        return await self._request(
            "POST", "/update_documents", json=_to_payload(request)
        )

    async def update_files(
        self,
        files: Sequence[FileInput],
        document_ids: Sequence[str],
        metadatas: Sequence[Mapping[str, Any]] | None = None,
    ) -> Any:
        """
        Replace the content of existing documents with new files.

        ``document_ids[i]`` (and ``metadatas[i]``, when given) belong to
        ``files[i]``.
        """
        fields: dict[str, Any] = {"document_ids": _to_payload(list(document_ids))}
        if metadatas is not None:
            fields["metadatas"] = _to_payload(list(metadatas))
        return await self._upload("update_files", "/update_files", files, fields)

    # ------------------------------------------------------------------
    # Retrieval
    # ------------------------------------------------------------------

    async def search(self, request: SearchRequest | Mapping[str, Any]) -> Any:
        return await self._request("POST", "/search", json=_to_payload(request))

    async def rag(self, request: RAGRequest | Mapping[str, Any]) -> Any | ByteStream:
        """
        Run retrieval-augmented generation.

        When ``rag_generation_config.stream`` is true the call returns as soon
        as response headers arrive, with a ByteStream over the raw body.
        Read errors are raised from the stream, not from this call.
        Otherwise the decoded JSON response is returned.
        """
        if _stream_requested(request):
            return await self._stream_rag(request)
        return await self._request("POST", "/rag", json=_to_payload(request))

    async def _stream_rag(self, request: RAGRequest | Mapping[str, Any]) -> ByteStream:
        response = await self._send(
            "POST", "/rag", stream=True, json=_to_payload(request)
        )
        return ByteStream(response.aiter_bytes(), response.aclose)

    # ------------------------------------------------------------------
    # Management
    # ------------------------------------------------------------------

    async def delete(self, request: DeleteRequest | Mapping[str, Any]) -> Any:
        """Delete entries matching ``keys``/``values`` metadata pairs."""
        payload = {
            "keys": _to_payload(_field(request, "keys")),
            "values": _to_payload(_field(request, "values")),
        }
        logger.debug("Delete request", keys=payload["keys"])
        return await self._request(
            "DELETE",
            "/delete",
            json=payload,
            headers={"Content-Type": "application/json"},
        )

    async def logs(self, request: LogsRequest | Mapping[str, Any] | None = None) -> Any:
        """
        Fetch run logs.

        An unset ``log_type_filter`` is sent as null. An unset or zero
        ``max_runs_requested`` is sent as 100.
        """
        payload = _to_payload(request) if request is not None else {}
        payload["log_type_filter"] = payload.get("log_type_filter")
        payload["max_runs_requested"] = (
            payload.get("max_runs_requested") or DEFAULT_MAX_RUNS
        )
        return await self._request("POST", "/logs", json=payload)

    async def app_settings(self) -> Any:
        return await self._request("GET", "/app_settings")

    async def analytics(self, request: AnalyticsRequest | Mapping[str, Any]) -> Any:
        return await self._request("POST", "/analytics", json=_to_payload(request))

    async def users_overview(
        self, request: UsersOverviewRequest | Mapping[str, Any] | None = None
    ) -> Any:
        payload = _to_payload(request) if request is not None else {}
        params = {key: value for key, value in payload.items() if value is not None}
        return await self._request("GET", "/users_overview", params=params)

    async def documents_overview(
        self, request: DocumentsOverviewRequest | Mapping[str, Any] | None = None
    ) -> Any:
        payload = _to_payload(request) if request is not None else {}
        return await self._request("POST", "/documents_overview", json=payload)

    async def document_chunks(
        self, request: DocumentChunksRequest | Mapping[str, Any]
    ) -> Any:
        return await self._request(
            "POST", "/document_chunks", json=_to_payload(request)
        )

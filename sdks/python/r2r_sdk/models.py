"""R2R SDK request models.

Optional fields default to None and are left out of the request body, so
the server applies its own defaults for anything the caller did not set.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _Request(BaseModel):
    """Base for request payloads; unknown fields pass through to the server."""

    model_config = ConfigDict(extra="allow")


# Settings models
class GenerationConfig(_Request):
    """LLM generation parameters for RAG and KG agent calls."""

    model: str | None = None
    temperature: float | None = None
    top_p: float | None = None
    top_k: int | None = None
    max_tokens_to_sample: int | None = None
    stream: bool | None = None
    functions: list[dict[str, Any]] | None = None
    skip_special_tokens: bool | None = None
    stop_token: str | None = None
    num_beams: int | None = None
    do_sample: bool | None = None
    generate_with_chat: bool | None = None
    add_generation_kwargs: dict[str, Any] | None = None
    api_base: str | None = None


class VectorSearchSettings(_Request):
    """Vector and hybrid search settings."""

    use_vector_search: bool | None = None
    search_filters: dict[str, Any] | None = None
    search_limit: int | None = None
    do_hybrid_search: bool | None = None


class KGSearchSettings(_Request):
    """Knowledge-graph search settings."""

    use_kg_search: bool | None = None
    agent_generation_config: GenerationConfig | None = None


# Document models
class Document(_Request):
    """A document submitted inline rather than as a file."""

    id: str
    type: str
    data: str
    metadata: dict[str, Any] = Field(default_factory=dict)


# Request models
class UpdatePromptRequest(_Request):
    name: str
    template: str | None = None
    input_types: dict[str, str] | None = None


class IngestDocumentsRequest(_Request):
    documents: list[Document]
    versions: list[str] | None = None


class IngestFilesRequest(_Request):
    """Form fields sent alongside uploaded files.

    Each list is positional: entry ``i`` describes file ``i``.
    """

    metadatas: list[dict[str, Any]] | None = None
    document_ids: list[str] | None = None
    user_ids: list[str | None] | None = None
    versions: list[str] | None = None
    skip_document_info: bool | None = None


class UpdateDocumentsRequest(_Request):
    documents: list[Document]
    versions: list[str] | None = None
    metadatas: list[dict[str, Any]] | None = None


class UpdateFilesRequest(_Request):
    document_ids: list[str]
    metadatas: list[dict[str, Any]] | None = None


class SearchRequest(_Request):
    query: str
    vector_search_settings: VectorSearchSettings | None = None
    kg_search_settings: KGSearchSettings | None = None


class RAGRequest(_Request):
    query: str
    vector_search_settings: VectorSearchSettings | None = None
    kg_search_settings: KGSearchSettings | None = None
    rag_generation_config: GenerationConfig | None = None


class DeleteRequest(_Request):
    """Delete every entry whose ``keys[i]`` metadata field equals ``values[i]``."""

    keys: list[str]
    values: list[Any]


class AnalyticsRequest(_Request):
    filter_criteria: dict[str, Any]
    analysis_types: dict[str, Any]


class UsersOverviewRequest(_Request):
    user_ids: list[str] | None = None


class DocumentsOverviewRequest(_Request):
    document_ids: list[str] | None = None
    user_ids: list[str] | None = None


class DocumentChunksRequest(_Request):
    document_id: str


class LogsRequest(_Request):
    log_type_filter: str | None = None
    max_runs_requested: int | None = None

"""
R2R Python SDK.

An async Python client library for the R2R document retrieval API.

Usage:
    from r2r_sdk import R2RClient, RAGRequest, GenerationConfig

    # Using environment variables (R2R_BASE_URL, R2R_API_PREFIX, R2R_TIMEOUT)
    async with R2RClient.from_env() as client:
        # Ingest files
        await client.ingest_files(["./report.pdf"])

        # Search
        results = await client.search({"query": "document processing"})

        # Non-streaming RAG
        answer = await client.rag(RAGRequest(query="What is RAG?"))

        # Streaming RAG
        stream = await client.rag(
            RAGRequest(
                query="Explain RAG",
                rag_generation_config=GenerationConfig(stream=True),
            )
        )
        async with stream:
            async for text in stream.iter_text():
                print(text, end="")
"""

from .client import R2RClient
from .config import ClientSettings
from .exceptions import R2RError, ServerError, TransportError
from .models import (
    AnalyticsRequest,
    DeleteRequest,
    Document,
    DocumentChunksRequest,
    DocumentsOverviewRequest,
    GenerationConfig,
    IngestDocumentsRequest,
    IngestFilesRequest,
    KGSearchSettings,
    LogsRequest,
    RAGRequest,
    SearchRequest,
    UpdateDocumentsRequest,
    UpdateFilesRequest,
    UpdatePromptRequest,
    UsersOverviewRequest,
    VectorSearchSettings,
)
from .streaming import ByteStream

__version__ = "0.1.0"

__all__ = [
    # Main client
    "R2RClient",
    "ClientSettings",
    "ByteStream",
    # Exceptions
    "R2RError",
    "TransportError",
    "ServerError",
    # Settings models
    "GenerationConfig",
    "VectorSearchSettings",
    "KGSearchSettings",
    # Request models
    "Document",
    "UpdatePromptRequest",
    "IngestDocumentsRequest",
    "IngestFilesRequest",
    "UpdateDocumentsRequest",
    "UpdateFilesRequest",
    "SearchRequest",
    "RAGRequest",
    "DeleteRequest",
    "AnalyticsRequest",
    "UsersOverviewRequest",
    "DocumentsOverviewRequest",
    "DocumentChunksRequest",
    "LogsRequest",
]

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from src.errors import DocumentIOError, NotFoundError, ParseError
from src.server.documents.models import (
    DocTreeNodeModel,
    DocumentResponse,
    SearchResponse,
    SearchResultModel,
    TreeResponse,
)
from src.server.documents.service import DocsService
from src.server.settings import Settings, get_settings


router = APIRouter(prefix="/api/docs", tags=["docs"])


def _resolve_service(settings: Settings) -> DocsService:
    global _DOCS_SERVICE
    if _DOCS_SERVICE is None:
        _DOCS_SERVICE = DocsService(settings)
    return _DOCS_SERVICE


def get_docs_service(settings: Settings = Depends(get_settings)) -> DocsService:
    return _resolve_service(settings)


def get_docs_service_instance(settings: Settings) -> DocsService:
    return _resolve_service(settings)


_DOCS_SERVICE: DocsService | None = None


@router.get("", response_model=TreeResponse, response_model_exclude_none=True)
def get_tree(service: DocsService = Depends(get_docs_service)) -> TreeResponse:
    try:
        tree = service.tree()
    except DocumentIOError as exc:
        raise HTTPException(status_code=500, detail="Failed to get documentation") from exc
    return TreeResponse(tree=[DocTreeNodeModel.from_node(node) for node in tree])


@router.get("/search", response_model=SearchResponse, response_model_exclude_none=True)
def search_docs(
    q: str | None = Query(default=None, description="Free-text search query"),
    limit: int | None = Query(default=None, ge=1),
    service: DocsService = Depends(get_docs_service),
) -> SearchResponse:
    if q is None or not q.strip():
        raise HTTPException(status_code=400, detail="Query parameter 'q' is required")
    try:
        results = service.search(q, limit=limit)
    except DocumentIOError as exc:
        raise HTTPException(status_code=500, detail="Search failed") from exc
    return SearchResponse(results=[SearchResultModel.from_result(result) for result in results], query=q)


@router.get("/{doc_path:path}", response_model=DocumentResponse)
def get_document(doc_path: str, service: DocsService = Depends(get_docs_service)) -> DocumentResponse:
    try:
        doc = service.get_document(doc_path)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail="Document not found") from exc
    except (ParseError, DocumentIOError) as exc:
        raise HTTPException(status_code=500, detail="Failed to get document") from exc
    return DocumentResponse.from_document(doc)


__all__ = ["router", "get_docs_service", "get_docs_service_instance"]

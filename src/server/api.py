from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .documents import get_docs_service, get_docs_service_instance, router as docs_router
from .documents.service import DocsService
from .logging_config import configure_logging
from .settings import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()
configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the search index before serving and stop the watcher on shutdown."""

    service = get_docs_service_instance(get_settings())
    await service.start()
    yield
    await service.stop()


app = FastAPI(title="Docs API", version="0.1.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET"],
    allow_headers=["*"],
)
app.include_router(docs_router)


@app.get("/api/healthz")
async def healthz(service: DocsService = Depends(get_docs_service)) -> dict[str, object]:
    index = service.holder.current()
    return {
        "status": "ok" if index is not None else "starting",
        "documents": len(index) if index is not None else 0,
        "generation": service.holder.generation,
    }


__all__ = ["app"]

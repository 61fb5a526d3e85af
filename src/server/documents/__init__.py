"""Documentation service package."""

from .router import router, get_docs_service, get_docs_service_instance

__all__ = ["router", "get_docs_service", "get_docs_service_instance"]

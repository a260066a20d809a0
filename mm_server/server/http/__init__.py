"""HTTP surface of the content server."""

from .app import RuntimeState, create_app, create_content_router
from .models import DocumentResponse

__all__ = ["DocumentResponse", "RuntimeState", "create_app", "create_content_router"]

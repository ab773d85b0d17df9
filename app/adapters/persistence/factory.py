"""Factory pattern for creating document gateway instances."""

from app.adapters.persistence.base import AbstractDocumentGateway
from app.adapters.persistence.in_memory import InMemoryDocumentGateway
from app.core.config import settings
from app.core.errors import ValidationAppError

USERS_COLLECTION = "users"
PRODUCTS_COLLECTION = "products"

# Unique indexes every backend must honour
UNIQUE_FIELDS: dict[str, tuple[str, ...]] = {
    USERS_COLLECTION: ("email",),
}


def create_document_gateway() -> AbstractDocumentGateway:
    """Instantiate the document gateway configured via STORAGE_BACKEND.

    Returns:
        AbstractDocumentGateway: Configured gateway instance.

    Raises:
        ValidationAppError: If the backend is unknown.
    """
    backend = settings.storage.backend.lower()

    if backend == "memory":
        return InMemoryDocumentGateway(unique_fields=UNIQUE_FIELDS)

    raise ValidationAppError(
        code="storage_unknown_backend",
        message=(
            f"Unknown storage backend: '{backend}'. Supported backends: memory"
        ),
    )

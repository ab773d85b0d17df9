"""Product catalogue service.

Thin orchestration over the document gateway: collection reads go through
the list-query pipeline, single-record operations return an ``Outcome``.
Gateway errors are logged and converted to ``Failed`` here; they never
propagate to the HTTP layer.
"""

from __future__ import annotations

import logging
from typing import Any

from app.adapters.persistence.base import AbstractDocumentGateway, Record
from app.adapters.persistence.factory import PRODUCTS_COLLECTION
from app.core.errors import PersistenceAppError, UnprocessableEntityAppError
from app.services import list_query
from app.services.list_query import ListQuery, PageResult, SortField
from app.services.outcome import Failed, NotFound, Ok, Outcome

logger = logging.getLogger(__name__)

RESOURCE = "product"

SEARCH_FIELDS = ("name", "category")
SORT_FIELDS = (SortField("name"), SortField("price", numeric=True))


def project_product(record: Record) -> dict[str, Any]:
    """Public shape of a stored product."""

    return {
        "id": record.get("id"),
        "name": record.get("name"),
        "price": record.get("price"),
        "category": record.get("category"),
        "quantity": record.get("quantity"),
    }


class ProductsService:
    """CRUD operations for products."""

    def __init__(self, gateway: AbstractDocumentGateway) -> None:
        self._gateway = gateway

    async def list_products(self, query: ListQuery) -> PageResult[dict[str, Any]]:
        """Return one page of products after search and sort.

        Raises:
            UnprocessableEntityAppError: The product store could not be read.
        """
        try:
            products = await self._gateway.find_all(PRODUCTS_COLLECTION)
        except PersistenceAppError as exc:
            logger.error("products.list_failed", extra={"error_code": exc.code})
            raise UnprocessableEntityAppError(
                code="product_list_failed",
                message="Failed to list products",
            ) from exc

        page = list_query.process(
            products,
            query,
            search_fields=SEARCH_FIELDS,
            sort_fields=SORT_FIELDS,
            projector=project_product,
        )
        logger.info(
            "products.listed",
            extra={
                "total": len(products),
                "count": page.count,
                "page_number": query.page_number,
                "page_size": query.page_size,
            },
        )
        return page

    async def get_product(self, product_id: str) -> Outcome[dict[str, Any]]:
        try:
            product = await self._gateway.find_by_id(PRODUCTS_COLLECTION, product_id)
        except PersistenceAppError as exc:
            logger.error("products.get_failed", extra={"product_id": product_id, "error_code": exc.code})
            return Failed(resource=RESOURCE, reason=exc.code)

        if product is None:
            return NotFound(resource=RESOURCE, resource_id=product_id)
        return Ok(project_product(product))

    async def create_product(
        self, name: str, price: float, category: str, quantity: int
    ) -> Outcome[dict[str, Any]]:
        """Store a new product.

        Returns:
            Ok with the stored product (including its id), or Failed.
        """
        try:
            product = await self._gateway.insert(
                PRODUCTS_COLLECTION,
                {"name": name, "price": price, "category": category, "quantity": quantity},
            )
        except PersistenceAppError as exc:
            logger.error("products.create_failed", extra={"error_code": exc.code})
            return Failed(resource=RESOURCE, reason=exc.code)

        logger.info("products.created", extra={"product_id": product["id"]})
        return Ok(project_product(product))

    async def update_product(
        self, product_id: str, name: str, price: float, category: str, quantity: int
    ) -> Outcome[dict[str, Any]]:
        """Replace the editable fields of a product.

        Returns:
            Ok({"id", "name"}), NotFound, or Failed.
        """
        try:
            existing = await self._gateway.find_by_id(PRODUCTS_COLLECTION, product_id)
            if existing is None:
                return NotFound(resource=RESOURCE, resource_id=product_id)

            ack = await self._gateway.update_fields(
                PRODUCTS_COLLECTION,
                product_id,
                {"name": name, "price": price, "category": category, "quantity": quantity},
            )
        except PersistenceAppError as exc:
            logger.error("products.update_failed", extra={"product_id": product_id, "error_code": exc.code})
            return Failed(resource=RESOURCE, reason=exc.code)

        if not ack.matched:
            # Deleted between the read and the write
            return Failed(resource=RESOURCE, reason="not_matched")

        logger.info("products.updated", extra={"product_id": product_id, "modified": ack.modified})
        return Ok({"id": product_id, "name": name})

    async def delete_product(self, product_id: str) -> Outcome[dict[str, Any]]:
        """Delete a product.

        Returns:
            Ok({"id"}), NotFound, or Failed.
        """
        try:
            existing = await self._gateway.find_by_id(PRODUCTS_COLLECTION, product_id)
            if existing is None:
                return NotFound(resource=RESOURCE, resource_id=product_id)

            ack = await self._gateway.delete_by_id(PRODUCTS_COLLECTION, product_id)
        except PersistenceAppError as exc:
            logger.error("products.delete_failed", extra={"product_id": product_id, "error_code": exc.code})
            return Failed(resource=RESOURCE, reason=exc.code)

        if not ack.modified:
            return Failed(resource=RESOURCE, reason="not_matched")

        logger.info("products.deleted", extra={"product_id": product_id})
        return Ok({"id": product_id})

"""FastAPI dependency providers for gateways and services.

Tests replace ``get_document_gateway`` / ``get_login_throttle`` through
``app.dependency_overrides`` to get isolated state per test.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Query

from app.adapters.persistence.base import AbstractDocumentGateway
from app.adapters.persistence.factory import create_document_gateway
from app.adapters.throttle.base import AbstractLoginThrottle
from app.core.throttle import get_login_throttle
from app.services.authentication_service import AuthenticationService
from app.services.list_query import ListQuery, parse_int_or_default
from app.services.products_service import ProductsService
from app.services.users_service import UsersService

_gateway: AbstractDocumentGateway | None = None


def get_document_gateway() -> AbstractDocumentGateway:
    """Return the process-wide document gateway, creating it on first use."""

    global _gateway
    if _gateway is None:
        _gateway = create_document_gateway()
    return _gateway


GatewayDep = Annotated[AbstractDocumentGateway, Depends(get_document_gateway)]


def get_list_query(
    page_number: Annotated[str | None, Query(description="Page to return, starting at 1.")] = None,
    page_size: Annotated[str | None, Query(description="Items per page; 0 returns an empty page.")] = None,
    search: Annotated[str | None, Query(description="Filter as field:token, e.g. name:apple.")] = None,
    sort: Annotated[str | None, Query(description="Order as field:asc|desc, e.g. price:desc.")] = None,
) -> ListQuery:
    """Parse collection query parameters leniently.

    Integers are read from their leading digits; missing, unparsable or zero
    values fall back to page 1 and page size 0. Search and sort strings are
    passed through and interpreted by the list-query pipeline.
    """

    return ListQuery(
        page_number=parse_int_or_default(page_number, 1),
        page_size=parse_int_or_default(page_size, 0),
        search=search,
        sort=sort,
    )


def get_products_service(gateway: GatewayDep) -> ProductsService:
    return ProductsService(gateway)


def get_users_service(gateway: GatewayDep) -> UsersService:
    return UsersService(gateway)


def get_authentication_service(
    users: Annotated[UsersService, Depends(get_users_service)],
    throttle: Annotated[AbstractLoginThrottle, Depends(get_login_throttle)],
) -> AuthenticationService:
    return AuthenticationService(users=users, throttle=throttle)

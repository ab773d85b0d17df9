from dataclasses import asdict
from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.dependencies import get_list_query, get_products_service
from app.api.outcomes import unwrap
from app.core.auth import verify_api_key
from app.schemas.pagination import PageResponse
from app.schemas.products import ProductDeleted, ProductRead, ProductUpdated, ProductWrite
from app.services.list_query import ListQuery
from app.services.products_service import ProductsService

router = APIRouter(
    prefix="/products",
    tags=["Products"],
    dependencies=[Depends(verify_api_key)],
)

ProductsServiceDep = Annotated[ProductsService, Depends(get_products_service)]


@router.get("", response_model=PageResponse[ProductRead])
async def list_products(
    service: ProductsServiceDep,
    query: Annotated[ListQuery, Depends(get_list_query)],
) -> PageResponse[ProductRead]:
    """List products with search, sort and pagination.

    ``search`` accepts ``name:<token>`` or ``category:<token>``; ``sort``
    accepts ``name`` or ``price`` with ``:asc`` / ``:desc``. Unknown fields
    are ignored.
    """
    page = await service.list_products(query)
    return PageResponse[ProductRead](**asdict(page))


@router.get("/{product_id}", response_model=ProductRead)
async def get_product(product_id: str, service: ProductsServiceDep) -> ProductRead:
    """Return a single product.

    Raises:
        NotFoundAppError: 422 when the product does not exist.
    """
    product = unwrap(await service.get_product(product_id), action="get")
    return ProductRead(**product)


@router.post("", response_model=ProductRead)
async def create_product(body: ProductWrite, service: ProductsServiceDep) -> ProductRead:
    """Create a product and return it with its new id."""
    outcome = await service.create_product(body.name, body.price, body.category, body.quantity)
    return ProductRead(**unwrap(outcome, action="create"))


@router.put("/{product_id}", response_model=ProductUpdated)
async def update_product(
    product_id: str, body: ProductWrite, service: ProductsServiceDep
) -> ProductUpdated:
    outcome = await service.update_product(
        product_id, body.name, body.price, body.category, body.quantity
    )
    return ProductUpdated(**unwrap(outcome, action="update"))


@router.delete("/{product_id}", response_model=ProductDeleted)
async def delete_product(product_id: str, service: ProductsServiceDep) -> ProductDeleted:
    return ProductDeleted(**unwrap(await service.delete_product(product_id), action="delete"))

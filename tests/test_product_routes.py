"""Integration tests for the /api/products endpoints."""

from unittest.mock import AsyncMock

from fastapi import status

from app.adapters.persistence.base import AbstractDocumentGateway
from app.api.dependencies import get_document_gateway
from app.core.errors import PersistenceAppError
from app.main import app

PRODUCTS = "/api/products"


def _product(name: str = "Apple", price: float = 1.5, category: str = "fruit", quantity: int = 10) -> dict:
    return {"name": name, "price": price, "category": category, "quantity": quantity}


def _create(client, headers, **overrides) -> dict:
    response = client.post(PRODUCTS, json=_product(**overrides), headers=headers)
    assert response.status_code == status.HTTP_200_OK
    return response.json()


class TestProductCrud:
    def test_create_then_get(self, client, valid_api_key_headers) -> None:
        created = _create(client, valid_api_key_headers)

        assert created["id"]
        response = client.get(f"{PRODUCTS}/{created['id']}", headers=valid_api_key_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == created

    def test_integer_price_stays_integer(self, client, valid_api_key_headers) -> None:
        created = _create(client, valid_api_key_headers, price=10)

        fetched = client.get(f"{PRODUCTS}/{created['id']}", headers=valid_api_key_headers).json()

        assert created["price"] == 10
        assert isinstance(fetched["price"], int)

    def test_update(self, client, valid_api_key_headers) -> None:
        created = _create(client, valid_api_key_headers)

        response = client.put(
            f"{PRODUCTS}/{created['id']}",
            json=_product(name="Red Apple", price=2.25),
            headers=valid_api_key_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"id": created["id"], "name": "Red Apple"}
        fetched = client.get(f"{PRODUCTS}/{created['id']}", headers=valid_api_key_headers).json()
        assert fetched["price"] == 2.25

    def test_delete(self, client, valid_api_key_headers) -> None:
        created = _create(client, valid_api_key_headers)

        response = client.delete(f"{PRODUCTS}/{created['id']}", headers=valid_api_key_headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"id": created["id"]}

        again = client.delete(f"{PRODUCTS}/{created['id']}", headers=valid_api_key_headers)
        assert again.status_code == 422
        assert again.json()["error"]["code"] == "product_not_found"

    def test_get_unknown_product(self, client, valid_api_key_headers) -> None:
        response = client.get(f"{PRODUCTS}/does-not-exist", headers=valid_api_key_headers)

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "product_not_found"
        assert error["details"]["resource_id"] == "does-not-exist"
        assert "request_id" in error

    def test_update_unknown_product(self, client, valid_api_key_headers) -> None:
        response = client.put(f"{PRODUCTS}/nope", json=_product(), headers=valid_api_key_headers)

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "product_not_found"


class TestProductValidation:
    def test_missing_fields(self, client, valid_api_key_headers) -> None:
        response = client.post(PRODUCTS, json={"name": "Apple"}, headers=valid_api_key_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        error = response.json()["error"]
        assert error["code"] == "validation_error"
        fields = {tuple(item["loc"])[-1] for item in error["details"]["errors"]}
        assert {"price", "category", "quantity"} <= fields

    def test_empty_name(self, client, valid_api_key_headers) -> None:
        response = client.post(PRODUCTS, json=_product(name=""), headers=valid_api_key_headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_non_numeric_price(self, client, valid_api_key_headers) -> None:
        body = _product()
        body["price"] = "cheap"

        response = client.post(PRODUCTS, json=body, headers=valid_api_key_headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestProductListing:
    FRUITS = ["Banana", "apple", "Cherry", "date", "Elderberry", "fig", "Grape"]

    def _seed(self, client, headers) -> None:
        for index, name in enumerate(self.FRUITS):
            _create(client, headers, name=name, price=float(10 - index))

    def test_first_page_sorted_by_name(self, client, valid_api_key_headers) -> None:
        self._seed(client, valid_api_key_headers)

        response = client.get(
            PRODUCTS,
            params={"page_number": "1", "page_size": "3", "sort": "name:asc"},
            headers=valid_api_key_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert [item["name"] for item in body["data"]] == ["apple", "Banana", "Cherry"]
        assert body["count"] == 3
        assert body["total_pages"] == 3
        assert body["has_previous_page"] is False
        assert body["has_next_page"] is True

    def test_sort_by_price_descending(self, client, valid_api_key_headers) -> None:
        self._seed(client, valid_api_key_headers)

        body = client.get(
            PRODUCTS,
            params={"page_size": "2", "sort": "price:desc"},
            headers=valid_api_key_headers,
        ).json()

        assert [item["price"] for item in body["data"]] == [10.0, 9.0]

    def test_search_by_name(self, client, valid_api_key_headers) -> None:
        self._seed(client, valid_api_key_headers)

        body = client.get(
            PRODUCTS,
            params={"page_size": "10", "search": "name:rr"},
            headers=valid_api_key_headers,
        ).json()

        assert [item["name"] for item in body["data"]] == ["Cherry", "Elderberry"]

    def test_default_page_size_is_empty_page(self, client, valid_api_key_headers) -> None:
        self._seed(client, valid_api_key_headers)

        body = client.get(PRODUCTS, headers=valid_api_key_headers).json()

        assert body["page_number"] == 1
        assert body["page_size"] == 0
        assert body["data"] == []
        assert body["total_pages"] is None

    def test_lenient_integer_parsing(self, client, valid_api_key_headers) -> None:
        self._seed(client, valid_api_key_headers)

        body = client.get(
            PRODUCTS,
            params={"page_number": "abc", "page_size": "2items"},
            headers=valid_api_key_headers,
        ).json()

        assert body["page_number"] == 1
        assert body["page_size"] == 2
        assert body["count"] == 2


class TestProductAuth:
    def test_missing_api_key(self, client) -> None:
        response = client.get(PRODUCTS)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["error"]["code"] == "missing_api_key"

    def test_invalid_api_key(self, client) -> None:
        response = client.post(PRODUCTS, json=_product(), headers={"X-API-Key": "wrong"})

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["error"]["code"] == "invalid_api_key"


class TestProductListingEdgeCases:
    def test_oversized_page_number_falls_back_to_first_page(self, client, valid_api_key_headers) -> None:
        _create(client, valid_api_key_headers)

        response = client.get(
            PRODUCTS,
            params={"page_number": "9" * 5000, "page_size": "3"},
            headers=valid_api_key_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["page_number"] == 1
        assert response.json()["count"] == 1

    def test_store_failure_does_not_leak_internals(self, client, valid_api_key_headers) -> None:
        broken = AsyncMock(spec=AbstractDocumentGateway)
        broken.find_all.side_effect = PersistenceAppError(
            code="duplicate_key",
            message="Duplicate value for unique field 'email'",
            details={"collection": "products", "field": "email"},
        )
        app.dependency_overrides[get_document_gateway] = lambda: broken

        response = client.get(PRODUCTS, params={"page_size": "3"}, headers=valid_api_key_headers)

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "product_list_failed"
        assert "details" not in error
        assert "duplicate_key" not in response.text

"""User account service.

Same shape as the product service, plus the account-specific operations
used by the user and authentication routes: email uniqueness checks,
password verification and password changes. Passwords are stored as
passlib hashes and never leave this module.
"""

from __future__ import annotations

import logging
from typing import Any

from app.adapters.persistence.base import AbstractDocumentGateway, Record
from app.adapters.persistence.factory import USERS_COLLECTION
from app.core.errors import PersistenceAppError, UnprocessableEntityAppError
from app.core.logging import hash_identifier
from app.core.security import hash_password, verify_password
from app.services import list_query
from app.services.list_query import ListQuery, PageResult, SortField
from app.services.outcome import Failed, NotFound, Ok, Outcome

logger = logging.getLogger(__name__)

RESOURCE = "user"

SEARCH_FIELDS = ("name", "email")
SORT_FIELDS = (SortField("name"), SortField("email"))


def project_user(record: Record) -> dict[str, Any]:
    """Public shape of a stored user (never includes the password hash)."""

    return {
        "id": record.get("id"),
        "name": record.get("name"),
        "email": record.get("email"),
    }


class UsersService:
    """CRUD and credential operations for users."""

    def __init__(self, gateway: AbstractDocumentGateway) -> None:
        self._gateway = gateway

    async def list_users(self, query: ListQuery) -> PageResult[dict[str, Any]]:
        """Return one page of users after search and sort.

        Raises:
            UnprocessableEntityAppError: The user store could not be read.
        """
        try:
            users = await self._gateway.find_all(USERS_COLLECTION)
        except PersistenceAppError as exc:
            logger.error("users.list_failed", extra={"error_code": exc.code})
            raise UnprocessableEntityAppError(
                code="user_list_failed",
                message="Failed to list users",
            ) from exc

        page = list_query.process(
            users,
            query,
            search_fields=SEARCH_FIELDS,
            sort_fields=SORT_FIELDS,
            projector=project_user,
        )
        logger.info(
            "users.listed",
            extra={"total": len(users), "count": page.count, "page_number": query.page_number},
        )
        return page

    async def get_user(self, user_id: str) -> Outcome[dict[str, Any]]:
        try:
            user = await self._gateway.find_by_id(USERS_COLLECTION, user_id)
        except PersistenceAppError as exc:
            logger.error("users.get_failed", extra={"user_id": user_id, "error_code": exc.code})
            return Failed(resource=RESOURCE, reason=exc.code)

        if user is None:
            return NotFound(resource=RESOURCE, resource_id=user_id)
        return Ok(project_user(user))

    async def get_user_by_email(self, email: str) -> Record | None:
        """Return the stored user record (including its hash) for an email.

        Raises:
            PersistenceAppError: If the gateway fails.
        """
        return await self._gateway.find_by_field(USERS_COLLECTION, "email", email)

    async def email_is_registered(self, email: str, *, exclude_id: str | None = None) -> bool:
        """Check whether an email belongs to an account other than ``exclude_id``.

        Raises:
            UnprocessableEntityAppError: The user store could not be read.
        """
        try:
            user = await self.get_user_by_email(email)
        except PersistenceAppError as exc:
            logger.error(
                "users.email_lookup_failed",
                extra={"email_hash": hash_identifier(email), "error_code": exc.code},
            )
            raise UnprocessableEntityAppError(
                code="user_lookup_failed",
                message="Failed to look up user",
            ) from exc

        return user is not None and user.get("id") != exclude_id

    async def create_user(self, name: str, email: str, password: str) -> Outcome[dict[str, Any]]:
        """Register a user with a hashed password."""
        hashed = hash_password(password)

        try:
            user = await self._gateway.insert(
                USERS_COLLECTION,
                {"name": name, "email": email, "password": hashed},
            )
        except PersistenceAppError as exc:
            logger.error(
                "users.create_failed",
                extra={"email_hash": hash_identifier(email), "error_code": exc.code},
            )
            return Failed(resource=RESOURCE, reason=exc.code)

        logger.info("users.created", extra={"user_id": user["id"]})
        return Ok(project_user(user))

    async def update_user(self, user_id: str, name: str, email: str) -> Outcome[dict[str, Any]]:
        """Change a user's name and email.

        Returns:
            Ok({"id", "name"}), NotFound, or Failed.
        """
        try:
            existing = await self._gateway.find_by_id(USERS_COLLECTION, user_id)
            if existing is None:
                return NotFound(resource=RESOURCE, resource_id=user_id)

            ack = await self._gateway.update_fields(
                USERS_COLLECTION, user_id, {"name": name, "email": email}
            )
        except PersistenceAppError as exc:
            logger.error("users.update_failed", extra={"user_id": user_id, "error_code": exc.code})
            return Failed(resource=RESOURCE, reason=exc.code)

        if not ack.matched:
            return Failed(resource=RESOURCE, reason="not_matched")

        logger.info("users.updated", extra={"user_id": user_id})
        return Ok({"id": user_id, "name": name})

    async def delete_user(self, user_id: str) -> Outcome[dict[str, Any]]:
        try:
            existing = await self._gateway.find_by_id(USERS_COLLECTION, user_id)
            if existing is None:
                return NotFound(resource=RESOURCE, resource_id=user_id)

            ack = await self._gateway.delete_by_id(USERS_COLLECTION, user_id)
        except PersistenceAppError as exc:
            logger.error("users.delete_failed", extra={"user_id": user_id, "error_code": exc.code})
            return Failed(resource=RESOURCE, reason=exc.code)

        if not ack.modified:
            return Failed(resource=RESOURCE, reason="not_matched")

        logger.info("users.deleted", extra={"user_id": user_id})
        return Ok({"id": user_id})

    async def check_password(self, user_id: str, password: str) -> Outcome[bool]:
        """Verify ``password`` against the stored hash of ``user_id``."""
        try:
            user = await self._gateway.find_by_id(USERS_COLLECTION, user_id)
        except PersistenceAppError as exc:
            return Failed(resource=RESOURCE, reason=exc.code)

        if user is None:
            return NotFound(resource=RESOURCE, resource_id=user_id)
        return Ok(verify_password(password, user.get("password")))

    async def change_password(self, user_id: str, password: str) -> Outcome[dict[str, Any]]:
        """Store a new password hash for ``user_id``."""
        try:
            existing = await self._gateway.find_by_id(USERS_COLLECTION, user_id)
            if existing is None:
                return NotFound(resource=RESOURCE, resource_id=user_id)

            ack = await self._gateway.update_fields(
                USERS_COLLECTION, user_id, {"password": hash_password(password)}
            )
        except PersistenceAppError as exc:
            logger.error("users.password_change_failed", extra={"user_id": user_id, "error_code": exc.code})
            return Failed(resource=RESOURCE, reason=exc.code)

        if not ack.matched:
            return Failed(resource=RESOURCE, reason="not_matched")

        logger.info("users.password_changed", extra={"user_id": user_id})
        return Ok({"id": user_id})

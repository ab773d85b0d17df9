from dataclasses import asdict
from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.dependencies import get_list_query, get_users_service
from app.api.outcomes import unwrap
from app.core.auth import verify_api_key
from app.core.errors import AuthenticationAppError, ConflictAppError
from app.schemas.pagination import PageResponse
from app.schemas.users import (
    PasswordChange,
    PasswordChanged,
    UserCreate,
    UserDeleted,
    UserRead,
    UserUpdate,
    UserUpdated,
)
from app.services.list_query import ListQuery
from app.services.users_service import UsersService

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    dependencies=[Depends(verify_api_key)],
)

UsersServiceDep = Annotated[UsersService, Depends(get_users_service)]


def _email_taken_error() -> ConflictAppError:
    return ConflictAppError(
        code="email_already_taken",
        message="Email is already registered",
    )


def _password_mismatch_error() -> AuthenticationAppError:
    return AuthenticationAppError(
        code="invalid_password",
        message="Password confirmation mismatched",
    )


@router.get("", response_model=PageResponse[UserRead])
async def list_users(
    service: UsersServiceDep,
    query: Annotated[ListQuery, Depends(get_list_query)],
) -> PageResponse[UserRead]:
    """List users with search (``name``/``email``), sort and pagination."""
    page = await service.list_users(query)
    return PageResponse[UserRead](**asdict(page))


@router.get("/{user_id}", response_model=UserRead)
async def get_user(user_id: str, service: UsersServiceDep) -> UserRead:
    return UserRead(**unwrap(await service.get_user(user_id), action="get"))


@router.post("", response_model=UserRead)
async def create_user(body: UserCreate, service: UsersServiceDep) -> UserRead:
    """Register a user.

    Raises:
        AuthenticationAppError: 403 when password and confirmation differ.
        ConflictAppError: 409 when the email is already registered.
    """
    if body.password != body.password_confirm:
        raise _password_mismatch_error()

    if await service.email_is_registered(body.email):
        raise _email_taken_error()

    outcome = await service.create_user(body.name, body.email, body.password)
    return UserRead(**unwrap(outcome, action="create"))


@router.put("/{user_id}", response_model=UserUpdated)
async def update_user(user_id: str, body: UserUpdate, service: UsersServiceDep) -> UserUpdated:
    if await service.email_is_registered(body.email, exclude_id=user_id):
        raise _email_taken_error()

    outcome = await service.update_user(user_id, body.name, body.email)
    return UserUpdated(**unwrap(outcome, action="update"))


@router.delete("/{user_id}", response_model=UserDeleted)
async def delete_user(user_id: str, service: UsersServiceDep) -> UserDeleted:
    return UserDeleted(**unwrap(await service.delete_user(user_id), action="delete"))


@router.patch("/{user_id}/change-password", response_model=PasswordChanged)
async def change_password(
    user_id: str, body: PasswordChange, service: UsersServiceDep
) -> PasswordChanged:
    """Change a user's password after re-checking the current one.

    Raises:
        AuthenticationAppError: 403 on confirmation mismatch or wrong current password.
        NotFoundAppError: 422 when the user does not exist.
    """
    if body.password_new != body.password_confirm:
        raise _password_mismatch_error()

    matched = unwrap(await service.check_password(user_id, body.password_old), action="get")
    if not matched:
        raise AuthenticationAppError(
            code="invalid_credentials",
            message="Wrong password",
        )

    outcome = await service.change_password(user_id, body.password_new)
    return PasswordChanged(**unwrap(outcome, action="update"))

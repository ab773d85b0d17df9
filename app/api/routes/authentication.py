from dataclasses import asdict
from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.dependencies import get_authentication_service
from app.schemas.authentication import LoginRequest, LoginResponse
from app.services.authentication_service import AuthenticationService

router = APIRouter(prefix="/authentication", tags=["Authentication"])


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    service: Annotated[AuthenticationService, Depends(get_authentication_service)],
) -> LoginResponse:
    """Exchange email and password for an access token.

    After repeated failures the email is locked out for a while; during the
    lockout even correct credentials are refused.

    Raises:
        AuthenticationAppError: 403 for wrong email or password.
        LoginThrottledAppError: 403 with ``Retry-After`` while locked out.
    """
    result = await service.login(body.email, body.password)
    return LoginResponse(**asdict(result))

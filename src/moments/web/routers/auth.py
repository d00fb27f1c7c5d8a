from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field

from moments.core.modules.access.models import AuthStatus
from moments.web.deps import AppDep, set_no_cache_headers
from moments.web.openapi import ErrorResponse

router = APIRouter(tags=["auth"], dependencies=[Depends(set_no_cache_headers)])


class LoginRequest(BaseModel):
    """Authentication request."""

    password: str = Field("", description="Access password")


class AuthResponse(BaseModel):
    """Outcome of a login or logout."""

    success: bool
    message: str
    token: str | None = Field(None, description="Session token, returned only when the client keeps its own copy")


class VerifyTokenRequest(BaseModel):
    token: str = Field("", description="Client-held session token")


class VerifyTokenResponse(BaseModel):
    success: bool
    valid: bool = Field(..., description="Whether the token currently verifies")


@router.post(
    "/auth/login",
    summary="Log in",
    description="Check the access password and start a session (sets the `auth-token` cookie).",
    operation_id="login",
    response_model_exclude_none=True,
    responses={
        200: {"description": "Successfully authenticated"},
        400: {"model": ErrorResponse, "description": "Password missing"},
        401: {"model": ErrorResponse, "description": "Incorrect password"},
        500: {"model": ErrorResponse, "description": "Access password not configured"},
    },
)
async def login(login_data: LoginRequest, app: AppDep, response: Response) -> AuthResponse:
    token = await app.login(login_data.password, response)
    return AuthResponse(success=True, message="Login successful", token=token if app.exposes_token else None)


@router.post(
    "/auth/logout",
    summary="Log out",
    description="End the current session. Succeeds even without a session.",
    operation_id="logout",
    response_model_exclude_none=True,
)
async def logout(app: AppDep, response: Response) -> AuthResponse:
    await app.logout(response)
    return AuthResponse(success=True, message="Logout successful")


@router.get(
    "/auth/status",
    summary="Authentication status",
    description=(
        "Report whether the request is authenticated and whether a password is configured. "
        "Never cached; clients may add a cache-busting query parameter."
    ),
    operation_id="getAuthStatus",
    response_model_exclude_none=True,
)
async def auth_status(app: AppDep, response: Response) -> AuthStatus:
    return await app.get_auth_status(response)


@router.post(
    "/auth/verify-token",
    summary="Verify a client-held token",
    description="Check a token passed in the body instead of a cookie. Only available with the client token transport.",
    operation_id="verifyToken",
    responses={
        400: {"model": ErrorResponse, "description": "Token missing"},
        404: {"model": ErrorResponse, "description": "Client token transport not enabled"},
    },
)
async def verify_token(data: VerifyTokenRequest, app: AppDep) -> VerifyTokenResponse:
    valid = await app.verify_token(data.token)
    return VerifyTokenResponse(success=True, valid=valid)

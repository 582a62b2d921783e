"""Auth endpoints: register, login, refresh, logout and the current account."""

from fastapi import APIRouter, Depends, HTTPException, status

from factory import ServiceFactory
from domain.exceptions import AuthenticationError, DuplicateLoginError
from application.dto import RegisterRequest, LoginRequest
from adapters.rest.dependencies import get_factory, get_current_user, CurrentUser
from adapters.rest.schemas import (
    AccountOut,
    LoginBody,
    RefreshBody,
    RegisterBody,
    TokenResponse,
)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(
    body: RegisterBody,
    factory: ServiceFactory = Depends(get_factory),
):
    auth_service = factory.create_authentication_service()
    try:
        token = await auth_service.register(RegisterRequest(
            email=body.email,
            password=body.password,
            name=body.name,
        ))
    except DuplicateLoginError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(exc),
        )
    return TokenResponse.from_token(token)


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginBody,
    factory: ServiceFactory = Depends(get_factory),
):
    auth_service = factory.create_authentication_service()
    try:
        token = await auth_service.login(LoginRequest(
            email=body.email,
            password=body.password,
        ))
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        )
    return TokenResponse.from_token(token)


@router.post("/refresh", response_model=TokenResponse)
async def refresh(
    body: RefreshBody,
    factory: ServiceFactory = Depends(get_factory),
):
    """Re-issue a new JWT using an existing (possibly expired) token."""
    auth_service = factory.create_authentication_service()
    try:
        token = await auth_service.refresh_token(body.token)
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        )
    return TokenResponse.from_token(token)


@router.post("/logout")
async def logout(user: CurrentUser = Depends(get_current_user)):
    """Tokens are stateless; the client discards its copy."""
    return {"ok": True}


@router.get("/me", response_model=AccountOut)
async def me(
    user: CurrentUser = Depends(get_current_user),
    factory: ServiceFactory = Depends(get_factory),
):
    auth_service = factory.create_authentication_service()
    try:
        account = await auth_service.me(user.user_id)
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        )
    return AccountOut.from_account(account)

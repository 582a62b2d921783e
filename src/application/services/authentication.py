"""
application.services.authentication - Account registration and sign-in.

Handles password hashing (bcrypt), JWT creation/verification, and the
credential-verification callback used by the identity gate.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt as _bcrypt
from jose import jwt, JWTError

from domain.entities import Account
from domain.ports import AccountRepository
from domain.exceptions import AuthenticationError, DuplicateLoginError
from application.dto import RegisterRequest, LoginRequest, AuthToken

logger = logging.getLogger(__name__)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthenticationService:
    """Handles registration, login, and JWT management."""

    def __init__(
        self,
        account_repo: AccountRepository,
        jwt_secret: str,
        jwt_expiry_hours: int = 24,
        jwt_algorithm: str = "HS256",
    ):
        self._account_repo = account_repo
        self._jwt_secret = jwt_secret
        self._jwt_expiry_hours = jwt_expiry_hours
        self._jwt_algorithm = jwt_algorithm
        # bcrypt is used directly (passlib is incompatible with bcrypt >= 4.0)

    async def register(self, request: RegisterRequest) -> AuthToken:
        """Create a new account and return a JWT."""
        email = _normalize_email(request.email)
        if await self._account_repo.get_by_email(email) is not None:
            raise DuplicateLoginError(f"Email '{email}' is already registered.")

        account = Account(
            email=email,
            name=request.name.strip(),
            password_hash=_bcrypt.hashpw(
                request.password.encode(), _bcrypt.gensalt(),
            ).decode(),
        )
        account.id = await self._account_repo.save(account)

        logger.info("Registered account %d (%s)", account.id, email)
        return self._create_token(account)

    async def authorize(self, email: str, password: str) -> Account | None:
        """Return the account for valid credentials, None otherwise."""
        if not email or not password:
            return None
        account = await self._account_repo.get_by_email(_normalize_email(email))
        if account is None or not account.password_hash:
            return None
        if not _bcrypt.checkpw(password.encode(), account.password_hash.encode()):
            return None
        return account

    async def login(self, request: LoginRequest) -> AuthToken:
        """Verify credentials and return a JWT."""
        account = await self.authorize(request.email, request.password)
        if account is None:
            raise AuthenticationError("Invalid email or password.")

        logger.info("Account %d signed in", account.id)
        return self._create_token(account)

    def verify_token(self, token: str) -> dict[str, Any]:
        """Decode and validate a JWT. Returns the payload dict."""
        try:
            payload = jwt.decode(
                token, self._jwt_secret, algorithms=[self._jwt_algorithm],
            )
        except JWTError as exc:
            raise AuthenticationError(f"Token verification failed: {exc}")
        if payload.get("user_id") is None:
            raise AuthenticationError("Invalid token payload.")
        return payload

    async def refresh_token(self, token: str) -> AuthToken:
        """Issue a fresh token from an existing one (even if expired).

        Raises AuthenticationError if the token is structurally invalid or
        the account no longer exists.
        """
        try:
            payload = jwt.decode(
                token,
                self._jwt_secret,
                algorithms=[self._jwt_algorithm],
                options={"verify_exp": False},
            )
        except JWTError as exc:
            raise AuthenticationError(f"Token refresh failed: {exc}")

        user_id = payload.get("user_id")
        if not user_id:
            raise AuthenticationError("Invalid token payload.")

        account = await self._account_repo.get_by_id(user_id)
        if account is None:
            raise AuthenticationError("Account no longer exists.")

        logger.info("Token refreshed for account %d", user_id)
        return self._create_token(account)

    async def me(self, user_id: int) -> Account:
        account = await self._account_repo.get_by_id(user_id)
        if account is None:
            raise AuthenticationError("Account no longer exists.")
        return account

    def _create_token(self, account: Account) -> AuthToken:
        expire = datetime.now(timezone.utc) + timedelta(hours=self._jwt_expiry_hours)
        payload = {
            "user_id": account.id,
            "email": account.email,
            "exp": expire,
        }
        token = jwt.encode(payload, self._jwt_secret, algorithm=self._jwt_algorithm)
        return AuthToken(
            access_token=token,
            user_id=account.id,
            email=account.email,
            name=account.name,
        )

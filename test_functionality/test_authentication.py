"""
Integration tests for AuthenticationService (bcrypt + JWT).
"""
import pytest

from domain.entities import Account
from domain.exceptions import AuthenticationError, DuplicateLoginError
from application.dto import LoginRequest, RegisterRequest
from application.services.authentication import AuthenticationService
from infrastructure.persistence.account_repo import SQLiteAccountRepository


@pytest.fixture
def auth(factory):
    return factory.create_authentication_service()


class TestRegistration:

    @pytest.mark.asyncio
    async def test_register_returns_token(self, auth):
        token = await auth.register(RegisterRequest(
            email="  Carol@Example.com ", password="secret123", name="Carol",
        ))
        assert token.token_type == "bearer"
        assert token.email == "carol@example.com"
        assert token.name == "Carol"

        payload = auth.verify_token(token.access_token)
        assert payload["user_id"] == token.user_id
        assert payload["email"] == "carol@example.com"

    @pytest.mark.asyncio
    async def test_password_stored_hashed(self, factory, auth):
        await auth.register(RegisterRequest(email="dan@example.com", password="secret123", name="Dan"))
        account = await SQLiteAccountRepository(factory._connection).get_by_email("dan@example.com")
        assert account.password_hash.startswith("$2")
        assert "secret123" not in account.password_hash

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected_case_insensitively(self, auth, alice):
        with pytest.raises(DuplicateLoginError):
            await auth.register(RegisterRequest(
                email="ALICE@example.com", password="another1", name="Alice 2",
            ))


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_with_valid_credentials(self, auth, alice):
        token = await auth.login(LoginRequest(email="alice@example.com", password="secret123"))
        assert token.user_id == alice.user_id

    @pytest.mark.asyncio
    async def test_wrong_password(self, auth, alice):
        with pytest.raises(AuthenticationError):
            await auth.login(LoginRequest(email="alice@example.com", password="wrong-pass"))

    @pytest.mark.asyncio
    async def test_unknown_email(self, auth):
        with pytest.raises(AuthenticationError):
            await auth.login(LoginRequest(email="nobody@example.com", password="secret123"))

    @pytest.mark.asyncio
    async def test_authorize_returns_none_for_blank_input(self, auth, alice):
        assert await auth.authorize("", "secret123") is None
        assert await auth.authorize("alice@example.com", "") is None


class TestTokens:

    def test_garbage_token_rejected(self, auth):
        with pytest.raises(AuthenticationError):
            auth.verify_token("not-a-jwt")

    @pytest.mark.asyncio
    async def test_token_from_other_secret_rejected(self, factory, alice):
        other = AuthenticationService(
            SQLiteAccountRepository(factory._connection), jwt_secret="other-secret",
        )
        token = await other.login(LoginRequest(email="alice@example.com", password="secret123"))
        with pytest.raises(AuthenticationError):
            factory.create_authentication_service().verify_token(token.access_token)

    @pytest.mark.asyncio
    async def test_expired_token_rejected_but_refreshable(self, factory, alice):
        expired_issuer = AuthenticationService(
            SQLiteAccountRepository(factory._connection),
            jwt_secret="test-secret",
            jwt_expiry_hours=-1,
        )
        stale = await expired_issuer.login(
            LoginRequest(email="alice@example.com", password="secret123"),
        )
        auth = factory.create_authentication_service()
        with pytest.raises(AuthenticationError):
            auth.verify_token(stale.access_token)

        fresh = await auth.refresh_token(stale.access_token)
        assert auth.verify_token(fresh.access_token)["user_id"] == alice.user_id

    @pytest.mark.asyncio
    async def test_me(self, auth, alice):
        account = await auth.me(alice.user_id)
        assert account.email == "alice@example.com"
        assert account.name == "Alice"
        assert account.created_at

    @pytest.mark.asyncio
    async def test_me_for_missing_account(self, auth):
        with pytest.raises(AuthenticationError):
            await auth.me(4242)


class EmailCheckMissesRepository(SQLiteAccountRepository):
    """Behaves as if a concurrent registration slipped past the lookup."""

    async def get_by_email(self, email):
        return None


class TestConcurrentRegistration:

    @pytest.mark.asyncio
    async def test_repository_maps_unique_email_to_duplicate(self, factory, alice):
        repo = SQLiteAccountRepository(factory._connection)
        with pytest.raises(DuplicateLoginError):
            await repo.save(Account(email="alice@example.com", name="Copy", password_hash="x"))

    @pytest.mark.asyncio
    async def test_register_race_is_duplicate_not_server_error(self, factory, alice):
        auth = AuthenticationService(
            EmailCheckMissesRepository(factory._connection), jwt_secret="test-secret",
        )
        with pytest.raises(DuplicateLoginError):
            await auth.register(RegisterRequest(
                email="alice@example.com", password="secret123", name="Alice again",
            ))

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from warden.core.exceptions import (
    InvalidEmailError,
    ResetTokenExpiredError,
    ResetTokenNotFoundError,
    UserNotFoundError,
    WeakPasswordError,
)
from warden.domain.entities.password_reset_token import PasswordResetToken
from warden.domain.interfaces.notifications import INotificationSink
from warden.domain.interfaces.repositories import IPasswordResetTokenRepository
from warden.domain.services.auth.credentials import CredentialService
from warden.domain.services.auth.reset_tokens import ResetTokenService
from tests.factories.user import create_fake_user

TTL = timedelta(minutes=30)


@pytest.fixture
def tokens():
    return AsyncMock(spec=IPasswordResetTokenRepository)


@pytest.fixture
def credentials():
    return AsyncMock(spec=CredentialService)


@pytest.fixture
def notifier():
    sink = AsyncMock(spec=INotificationSink)
    sink.send_password_reset_email.return_value = "handle-1"
    return sink


@pytest.fixture
def service(tokens, credentials, notifier, clock):
    return ResetTokenService(tokens, credentials, notifier, ttl=TTL, clock=clock)


def stored_token(clock, user_id="user-1", token_id="token-1"):
    return PasswordResetToken(id=token_id, user_id=user_id, created_at=clock())


@pytest.mark.asyncio
async def test_create_binds_token_to_user(service, tokens, credentials):
    user = create_fake_user(email="alice@example.com")
    credentials.get_user_by_email.return_value = user
    tokens.create_reset_token.return_value = PasswordResetToken(id="t", user_id=user.id)

    token = await service.create("alice@example.com")

    tokens.create_reset_token.assert_awaited_once_with(user.id)
    assert token.user_id == user.id


@pytest.mark.asyncio
async def test_create_for_unknown_email(service, tokens, credentials):
    credentials.get_user_by_email.return_value = None

    with pytest.raises(UserNotFoundError):
        await service.create("ghost@example.com")
    tokens.create_reset_token.assert_not_awaited()


@pytest.mark.asyncio
async def test_create_rejects_invalid_email(service, credentials):
    credentials.get_user_by_email.side_effect = InvalidEmailError()

    with pytest.raises(InvalidEmailError):
        await service.create("nope")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "elapsed, expired",
    [
        (timedelta(0), False),
        (TTL - timedelta(seconds=1), False),
        (TTL, False),
        (TTL + timedelta(seconds=1), True),
        (timedelta(days=3), True),
    ],
)
async def test_resolve_user_respects_ttl(service, tokens, clock, elapsed, expired):
    tokens.find_reset_token.return_value = stored_token(clock)
    clock.advance(seconds=elapsed.total_seconds())

    if expired:
        with pytest.raises(ResetTokenExpiredError):
            await service.resolve_user("token-1")
    else:
        assert await service.resolve_user("token-1") == "user-1"


@pytest.mark.asyncio
async def test_resolve_user_with_explicit_ttl(service, tokens, clock):
    tokens.find_reset_token.return_value = stored_token(clock)
    clock.advance(minutes=5)

    with pytest.raises(ResetTokenExpiredError):
        await service.resolve_user("token-1", ttl=timedelta(minutes=1))
    assert await service.resolve_user("token-1", ttl=timedelta(hours=1)) == "user-1"


@pytest.mark.asyncio
async def test_resolve_user_unknown_token(service, tokens):
    tokens.find_reset_token.return_value = None

    with pytest.raises(ResetTokenNotFoundError):
        await service.resolve_user("missing")


@pytest.mark.asyncio
async def test_resolve_user_does_not_consume(service, tokens, clock):
    tokens.find_reset_token.return_value = stored_token(clock)

    assert await service.resolve_user("token-1") == "user-1"
    assert await service.resolve_user("token-1") == "user-1"
    tokens.delete_reset_token.assert_not_awaited()


@pytest.mark.asyncio
async def test_login_with_token_issues_session(service, tokens, credentials, clock):
    tokens.find_reset_token.return_value = stored_token(clock)
    credentials.login_by_id.return_value = "session-token"

    assert await service.login_with_token("token-1") == "session-token"
    credentials.login_by_id.assert_awaited_once_with("user-1")
    tokens.delete_reset_token.assert_not_awaited()


@pytest.mark.asyncio
async def test_login_with_expired_token(service, tokens, credentials, clock):
    tokens.find_reset_token.return_value = stored_token(clock)
    clock.advance(hours=1)

    with pytest.raises(ResetTokenExpiredError):
        await service.login_with_token("token-1")
    credentials.login_by_id.assert_not_awaited()


@pytest.mark.asyncio
async def test_reset_password_consumes_token_before_writing(service, tokens, credentials, clock):
    tokens.find_reset_token.return_value = stored_token(clock)
    calls = []
    tokens.delete_reset_token.side_effect = lambda token_id: calls.append(("delete", token_id))
    credentials.set_password.side_effect = lambda user_id, password: calls.append(("set", user_id))

    await service.reset_password("token-1", "brand-new-password")

    assert calls == [("delete", "token-1"), ("set", "user-1")]
    credentials.set_password.assert_awaited_once_with("user-1", "brand-new-password")


@pytest.mark.asyncio
async def test_reset_password_keeps_token_when_password_is_weak(service, tokens, credentials, clock):
    tokens.find_reset_token.return_value = stored_token(clock)

    with pytest.raises(WeakPasswordError):
        await service.reset_password("token-1", "short")
    tokens.delete_reset_token.assert_not_awaited()
    credentials.set_password.assert_not_awaited()


@pytest.mark.asyncio
async def test_reset_password_loses_race_for_consumed_token(service, tokens, credentials, clock):
    tokens.find_reset_token.return_value = stored_token(clock)
    tokens.delete_reset_token.side_effect = ResetTokenNotFoundError()

    with pytest.raises(ResetTokenNotFoundError):
        await service.reset_password("token-1", "attacker-password")
    credentials.set_password.assert_not_awaited()


@pytest.mark.asyncio
async def test_request_reset_hands_token_to_sink(service, tokens, credentials, notifier):
    user = create_fake_user(email="alice@example.com")
    credentials.get_user_by_email.return_value = user
    tokens.create_reset_token.return_value = PasswordResetToken(id="token-9", user_id=user.id)

    handle = await service.request_reset("Alice@Example.com")

    assert handle == "handle-1"
    notifier.send_password_reset_email.assert_awaited_once_with("alice@example.com", "token-9")


@pytest.mark.asyncio
async def test_request_reset_without_sink(tokens, credentials):
    service = ResetTokenService(tokens, credentials)

    with pytest.raises(RuntimeError):
        await service.request_reset("alice@example.com")
    credentials.get_user_by_email.assert_not_awaited()


@pytest.mark.asyncio
async def test_sweep_delegates_cutoff(service, tokens, clock):
    tokens.sweep_reset_tokens.return_value = 3
    cutoff = clock() - timedelta(days=1)

    assert await service.sweep(cutoff) == 3
    tokens.sweep_reset_tokens.assert_awaited_once_with(cutoff)


@pytest.mark.asyncio
async def test_sweep_without_credential_service(tokens, clock):
    tokens.sweep_reset_tokens.return_value = 4
    service = ResetTokenService(tokens)

    assert await service.sweep(clock()) == 4


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "call",
    [
        lambda service: service.create("alice@example.com"),
        lambda service: service.login_with_token("token-1"),
        lambda service: service.reset_password("token-1", "brand-new-password"),
    ],
)
async def test_credential_operations_need_credential_service(tokens, clock, call):
    tokens.find_reset_token.return_value = stored_token(clock)
    service = ResetTokenService(tokens, clock=clock)

    with pytest.raises(RuntimeError):
        await call(service)
    tokens.create_reset_token.assert_not_awaited()
    tokens.delete_reset_token.assert_not_awaited()

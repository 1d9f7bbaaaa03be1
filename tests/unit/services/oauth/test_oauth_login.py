from unittest.mock import AsyncMock

import pytest

from warden.core.exceptions import (
    EmailExistsError,
    ExchangeFailedError,
    NoEmailAvailableError,
    ProviderNotFoundError,
)
from warden.domain.services.auth.credentials import CredentialService
from warden.domain.services.oauth.login import OAuthLoginService
from warden.domain.services.oauth.registry import IdentityProviderRegistry
from warden.domain.value_objects.identity_profile import IdentityProfile, ProviderToken
from tests.factories.user import create_fake_user


@pytest.fixture
def registry():
    registry = AsyncMock(spec=IdentityProviderRegistry)
    registry.exchange.return_value = ProviderToken(access_token="provider-token")
    registry.get_user_info.return_value = IdentityProfile(
        provider="github", subject="1", email="octo@example.com", name="Octo Cat", email_verified=True
    )
    return registry


@pytest.fixture
def credentials():
    credentials = AsyncMock(spec=CredentialService)
    credentials.provision_external_user.return_value = create_fake_user(email="octo@example.com")
    credentials.login_by_id.return_value = "session-token"
    return credentials


@pytest.fixture
def service(registry, credentials):
    return OAuthLoginService(registry, credentials)


@pytest.mark.asyncio
async def test_callback_provisions_user_and_issues_session(service, registry, credentials):
    result = await service.handle_callback("github", "code-1")

    registry.exchange.assert_awaited_once_with("github", "code-1")
    registry.get_user_info.assert_awaited_once_with("github", registry.exchange.return_value)
    credentials.provision_external_user.assert_awaited_once_with(
        "octo@example.com", "Octo Cat", link_existing=True
    )
    credentials.login_by_id.assert_awaited_once_with(result.user.id)
    assert result.access_token == "session-token"
    assert result.profile.subject == "1"


@pytest.mark.asyncio
async def test_callback_without_email(service, registry, credentials):
    registry.get_user_info.return_value = IdentityProfile(provider="vk", subject="7")

    with pytest.raises(NoEmailAvailableError):
        await service.handle_callback("vk", "code-1")
    credentials.provision_external_user.assert_not_awaited()


@pytest.mark.asyncio
async def test_callback_exchange_failure_propagates(service, registry, credentials):
    registry.exchange.side_effect = ExchangeFailedError()

    with pytest.raises(ExchangeFailedError):
        await service.handle_callback("google", "bad-code")
    registry.get_user_info.assert_not_awaited()
    credentials.login_by_id.assert_not_awaited()


@pytest.mark.asyncio
async def test_callback_unknown_provider(service, registry):
    registry.exchange.side_effect = ProviderNotFoundError("facebook")

    with pytest.raises(ProviderNotFoundError):
        await service.handle_callback("facebook", "code")


@pytest.mark.asyncio
async def test_callback_against_real_store(user_repository, credential_service, token_authority, registry):
    service = OAuthLoginService(registry, credential_service)

    first = await service.handle_callback("github", "code-1")
    second = await service.handle_callback("github", "code-2")

    assert first.user.id == second.user.id
    assert first.user.hashed_password is None
    assert token_authority.verify(second.access_token).user_id == first.user.id


@pytest.mark.asyncio
async def test_unverified_email_does_not_link_to_existing_account(user_repository, credential_service, registry):
    owner = await credential_service.register("octo@example.com", "password123")
    registry.get_user_info.return_value = IdentityProfile(provider="github", subject="666", email="octo@example.com")
    service = OAuthLoginService(registry, credential_service)

    with pytest.raises(EmailExistsError):
        await service.handle_callback("github", "code-1")

    stored = await user_repository.find_by_email("octo@example.com")
    assert stored.id == owner.id
    assert stored.hashed_password == owner.hashed_password


@pytest.mark.asyncio
async def test_unverified_email_still_creates_new_account(user_repository, credential_service, registry):
    registry.get_user_info.return_value = IdentityProfile(provider="github", subject="7", email="new@example.com")
    service = OAuthLoginService(registry, credential_service)

    result = await service.handle_callback("github", "code-1")

    assert result.user.email == "new@example.com"
    assert (await user_repository.find_by_email("new@example.com")).id == result.user.id

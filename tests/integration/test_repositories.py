from datetime import timedelta

import pytest

from warden.core.exceptions import (
    EmailExistsError,
    InvalidCredentialsError,
    ResetTokenExpiredError,
    ResetTokenNotFoundError,
    UserNotFoundError,
)
from warden.domain.entities.password_reset_token import PasswordResetToken
from warden.utils.time import utcnow
from tests.factories.user import create_fake_user


@pytest.mark.asyncio
async def test_user_round_trip(user_repository):
    user = await user_repository.create_user(create_fake_user(email="Alice@Example.com"))

    assert (await user_repository.find_by_id(user.id)).email == "alice@example.com"
    assert (await user_repository.find_by_email("ALICE@example.com")).id == user.id
    assert await user_repository.find_by_id("missing") is None
    assert await user_repository.find_by_email("nobody@example.com") is None


@pytest.mark.asyncio
async def test_duplicate_email_is_a_conflict(user_repository):
    await user_repository.create_user(create_fake_user(email="alice@example.com"))

    with pytest.raises(EmailExistsError):
        await user_repository.create_user(create_fake_user(email="alice@example.com"))

    # The session is usable again after the rollback.
    assert await user_repository.find_by_email("alice@example.com") is not None


@pytest.mark.asyncio
async def test_update_email(user_repository):
    alice = await user_repository.create_user(create_fake_user(email="alice@example.com"))
    await user_repository.create_user(create_fake_user(email="bob@example.com"))

    updated = await user_repository.update_email(alice.id, "alice@new.example.com")
    assert updated.email == "alice@new.example.com"

    with pytest.raises(EmailExistsError):
        await user_repository.update_email(alice.id, "bob@example.com")
    with pytest.raises(UserNotFoundError):
        await user_repository.update_email("missing", "x@example.com")


@pytest.mark.asyncio
async def test_update_password_hash(user_repository):
    user = await user_repository.create_user(create_fake_user(hashed_password="old"))

    await user_repository.update_password_hash(user.id, "new")

    assert (await user_repository.find_by_id(user.id)).hashed_password == "new"
    with pytest.raises(UserNotFoundError):
        await user_repository.update_password_hash("missing", "new")


@pytest.mark.asyncio
async def test_delete_user_removes_reset_tokens(user_repository, reset_token_repository):
    user = await user_repository.create_user(create_fake_user())
    token = await reset_token_repository.create_reset_token(user.id)

    await user_repository.delete_user(user.id)

    assert await user_repository.find_by_id(user.id) is None
    assert await reset_token_repository.find_reset_token(token.id) is None
    with pytest.raises(UserNotFoundError):
        await user_repository.delete_user(user.id)


@pytest.mark.asyncio
async def test_reset_token_lifecycle(user_repository, reset_token_repository):
    user = await user_repository.create_user(create_fake_user())

    first = await reset_token_repository.create_reset_token(user.id)
    second = await reset_token_repository.create_reset_token(user.id)

    assert first.id != second.id
    assert (await reset_token_repository.find_reset_token(first.id)).user_id == user.id

    await reset_token_repository.delete_reset_token(first.id)
    assert await reset_token_repository.find_reset_token(first.id) is None
    assert await reset_token_repository.find_reset_token(second.id) is not None

    with pytest.raises(ResetTokenNotFoundError):
        await reset_token_repository.delete_reset_token(first.id)


@pytest.mark.asyncio
async def test_sweep_deletes_strictly_older_tokens(user_repository, reset_token_repository, db_session):
    user = await user_repository.create_user(create_fake_user())
    cutoff = utcnow() - timedelta(hours=1)
    for token_id, created_at in [
        ("older", cutoff - timedelta(seconds=1)),
        ("much-older", cutoff - timedelta(days=2)),
        ("at-cutoff", cutoff),
        ("newer", cutoff + timedelta(seconds=1)),
    ]:
        db_session.add(PasswordResetToken(id=token_id, user_id=user.id, created_at=created_at))
    await db_session.commit()

    assert await reset_token_repository.sweep_reset_tokens(cutoff) == 2

    for token_id, survives in [("older", False), ("much-older", False), ("at-cutoff", True), ("newer", True)]:
        assert (await reset_token_repository.find_reset_token(token_id) is not None) is survives


# ---------------------------------------------------------------------------
# Services against the real store
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_register_login_and_duplicate(credential_service, token_authority):
    user = await credential_service.register("alice@example.com", "password123")

    token = await credential_service.login("alice@example.com", "password123")
    assert token_authority.verify(token).user_id == user.id

    with pytest.raises(EmailExistsError):
        await credential_service.register("alice@example.com", "password123")
    with pytest.raises(EmailExistsError):
        await credential_service.register("ALICE@example.com", "another-password")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "registered, typed",
    [
        ("alice@xn--bcher-kva.com", "alice@xn--bcher-kva.com"),
        ("jos\u00e9@example.com", "jose\u0301@example.com"),
        ("jose\u0301@example.com", "jose\u0301@example.com"),
        ("Carol@Example.com", "  carol@EXAMPLE.com "),
    ],
)
async def test_login_matches_registration_normalization(credential_service, token_authority, registered, typed):
    user = await credential_service.register(registered, "password123")

    token = await credential_service.login(typed, "password123")

    assert token_authority.verify(token).user_id == user.id


@pytest.mark.asyncio
async def test_deleted_user_token_no_longer_validates(credential_service, user_repository):
    user = await credential_service.register("carol@example.com", "password123")
    token = await credential_service.login("carol@example.com", "password123")

    await user_repository.delete_user(user.id)

    with pytest.raises(UserNotFoundError):
        await credential_service.validate_token(token)


@pytest.mark.asyncio
async def test_password_reset_flow(credential_service, reset_token_service, token_authority):
    user = await credential_service.register("dave@example.com", "password123")
    reset = await reset_token_service.create("dave@example.com")

    session = await reset_token_service.login_with_token(reset.id)
    assert token_authority.verify(session).user_id == user.id
    assert await reset_token_service.resolve_user(reset.id) == user.id

    await reset_token_service.reset_password(reset.id, "brand-new-password")

    token = await credential_service.login("dave@example.com", "brand-new-password")
    assert token_authority.verify(token).user_id == user.id
    with pytest.raises(ResetTokenNotFoundError):
        await reset_token_service.resolve_user(reset.id)
    with pytest.raises(ResetTokenNotFoundError):
        await reset_token_service.reset_password(reset.id, "yet-another-password")


@pytest.mark.asyncio
async def test_concurrent_resets_change_password_once(
    mocker, credential_service, reset_token_service, reset_token_repository
):
    await credential_service.register("gina@example.com", "password123")
    reset = await reset_token_service.create("gina@example.com")
    snapshot = await reset_token_repository.find_reset_token(reset.id)
    # Both callers resolved the token before either consumed it.
    mocker.patch.object(reset_token_repository, "find_reset_token", return_value=snapshot)

    await reset_token_service.reset_password(reset.id, "winner-password")
    with pytest.raises(ResetTokenNotFoundError):
        await reset_token_service.reset_password(reset.id, "loser-password")

    assert await credential_service.login("gina@example.com", "winner-password")
    with pytest.raises(InvalidCredentialsError):
        await credential_service.login("gina@example.com", "loser-password")


@pytest.mark.asyncio
async def test_stale_reset_token_is_rejected(credential_service, reset_token_service):
    await credential_service.register("erin@example.com", "password123")
    reset = await reset_token_service.create("erin@example.com")

    with pytest.raises(ResetTokenExpiredError):
        await reset_token_service.resolve_user(reset.id, ttl=timedelta(seconds=-1))


@pytest.mark.asyncio
async def test_sweep_through_service(credential_service, reset_token_service):
    await credential_service.register("frank@example.com", "password123")
    await reset_token_service.create("frank@example.com")
    await reset_token_service.create("frank@example.com")

    assert await reset_token_service.sweep(utcnow() - timedelta(minutes=5)) == 0
    assert await reset_token_service.sweep(utcnow() + timedelta(seconds=1)) == 2

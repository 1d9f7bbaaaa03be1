import anyio
import pytest

from warden.utils.security import (
    hash_password,
    hash_password_async,
    verify_password,
    verify_password_async,
)


def test_hash_is_salted():
    first, second = hash_password("password123"), hash_password("password123")
    assert first != second
    assert verify_password("password123", first)
    assert verify_password("password123", second)


def test_verify_rejects_wrong_password():
    assert not verify_password("wrong-password", hash_password("password123"))


@pytest.mark.parametrize("hashed", [None, ""])
def test_verify_without_hash(hashed):
    assert verify_password("password123", hashed) is False


@pytest.mark.asyncio
async def test_async_helpers_round_trip():
    hashed = await hash_password_async("password123")
    assert await verify_password_async("password123", hashed)
    assert not await verify_password_async("nope-nope", hashed)
    assert await verify_password_async("password123", None) is False


@pytest.mark.asyncio
async def test_concurrent_hashing_completes():
    results = []

    async def worker(i):
        results.append(await hash_password_async(f"password-{i}"))

    async with anyio.create_task_group() as tg:
        for i in range(8):
            tg.start_soon(worker, i)

    assert len(set(results)) == 8

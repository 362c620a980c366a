"""
Username directory: reservation conflicts and identifier resolution.
"""

import pytest

from flower.shared.core.exceptions import DirectoryConflictError, NotFoundError, WriteFailure


@pytest.mark.asyncio
async def test_second_reserve_of_same_username_conflicts(directory):
    await directory.reserve("alice", "uid-1", "alice@x.com")

    with pytest.raises(DirectoryConflictError):
        await directory.reserve("alice", "uid-2", "other@x.com")


@pytest.mark.asyncio
async def test_reserve_conflict_ignores_case(directory, username_repository):
    await directory.reserve("Alice", "uid-1", "alice@x.com")

    with pytest.raises(DirectoryConflictError):
        await directory.reserve("ALICE", "uid-2", "other@x.com")

    assert list(username_repository.entries) == ["alice"]
    assert username_repository.entries["alice"].uid == "uid-1"


@pytest.mark.asyncio
async def test_store_side_conflict_is_reported(directory, username_repository):
    """Two writers passing the existence check: the store rejects the second."""
    await directory.reserve("alice", "uid-1", "alice@x.com")
    original_get = username_repository.get

    async def stale_get(username_lc):
        await original_get(username_lc)
        return None

    username_repository.get = stale_get

    with pytest.raises(DirectoryConflictError):
        await directory.reserve("alice", "uid-2", "other@x.com")


@pytest.mark.asyncio
async def test_reserve_write_failure_propagates(directory, username_repository):
    username_repository.fail_on["create"] = WriteFailure("store unavailable", collection="usernames")

    with pytest.raises(WriteFailure):
        await directory.reserve("alice", "uid-1", "alice@x.com")


@pytest.mark.asyncio
async def test_resolve_email_does_no_directory_read(directory, username_repository):
    assert await directory.resolve("  alice@x.com ") == "alice@x.com"
    assert username_repository.reads == 0


@pytest.mark.asyncio
async def test_resolve_is_case_insensitive(directory):
    await directory.reserve("alice", "uid-1", "alice@x.com")

    assert await directory.resolve("Alice") == "alice@x.com"
    assert await directory.resolve(" alice ") == "alice@x.com"


@pytest.mark.asyncio
async def test_resolve_unknown_username(directory):
    with pytest.raises(NotFoundError):
        await directory.resolve("ghost")


@pytest.mark.asyncio
async def test_resolve_entry_without_email(directory):
    await directory.reserve("alice", "uid-1", None)

    with pytest.raises(NotFoundError):
        await directory.resolve("alice")


@pytest.mark.asyncio
async def test_is_taken(directory):
    assert not await directory.is_taken("alice")
    await directory.reserve("alice", "uid-1", "alice@x.com")
    assert await directory.is_taken("ALICE")

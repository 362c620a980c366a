"""
Self-healing of partial registrations on the next authenticated access.
"""

import pytest

from flower.modules.accounts.domain.models.account import Account
from flower.modules.accounts.domain.models.directory import Profile, UserRecord, UsernameEntry
from flower.modules.accounts.domain.services.reconciliation import AccountReconciler
from flower.shared.core.exceptions import PartialRegistrationError

from tests.fakes import write_failure


@pytest.fixture
def reconciler(identity_provider, directory, user_repository, profile_repository) -> AccountReconciler:
    return AccountReconciler(identity_provider, directory, user_repository, profile_repository)


@pytest.mark.asyncio
async def test_consistent_account_needs_no_repair(registration_service, reconciler, profile_repository):
    account = await registration_service.register("alice", "alice@x.com", "secret1", "secret1")
    profile_repository.profiles[account.uid] = Profile(uid=account.uid, username="alice")

    report = await reconciler.reconcile(account)

    assert report.consistent
    assert report.repaired == []
    assert report.username == "alice"


@pytest.mark.asyncio
async def test_missing_directory_entry_is_reserved(registration_service, reconciler, username_repository,
                                                   profile_repository, identity_provider):
    username_repository.fail_on["create"] = write_failure("usernames")
    with pytest.raises(PartialRegistrationError):
        await registration_service.register("alice", "alice@x.com", "secret1", "secret1")
    username_repository.fail_on.clear()
    account = identity_provider.current_account()

    report = await reconciler.reconcile(account)

    assert "reserve_username" in report.repaired
    assert "write_profile" in report.repaired
    assert username_repository.entries["alice"].uid == account.uid
    assert profile_repository.profiles[account.uid].username == "alice"


@pytest.mark.asyncio
async def test_missing_display_name_is_restored_from_user_record(reconciler, identity_provider, user_repository):
    account = await identity_provider.create_account("alice@x.com", "secret1")
    await user_repository.save(UserRecord.for_registration(uid=account.uid, username="Alice", email="alice@x.com"))

    report = await reconciler.reconcile(account)

    assert "set_display_name" in report.repaired
    assert identity_provider.current_account().display_name == "Alice"


@pytest.mark.asyncio
async def test_missing_user_record_is_written(reconciler, identity_provider, user_repository):
    account = await identity_provider.create_account("alice@x.com", "secret1")
    account = await identity_provider.set_display_name("alice")

    report = await reconciler.reconcile(account)

    assert "write_user_record" in report.repaired
    assert user_repository.records[account.uid].username_lc == "alice"


@pytest.mark.asyncio
async def test_username_owned_by_someone_else_is_a_conflict(reconciler, username_repository):
    username_repository.entries["alice"] = UsernameEntry(username_lc="alice", uid="uid-other", email="o@x.com")
    account = Account(uid="uid-1", email="alice@x.com", display_name="alice")

    report = await reconciler.reconcile(account)

    assert report.conflict
    assert not report.consistent
    assert username_repository.entries["alice"].uid == "uid-other"


@pytest.mark.asyncio
async def test_failures_are_reported_not_raised(reconciler, profile_repository):
    profile_repository.fail_on["get_by_uid"] = write_failure("profiles")
    account = Account(uid="uid-1", email="alice@x.com", display_name="alice")

    report = await reconciler.reconcile(account)

    assert "read_profile" in report.failed
    assert "write_profile" not in report.repaired


@pytest.mark.asyncio
async def test_nothing_to_reconcile_without_a_username(reconciler):
    report = await reconciler.reconcile(Account(uid="uid-1", email="alice@x.com"))

    assert report.username is None
    assert report.repaired == []

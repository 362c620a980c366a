"""
Registration sequence: local validation, directory check, ordered writes
and partial failures that leave a usable account behind.
"""

import pytest

from flower.modules.accounts.domain.models.directory import UsernameEntry
from flower.shared.core.exceptions import (
    BackendError,
    BackendErrorCode,
    DirectoryConflictError,
    FormRegion,
    PartialRegistrationError,
    ValidationError,
)

from tests.fakes import write_failure


@pytest.mark.asyncio
async def test_register_writes_every_record(registration_service, identity_provider, username_repository,
                                            user_repository):
    account = await registration_service.register(" Alice ", " alice@x.com ", "secret1", "secret1")

    assert account.display_name == "Alice"
    assert account.email == "alice@x.com"
    assert not account.email_verified

    entry = username_repository.entries["alice"]
    assert entry.uid == account.uid
    assert entry.email == "alice@x.com"

    record = user_repository.records[account.uid]
    assert record.username == "Alice"
    assert record.username_lc == "alice"

    assert identity_provider.verification_emails == ["alice@x.com"]
    assert identity_provider.calls == [
        "create_account", "set_display_name", "send_verification_email"
    ]


@pytest.mark.asyncio
async def test_invalid_input_never_reaches_backend(registration_service, identity_provider, username_repository):
    with pytest.raises(ValidationError) as exc_info:
        await registration_service.register("al", "alice@x.com", "secret1", "secret1")

    assert exc_info.value.field == "username"
    assert exc_info.value.region == FormRegion.BASIC_INFO
    assert identity_provider.calls == []
    assert username_repository.calls == []


@pytest.mark.asyncio
async def test_mismatched_confirmation_is_password_region(registration_service):
    with pytest.raises(ValidationError) as exc_info:
        await registration_service.register("alice", "alice@x.com", "secret1", "secret2")

    assert exc_info.value.region == FormRegion.PASSWORD


@pytest.mark.asyncio
async def test_taken_username_stops_before_account_creation(registration_service, identity_provider,
                                                            username_repository):
    username_repository.entries["alice"] = UsernameEntry(username_lc="alice", uid="uid-x", email="x@x.com")

    with pytest.raises(DirectoryConflictError):
        await registration_service.register("ALICE", "alice@x.com", "secret1", "secret1")

    assert "create_account" not in identity_provider.calls


@pytest.mark.asyncio
async def test_provider_rejection_is_backend_error(registration_service, identity_provider, username_repository):
    await registration_service.register("alice", "alice@x.com", "secret1", "secret1")

    with pytest.raises(BackendError) as exc_info:
        await registration_service.register("bob", "ALICE@x.com", "secret1", "secret1")

    assert exc_info.value.code == BackendErrorCode.EMAIL_ALREADY_IN_USE
    assert "bob" not in username_repository.entries


@pytest.mark.asyncio
@pytest.mark.parametrize("step", ["set_display_name", "write_user_record", "reserve_username",
                                  "send_verification_email"])
async def test_failure_after_account_creation_is_partial(step, registration_service, identity_provider,
                                                         username_repository, user_repository):
    failure = write_failure()
    if step == "set_display_name":
        identity_provider.fail_on["set_display_name"] = failure
    elif step == "write_user_record":
        user_repository.fail_on["save"] = failure
    elif step == "reserve_username":
        username_repository.fail_on["create"] = failure
    else:
        identity_provider.fail_on["send_verification_email"] = failure

    with pytest.raises(PartialRegistrationError) as exc_info:
        await registration_service.register("alice", "alice@x.com", "secret1", "secret1")

    error = exc_info.value
    assert error.step == step
    assert error.cause is failure
    assert error.uid == identity_provider.account_for("alice@x.com").uid


@pytest.mark.asyncio
async def test_later_steps_do_not_run_after_a_failure(registration_service, identity_provider, user_repository,
                                                      username_repository):
    user_repository.fail_on["save"] = write_failure("users")

    with pytest.raises(PartialRegistrationError):
        await registration_service.register("alice", "alice@x.com", "secret1", "secret1")

    assert username_repository.entries == {}
    assert identity_provider.verification_emails == []
    # the account itself is not rolled back
    assert identity_provider.account_for("alice@x.com") is not None


@pytest.mark.asyncio
async def test_race_lost_at_directory_write(registration_service, username_repository):
    """Both registrations pass the existence check; the second loses at the directory write."""
    original_get = username_repository.get

    async def stale_get(username_lc):
        await original_get(username_lc)
        return None

    username_repository.get = stale_get
    await registration_service.register("alice", "alice@x.com", "secret1", "secret1")

    with pytest.raises(PartialRegistrationError) as exc_info:
        await registration_service.register("Alice", "other@x.com", "secret1", "secret1")

    assert exc_info.value.step == "reserve_username"
    assert isinstance(exc_info.value.cause, DirectoryConflictError)

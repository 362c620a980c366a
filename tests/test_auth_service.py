"""
Authentication by username or email, and the register → sign in
end-to-end scenario.
"""

import pytest

from flower.modules.accounts.domain.services.auth_service import INVALID_CREDENTIALS_MESSAGE
from flower.shared.core.exceptions import BackendError, BackendErrorCode


@pytest.mark.asyncio
async def test_register_then_sign_in_by_username_and_email(registration_service, auth_service,
                                                           identity_provider, username_repository):
    registered = await registration_service.register("alice", "alice@x.com", "secret1", "secret1")
    assert username_repository.entries["alice"].uid == registered.uid

    await auth_service.sign_out()
    by_username = await auth_service.sign_in("alice", "secret1")
    await auth_service.sign_out()
    by_email = await auth_service.sign_in("alice@x.com", "secret1")

    assert by_username.uid == by_email.uid == registered.uid
    assert identity_provider.current_account().uid == registered.uid


@pytest.mark.asyncio
async def test_sign_in_username_is_case_insensitive(registration_service, auth_service):
    registered = await registration_service.register("Alice", "alice@x.com", "secret1", "secret1")

    account = await auth_service.sign_in("  ALICE ", "secret1")

    assert account.uid == registered.uid


@pytest.mark.asyncio
async def test_unknown_username_looks_like_bad_credentials(registration_service, auth_service, identity_provider):
    await registration_service.register("alice", "alice@x.com", "secret1", "secret1")

    with pytest.raises(BackendError) as unknown:
        await auth_service.sign_in("ghost", "secret1")
    with pytest.raises(BackendError) as wrong_password:
        await auth_service.sign_in("alice", "wrong-password")

    assert unknown.value.code == wrong_password.value.code == BackendErrorCode.INVALID_CREDENTIALS
    assert unknown.value.message == wrong_password.value.message == INVALID_CREDENTIALS_MESSAGE
    assert identity_provider.calls.count("sign_in_with_email_password") == 1


@pytest.mark.asyncio
async def test_provider_conditions_are_surfaced_verbatim(registration_service, auth_service, identity_provider):
    await registration_service.register("alice", "alice@x.com", "secret1", "secret1")
    identity_provider.fail_on["sign_in_with_email_password"] = BackendError(
        message="Request rate limit reached", code=BackendErrorCode.TOO_MANY_REQUESTS
    )

    with pytest.raises(BackendError) as exc_info:
        await auth_service.sign_in("alice", "secret1")

    assert exc_info.value.code == BackendErrorCode.TOO_MANY_REQUESTS
    assert identity_provider.calls.count("sign_in_with_email_password") == 1


@pytest.mark.asyncio
async def test_disabled_account(registration_service, auth_service, identity_provider):
    await registration_service.register("alice", "alice@x.com", "secret1", "secret1")
    identity_provider.disable("alice@x.com")

    with pytest.raises(BackendError) as exc_info:
        await auth_service.sign_in("alice", "secret1")

    assert exc_info.value.code == BackendErrorCode.USER_DISABLED


@pytest.mark.asyncio
async def test_email_verification_check(registration_service, auth_service, identity_provider):
    await registration_service.register("alice", "alice@x.com", "secret1", "secret1")

    assert await auth_service.check_email_verified() is False
    identity_provider.verify("alice@x.com")
    assert await auth_service.check_email_verified() is True
    assert (await auth_service.reload()).email_verified


@pytest.mark.asyncio
async def test_resend_verification_requires_session(auth_service):
    with pytest.raises(BackendError) as exc_info:
        await auth_service.resend_verification()

    assert exc_info.value.code == BackendErrorCode.NOT_SIGNED_IN


@pytest.mark.asyncio
async def test_resend_verification(registration_service, auth_service, identity_provider):
    await registration_service.register("alice", "alice@x.com", "secret1", "secret1")

    await auth_service.resend_verification()

    assert identity_provider.verification_emails == ["alice@x.com", "alice@x.com"]

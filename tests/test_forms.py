"""
Sign-in, registration and verify-email view-models: one message per
region, no duplicate submissions and correct routing on success.
"""

import pytest

from flower.modules.accounts.application.session import Route
from flower.modules.accounts.presentation.messages import (
    NOT_VERIFIED_MESSAGE,
    REGISTRATION_MESSAGES,
    SIGN_IN_MESSAGES,
    USERNAME_TAKEN_MESSAGE,
)
from flower.shared.core.exceptions import BackendError, BackendErrorCode, FormRegion
from flower.shared.utils.validators import CONFIRM_MESSAGE, USERNAME_MESSAGE

from tests.fakes import write_failure


def fill(form, username="alice", email="alice@x.com", password="secret1", confirm_password="secret1"):
    form.username = username
    form.email = email
    form.password = password
    form.confirm_password = confirm_password
    return form


# =============================================================================
# SIGN IN
# =============================================================================

@pytest.mark.asyncio
async def test_sign_in_needs_both_fields(flower_app, identity_provider):
    form = flower_app.sign_in_form()
    form.identifier = "alice"

    assert not form.can_submit
    assert await form.submit() is None
    assert form.error is None
    assert identity_provider.calls == []


@pytest.mark.asyncio
async def test_sign_in_routes_to_plant(flower_app, identity_provider):
    await flower_app.registration_service.register("alice", "alice@x.com", "secret1", "secret1")
    identity_provider.verify("alice@x.com")
    form = flower_app.sign_in_form()
    form.identifier, form.password = "Alice", "secret1"

    account = await form.submit()

    assert account is not None
    assert form.error is None
    assert not form.busy
    assert flower_app.session.route == Route.WATERING


@pytest.mark.asyncio
async def test_unknown_username_reads_like_wrong_password(flower_app):
    await flower_app.registration_service.register("alice", "alice@x.com", "secret1", "secret1")

    wrong_password = flower_app.sign_in_form()
    wrong_password.identifier, wrong_password.password = "alice", "nope123"
    await wrong_password.submit()

    unknown = flower_app.sign_in_form()
    unknown.identifier, unknown.password = "nobody", "secret1"
    await unknown.submit()

    assert wrong_password.error == unknown.error
    assert unknown.error == SIGN_IN_MESSAGES[BackendErrorCode.INVALID_CREDENTIALS]
    assert flower_app.session.account is None


@pytest.mark.asyncio
async def test_unclassified_provider_error_keeps_its_text(flower_app, identity_provider):
    identity_provider.fail_on["sign_in_with_email_password"] = BackendError(message="Gateway timeout")
    form = flower_app.sign_in_form()
    form.identifier, form.password = "alice@x.com", "secret1"

    await form.submit()

    assert form.error == "Gateway timeout"


@pytest.mark.asyncio
async def test_new_submission_clears_the_old_error(flower_app):
    await flower_app.registration_service.register("alice", "alice@x.com", "secret1", "secret1")
    form = flower_app.sign_in_form()
    form.identifier, form.password = "alice", "wrong12"
    await form.submit()
    assert form.error

    form.password = "secret1"
    await form.submit()

    assert form.error is None


# =============================================================================
# REGISTRATION
# =============================================================================

@pytest.mark.asyncio
async def test_local_errors_shown_per_region_without_backend_calls(flower_app, identity_provider):
    form = fill(flower_app.registration_form(), username="al", confirm_password="other12")
    assert form.region_message(FormRegion.BASIC_INFO) is None

    assert await form.submit() is None

    assert form.region_message(FormRegion.BASIC_INFO) == USERNAME_MESSAGE
    assert form.region_message(FormRegion.PASSWORD) == CONFIRM_MESSAGE
    assert identity_provider.calls == []


@pytest.mark.asyncio
async def test_successful_registration_routes_to_verify_email(flower_app, identity_provider):
    form = fill(flower_app.registration_form())

    account = await form.submit()

    assert account.display_name == "alice"
    assert form.completed
    assert flower_app.session.route == Route.VERIFY_EMAIL
    assert identity_provider.verification_emails == ["alice@x.com"]


@pytest.mark.asyncio
async def test_taken_username_message(flower_app, identity_provider):
    await flower_app.registration_service.register("alice", "alice@x.com", "secret1", "secret1")
    form = fill(flower_app.registration_form(), username="ALICE", email="other@x.com")

    await form.submit()

    assert form.region_message(FormRegion.BASIC_INFO) == USERNAME_TAKEN_MESSAGE
    assert form.password_error is None
    assert identity_provider.calls.count("create_account") == 1


@pytest.mark.asyncio
async def test_email_already_registered(flower_app):
    await flower_app.registration_service.register("alice", "alice@x.com", "secret1", "secret1")
    form = fill(flower_app.registration_form(), username="bob")

    await form.submit()

    assert form.basic_error == REGISTRATION_MESSAGES[BackendErrorCode.EMAIL_ALREADY_IN_USE][1]


@pytest.mark.asyncio
async def test_weak_password_lands_in_password_region(flower_app, identity_provider):
    identity_provider.fail_on["create_account"] = BackendError(
        message="Password should be stronger", code=BackendErrorCode.WEAK_PASSWORD
    )
    form = fill(flower_app.registration_form())

    await form.submit()

    assert form.password_error == REGISTRATION_MESSAGES[BackendErrorCode.WEAK_PASSWORD][1]
    assert form.basic_error is None


@pytest.mark.asyncio
async def test_partial_registration_message(flower_app, user_repository):
    user_repository.fail_on["save"] = write_failure("users")
    form = fill(flower_app.registration_form())

    assert await form.submit() is None

    assert form.basic_error == "store unavailable"
    assert not form.completed
    assert not form.busy


# =============================================================================
# VERIFY EMAIL
# =============================================================================

async def registered(flower_app):
    form = fill(flower_app.registration_form())
    await form.submit()
    return flower_app.verify_email_form()


@pytest.mark.asyncio
async def test_unverified_email_keeps_user_on_screen(flower_app):
    form = await registered(flower_app)

    assert not await form.check_verified()

    assert form.error == NOT_VERIFIED_MESSAGE
    assert flower_app.session.route == Route.VERIFY_EMAIL


@pytest.mark.asyncio
async def test_verified_email_routes_to_plant(flower_app, identity_provider):
    form = await registered(flower_app)
    identity_provider.verify("alice@x.com")

    assert await form.check_verified()

    assert form.error is None
    assert flower_app.session.route == Route.WATERING


@pytest.mark.asyncio
async def test_reload_failure_is_reported(flower_app, identity_provider):
    form = await registered(flower_app)
    identity_provider.fail_on["reload_account"] = BackendError(message="offline")

    assert not await form.check_verified()

    assert "offline" in form.error
    assert not form.is_checking


@pytest.mark.asyncio
async def test_resend_verification(flower_app, identity_provider):
    form = await registered(flower_app)

    assert await form.resend()

    assert identity_provider.verification_emails == ["alice@x.com", "alice@x.com"]


@pytest.mark.asyncio
async def test_sign_out_from_verify_screen(flower_app, identity_provider):
    form = await registered(flower_app)

    assert await form.sign_out()

    assert flower_app.session.route == Route.SIGNED_OUT
    assert identity_provider.current_account() is None

"""
Session routing across sign-up, verification and sign-out.
"""

import asyncio

import pytest

from flower.modules.accounts.application.session import Route
from flower.modules.accounts.domain.models.directory import Profile
from flower.shared.core.exceptions import PartialRegistrationError


@pytest.mark.asyncio
async def test_routes_follow_the_account(flower_app, identity_provider):
    routes = []
    session = flower_app.session
    session.route_listener = routes.append
    await session.start()
    assert session.route == Route.SIGNED_OUT

    await flower_app.registration_service.register("alice", "alice@x.com", "secret1", "secret1")
    await session.signed_in(identity_provider.current_account())
    assert session.route == Route.VERIFY_EMAIL

    identity_provider.verify("alice@x.com")
    session.account_updated(await flower_app.auth_service.reload())
    assert session.route == Route.WATERING

    await flower_app.auth_service.sign_out()
    assert session.route == Route.SIGNED_OUT
    assert session.account is None
    assert routes == [Route.VERIFY_EMAIL, Route.WATERING, Route.SIGNED_OUT]

    await session.close()


@pytest.mark.asyncio
async def test_start_adopts_restored_account(flower_app, identity_provider):
    await flower_app.registration_service.register("alice", "alice@x.com", "secret1", "secret1")
    identity_provider.verify("alice@x.com")

    await flower_app.start()

    assert flower_app.session.route == Route.WATERING
    assert flower_app.session.names.get(flower_app.session.uid) == "alice"
    await flower_app.close()


@pytest.mark.asyncio
async def test_auth_listener_released_on_close(flower_app, identity_provider):
    await flower_app.start()
    assert identity_provider.listener_count == 1

    await flower_app.close()

    assert identity_provider.listener_count == 0


@pytest.mark.asyncio
async def test_sign_in_event_routes_through_listener(flower_app, identity_provider):
    await flower_app.registration_service.register("alice", "alice@x.com", "secret1", "secret1")
    identity_provider.verify("alice@x.com")
    await identity_provider.sign_out()
    await flower_app.start()

    await flower_app.auth_service.sign_in("alice", "secret1")

    assert flower_app.session.route == Route.WATERING
    await flower_app.close()


@pytest.mark.asyncio
async def test_partial_registration_is_repaired_at_sign_in(flower_app, identity_provider, username_repository):
    username_repository.fail_on["create"] = RuntimeError("store unavailable")
    with pytest.raises(PartialRegistrationError):
        await flower_app.registration_service.register("alice", "alice@x.com", "secret1", "secret1")
    username_repository.fail_on.clear()
    identity_provider.verify("alice@x.com")

    account = await flower_app.auth_service.sign_in("alice@x.com", "secret1")
    report = await flower_app.session.signed_in(account)

    assert "reserve_username" in report.repaired
    again = await flower_app.auth_service.sign_in("ALICE", "secret1")
    assert again.uid == account.uid


@pytest.mark.asyncio
async def test_reconciliation_runs_once_per_account(flower_app, identity_provider, user_repository):
    await flower_app.registration_service.register("alice", "alice@x.com", "secret1", "secret1")
    account = identity_provider.current_account()

    await flower_app.session.signed_in(account)
    reads = user_repository.calls.count("get_by_uid")
    await flower_app.session.signed_in(account)

    assert user_repository.calls.count("get_by_uid") == reads


@pytest.mark.asyncio
async def test_sign_out_cancels_pending_name_fetches(flower_app, profile_repository):
    profile_repository.profiles["uid-partner"] = Profile(uid="uid-partner", username="bob")
    task = flower_app.session.names.request("uid-partner")

    flower_app.session.signed_out()
    await asyncio.gather(task, return_exceptions=True)

    assert flower_app.session.names.get("uid-partner") is None

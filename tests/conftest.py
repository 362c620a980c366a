"""
This file contains shared fixtures and configuration for the test suite.

Pytest will automatically discover and use the fixtures defined in this file.
Every fixture works on in-memory fakes; no test needs a Supabase project.
"""

import pytest

from flower.main import FlowerApp, build_application
from flower.modules.accounts.domain.services.auth_service import AuthService
from flower.modules.accounts.domain.services.registration_service import RegistrationService
from flower.modules.accounts.domain.services.username_directory import UsernameDirectory
from flower.shared.config.settings import Settings

from tests.fakes import (
    FakeClock,
    FakeIdentityProvider,
    FakeProfileRepository,
    FakeUserRepository,
    FakeUsernameRepository,
    FakeWateringRepository,
)


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(_env_file=None, ENVIRONMENT="testing", COUPLE_ID="test-couple")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def identity_provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def username_repository() -> FakeUsernameRepository:
    return FakeUsernameRepository()


@pytest.fixture
def user_repository() -> FakeUserRepository:
    return FakeUserRepository()


@pytest.fixture
def profile_repository() -> FakeProfileRepository:
    return FakeProfileRepository()


@pytest.fixture
def watering_repository(clock: FakeClock) -> FakeWateringRepository:
    return FakeWateringRepository(clock)


@pytest.fixture
def directory(username_repository: FakeUsernameRepository) -> UsernameDirectory:
    return UsernameDirectory(username_repository)


@pytest.fixture
def registration_service(identity_provider, directory, user_repository) -> RegistrationService:
    return RegistrationService(identity_provider, directory, user_repository)


@pytest.fixture
def auth_service(identity_provider, directory) -> AuthService:
    return AuthService(identity_provider, directory)


@pytest.fixture
def flower_app(
    settings,
    identity_provider,
    username_repository,
    user_repository,
    profile_repository,
    watering_repository
) -> FlowerApp:
    """Fully wired application over the fakes."""
    return build_application(
        settings=settings,
        identity_provider=identity_provider,
        username_repository=username_repository,
        user_repository=user_repository,
        profile_repository=profile_repository,
        watering_repository=watering_repository,
    )

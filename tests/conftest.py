import pytest

from lpkit.core.config import Settings


@pytest.fixture()
def settings() -> Settings:
    """
    Default solver settings, independent of the caller's environment.
    """
    return Settings()

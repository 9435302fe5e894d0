import pytest

from models.config import CantoConfig


@pytest.fixture
def config():
    return CantoConfig(domain="acme", token="secret-token", public_url="http://localhost:8000")


@pytest.fixture
def unconfigured():
    return CantoConfig(public_url="http://localhost:8000")

import pytest

from litelocator import Container


@pytest.fixture(autouse=True)
def _reset_default_container():
    Container.reset_default()
    yield
    Container.reset_default()

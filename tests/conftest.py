import pytest


@pytest.fixture
def anyio_backend() -> str:
    # next_tick schedules on the asyncio loop
    return "asyncio"

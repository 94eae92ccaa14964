import pytest

from tests.fakes import GatewayFalso, NotificadorFalso, RelogioFalso, ReprodutorFalso


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def gateway() -> GatewayFalso:
    return GatewayFalso()


@pytest.fixture
def notificador() -> NotificadorFalso:
    return NotificadorFalso()


@pytest.fixture
def reprodutor() -> ReprodutorFalso:
    return ReprodutorFalso()


@pytest.fixture
def relogio() -> RelogioFalso:
    return RelogioFalso()

import base64
from typing import Callable, List

import httpx
import pytest

RAW_KEY = b"test"
CONNECTION_STRING = (
    "Endpoint=sb://ns.servicebus.windows.net/;"
    "SharedAccessKeyName=root;"
    f"SharedAccessKey={base64.b64encode(RAW_KEY).decode()}"
)


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without network access")
    config.addinivalue_line("markers", "integration: tests spanning several components")


@pytest.fixture
def connection_string() -> str:
    """
    A valid connection string whose key decodes to b"test".
    """
    return CONNECTION_STRING


@pytest.fixture
def recorded_requests() -> List[httpx.Request]:
    return []


@pytest.fixture
def transport_factory(recorded_requests: List[httpx.Request]) -> Callable[..., httpx.MockTransport]:
    """
    Factory for an httpx MockTransport that records requests and answers
    with ``status_code``.
    """

    def _create(status_code: int = 201, text: str = "") -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            request.read()
            recorded_requests.append(request)
            return httpx.Response(status_code, text=text)

        return httpx.MockTransport(handler)

    return _create

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from svcutils.exceptions import ApiException, ConflictException, NotFoundException
from svcutils.logging import LoggingSettings, configure_logging
from svcutils.mapper import register_exception_handlers
from svcutils.schemas.error import ErrorMessage

# svcutils leaves logging alone on import; the suite opts in so that warning
# events reach caplog through the stdlib root logger.
configure_logging(LoggingSettings())


def build_app() -> FastAPI:
    """Small app whose endpoints raise ApiException in different shapes."""
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/orders/{order_id}")
    async def get_order(order_id: int) -> dict[str, int]:
        raise NotFoundException(f"Order {order_id} not found")

    @app.post("/orders")
    async def create_order() -> dict[str, int]:
        raise ConflictException(
            errors=[
                ErrorMessage(message="duplicate order", code="DUPLICATE", item_id="7"),
                ErrorMessage(message="quantity must be positive", field_name="quantity"),
            ],
            other_data={"traceId": "abc-123", "retryable": False},
        )

    @app.get("/boom")
    async def boom() -> dict[str, int]:
        raise ApiException("database unavailable", 503, other_data={"traceId": "t-1"})

    @app.get("/plain")
    async def plain() -> dict[str, int]:
        raise ApiException(status_code=500)

    return app


@pytest.fixture
def app() -> FastAPI:
    return build_app()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """HTTP client talking to the test app in-process."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

"""API test fixtures: the app on an in-memory database."""

from collections.abc import AsyncGenerator
from typing import Any
from uuid import UUID

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from payroll_accrual.api.app import create_app
from payroll_accrual.api.dependencies import get_db_session
from payroll_accrual.config import Settings


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    test_settings: Settings,
) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    app = create_app(test_settings)

    async def override_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def headers(tenant_id: UUID) -> dict[str, str]:
    return {"X-Tenant-ID": str(tenant_id)}


@pytest_asyncio.fixture
async def api(client: AsyncClient, headers: dict[str, str]):
    """Small helper that posts JSON with the tenant header and checks the status."""

    async def _post(path: str, payload: dict[str, Any], expected: int = 201) -> dict[str, Any]:
        response = await client.post(f"/api/v1{path}", json=payload, headers=headers)
        assert response.status_code == expected, response.text
        return response.json()

    return _post

import contextlib
import os

# must be set before src.config is imported
os.environ["DATABASE_URL"] = os.environ.get(
    "TEST_DATABASE_URL", "sqlite+aiosqlite:///./test_wedding_rsvp.db"
)
os.environ["RESEND_API_KEY"] = ""

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from src.auth.tests.helpers import make_access_token  # noqa: E402
from src.config.database import engine  # noqa: E402
from src.main import app  # noqa: E402
from src.models.base import BaseModel  # noqa: E402
from src.rsvps.dtos import CoupleDTO, Side  # noqa: E402
from src.rsvps.repository import orm_models  # noqa: E402, F401
from src.rsvps.repository.write_models import SqlCoupleWriteModel  # noqa: E402


@pytest.fixture(autouse=True)
async def database():
    """Fresh schema for every test."""
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def client_factory():
    @contextlib.asynccontextmanager
    async def _client_factory(overrides: dict | None = None):
        app.dependency_overrides.update(overrides or {})
        try:
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                yield ac
        finally:
            app.dependency_overrides.clear()

    return _client_factory


@pytest.fixture
async def client(client_factory):
    async with client_factory() as ac:
        yield ac


@pytest.fixture
async def bride() -> CoupleDTO:
    return await SqlCoupleWriteModel().create_couple(
        name="Diamond", email="bride@example.com", side=Side.BRIDE
    )


@pytest.fixture
async def groom() -> CoupleDTO:
    return await SqlCoupleWriteModel().create_couple(
        name="Babatunde", email="groom@example.com", side=Side.GROOM
    )


@pytest.fixture
def auth_headers():
    def _auth_headers(couple: CoupleDTO) -> dict[str, str]:
        return {"Authorization": f"Bearer {make_access_token(couple.uuid)}"}

    return _auth_headers

import httpx
import pytest
import pytest_asyncio
from decimal import Decimal
from types import SimpleNamespace
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.services.fiscal_authority_client import HttpxFiscalAuthorityClient
from src.depends import get_config, get_fiscal_client, get_session
from src.domain.booking import Booking
from src.domain.invoice import Invoice  # noqa: F401
from src.domain.invoice_error import InvoiceError  # noqa: F401

GST_API_URL = "https://gst.test/invoices"


@pytest.fixture
def test_config():
    """ApplicationConfig stand-in with instant retries"""
    return SimpleNamespace(
        GST_API_URL=GST_API_URL,
        GST_API_KEY="test-key",
        GST_API_TIMEOUT_SECONDS=5,
        GST_RATE="0.18",
        INVOICE_MAX_RETRIES=3,
        INVOICE_BASE_RETRY_DELAY_MS=0,
        INVOICE_DEADLINE_SECONDS=None,
        ERROR_RECORD_MAX_ATTEMPTS=2,
    )


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Create a fresh SQLite database per test"""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'invoicing.db'}", echo=False, future=True
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Create a new database session for each test"""
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with Session() as session:
        yield session


@pytest.fixture
def gst_api():
    """
    Scriptable GST authority

    ``responses`` is consumed one per request; the last entry repeats.
    """
    state = SimpleNamespace(requests=[], responses=[httpx.Response(200, json={"success": True})])

    def handler(request: httpx.Request):
        state.requests.append(request)
        if len(state.responses) > 1:
            return state.responses.pop(0)
        return state.responses[0]

    state.handler = handler
    return state


@pytest_asyncio.fixture
async def fiscal_client(gst_api):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(gst_api.handler))
    yield HttpxFiscalAuthorityClient(GST_API_URL, "test-key", client=http_client)
    await http_client.aclose()


@pytest_asyncio.fixture
async def finished_booking(db_session):
    booking = Booking(
        id="booking_1",
        name="Asha Rao",
        status="finished",
        total_booking_amount=Decimal("1000"),
        items=["A"],
    )
    db_session.add(booking)
    await db_session.commit()
    return booking


@pytest_asyncio.fixture
async def client(db_session, fiscal_client, test_config):
    """Create test client with session, GST client and config overrides"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_fiscal_client] = lambda: fiscal_client
    app.dependency_overrides[get_config] = lambda: test_config

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

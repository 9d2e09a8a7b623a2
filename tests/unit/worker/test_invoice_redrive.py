"""Unit tests for InvoiceRedriveWorker

Tests cover:
- Worker initialization with configuration
- run_once execution with a re-drive sweep
- Re-drive disabled scenario
- Failure propagation
- GST API connectivity check
- Shutdown and cleanup
"""

import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

from libs.result import Return, Error
from src.app.services.fiscal_authority_client import SubmissionResult
from src.app.use_cases.invoicing.dtos import RedriveFailureDTO, RedriveResultDTO
from src.domain.errors import AuthError
from src.worker.invoice_redrive import InvoiceRedriveWorker


@pytest.fixture
def mock_session():
    """Mock async session"""
    session = MagicMock()
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=False)
    return session


@pytest.fixture
def mock_fiscal_client():
    client = MagicMock()
    client.submit = AsyncMock(return_value=SubmissionResult.accept(reference="ACK-TEST"))
    client.aclose = AsyncMock()
    return client


@pytest.fixture
def sample_redrive_result():
    return RedriveResultDTO(
        total_checked=2,
        generated=1,
        skipped=0,
        failed=1,
        failures=[
            RedriveFailureDTO(booking_id="b2", code="RETRIES_EXHAUSTED", message="Max retries reached")
        ],
        sweep_time=datetime.now(timezone.utc),
        execution_time_ms=12,
    )


@pytest.mark.asyncio
class TestInvoiceRedriveWorkerInit:
    @patch("src.worker.invoice_redrive.ApplicationConfig")
    @patch("src.worker.invoice_redrive.create_async_engine")
    @patch("src.worker.invoice_redrive.create_fiscal_authority_client")
    def test_initializes_with_default_config(
        self, mock_create_client, mock_create_engine, mock_app_config
    ):
        """
        Given: No custom configuration provided
        When: Worker is initialized
        Then: Uses defaults from ApplicationConfig
        """
        # Arrange
        mock_app_config.DB_URI = "sqlite+aiosqlite:///./default.db"
        mock_app_config.REDRIVE_BATCH_SIZE = 100
        mock_create_engine.return_value = MagicMock()
        mock_create_client.return_value = MagicMock()

        # Act
        worker = InvoiceRedriveWorker()

        # Assert
        assert worker.db_uri == "sqlite+aiosqlite:///./default.db"
        assert worker.batch_size == 100
        mock_create_client.assert_called_once_with(mock_app_config)

    @patch("src.worker.invoice_redrive.create_async_engine")
    def test_initializes_with_custom_config(self, mock_create_engine, mock_fiscal_client):
        mock_create_engine.return_value = MagicMock()

        worker = InvoiceRedriveWorker(
            db_uri="sqlite+aiosqlite:///./custom.db",
            fiscal_client=mock_fiscal_client,
            batch_size=10,
        )

        assert worker.db_uri == "sqlite+aiosqlite:///./custom.db"
        assert worker.batch_size == 10
        assert worker.fiscal_client is mock_fiscal_client


@pytest.mark.asyncio
class TestInvoiceRedriveWorkerRunOnce:
    @patch("src.worker.invoice_redrive.ApplicationConfig")
    @patch("src.worker.invoice_redrive.RedriveFinishedBookings")
    @patch("src.worker.invoice_redrive.create_generate_invoice")
    @patch("src.worker.invoice_redrive.SqlAlchemyBookingRepository")
    @patch("src.worker.invoice_redrive.create_async_engine")
    @patch("src.worker.invoice_redrive.sessionmaker")
    async def test_run_once_returns_sweep_result(
        self,
        mock_sessionmaker,
        mock_create_engine,
        mock_booking_repo_class,
        mock_create_generate_invoice,
        mock_use_case_class,
        mock_app_config,
        mock_session,
        mock_fiscal_client,
        sample_redrive_result,
    ):
        # Arrange
        mock_app_config.REDRIVE_ENABLED = True
        mock_sessionmaker.return_value = MagicMock(return_value=mock_session)
        mock_use_case = MagicMock()
        mock_use_case.execute = AsyncMock(return_value=Return.ok(sample_redrive_result))
        mock_use_case_class.return_value = mock_use_case

        worker = InvoiceRedriveWorker(db_uri="sqlite+aiosqlite://", fiscal_client=mock_fiscal_client)

        # Act
        result = await worker.run_once()

        # Assert
        assert result.generated == 1
        assert result.failed == 1
        mock_use_case.execute.assert_awaited_once()
        mock_create_generate_invoice.assert_called_once_with(
            mock_session, mock_fiscal_client, mock_app_config
        )

    @patch("src.worker.invoice_redrive.ApplicationConfig")
    @patch("src.worker.invoice_redrive.RedriveFinishedBookings")
    @patch("src.worker.invoice_redrive.create_async_engine")
    async def test_run_once_skips_when_disabled(
        self, mock_create_engine, mock_use_case_class, mock_app_config, mock_fiscal_client
    ):
        mock_app_config.REDRIVE_ENABLED = False

        worker = InvoiceRedriveWorker(db_uri="sqlite+aiosqlite://", fiscal_client=mock_fiscal_client, batch_size=5)
        result = await worker.run_once()

        assert result.total_checked == 0
        mock_use_case_class.assert_not_called()

    @patch("src.worker.invoice_redrive.ApplicationConfig")
    @patch("src.worker.invoice_redrive.RedriveFinishedBookings")
    @patch("src.worker.invoice_redrive.create_generate_invoice")
    @patch("src.worker.invoice_redrive.SqlAlchemyBookingRepository")
    @patch("src.worker.invoice_redrive.create_async_engine")
    @patch("src.worker.invoice_redrive.sessionmaker")
    async def test_run_once_raises_on_use_case_error(
        self,
        mock_sessionmaker,
        mock_create_engine,
        mock_booking_repo_class,
        mock_create_generate_invoice,
        mock_use_case_class,
        mock_app_config,
        mock_session,
        mock_fiscal_client,
    ):
        mock_app_config.REDRIVE_ENABLED = True
        mock_sessionmaker.return_value = MagicMock(return_value=mock_session)
        mock_use_case = MagicMock()
        mock_use_case.execute = AsyncMock(
            return_value=Return.err(Error(code="REDRIVE_FAILED", message="Failed to load finished bookings"))
        )
        mock_use_case_class.return_value = mock_use_case

        worker = InvoiceRedriveWorker(db_uri="sqlite+aiosqlite://", fiscal_client=mock_fiscal_client, batch_size=5)

        with pytest.raises(RuntimeError, match="Failed to load finished bookings"):
            await worker.run_once()


@pytest.mark.asyncio
class TestInvoiceRedriveWorkerCheckApi:
    @patch("src.worker.invoice_redrive.create_async_engine")
    async def test_check_api_submits_sample_invoice(self, mock_create_engine, mock_fiscal_client):
        worker = InvoiceRedriveWorker(db_uri="sqlite+aiosqlite://", fiscal_client=mock_fiscal_client, batch_size=5)

        ok = await worker.check_api()

        assert ok is True
        invoice, key = mock_fiscal_client.submit.await_args.args
        assert invoice.invoice_number == "TEST-INV-001"
        assert invoice.to_payload()["gst"] == {"totalGST": 180, "igst": 180, "sgst": 90, "cgst": 90}
        assert key == "test:TEST-INV-001"

    @patch("src.worker.invoice_redrive.create_async_engine")
    async def test_check_api_reports_failure(self, mock_create_engine, mock_fiscal_client):
        mock_fiscal_client.submit.side_effect = AuthError("bad key", 401)
        worker = InvoiceRedriveWorker(db_uri="sqlite+aiosqlite://", fiscal_client=mock_fiscal_client, batch_size=5)

        assert await worker.check_api() is False


@pytest.mark.asyncio
class TestInvoiceRedriveWorkerShutdown:
    @patch("src.worker.invoice_redrive.create_async_engine")
    async def test_shutdown_disposes_engine_and_client(self, mock_create_engine, mock_fiscal_client):
        engine = MagicMock()
        engine.dispose = AsyncMock()
        mock_create_engine.return_value = engine
        worker = InvoiceRedriveWorker(db_uri="sqlite+aiosqlite://", fiscal_client=mock_fiscal_client, batch_size=5)

        await worker.shutdown()

        engine.dispose.assert_awaited_once()
        mock_fiscal_client.aclose.assert_awaited_once()

from .unit_of_work import SqlAlchemyUnitOfWork
from .clock import SystemClock
from .fiscal_authority_client import (
    HttpxFiscalAuthorityClient,
    create_fiscal_authority_client,
)
from .invoice_pipeline import create_generate_invoice

__all__ = [
    "SqlAlchemyUnitOfWork",
    "SystemClock",
    "HttpxFiscalAuthorityClient",
    "create_fiscal_authority_client",
    "create_generate_invoice",
]

"""Background workers for the invoicing service"""
from .invoice_redrive import InvoiceRedriveWorker

__all__ = ["InvoiceRedriveWorker"]

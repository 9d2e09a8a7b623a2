"""Invoicing use cases"""
from .generate_invoice import GenerateInvoice, idempotency_key_for, OUTCOME_GENERATED, OUTCOME_SKIPPED
from .error_recorder import ErrorRecorder
from .redrive_finished_bookings import RedriveFinishedBookings
from .dtos import (
    BookingSnapshotDTO,
    BookingWriteEventDTO,
    GstDTO,
    InvoiceOutcomeDTO,
    RedriveFailureDTO,
    RedriveResultDTO,
)

__all__ = [
    "GenerateInvoice",
    "idempotency_key_for",
    "OUTCOME_GENERATED",
    "OUTCOME_SKIPPED",
    "ErrorRecorder",
    "RedriveFinishedBookings",
    "BookingSnapshotDTO",
    "BookingWriteEventDTO",
    "GstDTO",
    "InvoiceOutcomeDTO",
    "RedriveFailureDTO",
    "RedriveResultDTO",
]

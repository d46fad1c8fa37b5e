"""Export record definitions."""
from enum import Enum


class ExportRecordType(str, Enum):
    """Record types written to a JSON-Lines export, in output order."""

    CLIENT = "client"
    PROJECT = "project"
    TASK = "task"
    BILLING_RATE = "billing_rate"
    TIME_ENTRY = "time_entry"
    INVOICE = "invoice"

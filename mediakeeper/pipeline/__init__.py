"""Ingestion pipeline: scope filter and dispatcher."""

from mediakeeper.pipeline.dispatcher import AttachmentOutcome, Dispatcher, EventResult, OutcomeStatus
from mediakeeper.pipeline.filter import UpdateFilter

__all__ = [
    "AttachmentOutcome",
    "Dispatcher",
    "EventResult",
    "OutcomeStatus",
    "UpdateFilter",
]

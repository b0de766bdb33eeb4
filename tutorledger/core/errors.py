"""Errors raised by the ledger services and translated by the API routes."""


class LedgerError(Exception):
    pass


class ValidationError(LedgerError):
    """Input rejected before any write reached the store."""


class RecordNotFound(LedgerError):
    def __init__(self, resource: str, identifier: int):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} {identifier} not found")


class StoreError(LedgerError):
    """A write to the entity store failed and was rolled back."""


class PartialReconciliationError(LedgerError):
    """The original occurrence was marked rescheduled but its follow-up was not created."""

    def __init__(self, rescheduled_session_id: int, message: str | None = None):
        self.rescheduled_session_id = rescheduled_session_id
        super().__init__(
            message
            or (
                f"Session {rescheduled_session_id} was marked rescheduled "
                "but the follow-up pending session could not be created"
            )
        )


class ItemNotDue(LedgerError):
    pass


class OperationInProgress(LedgerError):
    pass


__all__ = [
    "LedgerError",
    "ValidationError",
    "RecordNotFound",
    "StoreError",
    "PartialReconciliationError",
    "ItemNotDue",
    "OperationInProgress",
]

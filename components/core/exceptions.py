"""Error types raised by the ledger components.

Endpoints translate these into JSON error responses; see
``restapi.router.register_exception_handlers``.
"""

from decimal import Decimal
from typing import Iterable, Optional


class LedgerError(Exception):
    """Base exception for ledger operations."""

    status_code = 500
    code = "ledger_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"code": self.code, "detail": self.message}


class ValidationError(LedgerError):
    """Malformed input, rejected before any write."""

    status_code = 400
    code = "validation_error"


class NotFoundError(LedgerError):
    """Row does not exist or belongs to another owner."""

    status_code = 404
    code = "not_found"

    def __init__(self, entity: str, entity_id: Optional[int]) -> None:
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class InsufficientFundsError(LedgerError):
    """A debit would take an account below the configured floor."""

    status_code = 400
    code = "insufficient_funds"

    def __init__(self, account_id: int, balance: Decimal, delta: Decimal, floor: Decimal) -> None:
        super().__init__(
            f"Insufficient funds on account {account_id}: "
            f"balance {balance}, attempted change {delta}, floor {floor}"
        )
        self.account_id = account_id
        self.balance = balance
        self.delta = delta
        self.floor = floor

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update(account_id=self.account_id, balance=str(self.balance))
        return data


class ConflictError(LedgerError):
    """Optimistic version check failed; the whole operation may be retried."""

    status_code = 409
    code = "conflict"


class PartialFailureError(LedgerError):
    """A multi-step mutation left some steps applied and could not undo them.

    ``account_ids`` lists the accounts whose stored balance may now disagree
    with their transactions; run reconciliation on them.
    """

    status_code = 500
    code = "partial_failure"

    def __init__(self, operation: str, completed_steps: Iterable[str], account_ids: Iterable[int]) -> None:
        self.operation = operation
        self.completed_steps = list(completed_steps)
        self.account_ids = sorted(set(account_ids))
        super().__init__(
            f"{operation} failed after {', '.join(self.completed_steps) or 'no steps'}; "
            f"accounts needing reconciliation: {self.account_ids}"
        )

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update(completed_steps=self.completed_steps, account_ids=self.account_ids)
        return data

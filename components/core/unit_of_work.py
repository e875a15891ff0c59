"""Unit of work for multi-step ledger mutations.

In atomic mode every step runs in the session's single database transaction,
committed on success and rolled back on error.

In compensating mode each step is committed as soon as it succeeds and may
register a compensating action. When a later step fails the recorded
compensations run newest first and the original error propagates. If a
compensation fails too, ``PartialFailureError`` is raised with the accounts
whose stored balance may have drifted.

A compensating unit may also take a ``hold`` callable. It is called with +1
and committed before the first step, then called with -1 once the unit has
finished, whether it succeeded or was compensated. Accounts use it to keep
reconciliation away from a balance whose history row is not written yet.
"""

from typing import Any, Awaitable, Callable, Iterable, List, Optional, Tuple

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.exceptions import PartialFailureError

logger = structlog.get_logger(__name__)

Action = Callable[[], Awaitable[Any]]
Hold = Callable[[int], Awaitable[Any]]


class UnitOfWork:
    def __init__(
        self,
        session: AsyncSession,
        operation: str,
        atomic: bool = True,
        hold: Optional[Hold] = None,
    ) -> None:
        self.session = session
        self.operation = operation
        self.atomic = atomic
        self.hold = None if atomic else hold
        self._completed: List[str] = []
        self._compensations: List[Tuple[str, Action, Tuple[int, ...]]] = []

    async def __aenter__(self) -> "UnitOfWork":
        if self.hold is not None:
            await self.hold(1)
            await self.session.commit()
        return self

    async def step(
        self,
        name: str,
        action: Action,
        compensate: Optional[Action] = None,
        account_ids: Iterable[int] = (),
    ) -> Any:
        """Run one step; in compensating mode commit it and remember its undo."""
        result = await action()
        if not self.atomic:
            await self.session.commit()
            if compensate is not None:
                self._compensations.append((name, compensate, tuple(account_ids)))
        self._completed.append(name)
        return result

    async def _release(self) -> None:
        if self.hold is None:
            return
        try:
            await self.hold(-1)
            await self.session.commit()
        except Exception as release_error:
            await self.session.rollback()
            all_accounts = [a for _, _, ids in self._compensations for a in ids]
            logger.error(
                "hold_release_failed",
                operation=self.operation,
                completed_steps=self._completed,
                error=str(release_error),
            )
            raise PartialFailureError(self.operation, self._completed, all_accounts) from release_error

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        if exc is None:
            await self.session.commit()
            await self._release()
            return False

        await self.session.rollback()
        if self.atomic:
            return False
        if not self._compensations:
            await self._release()
            return False

        touched: List[int] = []
        for name, compensate, account_ids in reversed(self._compensations):
            touched.extend(account_ids)
            try:
                await compensate()
                await self.session.commit()
            except Exception as compensation_error:
                await self.session.rollback()
                all_accounts = [a for _, _, ids in self._compensations for a in ids]
                logger.error(
                    "compensation_failed",
                    operation=self.operation,
                    step=name,
                    completed_steps=self._completed,
                    account_ids=all_accounts,
                    error=str(compensation_error),
                )
                # Drifted accounts must stay reconcilable
                await self._release()
                raise PartialFailureError(self.operation, self._completed, all_accounts) from exc

        await self._release()
        logger.warning(
            "operation_compensated",
            operation=self.operation,
            completed_steps=self._completed,
            account_ids=touched,
            error=str(exc),
        )
        return False

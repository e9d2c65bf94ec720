'''
The dashboard aggregate: card counters, the monthly payments chart and the
recent enrollments table, fetched in parallel.
'''
import asyncio
import datetime
from typing import Annotated, Any, Awaitable, Callable, Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..common.config import settings
from ..common.logger import log
from ..core.invalidation import RouteInvalidator, get_route_invalidator
from ..database.engine import get_session_factory
from ..models.dashboard import DashboardSummary
from .class_service import ClassService
from .enrollment_service import EnrollmentService
from .media_service import get_media_host
from .payment_service import PaymentService
from .student_service import StudentService


def window_start(today: datetime.date, months: int) -> datetime.date:
    """First day of the month 'months - 1' months before 'today'."""
    month = today.month - (months - 1)
    year = today.year
    while month <= 0:
        month += 12
        year -= 1
    return datetime.date(year, month, 1)


class DashboardService:
    """
    Each branch runs on its own session so the branches can be awaited together.
    A failing branch is logged, reported in 'errors' and shown as 0 / empty.
    """
    def __init__(
        self,
        session_factory: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)],
        invalidator: Annotated[RouteInvalidator, Depends(get_route_invalidator)]
    ):
        self.session_factory = session_factory
        self.invalidator = invalidator

    async def _branch(
        self,
        name: str,
        call: Callable[[AsyncSession], Awaitable[Any]],
        value_of: Callable[[Any], Any],
        default: Any
    ) -> tuple[Any, Optional[str]]:
        try:
            async with self.session_factory() as db:
                outcome = await call(db)
        except Exception as e:
            log.error(f"Dashboard branch '{name}' raised: {e}", exc_info=True)
            return default, f"{name}: {e}"
        if not outcome.success:
            log.error(f"Dashboard branch '{name}' failed: {outcome.error}")
            return default, outcome.error
        return value_of(outcome), None

    async def summary(self, today: Optional[datetime.date] = None) -> DashboardSummary:
        today = today or datetime.date.today()
        start = window_start(today, settings.DASHBOARD_MONTHS)
        log.info(f"Building dashboard summary (payments window {start} to {today}).")

        branches = await asyncio.gather(
            self._branch(
                "total_students",
                lambda db: StudentService(db, self.invalidator, get_media_host()).count(),
                lambda outcome: outcome.count, 0
            ),
            self._branch(
                "total_classes",
                lambda db: ClassService(db, self.invalidator).count(),
                lambda outcome: outcome.count, 0
            ),
            self._branch(
                "total_payments",
                lambda db: PaymentService(db, self.invalidator).total_amount(),
                lambda outcome: outcome.total, 0.0
            ),
            self._branch(
                "pending_payments",
                lambda db: PaymentService(db, self.invalidator).count_by_status(),
                lambda outcome: outcome.count, 0
            ),
            self._branch(
                "monthly_payments",
                lambda db: PaymentService(db, self.invalidator).monthly_totals(start, today),
                lambda outcome: outcome.data, []
            ),
            self._branch(
                "recent_enrollments",
                lambda db: EnrollmentService(db, self.invalidator).recent(settings.RECENT_ENROLLMENTS_LIMIT),
                lambda outcome: outcome.data, []
            ),
        )

        (students, classes, total, pending, monthly, recent) = [value for value, _ in branches]
        errors = [error for _, error in branches if error]
        return DashboardSummary(
            total_students=students,
            total_classes=classes,
            total_payments=total,
            pending_payments=pending,
            monthly_payments=monthly,
            recent_enrollments=recent,
            errors=errors
        )

import datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from src.school_admin_backend.core.invalidation import RouteInvalidator
from src.school_admin_backend.models.dashboard import DashboardSummary, MonthlyTotal
from src.school_admin_backend.models.envelope import ErrorCode, TotalResult
from src.school_admin_backend.services.dashboard_service import DashboardService, window_start
from src.school_admin_backend.services.payment_service import PaymentService
from tests.constants import TEST_TODAY


class TestWindowStart:

    @pytest.mark.parametrize("today, months, expected", [
        (datetime.date(2024, 6, 15), 6, datetime.date(2024, 1, 1)),
        (datetime.date(2024, 3, 31), 6, datetime.date(2023, 10, 1)),
        (datetime.date(2024, 1, 1), 1, datetime.date(2024, 1, 1)),
        (datetime.date(2024, 2, 29), 14, datetime.date(2023, 1, 1)),
    ])
    def test_first_day_of_window(self, today, months, expected):
        assert window_start(today, months) == expected


@pytest.mark.anyio
class TestDashboardSummary:

    async def test_summary_of_seeded_school(
        self,
        session_factory,
        invalidator: RouteInvalidator,
        seeded: SimpleNamespace
    ):
        service = DashboardService(session_factory, invalidator)

        summary = await service.summary(today=TEST_TODAY)

        assert isinstance(summary, DashboardSummary)
        assert summary.errors == []
        assert summary.total_students == 3
        assert summary.total_classes == 1
        assert summary.total_payments == pytest.approx(245.5)
        assert summary.pending_payments == 2
        assert summary.monthly_payments == [
            MonthlyTotal(month="2024-02", total_amount=100.0),
            MonthlyTotal(month="2024-03", total_amount=70.0),
        ]
        (recent,) = summary.recent_enrollments
        assert recent.eleve.nom == "Kabila"

    async def test_failed_branch_is_reported_and_zeroed(
        self,
        session_factory,
        invalidator: RouteInvalidator,
        seeded: SimpleNamespace
    ):
        failure = TotalResult(
            error="Erreur lors de la récupération des montants de paiement : connexion perdue",
            success=False,
            code=ErrorCode.REMOTE_FAILURE
        )
        service = DashboardService(session_factory, invalidator)

        with patch.object(PaymentService, "total_amount", AsyncMock(return_value=failure)):
            summary = await service.summary(today=TEST_TODAY)

        assert summary.total_payments == 0.0
        assert summary.errors == [failure.error]
        # The other branches are unaffected
        assert summary.total_students == 3
        assert summary.pending_payments == 2

    async def test_raising_branch_does_not_fail_summary(
        self,
        session_factory,
        invalidator: RouteInvalidator,
        seeded: SimpleNamespace
    ):
        service = DashboardService(session_factory, invalidator)

        with patch.object(PaymentService, "monthly_totals", AsyncMock(side_effect=RuntimeError("boom"))):
            summary = await service.summary(today=TEST_TODAY)

        assert summary.monthly_payments == []
        assert summary.errors == ["monthly_payments: boom"]
        assert summary.total_classes == 1

'''
Access functions and aggregates for payments (paiements).
'''
import datetime

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload

from ..common.logger import log
from ..core.invalidation import Entity
from ..database import models as db_models
from ..database.db_enums import PaymentStatusEnum
from ..database.utils import month_bucket
from ..models.dashboard import MonthlyTotal
from ..models.envelope import CountResult, ErrorCode, Result, TotalResult
from ..models.finance import PaymentRead
from .base_service import CrudService, EntityLabels, driver_message


class PaymentService(CrudService[PaymentRead]):
    model = db_models.Paiement
    read_model = PaymentRead
    entity = Entity.PAYMENT
    labels = EntityLabels(
        of_one="du paiement",
        of_many="des paiements",
        not_found="Paiement non trouvé."
    )
    order_by = (db_models.Paiement.datepaiement.desc(), db_models.Paiement.idpaiement.desc())

    def load_options(self) -> list:
        return [
            joinedload(db_models.Paiement.eleve),
            joinedload(db_models.Paiement.frais)
        ]

    async def list_for_parent(self, idparent: int) -> Result[list[PaymentRead]]:
        """Payments made for the children of one parent."""
        log.info(f"Fetching payments for the children of parent {idparent}.")

        async def operation():
            stmt = (
                self._select()
                .join(db_models.Eleve, db_models.Paiement.ideleve == db_models.Eleve.ideleve)
                .where(db_models.Eleve.idparent == idparent)
                .order_by(*self.order_by)
            )
            result = await self.db.execute(stmt)
            return Result.ok([self.to_read(row) for row in result.unique().scalars().all()])

        return await self._guard("de la récupération des paiements pour les enfants du parent", operation)

    # --- Aggregates (read-only, no broadcast) ---

    async def count_by_status(self, status: PaymentStatusEnum = PaymentStatusEnum.PENDING) -> CountResult:
        log.info(f"Counting payments with status '{status.value}'.")
        action = "du comptage des paiements en attente"
        try:
            stmt = select(func.count()).select_from(db_models.Paiement).where(db_models.Paiement.status == status.value)
            result = await self.db.execute(stmt)
            return CountResult(count=result.scalar_one(), success=True)
        except SQLAlchemyError as e:
            await self.db.rollback()
            log.error(f"Database error while counting payments by status: {e}", exc_info=True)
            return CountResult(error=f"Erreur lors {action} : {driver_message(e)}", success=False, code=ErrorCode.REMOTE_FAILURE)
        except Exception as e:
            await self.db.rollback()
            log.error(f"Error while counting payments by status: {e}", exc_info=True)
            return CountResult(error=f"Exception lors {action} : {e}", success=False, code=ErrorCode.EXCEPTION)

    async def total_amount(self) -> TotalResult:
        """Sum of every payment amount, computed by the database."""
        log.info("Computing total payment amount.")
        try:
            result = await self.db.execute(select(func.coalesce(func.sum(db_models.Paiement.montantpayer), 0)))
            return TotalResult(total=float(result.scalar_one()), success=True)
        except SQLAlchemyError as e:
            await self.db.rollback()
            log.error(f"Database error while summing payments: {e}", exc_info=True)
            return TotalResult(
                error=f"Erreur lors de la récupération des montants de paiement : {driver_message(e)}",
                success=False,
                code=ErrorCode.REMOTE_FAILURE
            )
        except Exception as e:
            await self.db.rollback()
            log.error(f"Error while summing payments: {e}", exc_info=True)
            return TotalResult(
                error=f"Exception lors du calcul du montant total des paiements : {e}",
                success=False,
                code=ErrorCode.EXCEPTION
            )

    async def monthly_totals(self, start: datetime.date, end: datetime.date) -> Result[list[MonthlyTotal]]:
        """
        Payment totals per 'YYYY-MM' month for payments dated from 'start'
        to 'end' inclusive, in month order. Months without payments are absent.
        """
        log.info(f"Computing monthly payment totals from {start} to {end}.")

        async def operation():
            bucket = month_bucket(self.db, db_models.Paiement.datepaiement).label("month")
            stmt = (
                select(bucket, func.sum(db_models.Paiement.montantpayer).label("total_amount"))
                .where(
                    db_models.Paiement.datepaiement >= datetime.datetime.combine(start, datetime.time.min),
                    db_models.Paiement.datepaiement < datetime.datetime.combine(end + datetime.timedelta(days=1), datetime.time.min)
                )
                .group_by(bucket)
                .order_by(bucket)
            )
            result = await self.db.execute(stmt)
            return Result.ok([
                MonthlyTotal(month=row.month, total_amount=float(row.total_amount or 0))
                for row in result.all()
            ])

        return await self._guard("de la récupération des paiements mensuels", operation)

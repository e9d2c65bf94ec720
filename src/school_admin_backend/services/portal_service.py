'''
Reads of the parent portal: a parent sees their file, their children, the
payments made for them and the notifications addressed to them.
'''
from typing import Annotated

from fastapi import Depends

from ..common.logger import log
from ..models.envelope import Result
from ..models.families import PortalParentRead
from ..models.finance import PaymentRead
from ..models.notifications import NotificationRead
from .notification_service import NotificationService
from .parent_service import ParentService
from .payment_service import PaymentService
from .student_service import StudentService


class PortalService:
    def __init__(
        self,
        parent_service: Annotated[ParentService, Depends(ParentService)],
        student_service: Annotated[StudentService, Depends(StudentService)],
        payment_service: Annotated[PaymentService, Depends(PaymentService)],
        notification_service: Annotated[NotificationService, Depends(NotificationService)]
    ):
        self.parent_service = parent_service
        self.student_service = student_service
        self.payment_service = payment_service
        self.notification_service = notification_service

    async def home(self, idparent: int) -> Result[PortalParentRead]:
        log.info(f"Building portal home for parent {idparent}.")
        parent = await self.parent_service.get_by_id(idparent)
        if not parent.success:
            return Result.fail(parent.error, parent.code)
        children = await self.student_service.list_for_parent(idparent)
        if not children.success:
            return Result.fail(children.error, children.code)
        return Result.ok(PortalParentRead(**parent.data.model_dump(), children=children.data))

    async def payments(self, idparent: int) -> Result[list[PaymentRead]]:
        return await self.payment_service.list_for_parent(idparent)

    async def notifications(self, idparent: int) -> Result[list[NotificationRead]]:
        return await self.notification_service.list_for_parent(idparent)

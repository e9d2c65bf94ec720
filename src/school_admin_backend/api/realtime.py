'''
Live dashboard lists over a WebSocket.
The client receives a 'snapshot' of the table, then one 'change' message per
committed change (the updated rows and the toast to show).
'''
import asyncio
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..common.logger import log
from ..core.realtime import ChangeEvent
from ..database.db_enums import UserRole
from ..database.engine import get_session_factory
from ..models.ui import Toast
from ..services.realtime_service import TABLE_SYNCS, RealtimeService
from ..services.security import get_user_from_token
from ..services.user_service import UserService


async def drain(websocket: WebSocket):
    """Reads (and ignores) client messages until the client disconnects."""
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass


class RealtimeAPI:
    def __init__(self):
        self.router = APIRouter(prefix="/realtime", tags=["Realtime"])
        self.router.add_api_websocket_route("/{table}", self.live_table)

    async def live_table(
        self,
        websocket: WebSocket,
        table: str,
        token: Annotated[str, Query()],
        session_factory: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)],
        realtime_service: Annotated[RealtimeService, Depends(RealtimeService)]
    ):
        if table not in TABLE_SYNCS:
            log.warning(f"Realtime subscription refused: unknown table '{table}'.")
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return

        async with session_factory() as db:
            user = await get_user_from_token(token, UserService(db))
        if user is None or user.role == UserRole.PARENT.value:
            log.warning(f"Realtime subscription to '{table}' refused: invalid token or role.")
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return

        await websocket.accept()
        # Subscribed before the snapshot so no commit falls between the two
        subscription = realtime_service.feed.subscribe(table)
        snapshot = await realtime_service.snapshot(table)
        if not snapshot.success:
            subscription.close()
            await websocket.send_json({"type": "error", "error": snapshot.error})
            await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
            return

        async def notify(toast: Toast, change: Optional[ChangeEvent]):
            await websocket.send_json({
                "type": "change",
                "event": change.event_type.value if change else None,
                "toast": toast.model_dump(mode="json"),
                "rows": synchronizer.rows
            })

        synchronizer = realtime_service.synchronizer(table, snapshot.data, notify)
        await websocket.send_json({"type": "snapshot", "table": table, "rows": synchronizer.rows})

        consumer = asyncio.create_task(synchronizer.run(subscription))
        receiver = asyncio.create_task(drain(websocket))
        try:
            done, _ = await asyncio.wait({consumer, receiver}, return_when=asyncio.FIRST_COMPLETED)
            if consumer in done and consumer.exception() is None:
                # The channel failed; the client was told through the error toast
                await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
        except WebSocketDisconnect:
            pass
        finally:
            synchronizer.close()
            subscription.close()
            for task in (consumer, receiver):
                task.cancel()
            log.info(f"Realtime subscription to '{table}' closed.")


realtime_api = RealtimeAPI()
router = realtime_api.router

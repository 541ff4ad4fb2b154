import logging

from channels.generic.websocket import AsyncJsonWebsocketConsumer

from users.permissions import staff_identity

from .services import order_event_hub

logger = logging.getLogger(__name__)


class OrderEventsConsumer(AsyncJsonWebsocketConsumer):
    """
    Streams new-order events to connected staff.

    Anonymous or inactive users are refused with close code 4003.
    """

    hub = order_event_hub

    async def connect(self):
        staff_id, role = staff_identity(self.scope.get("user"))
        if staff_id is None:
            logger.warning("OrderEventsConsumer: unauthenticated connection refused")
            await self.close(code=4003)
            return

        self.staff_id = staff_id
        await self.hub.add(self.channel_name)
        await self.accept()
        logger.info(f"Staff {staff_id} ({role}) subscribed to order events")

    async def disconnect(self, close_code):
        if getattr(self, "staff_id", None) is not None:
            await self.hub.discard(self.channel_name)
            logger.info(f"Staff {self.staff_id} unsubscribed from order events ({close_code})")

    async def receive_json(self, content, **kwargs):
        # The stream is server-to-client only; answer pings so clients can
        # check liveness.
        if content.get("type") == "ping":
            await self.send_json({"type": "pong"})

    async def order_created(self, event):
        await self.send_json(
            {
                "event": event["topic"],
                "table_id": event["table_id"],
                "order_id": event["order_id"],
            }
        )

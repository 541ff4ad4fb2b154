import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

logger = logging.getLogger(__name__)

ORDER_EVENTS_GROUP = "order_events"
ORDER_CREATED = "order.created"


class OrderEventHub:
    """
    Fan-out of order events to live subscribers.

    Subscribers are websocket channels registered in one channel-layer group;
    `add`/`discard` maintain the registry and `publish` broadcasts to it.
    Publishing is best effort: a subscriber whose buffer is full misses the
    event (the channel layer drops it), and any failure to reach the layer
    is logged and reported through the return value instead of raised.
    """

    def __init__(self, group=ORDER_EVENTS_GROUP, layer_alias="default"):
        self.group = group
        self.layer_alias = layer_alias

    @property
    def channel_layer(self):
        return get_channel_layer(self.layer_alias)

    async def add(self, channel_name):
        await self.channel_layer.group_add(self.group, channel_name)
        logger.debug(f"Subscriber {channel_name} joined {self.group}")

    async def discard(self, channel_name):
        await self.channel_layer.group_discard(self.group, channel_name)
        logger.debug(f"Subscriber {channel_name} left {self.group}")

    def publish(self, topic, payload):
        """
        Broadcast `payload` under `topic`. Returns True when the event reached
        the channel layer, False otherwise. Never raises.
        """
        message = {"type": topic, "topic": topic, **payload}
        try:
            channel_layer = self.channel_layer
            if channel_layer is None:
                logger.warning(f"Channel layer not available. Dropping {topic} event.")
                return False
            async_to_sync(channel_layer.group_send)(self.group, message)
        except Exception:
            logger.warning(f"Failed to publish {topic} event to {self.group}", exc_info=True)
            return False
        return True


order_event_hub = OrderEventHub()

import json
from channels.generic.websocket import AsyncWebsocketConsumer


class QueueDisplayConsumer(AsyncWebsocketConsumer):
    """Feeds the lobby display: clients refetch ``/api/queue/display`` on each update."""
    GROUP = "queue.display"

    async def connect(self):
        await self.channel_layer.group_add(self.GROUP, self.channel_name)
        await self.accept()
        await self.send(json.dumps({"type": "welcome", "message": "connected"}))

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(self.GROUP, self.channel_name)

    async def queue_updated(self, event):
        # event: {"type": "queue.updated", "action": "...", "queueDate": "YYYY-MM-DD", "ts": "..."}
        await self.send(json.dumps(event))

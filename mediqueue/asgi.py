"""
ASGI config for the MediQueue project.

Serves the HTTP API through Django and the queue display board feed
through Channels.  Settings must be configured before any
Django-dependent import.
"""
import os

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "mediqueue.settings")

import django  # noqa: E402
django.setup()  # noqa: E402

from django.core.asgi import get_asgi_application  # noqa: E402
from channels.routing import ProtocolTypeRouter, URLRouter  # noqa: E402
from django.urls import path  # noqa: E402

from frontdesk.realtime.consumers import QueueDisplayConsumer  # noqa: E402

django_asgi_app = get_asgi_application()

# Public feed, no auth middleware stack.
websocket_urlpatterns = [
    path("ws/queue/display/", QueueDisplayConsumer.as_asgi()),
]

application = ProtocolTypeRouter({
    "http": django_asgi_app,
    "websocket": URLRouter(websocket_urlpatterns),
})

import asyncio

import pytest
from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from channels.testing import WebsocketCommunicator

from frontdesk.models import PreRegistration
from frontdesk.realtime.consumers import QueueDisplayConsumer
from frontdesk.receivers import push_display_update
from frontdesk.services import intake, queue as queue_service

pytestmark = pytest.mark.django_db


@pytest.fixture
def display_channel():
    """A channel subscribed to the display group, standing in for a lobby screen."""
    layer = get_channel_layer()
    channel = async_to_sync(layer.new_channel)()
    async_to_sync(layer.group_add)(QueueDisplayConsumer.GROUP, channel)
    yield channel
    async_to_sync(layer.flush)()


async def _receive(channel):
    return await asyncio.wait_for(get_channel_layer().receive(channel), timeout=2)


def _next_message(channel):
    return async_to_sync(_receive)(channel)


def test_display_feed_relays_queue_updates():
    async def scenario():
        communicator = WebsocketCommunicator(QueueDisplayConsumer.as_asgi(), "/ws/queue/display/")
        connected, _ = await communicator.connect()
        assert connected
        assert (await communicator.receive_json_from())["type"] == "welcome"

        await get_channel_layer().group_send(QueueDisplayConsumer.GROUP, {
            "type": "queue.updated",
            "action": "queue.transitioned",
            "queueDate": "2026-04-06",
            "ts": "2026-04-06T09:00:00+08:00",
        })
        event = await communicator.receive_json_from()
        await communicator.disconnect()
        return event

    event = async_to_sync(scenario)()
    assert event["action"] == "queue.transitioned"
    assert event["queueDate"] == "2026-04-06"


def test_committed_walk_in_is_pushed_to_display(display_channel, make_patient,
                                                django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True):
        entry = queue_service.create_walk_in(patient_id=make_patient().pk, reason_for_visit='fever')
    message = _next_message(display_channel)
    assert message["type"] == "queue.updated"
    assert message["action"] == "queue.created"
    assert message["queueDate"] == entry.queue_date.isoformat()


def test_approval_push_uses_the_entry_date(display_channel, make_pre_registration):
    # the commit may land after midnight; the event carries the entry's own date
    pre = make_pre_registration()
    push_display_update(PreRegistration, action='preregistration.approved', actor=None, instance=pre,
                        detail={'queueDate': '2026-01-31', 'queueNumber': 12})
    message = _next_message(display_channel)
    assert message["action"] == "preregistration.approved"
    assert message["queueDate"] == "2026-01-31"


def test_submission_and_rejection_do_not_touch_display(display_channel, make_pre_registration, staff_user,
                                                       django_capture_on_commit_callbacks):
    pre = make_pre_registration()
    with django_capture_on_commit_callbacks(execute=True):
        intake.reject(pre.pk, actor=staff_user)
    with django_capture_on_commit_callbacks(execute=True):
        _, entry = intake.approve(make_pre_registration().pk, actor=staff_user)
    # only the approval reached the group
    message = _next_message(display_channel)
    assert message["action"] == "preregistration.approved"
    assert message["queueDate"] == entry.queue_date.isoformat()

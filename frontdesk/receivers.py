"""
Receivers for :data:`frontdesk.signals.frontdesk_event`.

Connected from :meth:`FrontdeskConfig.ready`.  Each receiver is an
independent consumer; an exception in one is reported by the signal
dispatcher and does not affect the others.
"""
import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.dispatch import receiver
from django.utils import timezone

from .models import PreRegistration, QueueEntry
from .realtime.consumers import QueueDisplayConsumer
from .services.audit import log_action
from .services.notifications import notify_pre_registration
from .signals import frontdesk_event, PREREG_APPROVED, PREREG_SUBMITTED

logger = logging.getLogger(__name__)


@receiver(frontdesk_event, dispatch_uid='frontdesk.audit')
def write_audit_event(sender, *, action, actor, instance, detail, **kwargs):
    log_action(
        user=actor,
        action=action,
        object_type=sender.__name__,
        object_id=instance.pk,
        detail=detail,
    )


@receiver(frontdesk_event, dispatch_uid='frontdesk.display')
def push_display_update(sender, *, action, actor, instance, detail, **kwargs):
    if sender is QueueEntry:
        queue_date = instance.queue_date.isoformat()
    elif sender is PreRegistration and action == PREREG_APPROVED:
        queue_date = detail['queueDate']
    else:
        return
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    event = {
        "type": "queue.updated",
        "action": action,
        "queueDate": queue_date,
        "ts": timezone.now().isoformat(),
    }
    async_to_sync(channel_layer.group_send)(QueueDisplayConsumer.GROUP, event)
    logger.debug('display update pushed: %s %s', action, queue_date)


@receiver(frontdesk_event, dispatch_uid='frontdesk.notify')
def notify_new_pre_registration(sender, *, action, instance, **kwargs):
    if sender is PreRegistration and action == PREREG_SUBMITTED:
        notify_pre_registration(instance)

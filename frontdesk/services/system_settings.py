import datetime
from typing import Optional

from django.conf import settings
from django.core.cache import cache
from django.utils import timezone

from frontdesk.models import SystemSetting

_REQUEST_ATTR = '_frontdesk_system_settings'


def load_system_settings() -> SystemSetting:
    obj = cache.get(SystemSetting.CACHE_KEY)
    if obj is not None:
        return obj
    obj = SystemSetting.objects.order_by('id').first()
    if obj is None:
        # save() clears the cache key, so create before setting it
        obj = SystemSetting.objects.create()
    cache.set(SystemSetting.CACHE_KEY, obj, settings.SYSTEM_SETTINGS_CACHE_SECONDS)
    return obj


def get_system_settings(request=None) -> SystemSetting:
    """Return the hospital settings, read at most once per request."""
    if request is None:
        return load_system_settings()
    obj = getattr(request, _REQUEST_ATTR, None)
    if obj is None:
        obj = load_system_settings()
        setattr(request, _REQUEST_ATTR, obj)
    return obj


def format_ticket(number: int, prefix: str) -> str:
    return f"{prefix}-{number:03d}" if prefix else f"{number:03d}"


def working_hours(row: SystemSetting) -> dict:
    return {
        'start': row.working_hours_start.strftime('%H:%M'),
        'end': row.working_hours_end.strftime('%H:%M'),
    }


def is_open(row: SystemSetting, at: Optional[datetime.datetime] = None) -> bool:
    """Whether ``at`` (default now) falls inside the desk's working hours, local time."""
    t = timezone.localtime(at).time()
    start, end = row.working_hours_start, row.working_hours_end
    if start <= end:
        return start <= t < end
    # overnight shift, e.g. 22:00-06:00
    return t >= start or t < end

from django.core.cache import cache
from django.db import connections
from django.http import JsonResponse


def healthz(request):
    checks = {}
    try:
        with connections['default'].cursor() as c:
            c.execute('SELECT 1')
            row = c.fetchone()
        checks['db'] = bool(row and row[0] == 1)
    except Exception as e:
        return JsonResponse({'ok': False, 'error': f'db: {e}'}, status=503)
    try:
        cache.set('healthz', 1, 5)
        checks['cache'] = cache.get('healthz') == 1
    except Exception as e:
        return JsonResponse({'ok': False, 'error': f'cache: {e}'}, status=503)
    return JsonResponse({'ok': all(checks.values()), **checks})

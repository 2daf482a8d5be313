from rest_framework.throttling import AnonRateThrottle


class PreRegistrationSubmitThrottle(AnonRateThrottle):
    """Per-IP limit on the public intake form."""
    scope = 'preregistration_submit'

    def allow_request(self, request, view):
        if request.method != 'POST':
            return True
        return super().allow_request(request, view)

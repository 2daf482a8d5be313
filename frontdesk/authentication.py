"""
Token authentication for the staff API.

The frontend sends ``Authorization: Bearer <token>``; DRF's stock class
expects the ``Token`` keyword, so this subclass only swaps the keyword.
Tokens themselves are ``rest_framework.authtoken`` tokens.
"""
from __future__ import annotations

from rest_framework import authentication


class TokenAuthentication(authentication.TokenAuthentication):
    keyword = 'Bearer'

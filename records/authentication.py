"""
Bearer token authentication.

Tokens are simplejwt access tokens signed with ``SECRET_KEY`` and bound
to the account id.  Missing, expired or tampered tokens and tokens of
deactivated accounts are rejected with HTTP 401.  Keeping the class here
gives settings a stable import path.
"""
from __future__ import annotations

from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication

from records.services.accounts import ACCOUNT_DEACTIVATED


class BearerTokenAuthentication(JWTAuthentication):
    """JWT authentication using the ``Bearer`` keyword.

    A deactivated account fails with the same message login uses.
    """

    www_authenticate_realm = 'api'

    def get_user(self, validated_token):
        try:
            user = super().get_user(validated_token)
        except AuthenticationFailed as e:
            if e.get_codes() == 'user_inactive':
                raise AuthenticationFailed(ACCOUNT_DEACTIVATED, code='user_inactive') from e
            raise
        if not user.is_active:
            raise AuthenticationFailed(ACCOUNT_DEACTIVATED, code='user_inactive')
        return user

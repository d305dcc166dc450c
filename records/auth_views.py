"""
Registration, login and profile endpoints.

Tokens come from :func:`records.services.accounts.issue_token`; the
authentication class that verifies them lives in
``records.authentication``.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from records.serializers.auth import LoginSerializer, RegisterSerializer, ProfileUpdateSerializer
from records.services.accounts import (
    register_account, authenticate_account, issue_token, update_own_account, profile_for,
)
from records.services.audit import log_action
from records.services.projections import format_account


def _client_ip(request):
    return request.META.get('REMOTE_ADDR')


@api_view(['POST'])
@permission_classes([AllowAny])
def register_view(request):
    s = RegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user, _ = register_account(s.validated_data)
    log_action(user=user, action='register', object_type='user', object_id=user.id,
               detail={'role': user.role, 'ip': _client_ip(request)})
    return Response({
        'success': True,
        'message': 'User registered successfully',
        'data': {'user': format_account(user), 'token': issue_token(user)},
    }, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([AllowAny])
def login_view(request):
    """
    Email/password login.
    Accepts fields:
      - email (case-insensitive)
      - password
    """
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    email = s.validated_data['email']
    try:
        user = authenticate_account(email, s.validated_data['password'])
    except AuthenticationFailed:
        # audit the failed attempt by email only
        log_action(user=None, action='login', object_type='user', object_id=None,
                   detail={'result': 'fail', 'email': email, 'ip': _client_ip(request)})
        raise

    log_action(user=user, action='login', object_type='user', object_id=user.id,
               detail={'result': 'ok', 'ip': _client_ip(request)})
    return Response({
        'success': True,
        'message': 'Login successful',
        'data': {'user': format_account(user), 'token': issue_token(user)},
    })


@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated])
def profile_view(request):
    """Return or update the caller's account along with its role profile."""
    user = request.user
    if request.method == 'PUT':
        s = ProfileUpdateSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        user = update_own_account(user, s.validated_data)
        log_action(user=user, action='profile_update', object_type='user', object_id=user.id,
                   detail={'fields': sorted(s.validated_data)})
        return Response({
            'success': True,
            'message': 'Profile updated successfully',
            'data': {'user': format_account(user), **profile_for(user)},
        })
    return Response({'success': True, 'data': {'user': format_account(user), **profile_for(user)}})

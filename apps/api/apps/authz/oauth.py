"""
Google OAuth 2.0 authorization-code flow.

The ``state`` parameter is a signed, time-limited token so callbacks that
did not start here are rejected.
"""
import logging
from urllib.parse import urlencode

import requests
from django.conf import settings
from django.core import signing
from django.db import transaction

from .models import User, RoleChoices

logger = logging.getLogger(__name__)

AUTHORIZE_URL = 'https://accounts.google.com/o/oauth2/v2/auth'
TOKEN_URL = 'https://oauth2.googleapis.com/token'
USERINFO_URL = 'https://openidconnect.googleapis.com/v1/userinfo'
STATE_SALT = 'authz.google.state'
STATE_MAX_AGE = 600
REQUEST_TIMEOUT = 10


class OAuthError(Exception):
    """The provider exchange failed or returned an unusable profile."""


def is_configured():
    return bool(settings.GOOGLE_CLIENT_ID and settings.GOOGLE_CLIENT_SECRET)


def authorization_url():
    params = {
        'client_id': settings.GOOGLE_CLIENT_ID,
        'redirect_uri': settings.GOOGLE_REDIRECT_URI,
        'response_type': 'code',
        'scope': 'openid email profile',
        'state': signing.dumps({'flow': 'google'}, salt=STATE_SALT),
        'prompt': 'select_account',
    }
    return f'{AUTHORIZE_URL}?{urlencode(params)}'


def verify_state(state):
    try:
        signing.loads(state or '', salt=STATE_SALT, max_age=STATE_MAX_AGE)
    except signing.BadSignature as e:
        raise OAuthError('Invalid OAuth state') from e


def fetch_profile(code):
    """Exchange ``code`` for tokens and return the userinfo payload."""
    try:
        token_response = requests.post(
            TOKEN_URL,
            data={
                'code': code,
                'client_id': settings.GOOGLE_CLIENT_ID,
                'client_secret': settings.GOOGLE_CLIENT_SECRET,
                'redirect_uri': settings.GOOGLE_REDIRECT_URI,
                'grant_type': 'authorization_code',
            },
            timeout=REQUEST_TIMEOUT,
        )
        token_response.raise_for_status()
        access_token = token_response.json()['access_token']

        profile_response = requests.get(
            USERINFO_URL,
            headers={'Authorization': f'Bearer {access_token}'},
            timeout=REQUEST_TIMEOUT,
        )
        profile_response.raise_for_status()
        profile = profile_response.json()
    except (requests.RequestException, KeyError, ValueError) as e:
        raise OAuthError(f'Google token exchange failed: {e.__class__.__name__}') from e

    if not profile.get('sub') or not profile.get('email'):
        raise OAuthError('Google profile is missing id or email')
    return profile


@transaction.atomic
def link_google_account(profile):
    """
    Resolve the local user for a Google profile.

    Lookup order: google_id, then email (linking the Google id to it), else
    a new doctor account with an unusable password.
    """
    google_id = profile['sub']
    email = profile['email'].strip().lower()

    user = User.objects.filter(google_id=google_id).first()
    if user is not None:
        return user

    user = User.objects.filter(email__iexact=email).first()
    if user is not None:
        user.google_id = google_id
        if not user.profile_picture and profile.get('picture'):
            user.profile_picture = profile['picture']
        user.save(update_fields=['google_id', 'profile_picture', 'updated_at'])
        return user

    return User.objects.create_user(
        email=email,
        password=None,
        name=profile.get('name') or email.split('@')[0],
        google_id=google_id,
        profile_picture=profile.get('picture', ''),
        role=RoleChoices.DOCTOR,
    )

# src/auth/oauth.py
"""
OAuth account linking.

Each provider is described in ``settings.OAUTH_PROVIDERS``; a provider is
usable only when both its client id and secret are configured. The flow is the
standard authorization-code grant:

  1. ``authorize_url`` builds the provider redirect, carrying a signed,
     short-lived ``state`` token.
  2. ``fetch_profile`` verifies the state, exchanges the code for an access
     token and reads the external identity (email, name, avatar).

The resulting identity is linked to a local user by ``AuthService``.
"""
import logging
import urllib.parse
from dataclasses import dataclass
from datetime import timedelta
from typing import List, Optional

import requests
from fastapi import HTTPException

from auth.services import AuthService
from config import settings

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10


@dataclass
class ExternalIdentity:
    """A verified identity returned by an OAuth provider."""
    provider: str
    email: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None


def enabled_providers() -> List[str]:
    return [name for name, conf in settings.OAUTH_PROVIDERS.items() if conf["enabled"]]


def get_provider(provider: str) -> dict:
    conf = settings.OAUTH_PROVIDERS.get(provider)
    if not conf or not conf["enabled"]:
        raise HTTPException(status_code=404, detail=f"OAuth provider '{provider}' is not available")
    return conf


def callback_url(provider: str) -> str:
    return f"{settings.BASE_URL}/auth/{provider}/callback"


def authorize_url(provider: str) -> str:
    conf = get_provider(provider)
    state = AuthService.create_access_token(
        {"sub": "oauth-state", "provider": provider},
        expires_delta=timedelta(minutes=settings.OAUTH_STATE_EXPIRE_MINUTES),
    )
    params = {
        "client_id": conf["client_id"],
        "redirect_uri": callback_url(provider),
        "response_type": "code",
        "scope": conf["scope"],
        "state": state,
    }
    return f"{conf['authorize_url']}?{urllib.parse.urlencode(params)}"


def verify_state(provider: str, state: str) -> None:
    payload = AuthService.decode_token(state)
    if not payload or payload.get("sub") != "oauth-state" or payload.get("provider") != provider:
        logger.warning(f"Rejected OAuth callback for {provider}: invalid state")
        raise HTTPException(status_code=400, detail="Invalid or expired OAuth state")


def _parse_profile(provider: str, data: dict) -> ExternalIdentity:
    email = data.get("email") or data.get("preferred_username")
    if not email:
        raise HTTPException(status_code=400, detail=f"{provider.capitalize()} did not provide an email address")
    avatar = data.get("picture")
    if isinstance(avatar, dict):  # facebook nests the URL under picture.data.url
        avatar = avatar.get("data", {}).get("url")
    if provider == "microsoft":
        # Graph exposes the photo as an authenticated endpoint, not a public URL
        avatar = None
    return ExternalIdentity(provider=provider, email=email, display_name=data.get("name"), avatar_url=avatar)


def fetch_profile(provider: str, code: str, state: str) -> ExternalIdentity:
    """Exchange an authorization code and return the provider's identity for the user."""
    conf = get_provider(provider)
    verify_state(provider, state)

    try:
        token_resp = requests.post(
            conf["token_url"],
            data={
                "client_id": conf["client_id"],
                "client_secret": conf["client_secret"],
                "code": code,
                "grant_type": "authorization_code",
                "redirect_uri": callback_url(provider),
            },
            headers={"Accept": "application/json"},
            timeout=REQUEST_TIMEOUT,
        )
        if token_resp.status_code != 200:
            logger.error(f"{provider} token exchange failed: {token_resp.status_code} - {token_resp.text}")
            raise HTTPException(status_code=502, detail=f"{provider.capitalize()} login failed")
        access_token = token_resp.json().get("access_token")

        profile_resp = requests.get(
            conf["userinfo_url"],
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=REQUEST_TIMEOUT,
        )
        if profile_resp.status_code != 200:
            logger.error(f"{provider} profile fetch failed: {profile_resp.status_code} - {profile_resp.text}")
            raise HTTPException(status_code=502, detail=f"{provider.capitalize()} login failed")
    except requests.RequestException as e:
        logger.error(f"{provider} OAuth request error: {str(e)}", exc_info=True)
        raise HTTPException(status_code=502, detail=f"{provider.capitalize()} login failed")

    return _parse_profile(provider, profile_resp.json())

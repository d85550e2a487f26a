from __future__ import annotations

from dataclasses import dataclass

import requests

from errors import UpstreamAuthError

TOKEN_URL = "https://api.fitbit.com/oauth2/token"


@dataclass(frozen=True)
class CredentialPair:
    access_token: str
    refresh_token: str


def refresh_fitbit_token(basic_token: str, refresh_token: str) -> CredentialPair:
    """
    Exchange a refresh token for a new access/refresh pair.

    Fitbit refresh tokens are single-use: the returned refresh_token replaces
    the one passed in and must be persisted before the next run.
    """
    headers = {
        "Authorization": f"Basic {basic_token}",
        "Accept": "application/json",
        "Content-Type": "application/x-www-form-urlencoded",
    }
    data = {"grant_type": "refresh_token", "refresh_token": refresh_token}

    r = requests.post(TOKEN_URL, headers=headers, data=data, timeout=30)
    if not 200 <= r.status_code < 300:
        # invalid_grant here means the stored refresh token was already used or revoked.
        raise UpstreamAuthError(
            f"Fitbit token refresh failed ({r.status_code}): {r.text}", r.status_code, r.text
        )

    token = r.json()
    access = token.get("access_token")
    new_refresh = token.get("refresh_token")
    if not access or not new_refresh:
        raise UpstreamAuthError(
            f"Refresh succeeded but response missing access_token/refresh_token: {r.text}",
            r.status_code,
            r.text,
        )

    return CredentialPair(access_token=str(access), refresh_token=str(new_refresh))

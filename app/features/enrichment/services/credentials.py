"""
Integration credential access and OAuth token refresh.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.enrichment.models.integration import OAUTH_PROVIDERS, ProjectIntegration
from app.platform.config import settings
from app.platform.exceptions import IntegrationAuthError
from app.platform.utils.crypto import decrypt_credentials, encrypt_credentials

logger = logging.getLogger(__name__)

# Refresh a little early so the token cannot expire mid-fetch
REFRESH_MARGIN = timedelta(minutes=5)
DEFAULT_TOKEN_LIFETIME_SECONDS = 3600


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def token_needs_refresh(expires_at: Optional[datetime], now: Optional[datetime] = None) -> bool:
    expires_at = _as_utc(expires_at)
    if expires_at is None:
        return False
    now = now or datetime.now(timezone.utc)
    return expires_at - REFRESH_MARGIN <= now


async def refresh_access_token(http: httpx.AsyncClient, refresh_token: str) -> Dict:
    """Exchange a refresh token at Google's token endpoint."""
    response = await http.post(
        settings.GOOGLE_TOKEN_URL,
        data={
            "client_id": settings.GOOGLE_OAUTH_CLIENT_ID or "",
            "client_secret": settings.GOOGLE_OAUTH_CLIENT_SECRET or "",
            "refresh_token": refresh_token,
            "grant_type": "refresh_token",
        },
    )
    if response.status_code != 200:
        raise IntegrationAuthError(
            f"Token refresh failed: {response.status_code}",
            data={"status_code": response.status_code},
        )
    payload = response.json()
    if not payload.get("access_token"):
        raise IntegrationAuthError("Token refresh response had no access_token")
    return payload


async def resolve_credentials(
    db: AsyncSession,
    integration: ProjectIntegration,
    http: httpx.AsyncClient,
) -> Dict[str, str]:
    """
    Decrypt an integration's credentials, refreshing an expired OAuth token first.

    A refreshed token is re-encrypted and committed before it is returned.

    Raises:
        IntegrationAuthError: Credentials are missing, unreadable or cannot be refreshed
    """
    if not integration.encrypted_credentials:
        raise IntegrationAuthError(f"No credentials stored for {integration.provider.value}")
    try:
        credentials = decrypt_credentials(integration.encrypted_credentials)
    except ValueError as e:
        raise IntegrationAuthError(str(e)) from e

    if integration.provider not in OAUTH_PROVIDERS or not token_needs_refresh(integration.token_expires_at):
        return credentials

    refresh_token = credentials.get("refresh_token")
    if not refresh_token:
        raise IntegrationAuthError(f"{integration.provider.value} token expired and no refresh token is stored")

    logger.info(f"Refreshing {integration.provider.value} token for project {integration.project_id}")
    payload = await refresh_access_token(http, refresh_token)

    credentials["access_token"] = payload["access_token"]
    if payload.get("refresh_token"):
        credentials["refresh_token"] = payload["refresh_token"]
    expires_at = datetime.now(timezone.utc) + timedelta(
        seconds=int(payload.get("expires_in") or DEFAULT_TOKEN_LIFETIME_SECONDS)
    )
    sealed = encrypt_credentials(credentials)

    integration.encrypted_credentials = sealed
    integration.token_expires_at = expires_at
    await db.commit()
    return credentials

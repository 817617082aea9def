import secrets

from fastapi import Header, HTTPException, status

from rsvp_engine.config.settings import settings


def require_host(x_host_token: str | None = Header(default=None)) -> bool:
    """Dependency that only lets the event host through.

    When ``HOST_API_TOKEN`` is not configured every caller counts as the host.
    """
    expected = settings.host_api_token
    if not expected:
        return True
    if not x_host_token or not secrets.compare_digest(x_host_token, expected):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Host token required")
    return True

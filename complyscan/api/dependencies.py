from fastapi import Depends, Header, Request

from complyscan.accounts.exceptions import AuthenticationError
from complyscan.accounts.models import Principal
from complyscan.api.services import Services


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_principal(
    authorization: str | None = Header(default=None),
    services: Services = Depends(get_services),
) -> Principal:
    """Resolve the caller from a ``Bearer`` session token, or fail with 401."""
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Unauthorized")
    return services.accounts.authenticate(token.strip())


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.headers.get("x-real-ip") or "unknown"

"""Dependency injection for FastAPI endpoints"""

import logging
from fastapi import Depends, Header, HTTPException, Request
from rigidity_gateway.domain.classifier import Clock
from rigidity_gateway.domain.exceptions import AuthServiceError, UnauthorizedError
from rigidity_gateway.infrastructure.clients.auth import AuthClient
from rigidity_gateway.infrastructure.observability.metrics import auth_failures_counter
from rigidity_gateway.utils.date_utils import utc_now


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_auth_client() -> AuthClient:
    """Provide auth service client instance"""
    return AuthClient()


def get_clock() -> Clock:
    """Provide the clock used to stamp computed_at"""
    return utc_now


async def get_current_user_id(
    request: Request,
    authorization: str | None = Header(default=None),
    auth_client: AuthClient = Depends(get_auth_client),
) -> str:
    """
    Resolve the caller from the Authorization header.

    Raises:
        HTTPException 401: Header missing, not a bearer token, or token rejected
        HTTPException 503: Auth service unavailable
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Unauthorized")

    token = authorization[len("Bearer "):].strip()
    if not token:
        raise HTTPException(status_code=401, detail="Unauthorized")

    try:
        return await auth_client.get_user_id(token)
    except UnauthorizedError:
        raise HTTPException(status_code=401, detail="Invalid token")
    except AuthServiceError as e:
        auth_failures_counter.inc()
        logging.error(f"Auth API error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=503, detail="Auth service unavailable")

"""Auth service HTTP client for resolving bearer tokens to user identities"""

import httpx
from rigidity_gateway.domain.exceptions import AuthServiceError, UnauthorizedError
from rigidity_gateway.config import settings


class AuthClient:
    """Client for the external identity provider"""

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = base_url or settings.auth_api_base
        self.timeout = timeout or settings.http_timeout_seconds

    async def get_user_id(self, token: str) -> str:
        """
        Resolve an access token to the caller's user id.

        Raises:
            UnauthorizedError: Token rejected (401/403) or no user in the response
            AuthServiceError: On timeout, other HTTP errors, or invalid response
        """
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.get(
                    f"{self.base_url}/auth/v1/user",
                    headers={"Authorization": f"Bearer {token}"},
                )
                if response.status_code in (401, 403):
                    raise UnauthorizedError("Invalid or expired token")
                response.raise_for_status()
                data = response.json()

                user_id = data.get("id")
                if not isinstance(user_id, str) or not user_id:
                    raise UnauthorizedError("Token does not identify a user")
                return user_id

            except httpx.TimeoutException as e:
                raise AuthServiceError(f"Auth API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise AuthServiceError(f"Auth API error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise AuthServiceError(f"Auth API unreachable: {e}") from e
            except (AttributeError, ValueError) as e:
                raise AuthServiceError(f"Invalid response from auth API: {e}") from e

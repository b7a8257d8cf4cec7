"""HTTP helpers shared by the service adapters."""

from typing import Any

import httpx

from chat_mirror.errors import MalformedDataError, NetworkError
from chat_mirror.logging import get_logger
from chat_mirror.models.remote import Credentials

__all__ = [
    "get_json",
]

logger = get_logger(__name__)


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    credentials: Credentials,
    params: dict[str, Any] | None = None,
) -> Any:
    """GET a JSON document with the session credential header.

    Args:
        client: Shared async HTTP client
        url: Absolute URL to fetch
        credentials: Session credentials, sent as the Cookie header
        params: Optional query parameters

    Returns:
        Decoded JSON body

    Raises:
        NetworkError: On transport failure or a non-2xx status
        MalformedDataError: If the body is not valid JSON
    """
    headers = {
        "Cookie": credentials.header.get_secret_value(),
        "Accept": "application/json",
    }
    try:
        response = await client.get(url, params=params, headers=headers)
    except httpx.HTTPError as e:
        raise NetworkError(f"Request to {url} failed: {e}", url=url) from e

    if not response.is_success:
        logger.debug("remote_request_rejected", url=url, status_code=response.status_code)
        raise NetworkError(
            f"Request to {url} failed with status {response.status_code}",
            status_code=response.status_code,
            url=url,
        )

    try:
        return response.json()
    except ValueError as e:
        raise MalformedDataError(f"Response from {url} is not valid JSON") from e

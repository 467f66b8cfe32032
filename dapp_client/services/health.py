"""
Health Check Module.

Checks whether the proof server is reachable before transactions are
proven against it.
"""

import aiohttp
from loguru import logger

from dapp_client.config.constants import (
    PROOF_SERVER_ALIVE_MARKER,
    PROOF_SERVER_CHECK_TIMEOUT,
)


async def check_proof_server(
    url: str,
    session: aiohttp.ClientSession | None = None,
    timeout: float = PROOF_SERVER_CHECK_TIMEOUT,
) -> bool:
    """
    Check proof server status.

    Args:
        url: Proof server base URL
        session: Optional shared aiohttp session
        timeout: Request timeout in seconds

    Returns:
        True if the server answered 2xx with its liveness message
    """
    owns_session = session is None
    client = session or aiohttp.ClientSession()
    try:
        async with client.get(
            url.strip(), timeout=aiohttp.ClientTimeout(total=timeout)
        ) as response:
            if response.status >= 300:
                logger.warning(f"Proof server at {url} returned HTTP {response.status}")
                return False
            text = await response.text()
    except (aiohttp.ClientError, TimeoutError, OSError) as e:
        logger.warning(f"Proof server at {url} is unreachable: {e}")
        return False
    finally:
        if owns_session:
            await client.close()

    is_alive = PROOF_SERVER_ALIVE_MARKER in text
    if not is_alive:
        logger.warning(f"Proof server at {url} responded without liveness marker")
    return is_alive

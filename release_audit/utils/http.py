from __future__ import annotations

import asyncio
from typing import Dict, Optional
from aiohttp import ClientSession, ClientTimeout
import aiohttp
import logging

from ..exceptions import FetchError

logger = logging.getLogger(__name__)


async def fetch_text(
    session: ClientSession,
    url: str,
    *,
    timeout: float = 15.0,
    user_agent: Optional[str] = None,
    retries: int = 0,
) -> str:
    """
    Fetch a URL and return body text. Raises FetchError on transport failure,
    an undecodable body or a non-success status once ``retries`` extra attempts are exhausted.
    """
    headers: Dict[str, str] = {}
    if user_agent:
        headers["User-Agent"] = user_agent

    attempt = 0
    while True:
        try:
            async with session.get(url, headers=headers, timeout=ClientTimeout(total=timeout)) as resp:
                resp.raise_for_status()
                body = await resp.text()
                logger.debug("fetched %s (%s, %d chars)", url, resp.status, len(body))
                return body
        except aiohttp.ClientResponseError as exc:
            error = FetchError(url, f"HTTP {exc.status} {exc.message}", status=exc.status)
        except asyncio.TimeoutError:
            error = FetchError(url, f"timed out after {timeout}s")
        except aiohttp.ClientError as exc:
            error = FetchError(url, repr(exc))
        except UnicodeDecodeError as exc:
            # body bytes do not match the declared charset
            error = FetchError(url, f"undecodable body: {exc}")
        logger.debug("fetch_text attempt %s failed for %s: %s", attempt + 1, url, error)

        attempt += 1
        if attempt > retries:
            raise error
        await asyncio.sleep(min(2 ** (attempt - 1), 5))


def create_session(timeout: float = 15.0, user_agent: Optional[str] = None) -> ClientSession:
    """
    Create a shared aiohttp ClientSession.
    """
    # Note: caller is responsible for closing the session (await session.close()).
    connector = aiohttp.TCPConnector(limit=0)  # unlimited; concurrency managed via semaphore
    headers = {"User-Agent": user_agent} if user_agent else None
    return aiohttp.ClientSession(connector=connector, timeout=ClientTimeout(total=timeout), headers=headers)

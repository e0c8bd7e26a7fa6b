from typing import List, Tuple
import asyncio
import logging
import aiohttp

logger = logging.getLogger(__name__)

class OriginError(Exception):
    def __init__(self, url: str, status: int):
        super().__init__(f"{url} returned {status}")
        self.url = url
        self.status = status

class OriginUnreachable(Exception):
    pass

class Origin:
    """
    The bucket holding the avatar files.
    """
    def __init__(self, timeout: int = 30):
        self._timeout = aiohttp.ClientTimeout(total = timeout)

    async def fetch(self, url: str)-> Tuple[int, List[Tuple[str, str]], bytes]:
        async with aiohttp.ClientSession(timeout = self._timeout) as session:
            async with session.get(url) as response:
                content = await response.read()
                return (response.status, list(response.headers.items()), content)

    async def fetch_image(self, url: str)-> Tuple[List[Tuple[str, str]], bytes]:
        """
        Returns headers and body of a successful GET, raising OriginError for
        non-2xx responses and OriginUnreachable if no response arrived.
        """
        try:
            status, headers, content = await self.fetch(url)
        except (aiohttp.ClientError, asyncio.TimeoutError) as err:
            raise OriginUnreachable(f"Could not reach {url}: {err!r}") from err

        if str(status)[0] != "2":
            raise OriginError(url, status)

        return headers, content

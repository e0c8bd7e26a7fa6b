from io import BytesIO
from typing import Dict, List, Optional, Protocol
from urllib.parse import quote
import logging
import aiohttp
import redis.asyncio as redis
from . import models

logger = logging.getLogger(__name__)

class NotCached(Exception):
    pass

class CacheStore(Protocol):
    """
    CacheStore
    ==========

    What the handler needs from a response cache. Entries are keyed by
    asset URL and always replaced whole, so concurrent writers for the same
    key just leave the last write in place.
    """

    async def match(self, key: str)-> Optional[models.CachedResponse]:
        ...

    async def put(self, key: str, entry: models.CachedResponse)-> None:
        ...

class MemoryCache:
    """
    Per-process dict cache. Useful for single-worker deployments and tests.
    """
    def __init__(self):
        self._entries: Dict[str, models.CachedResponse] = dict()

    async def match(self, key):
        return self._entries.get(key)

    async def put(self, key, entry):
        self._entries[key] = entry

    def keys(self)-> List[str]:
        return [*self._entries.keys()]

    def clear(self):
        self._entries.clear()

class RESTCache:
    """
    Talks to a file store exposing GET / POST /files/{key}. Entries are
    stored as the JSON envelope from models.CachedResponse.dumps.
    """
    def __init__(self, url):
        self._url = url

    def url(self, key):
        return self._url + "/" + quote(key, safe = "")

    async def get(self, key)-> bytes:
        async with aiohttp.ClientSession() as session:
            async with session.get(self.url(key)) as resp:
                if resp.status == 404:
                    raise NotCached
                if str(resp.status)[0] != "2":
                    raise ValueError(f"Remote returned {resp.status} when looking up {key}")
                return await resp.read()

    async def set(self, key, content: bytes):
        data = aiohttp.FormData()
        data.add_field("file", BytesIO(content), filename = "entry.json", content_type = "application/json")
        async with aiohttp.ClientSession() as session:
            async with session.post(self.url(key), data = data) as resp:
                text = await resp.text()
                if str(resp.status)[0] != "2":
                    raise ValueError(f"Remote returned {resp.status}: {text} when trying to cache {key}")

    async def match(self, key):
        try:
            raw = await self.get(key)
        except NotCached:
            logger.debug("%s not in REST cache", key)
            return None
        return models.CachedResponse.loads(raw)

    async def put(self, key, entry):
        await self.set(key, entry.dumps())
        logger.debug("Posted %s to REST cache", key)

class RedisCache:
    """
    RedisCache
    ==========

    parameters:
        host (str):     Redis hostname
        port (int):     Redis port
        db (int):       Redis DB

        prefix (str):   Key prefix to add to cache entries
        expiry (int):   Seconds before redis drops an entry
    """
    def __init__(self,
            host: str,
            port: int,
            db: int,
            prefix: str = "avatars/cache:",
            expiry: int = 31536000):

        self._client = redis.Redis(host = host, port = port, db = db)
        self._prefix: str = prefix
        self._expiry: int = expiry

    def _keyname(self, key: str)-> str:
        return self._prefix + key

    async def match(self, key):
        raw = await self._client.get(self._keyname(key))
        if raw is None:
            return None
        return models.CachedResponse.loads(raw)

    async def put(self, key, entry):
        await self._client.set(self._keyname(key), entry.dumps(), ex = self._expiry)

    async def close(self):
        """
        Close the redis connection. Remember to do this!
        """
        await self._client.aclose()

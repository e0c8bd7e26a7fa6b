from typing import Iterable, List, Optional, Tuple
import logging
from fastapi import Response
from . import models, digest, selection, remotes, caching, tasks

logger = logging.getLogger(__name__)

# Headers describing the origin's transfer rather than the image itself
DROPPED_HEADERS = {
        "connection",
        "keep-alive",
        "transfer-encoding",
        "content-encoding",
        "content-length",
    }

def rewrite_headers(headers: Iterable[Tuple[str, str]], cache_control: str)-> List[Tuple[str, str]]:
    """
    Copies the origin header pairs in order, repeats included, forcing
    Content-Type and Cache-Control regardless of what the origin sent.
    """
    rewritten = [(k, v) for k, v in headers
            if k.lower() not in DROPPED_HEADERS | {"content-type", "cache-control"}]
    rewritten.append(("Content-Type", "image/png"))
    rewritten.append(("Cache-Control", cache_control))
    return rewritten

class AvatarHandler():
    """
    AvatarHandler
    =============

    parameters:
        config (avatar_picker.models.Config)
        origin_client (avatar_picker.remotes.Origin)
        cache_client (avatar_picker.caching.CacheStore)

    Serves the avatar belonging to a seed. The seed is hashed, the hash
    picks a file from the catalog, and the file is served from the cache
    if present, or fetched from the origin and cached after the response
    has gone out.
    """
    def __init__(self,
            config:        models.Config,
            origin_client: remotes.Origin,
            cache_client:  caching.CacheStore):

        self._config: models.Config            = config
        self._origin_client: remotes.Origin    = origin_client
        self._cache_client: caching.CacheStore = cache_client

    def asset_for(self, seed: str)-> str:
        return selection.select(digest.hash_seed(seed), self._config)

    async def populate(self, key: str, entry: models.CachedResponse)-> None:
        """
        populate
        ========

        parameters:
            key (str):                            Asset URL to cache under
            entry (avatar_picker.models.CachedResponse)

        Writes an entry to the cache. Meant to run after the response has
        been sent, so failures are logged and dropped.
        """
        try:
            await self._cache_client.put(key, entry)
        except Exception as exc:
            logger.warning("Failed to cache %s: %r", key, exc)
        else:
            logger.debug("Cached %s", key)

    async def handle(self, seed: Optional[str], runner: tasks.BackgroundTaskRunner)-> Response:
        """
        handle
        ======

        parameters:
            seed (Optional[str]):  The seed query parameter, None if absent
            runner (avatar_picker.tasks.BackgroundTaskRunner)

        returns:
            fastapi.Response

        Steps:
           1 Reject a missing seed with 400
           2 Hash the seed and pick the asset URL
           3 Return a cached response as-is, if there is one
           4 Otherwise fetch the asset, returning 404 on a non-2xx origin
             response and 502 if the origin could not be reached
           5 Rewrite headers, hand the cache write to the runner and respond
        """
        if not seed:
            return Response("Seed parameter is missing", status_code = 400)

        url = self.asset_for(seed)

        try:
            cached = await self._cache_client.match(url)
        except Exception as exc:
            logger.warning("Cache lookup for %s failed, treating as a miss: %r", url, exc)
            cached = None

        if cached is not None:
            logger.debug("Cache hit for %s", url)
            return cached.to_response()

        logger.info("Cache miss for %s, fetching from origin", url)
        try:
            headers, content = await self._origin_client.fetch_image(url)
        except remotes.OriginError as oe:
            logger.warning("Origin refused %s: %s", url, oe.status)
            return Response("Image not found", status_code = 404)
        except remotes.OriginUnreachable as ou:
            logger.warning("%s", ou)
            return Response("Image origin unreachable", status_code = 502)

        headers = rewrite_headers(headers, self._config.cache_control)
        entry = models.CachedResponse(status = 200, headers = headers, body = content)
        runner.submit(self.populate, url, entry)

        return models.build_response(content, 200, headers)

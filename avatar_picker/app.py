
import logging
from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, BackgroundTasks, Request
from . import settings, models, remotes, caching, tasks, handler, selection, digest

logging.basicConfig(level = getattr(logging, settings.LOG_LEVEL))
logger = logging.getLogger(__name__)
for noisy in ("aiohttp.access", "redis"):
    logging.getLogger(noisy).setLevel(logging.WARNING)

config = models.Config(
        bucket_url      = settings.BUCKET_URL,
        catalog_size    = settings.CATALOG_SIZE,
        asset_prefix    = settings.ASSET_PREFIX,
        asset_extension = settings.ASSET_EXTENSION,
        cache_expiry    = settings.CACHE_EXPIRY,
    )

def get_cache(backend: str = settings.CACHE_BACKEND):
    if backend == "memory":
        return caching.MemoryCache()
    elif backend == "rest":
        return caching.RESTCache(settings.DATA_CACHE_URL + "/files")
    elif backend == "redis":
        return caching.RedisCache(settings.REDIS_HOST, settings.REDIS_PORT, settings.REDIS_DB,
                settings.REDIS_KEY_PREFIX, settings.CACHE_EXPIRY)
    else:
        raise ValueError(f"Unknown cache backend: {backend}")

get_origin = lambda: remotes.Origin(settings.FETCH_TIMEOUT)

cache_client = get_cache()
origin_client = get_origin()
asyncio_runner = tasks.AsyncioRunner()

def get_runner(background_tasks: BackgroundTasks, kind: str = settings.TASK_RUNNER):
    if kind == "background":
        return tasks.FastAPIRunner(background_tasks)
    elif kind == "asyncio":
        return asyncio_runner
    else:
        raise ValueError(f"Unknown task runner: {kind}")

@asynccontextmanager
async def lifespan(_: FastAPI):
    try:
        yield
    finally:
        await asyncio_runner.drain()
        if isinstance(cache_client, caching.RedisCache):
            await cache_client.close()

app = FastAPI(lifespan = lifespan)

def with_handler():
    yield handler.AvatarHandler(config, origin_client, cache_client)

@app.api_route("/", methods = ["GET", "HEAD", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"])
async def get_avatar(
        request: Request,
        background_tasks: BackgroundTasks,
        avatar_handler: handler.AvatarHandler = Depends(with_handler)):
    # The first seed wins when the parameter is repeated
    seeds = request.query_params.getlist("seed")
    seed = seeds[0] if seeds else None
    return await avatar_handler.handle(seed, get_runner(background_tasks))

@app.get("/catalog/")
async def list_catalog():
    return {"size": config.catalog_size, "assets": selection.catalog(config)}

@app.get("/catalog/{seed}")
async def show_selection(seed: str):
    seed_digest = digest.hash_seed(seed)
    return {
            "seed": seed,
            "digest": seed_digest,
            "index": selection.asset_index(seed_digest, config.catalog_size),
            "url": selection.select(seed_digest, config),
        }


from environs import Env

env                    = Env()
env.read_env()

BUCKET_URL             = env.str("BUCKET_URL")
CATALOG_SIZE           = env.int("CATALOG_SIZE", 20)
ASSET_PREFIX           = env.str("ASSET_PREFIX", "hand-drawn-avatar")
ASSET_EXTENSION        = env.str("ASSET_EXTENSION", "png")

CACHE_BACKEND          = env.str("CACHE_BACKEND", "memory").lower()
DATA_CACHE_URL         = env.str("DATA_CACHE_URL", "http://edge-cache")

REDIS_HOST             = env.str("REDIS_HOST", "avatar-redis")
REDIS_PORT             = env.int("REDIS_PORT", 6379)
REDIS_DB               = env.int("REDIS_DB", 0)
REDIS_KEY_PREFIX       = env.str("REDIS_KEY_PREFIX", "avatars/cache:")

CACHE_EXPIRY           = env.int("CACHE_EXPIRY", 31536000)
FETCH_TIMEOUT          = env.int("FETCH_TIMEOUT", 30)

LOG_LEVEL              = env.str("LOG_LEVEL", "WARNING").upper()

TASK_RUNNER            = env.str("TASK_RUNNER", "background").lower()

from environs import Env

env = Env()
env.read_env()

AVATAR_URL = env.str("AVATAR_URL", "http://localhost:8000")
SOURCE_URL = env.str("SOURCE_URL", "http://localhost:8001")
CACHE_URL  = env.str("CACHE_URL", "http://localhost:8002")


from unittest import TestCase, IsolatedAsyncioTestCase
from avatar_picker import caching, models

KEY = "http://bucket/hand-drawn-avatar-03.png"

class MockRedis():
    def __init__(self):
        self.dict = dict()
        self.expiry = dict()

    async def get(self, k):
        return self.dict.get(k)

    async def set(self, k, v, ex = None):
        self.dict[k] = v
        self.expiry[k] = ex

def entry(body = b"png"):
    return models.CachedResponse(headers = [("Content-Type", "image/png")], body = body)

class TestMemoryCache(IsolatedAsyncioTestCase):
    async def test_match_and_put(self):
        cache = caching.MemoryCache()
        self.assertIsNone(await cache.match(KEY))

        await cache.put(KEY, entry(b"first"))
        await cache.put(KEY, entry(b"second"))
        self.assertEqual((await cache.match(KEY)).body, b"second")
        self.assertEqual(cache.keys(), [KEY])

        cache.clear()
        self.assertIsNone(await cache.match(KEY))

class TestRedisCache(IsolatedAsyncioTestCase):
    def setUp(self):
        self.cache = caching.RedisCache("localhost", 6379, 0, prefix = "test:", expiry = 60)
        self.cache._client = MockRedis()

    async def test_match_and_put(self):
        self.assertIsNone(await self.cache.match(KEY))

        await self.cache.put(KEY, entry())
        self.assertIn("test:" + KEY, self.cache._client.dict)
        self.assertEqual(self.cache._client.expiry["test:" + KEY], 60)
        self.assertEqual(await self.cache.match(KEY), entry())

class TestRESTCache(TestCase):
    def test_url_quotes_key(self):
        cache = caching.RESTCache("http://edge-cache/files")
        self.assertEqual(
                cache.url(KEY),
                "http://edge-cache/files/http%3A%2F%2Fbucket%2Fhand-drawn-avatar-03.png")

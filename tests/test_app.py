
import os
from unittest import TestCase

os.environ.setdefault("BUCKET_URL", "http://bucket")
os.environ.setdefault("CACHE_BACKEND", "memory")

from fastapi import BackgroundTasks
from fastapi.testclient import TestClient
from avatar_picker import app, handler, caching, digest, selection, tasks

from .test_handler import MockOrigin

class TestApp(TestCase):
    def setUp(self):
        self.origin = MockOrigin(headers = [
                ("Content-Type", "text/plain"),
                ("ETag", "\"v1\""),
                ("Link", "</a>; rel=preload"),
                ("Link", "</b>; rel=preload"),
            ])
        self.cache = caching.MemoryCache()
        app.app.dependency_overrides[app.with_handler] = lambda: handler.AvatarHandler(
                app.config, self.origin, self.cache)
        self.client = TestClient(app.app)

    def tearDown(self):
        app.app.dependency_overrides.clear()

    def test_missing_seed(self):
        response = self.client.get("/")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.text, "Seed parameter is missing")

    def test_serves_and_caches(self):
        response = self.client.get("/", params = {"seed": "abc"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.content, b"png-bytes")
        self.assertEqual(response.headers["content-type"], "image/png")
        self.assertEqual(response.headers["cache-control"], "public, max-age=31536000")
        self.assertEqual(response.headers["etag"], "\"v1\"")

        url = app.config.bucket_url + "/hand-drawn-avatar-20.png"
        self.assertEqual(self.origin.fetched, [url])
        self.assertEqual(self.cache.keys(), [url])

        again = self.client.get("/", params = {"seed": "abc"})
        self.assertEqual(again.content, b"png-bytes")
        self.assertEqual(len(self.origin.fetched), 1)

    def test_repeated_seed_uses_first(self):
        response = self.client.get("/?seed=abc&seed=zzz")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.origin.fetched, [app.config.bucket_url + "/hand-drawn-avatar-20.png"])

    def test_repeated_origin_headers_survive(self):
        response = self.client.get("/", params = {"seed": "abc"})
        self.assertEqual(response.headers.get_list("link"), ["</a>; rel=preload", "</b>; rel=preload"])

        again = self.client.get("/", params = {"seed": "abc"})
        self.assertEqual(again.headers.get_list("link"), ["</a>; rel=preload", "</b>; rel=preload"])
        self.assertEqual(len(self.origin.fetched), 1)

    def test_runner_choice(self):
        background_tasks = BackgroundTasks()
        self.assertIsInstance(app.get_runner(background_tasks, "background"), tasks.FastAPIRunner)
        self.assertIs(app.get_runner(background_tasks, "asyncio"), app.asyncio_runner)
        self.assertRaises(ValueError, app.get_runner, background_tasks, "threads")

    def test_any_method(self):
        for method in ["POST", "PUT", "DELETE"]:
            response = self.client.request(method, "/", params = {"seed": "abc"})
            self.assertEqual(response.status_code, 200, method)

    def test_origin_failure(self):
        self.origin.status = 403
        response = self.client.get("/", params = {"seed": "abc"})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.text, "Image not found")
        self.assertEqual(self.cache.keys(), [])

    def test_catalog(self):
        response = self.client.get("/catalog/")
        data = response.json()
        self.assertEqual(data["size"], app.config.catalog_size)
        self.assertEqual(data["assets"], selection.catalog(app.config))

    def test_show_selection(self):
        data = self.client.get("/catalog/abc").json()
        self.assertEqual(data["digest"], digest.hash_seed("abc"))
        self.assertEqual(data["index"], 19)
        self.assertEqual(data["url"], app.config.bucket_url + "/hand-drawn-avatar-20.png")
        self.assertEqual(self.origin.fetched, [])

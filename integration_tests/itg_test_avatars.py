"""
Exercises a running stack: the avatar service (CACHE_BACKEND=rest) in front
of mock-source as its bucket and mock-cache as its edge cache.
"""
import random
import asyncio
from datetime import datetime
import aiohttp

import util
import settings

timestamp = lambda: datetime.now().strftime("%H:%M:%S.%f")
msg = lambda msg: f"{timestamp()}: {msg}"

async def request_avatar(seed, noise: float = 0):
    await asyncio.sleep(random.random() * noise)
    async with aiohttp.ClientSession() as session:
        async with session.get(settings.AVATAR_URL + "/", params = {"seed": seed}) as response:
            content = await response.read()
            return response.status, dict(response.headers), content

async def check_cache():
    async with aiohttp.ClientSession() as session:
        async with session.get(settings.CACHE_URL + "/files/") as response:
            cached = await response.json()
            print(msg(f"Cached entries: {cached}"))
            return cached

def check(description, ok):
    if ok:
        print(msg(f"OK: {description}"))
    else:
        print(msg(f"ERROR: {description}"))
    return ok

async def test():
    await util.clear_cache()
    await util.clear_source()

    results = [check("missing seed returns 400", (await request_avatar(""))[0] == 400)]

    responses = await asyncio.gather(*[request_avatar("alice", 0.5) for _ in range(25)])
    statuses = {status for status, _, _ in responses}
    bodies = {content for _, _, content in responses}

    results.append(check(f"only 200s for alice: {statuses}", statuses == {200}))
    results.append(check("alice always gets the same image", len(bodies) == 1))

    for _, headers, _ in responses:
        if headers.get("Content-Type") != "image/png" or headers.get("Cache-Control") != "public, max-age=31536000":
            results.append(check(f"enforced headers, got {headers}", False))
            break

    # Concurrent misses may each fetch; once written, nothing more should reach the source
    await asyncio.sleep(1)
    results.append(check("entry written to cache", len(await check_cache()) == 1))

    before = await util.source_requests()
    status, _, content = await request_avatar("alice")
    after = await util.source_requests()
    results.append(check(f"cached request did not touch source ({before} -> {after})",
        status == 200 and content in bodies and before == after))

    seeds = [f"user-{i}" for i in range(200)]
    responses = await asyncio.gather(*[request_avatar(seed) for seed in seeds])
    distinct = {content for _, _, content in responses}
    results.append(check(f"{len(distinct)} distinct avatars across {len(seeds)} seeds", len(distinct) > 10))

    print(msg(f"{sum(results)}/{len(results)} checks passed"))

if __name__ == "__main__":
    asyncio.run(test())

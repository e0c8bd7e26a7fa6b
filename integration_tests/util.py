import aiohttp
import settings

async def clear_cache():
    async with aiohttp.ClientSession() as session:
        async with session.get(settings.CACHE_URL + "/clear/") as resp:
            print(f"Cleared cache: {resp.status}")

async def clear_source():
    async with aiohttp.ClientSession() as session:
        async with session.delete(settings.SOURCE_URL + "/requests/") as resp:
            print(f"Cleared source counter: {resp.status}")

async def source_requests() -> int:
    async with aiohttp.ClientSession() as session:
        async with session.get(settings.SOURCE_URL + "/requests/") as resp:
            return (await resp.json())["number_of_requests"]

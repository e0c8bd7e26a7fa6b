import os
import re
import random
import asyncio
import hashlib
from fastapi import FastAPI, Response

CATALOG_SIZE = int(os.getenv("CATALOG_SIZE", "20"))
RETRIEVAL_TIME = float(os.getenv("RETRIEVAL_TIME", "0.2"))
RETRIEVAL_NOISE = float(os.getenv("RETRIEVAL_NOISE", "0"))

AVATAR = re.compile(r"^hand-drawn-avatar-(\d{2})\.png$")

app = FastAPI()

STATE = {
    "number_of_requests": 0
    }

@app.delete("/requests/")
def clear_n_requests():
    STATE["number_of_requests"] = 0

@app.get("/requests/")
def show_n_requests():
    return STATE

@app.get("/{path:path}")
async def return_something(path: str):
    sleep_time = RETRIEVAL_TIME - (RETRIEVAL_NOISE / 2) + (random.random() * RETRIEVAL_NOISE)
    await asyncio.sleep(sleep_time)
    STATE["number_of_requests"] += 1

    match = AVATAR.match(path)
    if match is None or not 1 <= int(match.group(1)) <= CATALOG_SIZE:
        return Response(status_code = 403)

    # Buckets commonly serve objects with a generic type and no caching
    return Response(
            hashlib.md5(path.encode()).digest(),
            media_type = "binary/octet-stream",
            headers = {"Cache-Control": "no-cache", "ETag": hashlib.md5(path.encode()).hexdigest()})

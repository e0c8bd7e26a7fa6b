
from typing import Iterable, List, Tuple
from urllib.parse import urlparse
from fastapi import Response
from pydantic import BaseModel, ConfigDict, field_validator

class Config(BaseModel):
    """
    Config
    ======

    Everything the handler needs from the hosting environment. Built once
    at startup from settings, so that a bad bucket URL or catalog size
    fails loudly before the first request.
    """

    bucket_url:      str
    catalog_size:    int = 20
    asset_prefix:    str = "hand-drawn-avatar"
    asset_extension: str = "png"
    cache_expiry:    int = 31536000

    @field_validator("bucket_url")
    @classmethod
    def _is_http_url(cls, v: str) -> str:
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"Not an http(s) URL: {v!r}")
        return v.rstrip("/")

    @field_validator("catalog_size")
    @classmethod
    def _fits_padding(cls, v: int) -> int:
        # File numbers are padded to two digits
        if not 1 <= v <= 99:
            raise ValueError(f"Catalog size must be between 1 and 99, got {v}")
        return v

    @field_validator("cache_expiry")
    @classmethod
    def _positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Cache expiry must be positive")
        return v

    @property
    def cache_control(self) -> str:
        return f"public, max-age={self.cache_expiry}"

def build_response(content: bytes, status: int, headers: Iterable[Tuple[str, str]])-> Response:
    """
    Builds a response carrying every header pair, repeated names included.
    """
    response = Response(content = content, status_code = status)
    for name, value in headers:
        response.headers.append(name, value)
    return response

class CachedResponse(BaseModel):
    model_config = ConfigDict(ser_json_bytes = "base64", val_json_bytes = "base64")

    status:  int = 200
    headers: List[Tuple[str, str]] = []
    body:    bytes = b""

    def to_response(self) -> Response:
        return build_response(self.body, self.status, self.headers)

    def dumps(self) -> bytes:
        """
        Serializes the entry as a single JSON blob, for stores that only
        hold bytes.
        """
        return self.model_dump_json().encode()

    @classmethod
    def loads(cls, raw: bytes) -> "CachedResponse":
        return cls.model_validate_json(raw)

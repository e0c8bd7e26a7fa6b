"""
Maps digests onto the avatar catalog.

The catalog is a fixed run of files under the bucket:

    {bucket_url}/{prefix}-01.{ext} ... {bucket_url}/{prefix}-NN.{ext}

where NN is the catalog size. The same size is used both to build the
list and as the modulus, so every file is reachable.
"""
from typing import List
from . import models

INDEX_HEX_CHARS = 8

def asset_index(digest: str, catalog_size: int)-> int:
    """
    Reads the leading 32 bits of the digest and reduces them onto [0, catalog_size)
    """
    return int(digest[:INDEX_HEX_CHARS], 16) % catalog_size

def asset_url(index: int, base_url: str, prefix: str = "hand-drawn-avatar", extension: str = "png")-> str:
    return f"{base_url}/{prefix}-{index + 1:02d}.{extension}"

def catalog(config: models.Config)-> List[str]:
    return [asset_url(i, config.bucket_url, config.asset_prefix, config.asset_extension)
            for i in range(config.catalog_size)]

def select(digest: str, config: models.Config)-> str:
    return catalog(config)[asset_index(digest, config.catalog_size)]

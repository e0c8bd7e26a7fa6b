
import hashlib

def hash_seed(seed: str) -> str:
    """
    Returns the SHA-256 of the UTF-8 encoded seed as 64 lowercase hex
    characters. Empty seeds hash like any other string.
    """
    return hashlib.sha256(seed.encode("utf-8")).hexdigest()

"""Anonymous per-client identity derived from the request's network origin."""

import hashlib
from typing import Optional

from fastapi import Request

UNKNOWN_ADDRESS = "unknown"


def client_address(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client and request.client.host:
        return request.client.host
    return None


def hash_address(address: Optional[str]) -> str:
    return hashlib.sha256((address or UNKNOWN_ADDRESS).encode("utf-8")).hexdigest()


def identify(request: Request) -> str:
    """
    Returns a SHA-256 hex digest of the caller's address. The same origin always
    maps to the same hash; the raw address is never stored.
    """
    return hash_address(client_address(request))

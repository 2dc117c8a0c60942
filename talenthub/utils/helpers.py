"""Helpers"""
import uuid

def generate_uuid() -> str:
    return str(uuid.uuid4())

def truncate(value, limit: int) -> str:
    if not value:
        return ""
    return str(value)[:limit]

def listing_key(kind: str, listing_id: str) -> str:
    """Storage key used by the (user_id, listing_key) unique constraint"""
    return f"{kind}:{listing_id}"

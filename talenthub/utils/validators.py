"""
Validation utilities
"""
import re
import uuid
from typing import Optional

def clean_identifier(value: Optional[str], max_length: int = 64) -> Optional[str]:
    """Strip an identifier and drop characters that never appear in ids"""
    if value is None:
        return None
    value = value.strip()[:max_length]
    value = re.sub(r'[<>"\';\s]', '', value)
    return value or None

def is_valid_uuid(value: Optional[str]) -> bool:
    """Validate UUID format"""
    if not value:
        return False
    try:
        uuid.UUID(value)
    except (ValueError, AttributeError, TypeError):
        return False
    return True

def normalize_uuid(value: Optional[str]) -> Optional[str]:
    """Canonical lowercase hyphenated form, or None when not a UUID"""
    if not is_valid_uuid(value):
        return None
    return str(uuid.UUID(value))

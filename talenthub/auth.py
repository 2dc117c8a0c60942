"""
Candidate authentication

Routes receive the caller as an explicit ``CandidateIdentity`` resolved from a
verified bearer token:

    Authorization: Bearer <access-token>
"""
import logging
from dataclasses import dataclass
from typing import Optional
from fastapi import Depends, Request, HTTPException

from talenthub.database import Database, db

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CandidateIdentity:
    id: str
    email: Optional[str] = None


def get_database() -> Database:
    return db


def _bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def resolve_candidate(request: Request, database: Database) -> Optional[CandidateIdentity]:
    """Verify the bearer token with the auth provider; None when absent or invalid"""
    token = _bearer_token(request)
    if not token:
        return None

    if not database.is_connected:
        logger.error("Cannot verify session: database not connected")
        return None

    try:
        user = database.get_auth_user(token)
    except Exception as e:
        logger.warning(f"Session verification failed for {request.method} {request.url.path}: {e}")
        return None

    if not user or not user.get('id'):
        return None
    return CandidateIdentity(id=str(user['id']), email=user.get('email'))


def get_current_candidate(request: Request, database: Database = Depends(get_database)) -> CandidateIdentity:
    candidate = resolve_candidate(request, database)
    if candidate is None:
        logger.warning(f"Unauthenticated request for {request.method} {request.url.path}")
        raise HTTPException(status_code=401, detail="Not authenticated")
    return candidate


def get_optional_candidate(request: Request, database: Database = Depends(get_database)) -> Optional[CandidateIdentity]:
    return resolve_candidate(request, database)

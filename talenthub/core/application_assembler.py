"""
Application assembly

Starts an AI-assisted application for a candidate and a listing:

1. return the existing record when the candidate already applied (resume)
2. resolve the job or gig
3. snapshot the profile and format both prompt blocks
4. profile analysis call, parsed with fallback
5. question call seeded with the analysis weaknesses, parsed with fallback
6. insert-or-ignore on (user_id, listing_key)

Only step 6 writes, so a failure anywhere earlier leaves nothing behind.
"""
import logging
from typing import Dict, Optional, Tuple

from talenthub.auth import CandidateIdentity
from talenthub.core.completion_client import CompletionClient
from talenthub.core.listing_formatter import (
    Listing,
    format_listing,
    listing_from_row,
    reference_column,
)
from talenthub.core.profile_snapshot import build_profile_snapshot, format_candidate_profile
from talenthub.core.response_parser import parse_analysis, parse_questions
from talenthub.exceptions import (
    AIServiceUnavailableError,
    ApplicationNotFoundError,
    AuthenticationError,
    InvalidRequestError,
    ListingNotFoundError,
    PersistenceError,
)
from talenthub.schemas import ApplicationDB
from talenthub.utils.helpers import generate_uuid, listing_key
from talenthub.utils.validators import clean_identifier, normalize_uuid

logger = logging.getLogger(__name__)

INITIAL_STATUS = 'in_progress'


def resolve_listing_reference(job_id: Optional[str], gig_id: Optional[str]) -> Tuple[str, str]:
    """Validate that exactly one listing id was supplied; returns (kind, id)"""
    job_id = clean_identifier(job_id)
    gig_id = clean_identifier(gig_id)

    if job_id and gig_id:
        raise InvalidRequestError("Provide either job_id or gig_id, not both")
    if not job_id and not gig_id:
        raise InvalidRequestError("job_id or gig_id required")

    kind, raw_id = ('job', job_id) if job_id else ('gig', gig_id)
    listing_id = normalize_uuid(raw_id)
    if listing_id is None:
        raise InvalidRequestError(f"Invalid {kind}_id")
    return kind, listing_id


def _require_candidate(candidate: Optional[CandidateIdentity]):
    if candidate is None or not candidate.id:
        raise AuthenticationError("Not authenticated")


class ApplicationAssembler:
    def __init__(self, database, completion_client: CompletionClient):
        self.db = database
        self.completion_client = completion_client

    def start_application(
        self,
        candidate: CandidateIdentity,
        job_id: Optional[str] = None,
        gig_id: Optional[str] = None,
    ) -> Tuple[ApplicationDB, bool]:
        """Return ``(application, resumed)`` for the candidate and listing"""
        _require_candidate(candidate)
        kind, listing_id = resolve_listing_reference(job_id, gig_id)
        ref_column = reference_column(kind)

        existing = self.db.find_application(ref_column, listing_id, candidate.id)
        if existing:
            logger.info(f"Resuming application {existing['id']} for user {candidate.id}")
            return existing, True

        if not self.completion_client.is_configured:
            raise AIServiceUnavailableError("AI service not configured")

        listing = self._load_listing(kind, listing_id)

        snapshot = build_profile_snapshot(self.db, candidate.id)
        listing_text = format_listing(listing)
        candidate_text = format_candidate_profile(snapshot)

        analysis_outcome = parse_analysis(
            self.completion_client.analyze_profile(listing, listing_text, candidate_text)
        )
        analysis = analysis_outcome.value

        questions_outcome = parse_questions(
            self.completion_client.generate_questions(listing, analysis.weaknesses)
        )

        logger.info(
            f"Scored user {candidate.id} for {kind} {listing_id}: match={analysis.match_score} "
            f"analysis_fallback={analysis_outcome.used_fallback} "
            f"questions_fallback={questions_outcome.used_fallback}"
        )

        user = snapshot.get('user') or {}
        record = {
            'id': generate_uuid(),
            'job_id': listing_id if kind == 'job' else None,
            'gig_id': listing_id if kind == 'gig' else None,
            'listing_key': listing_key(kind, listing_id),
            'user_id': candidate.id,
            'user_name': user.get('full_name') or candidate.email,
            'user_email': candidate.email,
            'user_avatar_url': user.get('avatar_url'),
            'user_tagline': user.get('tagline'),
            'user_city': user.get('current_city'),
            'profile_snapshot': snapshot,
            'match_score': analysis.match_score,
            'match_breakdown': analysis.match_breakdown.model_dump(),
            'profile_summary': analysis.profile_summary,
            'strengths': analysis.strengths,
            'weaknesses': analysis.weaknesses,
            'ai_questions': questions_outcome.value,
            'status': INITIAL_STATUS,
        }
        return self._persist(record, ref_column, listing_id, candidate.id)

    def _load_listing(self, kind: str, listing_id: str) -> Listing:
        row = self.db.get_listing(kind, listing_id)
        if not row:
            raise ListingNotFoundError(f"{kind.capitalize()} not found")
        return listing_from_row(kind, row)

    def _persist(self, record: Dict, ref_column: str, listing_id: str, user_id: str) -> Tuple[ApplicationDB, bool]:
        try:
            inserted = self.db.insert_application(record)
        except Exception as e:
            logger.error(f"Insert error for user {user_id}, {ref_column}={listing_id}: {e}")
            raise PersistenceError("Failed to save application") from e

        if inserted:
            logger.info(f"Created application {inserted['id']} for user {user_id}")
            return inserted, False

        # A concurrent request won the unique (user_id, listing_key) constraint
        existing = self.db.find_application(ref_column, listing_id, user_id)
        if not existing:
            raise PersistenceError("Application insert returned no row")
        logger.info(f"Concurrent start detected, returning application {existing['id']}")
        return existing, True

    def check_application(self, candidate: CandidateIdentity, job_id: Optional[str] = None,
                          gig_id: Optional[str] = None) -> Dict:
        """Lightweight existence probe used by listing pages"""
        _require_candidate(candidate)
        kind, listing_id = resolve_listing_reference(job_id, gig_id)
        existing = self.db.find_application(reference_column(kind), listing_id, candidate.id)
        if not existing:
            return {'applied': False}
        return {
            'applied': True,
            'application_id': existing['id'],
            'status': existing.get('status'),
            'overall_score': existing.get('overall_score'),
        }

    def get_application(self, application_id: str) -> ApplicationDB:
        application_id = normalize_uuid(clean_identifier(application_id))
        if application_id is None:
            raise ApplicationNotFoundError("Application not found")
        application = self.db.get_application(application_id)
        if not application:
            raise ApplicationNotFoundError("Application not found")
        return application

    def record_tab_switch(self, candidate: CandidateIdentity, application_id: str) -> int:
        """Persist one integrity-guard violation against the candidate's own application"""
        application_id = normalize_uuid(clean_identifier(application_id))
        if application_id is None:
            raise ApplicationNotFoundError("Application not found")
        count = self.db.increment_tab_switches(application_id, candidate.id)
        if count is None:
            raise ApplicationNotFoundError("Application not found")
        logger.info(f"Tab switch #{count} recorded on application {application_id}")
        return count

"""
API route handlers
"""
from fastapi import APIRouter, Depends, HTTPException, Query
import logging
from typing import Optional

from talenthub.auth import CandidateIdentity, get_current_candidate, get_database, get_optional_candidate
from talenthub.config import settings
from talenthub.core.application_assembler import ApplicationAssembler
from talenthub.core.completion_client import CompletionClient
from talenthub.core.listing_formatter import reference_column
from talenthub.database import Database
from talenthub.exceptions import ApplicationError
from talenthub.models import (
    ApplicationCheckResponse, ApplicationRecord, HealthResponse,
    ListingStatsResponse, StartApplicationRequest, StartApplicationResponse,
    TabSwitchResponse
)
from talenthub.utils.validators import normalize_uuid

logger = logging.getLogger(__name__)
router = APIRouter()


def get_completion_client() -> CompletionClient:
    return CompletionClient()


def get_assembler(
    database: Database = Depends(get_database),
    completion_client: CompletionClient = Depends(get_completion_client)
) -> ApplicationAssembler:
    return ApplicationAssembler(database, completion_client)


def _raise_http(error: ApplicationError):
    raise HTTPException(status_code=error.status_code, detail=error.message)


@router.get("/", response_model=HealthResponse)
async def health_check(database: Database = Depends(get_database)):
    """Health check endpoint"""
    return HealthResponse(
        status="active",
        service=settings.APP_NAME,
        version=settings.VERSION,
        environment=settings.ENVIRONMENT,
        database_connected=database.is_connected,
        ai_configured=settings.ai_configured
    )

@router.get("/health")
async def health():
    """Fast health check without heavy operations"""
    return {"status": "ok"}

@router.post("/api/applications/start", response_model=StartApplicationResponse)
def start_application(
    payload: StartApplicationRequest,
    candidate: CandidateIdentity = Depends(get_current_candidate),
    assembler: ApplicationAssembler = Depends(get_assembler)
):
    """Start (or resume) an AI-assisted application for a job or gig"""
    try:
        application, resumed = assembler.start_application(
            candidate, job_id=payload.job_id, gig_id=payload.gig_id
        )
        return StartApplicationResponse(data=application, resumed=resumed)

    except ApplicationError as e:
        if e.status_code >= 500:
            logger.error(f"Application start error for user {candidate.id}: {e.message}")
            detail = e.message if e.status_code == 503 else "Failed to start application"
            raise HTTPException(status_code=e.status_code, detail=detail)
        _raise_http(e)
    except Exception as e:
        logger.exception(f"Application start error for user {candidate.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to start application")

@router.get("/api/applications/check", response_model=ApplicationCheckResponse)
def check_application(
    job_id: Optional[str] = Query(None),
    gig_id: Optional[str] = Query(None),
    candidate: Optional[CandidateIdentity] = Depends(get_optional_candidate),
    assembler: ApplicationAssembler = Depends(get_assembler)
):
    """Tell a listing page whether to show "Apply" or "View Application" """
    if candidate is None:
        return ApplicationCheckResponse(applied=False)

    if not job_id and not gig_id:
        raise HTTPException(status_code=400, detail="job_id or gig_id required")

    try:
        return ApplicationCheckResponse(**assembler.check_application(candidate, job_id=job_id, gig_id=gig_id))
    except ApplicationError as e:
        _raise_http(e)
    except Exception as e:
        logger.error(f"Application check error: {e}")
        return ApplicationCheckResponse(applied=False)

@router.get("/api/applications/{application_id}", response_model=ApplicationRecord)
def get_application(
    application_id: str,
    candidate: CandidateIdentity = Depends(get_current_candidate),
    assembler: ApplicationAssembler = Depends(get_assembler)
):
    """Get one application"""
    try:
        return assembler.get_application(application_id)
    except ApplicationError as e:
        _raise_http(e)
    except Exception as e:
        logger.error(f"Get application error: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch application")

@router.post("/api/applications/{application_id}/tab-switch", response_model=TabSwitchResponse)
def record_tab_switch(
    application_id: str,
    candidate: CandidateIdentity = Depends(get_current_candidate),
    assembler: ApplicationAssembler = Depends(get_assembler)
):
    """Record an integrity-guard tab switch so reviewers can see it"""
    try:
        count = assembler.record_tab_switch(candidate, application_id)
        return TabSwitchResponse(application_id=application_id, tab_switch_count=count)
    except ApplicationError as e:
        _raise_http(e)
    except Exception as e:
        logger.error(f"Tab switch error: {e}")
        raise HTTPException(status_code=500, detail="Failed to record tab switch")

def _fetch_listing(kind: str, listing_id: str, database: Database):
    listing_id = normalize_uuid(listing_id)
    if listing_id is None:
        raise HTTPException(status_code=404, detail="Not found")
    try:
        listing = database.get_listing(kind, listing_id)
    except Exception as e:
        logger.error(f"Get {kind} error: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to fetch {kind}")
    if not listing:
        raise HTTPException(status_code=404, detail="Not found")
    return {"data": listing}

def _listing_stats(kind: str, listing_id: str, database: Database) -> ListingStatsResponse:
    listing_id = normalize_uuid(listing_id)
    if listing_id is None:
        raise HTTPException(status_code=404, detail="Not found")
    try:
        data = database.get_listing_statistics(reference_column(kind), listing_id)
    except Exception as e:
        logger.error(f"Stats error: {e}")
        raise HTTPException(status_code=500, detail="Failed to compute statistics")

    if not data:
        data = {
            "total_applications": 0,
            "avg_match_score": 0,
            "median_match_score": 0,
            "top_match_score": 0,
            "strong_matches": 0,
            "avg_breakdown": {},
            "status_counts": {},
            "score_distribution": []
        }
    return ListingStatsResponse(listing_id=listing_id, kind=kind, **data)

@router.get("/api/jobs/{job_id}")
def get_job(job_id: str, database: Database = Depends(get_database)):
    """Get a job listing"""
    return _fetch_listing('job', job_id, database)

@router.get("/api/gigs/{gig_id}")
def get_gig(gig_id: str, database: Database = Depends(get_database)):
    """Get a gig listing"""
    return _fetch_listing('gig', gig_id, database)

@router.get("/api/jobs/{job_id}/applications/stats", response_model=ListingStatsResponse)
def get_job_stats(
    job_id: str,
    candidate: CandidateIdentity = Depends(get_current_candidate),
    database: Database = Depends(get_database)
):
    """Match-score statistics for a job's applications"""
    return _listing_stats('job', job_id, database)

@router.get("/api/gigs/{gig_id}/applications/stats", response_model=ListingStatsResponse)
def get_gig_stats(
    gig_id: str,
    candidate: CandidateIdentity = Depends(get_current_candidate),
    database: Database = Depends(get_database)
):
    """Match-score statistics for a gig's applications"""
    return _listing_stats('gig', gig_id, database)

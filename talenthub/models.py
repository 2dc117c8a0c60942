"""Pydantic models"""
from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any

class StartApplicationRequest(BaseModel):
    job_id: Optional[str] = Field(None, max_length=64)
    gig_id: Optional[str] = Field(None, max_length=64)

class MatchBreakdown(BaseModel):
    skills: int = Field(..., ge=0, le=100)
    experience: int = Field(..., ge=0, le=100)
    level: int = Field(..., ge=0, le=100)
    overall: int = Field(..., ge=0, le=100)

class InterviewQuestion(BaseModel):
    id: int = Field(..., ge=1)
    question: str
    type: str
    answer: str = ""
    score: int = Field(0, ge=0, le=100)
    feedback: str = ""

class ApplicationRecord(BaseModel):
    id: str
    job_id: Optional[str] = None
    gig_id: Optional[str] = None
    user_id: str
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    user_avatar_url: Optional[str] = None
    user_tagline: Optional[str] = None
    user_city: Optional[str] = None
    profile_snapshot: Dict[str, Any]
    match_score: int = Field(..., ge=0, le=100)
    match_breakdown: MatchBreakdown
    profile_summary: str = ""
    strengths: List[str] = []
    weaknesses: List[str] = []
    ai_questions: List[InterviewQuestion]
    status: str
    overall_score: Optional[float] = None
    tab_switch_count: int = 0
    created_at: Optional[datetime] = None

class StartApplicationResponse(BaseModel):
    data: ApplicationRecord
    resumed: bool = False

class ApplicationCheckResponse(BaseModel):
    applied: bool
    application_id: Optional[str] = None
    status: Optional[str] = None
    overall_score: Optional[float] = None

class TabSwitchResponse(BaseModel):
    application_id: str
    tab_switch_count: int

class ScoreBucket(BaseModel):
    range: str
    count: int

class ListingStatsResponse(BaseModel):
    listing_id: str
    kind: str
    total_applications: int
    avg_match_score: float
    median_match_score: float
    top_match_score: int
    strong_matches: int
    avg_breakdown: Dict[str, float]
    status_counts: Dict[str, int]
    score_distribution: List[ScoreBucket]

class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    environment: str
    database_connected: bool
    ai_configured: bool

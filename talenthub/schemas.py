"""
Database schemas
"""
from typing import TypedDict, Optional, List
from datetime import datetime

class UserRow(TypedDict, total=False):
    """Users table projection used for snapshots"""
    id: str
    username: str
    full_name: Optional[str]
    avatar_url: Optional[str]
    tagline: Optional[str]
    current_city: Optional[str]
    about: Optional[str]
    email: Optional[str]
    skills: Optional[List[str]]

class PositionRow(TypedDict, total=False):
    """Positions nested under a work experience"""
    id: str
    position: str
    start_date: Optional[str]
    end_date: Optional[str]
    description: Optional[str]
    sort_order: Optional[int]

class ExperienceRow(TypedDict, total=False):
    """Work experiences table schema"""
    id: str
    company_name: str
    domain: Optional[str]
    positions: List[PositionRow]

class ProjectRow(TypedDict, total=False):
    """Projects table schema"""
    id: str
    title: str
    description: Optional[str]
    tech_stack: Optional[List[str]]

class ProfileSnapshot(TypedDict):
    """Frozen copy of the candidate profile stored on an application"""
    user: Optional[UserRow]
    experiences: List[ExperienceRow]
    projects: List[ProjectRow]

class MatchBreakdownDB(TypedDict):
    skills: int
    experience: int
    level: int
    overall: int

class QuestionDB(TypedDict):
    id: int
    question: str
    type: str
    answer: str
    score: int
    feedback: str

class ApplicationDB(TypedDict, total=False):
    """Applications table schema"""
    id: str
    job_id: Optional[str]
    gig_id: Optional[str]
    listing_key: str
    user_id: str
    user_name: Optional[str]
    user_email: Optional[str]
    user_avatar_url: Optional[str]
    user_tagline: Optional[str]
    user_city: Optional[str]
    profile_snapshot: ProfileSnapshot
    match_score: int
    match_breakdown: MatchBreakdownDB
    profile_summary: str
    strengths: List[str]
    weaknesses: List[str]
    ai_questions: List[QuestionDB]
    status: str
    overall_score: Optional[float]
    tab_switch_count: int
    created_at: datetime

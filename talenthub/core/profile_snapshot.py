"""
Candidate profile snapshots

Builds the frozen ``{user, experiences, projects}`` copy stored on an
application and the plain-text profile block used for prompting.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import List, Optional, Tuple

from dateutil.parser import parse as date_parse

from talenthub.config import settings
from talenthub.schemas import ExperienceRow, PositionRow, ProfileSnapshot, ProjectRow, UserRow

logger = logging.getLogger(__name__)

NONE_LISTED = "None listed"
PROJECT_DESCRIPTION_LIMIT = 150


def _parse_date(value) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = date_parse(str(value))
    except (ValueError, OverflowError):
        return None
    return parsed.replace(tzinfo=None)


def _position_sort_key(position: PositionRow) -> Tuple:
    """Stored sort order first, then most recent start date"""
    sort_order = position.get('sort_order')
    if sort_order is not None:
        return (0, sort_order, 0)
    started = _parse_date(position.get('start_date'))
    if started is None:
        return (2, 0, 0)
    return (1, 0, -started.toordinal())


def order_positions(positions: Optional[List[PositionRow]]) -> List[PositionRow]:
    return sorted(positions or [], key=_position_sort_key)


def build_profile_snapshot(db, user_id: str) -> ProfileSnapshot:
    """
    Fetch identity, work history and projects for a candidate

    The three reads are independent and issued concurrently.
    """
    with ThreadPoolExecutor(max_workers=3) as executor:
        user_future = executor.submit(db.get_user_profile, user_id)
        experiences_future = executor.submit(db.get_work_experiences, user_id, settings.MAX_EXPERIENCES)
        projects_future = executor.submit(db.get_projects, user_id, settings.MAX_PROJECTS)

        user = user_future.result()
        experiences = experiences_future.result() or []
        projects = projects_future.result() or []

    ordered: List[ExperienceRow] = []
    for experience in experiences[:settings.MAX_EXPERIENCES]:
        entry = dict(experience)
        entry['positions'] = order_positions(experience.get('positions'))
        ordered.append(entry)

    if user is None:
        logger.warning(f"No profile row for user {user_id}, snapshot will be sparse")

    return {
        'user': user,
        'experiences': ordered,
        'projects': list(projects[:settings.MAX_PROJECTS]),
    }


def _format_position(position: PositionRow) -> str:
    start = position.get('start_date') or '?'
    end = position.get('end_date') or 'Present'
    return f"{position.get('position') or 'Role'} ({start} - {end}): {position.get('description') or 'N/A'}"


def _format_experience(experience: ExperienceRow) -> str:
    header = f"  {experience.get('company_name') or 'Unknown company'} ({experience.get('domain') or 'N/A'}):"
    positions = [f"    {_format_position(p)}" for p in experience.get('positions') or []]
    return '\n'.join([header] + positions)


def _format_project(project: ProjectRow) -> str:
    description = (project.get('description') or '')[:PROJECT_DESCRIPTION_LIMIT]
    line = f"  - {project.get('title') or 'Untitled'}: {description}"
    tech_stack = project.get('tech_stack')
    if tech_stack:
        line += f" [{', '.join(str(t) for t in tech_stack)}]"
    return line


def format_candidate_profile(snapshot: ProfileSnapshot) -> str:
    """Render the snapshot as the candidate block of the analysis prompt"""
    user: UserRow = snapshot.get('user') or {}
    skills = user.get('skills') if isinstance(user.get('skills'), list) else []

    experience_text = '\n'.join(_format_experience(e) for e in snapshot.get('experiences') or [])
    project_text = '\n'.join(_format_project(p) for p in snapshot.get('projects') or [])

    return '\n'.join([
        f"Name: {user.get('full_name') or 'Unknown'}",
        f"Tagline: {user.get('tagline') or 'N/A'}",
        f"About: {user.get('about') or 'N/A'}",
        f"City: {user.get('current_city') or 'N/A'}",
        f"Skills: {', '.join(skills) if skills else NONE_LISTED}",
        "Work Experience:",
        experience_text or f"  {NONE_LISTED}",
        "Projects:",
        project_text or f"  {NONE_LISTED}",
    ])

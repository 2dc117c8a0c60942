"""
Listing normalization and prompt formatting

Jobs and gigs share one pipeline. Each is modelled as its own variant and
``format_listing`` dispatches on the variant, emitting structurally parallel
text blocks.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from talenthub.config import settings
from talenthub.utils.helpers import truncate

SUMMARY_DESCRIPTION_LIMIT = 300


@dataclass(frozen=True)
class JobListing:
    id: str
    title: str
    company: Optional[str] = None
    category: Optional[str] = None
    experience_level: Optional[str] = None
    job_type: Optional[str] = None
    work_mode: Optional[str] = None
    location: Optional[str] = None
    skills_required: List[str] = field(default_factory=list)
    description: Optional[str] = None
    requirements: Optional[str] = None
    responsibilities: Optional[str] = None

    kind = 'job'


@dataclass(frozen=True)
class GigListing:
    id: str
    title: str
    client: Optional[str] = None
    category: Optional[str] = None
    experience_level: Optional[str] = None
    payment_type: Optional[str] = None
    budget: Optional[str] = None
    duration: Optional[str] = None
    skills_required: List[str] = field(default_factory=list)
    description: Optional[str] = None
    deliverables: Optional[str] = None
    scope: Optional[str] = None

    kind = 'gig'


Listing = Union[JobListing, GigListing]


def reference_column(kind: str) -> str:
    """Application column holding the listing reference"""
    return f"{kind}_id"


def _skills(row: Dict) -> List[str]:
    skills = row.get('skills_required')
    return [str(s) for s in skills] if isinstance(skills, list) else []


def _text(value) -> Optional[str]:
    if value is None or value == '':
        return None
    return str(value)


def listing_from_row(kind: str, row: Dict) -> Listing:
    """Build the listing variant for a ``jobs`` or ``gigs`` row"""
    if kind == 'job':
        return JobListing(
            id=str(row['id']),
            title=_text(row.get('title')) or 'Untitled',
            company=_text(row.get('company')),
            category=_text(row.get('category')),
            experience_level=_text(row.get('experience_level')),
            job_type=_text(row.get('job_type')),
            work_mode=_text(row.get('work_mode')),
            location=_text(row.get('location')),
            skills_required=_skills(row),
            description=_text(row.get('description')),
            requirements=_text(row.get('requirements')),
            responsibilities=_text(row.get('responsibilities')),
        )
    if kind == 'gig':
        return GigListing(
            id=str(row['id']),
            title=_text(row.get('title')) or 'Untitled',
            client=_text(row.get('company')),
            category=_text(row.get('category')),
            experience_level=_text(row.get('experience_level')),
            payment_type=_text(row.get('payment_type')),
            budget=_text(row.get('budget')),
            duration=_text(row.get('duration')),
            skills_required=_skills(row),
            description=_text(row.get('description')),
            deliverables=_text(row.get('deliverables')),
            # gigs store their scope in the responsibilities column
            scope=_text(row.get('responsibilities')),
        )
    raise ValueError(f"Unknown listing kind: {kind}")


def format_listing(listing: Listing, limit: Optional[int] = None) -> str:
    """Render the listing block sent with the analysis prompt"""
    limit = limit or settings.LISTING_FIELD_LIMIT
    skills = ', '.join(listing.skills_required) or 'N/A'

    if isinstance(listing, JobListing):
        lines = [
            f"Title: {listing.title}",
            f"Company: {listing.company or 'N/A'}",
            f"Category: {listing.category or 'N/A'}",
            f"Experience Level: {listing.experience_level or 'any'}",
            f"Job Type: {listing.job_type or 'full-time'}",
            f"Work Mode: {listing.work_mode or 'N/A'}",
            f"Location: {listing.location or 'N/A'}",
            f"Skills Required: {skills}",
            f"Description: {truncate(listing.description, limit)}",
            f"Requirements: {truncate(listing.requirements, limit)}",
            f"Responsibilities: {truncate(listing.responsibilities, limit)}",
        ]
    elif isinstance(listing, GigListing):
        lines = [
            f"Title: {listing.title}",
            f"Client: {listing.client or 'N/A'}",
            f"Category: {listing.category or 'N/A'}",
            f"Experience Level: {listing.experience_level or 'any'}",
            f"Payment Type: {listing.payment_type or 'fixed'}",
            f"Budget: {listing.budget or 'N/A'}",
            f"Duration: {listing.duration or 'N/A'}",
            f"Skills Required: {skills}",
            f"Description: {truncate(listing.description, limit)}",
            f"Deliverables: {truncate(listing.deliverables, limit)}",
            f"Scope: {truncate(listing.scope, limit)}",
        ]
    else:
        raise TypeError(f"Unsupported listing type: {type(listing).__name__}")

    return '\n'.join(lines)


def format_listing_summary(listing: Listing) -> str:
    """Short listing block used to seed question generation"""
    return '\n'.join([
        f"{listing.kind.upper()}: {listing.title} - {listing.category or 'general'}",
        f"Level: {listing.experience_level or 'any'}",
        f"Skills: {', '.join(listing.skills_required) or 'general'}",
        f"Description: {truncate(listing.description, SUMMARY_DESCRIPTION_LIMIT)}",
    ])

import copy
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pandas as pd
import pytest
from fastapi.testclient import TestClient

from talenthub.auth import CandidateIdentity, get_database
from talenthub.api.routes import get_completion_client
from talenthub.database import summarize_applications
from talenthub.main import app

USER_ID = "6f1c2d3e-0000-4000-8000-000000000001"
OTHER_USER_ID = "6f1c2d3e-0000-4000-8000-000000000002"
JOB_ID = "a1b2c3d4-0000-4000-8000-00000000000a"
GIG_ID = "a1b2c3d4-0000-4000-8000-00000000000b"
MISSING_ID = "a1b2c3d4-0000-4000-8000-00000000ffff"

TOKEN = "token-candidate"
OTHER_TOKEN = "token-other"

ANALYSIS_JSON = """```json
{
  "match_score": 78,
  "match_breakdown": {"skills": 80, "experience": 70, "level": 75, "overall": 78},
  "profile_summary": "Solid backend engineer with API experience.",
  "strengths": ["Python", "API design"],
  "weaknesses": ["Kubernetes", "Team leadership"]
}
```"""

QUESTIONS_JSON = """[
  {"id": 1, "question": "How would you design a rate limiter?", "type": "technical"},
  {"id": 2, "question": "Explain database indexing trade-offs.", "type": "technical"},
  {"id": 3, "question": "Tell us about a conflict with a teammate.", "type": "behavioral"},
  {"id": 4, "question": "How would you debug a slow endpoint?", "type": "problem-solving"},
  {"id": 5, "question": "Why this company?", "type": "motivation"},
  {"id": 6, "question": "How would you ramp up on Kubernetes?", "type": "gap"}
]"""


class FakeDatabase:
    """In-memory stand-in for the Supabase-backed Database"""

    def __init__(self):
        self.is_connected = True
        self.sessions = {
            TOKEN: {'id': USER_ID, 'email': 'ada@example.com'},
            OTHER_TOKEN: {'id': OTHER_USER_ID, 'email': 'grace@example.com'},
        }
        self.users: Dict[str, Dict] = {
            USER_ID: {
                'id': USER_ID,
                'username': 'ada',
                'full_name': 'Ada Lovelace',
                'avatar_url': 'https://cdn.example.com/ada.png',
                'tagline': 'Backend engineer',
                'current_city': 'London',
                'about': 'I build APIs.',
                'email': 'ada@example.com',
                'skills': ['Python', 'PostgreSQL'],
            },
        }
        self.experiences: Dict[str, List[Dict]] = {
            USER_ID: [
                {
                    'id': 'exp-1',
                    'company_name': 'Analytical Engines',
                    'domain': 'analytical.example.com',
                    'positions': [
                        {'id': 'pos-1', 'position': 'Engineer', 'start_date': '2019-01-01',
                         'end_date': '2021-06-30', 'description': 'Built billing APIs'},
                        {'id': 'pos-2', 'position': 'Senior Engineer', 'start_date': '2021-07-01',
                         'end_date': None, 'description': 'Leads the platform team'},
                    ],
                },
            ],
        }
        self.projects: Dict[str, List[Dict]] = {
            USER_ID: [
                {'id': 'proj-1', 'title': 'Difference Engine', 'description': 'A calculator',
                 'tech_stack': ['Python', 'FastAPI']},
            ],
        }
        self.listings: Dict[str, Dict[str, Dict]] = {
            'job': {
                JOB_ID: {
                    'id': JOB_ID, 'title': 'Backend Engineer', 'company': 'Acme',
                    'category': 'Engineering', 'experience_level': 'mid',
                    'job_type': 'full-time', 'work_mode': 'remote', 'location': 'Berlin',
                    'skills_required': ['Python', 'Kubernetes'],
                    'description': 'Build services.', 'requirements': '3+ years Python.',
                    'responsibilities': 'Own the API layer.',
                },
            },
            'gig': {
                GIG_ID: {
                    'id': GIG_ID, 'title': 'Landing page build', 'company': 'Studio Nine',
                    'category': 'Design', 'experience_level': 'entry',
                    'payment_type': 'hourly', 'budget': '40/h', 'duration': '2 weeks',
                    'skills_required': ['Figma'], 'description': 'Design a landing page.',
                    'deliverables': 'Figma file', 'responsibilities': 'Desktop and mobile layouts',
                },
            },
        }
        self.applications: Dict[str, Dict] = {}
        self.reads: List[str] = []
        self.insert_calls = 0
        self.insert_error: Optional[Exception] = None
        self.before_insert = None

    def get_auth_user(self, access_token: str) -> Optional[Dict]:
        return self.sessions.get(access_token)

    def get_user_profile(self, user_id: str):
        self.reads.append('user')
        return copy.deepcopy(self.users.get(user_id))

    def get_work_experiences(self, user_id: str, limit: int):
        self.reads.append('experiences')
        return copy.deepcopy(self.experiences.get(user_id, []))[:limit]

    def get_projects(self, user_id: str, limit: int):
        self.reads.append('projects')
        return copy.deepcopy(self.projects.get(user_id, []))[:limit]

    def get_listing(self, kind: str, listing_id: str):
        self.reads.append(kind)
        return copy.deepcopy(self.listings[kind].get(listing_id))

    def find_application(self, ref_column: str, listing_id: str, user_id: str):
        for application in self.applications.values():
            if application.get(ref_column) == listing_id and application['user_id'] == user_id:
                return copy.deepcopy(application)
        return None

    def insert_application(self, data: Dict):
        self.insert_calls += 1
        if self.before_insert is not None:
            self.before_insert(data)
        if self.insert_error is not None:
            raise self.insert_error
        for application in self.applications.values():
            if (application['user_id'], application['listing_key']) == (data['user_id'], data['listing_key']):
                return None
        row = copy.deepcopy(data)
        row.setdefault('overall_score', None)
        row.setdefault('tab_switch_count', 0)
        row['created_at'] = datetime.now(timezone.utc).isoformat()
        self.applications[row['id']] = row
        return copy.deepcopy(row)

    def get_application(self, application_id: str):
        return copy.deepcopy(self.applications.get(application_id))

    def increment_tab_switches(self, application_id: str, user_id: str):
        application = self.applications.get(application_id)
        if not application or application['user_id'] != user_id:
            return None
        application['tab_switch_count'] = application.get('tab_switch_count', 0) + 1
        return application['tab_switch_count']

    def get_listing_statistics(self, ref_column: str, listing_id: str):
        rows = [a for a in self.applications.values() if a.get(ref_column) == listing_id]
        return summarize_applications(pd.DataFrame(rows))


class FakeCompletionClient:
    """Records prompts and returns canned model text"""

    def __init__(self, analysis: Optional[str] = ANALYSIS_JSON, questions: Optional[str] = QUESTIONS_JSON):
        self.analysis = analysis
        self.questions = questions
        self.configured = True
        self.error: Optional[Exception] = None
        self.calls: List[Dict[str, Any]] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    def analyze_profile(self, listing, listing_text, candidate_text):
        self.calls.append({'call': 'analysis', 'listing': listing, 'listing_text': listing_text,
                           'candidate_text': candidate_text})
        if self.error is not None:
            raise self.error
        return self.analysis

    def generate_questions(self, listing, weaknesses):
        self.calls.append({'call': 'questions', 'listing': listing, 'weaknesses': list(weaknesses)})
        if self.error is not None:
            raise self.error
        return self.questions


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def fake_completion():
    return FakeCompletionClient()


@pytest.fixture
def candidate():
    return CandidateIdentity(id=USER_ID, email='ada@example.com')


@pytest.fixture
def client(fake_db, fake_completion):
    app.dependency_overrides[get_database] = lambda: fake_db
    app.dependency_overrides[get_completion_client] = lambda: fake_completion
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {TOKEN}"}

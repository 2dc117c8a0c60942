"""Database operations"""
import logging
from typing import Optional, List, Dict
from supabase import create_client, Client
import pandas as pd
from talenthub.config import settings
from talenthub.schemas import ApplicationDB, ExperienceRow, ProjectRow, UserRow

logger = logging.getLogger(__name__)

LISTING_TABLES = {'job': 'jobs', 'gig': 'gigs'}

USER_COLUMNS = 'id, username, full_name, avatar_url, tagline, current_city, about, email, skills'
EXPERIENCE_COLUMNS = (
    'id, company_name, domain, '
    'positions (id, position, start_date, end_date, description, sort_order)'
)
PROJECT_COLUMNS = 'id, title, description, tech_stack'

class Database:
    def __init__(self):
        self.client: Optional[Client] = None
        self.connect()

    def connect(self):
        try:
            if settings.SUPABASE_URL and settings.SUPABASE_KEY:
                self.client = create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
                self.client.table('applications').select('id', count='exact').limit(1).execute()
                logger.info("Database connected")
            else:
                logger.error("Supabase credentials not configured")
        except Exception as e:
            logger.error(f"Database connection failed: {e}")
            self.client = None

    @property
    def is_connected(self):
        return self.client is not None

    def get_auth_user(self, access_token: str) -> Optional[Dict]:
        response = self.client.auth.get_user(access_token)
        user = getattr(response, 'user', None)
        if user is None:
            return None
        return {'id': user.id, 'email': user.email}

    def get_user_profile(self, user_id: str) -> Optional[UserRow]:
        response = self.client.table('users').select(USER_COLUMNS).eq('id', user_id).limit(1).execute()
        return response.data[0] if response.data else None

    def get_work_experiences(self, user_id: str, limit: int) -> List[ExperienceRow]:
        response = (
            self.client.table('work_experiences')
            .select(EXPERIENCE_COLUMNS)
            .eq('user_id', user_id)
            .order('sort_order')
            .limit(limit)
            .execute()
        )
        return response.data or []

    def get_projects(self, user_id: str, limit: int) -> List[ProjectRow]:
        response = self.client.table('projects').select(PROJECT_COLUMNS).eq('owner_id', user_id).limit(limit).execute()
        return response.data or []

    def get_listing(self, kind: str, listing_id: str) -> Optional[Dict]:
        response = self.client.table(LISTING_TABLES[kind]).select('*').eq('id', listing_id).limit(1).execute()
        return response.data[0] if response.data else None

    def find_application(self, ref_column: str, listing_id: str, user_id: str) -> Optional[ApplicationDB]:
        response = (
            self.client.table('applications')
            .select('*')
            .eq(ref_column, listing_id)
            .eq('user_id', user_id)
            .limit(1)
            .execute()
        )
        return response.data[0] if response.data else None

    def insert_application(self, data: Dict) -> Optional[ApplicationDB]:
        """Insert unless (user_id, listing_key) already exists; None on conflict"""
        response = (
            self.client.table('applications')
            .upsert(data, on_conflict='user_id,listing_key', ignore_duplicates=True)
            .execute()
        )
        return response.data[0] if response.data else None

    def get_application(self, application_id: str) -> Optional[ApplicationDB]:
        response = self.client.table('applications').select('*').eq('id', application_id).limit(1).execute()
        return response.data[0] if response.data else None

    def increment_tab_switches(self, application_id: str, user_id: str) -> Optional[int]:
        """Single-statement increment so concurrent reports are all counted"""
        response = self.client.rpc(
            'increment_tab_switches',
            {'p_application_id': application_id, 'p_user_id': user_id},
        ).execute()
        return response.data if isinstance(response.data, int) else None

    def get_listing_applications(self, ref_column: str, listing_id: str):
        response = (
            self.client.table('applications')
            .select('id, match_score, match_breakdown, status, created_at')
            .eq(ref_column, listing_id)
            .order('created_at', desc=True)
            .execute()
        )
        return pd.DataFrame(response.data) if response.data else pd.DataFrame()

    def get_listing_statistics(self, ref_column: str, listing_id: str):
        df = self.get_listing_applications(ref_column, listing_id)
        return summarize_applications(df)

db = Database()


def summarize_applications(df: pd.DataFrame) -> Optional[Dict]:
    """Aggregate match scores of a listing's applications"""
    if df is None or df.empty:
        return None

    breakdown = pd.DataFrame(list(df['match_breakdown'].dropna())) if 'match_breakdown' in df else pd.DataFrame()
    status_counts = df['status'].value_counts() if 'status' in df else pd.Series(dtype=int)

    return {
        'total_applications': len(df),
        'avg_match_score': round(float(df['match_score'].mean()), 2),
        'median_match_score': float(df['match_score'].median()),
        'top_match_score': int(df['match_score'].max()),
        'strong_matches': int(len(df[df['match_score'] >= 80])),
        'avg_breakdown': {
            dimension: round(float(breakdown[dimension].mean()), 2)
            for dimension in ('skills', 'experience', 'level', 'overall')
            if dimension in breakdown
        },
        'status_counts': {str(status): int(count) for status, count in status_counts.items()},
        'score_distribution': [
            {'range': '0-60', 'count': int(len(df[df['match_score'] < 60]))},
            {'range': '60-80', 'count': int(len(df[(df['match_score'] >= 60) & (df['match_score'] < 80)]))},
            {'range': '80-100', 'count': int(len(df[df['match_score'] >= 80]))}
        ]
    }

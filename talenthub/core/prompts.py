"""
Prompt templates for profile analysis and interview question generation
"""

ANALYSIS_SYSTEM_PROMPT = (
    "You are an AI recruiter. Analyze the candidate profile against the job/gig. "
    "Return ONLY valid JSON, no markdown, no code fences."
)

ANALYSIS_USER_PROMPT = """Analyze this candidate for the {kind} below.

{kind_upper} DETAILS:
{listing_text}

CANDIDATE PROFILE:
{candidate_text}

Return JSON:
{{
  "match_score": <0-100>,
  "match_breakdown": {{ "skills": <0-100>, "experience": <0-100>, "level": <0-100>, "overall": <0-100> }},
  "profile_summary": "<2-3 sentences>",
  "strengths": ["<strength1>", "<strength2>", ...],
  "weaknesses": ["<gap1>", "<gap2>", ...]
}}"""

QUESTIONS_SYSTEM_PROMPT = (
    "You are an AI interviewer. Generate interview questions. "
    "Return ONLY valid JSON array, no markdown, no code fences."
)

QUESTIONS_USER_PROMPT = """Generate {count} interview questions for this {kind}.

{listing_summary}

CANDIDATE GAPS: {gaps}

Generate exactly {count} questions: 2 technical, 1 behavioral, 1 problem-solving, 1 motivation, 1 about candidate gaps.

Return JSON array:
[
  {{ "id": 1, "question": "...", "type": "technical" }},
  {{ "id": 2, "question": "...", "type": "technical" }},
  {{ "id": 3, "question": "...", "type": "behavioral" }},
  {{ "id": 4, "question": "...", "type": "problem_solving" }},
  {{ "id": 5, "question": "...", "type": "motivation" }},
  {{ "id": 6, "question": "...", "type": "gap" }}
]"""


def build_analysis_prompt(kind: str, listing_text: str, candidate_text: str) -> str:
    return ANALYSIS_USER_PROMPT.format(
        kind=kind,
        kind_upper=kind.upper(),
        listing_text=listing_text,
        candidate_text=candidate_text,
    )


def build_questions_prompt(kind: str, listing_summary: str, weaknesses, count: int = 6) -> str:
    gaps = ', '.join(str(w) for w in weaknesses if w) or 'None identified'
    return QUESTIONS_USER_PROMPT.format(
        count=count,
        kind=kind,
        listing_summary=listing_summary,
        gaps=gaps,
    )

"""Configuration"""
import os
from dotenv import load_dotenv

load_dotenv()

class Settings:
    APP_NAME = "TalentHub Applications API"
    VERSION = "1.0.0"
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
    PORT = int(os.getenv("PORT", 8000))

    SUPABASE_URL = os.getenv("SUPABASE_URL", "")
    SUPABASE_KEY = os.getenv("SUPABASE_KEY", "")

    GROQ_API_KEY = os.getenv("GROQ_API_KEY", "")
    GROQ_MODEL = os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile")
    GROQ_TIMEOUT_SECONDS = float(os.getenv("GROQ_TIMEOUT_SECONDS", 60))

    ANALYSIS_TEMPERATURE = float(os.getenv("ANALYSIS_TEMPERATURE", 0.4))
    ANALYSIS_MAX_TOKENS = int(os.getenv("ANALYSIS_MAX_TOKENS", 800))
    QUESTIONS_TEMPERATURE = float(os.getenv("QUESTIONS_TEMPERATURE", 0.6))
    QUESTIONS_MAX_TOKENS = int(os.getenv("QUESTIONS_MAX_TOKENS", 1024))

    MAX_EXPERIENCES = int(os.getenv("MAX_EXPERIENCES", 10))
    MAX_PROJECTS = int(os.getenv("MAX_PROJECTS", 10))
    LISTING_FIELD_LIMIT = int(os.getenv("LISTING_FIELD_LIMIT", 500))

    # Fixed interview length, the question parser relies on it
    QUESTION_COUNT = 6

    CORS_ORIGINS = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
        if origin.strip()
    ]
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    @property
    def ai_configured(self) -> bool:
        return bool(self.GROQ_API_KEY)

    def validate(self):
        if not self.SUPABASE_URL or not self.SUPABASE_KEY:
            raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set")
        return True

settings = Settings()

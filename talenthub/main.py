"""Main FastAPI application"""
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from talenthub.config import settings
from talenthub.api.routes import router
from talenthub.database import db

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description="AI-assisted job and gig applications"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)

app.include_router(router)

@app.on_event("startup")
async def startup():
    logger.info(f"Starting {settings.APP_NAME} v{settings.VERSION}")
    try:
        settings.validate()
        logger.info("Settings validated")
    except Exception as e:
        logger.error(f"Settings validation failed: {e}")

    if db.is_connected:
        logger.info("Database connected")
    else:
        logger.error("Database connection failed")

    if settings.ai_configured:
        logger.info(f"AI provider configured, model {settings.GROQ_MODEL}")
    else:
        logger.warning("GROQ_API_KEY not set, new applications will be rejected")

    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info("Application started successfully")

@app.on_event("shutdown")
async def shutdown():
    logger.info("Shutting down application")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("talenthub.main:app", host="0.0.0.0", port=settings.PORT, reload=True)

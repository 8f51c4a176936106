"""Main FastAPI application for feedback insights."""
import logging
from contextlib import asynccontextmanager
from typing import List
from fastapi import FastAPI, Depends, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from config import config
from database import init_db
from errors import FeedbackNotFoundError, FeedbackValidationError
from schemas import BatchResult, FeedbackEntry, FeedbackRequest
from service import FeedbackService

# Configure logging
logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Initialize services
feedback_service = FeedbackService()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Initializing database...")
    await init_db()
    logger.info("Application started successfully")
    yield
    logger.info("Application shutting down")


app = FastAPI(
    title="Feedback Insights API",
    description="Customer feedback labeling, aggregate analytics and PM insights",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


def get_service() -> FeedbackService:
    """Dependency returning the shared feedback service."""
    return feedback_service


def _cached_json(payload: str, hit: bool) -> Response:
    return Response(
        content=payload,
        media_type="application/json",
        headers={
            "X-Cache": "HIT" if hit else "MISS",
            "Cache-Control": "public, max-age=60"
        }
    )


@app.get("/api/feedback", response_model=List[FeedbackEntry])
async def list_feedback(service: FeedbackService = Depends(get_service)):
    """List feedback entries, newest first."""
    return await service.list_feedback()


@app.post("/api/feedback", response_model=FeedbackEntry, status_code=status.HTTP_201_CREATED)
async def submit_feedback(request: FeedbackRequest, service: FeedbackService = Depends(get_service)):
    """Store new feedback; it stays unanalyzed until an analyze call."""
    return await service.submit_feedback(request.source, request.text)


@app.get("/api/stats")
async def get_stats(service: FeedbackService = Depends(get_service)):
    """Aggregated statistics, served from cache for up to five minutes."""
    payload, hit = await service.get_stats_payload()
    return _cached_json(payload, hit)


@app.post("/api/analyze/{feedback_id}", response_model=FeedbackEntry)
async def analyze_feedback(feedback_id: str, service: FeedbackService = Depends(get_service)):
    """Label a single feedback entry."""
    try:
        entry_id = int(feedback_id)
    except ValueError:
        raise FeedbackValidationError("Invalid feedback ID")
    return await service.analyze_one(entry_id)


@app.post("/api/analyze-all", response_model=BatchResult)
async def analyze_all_feedback(service: FeedbackService = Depends(get_service)):
    """Label every unanalyzed entry (up to 50 per call)."""
    return await service.analyze_all()


@app.get("/api/insights")
async def get_insights(service: FeedbackService = Depends(get_service)):
    """PM insights, or a message when nothing has been analyzed yet."""
    payload, hit = await service.get_insights_payload()
    return _cached_json(payload, hit)


@app.get("/health")
async def health_check(service: FeedbackService = Depends(get_service)):
    """Health check endpoint.

    Returns system status including AI availability and cache stats.
    """
    return {
        "status": "healthy",
        "ai_provider": "healthy" if service.extractor.available else "degraded",
        "cache_stats": service.cache.get_stats()
    }


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "service": "Feedback Insights API",
        "version": "1.0.0",
        "endpoints": {
            "list": "GET /api/feedback",
            "submit": "POST /api/feedback",
            "stats": "GET /api/stats",
            "analyze": "POST /api/analyze/{id}",
            "analyze_all": "POST /api/analyze-all",
            "insights": "GET /api/insights",
            "health": "GET /health"
        }
    }


@app.exception_handler(FeedbackValidationError)
async def validation_exception_handler(request, exc):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)})


@app.exception_handler(FeedbackNotFoundError)
async def not_found_exception_handler(request, exc):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": "Feedback not found"})


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler for unexpected errors."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )

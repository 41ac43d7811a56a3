"""FastAPI application entry point."""
from fastapi import FastAPI
from app.config import settings
from app.logging_utils import LoggingMiddleware, configure_logging
from app.routes import health, ask, metrics
import logging

# Initialize logger
logger = logging.getLogger(__name__)

# Configure logging level
configure_logging(settings.log_level)

# Create FastAPI app
app = FastAPI(
    title="DingTalk Ask Relay",
    description="Relays a prompt to a chat-completion API and posts the answer to a signed DingTalk robot webhook",
    version="1.0.0",
)

# Add logging middleware
app.add_middleware(LoggingMiddleware)

# Include routers
app.include_router(health.router)
app.include_router(ask.router)
app.include_router(metrics.router)


@app.on_event("startup")
async def startup_event():
    """Validate configuration on startup."""
    missing = settings.missing_required()
    if missing:
        logger.error(f"Missing required settings: {', '.join(missing)}. /api/ask will return 500.")
    logger.info("Application started")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        log_config=None,  # We use our own JSON logging
    )

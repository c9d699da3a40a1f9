import logging

from fastapi import FastAPI

from .config import LOG_LEVEL
from .database import engine, Base
from .routes import schedule, google_oauth
from .services.llm_fallback import check_ollama

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

# Create database tables
Base.metadata.create_all(bind=engine)

# Create FastAPI app
app = FastAPI(
    title="Digital Twin Scheduler API",
    description="Auto-schedules prioritized tasks into working hours around existing calendar events",
    version="1.0.0"
)

# Include routers
app.include_router(schedule.router, prefix="/schedule", tags=["schedule"])
app.include_router(google_oauth.router, prefix="/auth/google", tags=["google"])

@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": "Welcome to the Digital Twin Scheduler API",
        "version": "1.0.0",
        "endpoints": {
            "preview": "POST /schedule/preview - Place tasks around given busy intervals",
            "from_text": "POST /schedule/from-text - Extract tasks from text with the LLM and place them",
            "auto": "POST /schedule/auto - Place tasks into Google Calendar",
            "events": "GET /schedule/events?email= - List auto-scheduled events",
            "google_login": "GET /auth/google/login - Connect Google Calendar",
        },
        "swagger_ui": "/docs - Interactive API documentation",
    }

@app.get("/health")
def health_check():
    """Health check endpoint, including the Ollama probe"""
    status = check_ollama()
    return {
        "status": "healthy" if status.ollama else "degraded",
        "message": "API is running",
        "services": status.to_dict(),
    }

# This allows running the app directly with: python -m digital_twin.main
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("digital_twin.main:app", host="0.0.0.0", port=8000, reload=True)

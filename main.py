"""
Pitchside - Cricket Management API
"""
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pitchside.config import settings
from pitchside.database import init_db
from pitchside.errors import PitchsideError
from pitchside.logging_config import setup_logging, get_logger
from pitchside.api.auth import router as auth_router
from pitchside.api.teams import router as teams_router
from pitchside.api.players import router as players_router
from pitchside.api.matches import router as matches_router
from pitchside.api.stats import router as stats_router
from pitchside.api.admin import router as admin_router
from pitchside.api.users import router as users_router
from pitchside.api.fans import router as fans_router
from pitchside.api.dashboard import router as dashboard_router

setup_logging(settings.LOG_LEVEL, settings.LOG_FILE or None)
logger = get_logger("pitchside.api")

# Initialize FastAPI app
app = FastAPI(
    title="Pitchside",
    description="Cricket team, match and live scoring management API",
    version="0.1.0",
)

# CORS origins - configurable via environment variable
default_origins = [
    "http://localhost:5000",
    "http://localhost:5173",
    "http://127.0.0.1:5000",
    "http://127.0.0.1:5173",
]

# Add custom origins from environment (comma-separated)
if settings.CORS_ORIGINS:
    default_origins.extend([o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()])

app.add_middleware(
    CORSMiddleware,
    allow_origins=default_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """One log line per API request"""
    start = time.perf_counter()
    response = await call_next(request)
    if request.url.path.startswith("/api"):
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s %s %.1fms",
            request.method, request.url.path, response.status_code, duration_ms,
        )
    return response


@app.exception_handler(PitchsideError)
async def handle_domain_error(request: Request, exc: PitchsideError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Include routers
app.include_router(auth_router, prefix="/api")
app.include_router(teams_router, prefix="/api")
app.include_router(players_router, prefix="/api")
app.include_router(matches_router, prefix="/api")
app.include_router(stats_router, prefix="/api")
app.include_router(admin_router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(fans_router, prefix="/api")
app.include_router(dashboard_router, prefix="/api")


@app.on_event("startup")
def startup_event():
    """Initialize database on startup"""
    init_db()


@app.get("/")
def root():
    """Health check endpoint"""
    return {
        "name": "Pitchside API",
        "version": "0.1.0",
        "status": "running",
    }


@app.get("/api/health")
def health_check():
    """API health check"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

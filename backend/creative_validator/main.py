"""
Creative Compatibility Engine - Main FastAPI Application

Validates advertising creatives (static images and packaged HTML5 banners)
against the placement rules of multiple ad-delivery networks.
"""
import os
from pathlib import Path
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv
import structlog

from creative_validator import __version__
from creative_validator.routes import specs, upload, validate
from creative_validator.models import HealthResponse
from creative_validator.services.registry import REGISTRY_VERSION, CREATIVE_SPECS
from creative_validator.utils import MAX_UPLOAD_SIZE_MB

# Load environment variables from project root or backend directory
env_path = Path(__file__).parent.parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)
else:
    load_dotenv()  # Try default location

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("application_starting",
                version=__version__,
                registry_version=REGISTRY_VERSION,
                networks=len(CREATIVE_SPECS),
                max_upload_mb=MAX_UPLOAD_SIZE_MB)

    yield

    logger.info("application_shutting_down")


# Create FastAPI application
app = FastAPI(
    title="Creative Compatibility Engine",
    description="""
    Decides which ad placements a creative can be deployed to.

    ## Features

    - **Upload**: Analyze images and HTML5 banner archives into asset descriptors
    - **Validate**: Match assets to placements and check dimensions, format, size and color space
    - **Groups**: Detect multi-file creatives (uncover, spincube, spinner, exclusive trigger/banner)
    - **Specs**: Browse the placement registry and the format-to-network allowlist

    ## Networks Supported

    - ADFORM, SOS, ONEGAR, SKLIK
    - HP_EXCLUSIVE (homepage exclusive)
    - GOOGLE_ADS (app campaigns)
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# CORS configuration
cors_origins = os.getenv("CORS_ORIGINS", "*").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins if os.getenv("APP_ENV") == "production" else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error("unhandled_exception",
                 error=str(exc),
                 path=request.url.path,
                 method=request.method)
    return JSONResponse(
        status_code=500,
        content={"detail": "An internal error occurred. Please try again."}
    )


# Include routers
app.include_router(upload.router)
app.include_router(validate.router)
app.include_router(specs.router)


@app.get("/", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    Returns application status, version, and registry summary.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        services={
            "registry_version": REGISTRY_VERSION,
            "networks": len(CREATIVE_SPECS),
            "placements": sum(len(p) for p in CREATIVE_SPECS.values()),
            "max_upload_mb": MAX_UPLOAD_SIZE_MB
        }
    )


@app.get("/api/info")
async def api_info():
    """Get API information and available endpoints."""
    return {
        "name": "Creative Compatibility Engine API",
        "version": __version__,
        "endpoints": {
            "health": "GET /",
            "upload": {
                "analyze": "POST /upload/analyze",
                "html5": "POST /upload/html5"
            },
            "validate": {
                "match": "POST /validate/match",
                "placement": "POST /validate/placement",
                "compatibility": "POST /validate/compatibility",
                "groups": "POST /validate/groups"
            },
            "specs": {
                "all": "GET /specs",
                "network": "GET /specs/{network}",
                "allowlist": "GET /specs/formats/allowlist"
            },
            "docs": "GET /docs"
        }
    }


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", "8000"))
    host = os.getenv("HOST", "0.0.0.0")

    uvicorn.run(
        "creative_validator.main:app",
        host=host,
        port=port,
        reload=os.getenv("APP_ENV") != "production"
    )

"""
SLCTrips API - Main Application Entry Point
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse, Response
import time
import logging

# Prometheus metrics
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST, REGISTRY

from slctrips.config import settings

REQUEST_COUNT = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status']
)

REQUEST_LATENCY = Histogram(
    'http_request_duration_seconds',
    'HTTP request latency in seconds',
    ['method', 'endpoint']
)
from slctrips.routers import health, destinations, search, picks, tripkits, weather, affiliate, email
from slctrips.utils.database import init_db, close_db
from slctrips.utils.redis import init_redis, close_redis
from slctrips.utils.errors import register_exception_handlers

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager - handles startup and shutdown events
    """
    logger.info("Starting SLCTrips API...")

    await init_db()
    await init_redis()

    logger.info("SLCTrips API ready to serve requests!")

    yield

    logger.info("Shutting down SLCTrips API...")

    await close_db()
    await close_redis()

    logger.info("Cleanup completed")


app = FastAPI(
    title="SLCTrips API",
    description="""
    ## Utah Destination & TripKit API

    Destinations within a day's drive of Salt Lake City, and curated TripKit guides.

    ### Features
    - Search and filter destinations by category and drive time
    - Today's Picks with seasonal ranking
    - TripKit guides, free downloads and checkout
    - Weather and map helpers for destination pages
    """,
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    openapi_url="/openapi.json" if settings.DEBUG else None,
    default_response_class=ORJSONResponse,
    lifespan=lifespan,
)

register_exception_handlers(app)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request timing middleware with Prometheus metrics
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time

    # Skip /metrics to avoid recursion
    if request.url.path != "/metrics":
        route = request.scope.get("route")
        endpoint = getattr(route, "path", request.url.path)
        method = request.method
        status = response.status_code

        REQUEST_COUNT.labels(method=method, endpoint=endpoint, status=status).inc()
        REQUEST_LATENCY.labels(method=method, endpoint=endpoint).observe(process_time)

    response.headers["X-Process-Time"] = str(process_time)
    return response


# Include routers
api = settings.API_PREFIX
app.include_router(health.router, prefix=api, tags=["Health"])
app.include_router(destinations.router, prefix=f"{api}/destinations", tags=["Destinations"])
app.include_router(search.router, prefix=api, tags=["Destinations"])
app.include_router(picks.router, prefix=api, tags=["Destinations"])
app.include_router(tripkits.router, prefix=f"{api}/tripkits", tags=["TripKits"])
app.include_router(weather.router, prefix=api, tags=["Weather"])
app.include_router(affiliate.router, prefix=f"{api}/affiliate", tags=["Affiliate"])
app.include_router(email.router, prefix=f"{api}/email", tags=["Email"])


@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint - API information"""
    return {
        "name": "SLCTrips API",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs" if settings.DEBUG else "disabled",
    }


@app.get("/metrics", include_in_schema=False)
async def metrics():
    """Prometheus metrics endpoint"""
    return Response(
        content=generate_latest(REGISTRY),
        media_type=CONTENT_TYPE_LATEST
    )

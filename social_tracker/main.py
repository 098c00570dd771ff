from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from social_tracker.core.config import settings
from social_tracker.core.logging import RequestContextMiddleware, configure_logging
from social_tracker.api.v1 import account, auth, insights, interactions, stats

configure_logging(app_env=settings.app_env)

app = FastAPI(
    title="Social Tracker API",
    description="Log social interactions, track streaks and get AI coaching insights",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestContextMiddleware)

# Include API routers
app.include_router(auth.router, prefix="/api/v1/auth", tags=["Authentication"])
app.include_router(interactions.router, prefix="/api/v1/interactions", tags=["Interactions"])
app.include_router(stats.router, prefix="/api/v1/stats", tags=["Statistics"])
app.include_router(insights.router, prefix="/api/v1/insights", tags=["Insights"])
app.include_router(account.router, prefix="/api/v1/account", tags=["Account"])


@app.get("/healthz")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "version": "1.0.0"}


@app.get("/")
async def root():
    """Root endpoint"""
    return {"message": "Social Tracker API", "docs": "/docs"}

# app/main.py - FastAPI application
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from app.config import settings
from app.database import AccountStore, StoreUnavailableError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def create_app(store: AccountStore | None = None) -> FastAPI:
    """Build the app around `store`, or around a store at settings.database_path"""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("🚀 Starting CampusConnect API...")
        app.state.store = store or AccountStore(settings.database_path)
        try:
            app.state.store.initialize()
        except StoreUnavailableError as e:
            logger.error(f"❌ Startup error: {str(e)}")
            raise
        settings.is_email_configured()
        yield
        app.state.store.close()
        logger.info("👋 Account store closed")

    app = FastAPI(
        title="CampusConnect API",
        description="🎓 Student networking accounts and profiles",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root():
        """API status endpoint"""
        return {
            "message": "🎓 CampusConnect API is running!",
            "version": "1.0.0",
            "docs": "/docs",
            "status": "healthy"
        }

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint"""
        try:
            request.app.state.store.email_exists("")
            database = "connected"
        except StoreUnavailableError:
            database = "unavailable"

        return {
            "status": "healthy" if database == "connected" else "degraded",
            "service": "campusconnect-api",
            "version": "1.0.0",
            "database": database
        }

    from app import auth, profile, admin

    app.include_router(auth.router, prefix="/api/auth", tags=["🔐 Authentication"])
    app.include_router(profile.router, prefix="/api/profile", tags=["👤 Profile"])
    app.include_router(admin.router, prefix="/api/admin", tags=["🛠️ Admin"])

    @app.exception_handler(StoreUnavailableError)
    async def store_unavailable_handler(request, exc):
        logger.error(f"❌ Store unavailable: {str(exc)}")
        return JSONResponse(status_code=503, content={"success": False, "message": "Service temporarily unavailable"})

    return app


app = create_app()

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from src.config import settings
from src.database import init_db
from src.exception_handlers import register_exception_handlers
from src.logger_config import setup_logging
from src.auth import router as auth_router
from src.events import router as admin_events_router
from src.bookings import router as bookings_router
from src.chat import router as chat_router

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    init_db()
    logger.info(f"{settings.PROJECT_NAME} API started ({settings.ENVIRONMENT})")
    yield

# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description="TigerTix event ticketing API",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers
app.include_router(
    auth_router.router,
    prefix=f"{settings.API_PREFIX}/auth",
    tags=["Authentication"]
)

app.include_router(
    admin_events_router.router,
    prefix=f"{settings.API_PREFIX}/admin/events",
    tags=["Event Administration"]
)

app.include_router(
    bookings_router.router,
    prefix=f"{settings.API_PREFIX}/events",
    tags=["Events & Booking"]
)

app.include_router(
    chat_router.router,
    prefix=f"{settings.API_PREFIX}/llm",
    tags=["Chat Booking"]
)

@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": "TigerTix API",
        "version": "1.0.0",
        "docs": "/docs"
    }

@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

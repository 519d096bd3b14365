from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from headhunter_trace.config import get_settings
from headhunter_trace.database import (
    close_mongo_connection,
    connect_to_mongo,
    ensure_indexes,
    get_database,
)
from headhunter_trace.admin.router import router as admin_router
from headhunter_trace.analysis.gateway import get_gateway_client
from headhunter_trace.analysis.router import router as analysis_router
from headhunter_trace.auth.router import router as auth_router
from headhunter_trace.searches.clients.analysis import get_analysis_client
from headhunter_trace.searches.router import router as searches_router

settings = get_settings()

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle - MongoDB connection and HTTP clients."""
    # Startup
    await connect_to_mongo()
    await ensure_indexes(get_database())
    logger.info(f"{settings.product_name} API started")

    yield

    # Shutdown
    await get_analysis_client().close()
    await get_gateway_client().close()
    await close_mongo_connection()


app = FastAPI(title=f"{settings.product_name} API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router)
app.include_router(admin_router)
app.include_router(searches_router)
app.include_router(analysis_router)


@app.get("/")
def root():
    return {"message": f"Hello from {settings.product_name} API!"}


@app.get("/health")
def health():
    return {"status": "ok"}

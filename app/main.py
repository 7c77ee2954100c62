import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# ✅ Import All API Routes
from app.api.routes import analytics, companies, cv_database, health, jobs, plans

from app.core import config
from app.core.logging_config import setup_logging, sanitize_log_data
from app.db.init_db import init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(config.LOG_LEVEL, config.LOG_DIR)
    logger.info(
        "Starting PintuKerja API: %s",
        sanitize_log_data({
            "database_url": config.DATABASE_URL,
            "frontend_url": config.FRONTEND_URL,
            "log_level": config.LOG_LEVEL,
        })
    )
    init_db()
    yield


# ============================================
# ✅ FASTAPI APP INIT
# ============================================

app = FastAPI(title="PintuKerja API", lifespan=lifespan)

# ✅ CORS: only the PintuKerja frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Authorization", "Content-Type"],
)


# ============================================
# ✅ REGISTER ALL ROUTERS
# ============================================

app.include_router(health.router)
app.include_router(plans.router)
app.include_router(companies.router)
app.include_router(jobs.router)
app.include_router(cv_database.router)
app.include_router(analytics.router)


@app.get("/")
def root():
    return {"status": "PintuKerja API running"}

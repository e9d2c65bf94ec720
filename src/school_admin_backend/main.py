'''

'''
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from .database.engine import create_db_engine_and_session_factory, dispose_db_engine, init_models
from .common.logger import log
from .common.config import settings
from .api import (
    auth, dashboard, portal, realtime,
    school_years, options, classes, parents, students, fees, enrollments, payments, notifications
)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handles application startup and shutdown events.
    """
    # --- On App Startup ---
    log.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}...")
    create_db_engine_and_session_factory()
    if settings.AUTO_CREATE_TABLES:
        await init_models()

    yield # --- Application is now running ---

    # --- On App Shutdown ---
    log.info("Application lifespan shutdown...")
    await dispose_db_engine()


# ---- CREATING THE APP ----
app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    lifespan=lifespan
)

# --- Add CORS Middleware ---
origins = [
    # URL of the local frontend
    "http://localhost",
    "http://localhost:3000",
]

# Extend with environment-specific origins
origins.extend(settings.BACKEND_CORS_ORIGINS)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    # List endpoints answer with page versions
    expose_headers=["ETag"],
)
# --- End of CORS Middleware ---

@app.get("/")
async def health_check():
    return {"status": "ok", "message": f"{settings.APP_NAME} is running"}

app.include_router(auth.router)
app.include_router(dashboard.router)
app.include_router(school_years.router)
app.include_router(options.router)
app.include_router(classes.router)
app.include_router(parents.router)
app.include_router(students.router)
app.include_router(fees.router)
app.include_router(enrollments.router)
app.include_router(payments.router)
app.include_router(notifications.router)
app.include_router(portal.router)
app.include_router(realtime.router)

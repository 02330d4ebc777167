"""EstateHub – FastAPI application."""
# Load .env before any app code that might read config
from dotenv import load_dotenv
from pathlib import Path
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

import logging
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from app.config import get_settings
from app.database import Base, SessionLocal, engine
from app.errors import register_exception_handlers
# Import models so Base.metadata has all tables before create_all (schema source of truth)
from app.models import (  # noqa: F401
    User, Verification, OTP, Document, Transaction, Notification, MapRegistration,
)
from app.routers import auth, users, verifications, documents, transactions, notifications, maps, admin, realtime

log = logging.getLogger("uvicorn.error")

settings = get_settings()
app = FastAPI(title=settings.app_name, debug=settings.debug)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_exception_handlers(app)

app.include_router(auth.router)
app.include_router(users.router)
app.include_router(verifications.router)
app.include_router(documents.router)
app.include_router(transactions.router)
app.include_router(notifications.router)
app.include_router(maps.router)
app.include_router(admin.admin_router)
app.include_router(admin.superadmin_router)
app.include_router(realtime.router)

scheduler = None


@app.on_event("startup")
def startup():
    global scheduler
    if settings.mailgun_api_key and settings.mailgun_domain:
        log.info("[Mailgun] Using domain=%s from=%s", settings.mailgun_domain, settings.mailgun_from_email)
    else:
        log.warning("[Mailgun] Not configured - OTP emails will fail; set MAILGUN_API_KEY and MAILGUN_DOMAIN in .env")
    if not settings.map_provider_api_key:
        log.info("[Map] MAP_PROVIDER_API_KEY not set - boundaries and geocoding use the local pincode table")
    try:
        Base.metadata.create_all(bind=engine)
        from app.seed import seed_superadmin
        db = SessionLocal()
        try:
            seed_superadmin(db)
        finally:
            db.close()
    except SQLAlchemyError as e:
        log.warning("Database startup failed (tables/seed skipped). Check DATABASE_URL and network. Error: %s", e)

    if settings.otp_cleanup_enabled:
        from apscheduler.schedulers.background import BackgroundScheduler
        from app.services.otp_cleanup import OTP_CLEANUP_INTERVAL_MINUTES, run_otp_cleanup_job
        scheduler = BackgroundScheduler()
        scheduler.add_job(run_otp_cleanup_job, "interval", minutes=OTP_CLEANUP_INTERVAL_MINUTES)
        scheduler.start()


@app.on_event("shutdown")
def shutdown():
    if scheduler is not None and scheduler.running:
        scheduler.shutdown(wait=False)


@app.get("/api/health")
def health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

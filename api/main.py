import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from auth import router as auth_router
from contacts import router as contacts_router
from core import db
from core.errors import register_exception_handlers
from core.settings import get_settings
from projects import router as projects_router
from uploads import router as uploads_router

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process.
    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(lifespan=lifespan, title="portfolio-api")

# Allow the portfolio frontend to call this API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "x-auth-token"],
)

register_exception_handlers(app)

app.include_router(projects_router.router, tags=["projects"])
app.include_router(contacts_router.router, tags=["contact"])
app.include_router(auth_router.router, tags=["admin"])
app.include_router(uploads_router.router, tags=["uploads"])


@app.get("/api/health")
def health() -> dict:
    return {
        "status": "ok",
        "message": "Portfolio API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/")
def root() -> dict:
    return {"message": "portfolio api"}

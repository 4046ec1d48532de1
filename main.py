# FastAPI main application entry point
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hirechat.api import auth, chat, files, profile, resume
from hirechat.config import get_settings
from hirechat.database import init_db
from hirechat.dependencies import ServiceContainer
from hirechat.exceptions import HireChatError

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="HireChat API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router)
app.include_router(resume.router)
app.include_router(profile.router)
app.include_router(chat.router)
app.include_router(files.router)


@app.on_event("startup")
async def startup_event():
    """Initialize database, shared clients and the resume index."""
    init_db()

    if getattr(app.state, "services", None) is None:
        app.state.services = ServiceContainer.from_settings(settings)

    # The index is loaded lazily on first use if it is unreachable now
    try:
        await app.state.services.index.ensure_collection()
    except HireChatError as e:
        logger.warning(f"Resume index not initialised at startup: {e.message}")


@app.get("/")
async def root():
    return {"message": "HireChat API is running"}

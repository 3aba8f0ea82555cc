from importlib.metadata import version as pkg_version

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from decksmith.api import analysis_router, formats_router, health_router
from decksmith.config import settings

app = FastAPI(
    title=settings.app_name,
    version=pkg_version("decksmith"),
    debug=settings.debug,
)

app.include_router(analysis_router)
app.include_router(formats_router)
app.include_router(health_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

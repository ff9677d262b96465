"""FastAPI wiring: the JSON API under /v1 and the single-page dashboard at /."""

from pathlib import Path

from fastapi import FastAPI
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from .api import router as api_router

_STATIC_DIR = Path(__file__).resolve().parent.parent / "static"

app = FastAPI(
    title="SkyCast Dashboard",
    description="Current conditions and a five-day outlook for any place, backed by OpenWeatherMap.",
)
app.include_router(api_router, prefix="/v1")
app.mount("/static", StaticFiles(directory=_STATIC_DIR), name="static")


@app.get("/", include_in_schema=False)
def dashboard_page() -> FileResponse:
    return FileResponse(_STATIC_DIR / "index.html")

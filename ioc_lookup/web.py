"""
ioc-lookup Web API
FastAPI backend exposing menu building, extraction and dispatch
"""

from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Query
from pydantic import BaseModel

from . import __version__
from .analyzers.registry import Registry, default_registry
from .command import Command, dispatch
from .config import ConfigError, Settings, load_settings
from .extractors import extract_all
from .menu import build_menu
from .models import INDICATOR_TYPES
from .normalize import normalize
from .output import Notification

app = FastAPI(
    title="ioc-lookup",
    description="Indicator classification and analyzer dispatch",
    version=__version__,
)


class TextRequest(BaseModel):
    text: str


class DispatchRequest(BaseModel):
    menu_id: Optional[str] = None
    action: Optional[str] = None
    type: Optional[str] = None
    query: Optional[str] = None
    target: Optional[str] = None


def get_settings() -> Settings:
    """A fresh snapshot per request."""
    try:
        return load_settings()
    except ConfigError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e


def get_registry() -> Registry:
    return default_registry()


@app.get("/api/health")
async def health():
    """Health check endpoint"""
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.get("/api/analyzers")
async def list_analyzers(
    type: Optional[str] = Query(None, description="Only analyzers supporting this type"),
    registry: Registry = Depends(get_registry),
):
    """List the analyzer catalogue"""
    if type is not None and type not in INDICATOR_TYPES:
        raise HTTPException(status_code=400, detail=f"Unknown indicator type: {type}")
    return [
        {
            "name": a.name,
            "endpoint": a.endpoint,
            "search": list(a.search_types),
            "scan": list(a.scan_types),
        }
        for a in registry.analyzers
        if type is None or type in a.supported_types
    ]


@app.post("/api/menu")
async def menu(
    request: TextRequest,
    settings: Settings = Depends(get_settings),
    registry: Registry = Depends(get_registry),
):
    """Menu items for a selection"""
    items = build_menu(request.text, settings=settings, registry=registry)
    return {"items": [i.to_dict() for i in items]}


@app.post("/api/extract")
async def extract(request: TextRequest, settings: Settings = Depends(get_settings)):
    """Every indicator found in a block of text"""
    return extract_all(normalize(request.text, enable_idn=settings.enable_idn))


@app.post("/api/dispatch")
def dispatch_command(
    request: DispatchRequest,
    settings: Settings = Depends(get_settings),
    registry: Registry = Depends(get_registry),
):
    """Run a menu command; failures come back as a result, not an HTTP error"""
    try:
        if request.menu_id:
            command = Command.parse(request.menu_id)
        else:
            command = Command.parse(
                Command(
                    action=request.action or "",  # type: ignore[arg-type]
                    type=request.type or "",  # type: ignore[arg-type]
                    query=request.query or "",
                    target=request.target or "",
                ).to_menu_id()
            )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    result = dispatch(command, registry=registry, settings=settings)
    out = result.to_dict()
    note = Notification.from_result(result)
    if note is not None:
        out["notification"] = note.to_dict()
    return out


def main() -> None:
    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()

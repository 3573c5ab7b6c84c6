"""FastAPI application serving dictionary lookups to network clients."""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Dict, List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from dictfinder.config import AppConfig
from dictfinder.engine import Engine, UnknownGroupError
from dictfinder.index.search import groups_to_dict

LOGGER = logging.getLogger(__name__)

app = FastAPI(title="DictFinder Web", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.state.config = None
app.state.engine = None

_engine_lock = threading.Lock()


class SearchPayload(BaseModel):
    word: str
    group: str | None = None


def configure(config: AppConfig | None) -> None:
    """Set the configuration used to load dictionaries on first request."""
    with _engine_lock:
        app.state.config = config
        app.state.engine = None


def get_engine() -> Engine:
    with _engine_lock:
        if app.state.engine is None:
            config = app.state.config or AppConfig().apply_settings_file()
            app.state.engine = Engine(config).load()
        return app.state.engine


@app.on_event("startup")
async def startup_event() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


@app.post("/search")
async def search_words(payload: SearchPayload) -> Dict[str, List[dict]]:
    word = payload.word.strip()
    if not word:
        raise HTTPException(status_code=400, detail="Empty word")

    engine = await asyncio.to_thread(get_engine)
    try:
        groups = await asyncio.to_thread(engine.search, word, payload.group)
    except UnknownGroupError:
        raise HTTPException(status_code=404, detail=f"Unknown group: {payload.group}")
    return await asyncio.to_thread(groups_to_dict, groups)


@app.get("/dictionaries")
async def list_dictionaries() -> Dict[str, Any]:
    """List loaded dictionaries and search groups."""
    engine = await asyncio.to_thread(get_engine)
    dictionaries = [
        {
            "name": handle.bookname,
            "word_count": handle.word_count,
            "format": handle.format.name,
            "path": str(handle.ifo_path),
        }
        for handle in engine.dictionaries.values()
    ]
    groups = {name: group.names for name, group in engine.groups.items()}
    return {"dictionaries": dictionaries, "groups": groups}

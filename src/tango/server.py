import logging
import time
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from tango.application.config import AppConfig, resolve_config
from tango.application.decks import load_all_cards, validate_ids
from tango.application.sampling import draw_random_run
from tango.consts import VERSION
from tango.domain.constants import DEFAULT_RANDOM_COUNT
from tango.domain.errors import DeckLoadError, DeckNotFoundError, DeckValidationError
from tango.domain.models import CardRecord
from tango.domain.ports import CardDataRepository
from tango.infrastructure.deck_source import DirectoryDeckSource

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("tango.server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"tango server v{VERSION} starting up...")
    yield
    # Shutdown
    logger.info("tango server shutting down...")


app = FastAPI(
    title="tango server",
    description="Deck files and card statistics for the tango flashcard app.",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type"],
)

start_time = time.time()


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def _app_config(request: Request) -> AppConfig:
    # Set by `tango server`; otherwise resolved from env and the config file.
    return getattr(request.app.state, "config", None) or resolve_config()


def get_deck_source(request: Request) -> DirectoryDeckSource:
    from tango.application.factory import get_deck_source as build

    return build(_app_config(request))


def get_card_data(request: Request) -> CardDataRepository:
    from tango.application.factory import get_card_data as build

    return build(_app_config(request))


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


class DeleteCardRequest(BaseModel):
    index: int


class ReplaceDeckRequest(BaseModel):
    content: list[Any]


class CardRecordResponse(BaseModel):
    id: str
    success: int
    failure: int
    difficult: bool


class RandomRunRequest(BaseModel):
    count: int = Field(default=DEFAULT_RANDOM_COUNT, ge=0)
    prioritize_difficult: bool = False


# ---------------------------------------------------------------------------
# Meta
# ---------------------------------------------------------------------------


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Simple health check to verify server is reachable.
    """
    return HealthResponse(status="ok", version=VERSION, uptime_seconds=time.time() - start_time)


@app.get("/version")
async def get_version():
    return {"version": VERSION}


# ---------------------------------------------------------------------------
# Decks
# ---------------------------------------------------------------------------


def _deck_error(e: DeckLoadError) -> HTTPException:
    if isinstance(e, DeckNotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    logger.error(f"Deck error: {e}")
    return HTTPException(status_code=500, detail=str(e))


@app.get("/api/decks")
async def list_decks(source: DirectoryDeckSource = Depends(get_deck_source)) -> list[str]:
    return source.list_decks()


@app.get("/api/decks/{name}")
async def get_deck(name: str, source: DirectoryDeckSource = Depends(get_deck_source)):
    try:
        return source.read_raw(name)
    except DeckLoadError as e:
        raise _deck_error(e) from e


@app.post("/api/decks/{name}/delete")
async def delete_card(
    name: str,
    req: DeleteCardRequest,
    source: DirectoryDeckSource = Depends(get_deck_source),
):
    """Delete a card by index from a deck file."""
    try:
        deck = source.delete_card(name, req.index)
    except IndexError as e:
        raise HTTPException(status_code=400, detail="index out of bounds") from e
    except DeckLoadError as e:
        raise _deck_error(e) from e
    return {"success": True, "deck": deck}


@app.post("/api/decks/{name}/replace")
async def replace_deck(
    name: str,
    req: ReplaceDeckRequest,
    source: DirectoryDeckSource = Depends(get_deck_source),
):
    """Replace deck file contents (undo support)."""
    try:
        source.replace_deck(name, req.content)
    except DeckLoadError as e:
        raise _deck_error(e) from e
    return {"success": True}


# ---------------------------------------------------------------------------
# Card data
# ---------------------------------------------------------------------------


def _record(card_id: str, card_data: CardDataRepository) -> CardRecordResponse:
    card_data.get_counts(card_id)  # materialises the record
    record = card_data.get_all_records().get(card_id, CardRecord())
    return CardRecordResponse(
        id=card_id,
        success=record.success,
        failure=record.failure,
        difficult=record.difficult,
    )


@app.get("/api/cards/{card_id}", response_model=CardRecordResponse)
async def get_card(card_id: str, card_data: CardDataRepository = Depends(get_card_data)):
    return _record(card_id, card_data)


@app.post("/api/cards/{card_id}/success", response_model=CardRecordResponse)
async def record_success(card_id: str, card_data: CardDataRepository = Depends(get_card_data)):
    card_data.increment_success(card_id)
    return _record(card_id, card_data)


@app.post("/api/cards/{card_id}/failure", response_model=CardRecordResponse)
async def record_failure(card_id: str, card_data: CardDataRepository = Depends(get_card_data)):
    card_data.increment_failure(card_id)
    return _record(card_id, card_data)


@app.post("/api/cards/{card_id}/difficult", response_model=CardRecordResponse)
async def toggle_difficult(card_id: str, card_data: CardDataRepository = Depends(get_card_data)):
    card_data.toggle_difficult(card_id)
    return _record(card_id, card_data)


@app.get("/api/difficult")
async def list_difficult(card_data: CardDataRepository = Depends(get_card_data)) -> list[str]:
    return sorted(card_data.get_difficult())


@app.post("/api/random")
async def random_run(
    req: RandomRunRequest,
    source: DirectoryDeckSource = Depends(get_deck_source),
    card_data: CardDataRepository = Depends(get_card_data),
):
    """Draw an adaptive sample across every deck."""
    pool = load_all_cards(source)
    sampled = draw_random_run(
        pool,
        card_data.get_all_records(),
        req.count,
        prioritize_difficult=req.prioritize_difficult,
    )
    try:
        validate_ids(sampled)
    except DeckValidationError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    logger.info(f"Random run via API: {len(sampled)} of {len(pool)} cards")
    return [card.to_dict() for card in sampled]

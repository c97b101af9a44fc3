import logging
import threading
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import date

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel

from vocabdeck.application.config import resolve_config
from vocabdeck.application.factory import get_deck_repository
from vocabdeck.application.session import ReviewSession
from vocabdeck.application.stats import get_deck_stats
from vocabdeck.consts import VERSION
from vocabdeck.domain.errors import InvalidRatingError
from vocabdeck.domain.models import Card
from vocabdeck.domain.ports import DeckRepository

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("vocabdeck.server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"vocabdeck server v{VERSION} starting up...")
    yield
    # Shutdown
    logger.info("vocabdeck server shutting down...")


app = FastAPI(
    title="vocabdeck",
    description="HTTP API for daily vocabulary review sessions.",
    version=VERSION,
    lifespan=lifespan,
)

start_time = time.time()


# ---------------------------------------------------------------------------
# Session registry
# ---------------------------------------------------------------------------


@dataclass
class _SessionSlot:
    # One lock guards the deck + session pair
    lock: threading.Lock = field(default_factory=threading.Lock)
    session: ReviewSession | None = None


_slots: dict[str, _SessionSlot] = {}
_slots_lock = threading.Lock()


def _slot(name: str) -> _SessionSlot:
    with _slots_lock:
        return _slots.setdefault(name, _SessionSlot())


def _existing_slot(name: str) -> _SessionSlot:
    with _slots_lock:
        slot = _slots.get(name)
    if slot is None:
        raise HTTPException(status_code=404, detail=f"No active session for '{name}'.")
    return slot


def reset_sessions() -> None:
    """Forget all active sessions."""
    with _slots_lock:
        _slots.clear()


def get_repository() -> DeckRepository:
    return get_deck_repository(resolve_config())


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


class CardView(BaseModel):
    id: str
    word: str
    translation: str
    session_status: str
    due_date: date | None
    interval: int
    ease_factor: float

    @classmethod
    def from_card(cls, card: Card) -> "CardView":
        return cls(
            id=card.id,
            word=card.word,
            translation=card.translation,
            session_status=card.session_status.value,
            due_date=card.due_date,
            interval=card.interval,
            ease_factor=card.ease_factor,
        )


class SessionState(BaseModel):
    deck: str
    mode: str
    current: int
    total: int
    complete: bool
    can_rewind: bool
    ratings: list[str]
    card: CardView | None
    cards_reviewed_today: int


class DeckStatsResponse(BaseModel):
    deck: str
    mode: str
    total: int
    due: int | None = None
    upcoming: int | None = None
    finished: int | None = None
    to_review: int | None = None


class RateRequest(BaseModel):
    rating: str


class ExtendRequest(BaseModel):
    # None uses the configured default_extend_amount
    amount: int | None = None


class RewindResponse(BaseModel):
    rewound: bool
    state: SessionState


def _state(session: ReviewSession) -> SessionState:
    progress = session.progress()
    card = session.current_card()
    return SessionState(
        deck=session.deck.name,
        mode=session.deck.learning_mode.value,
        current=progress.current,
        total=progress.total,
        complete=session.is_complete(),
        can_rewind=session.can_rewind(),
        ratings=list(session.strategy.ratings),
        card=CardView.from_card(card) if card else None,
        cards_reviewed_today=session.deck.cards_reviewed_today,
    )


def _load(repo: DeckRepository, name: str):
    deck = repo.load(name)
    if deck is None:
        raise HTTPException(status_code=404, detail=f"Deck '{name}' not found.")
    return deck


def _active(slot: _SessionSlot, name: str, repo: DeckRepository | None = None) -> ReviewSession:
    if slot.session is None:
        raise HTTPException(status_code=404, detail=f"No active session for '{name}'.")
    if repo is not None and name not in repo.list_names():
        # Deck was deleted while the session was open
        slot.session = None
        with _slots_lock:
            _slots.pop(name, None)
        raise HTTPException(status_code=409, detail=f"Deck '{name}' no longer exists.")
    return slot.session


# ---------------------------------------------------------------------------
# Endpoints
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


@app.get("/decks")
def list_decks(repo: DeckRepository = Depends(get_repository)):
    return {"current": repo.get_current(), "decks": repo.list_names()}


@app.get("/decks/{name}/stats", response_model=DeckStatsResponse)
def deck_stats(name: str, repo: DeckRepository = Depends(get_repository)):
    deck = _load(repo, name)
    stats = get_deck_stats(deck, date.today())
    return DeckStatsResponse(
        deck=deck.name,
        mode=stats.mode.value,
        total=stats.total,
        due=stats.due,
        upcoming=stats.upcoming,
        finished=stats.finished,
        to_review=stats.to_review,
    )


@app.post("/decks/{name}/session", response_model=SessionState)
def start_session(name: str, repo: DeckRepository = Depends(get_repository)):
    """Build a fresh queue for the deck, replacing any active session."""
    deck = _load(repo, name)
    slot = _slot(name)
    with slot.lock:
        session = ReviewSession(deck)
        session.build()
        repo.save(deck)
        slot.session = session
        return _state(session)


@app.get("/decks/{name}/session", response_model=SessionState)
def get_session(name: str):
    slot = _existing_slot(name)
    with slot.lock:
        return _state(_active(slot, name))


@app.post("/decks/{name}/session/rate", response_model=SessionState)
def rate(name: str, req: RateRequest, repo: DeckRepository = Depends(get_repository)):
    slot = _existing_slot(name)
    with slot.lock:
        session = _active(slot, name, repo)
        try:
            session.rate_card(req.rating)
        except InvalidRatingError as e:
            raise HTTPException(status_code=400, detail=str(e))
        repo.save(session.deck)
        return _state(session)


@app.post("/decks/{name}/session/rewind", response_model=RewindResponse)
def rewind(name: str, repo: DeckRepository = Depends(get_repository)):
    slot = _existing_slot(name)
    with slot.lock:
        session = _active(slot, name, repo)
        rewound = session.rewind()
        if rewound:
            repo.save(session.deck)
        return RewindResponse(rewound=rewound, state=_state(session))


@app.post("/decks/{name}/session/extend", response_model=SessionState)
def extend(name: str, req: ExtendRequest, repo: DeckRepository = Depends(get_repository)):
    slot = _existing_slot(name)
    with slot.lock:
        session = _active(slot, name, repo)
        amount = req.amount if req.amount is not None else resolve_config().default_extend_amount
        session.extend(amount)
        repo.save(session.deck)
        return _state(session)

"""
FastAPI application for the subscription event mapper.

This application provides:
1. A hook trigger endpoint that fires a platform hook for a stored subscription
2. The hook table, for reference
3. The events recorded by a dry-run channel

Run with:
    uv run uvicorn api.main:app --reload

Then visit http://localhost:8000/docs for interactive API documentation.
"""

import logging
import threading
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field

from shared.channels import EventResult, RecordingChannel, get_channel
from shared.config import get_settings
from shared.data_store import DataStore
from subscription_events.hook_bus import HookBus
from subscription_events.hooks import HOOK_TABLE, get_hook_spec
from subscription_events.mapper import SubscriptionEventMapper
from subscription_events.platform import SubscriptionPlatform

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s | %(name)-24s | %(levelname)-5s | %(message)s",
    datefmt="%H:%M:%S",
)

logger = logging.getLogger("api")


# =============================================================================
# Request / Response Models
# =============================================================================

class FireHookRequest(BaseModel):
    """Fire a hook for one stored subscription."""
    subscription_id: int = Field(..., description="Subscription the hook is about")


class SentEvent(BaseModel):
    """One event handed to the channel."""
    user_id: int
    event_name: str
    email: str
    details: dict[str, Any]
    success: bool
    error: Optional[str] = None

    @classmethod
    def from_result(cls, result: EventResult) -> "SentEvent":
        return cls(
            user_id=result.user_id,
            event_name=result.event_name,
            email=result.email,
            details=result.details,
            success=result.success,
            error=result.error,
        )


class FireHookResponse(BaseModel):
    """Result of firing a hook."""
    hook_name: str
    event_name: str
    subscription_id: int
    handlers_called: int
    events: list[SentEvent]


class HookInfo(BaseModel):
    """One row of the hook table."""
    hook_name: str
    event_name: str
    passes_id: bool
    include_unique: bool
    value_source: str


# =============================================================================
# Application State
# =============================================================================

class AppState:
    """Hook bus, data store, channel and a started mapper wired together."""

    def __init__(self, data_store: Optional[DataStore] = None, channel=None):
        settings = get_settings()
        self.hook_bus = HookBus()
        self.data_store = data_store or DataStore(data_dir=settings.data_dir)
        self.channel = channel or get_channel(settings)
        self.mapper = SubscriptionEventMapper(
            hook_bus=self.hook_bus,
            data_store=self.data_store,
            channel=self.channel,
        )
        self.platform = SubscriptionPlatform(hook_bus=self.hook_bus, data_store=self.data_store)
        # FastAPI runs sync endpoints in a thread pool
        self._fire_lock = threading.Lock()
        self.mapper.start()

    def recorded_events(self) -> list[EventResult]:
        if isinstance(self.channel, RecordingChannel):
            return list(self.channel.sent_events)
        return []

    def fire(self, hook_name: str, subscription_id: int) -> tuple[int, list[EventResult]]:
        """
        Fire a hook and collect the events it recorded.

        Firing and reading back the recording happen under one lock so
        concurrent requests only see their own events.
        """
        with self._fire_lock:
            before = len(self.recorded_events())
            handlers_called = self.platform.fire(hook_name, subscription_id)
            return handlers_called, self.recorded_events()[before:]

    def close(self) -> None:
        """Stop the mapper and release the channel's connections."""
        self.mapper.stop()
        close = getattr(self.channel, "close", None)
        if close is not None:
            close()


# Module-level instance (reset_api_state swaps it in tests)
_state: Optional[AppState] = None


def get_state() -> AppState:
    global _state
    if _state is None:
        _state = AppState()
    return _state


def reset_api_state(
    data_store: Optional[DataStore] = None,
    channel=None,
) -> Optional[AppState]:
    """Rebuild the app state with the given collaborators (for testing)."""
    global _state
    if _state is not None:
        _state.close()
    _state = AppState(data_store=data_store, channel=channel) if (data_store or channel) else None
    return _state


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.info("Starting subscription event mapper API")
    get_state()
    yield
    logging.info("Shutting down")
    if _state is not None:
        _state.close()


app = FastAPI(
    title="Subscription Event Mapper",
    description="Forwards subscription platform hooks to Bento as events.",
    version="1.0.0",
    lifespan=lifespan,
)


# =============================================================================
# Endpoints
# =============================================================================

@app.get("/health", tags=["Health"])
def health_check():
    return {"status": "healthy", "service": "subscription-event-mapper"}


@app.get("/hooks", response_model=list[HookInfo], tags=["Hooks"])
def list_hooks():
    """The hook table: which event each platform hook produces."""
    return [
        HookInfo(
            hook_name=spec.hook_name,
            event_name=spec.event_name,
            passes_id=spec.passes_id,
            include_unique=spec.include_unique,
            value_source=spec.value_source.value,
        )
        for spec in HOOK_TABLE.values()
    ]


@app.post("/hooks/{hook_name}", response_model=FireHookResponse, tags=["Hooks"])
def fire_hook(
    hook_name: str,
    request: FireHookRequest,
    state: AppState = Depends(get_state),
) -> FireHookResponse:
    """
    Fire a platform hook for a stored subscription.

    Status hooks update the stored status first, as the platform does.
    Returns the events the hook produced when running in dry-run mode.
    """
    spec = get_hook_spec(hook_name)
    if spec is None:
        raise HTTPException(status_code=404, detail=f"Unknown hook: {hook_name}")

    if state.data_store.get_subscription(request.subscription_id) is None:
        raise HTTPException(
            status_code=404,
            detail=f"Subscription not found: {request.subscription_id}",
        )

    handlers_called, new_events = state.fire(hook_name, request.subscription_id)

    logger.info(
        f"Fired {hook_name} for subscription {request.subscription_id}: "
        f"{len(new_events)} event(s) recorded"
    )

    return FireHookResponse(
        hook_name=hook_name,
        event_name=spec.event_name,
        subscription_id=request.subscription_id,
        handlers_called=handlers_called,
        events=[SentEvent.from_result(r) for r in new_events],
    )


@app.get("/events", response_model=list[SentEvent], tags=["Events"])
def list_events(state: AppState = Depends(get_state)):
    """Events recorded so far. Empty unless running in dry-run mode."""
    return [SentEvent.from_result(r) for r in state.recorded_events()]


@app.delete("/events", tags=["Events"])
def clear_events(state: AppState = Depends(get_state)):
    if isinstance(state.channel, RecordingChannel):
        state.channel.clear_history()
    return {"status": "cleared"}


@app.get("/data/subscriptions", tags=["Data"])
def get_subscriptions(state: AppState = Depends(get_state)):
    """All stored subscriptions."""
    return [
        {
            "id": s.id,
            "status": s.status,
            "billing_email": s.billing_email,
            "currency": s.currency,
            "total": s.total,
            "parent_order_id": s.parent_order_id,
        }
        for s in state.data_store.get_subscriptions()
    ]

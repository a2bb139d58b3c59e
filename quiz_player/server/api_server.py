"""FastAPI server that records quiz completions and serves play data."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
import re
from threading import Lock, Thread

from fastapi import Depends, FastAPI, Header, HTTPException, Query
import uvicorn

from quiz_player.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from quiz_player.core.schemas import (
    CompletionRequest,
    CompletionResponse,
    PlayData,
    StoredCompletion,
)

logger = logging.getLogger(__name__)

_CATEGORY_ACE_MIN_QUESTIONS = 5
_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


class CompletionStore:
    """Thread-safe in-memory record of each user's best completion per quiz."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._completions: dict[tuple[str, str], StoredCompletion] = {}
        self._achievements: dict[str, set[str]] = {}

    def upsert(self, user_id: str, request: CompletionRequest) -> StoredCompletion:
        """Keep the better of the stored and submitted results; ties take the newer one."""
        key = (user_id, request.quiz_slug)
        candidate = StoredCompletion(
            **request.model_dump(),
            user_id=user_id,
            completed_at=datetime.now(timezone.utc),
        )
        with self._lock:
            existing = self._completions.get(key)
            if existing is None or candidate.score >= existing.score:
                self._completions[key] = candidate
                return candidate
            return existing

    def get(self, user_id: str, quiz_slug: str) -> StoredCompletion | None:
        with self._lock:
            return self._completions.get((user_id, quiz_slug))

    def award(self, user_id: str, slugs: list[str]) -> list[str]:
        """Record achievements and return only those new to this user."""
        with self._lock:
            owned = self._achievements.setdefault(user_id, set())
            fresh = [slug for slug in slugs if slug not in owned]
            owned.update(fresh)
            return fresh

    def achievements_for(self, user_id: str) -> set[str]:
        with self._lock:
            return set(self._achievements.get(user_id, set()))


def server_achievements(request: CompletionRequest) -> list[str]:
    """Achievement slugs a completion qualifies for on the server side."""
    slugs: list[str] = []
    if request.score == request.total_questions:
        slugs.append("perfect-score")
    for round_score in request.round_scores:
        if (
            round_score.total_questions >= _CATEGORY_ACE_MIN_QUESTIONS
            and round_score.score == round_score.total_questions
        ):
            category = _SLUG_PATTERN.sub("-", round_score.category.lower()).strip("-")
            slug = f"{category}-ace"
            if category and slug not in slugs:
                slugs.append(slug)
    return slugs


def _require_user(
    authorization: str | None = Header(default=None),
    x_user_id: str | None = Header(default=None),
) -> str:
    if not authorization or not authorization.startswith("Bearer ") or not x_user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return x_user_id


def _get_store_dependency(store: CompletionStore):
    def dependency() -> CompletionStore:
        return store

    return dependency


def create_api_app(
    store: CompletionStore | None = None,
    quizzes: dict[str, PlayData] | None = None,
) -> FastAPI:
    """Create a FastAPI application wired to the provided completion store."""
    app = FastAPI(title="QuizPlayer API", version="0.1.0")
    store_dep = _get_store_dependency(store or CompletionStore())
    play_data = dict(quizzes or {})

    @app.post("/api/quiz/completion")
    def record_completion(
        payload: CompletionRequest,
        user_id: str = Depends(_require_user),
        completions: CompletionStore = Depends(store_dep),
    ) -> dict[str, object]:
        completion = completions.upsert(user_id, payload)
        unlocked = completions.award(user_id, server_achievements(payload))
        logger.info(
            "Completion for %s by %s: %s/%s (new achievements: %s)",
            payload.quiz_slug,
            user_id,
            payload.score,
            payload.total_questions,
            unlocked or "none",
        )
        response = CompletionResponse(
            success=True,
            completion=completion,
            newly_unlocked_achievements=unlocked,
        )
        return response.model_dump(by_alias=True, mode="json")

    @app.get("/api/quiz/completion")
    def get_completion(
        quiz_slug: str = Query(alias="quizSlug", min_length=1),
        user_id: str = Depends(_require_user),
        completions: CompletionStore = Depends(store_dep),
    ) -> dict[str, object]:
        completion = completions.get(user_id, quiz_slug)
        return {
            "completion": None
            if completion is None
            else completion.model_dump(by_alias=True, mode="json")
        }

    @app.get("/api/quizzes/{slug}/play-data")
    def get_play_data(slug: str) -> dict[str, object]:
        document = play_data.get(slug)
        if document is None:
            raise HTTPException(status_code=404, detail=f"Quiz '{slug}' not found")
        return document.model_dump(by_alias=True, mode="json")

    return app


def start_api_server(
    store: CompletionStore | None = None,
    quizzes: dict[str, PlayData] | None = None,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(store, quizzes)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="QuizApiServer", daemon=True)
    thread.start()
    return thread

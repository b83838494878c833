from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from word_fridge.api.schemas import AnswerRequest, CaptureRequest
from word_fridge.config import ensure_dirs, load_settings
from word_fridge.engine import FridgeEngine
from word_fridge.errors import (
    ConcurrentModificationError,
    InsufficientCatalogError,
    QuizNotFoundError,
    WordNotFoundError,
)
from word_fridge.logging_config import setup_logging
from word_fridge.quiz.book import QuizBook
from word_fridge.storage.db import Database

logger = logging.getLogger(__name__)

settings = load_settings()
db = Database(settings.db_path)
engine = FridgeEngine(db, settings)
quiz_book = QuizBook()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    setup_logging(settings.log_level)
    ensure_dirs()
    db.initialize()
    yield


app = FastAPI(title="Word Fridge", version="0.1.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/api/fridge/items")
def fridge_items() -> dict:
    items = engine.list_items()
    return {"ok": True, "items": [view.to_dict() for view in items], "total": len(items)}


@app.post("/api/fridge/items")
def capture_item(req: CaptureRequest) -> dict:
    try:
        item, created = engine.capture(req.model_dump())
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    view = engine.view(item, engine.now())
    return {"ok": True, "created": created, "item": view.to_dict()}


@app.get("/api/fridge/items/{word_id}")
def fridge_item(word_id: int) -> dict:
    try:
        view = engine.get_item(word_id)
    except WordNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {"ok": True, "item": view.to_dict()}


@app.get("/api/fridge/quiz-by-word/{word_id}")
def quiz_by_word(word_id: int, k: int | None = Query(default=None, ge=2, le=8)) -> dict:
    try:
        challenge = engine.generate_quiz(word_id, k)
    except WordNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except InsufficientCatalogError as exc:
        raise HTTPException(
            status_code=409,
            detail={"message": str(exc), "required": exc.required, "available": exc.available},
        ) from exc
    quiz_book.issue(challenge)
    return {"ok": True, **challenge.to_public_dict()}


@app.post("/api/fridge/quiz/{quiz_id}/answer")
def answer_quiz(quiz_id: str, req: AnswerRequest) -> dict:
    try:
        challenge = quiz_book.take(quiz_id)
        result = engine.submit_answer(challenge, req.selected_word_id)
    except (QuizNotFoundError, WordNotFoundError) as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ConcurrentModificationError as exc:
        logger.warning("quiz %s rejected: %s", quiz_id, exc)
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    payload: dict = {"ok": True, "correct": result.correct, "xp_delta": result.xp_delta, "item": None}
    if result.correct and result.updated_item is not None:
        payload["item"] = engine.view(result.updated_item, engine.now()).to_dict()
    return payload


@app.get("/api/stats")
def stats() -> dict:
    return {"ok": True, **engine.get_profile()}


@app.get("/api/stats/rank")
def rank() -> dict:
    return {"ok": True, **asdict(engine.get_rank())}

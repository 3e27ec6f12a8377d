import logging
import os

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from .errors import ErrorKind
from .evaluation_service import EvaluationService
from .history import HistoryStore, build_history_entry
from .models import (
    EvaluateRequest,
    HistoryResponse,
    StatsResponse,
    ThemeRequest,
    ThemeResponse,
)
from .preferences import ThemePreference
from .stats import compute_stats
from .storage import build_state_store
from .tips import generate_tips


logger = logging.getLogger("uvicorn.error")

EXPORT_FILENAME = "pitch-history.json"
STATUS_BY_KIND = {
    ErrorKind.BUSY: 409,
}

app = FastAPI(title="Pitch Scorer Backend")
state_store = build_state_store()
history_store = HistoryStore(state_store)
theme_preference = ThemePreference(state_store)
evaluation_service = EvaluationService()

frontend_origins = os.getenv(
    "FRONTEND_ORIGINS",
    "http://localhost:3000,http://127.0.0.1:3000",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in frontend_origins.split(",") if origin.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health() -> dict:
    return {"status": "ok", "storage": history_store.storage_name}


@app.post("/api/evaluate")
def evaluate(payload: EvaluateRequest) -> JSONResponse:
    transcript = payload.transcript
    try:
        outcome = evaluation_service.evaluate(transcript)
        if not outcome.ok:
            status_code = STATUS_BY_KIND.get(outcome.kind, 500)
            return JSONResponse(status_code=status_code, content=outcome.to_payload())

        # Render before recording so an unrenderable result never reaches history.
        response = JSONResponse(status_code=200, content=outcome.to_payload())
        history_store.record(build_history_entry(transcript, outcome.result))
        return response
    except Exception as exc:
        logger.error("evaluation_unhandled_error", exc_info=True)
        return JSONResponse(status_code=500, content={"ok": False, "error": str(exc)})


@app.api_route("/api/evaluate", methods=["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"])
def evaluate_wrong_method(request: Request) -> JSONResponse:
    logger.info("evaluate_rejected method=%s", request.method)
    return JSONResponse(status_code=405, content={"ok": False, "error": "POST only"})


@app.get("/api/history", response_model=HistoryResponse)
def list_history() -> HistoryResponse:
    return HistoryResponse(entries=[entry.to_payload() for entry in history_store.all()])


@app.delete("/api/history", response_model=HistoryResponse)
def clear_history(confirm: bool = False) -> HistoryResponse:
    if not confirm:
        raise HTTPException(
            status_code=400,
            detail="Clearing history needs confirmation. Repeat the request with ?confirm=true.",
        )
    history_store.clear()
    return HistoryResponse(entries=[])


@app.get("/api/history/export")
def export_history() -> Response:
    return Response(
        content=history_store.export_json(),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


@app.get("/api/stats", response_model=StatsResponse)
def get_stats() -> StatsResponse:
    stats = compute_stats(history_store.all())
    tips = generate_tips(stats.average_score, stats.category_averages)
    return StatsResponse(stats=stats, tips=tips)


@app.get("/api/preferences/theme", response_model=ThemeResponse)
def get_theme() -> ThemeResponse:
    return ThemeResponse(theme=theme_preference.get())


@app.put("/api/preferences/theme", response_model=ThemeResponse)
def update_theme(payload: ThemeRequest) -> ThemeResponse:
    try:
        theme = theme_preference.set(payload.theme)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return ThemeResponse(theme=theme)

# main.py
import logging
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

import service
from ai import IntentClassifier, build_provider
from config import Settings, get_settings
from exceptions import (
    LeadScoringError,
    NotFoundError,
    PreconditionError,
    ProviderConfigurationError,
    UploadError,
    ValidationError,
)
from models import Offer
from scoring import FixedDelayPacer, ScoringPipeline
from storage import InMemoryStore, LeadStore

settings = get_settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.api_title, version=settings.api_version)
app.state.store = InMemoryStore()
app.state.pipeline = None

ALLOWED_EXTENSIONS = (".csv", ".txt")


# --- dependencies ---
def get_store(request: Request) -> LeadStore:
    return request.app.state.store


def scoring_inputs(store: LeadStore = Depends(get_store)):
    return service.check_scoring_inputs(store)


def get_pipeline(
    request: Request,
    settings: Settings = Depends(get_settings),
    _inputs=Depends(scoring_inputs),
) -> ScoringPipeline:
    """Build the pipeline on first use, once an offer and leads exist; a misconfigured provider fails here."""
    if request.app.state.pipeline is None:
        classifier = IntentClassifier(build_provider(settings), settings.ai_score_table)
        request.app.state.pipeline = ScoringPipeline(
            classifier,
            pacer=FixedDelayPacer(settings.request_delay_seconds),
            high_threshold=settings.high_threshold,
            medium_threshold=settings.medium_threshold,
        )
    return request.app.state.pipeline


# --- error handling ---
def _error(status_code: int, error: str, message: str = None, details=None) -> JSONResponse:
    body = {"status": "error", "error": error}
    if message:
        body["message"] = message
    if details:
        body["details"] = details
    return JSONResponse(body, status_code=status_code)


@app.exception_handler(LeadScoringError)
async def lead_scoring_error_handler(request: Request, exc: LeadScoringError):
    if isinstance(exc, (ValidationError, PreconditionError)):
        status_code = 400
    elif isinstance(exc, NotFoundError):
        status_code = 404
    elif isinstance(exc, ProviderConfigurationError):
        logger.error(f"AI provider unavailable: {exc.message}")
        status_code = 503
    else:
        status_code = 500
    return _error(status_code, exc.message, details=exc.details)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    details = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()]
    return _error(400, "Validation failed", details=details)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _error(500, "Internal server error")


# --- routes ---
@app.get("/")
async def root():
    return {"message": "Lead Scoring API is running! Visit /docs for interactive API docs."}


@app.get("/health")
async def health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.post("/offer", status_code=201)
async def post_offer(offer: Offer, store: LeadStore = Depends(get_store)):
    saved = service.create_offer(store, offer)
    return {"status": "ok", "message": "Offer saved.", "data": saved.model_dump(mode="json")}


@app.get("/offer")
async def get_offer(store: LeadStore = Depends(get_store)):
    return {"status": "ok", "data": service.get_offer(store).model_dump(mode="json")}


@app.post("/leads/upload")
async def upload_leads(
    file: UploadFile = File(...),
    store: LeadStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    if not (file.filename or "").lower().endswith(ALLOWED_EXTENSIONS):
        raise UploadError("Only CSV files supported.")
    contents = await file.read()
    if len(contents) > settings.max_upload_bytes:
        raise UploadError(f"File too large. Maximum size is {settings.max_upload_bytes} bytes.")

    leads = service.upload_leads(store, contents)
    return {
        "status": "ok",
        "imported": len(leads),
        "data": [lead.model_dump(mode="json") for lead in leads],
    }


@app.get("/leads")
async def get_leads(store: LeadStore = Depends(get_store)):
    leads = service.get_leads(store)
    return {"status": "ok", "count": len(leads), "data": [lead.model_dump(mode="json") for lead in leads]}


@app.post("/score")
async def run_scoring(
    store: LeadStore = Depends(get_store),
    pipeline: ScoringPipeline = Depends(get_pipeline),
):
    outcome = await service.score_leads(store, pipeline)
    return {
        "status": "ok",
        "scored": outcome["count"],
        "summary": outcome["summary"],
        "data": [lead.to_view() for lead in outcome["leads"]],
    }


@app.get("/results")
async def get_results(debug: bool = False, store: LeadStore = Depends(get_store)):
    return {"status": "ok", "data": service.get_results(store, include_debug=debug)}


@app.get("/results/export")
async def export_csv(store: LeadStore = Depends(get_store)):
    csv_text = service.export_results(store)
    return Response(
        content=csv_text,
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=scored-leads.csv"},
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

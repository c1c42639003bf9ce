import logging
import os
from datetime import datetime
from typing import Any, List

from fastapi import Body, Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from config import Settings, get_settings
from database import SubmissionStore, get_store
from deeplink import compose_whatsapp_link
from pdf_report import render_submission_pdf
from schemas import (
    CLOTHING_ITEMS,
    GENDERS,
    MORPHOLOGIES,
    SIZE_OPTIONS,
    CamelModel,
    StoredSubmission,
    flatten_errors,
    validate_submission,
)

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger("casting_api")

app = FastAPI(title="Model Casting Submission API")
app.state.store = SubmissionStore()

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def validation_failed(details: dict) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "Validation failed", "details": details})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return validation_failed(flatten_errors(list(exc.errors())))


class HealthResponse(BaseModel):
    message: str


class SubmissionSummary(CamelModel):
    id: str
    submitted_at: datetime
    full_name: str
    email: str
    gender: str
    morphology: str
    has_image: bool


def _summary(s: StoredSubmission) -> SubmissionSummary:
    return SubmissionSummary(
        id=s.id,
        submitted_at=s.submitted_at,
        full_name=s.full_name,
        email=s.email,
        gender=s.gender,
        morphology=s.morphology,
        has_image=bool(s.image_base64),
    )


# --------------------- Routes ---------------------

@app.get("/", response_model=HealthResponse)
def read_root():
    return {"message": "Model Casting Submission Backend Running"}


@app.get("/api/options")
def get_options():
    return {
        "sizes": list(SIZE_OPTIONS),
        "genders": list(GENDERS),
        "morphologies": MORPHOLOGIES,
        "clothingItems": CLOTHING_ITEMS,
    }


@app.post("/api/submit")
def submit(
    payload: Any = Body(...),
    store: SubmissionStore = Depends(get_store),
    cfg: Settings = Depends(get_settings),
):
    submission, errors = validate_submission(payload)
    if errors is not None:
        logger.info("Submission rejected: %s", sorted(errors["fieldErrors"]) or errors["formErrors"])
        return validation_failed(errors)

    try:
        document = render_submission_pdf(submission, submission.image_base64, filename=cfg.PDF_FILENAME)
        whatsapp_link = compose_whatsapp_link(submission, cfg)
        stored = store.save(submission)
    except Exception as e:
        logger.exception("Submission error")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to process submission", "message": str(e) or "Unknown error"},
        )

    logger.info(
        "Submission %s accepted (%d page(s), image=%s)", stored.id, document.page_count, document.has_image
    )
    return {
        "success": True,
        "message": "Form submitted successfully",
        "pdfBase64": document.data_uri,
        "whatsappLink": whatsapp_link,
        "submissionId": stored.id,
        "submissionData": {
            "name": submission.full_name,
            "email": submission.email,
            "gender": submission.gender,
            "morphology": submission.morphology,
        },
    }


@app.get("/api/submissions", response_model=List[SubmissionSummary])
def list_submissions(store: SubmissionStore = Depends(get_store)):
    return [_summary(s) for s in store.list()]


def _get_or_404(store: SubmissionStore, submission_id: str) -> StoredSubmission:
    stored = store.get_by_id(submission_id)
    if not stored:
        raise HTTPException(status_code=404, detail="Submission not found")
    return stored


@app.get("/api/submissions/{submission_id}")
def get_submission(submission_id: str, store: SubmissionStore = Depends(get_store)):
    stored = _get_or_404(store, submission_id)
    return stored.model_dump(mode="json", by_alias=True)


@app.get("/api/submissions/{submission_id}/pdf")
def get_submission_pdf(
    submission_id: str,
    store: SubmissionStore = Depends(get_store),
    cfg: Settings = Depends(get_settings),
):
    stored = _get_or_404(store, submission_id)
    document = render_submission_pdf(stored, stored.image_base64, filename=cfg.PDF_FILENAME)
    return Response(
        content=document.content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{cfg.PDF_FILENAME}"'},
    )


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)

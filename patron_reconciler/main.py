import logging
from typing import Optional

from fastapi import Depends, FastAPI, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .engine import VocabularyProvider, process_files
from .errors import ReconciliationError
from .models import HealthResponse, UploadResponse
from .vocabulary import TagVocabularyClient

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="patron-reconciler",
    description="Reconciles constituent, donation and email exports into import-ready profiles",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_vocabulary_client() -> VocabularyProvider:
    return TagVocabularyClient()


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/api/upload", response_model=UploadResponse, response_model_exclude_none=True)
async def upload(
    constituents: Optional[UploadFile] = File(None),
    donations: Optional[UploadFile] = File(None),
    emails: Optional[UploadFile] = File(None),
    debug: str = Form("false"),
    vocabulary_client: VocabularyProvider = Depends(get_vocabulary_client),
):
    if constituents is None or donations is None or emails is None:
        raise HTTPException(status_code=400, detail="Missing required files")

    constituents_raw = await constituents.read()
    donations_raw = await donations.read()
    emails_raw = await emails.read()

    try:
        result = await run_in_threadpool(
            process_files,
            constituents_raw,
            donations_raw,
            emails_raw,
            debug=debug == "true",
            vocabulary_client=vocabulary_client,
        )
    except ReconciliationError as exc:
        logger.error("Upload failed: %s", exc)
        raise HTTPException(status_code=500, detail="Error processing files")

    return UploadResponse(data=result)

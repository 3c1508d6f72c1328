import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import get_text_embedder
from config import settings
from models.requests import CompareRequest
from models.responses import AnalysisResult, EmbeddingComparisonResult, ExtractedText
from services import pdf_parser, text_analyzer
from services.text_embedder import EmbeddingUnavailable, TextEmbedder

logger = logging.getLogger(__name__)

router = APIRouter()
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)


async def _read_pdf_upload(cv_file: UploadFile) -> str:
    """Validate an uploaded CV and return its text."""
    if not cv_file.filename or not cv_file.filename.lower().endswith(".pdf"):
        raise HTTPException(status_code=400, detail="Only PDF files are accepted")

    content = await cv_file.read()
    max_bytes = settings.max_upload_size_mb * 1024 * 1024
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Max size: {settings.max_upload_size_mb}MB",
        )

    try:
        text = pdf_parser.extract_text(content)
    except pdf_parser.ParseFailure:
        raise HTTPException(
            status_code=400,
            detail="Failed to import PDF. Please try another file or paste text directly.",
        )

    if not text.strip():
        raise HTTPException(
            status_code=400,
            detail="Could not extract text from PDF. The PDF might be image-based or protected.",
        )
    return text


def _run_analysis(job_posting: str, cv: str) -> AnalysisResult:
    try:
        return text_analyzer.analyze(job_posting, cv)
    except Exception:
        logger.exception("Keyword analysis failed")
        raise HTTPException(status_code=500, detail="Analysis failed. Please try again.")


@router.get("/health")
async def health(embedder: TextEmbedder = Depends(get_text_embedder)):
    return {
        "status": "ok",
        "embedder_state": embedder.state.value,
    }


@router.post("/analyze", response_model=AnalysisResult)
@limiter.limit(settings.rate_limit)
async def analyze(request: Request, body: CompareRequest):
    return _run_analysis(body.job_posting, body.cv)


@router.post("/analyze/pdf", response_model=AnalysisResult)
@limiter.limit(settings.rate_limit)
async def analyze_pdf(
    request: Request,
    cv_file: UploadFile = File(...),
    job_posting: str = Form(..., max_length=10000),
):
    cv_text = await _read_pdf_upload(cv_file)
    return _run_analysis(job_posting, cv_text)


@router.post("/extract-text", response_model=ExtractedText)
@limiter.limit(settings.rate_limit)
async def extract_text(request: Request, cv_file: UploadFile = File(...)):
    text = await _read_pdf_upload(cv_file)
    return ExtractedText(
        filename=cv_file.filename,
        text=text[: settings.max_text_chars],
        word_count=text_analyzer.count_words(text),
    )


@router.post("/compare", response_model=EmbeddingComparisonResult)
@limiter.limit(settings.rate_limit)
async def compare(
    request: Request,
    body: CompareRequest,
    embedder: TextEmbedder = Depends(get_text_embedder),
):
    try:
        return await embedder.compare_texts(body.job_posting, body.cv)
    except EmbeddingUnavailable as e:
        logger.warning("Embedding comparison unavailable: %s", e)
        raise HTTPException(
            status_code=503,
            detail="Embedding model unavailable. Use keyword analysis instead.",
        )

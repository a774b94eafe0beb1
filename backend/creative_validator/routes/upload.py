"""
Upload Routes - analyze uploaded creatives into asset descriptors.
"""
from fastapi import APIRouter, UploadFile, File, HTTPException, Form
import structlog

from creative_validator.models import FileAsset, Html5ValidationResult
from creative_validator.services.analyzer import asset_analyzer
from creative_validator.services.html5_validator import archive_contains_markup, validate_html5_banner
from creative_validator.utils import MAX_UPLOAD_SIZE_BYTES, MAX_UPLOAD_SIZE_MB, get_file_kind

logger = structlog.get_logger()

router = APIRouter(prefix="/upload", tags=["Upload"])


async def _read_upload(file: UploadFile) -> bytes:
    content = await file.read()
    if len(content) > MAX_UPLOAD_SIZE_BYTES:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size: {MAX_UPLOAD_SIZE_MB}MB"
        )
    return content


@router.post("/analyze", response_model=FileAsset)
async def analyze_upload(
    file: UploadFile = File(...),
    folder_path: str = Form(default="")
):
    """
    Analyze one uploaded file.

    - Images: dimensions, size, format and color space
    - ZIP archives: validated as packaged HTML5 banners
    - Format tag and target network inferred from file and folder names
    """
    filename = file.filename or "upload"
    kind = get_file_kind(filename, file.content_type)
    if kind == "unknown":
        logger.warning("upload_rejected", filename=filename, content_type=file.content_type)
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type: {filename}. Allowed: JPG, PNG, GIF, WEBP, AVIF images and ZIP archives"
        )

    content = await _read_upload(file)

    if kind == "zip":
        if not archive_contains_markup(content):
            raise HTTPException(
                status_code=400,
                detail=f"{filename} is not an HTML5 banner archive (no HTML file found)"
            )
        return asset_analyzer.analyze_html5_archive(content, filename, folder_path)

    try:
        return asset_analyzer.analyze_image(content, filename, folder_path)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/html5", response_model=Html5ValidationResult)
async def validate_html5_upload(file: UploadFile = File(...)):
    """
    Validate a packaged HTML5 banner archive without building an asset.
    """
    filename = file.filename or "banner.zip"
    if get_file_kind(filename, file.content_type) != "zip":
        raise HTTPException(status_code=400, detail=f"Expected a ZIP archive, got {filename}")

    content = await _read_upload(file)
    return validate_html5_banner(content, filename)

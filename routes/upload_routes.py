from fastapi import APIRouter
from fastapi.responses import FileResponse
from core.exceptions import NotFound
from services.storage import resolve_image
from settings.config import settings
from utils.logger import get_logger

logger = get_logger("Upload_Route")
router = APIRouter(prefix=settings.UPLOAD_URL_PREFIX.rstrip("/"), tags=["Uploads"])

# Public: uploaded menu images, looked up in the current upload directory
@router.get("/{name}", include_in_schema=False)
async def serve_upload(name: str):
    path = resolve_image(name)
    if not path:
        logger.debug(f"Upload not found: {name}")
        raise NotFound("Image not found")
    return FileResponse(path)

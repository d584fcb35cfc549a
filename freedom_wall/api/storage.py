from fastapi import APIRouter, HTTPException, Request, status, UploadFile, File
import logging

from freedom_wall.config import settings
from freedom_wall.schemas.comment_schema import StoredObjectResponse
from freedom_wall.services.storage_service import StorageService, UploadTooLargeError
from freedom_wall.utils.rate_limit import limiter
from freedom_wall.utils.validation import CommentValidationError

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/{bucket}", response_model=StoredObjectResponse)
@limiter.limit(settings.UPLOAD_RATE_LIMIT)
async def upload_object(
    request: Request,
    bucket: str,
    file: UploadFile = File(...)
):
    """Upload an image under a generated unique name"""
    try:
        storage_service = StorageService()
        name = await storage_service.upload(bucket, file)

        return StoredObjectResponse(bucket=bucket, name=name)

    except FileNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except CommentValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except UploadTooLargeError as e:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=str(e)
        )
    except Exception as e:
        logger.error(f"Error uploading to {bucket}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to upload file"
        )

@router.get("/{bucket}/{name}/public-url", response_model=StoredObjectResponse)
async def get_public_url(bucket: str, name: str):
    """Resolve the public URL of a stored object"""
    try:
        storage_service = StorageService()
        public_url = storage_service.get_public_url(bucket, name)

        return StoredObjectResponse(bucket=bucket, name=name, public_url=public_url)

    except FileNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )

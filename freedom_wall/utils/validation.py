"""
Input rules shared by the API schemas and the board client.

The client runs these before any network call; the server runs the same
checks again through the pydantic schemas.
"""
from typing import Optional

from freedom_wall.config import settings


class CommentValidationError(ValueError):
    """Raised when user input is rejected before reaching the store"""
    pass


def validate_message(message: Optional[str]) -> str:
    """Return the message unchanged if it may be posted"""
    if message is None or not message.strip():
        raise CommentValidationError("Please enter a message")

    if len(message) > settings.MAX_MESSAGE_LENGTH:
        raise CommentValidationError(
            f"Message cannot exceed {settings.MAX_MESSAGE_LENGTH} characters"
        )

    return message


def validate_image_type(content_type: Optional[str]) -> str:
    """Only JPEG and PNG images may be attached"""
    if content_type not in settings.ALLOWED_IMAGE_TYPES:
        raise CommentValidationError("Please select a valid image file (JPEG or PNG)")
    return content_type

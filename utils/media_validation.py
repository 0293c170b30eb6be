"""Validation helpers for uploaded plant photos."""

from fastapi import HTTPException, UploadFile

from models.session_models import UploadedImage

DEFAULT_IMAGE_TYPE = "image/jpeg"

IMAGE_EXTENSIONS = (
    ".jpg",
    ".jpeg",
    ".png",
    ".webp",
    ".gif",
    ".bmp",
    ".heic",
)


def validate_image_file(image_file: UploadFile) -> str:
    """Validate the upload looks like an image and return its content type.

    Browsers normally send an `image/*` content type. When it is missing the
    filename extension is checked instead and JPEG is assumed.
    """
    if image_file.content_type and image_file.content_type != "application/octet-stream":
        content_type = image_file.content_type.lower().split(";", 1)[0].strip()
        if not content_type.startswith("image/"):
            raise HTTPException(status_code=415, detail=f"Unsupported image content type: {image_file.content_type}")
        return content_type

    filename = (image_file.filename or "").lower()
    if filename and not filename.endswith(IMAGE_EXTENSIONS):
        raise HTTPException(status_code=415, detail="Unsupported or missing image content type.")
    return DEFAULT_IMAGE_TYPE


async def read_image_upload(image_file: UploadFile) -> UploadedImage:
    """Read validated image bytes, ensuring the upload is not empty."""
    content_type = validate_image_file(image_file)
    data = await image_file.read()
    if not data:
        raise HTTPException(status_code=400, detail="Uploaded image file is empty.")
    return UploadedImage(
        filename=image_file.filename or "plant.jpg",
        content_type=content_type,
        data=data,
    )

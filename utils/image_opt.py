from PIL import Image, UnidentifiedImageError
from io import BytesIO
from django.core.files.uploadedfile import InMemoryUploadedFile
import uuid
from rest_framework.exceptions import ValidationError

MAX_SIZE = 10 * 1024 * 1024  # 10 MB
ALLOWED_TYPES = ['jpeg', 'png', 'gif', 'webp']


def detect_image_format(file):
    """
    Identifies the image format of an uploaded file by letting Pillow read
    its header. The file position is restored afterwards.

    Returns:
        str | None: Lower-case format name (e.g. 'jpeg', 'png') or None
        when the file is not a readable image.
    """
    position = file.tell() if hasattr(file, 'tell') else 0
    try:
        with Image.open(file) as img:
            fmt = img.format
    except (UnidentifiedImageError, OSError):
        fmt = None
    finally:
        file.seek(position)
    return fmt.lower() if fmt else None


def optimize_image(image):
    """
    Optimizes an image file for uploads:
      - Opens the image and converts it to RGB (PNG keeps its alpha channel).
      - Creates a thumbnail (max 1600x1600) using LANCZOS resampling.
      - Saves the image into an in-memory file with format specific settings.

    Raises:
        ValidationError: When the image cannot be opened or processed.
    """
    try:
        img = Image.open(image)
        img_format = (img.format or 'JPEG').lower()
        img = img.convert("RGBA" if img_format == 'png' else "RGB")
    except (UnidentifiedImageError, OSError) as e:
        raise ValidationError(f"Invalid image file: {str(e)}")

    img.thumbnail((1600, 1600), Image.Resampling.LANCZOS)
    buffer = BytesIO()

    if img_format == 'png':
        img.save(buffer, format='PNG', optimize=True)
    else:
        img.save(buffer, format='JPEG', quality=80, optimize=True)
        img_format = 'jpeg'

    buffer.seek(0)
    optimized_image = InMemoryUploadedFile(
        file=buffer,
        field_name='file',
        name=f"{uuid.uuid4().hex}.{img_format}",
        content_type=f'image/{img_format}',
        size=buffer.getbuffer().nbytes,
        charset=None
    )
    return optimized_image


def validate_uploaded_file(file):
    """
    Validates an uploaded image file without modifying it.

    Raises:
        ValidationError: If the file exceeds 10 MB or is not an allowed image type.
    """
    if file.size > MAX_SIZE:
        raise ValidationError("File size should not exceed 10 MB.")

    fmt = detect_image_format(file)
    if fmt not in ALLOWED_TYPES:
        raise ValidationError("Unsupported file type. Please use jpeg, png, gif or webp.")
    return fmt


def process_uploaded_file(file):
    """
    Validates and optimizes an uploaded image file. GIF and WebP files are
    stored as uploaded so animations survive.
    """
    fmt = validate_uploaded_file(file)
    if fmt in ('gif', 'webp'):
        return file
    return optimize_image(file)

"""Image preparation before upload to the analysis service."""

import io

# Document Intelligence rejects images larger than this on either side
MAX_IMAGE_DIMENSION = 10000


def prepare_image_bytes(image_bytes: bytes, max_dimension: int = MAX_IMAGE_DIMENSION) -> bytes:
    """
    Downscale image bytes if either dimension exceeds max_dimension.

    Args:
        image_bytes: Image data as bytes
        max_dimension: Maximum allowed dimension (width or height)

    Returns:
        The original bytes when the image already fits, otherwise a
        resized JPEG
    """
    from PIL import Image, ImageOps

    img = Image.open(io.BytesIO(image_bytes))
    width, height = img.size
    if width <= max_dimension and height <= max_dimension:
        return image_bytes

    # Apply EXIF orientation so the service sees the upright receipt
    img = ImageOps.exif_transpose(img)
    width, height = img.size

    if width > height:
        new_width = max_dimension
        new_height = max(1, int(height * (max_dimension / width)))
    else:
        new_height = max_dimension
        new_width = max(1, int(width * (max_dimension / height)))

    img_final = img.resize((new_width, new_height), Image.Resampling.LANCZOS)
    if img_final.mode != "RGB":
        img_final = img_final.convert("RGB")

    output = io.BytesIO()
    img_final.save(output, format="JPEG", quality=95)
    return output.getvalue()

"""Pure OCR transformation helpers: image preparation and detections -> raw text."""

import io
from typing import Any

MAX_IMAGE_DIMENSION = 2500  # Downscale if either dimension exceeds this
OCR_IMAGE_PADDING = 40  # White border so edge characters are not truncated
MIN_DETECTION_CONFIDENCE = 0.5


def prepare_image_bytes(
    image_bytes: bytes,
    max_dimension: int = MAX_IMAGE_DIMENSION,
    padding: int = OCR_IMAGE_PADDING,
) -> bytes:
    """
    Prepare a receipt photo for OCR.

    Applies EXIF orientation, downscales so the longest side is at most
    max_dimension, converts to grayscale and adds a white border.

    Returns:
        JPEG bytes
    """
    from PIL import Image, ImageOps

    img = Image.open(io.BytesIO(image_bytes))
    # Phone photos carry rotation in EXIF; OCR needs upright pixels.
    img = ImageOps.exif_transpose(img)

    if max(img.size) > max_dimension:
        img.thumbnail((max_dimension, max_dimension), Image.Resampling.LANCZOS)

    img = ImageOps.grayscale(img)
    if padding > 0:
        img = ImageOps.expand(img, border=padding, fill=255)

    buffer = io.BytesIO()
    img.save(buffer, format="JPEG", quality=92)
    return buffer.getvalue()


def _detection_geometry(detection: Any) -> dict[str, Any] | None:
    """Unpack a [bbox, [text, confidence]] detection into text plus box extents."""
    try:
        bbox, (text, confidence) = detection
    except (TypeError, ValueError):
        return None
    text = str(text).strip()
    if not text or float(confidence) < MIN_DETECTION_CONFIDENCE:
        return None
    xs = [float(point[0]) for point in bbox]
    ys = [float(point[1]) for point in bbox]
    return {
        "text": text,
        "min_x": min(xs),
        "y_min": min(ys),
        "y_max": max(ys),
        "center_y": sum(ys) / len(ys),
    }


def _group_into_rows(boxes: list[dict[str, Any]]) -> list[list[dict[str, Any]]]:
    """Group word boxes into printed rows by vertical center distance."""
    if not boxes:
        return []
    heights = sorted(box["y_max"] - box["y_min"] for box in boxes)
    # Half the median glyph height keeps adjacent receipt rows apart.
    threshold = max(heights[len(heights) // 2] * 0.5, 1.0)

    rows: list[list[dict[str, Any]]] = []
    for box in sorted(boxes, key=lambda b: b["center_y"]):
        if rows:
            row = rows[-1]
            row_center = sum(b["center_y"] for b in row) / len(row)
            if abs(box["center_y"] - row_center) <= threshold:
                row.append(box)
                continue
        rows.append([box])

    for row in rows:
        row.sort(key=lambda b: b["min_x"])
    return rows


def ocr_result_to_text(ocr_result: dict[str, Any]) -> str:
    """
    Turn an OCR service response into raw receipt text.

    Accepts a plain text response ("text" or "full_text") or a detection
    list ("detections": [[bbox, [text, confidence]], ...]) whose boxes are
    regrouped into left-to-right rows.
    """
    for key in ("text", "full_text"):
        text = ocr_result.get(key)
        if isinstance(text, str) and text.strip():
            return text

    boxes = []
    for detection in ocr_result.get("detections", []):
        geometry = _detection_geometry(detection)
        if geometry is not None:
            boxes.append(geometry)

    rows = _group_into_rows(boxes)
    return "\n".join(" ".join(box["text"] for box in row) for row in rows)

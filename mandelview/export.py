"""Writing presented frames to image files."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import PIL.Image

DEFAULT_SNAPSHOT_NAME = "mandelbrot.png"


def pil_format_name(ext: str) -> str:
    upper = ext.upper().lstrip(".")
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def write_snapshot(
    image: PIL.Image.Image,
    output_path: Path | str = DEFAULT_SNAPSHOT_NAME,
    image_format: Optional[str] = None,
) -> Path:
    """Write ``image`` to ``output_path`` and return the resolved path.

    Without ``image_format`` the format follows the file suffix, and a path
    without a suffix gets ``.png``.
    """

    output_path = Path(output_path).expanduser()
    if image_format is None:
        if not output_path.suffix:
            output_path = output_path.with_suffix(".png")
        image_format = output_path.suffix
    pil_format = pil_format_name(image_format)

    # JPEG has no alpha channel
    if pil_format == "JPEG" and image.mode != "RGB":
        image = image.convert("RGB")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(str(output_path), format=pil_format)
    return output_path.resolve()

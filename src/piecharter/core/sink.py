"""Write rendered images to the output directory."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .errors import SinkError
from .models import RenderedImage

logger = logging.getLogger(__name__)

_SEPARATORS = {os.sep, "/", "\\"} | ({os.altsep} if os.altsep else set())


def image_filename(row_id: str, ext: str = "png") -> str:
    """``<row_id>.<ext>`` with path separators replaced by ``_``."""
    safe = "".join("_" if c in _SEPARATORS else c for c in row_id)
    if safe in {".", ".."}:
        safe = safe.replace(".", "_")
    return f"{safe}.{ext}"


class ImageSink:
    """Persist ``RenderedImage`` buffers as ``<output_dir>/<row_id>.<format>``."""

    def __init__(self, output_dir: str | Path) -> None:
        self.output_dir = Path(output_dir)

    def path_for(self, row_id: str, image: RenderedImage | None = None) -> Path:
        ext = image.format if image is not None else "png"
        return self.output_dir / image_filename(row_id, ext)

    def write(self, row_id: str, image: RenderedImage) -> Path:
        path = self.path_for(row_id, image)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(image.data)
        except (OSError, ValueError) as exc:  # ValueError: NUL byte in the id
            raise SinkError(
                f"Cannot write {path}: {exc}",
                context={"row_id": row_id, "path": str(path)},
            ) from exc
        logger.debug("Wrote %d bytes to %s", len(image.data), path)
        return path

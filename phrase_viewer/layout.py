# layout.py
import math

from phrase_viewer.config import PAGE_MARGIN, MIN_SCALE
from phrase_viewer.logger import logger


def fit_to_width_scale(page_width: float, container_width: float,
                       margin: float = PAGE_MARGIN, min_scale: float = MIN_SCALE) -> float:
    """
    Returns the scale that fits a page of ``page_width`` (at scale 1.0) into
    ``container_width`` minus ``margin``. Results below ``min_scale``
    (including zero and negative ones) and non-finite results are clamped to
    ``min_scale``.
    """
    if page_width <= 0:
        raise ValueError(f"Page width must be positive, got {page_width}")

    scale = (container_width - margin) / page_width
    if not math.isfinite(scale) or scale < min_scale:
        logger.warning(
            "Container width %s too small for page width %s (scale %.4f), clamping to %s",
            container_width, page_width, scale, min_scale)
        return min_scale
    return scale

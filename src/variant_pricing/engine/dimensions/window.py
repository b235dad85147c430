from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from variant_pricing.util.logging import get_logger, log_event

WIDTH_KEY = "window_width"
HEIGHT_KEY = "window_height"

logger = get_logger("variant_pricing.dimensions")


def _to_decimal(value: Any) -> Optional[Decimal]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, Decimal):
        parsed = value
    elif isinstance(value, (int, float, str)):
        try:
            parsed = Decimal(str(value).strip())
        except InvalidOperation:
            return None
    else:
        return None
    if not parsed.is_finite():
        return None
    return parsed


@dataclass(frozen=True)
class WindowDimensions:
    """Custom width and height a dimensional line item or price is defined for."""

    width: Decimal
    height: Decimal

    @classmethod
    def from_metadata(cls, metadata: Optional[Mapping[str, Any]]) -> Optional["WindowDimensions"]:
        """Read the window size from free-form metadata.

        Both keys must be present and truthy; a zero, empty or non-numeric
        value on either side means the item is not dimensional.
        """
        if not metadata:
            return None
        raw_width = metadata.get(WIDTH_KEY)
        raw_height = metadata.get(HEIGHT_KEY)
        if not raw_width or not raw_height:
            return None
        width = _to_decimal(raw_width)
        height = _to_decimal(raw_height)
        if width is None or height is None or not width or not height:
            log_event(
                logger,
                "window_metadata_invalid",
                level=logging.DEBUG,
                window_width=raw_width,
                window_height=raw_height,
            )
            return None
        return cls(width=width, height=height)


def is_dimensional(metadata: Optional[Mapping[str, Any]]) -> bool:
    return WindowDimensions.from_metadata(metadata) is not None


def fits(requested: WindowDimensions, candidate: WindowDimensions) -> bool:
    """A candidate fits when none of its dimensions exceed the requested ones."""
    return requested.height >= candidate.height and requested.width >= candidate.width


def covers(candidate: WindowDimensions, current: WindowDimensions) -> bool:
    return candidate.width >= current.width and candidate.height >= current.height

"""Base classes for output format plugins."""

from abc import ABC, abstractmethod
from typing import Optional

from ..models import EmissionUnit
from ..tokens.grouping import SegmentCache


class TokenFormat(ABC):
    """Contract for formats that render one emission unit to source text."""

    name: str = ""
    build_subdir: str = ""

    @abstractmethod
    def render(self, unit: EmissionUnit, cache: Optional[SegmentCache] = None) -> str:
        """Return the complete source text for ``unit`` without touching disk."""

"""Base extractor interface."""

import abc
import logging
from pathlib import Path

from commitscope.models import LineChange

logger = logging.getLogger(__name__)


class BaseExtractor(abc.ABC):
    """Base class for all line-change extractors."""

    def __init__(self, source_path: Path) -> None:
        self.source_path = source_path

    @abc.abstractmethod
    def extract(self) -> list[LineChange]:
        """Extract line-change rows from the source.

        Returns:
            Rows in source order. Grouping into commits relies on this order.
        """
        ...

    @property
    def source_name(self) -> str:
        return self.source_path.name

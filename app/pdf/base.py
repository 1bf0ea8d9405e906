from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class PdfPreview:
    """Plain-text rendering of the first pages of a PDF statement."""

    text: str
    page_count: int
    pages_shown: int

    @property
    def truncated(self) -> bool:
        return self.pages_shown < self.page_count


class BasePdfPreviewer(ABC):
    """Contract for all PDF preview adapters."""

    def __init__(self, max_pages: int | None = None) -> None:
        self._max_pages = max_pages

    @abstractmethod
    def preview(self, pdf_bytes: bytes) -> PdfPreview:
        """Extract text from at most ``max_pages`` pages of a PDF.

        Raises:
            PdfPreviewError: if the bytes are not a readable PDF.
        """

    def _limit(self, page_count: int) -> int:
        if self._max_pages is None:
            return page_count
        return min(page_count, self._max_pages)

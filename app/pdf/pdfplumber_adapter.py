import io

import pdfplumber

from app.pdf.base import BasePdfPreviewer, PdfPreview
from app.pdf.exceptions import PdfPreviewError


class PdfPlumberAdapter(BasePdfPreviewer):
    """Renders a PDF preview using pdfplumber."""

    def preview(self, pdf_bytes: bytes) -> PdfPreview:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                page_count = len(pdf.pages)
                shown = self._limit(page_count)
                pages = [page.extract_text() or "" for page in pdf.pages[:shown]]
        except Exception as exc:
            raise PdfPreviewError(f"pdfplumber could not read the statement: {exc}") from exc
        return PdfPreview(
            text="\n".join(pages).strip(),
            page_count=page_count,
            pages_shown=shown,
        )

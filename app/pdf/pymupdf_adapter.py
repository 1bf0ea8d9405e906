import pymupdf

from app.pdf.base import BasePdfPreviewer, PdfPreview
from app.pdf.exceptions import PdfPreviewError


class PyMuPdfAdapter(BasePdfPreviewer):
    """Renders a PDF preview using PyMuPDF."""

    def preview(self, pdf_bytes: bytes) -> PdfPreview:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                page_count = doc.page_count
                shown = self._limit(page_count)
                pages = [doc[index].get_text() for index in range(shown)]
        except Exception as exc:
            raise PdfPreviewError(f"pymupdf could not read the statement: {exc}") from exc
        return PdfPreview(
            text="\n".join(pages).strip(),
            page_count=page_count,
            pages_shown=shown,
        )

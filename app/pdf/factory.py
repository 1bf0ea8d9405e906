from app.config.settings import Settings
from app.pdf.base import BasePdfPreviewer
from app.pdf.pdfplumber_adapter import PdfPlumberAdapter
from app.pdf.pymupdf_adapter import PyMuPdfAdapter


class PdfPreviewerFactory:
    """Creates the PDF previewer selected by ``pdf_engine``."""

    ADAPTERS: dict[str, type[BasePdfPreviewer]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings, max_pages: int | None = None) -> BasePdfPreviewer:
        engine = settings.pdf_engine.lower()
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls(max_pages=max_pages)

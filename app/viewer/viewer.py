import asyncio
from dataclasses import dataclass

from app.analyzer.client import AnalyzerClient
from app.documents.exceptions import FormatError
from app.documents.models import Document
from app.lifecycle.resolver import SecureFileResolver
from app.logging.logger import Log
from app.pdf.base import BasePdfPreviewer, PdfPreview
from app.pdf.exceptions import PdfPreviewError
from app.viewer.tabular import TabularData, parse


@dataclass(frozen=True)
class ViewState:
    """What the viewer shows for one open document. Discarded on close."""

    document: Document
    access_url: str
    table: TabularData | None = None
    pdf_preview: PdfPreview | None = None


class DocumentViewer:
    """Resolves a document's file, downloads it and renders it locally."""

    def __init__(
        self,
        resolver: SecureFileResolver,
        analyzer: AnalyzerClient,
        pdf_previewer: BasePdfPreviewer,
    ) -> None:
        self._resolver = resolver
        self._analyzer = analyzer
        self._pdf_previewer = pdf_previewer

    async def open(self, document: Document) -> ViewState:
        """Build the view for a document.

        Raises:
            AuthError, ResolveError: if the access URL cannot be obtained.
            RemoteError: if the download fails.
            FormatError: if the file content cannot be rendered.
        """
        url = await self._resolver.resolve(document)
        data = await self._analyzer.fetch_file(url)
        Log.debug("Downloaded file for viewing", document_id=document.id, size=len(data))

        if document.is_tabular:
            table = parse(data.decode("utf-8-sig", errors="replace"))
            return ViewState(document=document, access_url=url, table=table)

        try:
            preview = await asyncio.to_thread(self._pdf_previewer.preview, data)
        except PdfPreviewError as exc:
            raise FormatError(f"Could not render {document.file_name}: {exc}") from exc
        return ViewState(document=document, access_url=url, pdf_preview=preview)

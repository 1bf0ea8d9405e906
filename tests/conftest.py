import io
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from app.documents.models import Document, DocumentStatus

DocumentFactory = Callable[..., Document]


@pytest.fixture()
def make_document() -> DocumentFactory:
    """Factory for Document records with sensible defaults."""

    def _make(
        document_id: str = "doc-1",
        status: DocumentStatus = DocumentStatus.DONE,
        **overrides: Any,
    ) -> Document:
        values: dict[str, Any] = {
            "id": document_id,
            "user_id": "user-1",
            "file_name": f"{document_id}.pdf",
            "file_reference": f"user-1/{document_id}.pdf",
            "status": status,
            "upload_timestamp": datetime(2024, 5, 1, 12, 0, tzinfo=UTC),
        }
        values.update(overrides)
        return Document(**values)

    return _make


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Monthly Statement")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a three-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    for number in ("one", "two", "three"):
        c.drawString(72, 720, f"Page {number} content")
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()

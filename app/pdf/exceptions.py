class PdfPreviewError(Exception):
    """Raised when text cannot be extracted from a PDF statement."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from app.documents.models import Document, DocumentStatus
from app.documents.result_decoder import decode_analysis_result


@dataclass
class DocumentRow:
    """Represents a row from the documents table."""

    id: str
    user_id: str
    file_name: str
    file_url: str
    status: str
    upload_date: datetime
    processed_at: datetime | None = None
    error_message: str | None = None
    analysis_results: Any = None

    @classmethod
    def from_mapping(cls, row: dict[str, Any]) -> "DocumentRow":
        return cls(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            file_name=row["file_name"],
            file_url=row["file_url"],
            status=row["status"],
            upload_date=row["upload_date"],
            processed_at=row.get("processed_at"),
            error_message=row.get("error_message"),
            analysis_results=row.get("analysis_results"),
        )

    def to_document(self) -> Document:
        status = DocumentStatus(self.status)
        result = (
            decode_analysis_result(self.analysis_results)
            if status is DocumentStatus.DONE
            else None
        )
        return Document(
            id=self.id,
            user_id=self.user_id,
            file_name=self.file_name,
            file_reference=self.file_url,
            status=status,
            upload_timestamp=self.upload_date,
            processed_timestamp=self.processed_at,
            error_message=self.error_message,
            analysis_result=result,
        )

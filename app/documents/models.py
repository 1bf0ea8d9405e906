from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class DocumentStatus(str, Enum):
    """Lifecycle status of an uploaded statement."""

    PENDING = "pending"
    PROCESSING = "processing"
    DONE = "done"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (DocumentStatus.DONE, DocumentStatus.ERROR)

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]


_STATUS_LABELS = {
    DocumentStatus.PENDING: "Pending",
    DocumentStatus.PROCESSING: "Processing",
    DocumentStatus.DONE: "Processed",
    DocumentStatus.ERROR: "Error",
}


@dataclass(frozen=True)
class Mismatch:
    """A single fee line whose charged amount differs from the expected one."""

    label: str
    volume: float
    unit_price: float
    expected_amount: float
    actual_amount: float
    delta: float


@dataclass(frozen=True)
class AnalysisResult:
    """Output of the analyzer service for one statement."""

    total_records: int
    mismatch_count: int
    mismatch_rate: float
    mismatches: list[Mismatch] = field(default_factory=list)


@dataclass(frozen=True)
class Document:
    """A bank statement record as known to the client.

    ``file_reference`` holds the opaque storage path ``{user_id}/{id}.{ext}``.
    Signed URLs live only in view state and never end up here.
    """

    id: str
    user_id: str
    file_name: str
    file_reference: str
    status: DocumentStatus
    upload_timestamp: datetime
    processed_timestamp: datetime | None = None
    error_message: str | None = None
    analysis_result: AnalysisResult | None = None

    @property
    def extension(self) -> str:
        _, dot, ext = self.file_reference.rpartition(".")
        return ext.lower() if dot else ""

    @property
    def is_tabular(self) -> bool:
        return self.extension == "csv" or self.file_name.lower().endswith(".csv")

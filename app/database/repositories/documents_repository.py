import psycopg
from psycopg.rows import dict_row

from app.database.connection import get_connection
from app.database.models import DocumentRow
from app.documents.exceptions import NotFoundError, PersistenceError
from app.documents.models import Document
from app.logging.logger import Log

_COLUMNS = """
    id, user_id, file_name, file_url, status, upload_date,
    processed_at, error_message, analysis_results
"""


class DocumentsRepository:
    """Registry operations for the documents table, scoped to one owner."""

    def __init__(self, owner_id: str) -> None:
        self._owner_id = owner_id

    @property
    def owner_id(self) -> str:
        return self._owner_id

    async def list(self) -> list[Document]:
        """Return the owner's documents, newest upload first.

        Raises:
            PersistenceError: if the query fails or a row cannot be mapped.
        """
        try:
            async with get_connection() as conn:
                async with conn.cursor(row_factory=dict_row) as cur:
                    await cur.execute(
                        f"""
                        SELECT {_COLUMNS}
                        FROM documents
                        WHERE user_id = %s
                        ORDER BY upload_date DESC
                        """,
                        (self._owner_id,),
                    )
                    rows = await cur.fetchall()
        except psycopg.Error as exc:
            raise PersistenceError(f"Failed to list documents: {exc}") from exc

        documents: list[Document] = []
        for row in rows:
            try:
                documents.append(DocumentRow.from_mapping(row).to_document())
            except KeyError as exc:
                raise PersistenceError(f"Unexpected document row: missing {exc}") from exc
            except ValueError as exc:
                # Rows with an unknown status are skipped, not fatal.
                Log.warning(f"Skipping document row {row.get('id')}: {exc}")
        return documents

    async def insert(self, document: Document) -> Document:
        """Insert a new document row and return it as persisted.

        Raises:
            PersistenceError: if the insert fails.
        """
        try:
            async with get_connection() as conn:
                async with conn.cursor(row_factory=dict_row) as cur:
                    await cur.execute(
                        f"""
                        INSERT INTO documents
                        (id, user_id, file_name, file_url, status, upload_date)
                        VALUES (%s::uuid, %s, %s, %s, %s, %s)
                        RETURNING {_COLUMNS}
                        """,
                        (
                            document.id,
                            self._owner_id,
                            document.file_name,
                            document.file_reference,
                            document.status.value,
                            document.upload_timestamp,
                        ),
                    )
                    row = await cur.fetchone()
                await conn.commit()
        except psycopg.Error as exc:
            raise PersistenceError(f"Failed to insert document {document.id}: {exc}") from exc

        if row is None:
            raise PersistenceError(f"Insert of document {document.id} returned no row")
        return DocumentRow.from_mapping(row).to_document()

    async def delete(self, document_id: str) -> None:
        """Delete one of the owner's documents.

        Raises:
            NotFoundError: if no such document exists for this owner.
            PersistenceError: if the delete fails.
        """
        try:
            async with get_connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(
                        "DELETE FROM documents WHERE id = %s::uuid AND user_id = %s",
                        (document_id, self._owner_id),
                    )
                    deleted = cur.rowcount
                await conn.commit()
        except psycopg.Error as exc:
            raise PersistenceError(f"Failed to delete document {document_id}: {exc}") from exc

        if deleted == 0:
            raise NotFoundError(f"Document {document_id} not found")

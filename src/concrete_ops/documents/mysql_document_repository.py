from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import DocumentType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import JobDocument
from .repository import DocumentRepository


def _to_document(r: dict) -> JobDocument:
    content = r.get("content")
    return JobDocument(
        document_id=int(r["document_id"]),
        job_id=int(r["job_id"]),
        doc_type=DocumentType(r["doc_type"]),
        file_name=r["file_name"],
        signer_name=r.get("signer_name"),
        created_by=r.get("created_by"),
        created_at=r.get("created_at"),
        content=bytes(content) if content is not None else None,
    )


class MySQLDocumentRepository(DocumentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        job_id: int,
        doc_type: DocumentType,
        file_name: str,
        content: bytes,
        signer_name: Optional[str],
        created_by: int,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO job_documents(job_id, doc_type, file_name, content, signer_name, created_by)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(job_id), doc_type.value, file_name, content, signer_name, int(created_by)),
            )
            return int(cur.lastrowid)

    def get_by_id(self, document_id: int) -> Optional[JobDocument]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM job_documents WHERE document_id=%s", (int(document_id),))
            r = fetchone(cur)
            return _to_document(r) if r else None

    def list_for_job(self, job_id: int) -> Sequence[JobDocument]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT document_id, job_id, doc_type, file_name, signer_name, created_by, created_at
                FROM job_documents
                WHERE job_id=%s
                ORDER BY created_at DESC, document_id DESC
                """,
                (int(job_id),),
            )
            return [_to_document(r) for r in fetchall(cur)]

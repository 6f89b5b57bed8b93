from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import DocumentType
from .model import JobDocument


class DocumentRepository(Protocol):
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
        raise NotImplementedError

    def get_by_id(self, document_id: int) -> Optional[JobDocument]:
        """Includes the PDF bytes."""
        raise NotImplementedError

    def list_for_job(self, job_id: int) -> Sequence[JobDocument]:
        raise NotImplementedError

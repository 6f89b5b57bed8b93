from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import iso
from ..core.enums import DocumentType


@dataclass(frozen=True)
class JobDocument:
    """A generated PDF kept with its job. `content` is not loaded for list queries."""

    document_id: int
    job_id: int
    doc_type: DocumentType
    file_name: str
    signer_name: Optional[str] = None
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    content: Optional[bytes] = None

    def to_dict(self) -> dict:
        return {
            "id": self.document_id,
            "job_id": self.job_id,
            "doc_type": self.doc_type.value,
            "file_name": self.file_name,
            "signer_name": self.signer_name,
            "created_by": self.created_by,
            "created_at": iso(self.created_at),
        }

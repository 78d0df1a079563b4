from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, TypeVar

from pydantic import BaseModel, ConfigDict, PlainSerializer

from caseflow.store.base import Document, encode_timestamp

# Datetimes leave the process as fixed-width UTC strings (see store.base).
UtcDatetime = Annotated[
    datetime, PlainSerializer(encode_timestamp, return_type=str, when_used="json")
]

_M = TypeVar("_M", bound="DocumentModel")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentModel(BaseModel):
    """A pydantic view over one stored document."""

    model_config = ConfigDict(extra="ignore")

    id: str

    @classmethod
    def from_document(cls: type[_M], doc: Document) -> _M:
        return cls.model_validate(doc.as_record())

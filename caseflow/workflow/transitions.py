"""
Transition tables for every workflow entity.

Validity of a status change is decided here and nowhere else. Services ask
the machine for the target state before they touch the store.
"""
from __future__ import annotations

import enum
from collections.abc import Mapping
from typing import Generic, TypeVar

from caseflow.models.enums import (
    ModerationAction,
    ReportStatus,
    VerificationAction,
    VerificationStatus,
)
from caseflow.workflow.errors import InvalidStateError

S = TypeVar("S", bound=enum.Enum)
A = TypeVar("A", bound=enum.Enum)


class StateMachine(Generic[S, A]):
    def __init__(self, entity: str, table: Mapping[tuple[S, A], S]) -> None:
        self.entity = entity
        self._table = dict(table)

    def next_state(self, current: S, action: A, *, entity_id: str = "") -> S:
        try:
            return self._table[(current, action)]
        except KeyError:
            raise InvalidStateError(
                self.entity, entity_id, current.value, action.value
            ) from None


VERIFICATION: StateMachine[VerificationStatus, VerificationAction] = StateMachine(
    "verification request",
    {
        (VerificationStatus.PENDING, VerificationAction.APPROVE): VerificationStatus.APPROVED,
        (VerificationStatus.PENDING, VerificationAction.REJECT): VerificationStatus.REJECTED,
    },
)

MODERATION: StateMachine[ReportStatus, ModerationAction] = StateMachine(
    "report",
    {
        (ReportStatus.PENDING, ModerationAction.REVIEWED): ReportStatus.REVIEWED,
        (ReportStatus.PENDING, ModerationAction.REMOVED): ReportStatus.REMOVED,
    },
)

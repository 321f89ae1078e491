"""Verdict and decision record models.

A verdict is the per-item outcome of the decision function. Decision
records are what the engine hands to the transfer scheduler once
ancestor folders have been materialized.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class MatchReason(str, Enum):
    """Why an item was accepted.

    Attributes:
        SELF_MATCHED: The item passed every configured filter itself.
        ANCESTOR_OF_MATCH: The folder failed its own test but contains
            at least one accepted descendant.
    """

    SELF_MATCHED = "self_matched"
    ANCESTOR_OF_MATCH = "ancestor_of_match"


class RejectReason(str, Enum):
    """Why an item was rejected.

    Attributes:
        OUT_OF_SCOPE: Outside the configured remove scope.
        TOO_DEEP: Below the top level of a non-recursive job.
        EXCLUDED_BY_PATH: Matched an exclude-path entry.
        EXCLUDED_BY_PATTERN: Basename matched an exclude-pattern entry.
        NOT_INCLUDED: Failed at least one configured include filter.
    """

    OUT_OF_SCOPE = "out_of_scope"
    TOO_DEEP = "too_deep"
    EXCLUDED_BY_PATH = "excluded_by_path"
    EXCLUDED_BY_PATTERN = "excluded_by_pattern"
    NOT_INCLUDED = "not_included"

    @property
    def is_unconditional(self) -> bool:
        """Whether every descendant of a folder rejected for this reason is rejected too.

        Basename and include checks do not carry over to descendants, so
        folders rejected by them can still be revived as ancestors.
        """
        return self in _INHERITED_REJECTIONS


_INHERITED_REJECTIONS = frozenset(
    {RejectReason.OUT_OF_SCOPE, RejectReason.TOO_DEEP, RejectReason.EXCLUDED_BY_PATH}
)


@dataclass(frozen=True, slots=True)
class Verdict:
    """Outcome of evaluating one item against a filter set.

    Attributes:
        accepted: Whether the item is forwarded into the job.
        reason: Match reason for accepted items, None otherwise.
        rejection: Reject reason for rejected items, None otherwise.
    """

    accepted: bool
    reason: MatchReason | None = None
    rejection: RejectReason | None = None

    def __post_init__(self) -> None:
        """Validate that exactly the matching reason field is populated."""
        if self.accepted and (self.reason is None or self.rejection is not None):
            msg = "Accepted verdicts need a match reason and no reject reason"
            raise ValueError(msg)
        if not self.accepted and (self.rejection is None or self.reason is not None):
            msg = "Rejected verdicts need a reject reason and no match reason"
            raise ValueError(msg)

    @classmethod
    def accept(cls, reason: MatchReason = MatchReason.SELF_MATCHED) -> "Verdict":
        return cls(accepted=True, reason=reason)

    @classmethod
    def reject(cls, rejection: RejectReason) -> "Verdict":
        return cls(accepted=False, rejection=rejection)


@dataclass(frozen=True, slots=True)
class DecisionRecord:
    """A single entry of the transfer plan handed to the scheduler.

    Accepted folder records are directory-create instructions, accepted
    file records are transfer instructions, and rejected records are
    informational only.

    Attributes:
        path: Relative path joined with ``/`` ("" for the root).
        is_folder: Whether the entry is a folder.
        accepted: Whether the entry takes part in the job.
        reason: MatchReason when accepted, RejectReason otherwise.
    """

    path: str
    is_folder: bool
    accepted: bool
    reason: MatchReason | RejectReason

    @property
    def is_folder_create(self) -> bool:
        return self.accepted and self.is_folder

    @property
    def is_transfer(self) -> bool:
        return self.accepted and not self.is_folder

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "path": self.path,
            "is_folder": self.is_folder,
            "accepted": self.accepted,
            "reason": self.reason.value,
        }

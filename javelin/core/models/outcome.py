"""
ItemOutcome and StageReport — what happened to each target file.

Every stage that works file by file records one outcome per file.
A failed outcome is not an exception: the stage logged it and went on
with the next file. Only fatal errors stop the pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class ItemOutcome(BaseModel):
    """Result of processing one target file in one stage."""

    item: str
    stage: str
    status: Literal["ok", "skipped", "failed"] = "ok"
    detail: str = ""
    at: str = Field(default_factory=_now_iso)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(cls, item: str, stage: str, detail: str = "", **kwargs: Any) -> ItemOutcome:
        return cls(item=item, stage=stage, status="ok", detail=detail, **kwargs)

    @classmethod
    def failure(cls, item: str, stage: str, detail: str, **kwargs: Any) -> ItemOutcome:
        return cls(item=item, stage=stage, status="failed", detail=detail, **kwargs)

    @classmethod
    def skip(cls, item: str, stage: str, detail: str = "", **kwargs: Any) -> ItemOutcome:
        return cls(item=item, stage=stage, status="skipped", detail=detail, **kwargs)


@dataclass
class StageReport:
    """Ordered outcomes of one pipeline stage."""

    stage: str = ""
    outcomes: list[ItemOutcome] = field(default_factory=list)

    def add(self, outcome: ItemOutcome) -> ItemOutcome:
        self.outcomes.append(outcome)
        return outcome

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.failed)

    @property
    def skipped(self) -> int:
        return sum(1 for o in self.outcomes if o.status == "skipped")

    @property
    def ok_items(self) -> list[str]:
        """Items that completed successfully, in processing order."""
        return [o.item for o in self.outcomes if o.ok]

    def to_dict(self) -> dict:
        return {
            "stage": self.stage,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "skipped": self.skipped,
            "outcomes": [o.model_dump(mode="json") for o in self.outcomes],
        }

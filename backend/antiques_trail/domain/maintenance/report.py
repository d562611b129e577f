from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ...core.logging import get_logger
from ...db.models.place import Place

logger = get_logger(__name__)


@dataclass
class MaintenanceReport:
    """What a maintenance command changed (or would change) and what it could not fix."""

    command: str
    dry_run: bool = False
    examined: int = 0
    changes: list[dict[str, Any]] = field(default_factory=list)
    problems: list[dict[str, Any]] = field(default_factory=list)

    def change(self, place: Place, **details: Any) -> None:
        self.changes.append({"place_id": place.id, "name": place.name, **details})

    def problem(self, place: Place, reason: str, **details: Any) -> None:
        self.problems.append({"place_id": place.id, "name": place.name, "reason": reason, **details})

    def log(self) -> None:
        logger.info(
            "maintenance_finished",
            extra={
                "command": self.command,
                "dry_run": self.dry_run,
                "examined": self.examined,
                "changes": len(self.changes),
                "problems": len(self.problems),
            },
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "command": self.command,
            "dry_run": self.dry_run,
            "examined": self.examined,
            "changes": self.changes,
            "problems": self.problems,
        }

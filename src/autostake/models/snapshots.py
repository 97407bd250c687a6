"""Snapshot models handed to the presentation layer."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from autostake.models.records import AllowanceCheck, Package
from autostake.models.session import SessionSnapshot


@dataclass
class ClientSnapshot:
    """Everything a UI needs to render after a user action or notification."""

    session: SessionSnapshot
    packages: list[Package] = field(default_factory=list)
    selected: Package | None = None
    allowance: AllowanceCheck | None = None
    referral_link: str | None = None
    message: str | None = None
    error: bool = False
    busy: bool = False
    reload_required: bool = False

    @property
    def can_buy(self) -> bool:
        return (
            self.session.ready
            and self.selected is not None
            and self.selected.active
            and not self.busy
        )

    @property
    def approve_needed(self) -> bool:
        return self.allowance is not None and not self.allowance.sufficient

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

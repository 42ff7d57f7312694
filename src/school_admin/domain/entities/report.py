from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from school_admin.domain.entities.school import School


class AggregateReport(BaseModel):
    """
    Read-only dashboard snapshot, computed per request and never stored.
    """

    model_config = ConfigDict(frozen=True)

    total_schools: int
    active_schools: int
    inactive_schools: int
    schools_with_contacts: int
    schools_with_addresses: int
    data_completeness_percentage: int
    schools_by_type: dict[str, int] = Field(default_factory=dict)
    schools_by_board: dict[str, int] = Field(default_factory=dict)
    recent_schools: tuple[School, ...] = ()

    def to_payload(self) -> dict[str, Any]:
        return {
            "stats": {
                "total_schools": self.total_schools,
                "active_schools": self.active_schools,
                "inactive_schools": self.inactive_schools,
                "schools_with_contacts": self.schools_with_contacts,
                "schools_with_addresses": self.schools_with_addresses,
                "data_completeness_percentage": self.data_completeness_percentage,
            },
            "charts": {
                "schools_by_type": dict(self.schools_by_type),
                "schools_by_board": dict(self.schools_by_board),
            },
            "recent_schools": [s.model_dump(mode="json") for s in self.recent_schools],
        }

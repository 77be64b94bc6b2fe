"""Rule catalog data model: jurisdictions, requirement rules and triggers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from rezio.core.rules.zoning import ZoningDistrict

AttributeValue = Union[int, float, str, bool]
ProjectAttributes = dict[str, AttributeValue]


class Operator(str, Enum):
    GREATER_THAN = "GREATER_THAN"
    LESS_THAN_OR_EQUAL = "LESS_THAN_OR_EQUAL"
    EQUALS = "EQUALS"


@dataclass(frozen=True)
class Trigger:
    field_name: str
    operator: str  # kept as str so unknown operators from storage evaluate False
    value: str
    description: str = ""


@dataclass(frozen=True)
class Requirement:
    """The permit, review or engineering item a rule grants."""

    name: str
    type: str = "PERMIT"  # PERMIT | REVIEW | ENGINEERING | STUDY
    description: str = ""
    typical_timeframe: str | None = None
    typical_cost_range: str | None = None
    provided_by: str | None = None


@dataclass(frozen=True)
class RequirementRule:
    jurisdiction: str
    name: str
    project_types: tuple[str, ...]
    requirement: Requirement
    triggers: tuple[Trigger, ...] = ()
    description: str = ""
    is_active: bool = True
    discipline: str | None = None
    source_document: str | None = None

    def applies_to(self, project_type: str) -> bool:
        return project_type in self.project_types

    def to_dict(self) -> dict:
        return {
            "jurisdiction": self.jurisdiction,
            "name": self.name,
            "description": self.description,
            "project_types": list(self.project_types),
            "is_active": self.is_active,
            "discipline": self.discipline,
            "source_document": self.source_document,
            "requirement": {
                "name": self.requirement.name,
                "type": self.requirement.type,
                "description": self.requirement.description,
                "typical_timeframe": self.requirement.typical_timeframe,
                "typical_cost_range": self.requirement.typical_cost_range,
                "provided_by": self.requirement.provided_by,
            },
            "triggers": [
                {
                    "field_name": t.field_name,
                    "operator": t.operator,
                    "value": t.value,
                    "description": t.description,
                }
                for t in self.triggers
            ],
        }


@dataclass
class Jurisdiction:
    name: str
    full_name: str = ""
    state: str = ""
    typical_review_days: int | None = None
    rules: list[RequirementRule] = field(default_factory=list)
    districts: dict[str, ZoningDistrict] = field(default_factory=dict)  # by normalized code

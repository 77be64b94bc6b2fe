"""Rezio service catalog and the services each project type needs."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RezioService:
    id: str
    name: str
    category: str  # Discovery | Design | Engineering | Compliance | Permit Prep
    min_weeks: int
    max_weeks: int
    complexity: str  # simple | medium | complex
    description: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "estimated_weeks": {"min": self.min_weeks, "max": self.max_weeks},
            "complexity": self.complexity,
            "description": self.description,
        }


REZIO_SERVICES: dict[str, RezioService] = {
    "TITLE_REPORT": RezioService(
        "title_report", "Title Report", "Discovery", 1, 2, "simple",
        "Property ownership and lien verification"),
    "SURVEY": RezioService(
        "survey", "Boundary Survey", "Discovery", 2, 3, "medium",
        "Professional property boundary survey"),
    "ARCHITECTURAL_DESIGN": RezioService(
        "architectural_design", "Architectural Design", "Design", 3, 6, "complex",
        "Complete architectural plans and elevations"),
    "STRUCTURAL_ENGINEERING": RezioService(
        "structural_engineering", "Structural Engineering", "Engineering", 2, 4, "complex",
        "Structural calculations and stamped plans"),
    "MEP_ENGINEERING": RezioService(
        "mep_engineering", "MEP Engineering", "Engineering", 2, 3, "medium",
        "Mechanical, Electrical, Plumbing engineering"),
    "CIVIL_ENGINEERING": RezioService(
        "civil_engineering", "Civil Engineering", "Engineering", 2, 4, "complex",
        "Grading, drainage, and utility plans"),
    "ENERGY_CALC": RezioService(
        "energy_calc", "Energy Calculations", "Compliance", 1, 2, "simple",
        "Title 24 energy compliance calculations"),
    "PERMIT_PACKAGE": RezioService(
        "permit_package", "Permit Package Assembly", "Permit Prep", 1, 1, "simple",
        "Final permit package compilation and review"),
}

PROJECT_TYPE_SERVICES: dict[str, list[str]] = {
    "ADU": [
        "TITLE_REPORT", "SURVEY", "ARCHITECTURAL_DESIGN", "STRUCTURAL_ENGINEERING",
        "MEP_ENGINEERING", "CIVIL_ENGINEERING", "ENERGY_CALC", "PERMIT_PACKAGE",
    ],
    "ADDITION": [
        "TITLE_REPORT", "SURVEY", "ARCHITECTURAL_DESIGN", "STRUCTURAL_ENGINEERING",
        "MEP_ENGINEERING", "ENERGY_CALC", "PERMIT_PACKAGE",
    ],
    "POOL": [
        "SURVEY", "ARCHITECTURAL_DESIGN", "STRUCTURAL_ENGINEERING", "CIVIL_ENGINEERING",
        "PERMIT_PACKAGE",
    ],
    "SOLAR": [
        "STRUCTURAL_ENGINEERING", "MEP_ENGINEERING", "ENERGY_CALC", "PERMIT_PACKAGE",
    ],
}

DEFAULT_PROJECT_TYPE = "ADU"


def services_for(project_type: str) -> tuple[str, list[RezioService]]:
    """Return (resolved project type, services). Unknown types fall back to ADU."""
    key = project_type.strip().upper()
    if key not in PROJECT_TYPE_SERVICES:
        key = DEFAULT_PROJECT_TYPE
    return key, [REZIO_SERVICES[sid] for sid in PROJECT_TYPE_SERVICES[key]]

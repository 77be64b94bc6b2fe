"""Engineering discipline requirements derived from project scope."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class EngineeringRequirement:
    discipline: str
    notes: str
    required: bool = True

    def to_dict(self) -> dict:
        return {"discipline": self.discipline, "required": self.required, "notes": self.notes}


ARCHITECT = "Architect of Record"
STRUCTURAL = "Structural Engineer"
MEP = "MEP Engineer"
CIVIL = "Civil Engineer"


def generate_engineering_requirements(
    project_type: str,
    square_footage: float,
    stories: int = 1,
    property_type: Optional[str] = None,
    lot_size: Optional[float] = None,
) -> list[EngineeringRequirement]:
    """Return the disciplines a project needs, in presentation order.

    ADUs and small renovations short-circuit with their own fixed lists;
    everything else is assembled from size and type thresholds, then the
    notes are adjusted for large lots, multi-story and large projects.
    """
    kind = project_type.strip().lower()
    reqs: list[EngineeringRequirement] = []

    if kind == "adu":
        reqs.append(EngineeringRequirement(
            ARCHITECT, "Licensed architect required for ADU design and permit stamping."))
        reqs.append(EngineeringRequirement(
            STRUCTURAL, "Structural calculations and foundation design for the ADU structure."))
        reqs.append(EngineeringRequirement(
            MEP, "Electrical, plumbing, and HVAC plans for ADU utilities."))
        if square_footage > 800:
            reqs.append(EngineeringRequirement(
                "Title 24 Energy Compliance",
                "Energy efficiency calculations required for larger ADUs."))
        return reqs

    if kind == "renovation" and square_footage < 500:
        reqs.append(EngineeringRequirement(
            "Permit Plans",
            "Basic permit drawings showing proposed changes. May require structural "
            "review for wall modifications."))
        if square_footage > 200:
            reqs.append(EngineeringRequirement(
                "MEP Review",
                "Electrical and plumbing review for permit compliance. Full MEP plans if "
                "relocating utilities."))
        return reqs

    new_build = kind == "new_construction"
    addition = kind == "addition"

    if new_build or addition or square_footage > 1000:
        reqs.append(EngineeringRequirement(
            ARCHITECT,
            "Licensed architect required for design and permit stamping. Can be fulfilled "
            "by structural engineer for smaller projects."))

    if new_build or addition or square_footage > 500:
        reqs.append(EngineeringRequirement(
            STRUCTURAL,
            "Structural calculations, foundation design, and PE stamp required. Can serve "
            "as Architect of Record for smaller projects."))

    if new_build or (addition and square_footage > 1500):
        reqs.append(EngineeringRequirement(
            CIVIL,
            "Site plan, grading plan, drainage design, and utility connections required"))

    if square_footage > 500 or new_build:
        reqs.append(EngineeringRequirement(
            MEP,
            "Mechanical, Electrical, and Plumbing plans with load calculations and "
            "equipment schedules"))

    if new_build:
        reqs.append(EngineeringRequirement(
            "Geotechnical Engineer",
            "Soils investigation required for foundation design and bearing capacity "
            "determination"))

    if new_build or (addition and square_footage > 1000):
        reqs.append(EngineeringRequirement(
            "Land Surveyor",
            "Boundary and topographic survey with existing conditions and setback "
            "verification"))

    if property_type == "commercial":
        reqs.append(EngineeringRequirement(
            "Fire Protection Engineer",
            "Fire sprinkler system design and fire alarm system plans required for "
            "commercial properties"))
        reqs.append(EngineeringRequirement(
            "ADA Compliance Specialist",
            "Accessibility compliance review and design for commercial properties per ADA "
            "requirements"))

    by_discipline = {r.discipline: r for r in reqs}

    if lot_size and lot_size > 20000 and CIVIL in by_discipline:
        by_discipline[CIVIL].notes += (
            ". Large lot may require additional drainage studies and environmental "
            "impact considerations.")

    if stories > 1:
        if STRUCTURAL in by_discipline:
            by_discipline[STRUCTURAL].notes = (
                "Multi-story structural analysis required, including lateral load design "
                "and seismic/wind calculations")
        if MEP in by_discipline:
            by_discipline[MEP].notes = (
                "MEP plans with multi-story considerations, fire safety systems, and "
                "vertical distribution requirements")

    if square_footage > 2000 and ARCHITECT in by_discipline:
        by_discipline[ARCHITECT].notes = (
            "Licensed architect required for large projects. Must coordinate all "
            "disciplines and provide sealed drawings.")

    return reqs

"""Build the ProjectAttributes snapshot that triggers are evaluated against."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from rezio.core.rules.models import ProjectAttributes

# record key (camelCase or snake_case) -> attribute name
_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "project_type": ("projectType", "project_type"),
    "square_footage": ("squareFootage", "square_footage"),
    "structural_changes": ("structuralChanges", "structural_changes"),
    "plumbing_work": ("plumbingWork", "plumbing_work"),
    "electrical_work": ("electricalWork", "electrical_work"),
    "electrical_service_amps": ("electricalServiceAmps", "electrical_service_amps"),
    "lot_size": ("lotSize", "lot_size"),
    "stories": ("stories",),
}

_RANGE_SQFT = re.compile(r"(\d+)-(\d+)\s*sq\s*ft")
_EXACT_SQFT = re.compile(r"(\d+)\s*sq\s*ft")


def build_project_attributes(project: dict) -> ProjectAttributes:
    """Flatten a project record into snake_case trigger attributes.

    Booleans become "true"/"false" so they compare equal to the string
    values stored on EQUALS triggers. Missing or null fields are omitted,
    which makes any trigger on them non-matching.
    """
    attrs: ProjectAttributes = {}
    for name, keys in _FIELD_ALIASES.items():
        value = next((project[k] for k in keys if project.get(k) is not None), None)
        if value is None:
            continue
        if isinstance(value, bool):
            attrs[name] = "true" if value else "false"
        elif name == "project_type":
            attrs[name] = str(value).upper()
        else:
            attrs[name] = value
    return attrs


@dataclass
class ProjectDetails:
    project_type: str
    square_footage: Optional[int] = None
    structural_changes: bool = False
    plumbing_work: bool = False
    electrical_work: bool = False
    electrical_service_amps: Optional[int] = None
    lot_size: Optional[float] = None

    def to_attributes(self) -> ProjectAttributes:
        return build_project_attributes({
            "project_type": self.project_type,
            "square_footage": self.square_footage,
            "structural_changes": self.structural_changes,
            "plumbing_work": self.plumbing_work,
            "electrical_work": self.electrical_work,
            "electrical_service_amps": self.electrical_service_amps,
            "lot_size": self.lot_size,
        })


def details_from_conversation(
    conversation: str,
    project_type: str,
    lot_size: Optional[float] = None,
) -> ProjectDetails:
    """Pull project details out of a free-text scoping conversation.

    A range such as "400-600 sq ft" resolves to its upper bound.
    """
    text = conversation.lower()

    square_footage: Optional[int] = None
    match = _RANGE_SQFT.search(text)
    if match:
        square_footage = int(match.group(2))
    else:
        match = _EXACT_SQFT.search(text)
        if match:
            square_footage = int(match.group(1))

    structural = any(k in text for k in ("moving", "removing", "structural"))
    plumbing = any(k in text for k in ("bathroom", "kitchen", "plumbing"))
    electrical = any(k in text for k in ("panel upgrade", "electrical", "upgrading panel"))

    return ProjectDetails(
        project_type=project_type.upper(),
        square_footage=square_footage,
        structural_changes=structural,
        plumbing_work=plumbing,
        electrical_work=electrical,
        electrical_service_amps=200 if electrical else None,
        lot_size=lot_size,
    )

"""Permit roadmap skeleton: the six fixed phases for a project type."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from rezio.core.roadmap.services import RezioService, services_for


class PhaseStatus(str, Enum):
    WAITING = "waiting"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass
class PhaseTemplate:
    name: str
    order: int
    status: PhaseStatus
    estimated_duration: str
    description: str
    services: list[RezioService] = field(default_factory=list)
    progress: int = 0
    dependencies: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "order": self.order,
            "status": self.status.value,
            "estimated_duration": self.estimated_duration,
            "description": self.description,
            "services": [s.to_dict() for s in self.services],
            "progress": self.progress,
            "dependencies": list(self.dependencies),
        }


# (name, duration, description, service categories) in roadmap order
PHASES: list[tuple[str, str, str, tuple[str, ...]]] = [
    ("Discovery & Site Analysis", "2-4 weeks",
     "Initial site assessment and data collection", ("Discovery",)),
    ("Design & Planning", "3-6 weeks",
     "Architectural design and preliminary plans", ("Design",)),
    ("Engineering & Compliance", "4-6 weeks",
     "Engineering calculations and compliance verification", ("Engineering", "Compliance")),
    ("Permit Package Preparation", "1-2 weeks",
     "Final document assembly and submission prep", ("Permit Prep",)),
    ("City Review", "4-12 weeks",
     "Municipal plan check and corrections", ()),
    ("Permit Issuance", "1-2 weeks",
     "Final approval and permit pickup", ()),
]

PHASE_NAMES = [p[0] for p in PHASES]


def generate_roadmap_template(project_type: str) -> list[PhaseTemplate]:
    """Return the six phase templates for a project type.

    The first phase starts in progress, the rest wait. Unrecognized
    project types get the ADU service list.
    """
    _, services = services_for(project_type)

    phases: list[PhaseTemplate] = []
    for order, (name, duration, description, categories) in enumerate(PHASES):
        phases.append(PhaseTemplate(
            name=name,
            order=order,
            status=PhaseStatus.IN_PROGRESS if order == 0 else PhaseStatus.WAITING,
            estimated_duration=duration,
            description=description,
            services=[s for s in services if s.category in categories],
        ))
    return phases

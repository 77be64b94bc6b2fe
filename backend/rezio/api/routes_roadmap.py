"""Roadmap endpoint: six-phase permit roadmap skeleton."""

from fastapi import APIRouter

from rezio.core.roadmap.generator import generate_roadmap_template
from rezio.core.roadmap.services import services_for

router = APIRouter(tags=["roadmap"])


@router.get("/roadmap/{project_type}")
async def roadmap(project_type: str):
    """Return the phase templates a new roadmap is created from."""
    resolved, _ = services_for(project_type)
    phases = generate_roadmap_template(project_type)
    return {
        "project_type": project_type,
        "template": resolved,
        "phases": [p.to_dict() for p in phases],
    }

"""Requirement endpoints: rule resolution, engineering disciplines, tasks."""

from fastapi import APIRouter

from rezio.config import settings
from rezio.core.rules.attributes import build_project_attributes
from rezio.core.rules.catalog import get_rulebook
from rezio.core.rules.engineering import generate_engineering_requirements
from rezio.core.rules.resolver import requirement_disciplines, resolve_requirements
from rezio.core.tasks.registry import TaskRegistry
from rezio.models.schemas import EngineeringRequest, ResolveRequest, TasksRequest

router = APIRouter(tags=["requirements"])

# One registry per process; its lock serializes find-or-create per request.
# Handlers that take the rulebook or registry lock are plain def (threadpool).
_registry = TaskRegistry(settings.tasks_path)


@router.get("/requirements/jurisdictions")
def list_jurisdictions():
    """List jurisdictions that have a rule set."""
    book = get_rulebook()
    return {
        "jurisdictions": [
            {
                "name": j.name,
                "full_name": j.full_name,
                "state": j.state,
                "typical_review_days": j.typical_review_days,
                "rule_count": len(j.rules),
                "district_count": len(j.districts),
            }
            for j in (book.get(name) for name in book.names())
        ]
    }


@router.post("/requirements/resolve")
def resolve(req: ResolveRequest):
    """Return the rules that apply to a project in a jurisdiction."""
    attributes = build_project_attributes(req.project) if req.project else {}
    attributes.update(req.attributes)
    attributes.setdefault("project_type", req.project_type)

    rules = resolve_requirements(req.jurisdiction, req.project_type, attributes)
    return {
        "jurisdiction": req.jurisdiction,
        "project_type": req.project_type,
        "requirements": [rule.to_dict() for rule in rules],
        "disciplines": requirement_disciplines(rules),
    }


@router.post("/requirements/engineering")
async def engineering(req: EngineeringRequest):
    """Derive the engineering disciplines a project needs."""
    reqs = generate_engineering_requirements(
        project_type=req.project_type,
        square_footage=req.square_footage,
        stories=req.stories,
        property_type=req.property_type,
        lot_size=req.lot_size,
    )
    return {"requirements": [r.to_dict() for r in reqs]}


@router.post("/requirements/tasks")
def requirement_tasks(req: TasksRequest):
    """Create one TODO task per required discipline not already tracked."""
    reqs = generate_engineering_requirements(
        project_type=req.project_type,
        square_footage=req.square_footage,
        stories=req.stories,
        property_type=req.property_type,
        lot_size=req.lot_size,
    )
    created = _registry.ensure_tasks(req.project_id, [*reqs, *req.disciplines])
    return {
        "created": len(created),
        "tasks": [t.to_dict() for t in _registry.tasks_for(req.project_id)],
    }

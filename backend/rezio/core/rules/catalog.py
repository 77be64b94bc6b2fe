"""Jurisdiction rule catalog.

Ships with the seeded City of Phoenix rule set and zoning districts, and
can load extra jurisdictions from a JSON document of the form:

    {"jurisdictions": [
        {"name": "Mesa", "full_name": "City of Mesa", "state": "Arizona",
         "rules": [
            {"name": "...", "project_types": ["ADDITION"],
             "requirement": {"name": "Plan Review", "type": "REVIEW"},
             "triggers": [{"field_name": "square_footage",
                           "operator": "GREATER_THAN", "value": "500"}]}
         ],
         "zoning_districts": [
            {"code": "RS-6", "name": "Single Residence",
             "setbacks": {"front": 20, "rear": 20, "side": 5},
             "adu": {"allowed": true, "max_size_sq_ft": 1000,
                     "setbacks": {"front": 20, "rear": 5, "side": 5}}}
         ]}
    ]}
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Iterable, Optional

from rezio.config import settings
from rezio.core.rules.models import (
    Jurisdiction,
    Operator,
    Requirement,
    RequirementRule,
    Trigger,
)
from rezio.core.rules.zoning import parse_district, phoenix_districts

logger = logging.getLogger(__name__)


class RuleCatalogError(ValueError):
    """Raised when a stored rule set cannot be read or is malformed."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Invalid rule catalog '{source}': {reason}")


# ── Rule book ────────────────────────────────────────────────────────────────

class RuleBook:
    """Jurisdiction name -> Jurisdiction, preserving each rule list's order."""

    def __init__(self, jurisdictions: Iterable[Jurisdiction] = ()) -> None:
        self._jurisdictions: dict[str, Jurisdiction] = {}
        for j in jurisdictions:
            self.add(j)

    def add(self, jurisdiction: Jurisdiction) -> None:
        """Register a jurisdiction.

        Rules for an existing name are appended; zoning districts with the
        same code replace the existing ones.
        """
        existing = self._jurisdictions.get(jurisdiction.name)
        if existing is None:
            self._jurisdictions[jurisdiction.name] = jurisdiction
        else:
            existing.rules.extend(jurisdiction.rules)
            existing.districts.update(jurisdiction.districts)

    def get(self, name: str) -> Optional[Jurisdiction]:
        return self._jurisdictions.get(name)

    def rules_for(self, name: str) -> list[RequirementRule]:
        jurisdiction = self._jurisdictions.get(name)
        return list(jurisdiction.rules) if jurisdiction else []

    def names(self) -> list[str]:
        return sorted(self._jurisdictions)

    def __contains__(self, name: object) -> bool:
        return name in self._jurisdictions

    def __len__(self) -> int:
        return len(self._jurisdictions)


# ── Phoenix seed ─────────────────────────────────────────────────────────────

_PHX = "Phoenix"
_PHX_PDD_GUIDE = "phoenix.gov/pdd - Residential OTC Permits Guideline"

PLAN_REVIEW = Requirement(
    name="Plan Review",
    type="REVIEW",
    description=(
        "Full architectural plan review by Phoenix P&D staff. Required when projects "
        "exceed thresholds or involve complex construction."
    ),
    typical_timeframe="1-3 weeks",
    provided_by="City of Phoenix Planning & Development",
)
OTC_PERMIT = Requirement(
    name="Over-the-Counter Permit",
    type="PERMIT",
    description="Express permit issued same-day for simple projects meeting prescriptive code requirements.",
    typical_timeframe="Same day",
    provided_by="City of Phoenix",
)
STRUCTURAL_ENGINEERING = Requirement(
    name="Structural Engineering",
    type="ENGINEERING",
    description="Sealed structural calculations and plans from Arizona-licensed structural engineer.",
    typical_cost_range="$2,000-$8,000",
    provided_by="Licensed Structural Engineer",
)
PLUMBING_PERMIT = Requirement(
    name="Plumbing Permit",
    type="PERMIT",
    description="Required when moving or adding plumbing fixtures.",
    provided_by="City of Phoenix",
)
ELECTRICAL_PERMIT = Requirement(
    name="Electrical Permit",
    type="PERMIT",
    description="Required when adding or modifying electrical systems.",
    provided_by="City of Phoenix",
)
PROPERTY_SURVEY = Requirement(
    name="Property Survey",
    type="STUDY",
    description="Professional land survey showing property boundaries and setbacks.",
    typical_cost_range="$400-$800",
    provided_by="Licensed Land Surveyor",
)

_IS_ADU = Trigger("project_type", Operator.EQUALS.value, "ADU", "Project is ADU")


def phoenix_jurisdiction() -> Jurisdiction:
    """The City of Phoenix residential rule set."""
    rules = [
        RequirementRule(
            jurisdiction=_PHX,
            name="Addition Over 500 SF",
            description="Additions exceeding 500 SF require plan review.",
            project_types=("ADDITION",),
            requirement=PLAN_REVIEW,
            source_document=_PHX_PDD_GUIDE,
            triggers=(
                Trigger("square_footage", Operator.GREATER_THAN.value, "500",
                        "Square footage greater than 500"),
            ),
        ),
        RequirementRule(
            jurisdiction=_PHX,
            name="Small Addition OTC",
            description="Single level additions ≤500 SF with no structural changes qualify for OTC.",
            project_types=("ADDITION",),
            requirement=OTC_PERMIT,
            triggers=(
                Trigger("square_footage", Operator.LESS_THAN_OR_EQUAL.value, "500",
                        "Square footage 500 or less"),
                Trigger("structural_changes", Operator.EQUALS.value, "false",
                        "No structural changes"),
            ),
        ),
        RequirementRule(
            jurisdiction=_PHX,
            name="Structural Changes Require Engineering",
            description="Any structural work requires structural engineering.",
            project_types=("ADDITION", "REMODEL"),
            requirement=STRUCTURAL_ENGINEERING,
            discipline="Structural Engineer",
            triggers=(
                Trigger("structural_changes", Operator.EQUALS.value, "true",
                        "Structural changes present"),
            ),
        ),
        RequirementRule(
            jurisdiction=_PHX,
            name="ADU Requires Plan Review",
            description="All ADUs require full plan review.",
            project_types=("ADU",),
            requirement=PLAN_REVIEW,
            triggers=(_IS_ADU,),
        ),
        RequirementRule(
            jurisdiction=_PHX,
            name="ADU Requires Structural Engineering",
            description="ADUs require structural engineering.",
            project_types=("ADU",),
            requirement=STRUCTURAL_ENGINEERING,
            discipline="Structural Engineer",
            triggers=(_IS_ADU,),
        ),
        RequirementRule(
            jurisdiction=_PHX,
            name="ADU Requires Survey",
            description="ADUs require property survey.",
            project_types=("ADU",),
            requirement=PROPERTY_SURVEY,
            discipline="Land Surveyor",
            triggers=(_IS_ADU,),
        ),
        RequirementRule(
            jurisdiction=_PHX,
            name="Plumbing Work Requires Permit",
            description="Moving or adding plumbing fixtures requires permit.",
            project_types=("ADDITION", "REMODEL", "ADU"),
            requirement=PLUMBING_PERMIT,
            triggers=(
                Trigger("plumbing_work", Operator.EQUALS.value, "true", "Plumbing work involved"),
            ),
        ),
        RequirementRule(
            jurisdiction=_PHX,
            name="Electrical Work Requires Permit",
            description="Adding or modifying electrical requires permit.",
            project_types=("ADDITION", "REMODEL", "ADU"),
            requirement=ELECTRICAL_PERMIT,
            triggers=(
                Trigger("electrical_work", Operator.EQUALS.value, "true", "Electrical work involved"),
            ),
        ),
    ]
    return Jurisdiction(
        name=_PHX,
        full_name="City of Phoenix",
        state="Arizona",
        typical_review_days=14,
        rules=rules,
        districts=phoenix_districts(),
    )


# ── JSON loading ─────────────────────────────────────────────────────────────

def load_jurisdictions(path: str | Path) -> list[Jurisdiction]:
    """Read jurisdictions and their rules from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        RuleCatalogError: If the JSON is invalid or a rule is malformed.
    """
    source = Path(path)
    try:
        data = json.loads(source.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise RuleCatalogError(str(source), f"not valid JSON: {exc}") from exc
    return parse_jurisdictions(data, source=str(source))


def parse_jurisdictions(data: dict, source: str = "<memory>") -> list[Jurisdiction]:
    if not isinstance(data, dict) or not isinstance(data.get("jurisdictions"), list):
        raise RuleCatalogError(source, "top-level 'jurisdictions' list is required")

    result: list[Jurisdiction] = []
    for j_index, raw in enumerate(data["jurisdictions"]):
        name = raw.get("name") if isinstance(raw, dict) else None
        if not isinstance(name, str) or not name.strip():
            raise RuleCatalogError(source, f"jurisdiction {j_index} has no name")
        rules = [
            _parse_rule(name, r_index, raw_rule, source)
            for r_index, raw_rule in enumerate(raw.get("rules", []))
        ]
        districts = {}
        for d_index, raw_district in enumerate(raw.get("zoning_districts", [])):
            try:
                district = parse_district(raw_district)
            except ValueError as exc:
                raise RuleCatalogError(source, f"{name} zoning district {d_index}: {exc}") from exc
            districts[district.code] = district
        result.append(Jurisdiction(
            name=name,
            full_name=raw.get("full_name", ""),
            state=raw.get("state", ""),
            typical_review_days=raw.get("typical_review_days"),
            rules=rules,
            districts=districts,
        ))
    return result


def _parse_rule(jurisdiction: str, index: int, raw: dict, source: str) -> RequirementRule:
    where = f"{jurisdiction} rule {index}"
    if not isinstance(raw, dict):
        raise RuleCatalogError(source, f"{where} must be an object")

    missing = {"name", "project_types", "requirement"} - raw.keys()
    if missing:
        raise RuleCatalogError(source, f"{where} is missing keys: {sorted(missing)}")

    req = raw["requirement"]
    if not isinstance(req, dict) or not req.get("name"):
        raise RuleCatalogError(source, f"{where} requirement needs a name")

    triggers = []
    for t in raw.get("triggers", []):
        if not isinstance(t, dict) or "field_name" not in t or "value" not in t:
            raise RuleCatalogError(source, f"{where} has a trigger without field_name/value")
        operator = t.get("operator")
        if operator not in Operator.__members__:
            raise RuleCatalogError(source, f"{where} has unknown operator {operator!r}")
        triggers.append(Trigger(
            field_name=t["field_name"],
            operator=operator,
            value=str(t["value"]),
            description=t.get("description", ""),
        ))

    return RequirementRule(
        jurisdiction=jurisdiction,
        name=raw["name"],
        description=raw.get("description", ""),
        project_types=tuple(raw["project_types"]),
        is_active=bool(raw.get("is_active", True)),
        discipline=raw.get("discipline"),
        source_document=raw.get("source_document"),
        requirement=Requirement(
            name=req["name"],
            type=req.get("type", "PERMIT"),
            description=req.get("description", ""),
            typical_timeframe=req.get("typical_timeframe"),
            typical_cost_range=req.get("typical_cost_range"),
            provided_by=req.get("provided_by"),
        ),
        triggers=tuple(triggers),
    )


# ── Shared rule book ─────────────────────────────────────────────────────────

_rulebook: Optional[RuleBook] = None
_rulebook_lock = threading.Lock()


def get_rulebook() -> RuleBook:
    """Return the process-wide rule book, building it on first use.

    Callers arriving while the first build is in progress block on the
    lock and then receive the same instance.
    """
    global _rulebook
    with _rulebook_lock:
        if _rulebook is None:
            _rulebook = build_rulebook(settings.rules_path)
        return _rulebook


def reset_rulebook() -> None:
    """Drop the cached rule book so the next get_rulebook() rebuilds it."""
    global _rulebook
    with _rulebook_lock:
        _rulebook = None


def build_rulebook(rules_path: str | None = None) -> RuleBook:
    book = RuleBook([phoenix_jurisdiction()])
    if rules_path:
        for jurisdiction in load_jurisdictions(rules_path):
            book.add(jurisdiction)
        logger.info("Loaded rule catalog from %s (%d jurisdictions)", rules_path, len(book))
    return book

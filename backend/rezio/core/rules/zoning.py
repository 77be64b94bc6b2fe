"""Zoning district tables and the checks that run against them.

Each jurisdiction carries a table of districts keyed by code (``R1-6``,
``R-3``...). A district fixes the primary-dwelling setbacks, lot coverage
and height limits, plus the ADU, pool and garage rules used when a
project adds an accessory structure.
"""

from __future__ import annotations

import math
import re
from dataclasses import asdict, dataclass, field
from typing import Any, Mapping, Optional

from rezio.core.geometry.setbacks import Setbacks
from rezio.core.validation import is_number

STRUCTURE_TYPES = ("primary", "adu", "garage", "pool")


@dataclass(frozen=True)
class DistrictSetbacks:
    """Minimum distances (feet) from the property lines."""

    front: float
    rear: float
    side: float
    street_side: Optional[float] = None  # corner lots


@dataclass(frozen=True)
class AduRules:
    allowed: bool
    max_size_sq_ft: float = 0
    min_lot_size_sq_ft: float = 0
    setbacks: DistrictSetbacks = DistrictSetbacks(0, 0, 0)
    parking: int = 0
    requires_owner_occupancy: bool = False
    max_height_ft: Optional[float] = None


@dataclass(frozen=True)
class PoolRules:
    setback_from_property: float
    setback_from_house: float
    requires_fence: bool = True
    fence_height_ft: float = 5
    permit_required: bool = True


@dataclass(frozen=True)
class GarageRules:
    setback_front: float
    setback_rear: float
    setback_side: float
    max_height_detached_ft: float = 15


@dataclass(frozen=True)
class ZoningDistrict:
    code: str
    name: str
    setbacks: DistrictSetbacks
    adu: AduRules
    pool: PoolRules
    garage: GarageRules
    description: str = ""
    min_lot_size_sq_ft: float = 0
    max_lot_coverage_pct: float = 100
    max_building_height_ft: Optional[float] = None
    permit_exempt_under_sq_ft: float = 200

    def to_dict(self) -> dict:
        return asdict(self)


# ── Lookup ───────────────────────────────────────────────────────────────────

def normalize_zoning_code(code: str) -> str:
    return re.sub(r"\s+", "", code.upper())


def find_district(
    districts: Mapping[str, ZoningDistrict],
    code: str,
) -> Optional[ZoningDistrict]:
    """Look up a district by code, tolerating the R1-/R-1- spelling variants.

    Returns None when no variant of the code is in the table.
    """
    normalized = normalize_zoning_code(code)
    for variant in (
        normalized,
        normalized.replace("R-1-", "R1-", 1),
        normalized.replace("R1-", "R-1-", 1),
    ):
        if variant in districts:
            return districts[variant]
    return None


# ── ADU eligibility ──────────────────────────────────────────────────────────

@dataclass
class AduEligibility:
    allowed: bool
    reason: Optional[str] = None
    max_size_sq_ft: Optional[float] = None
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


def adu_eligibility(
    district: ZoningDistrict,
    lot_size_sq_ft: Optional[float] = None,
    proposed_sq_ft: Optional[float] = None,
) -> AduEligibility:
    """Whether an ADU may be built in the district on a lot of this size.

    An unknown lot size skips the minimum-lot check. A proposed size above
    the district maximum is reported as a warning, not a refusal.
    """
    rules = district.adu
    if not rules.allowed:
        return AduEligibility(False, reason="ADUs not permitted in this zoning district")

    if lot_size_sq_ft is not None and lot_size_sq_ft < rules.min_lot_size_sq_ft:
        return AduEligibility(
            False,
            reason=(
                f"Lot must be at least {rules.min_lot_size_sq_ft:,.0f} sq ft "
                f"(yours is {lot_size_sq_ft:,.0f})"
            ),
        )

    result = AduEligibility(True, max_size_sq_ft=rules.max_size_sq_ft)
    if proposed_sq_ft is not None and proposed_sq_ft > rules.max_size_sq_ft:
        result.warnings.append(
            f"Proposed {proposed_sq_ft:,.0f} sq ft exceeds max {rules.max_size_sq_ft:,.0f} sq ft"
        )
    return result


def max_lot_coverage_sq_ft(district: ZoningDistrict, lot_size_sq_ft: float) -> float:
    return lot_size_sq_ft * district.max_lot_coverage_pct / 100.0


# ── Setback check ────────────────────────────────────────────────────────────

def required_setbacks(district: ZoningDistrict, structure: str = "primary") -> DistrictSetbacks:
    """Setbacks that apply to the given structure type; unknown types use the primary ones."""
    if structure == "adu":
        return district.adu.setbacks
    if structure == "pool":
        p = district.pool.setback_from_property
        return DistrictSetbacks(front=p, rear=p, side=p)
    if structure == "garage":
        g = district.garage
        return DistrictSetbacks(front=g.setback_front, rear=g.setback_rear, side=g.setback_side)
    return district.setbacks


@dataclass(frozen=True)
class SetbackViolation:
    side: str  # front | rear | side_left | side_right
    provided: float
    required: float

    @property
    def message(self) -> str:
        label = {
            "front": "Front",
            "rear": "Rear",
            "side_left": "Left side",
            "side_right": "Right side",
        }[self.side]
        return f"{label} setback: {self.provided:g}' provided, {self.required:g}' required"

    def to_dict(self) -> dict:
        return {
            "side": self.side,
            "provided": self.provided,
            "required": self.required,
            "message": self.message,
        }


@dataclass
class SetbackCheck:
    structure: str
    required: DistrictSetbacks
    violations: list[SetbackViolation] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.violations

    def to_dict(self) -> dict:
        return {
            "structure": self.structure,
            "valid": self.valid,
            "required": asdict(self.required),
            "violations": [v.to_dict() for v in self.violations],
        }


def check_setbacks(
    district: ZoningDistrict,
    provided: Setbacks,
    structure: str = "primary",
) -> SetbackCheck:
    """Compare a structure's distances to the lot lines with the district minimums."""
    required = required_setbacks(district, structure)
    check = SetbackCheck(structure=structure, required=required)
    for side, have, need in (
        ("front", provided.front, required.front),
        ("rear", provided.rear, required.rear),
        ("side_left", provided.side_left, required.side),
        ("side_right", provided.side_right, required.side),
    ):
        if have < need:
            check.violations.append(SetbackViolation(side, have, need))
    return check


# ── JSON parsing ─────────────────────────────────────────────────────────────

def parse_district(raw: Any) -> ZoningDistrict:
    """Build a district from its JSON form.

    ``code``, ``name`` and ``setbacks`` are required. A missing ``adu``
    section means ADUs are not allowed; missing ``pool`` or ``garage``
    sections fall back to the primary setbacks.

    Raises:
        ValueError: If a required key is missing or a number is invalid.
    """
    if not isinstance(raw, dict):
        raise ValueError("zoning district must be an object")
    code = raw.get("code")
    if not isinstance(code, str) or not code.strip():
        raise ValueError("zoning district has no code")
    if not isinstance(raw.get("name"), str):
        raise ValueError(f"zoning district {code} has no name")

    setbacks = _parse_setbacks(raw.get("setbacks"), f"{code} setbacks")

    adu_raw = raw.get("adu") or {}
    if not isinstance(adu_raw, dict):
        raise ValueError(f"{code} adu must be an object")
    if adu_raw.get("allowed"):
        adu = AduRules(
            allowed=True,
            max_size_sq_ft=_number(adu_raw, "max_size_sq_ft", f"{code} adu"),
            min_lot_size_sq_ft=_number(adu_raw, "min_lot_size_sq_ft", f"{code} adu", 0),
            setbacks=_parse_setbacks(adu_raw.get("setbacks"), f"{code} adu setbacks"),
            parking=int(_number(adu_raw, "parking", f"{code} adu", 0)),
            requires_owner_occupancy=bool(adu_raw.get("requires_owner_occupancy", False)),
            max_height_ft=_number(adu_raw, "max_height_ft", f"{code} adu", None),
        )
    else:
        adu = AduRules(allowed=False)

    pool_raw = raw.get("pool")
    if pool_raw is None:
        pool = PoolRules(setbacks.side, setbacks.side)
    else:
        pool = PoolRules(
            setback_from_property=_number(pool_raw, "setback_from_property", f"{code} pool"),
            setback_from_house=_number(pool_raw, "setback_from_house", f"{code} pool", 0),
            requires_fence=bool(pool_raw.get("requires_fence", True)),
            fence_height_ft=_number(pool_raw, "fence_height_ft", f"{code} pool", 5),
            permit_required=bool(pool_raw.get("permit_required", True)),
        )

    garage_raw = raw.get("garage")
    if garage_raw is None:
        garage = GarageRules(setbacks.front, setbacks.rear, setbacks.side)
    else:
        garage = GarageRules(
            setback_front=_number(garage_raw, "setback_front", f"{code} garage"),
            setback_rear=_number(garage_raw, "setback_rear", f"{code} garage"),
            setback_side=_number(garage_raw, "setback_side", f"{code} garage"),
            max_height_detached_ft=_number(garage_raw, "max_height_detached_ft", f"{code} garage", 15),
        )

    return ZoningDistrict(
        code=normalize_zoning_code(code),
        name=raw["name"],
        description=raw.get("description", ""),
        setbacks=setbacks,
        adu=adu,
        pool=pool,
        garage=garage,
        min_lot_size_sq_ft=_number(raw, "min_lot_size_sq_ft", code, 0),
        max_lot_coverage_pct=_number(raw, "max_lot_coverage_pct", code, 100),
        max_building_height_ft=_number(raw, "max_building_height_ft", code, None),
        permit_exempt_under_sq_ft=_number(raw, "permit_exempt_under_sq_ft", code, 200),
    )


_REQUIRED = object()


def _number(raw: Any, key: str, where: str, default: Any = _REQUIRED) -> Any:
    if not isinstance(raw, dict):
        raise ValueError(f"{where} must be an object")
    value = raw.get(key)
    if value is None:
        if default is _REQUIRED:
            raise ValueError(f"{where} is missing '{key}'")
        return default
    if not is_number(value) or not math.isfinite(value) or value < 0:
        raise ValueError(f"{where} '{key}' must be a non-negative number, got {value!r}")
    return value


def _parse_setbacks(raw: Any, where: str) -> DistrictSetbacks:
    return DistrictSetbacks(
        front=_number(raw, "front", where),
        rear=_number(raw, "rear", where),
        side=_number(raw, "side", where),
        street_side=_number(raw, "street_side", where, None),
    )


# ── Phoenix districts ────────────────────────────────────────────────────────

_NO_ADU = AduRules(allowed=False)


def _sf_adu(max_size: float, front: float, max_height: float) -> AduRules:
    return AduRules(
        allowed=True,
        max_size_sq_ft=max_size,
        min_lot_size_sq_ft=6000,
        setbacks=DistrictSetbacks(front=front, rear=5, side=5, street_side=15),
        parking=1,
        max_height_ft=max_height,
    )


def phoenix_districts() -> dict[str, ZoningDistrict]:
    """Phoenix residential districts (Phoenix Zoning Ordinance)."""
    districts = [
        # single-family
        ZoningDistrict(
            code="R1-18", name="Single-Family Residential (18,000 sf)",
            description="Low-density single-family, large lots",
            min_lot_size_sq_ft=18000, max_lot_coverage_pct=35, max_building_height_ft=30,
            setbacks=DistrictSetbacks(25, 25, 10, 20),
            adu=_sf_adu(1000, 25, 25), pool=PoolRules(5, 5), garage=GarageRules(20, 5, 5),
        ),
        ZoningDistrict(
            code="R1-14", name="Single-Family Residential (14,000 sf)",
            description="Low-density single-family",
            min_lot_size_sq_ft=14000, max_lot_coverage_pct=35, max_building_height_ft=30,
            setbacks=DistrictSetbacks(25, 25, 7, 20),
            adu=_sf_adu(1000, 25, 25), pool=PoolRules(5, 5), garage=GarageRules(20, 5, 5),
        ),
        ZoningDistrict(
            code="R1-10", name="Single-Family Residential (10,000 sf)",
            description="Standard single-family residential",
            min_lot_size_sq_ft=10000, max_lot_coverage_pct=40, max_building_height_ft=30,
            setbacks=DistrictSetbacks(20, 20, 5, 15),
            adu=_sf_adu(1000, 20, 25), pool=PoolRules(5, 5), garage=GarageRules(20, 5, 5),
        ),
        ZoningDistrict(
            code="R1-8", name="Single-Family Residential (8,000 sf)",
            description="Medium-density single-family",
            min_lot_size_sq_ft=8000, max_lot_coverage_pct=40, max_building_height_ft=30,
            setbacks=DistrictSetbacks(20, 20, 5, 15),
            adu=_sf_adu(1000, 20, 25), pool=PoolRules(5, 5), garage=GarageRules(20, 5, 5),
        ),
        ZoningDistrict(
            code="R1-6", name="Single-Family Residential (6,000 sf)",
            description="Higher-density single-family",
            min_lot_size_sq_ft=6000, max_lot_coverage_pct=45, max_building_height_ft=30,
            setbacks=DistrictSetbacks(20, 15, 5, 15),
            adu=_sf_adu(800, 20, 20), pool=PoolRules(5, 5), garage=GarageRules(20, 5, 3),
        ),
        # multi-family
        ZoningDistrict(
            code="R-2", name="Two-Family Residential",
            description="Duplex and two-family dwellings",
            min_lot_size_sq_ft=6000, max_lot_coverage_pct=50, max_building_height_ft=30,
            setbacks=DistrictSetbacks(20, 15, 5, 15),
            adu=_sf_adu(800, 20, 25), pool=PoolRules(5, 5), garage=GarageRules(20, 5, 5),
        ),
        ZoningDistrict(
            code="R-3", name="Multi-Family Residential",
            description="Apartments, condos, townhomes",
            min_lot_size_sq_ft=6000, max_lot_coverage_pct=50, max_building_height_ft=40,
            setbacks=DistrictSetbacks(20, 15, 10, 15),
            adu=_NO_ADU, pool=PoolRules(10, 5), garage=GarageRules(20, 5, 10),
        ),
        ZoningDistrict(
            code="R-3A", name="Multi-Family Residential (High Rise)",
            description="High-density apartments and condos",
            min_lot_size_sq_ft=10000, max_lot_coverage_pct=60, max_building_height_ft=56,
            setbacks=DistrictSetbacks(25, 20, 15, 20),
            adu=_NO_ADU, pool=PoolRules(10, 5), garage=GarageRules(25, 10, 15),
        ),
        ZoningDistrict(
            code="R-4", name="Multi-Family Residential (Medium High Rise)",
            description="Medium high-density residential",
            min_lot_size_sq_ft=8000, max_lot_coverage_pct=55, max_building_height_ft=48,
            setbacks=DistrictSetbacks(25, 20, 10, 15),
            adu=_NO_ADU, pool=PoolRules(10, 5), garage=GarageRules(25, 10, 10),
        ),
        ZoningDistrict(
            code="R-5", name="Multi-Family Residential (High Density)",
            description="Highest density residential",
            min_lot_size_sq_ft=10000, max_lot_coverage_pct=60, max_building_height_ft=250,
            setbacks=DistrictSetbacks(30, 25, 15, 20),
            adu=_NO_ADU, pool=PoolRules(15, 10), garage=GarageRules(30, 15, 15),
        ),
    ]
    return {d.code: d for d in districts}

"""Zoning endpoints: district lookup, ADU eligibility and setback checks."""

from fastapi import APIRouter, HTTPException

from rezio.api.errors import unwrap
from rezio.core.geometry.setbacks import validate_setbacks
from rezio.core.rules.catalog import get_rulebook
from rezio.core.rules.models import Jurisdiction
from rezio.core.rules.zoning import (
    ZoningDistrict,
    adu_eligibility,
    check_setbacks,
    find_district,
    max_lot_coverage_sq_ft,
)
from rezio.models.schemas import ZoningCheckRequest

router = APIRouter(tags=["zoning"])


def _jurisdiction(name: str) -> Jurisdiction:
    jurisdiction = get_rulebook().get(name)
    if jurisdiction is None:
        raise HTTPException(404, detail=f"Unknown jurisdiction '{name}'")
    return jurisdiction


def _district(jurisdiction: Jurisdiction, code: str) -> ZoningDistrict:
    district = find_district(jurisdiction.districts, code)
    if district is None:
        raise HTTPException(404, detail=f"No zoning district '{code}' in {jurisdiction.name}")
    return district


@router.get("/zoning/{jurisdiction}/districts")
def list_districts(jurisdiction: str):
    """List a jurisdiction's zoning districts."""
    j = _jurisdiction(jurisdiction)
    return {
        "jurisdiction": j.name,
        "districts": [
            {
                "code": d.code,
                "name": d.name,
                "description": d.description,
                "adu_allowed": d.adu.allowed,
            }
            for d in j.districts.values()
        ],
    }


@router.get("/zoning/{jurisdiction}/districts/{code}")
def get_district(jurisdiction: str, code: str):
    """Full rules for one district; R1-6 and R-1-6 resolve alike."""
    return _district(_jurisdiction(jurisdiction), code).to_dict()


@router.post("/zoning/check")
def check_zoning(req: ZoningCheckRequest):
    """Check a structure's setbacks, and ADU eligibility, against its district."""
    district = _district(_jurisdiction(req.jurisdiction), req.zoning_code)

    result = {
        "jurisdiction": req.jurisdiction,
        "zoning_code": district.code,
        "structure": req.structure,
        "setbacks": None,
        "adu": None,
        "max_lot_coverage_sq_ft": None,
    }
    if req.setbacks is not None:
        provided = unwrap(validate_setbacks(req.setbacks))
        result["setbacks"] = check_setbacks(district, provided, req.structure).to_dict()
    if req.structure == "adu":
        result["adu"] = adu_eligibility(district, req.lot_size_sq_ft, req.proposed_sq_ft).to_dict()
    if req.lot_size_sq_ft is not None:
        result["max_lot_coverage_sq_ft"] = max_lot_coverage_sq_ft(district, req.lot_size_sq_ft)
    return result

"""Tests for zoning district lookup, ADU eligibility and setback checks."""

import pytest

from rezio.core.geometry.setbacks import Setbacks
from rezio.core.rules.catalog import RuleBook, RuleCatalogError, parse_jurisdictions, phoenix_jurisdiction
from rezio.core.rules.zoning import (
    adu_eligibility,
    check_setbacks,
    find_district,
    max_lot_coverage_sq_ft,
    parse_district,
    phoenix_districts,
    required_setbacks,
)

PHX = phoenix_districts()


class TestFindDistrict:
    @pytest.mark.parametrize("code", ["R1-6", "r1-6", " R1 - 6 ", "R-1-6"])
    def test_code_variants(self, code):
        assert find_district(PHX, code).code == "R1-6"

    def test_multi_family(self):
        assert find_district(PHX, "r-3a").name == "Multi-Family Residential (High Rise)"

    def test_unknown(self):
        assert find_district(PHX, "R1-99") is None
        assert find_district({}, "R1-6") is None

    def test_phoenix_table(self):
        assert list(PHX) == ["R1-18", "R1-14", "R1-10", "R1-8", "R1-6", "R-2", "R-3", "R-3A", "R-4", "R-5"]
        assert phoenix_jurisdiction().districts.keys() == PHX.keys()


class TestAduEligibility:
    def test_not_permitted_in_multi_family(self):
        result = adu_eligibility(PHX["R-3"], 20000)
        assert not result.allowed
        assert result.reason == "ADUs not permitted in this zoning district"

    def test_lot_too_small(self):
        result = adu_eligibility(PHX["R1-6"], 5000)
        assert not result.allowed
        assert result.reason == "Lot must be at least 6,000 sq ft (yours is 5,000)"

    def test_allowed_with_max_size(self):
        result = adu_eligibility(PHX["R1-8"], 8000)
        assert result.allowed
        assert result.max_size_sq_ft == 1000
        assert result.warnings == []

    def test_oversized_proposal_warns(self):
        result = adu_eligibility(PHX["R1-6"], 7000, proposed_sq_ft=900)
        assert result.allowed
        assert result.warnings == ["Proposed 900 sq ft exceeds max 800 sq ft"]

    def test_unknown_lot_size_skips_lot_check(self):
        assert adu_eligibility(PHX["R1-6"]).allowed


class TestCheckSetbacks:
    def test_primary_violations(self):
        check = check_setbacks(PHX["R1-6"], Setbacks(front=18, rear=15, side_left=5, side_right=4))
        assert not check.valid
        assert [v.side for v in check.violations] == ["front", "side_right"]
        assert [v.message for v in check.violations] == [
            "Front setback: 18' provided, 20' required",
            "Right side setback: 4' provided, 5' required",
        ]

    def test_adu_uses_accessory_setbacks(self):
        provided = Setbacks(front=20, rear=5, side_left=5, side_right=5)
        assert check_setbacks(PHX["R1-10"], provided, "adu").valid
        assert not check_setbacks(PHX["R1-10"], provided, "primary").valid

    def test_pool_setback_from_property_line(self):
        assert required_setbacks(PHX["R-5"], "pool").rear == 15
        check = check_setbacks(PHX["R-5"], Setbacks(front=20, rear=10, side_left=15, side_right=15), "pool")
        assert [v.side for v in check.violations] == ["rear"]

    def test_garage(self):
        check = check_setbacks(PHX["R1-6"], Setbacks(front=20, rear=5, side_left=3, side_right=3), "garage")
        assert check.valid

    def test_unknown_structure_uses_primary(self):
        assert required_setbacks(PHX["R1-18"], "shed") == PHX["R1-18"].setbacks

    def test_to_dict(self):
        data = check_setbacks(PHX["R1-6"], Setbacks(front=20, rear=10, side_left=5, side_right=5)).to_dict()
        assert data["valid"] is False
        assert data["required"]["street_side"] == 15
        assert data["violations"][0]["message"] == "Rear setback: 10' provided, 15' required"


class TestLotCoverage:
    def test_max_coverage(self):
        assert max_lot_coverage_sq_ft(PHX["R1-6"], 6000) == pytest.approx(2700)


class TestDistrictCatalog:
    RAW = {
        "code": "rs-6",
        "name": "Single Residence",
        "setbacks": {"front": 20, "rear": 20, "side": 5},
        "adu": {"allowed": True, "max_size_sq_ft": 1000, "setbacks": {"front": 20, "rear": 5, "side": 5}},
    }

    def test_parse_district_defaults(self):
        district = parse_district(self.RAW)
        assert district.code == "RS-6"
        assert district.adu.allowed
        assert district.adu.min_lot_size_sq_ft == 0
        assert district.garage.setback_front == 20
        assert district.pool.setback_from_property == 5

    def test_missing_adu_section_disallows(self):
        raw = {k: v for k, v in self.RAW.items() if k != "adu"}
        assert not parse_district(raw).adu.allowed

    @pytest.mark.parametrize("bad", [
        {"name": "x", "setbacks": {"front": 1, "rear": 1, "side": 1}},
        {"code": "X", "name": "x", "setbacks": {"front": 1, "rear": 1}},
        {"code": "X", "name": "x", "setbacks": {"front": -1, "rear": 1, "side": 1}},
        {"code": "X", "name": "x", "setbacks": {"front": 1, "rear": 1, "side": 1}, "adu": [1]},
    ])
    def test_invalid_district(self, bad):
        with pytest.raises(ValueError):
            parse_district(bad)

    def test_loaded_with_jurisdiction(self):
        (mesa,) = parse_jurisdictions({"jurisdictions": [{"name": "Mesa", "zoning_districts": [self.RAW]}]})
        assert find_district(mesa.districts, "RS-6").name == "Single Residence"

    def test_bad_district_raises_catalog_error(self):
        with pytest.raises(RuleCatalogError):
            parse_jurisdictions({"jurisdictions": [{"name": "Mesa", "zoning_districts": [{"code": "X"}]}]})

    def test_rulebook_merges_districts(self):
        book = RuleBook([phoenix_jurisdiction()])
        (extra,) = parse_jurisdictions({"jurisdictions": [{"name": "Phoenix", "zoning_districts": [self.RAW]}]})
        book.add(extra)
        assert "RS-6" in book.get("Phoenix").districts
        assert "R1-6" in book.get("Phoenix").districts

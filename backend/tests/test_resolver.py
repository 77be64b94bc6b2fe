"""Tests for requirement rule resolution and the rule catalog."""

import json

import pytest

from rezio.core.rules.catalog import (
    RuleBook,
    RuleCatalogError,
    build_rulebook,
    get_rulebook,
    load_jurisdictions,
    parse_jurisdictions,
    phoenix_jurisdiction,
    reset_rulebook,
)
from rezio.core.rules.models import Jurisdiction, Requirement, RequirementRule, Trigger
from rezio.core.rules.resolver import requirement_disciplines, resolve_requirements


@pytest.fixture
def phoenix_book():
    return RuleBook([phoenix_jurisdiction()])


def _names(rules):
    return [r.name for r in rules]


class TestPhoenixRules:
    def test_large_addition_with_structural_and_plumbing(self, phoenix_book):
        rules = resolve_requirements(
            "Phoenix",
            "ADDITION",
            {"square_footage": 600, "structural_changes": "true", "plumbing_work": "true"},
            rulebook=phoenix_book,
        )
        assert _names(rules) == [
            "Addition Over 500 SF",
            "Structural Changes Require Engineering",
            "Plumbing Work Requires Permit",
        ]

    def test_small_addition_qualifies_for_otc(self, phoenix_book):
        rules = resolve_requirements(
            "Phoenix",
            "ADDITION",
            {"square_footage": 400, "structural_changes": "false"},
            rulebook=phoenix_book,
        )
        assert _names(rules) == ["Small Addition OTC"]

    def test_one_failing_trigger_excludes_rule(self, phoenix_book):
        # OTC needs both <= 500 SF and no structural changes
        rules = resolve_requirements(
            "Phoenix",
            "ADDITION",
            {"square_footage": 400, "structural_changes": "true"},
            rulebook=phoenix_book,
        )
        assert "Small Addition OTC" not in _names(rules)
        assert "Structural Changes Require Engineering" in _names(rules)

    def test_adu_rules(self, phoenix_book):
        rules = resolve_requirements("Phoenix", "ADU", {"project_type": "ADU"}, rulebook=phoenix_book)
        assert _names(rules) == [
            "ADU Requires Plan Review",
            "ADU Requires Structural Engineering",
            "ADU Requires Survey",
        ]
        assert requirement_disciplines(rules) == ["Structural Engineer", "Land Surveyor"]

    def test_unknown_jurisdiction_is_empty(self, phoenix_book):
        assert resolve_requirements("Nowhereville", "ADDITION", {}, rulebook=phoenix_book) == []

    def test_project_type_not_covered(self, phoenix_book):
        assert resolve_requirements("Phoenix", "FENCE", {"square_footage": 900}, rulebook=phoenix_book) == []

    def test_default_rulebook_has_phoenix(self):
        rules = resolve_requirements("Phoenix", "ADDITION", {"square_footage": 600})
        assert "Addition Over 500 SF" in _names(rules)


class TestRuleSelection:
    def _book(self, *rules):
        return RuleBook([Jurisdiction(name="Mesa", rules=list(rules))])

    def _rule(self, name, triggers=(), active=True, types=("ADDITION",), discipline=None):
        return RequirementRule(
            jurisdiction="Mesa",
            name=name,
            project_types=types,
            requirement=Requirement(name=name),
            triggers=tuple(triggers),
            is_active=active,
            discipline=discipline,
        )

    def test_inactive_rule_is_skipped(self):
        book = self._book(self._rule("On"), self._rule("Off", active=False))
        assert _names(resolve_requirements("Mesa", "ADDITION", {}, rulebook=book)) == ["On"]

    def test_rule_without_triggers_always_fires(self):
        book = self._book(self._rule("Always"))
        assert _names(resolve_requirements("Mesa", "ADDITION", {}, rulebook=book)) == ["Always"]

    def test_stored_order_is_preserved(self):
        gt = Trigger("square_footage", "GREATER_THAN", "100")
        book = self._book(self._rule("Z", [gt]), self._rule("A", [gt]), self._rule("M", [gt]))
        rules = resolve_requirements("Mesa", "ADDITION", {"square_footage": 200}, rulebook=book)
        assert _names(rules) == ["Z", "A", "M"]

    def test_disciplines_are_deduplicated(self):
        rules = [
            self._rule("a", discipline="Structural Engineer"),
            self._rule("b"),
            self._rule("c", discipline="Civil Engineer"),
            self._rule("d", discipline="Structural Engineer"),
        ]
        assert requirement_disciplines(rules) == ["Structural Engineer", "Civil Engineer"]


CATALOG = {
    "jurisdictions": [
        {
            "name": "Mesa",
            "full_name": "City of Mesa",
            "state": "Arizona",
            "rules": [
                {
                    "name": "Pool Barrier",
                    "project_types": ["POOL"],
                    "discipline": "Civil Engineer",
                    "requirement": {"name": "Barrier Inspection", "type": "REVIEW"},
                    "triggers": [
                        {"field_name": "lot_size", "operator": "GREATER_THAN", "value": 5000},
                    ],
                }
            ],
        }
    ]
}


class TestCatalog:
    def test_parse_jurisdictions(self):
        (mesa,) = parse_jurisdictions(CATALOG)
        assert mesa.full_name == "City of Mesa"
        rule = mesa.rules[0]
        assert rule.jurisdiction == "Mesa"
        assert rule.project_types == ("POOL",)
        assert rule.triggers[0].value == "5000"  # values stored as strings

    def test_unknown_operator_rejected(self):
        bad = json.loads(json.dumps(CATALOG))
        bad["jurisdictions"][0]["rules"][0]["triggers"][0]["operator"] = "CONTAINS"
        with pytest.raises(RuleCatalogError):
            parse_jurisdictions(bad)

    def test_missing_rule_keys_rejected(self):
        with pytest.raises(RuleCatalogError):
            parse_jurisdictions({"jurisdictions": [{"name": "X", "rules": [{"name": "r"}]}]})

    def test_missing_top_level_list(self):
        with pytest.raises(RuleCatalogError):
            parse_jurisdictions({"rules": []})

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps(CATALOG), encoding="utf-8")
        book = build_rulebook(str(path))
        assert book.names() == ["Mesa", "Phoenix"]
        rules = resolve_requirements("Mesa", "POOL", {"lot_size": 7200}, rulebook=book)
        assert _names(rules) == ["Pool Barrier"]

    def test_invalid_json_file(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(RuleCatalogError):
            load_jurisdictions(path)

    def test_shared_rulebook_is_built_once(self):
        reset_rulebook()
        first = get_rulebook()
        assert get_rulebook() is first
        assert "Phoenix" in first

"""Tests for engineering discipline generation and project attribute snapshots."""

from rezio.core.rules.attributes import build_project_attributes, details_from_conversation
from rezio.core.rules.engineering import generate_engineering_requirements


def _disciplines(reqs):
    return [r.discipline for r in reqs]


class TestEngineeringRequirements:
    def test_small_adu(self):
        reqs = generate_engineering_requirements("adu", 600)
        assert _disciplines(reqs) == ["Architect of Record", "Structural Engineer", "MEP Engineer"]

    def test_large_adu_adds_title_24(self):
        reqs = generate_engineering_requirements("ADU", 900)
        assert _disciplines(reqs)[-1] == "Title 24 Energy Compliance"

    def test_small_renovation(self):
        assert _disciplines(generate_engineering_requirements("renovation", 150)) == ["Permit Plans"]
        assert _disciplines(generate_engineering_requirements("renovation", 300)) == [
            "Permit Plans",
            "MEP Review",
        ]

    def test_new_construction(self):
        reqs = generate_engineering_requirements("new_construction", 400)
        assert _disciplines(reqs) == [
            "Architect of Record",
            "Structural Engineer",
            "Civil Engineer",
            "MEP Engineer",
            "Geotechnical Engineer",
            "Land Surveyor",
        ]

    def test_mid_size_addition(self):
        reqs = generate_engineering_requirements("addition", 1200)
        assert _disciplines(reqs) == [
            "Architect of Record",
            "Structural Engineer",
            "MEP Engineer",
            "Land Surveyor",
        ]

    def test_commercial_property(self):
        reqs = generate_engineering_requirements("addition", 400, property_type="commercial")
        assert "Fire Protection Engineer" in _disciplines(reqs)
        assert "ADA Compliance Specialist" in _disciplines(reqs)

    def test_large_lot_extends_civil_notes(self):
        reqs = generate_engineering_requirements("new_construction", 1800, lot_size=25000)
        civil = next(r for r in reqs if r.discipline == "Civil Engineer")
        assert "Large lot" in civil.notes

    def test_multi_story_rewrites_notes(self):
        reqs = generate_engineering_requirements("new_construction", 1800, stories=2)
        structural = next(r for r in reqs if r.discipline == "Structural Engineer")
        assert structural.notes.startswith("Multi-story structural analysis")

    def test_large_project_architect_notes(self):
        reqs = generate_engineering_requirements("addition", 2500)
        architect = next(r for r in reqs if r.discipline == "Architect of Record")
        assert "large projects" in architect.notes

    def test_all_required(self):
        reqs = generate_engineering_requirements("new_construction", 3000, stories=3)
        assert all(r.required for r in reqs)


class TestProjectAttributes:
    def test_camel_case_record(self):
        attrs = build_project_attributes({
            "projectType": "addition",
            "squareFootage": 600,
            "structuralChanges": True,
            "plumbingWork": False,
            "lotSize": None,
        })
        assert attrs == {
            "project_type": "ADDITION",
            "square_footage": 600,
            "structural_changes": "true",
            "plumbing_work": "false",
        }

    def test_snake_case_record(self):
        attrs = build_project_attributes({"project_type": "adu", "stories": 2})
        assert attrs == {"project_type": "ADU", "stories": 2}

    def test_conversation_range_uses_upper_bound(self):
        details = details_from_conversation(
            "We want a 400-600 sq ft addition with a new bathroom, removing one wall.",
            "addition",
        )
        assert details.square_footage == 600
        assert details.structural_changes
        assert details.plumbing_work
        assert not details.electrical_work
        assert details.electrical_service_amps is None

    def test_conversation_electrical(self):
        details = details_from_conversation("Panel upgrade for a 350 sq ft studio", "adu")
        assert details.square_footage == 350
        assert details.electrical_service_amps == 200
        assert details.to_attributes()["electrical_work"] == "true"
        assert details.to_attributes()["project_type"] == "ADU"

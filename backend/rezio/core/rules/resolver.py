"""Requirement rule resolution for a jurisdiction, project type and snapshot."""

from __future__ import annotations

import logging
from typing import Optional

from rezio.core.rules.catalog import RuleBook, get_rulebook
from rezio.core.rules.models import ProjectAttributes, RequirementRule
from rezio.core.rules.triggers import evaluate_trigger

logger = logging.getLogger(__name__)


def rule_fires(rule: RequirementRule, attributes: ProjectAttributes) -> bool:
    """All triggers must pass; a rule with no triggers always fires."""
    return all(evaluate_trigger(t, attributes) for t in rule.triggers)


def resolve_requirements(
    jurisdiction_name: str,
    project_type: str,
    attributes: ProjectAttributes,
    rulebook: Optional[RuleBook] = None,
) -> list[RequirementRule]:
    """Return the active rules of a jurisdiction that apply to the project.

    Order follows the jurisdiction's stored rule order. An unknown
    jurisdiction yields an empty list.
    """
    book = rulebook if rulebook is not None else get_rulebook()
    if jurisdiction_name not in book:
        logger.debug("No rule set for jurisdiction %r", jurisdiction_name)
        return []

    candidates = [
        rule for rule in book.rules_for(jurisdiction_name)
        if rule.is_active
        and rule.jurisdiction == jurisdiction_name
        and rule.applies_to(project_type)
    ]
    fired = [rule for rule in candidates if rule_fires(rule, attributes)]
    logger.debug(
        "%s/%s: %d of %d candidate rules fired",
        jurisdiction_name, project_type, len(fired), len(candidates),
    )
    return fired


def requirement_disciplines(rules: list[RequirementRule]) -> list[str]:
    """Distinct disciplines named by the rules, in first-seen order."""
    seen: list[str] = []
    for rule in rules:
        if rule.discipline and rule.discipline not in seen:
            seen.append(rule.discipline)
    return seen

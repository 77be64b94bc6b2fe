"""Single-trigger evaluation against a project attribute snapshot.

Evaluation is fail-closed: an unknown operator, a missing attribute or a
value that cannot be read as a number for a numeric comparison all yield
False, so an incomplete project never over-triggers a requirement.
"""

from __future__ import annotations

import math

from rezio.core.rules.models import Operator, ProjectAttributes, Trigger


def evaluate_trigger(trigger: Trigger, attributes: ProjectAttributes) -> bool:
    """Return True if the attribute named by the trigger satisfies it."""
    if trigger.field_name not in attributes:
        return False
    actual = attributes[trigger.field_name]

    if trigger.operator == Operator.GREATER_THAN:
        lhs, rhs = _to_number(actual), _to_number(trigger.value)
        return lhs is not None and rhs is not None and lhs > rhs

    if trigger.operator == Operator.LESS_THAN_OR_EQUAL:
        lhs, rhs = _to_number(actual), _to_number(trigger.value)
        return lhs is not None and rhs is not None and lhs <= rhs

    if trigger.operator == Operator.EQUALS:
        return attribute_to_str(actual) == attribute_to_str(trigger.value)

    return False


def attribute_to_str(value: object) -> str:
    """String form used for EQUALS.

    Booleans render as 'true'/'false' and integral floats drop their
    fractional part (600.0 -> '600'), matching how stored trigger values
    and JSON clients spell them.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value)


def _to_number(value: object) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            return None
    if math.isnan(number):
        return None
    return number

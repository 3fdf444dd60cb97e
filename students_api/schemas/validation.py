"""
Declarative field constraints.

An entity lists its constraints as ``{field: (rule, ...)}``; `check_fields`
walks them in declaration order and reports the first broken rule of every
field, so a single pass tells the caller about all bad fields at once.
"""
from typing import Any, Callable, Dict, List, Mapping, NamedTuple, Sequence

from email_validator import EmailNotValidError, validate_email


class Rule(NamedTuple):
    name: str
    check: Callable[[Any], bool]


class FieldViolation(NamedTuple):
    field: str
    rule: str

    @property
    def message(self) -> str:
        label = self.field.capitalize()
        if self.rule == REQUIRED.name:
            return f"field {label} is a required field"
        if self.rule == EMAIL.name:
            return f"field {label} is not a valid email"
        return f"field {label} is invalid"


def _is_present(value: Any) -> bool:
    # Zero values count as missing: None, "", 0
    if value is None or value is False:
        return False
    if isinstance(value, (str, int, float)):
        return bool(value)
    return True


def _is_email(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


REQUIRED = Rule("required", _is_present)
EMAIL = Rule("email", _is_email)


def check_fields(
    values: Mapping[str, Any],
    constraints: Dict[str, Sequence[Rule]],
) -> List[FieldViolation]:
    violations = []
    for field, rules in constraints.items():
        value = values.get(field)
        for rule in rules:
            if not rule.check(value):
                violations.append(FieldViolation(field, rule.name))
                break
    return violations

"""
Transformation rules applied to values while mapping.

Rules are compiled once per mapping. A rule that cannot run (unsupported
type, uncompilable regex, missing parameters) compiles to a direct copy plus
a warning so a single bad rule never aborts a batch.
"""

import json
import re
from abc import ABC, abstractmethod
from typing import Any

from catalog_pipeline.core.models import TRANSFORMATION_TYPES, TransformationRule
from catalog_pipeline.observability.logger import get_logger
from catalog_pipeline.observability.metrics import increment_counter, rule_fallbacks_total

logger = get_logger(__name__)

# $1..$99, $& (whole match) and $$ (literal dollar) in replacement strings
_REPLACEMENT_TOKEN = re.compile(r"\$(\$|&|\d{1,2})")


class RuleCompilationError(ValueError):
    """A transformation rule cannot be compiled; callers fall back to direct."""


class Transformation(ABC):
    """Compiled transformation for one mapping."""

    rule_type: str = ""

    def __init__(self, rule: TransformationRule | None):
        self.rule = rule

    @abstractmethod
    def apply(self, value: Any) -> Any:
        """Return the transformed value. Must not raise for any JSON value."""


class DirectTransformation(Transformation):
    rule_type = "direct"

    def apply(self, value: Any) -> Any:
        return value


class FormatTransformation(Transformation):
    """
    Single regex find/replace on string values.

    Parameters:
    - expression (or parameters.pattern): Regular expression
    - parameters.replacement: Replacement text; $1, $& and $$ are expanded
    - parameters.flags: "i" ignores case, "g" replaces every match
    Non-string and non-matching values pass through unchanged.
    """

    rule_type = "format"

    def __init__(self, rule: TransformationRule):
        super().__init__(rule)
        pattern = rule.expression or rule.parameters.get("pattern")
        if not pattern:
            raise RuleCompilationError("format rule requires an expression")

        flag_text = str(rule.parameters.get("flags", ""))
        flags = re.IGNORECASE if "i" in flag_text else 0
        try:
            self.pattern = re.compile(pattern, flags)
        except re.error as e:
            raise RuleCompilationError(f"invalid regex '{pattern}': {e}") from e

        self.replacement = str(rule.parameters.get("replacement", ""))
        self.count = 0 if "g" in flag_text else 1

    def _expand(self, match: re.Match) -> str:
        def token(m: re.Match) -> str:
            ref = m.group(1)
            if ref == "$":
                return "$"
            if ref == "&":
                return match.group(0)
            index = int(ref)
            if 0 < index <= match.re.groups:
                return match.group(index) or ""
            return m.group(0)

        return _REPLACEMENT_TOKEN.sub(token, self.replacement)

    def apply(self, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        return self.pattern.sub(self._expand, value, count=self.count)


def _lookup_key(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value)


class LookupTransformation(Transformation):
    """
    Replace values found in a lookup table.

    Parameters:
    - parameters.lookup_table: {source value: replacement}
    - parameters.default: Optional value for keys not in the table
    Keys are compared against the value's string form (true, 1, "abc").
    """

    rule_type = "lookup"

    _MISSING = object()

    def __init__(self, rule: TransformationRule):
        super().__init__(rule)
        table = rule.parameters.get("lookup_table", rule.parameters.get("lookupTable"))
        if not isinstance(table, dict):
            raise RuleCompilationError("lookup rule requires a lookup_table mapping")
        self.table = {str(k): v for k, v in table.items()}
        self.default = rule.parameters.get("default", self._MISSING)

    def apply(self, value: Any) -> Any:
        if value is None:
            return value
        key = _lookup_key(value)
        if key in self.table:
            return self.table[key]
        if self.default is not self._MISSING:
            return self.default
        return value


TRANSFORMATION_REGISTRY: dict[str, type[Transformation]] = {
    "direct": DirectTransformation,
    "format": FormatTransformation,
    "lookup": LookupTransformation,
}


def compile_transformation(
    rule: TransformationRule | None, label: str = ""
) -> tuple[Transformation, str | None]:
    """
    Compile a transformation rule.

    Args:
        rule: Rule to compile (None means direct)
        label: Mapping description used in the warning text

    Returns:
        (transformation, warning) where warning is None unless the rule
        degraded to a direct copy
    """
    if rule is None:
        return DirectTransformation(None), None

    transformation_class = TRANSFORMATION_REGISTRY.get(rule.type)
    if transformation_class is None and rule.type in TRANSFORMATION_TYPES:
        warning = f"{label}: transformation type '{rule.type}' is not supported; value copied unchanged"
    elif transformation_class is None:
        warning = f"{label}: transformation type '{rule.type}' is unknown; value copied unchanged"
    else:
        try:
            return transformation_class(rule), None
        except RuleCompilationError as e:
            warning = f"{label}: {e}; value copied unchanged"

    logger.warning(warning, extra={"rule_type": rule.type})
    increment_counter(rule_fallbacks_total, rule_type=rule.type)
    return DirectTransformation(rule), warning

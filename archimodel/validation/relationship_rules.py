"""
Relationship Rules Engine - ArchiMate relationship legality.

Decides whether a relationship kind may connect a source element kind to a
target element kind, based on ArchiMate 3.2 Appendix B simplified into one
rule per relationship kind. Every rule consults only the category and layer
of both ends, so the engine is stateless and safe to call from anywhere.

Key Features:
- Per-relationship-kind rule table
- Derivation of all legal kinds between two element kinds
- Derivation of all legal targets for a source kind
- Validation results that always carry the legal alternatives
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from ..exceptions import ValidationRejectedError
from ..taxonomy.classifier import classify, layer_of, layer_order
from ..taxonomy.types import (
    ALL_ELEMENT_KINDS,
    RELATIONSHIP_KINDS,
    Category,
)

logger = logging.getLogger(__name__)

_BEHAVIOR = (Category.BEHAVIOR_INTERNAL, Category.BEHAVIOR_EXTERNAL)


@dataclass(frozen=True)
class _Ends:
    """Classification of both ends of a candidate relationship."""
    source_kind: str
    target_kind: str
    source_category: Category
    target_category: Category
    source_level: int
    target_level: int

    @property
    def same_layer(self) -> bool:
        return layer_of(self.source_kind) == layer_of(self.target_kind)

    def either(self, *categories: Category) -> bool:
        return self.source_category in categories or self.target_category in categories


def _structural_containment(ends: _Ends) -> bool:
    # Composition / Aggregation
    if ends.source_kind == ends.target_kind:
        return True
    if ends.either(Category.COMPOSITE):
        return True
    return ends.same_layer


def _specialization(ends: _Ends) -> bool:
    return ends.source_kind == ends.target_kind


def _assignment(ends: _Ends) -> bool:
    if ends.source_category == Category.ACTIVE_STRUCTURE and ends.target_category in _BEHAVIOR:
        return True
    if (ends.source_category == Category.BEHAVIOR_INTERNAL
            and ends.target_category == Category.PASSIVE_STRUCTURE):
        return True
    # WorkPackage classifies as ImplementationMigration, so this never matches
    return ends.source_kind == "WorkPackage" and ends.source_category == Category.ACTIVE_STRUCTURE


def _realization(ends: _Ends) -> bool:
    if (ends.source_category == Category.BEHAVIOR_INTERNAL
            and ends.target_category == Category.BEHAVIOR_EXTERNAL):
        return True
    if ends.source_level > ends.target_level:
        return True
    if ends.target_category in (Category.STRATEGY, Category.MOTIVATION):
        return True
    return ends.source_kind == "Artifact"


def _serving(ends: _Ends) -> bool:
    if ends.source_category == Category.BEHAVIOR_EXTERNAL:
        return True
    if (ends.source_category == Category.ACTIVE_STRUCTURE
            and ends.target_category == Category.ACTIVE_STRUCTURE):
        return True
    if ends.source_level > ends.target_level:
        return True
    if ends.source_kind == "Capability" and ends.target_kind == "ValueStream":
        return True
    return ends.same_layer


def _access(ends: _Ends) -> bool:
    return (ends.source_category in _BEHAVIOR + (Category.EVENT,)
            and ends.target_category == Category.PASSIVE_STRUCTURE)


def _influence(ends: _Ends) -> bool:
    return ends.target_category == Category.MOTIVATION


def _triggering(ends: _Ends) -> bool:
    return ends.either(Category.EVENT, *_BEHAVIOR, Category.IMPLEMENTATION_MIGRATION)


def _flow(ends: _Ends) -> bool:
    return ends.either(*_BEHAVIOR, Category.EVENT, Category.PASSIVE_STRUCTURE)


def _association(ends: _Ends) -> bool:
    return True


RELATIONSHIP_RULES: Dict[str, Callable[[_Ends], bool]] = {
    "Composition": _structural_containment,
    "Aggregation": _structural_containment,
    "Specialization": _specialization,
    "Assignment": _assignment,
    "Realization": _realization,
    "Serving": _serving,
    "Access": _access,
    "Influence": _influence,
    "Triggering": _triggering,
    "Flow": _flow,
    "Association": _association,
}


@dataclass
class ValidationResult:
    """
    Outcome of validating one relationship triple.

    ``reason`` is empty and ``suggestions`` is empty when ``ok`` is True.
    """
    ok: bool
    source_kind: str
    target_kind: str
    relationship_kind: str
    reason: str = ""
    suggestions: List[str] = field(default_factory=list)

    def raise_if_invalid(self) -> None:
        """
        Raise ValidationRejectedError when the relationship was rejected.

        Raises:
            ValidationRejectedError: If ``ok`` is False
        """
        if not self.ok:
            raise ValidationRejectedError(
                self.reason,
                source_kind=self.source_kind,
                target_kind=self.target_kind,
                relationship_kind=self.relationship_kind,
                suggestions=list(self.suggestions),
            )

    def to_dict(self) -> Dict:
        if self.ok:
            return {"ok": True}
        return {"ok": False, "reason": self.reason, "suggestions": list(self.suggestions)}


def is_valid(source_kind: str, target_kind: str, relationship_kind: str) -> bool:
    """
    Check if a relationship kind may connect two element kinds.

    Args:
        source_kind: Element kind at the source end
        target_kind: Element kind at the target end
        relationship_kind: Relationship kind, e.g. "Serving"

    Returns:
        True if legal, False otherwise (including unknown relationship kinds)

    Raises:
        UnknownKindError: If either element kind is not in the taxonomy
    """
    source_layer = layer_of(source_kind)
    target_layer = layer_of(target_kind)

    rule = RELATIONSHIP_RULES.get(relationship_kind)
    if rule is None:
        return False

    ends = _Ends(
        source_kind=source_kind,
        target_kind=target_kind,
        source_category=classify(source_kind),
        target_category=classify(target_kind),
        source_level=layer_order(source_layer),
        target_level=layer_order(target_layer),
    )
    return rule(ends)


def valid_kinds(source_kind: str, target_kind: str) -> List[str]:
    """All legal relationship kinds between two element kinds, in enumeration order."""
    return [
        kind for kind in RELATIONSHIP_KINDS
        if is_valid(source_kind, target_kind, kind)
    ]


def valid_targets(source_kind: str, relationship_kind: str) -> List[str]:
    """All element kinds a relationship of this kind may point to from ``source_kind``."""
    return [
        kind for kind in ALL_ELEMENT_KINDS
        if is_valid(source_kind, kind, relationship_kind)
    ]


def validate(source_kind: str, target_kind: str, relationship_kind: str) -> ValidationResult:
    """
    Validate a relationship and explain a rejection.

    Args:
        source_kind: Element kind at the source end
        target_kind: Element kind at the target end
        relationship_kind: The relationship kind to check

    Returns:
        ValidationResult; on rejection ``suggestions`` lists the legal kinds
        between the two element kinds in enumeration order
    """
    if is_valid(source_kind, target_kind, relationship_kind):
        return ValidationResult(
            ok=True,
            source_kind=source_kind,
            target_kind=target_kind,
            relationship_kind=relationship_kind,
        )

    suggestions = valid_kinds(source_kind, target_kind)
    if not suggestions:
        reason = f"No valid relationships exist between {source_kind} and {target_kind} in ArchiMate 3.2"
    else:
        reason = f"{relationship_kind} is not a valid relationship between {source_kind} and {target_kind}"

    logger.debug(f"Rejected {relationship_kind} {source_kind} -> {target_kind}; suggestions: {suggestions}")
    return ValidationResult(
        ok=False,
        source_kind=source_kind,
        target_kind=target_kind,
        relationship_kind=relationship_kind,
        reason=reason,
        suggestions=suggestions,
    )


_CATEGORY_ADVICE: Dict[Category, List[str]] = {
    Category.ACTIVE_STRUCTURE: [
        "Assignment: to behavior elements (processes, functions)",
        "Composition/Aggregation: to other {layer} active structure elements",
        "Serving: to other active structure or behavior elements",
    ],
    Category.BEHAVIOR_INTERNAL: [
        "Realization: to services (external behavior)",
        "Access: to passive structure elements (objects, artifacts)",
        "Triggering: to other behavior elements or events",
        "Flow: to other behavior elements",
    ],
    Category.BEHAVIOR_EXTERNAL: [
        "Serving: to higher-layer elements",
        "Access: to passive structure elements",
    ],
    Category.MOTIVATION: [
        "Influence: to other motivation elements",
        "Realization: from core elements",
        "Association: to stakeholders, drivers",
    ],
}


def guidance(source_kind: str, target_kind: Optional[str] = None) -> str:
    """
    Human-readable relationship guidance for an element kind.

    Args:
        source_kind: Element kind to advise on
        target_kind: Optional target kind; when given, lists the legal kinds

    Returns:
        Multi-line guidance text
    """
    category = classify(source_kind)
    layer = layer_of(source_kind).value

    text = f"For {source_kind} ({layer} layer, {category.value}):\n\n"

    if target_kind:
        kinds = valid_kinds(source_kind, target_kind)
        if kinds:
            text += f"Valid relationships to {target_kind}: {', '.join(kinds)}\n"
        else:
            text += f"No valid direct relationships to {target_kind}\n"
        return text

    text += "Common relationships:\n"
    for line in _CATEGORY_ADVICE.get(category, []):
        text += f"- {line.format(layer=layer)}\n"
    return text

"""
Naming convention checker.

Combines the convention policy and the identifier transformer: for a
declaration node it yields one NamingViolation per identifier whose text
differs from its convention-correct form.
"""

from typing import Any, Iterable, Iterator, Optional

from .conventions import member_type, naming_convention
from .transform import with_convention
from .types import NamingViolation


def check(node: Any) -> Iterator[NamingViolation]:
    """
    Check the identifiers owned by a declaration node.

    Fields and locals may declare several comma-separated bindings; each one is
    checked against the same convention, in declaration order. Ungoverned
    nodes produce nothing.

    Args:
        node: Object exposing ``kind``, ``modifiers`` and ``identifiers``

    Yields:
        NamingViolation for every identifier that needs renaming
    """
    convention = naming_convention(node)
    if convention is None:
        return

    label = member_type(node.kind)
    for identifier in node.identifiers:
        corrected = with_convention(identifier, convention)
        if corrected.text != identifier.text:
            yield NamingViolation(
                start_byte=identifier.start_byte,
                end_byte=identifier.end_byte,
                kind_label=label,
                original_text=identifier.text,
                corrected_text=corrected.text,
                convention=convention,
            )


def check_all(nodes: Iterable[Any]) -> Iterator[NamingViolation]:
    """Check many declaration nodes, preserving their order."""
    for node in nodes:
        yield from check(node)


def governing_declaration(token: Any) -> Optional[Any]:
    """
    Walk up from a token to the nearest declaration that has a naming convention.

    Returns:
        The governing declaration, or None when no ancestor is governed
    """
    ancestor = getattr(token, 'parent', None)
    while ancestor is not None:
        if naming_convention(ancestor) is not None:
            return ancestor
        ancestor = getattr(ancestor, 'parent', None)
    return None

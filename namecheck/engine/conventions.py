"""
Naming convention policy.

Maps a declaration kind (plus its modifiers) to the casing convention its
identifiers must follow, and provides the label used in messages.
"""

from typing import Any, Dict, Optional

from .types import DeclarationKind, Modifiers, NamingConvention


_KIND_CONVENTIONS: Dict[DeclarationKind, NamingConvention] = {
    DeclarationKind.PROPERTY: NamingConvention.UPPER_CAMEL_CASE,
    DeclarationKind.METHOD: NamingConvention.UPPER_CAMEL_CASE,
    DeclarationKind.CLASS: NamingConvention.UPPER_CAMEL_CASE,
    DeclarationKind.STRUCT: NamingConvention.UPPER_CAMEL_CASE,
    DeclarationKind.LOCAL: NamingConvention.LOWER_CAMEL_CASE,
    DeclarationKind.PARAMETER: NamingConvention.LOWER_CAMEL_CASE,
    DeclarationKind.INTERFACE: NamingConvention.INTERFACE_PREFIX_UPPER_CAMEL_CASE,
}

# Fields visible outside their type are named like members.
_NON_PRIVATE_ACCESS = Modifiers.INTERNAL | Modifiers.PROTECTED | Modifiers.PUBLIC

_MEMBER_TYPES: Dict[DeclarationKind, str] = {
    DeclarationKind.PROPERTY: "property",
    DeclarationKind.METHOD: "method",
    DeclarationKind.CLASS: "class",
    DeclarationKind.STRUCT: "struct",
    DeclarationKind.LOCAL: "local",
    DeclarationKind.PARAMETER: "parameter",
    DeclarationKind.INTERFACE: "interface",
    DeclarationKind.FIELD: "field",
}


def convention_for(kind: DeclarationKind, modifiers: Modifiers = Modifiers.NONE) -> Optional[NamingConvention]:
    """
    Return the convention required for a declaration, or None if the kind is not governed.

    Args:
        kind: Declaration kind reported by the adapter
        modifiers: Declaration modifiers (only consulted for fields)

    Returns:
        The required NamingConvention, or None
    """
    if kind == DeclarationKind.FIELD:
        if modifiers & _NON_PRIVATE_ACCESS:
            return NamingConvention.UPPER_CAMEL_CASE
        return NamingConvention.UNDERSCORE_LOWER_CAMEL_CASE
    return _KIND_CONVENTIONS.get(kind)


def naming_convention(node: Any) -> Optional[NamingConvention]:
    """Return the convention governing a declaration node, if any."""
    kind = getattr(node, 'kind', None)
    if not isinstance(kind, DeclarationKind):
        return None
    return convention_for(kind, getattr(node, 'modifiers', Modifiers.NONE))


def member_type(kind: Any) -> str:
    """Human-readable label for a declaration kind; empty for ungoverned kinds."""
    return _MEMBER_TYPES.get(kind, "")

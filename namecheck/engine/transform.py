"""
Identifier transformation.

Normalizes an identifier into a camel-boundary string and reformats it under a
target NamingConvention. Identifiers that cannot be rewritten safely
(verbatim, escaped, or using characters outside letters, digits and
underscores) are returned unchanged.
"""

from typing import Callable, Dict

from .types import IdentifierToken, NamingConvention


def _upper(ch: str) -> str:
    # One character in, one character out; "ß" has no single-letter uppercase
    upper = ch.upper()
    return upper if len(upper) == 1 else ch


def _lower(ch: str) -> str:
    lower = ch.lower()
    return lower if len(lower) == 1 else ch


def contains_special_characters(identifier: str, allowed: str = "_") -> bool:
    """True if ``identifier`` has a character that is not a letter, digit or in ``allowed``."""
    return not all(ch.isalpha() or ch.isnumeric() or ch in allowed for ch in identifier)


def normalize(identifier: str) -> str:
    """
    Collapse underscores into camel boundaries.

    ``my_value`` becomes ``myValue`` and ``_count`` becomes ``Count``. A
    trailing underscore and the first of a doubled underscore are dropped.
    """
    chars = []
    i = 0
    length = len(identifier)
    while i < length:
        ch = identifier[i]
        if ch.isalpha() or ch.isnumeric():
            chars.append(ch)
        elif ch == "_" and i + 1 < length and identifier[i + 1] != "_":
            i += 1
            chars.append(_upper(identifier[i]))
        i += 1
    return "".join(chars)


def to_lower_camel_case(identifier: str) -> str:
    """lowerCamelCase"""
    if contains_special_characters(identifier):
        return identifier
    normalized = normalize(identifier)
    if not normalized:
        return identifier
    return _lower(normalized[0]) + normalized[1:]


def to_upper_camel_case(identifier: str) -> str:
    """UpperCamelCase"""
    if contains_special_characters(identifier):
        return identifier
    normalized = normalize(identifier)
    if not normalized:
        return identifier
    return _upper(normalized[0]) + normalized[1:]


def to_underscore_lower_camel_case(identifier: str) -> str:
    """_lowerCamelCase"""
    if contains_special_characters(identifier):
        return identifier
    normalized = normalize(identifier)
    if not normalized:
        return identifier

    first = normalized[0]
    if first.isupper():
        return "_" + _lower(first) + normalized[1:]
    if first.islower():
        return "_" + normalized
    # Digits have no case
    return normalized


def to_interface_prefix_upper_camel_case(identifier: str) -> str:
    """IUpperCamelCase"""
    if contains_special_characters(identifier):
        return identifier
    normalized = normalize(identifier)
    if not normalized:
        return identifier

    # iSomething
    if len(normalized) >= 2 and normalized[0] == "i" and normalized[1].isupper():
        return "I" + normalized[1:]

    # Something, something, isomething
    if normalized[0] != "I":
        return "I" + _upper(normalized[0]) + normalized[1:]

    # Isomething
    if len(normalized) >= 2 and normalized[1].islower():
        return "I" + _upper(normalized[1]) + normalized[2:]

    return normalized


_CONVERTERS: Dict[NamingConvention, Callable[[str], str]] = {
    NamingConvention.LOWER_CAMEL_CASE: to_lower_camel_case,
    NamingConvention.UPPER_CAMEL_CASE: to_upper_camel_case,
    NamingConvention.UNDERSCORE_LOWER_CAMEL_CASE: to_underscore_lower_camel_case,
    NamingConvention.INTERFACE_PREFIX_UPPER_CAMEL_CASE: to_interface_prefix_upper_camel_case,
}


def apply_convention(identifier: str, convention: NamingConvention) -> str:
    """
    Reformat an identifier value under ``convention``.

    Raises:
        ValueError: If ``convention`` is not a NamingConvention member
    """
    converter = _CONVERTERS.get(convention)
    if converter is None:
        raise ValueError(f"Unknown naming convention: {convention!r}")
    return converter(identifier)


def with_convention(token: IdentifierToken, convention: NamingConvention) -> IdentifierToken:
    """
    Return ``token`` rewritten under ``convention``.

    The result is a new token with the original span and trivia. Verbatim
    identifiers (``@class``) and identifiers spelled with escapes
    (``cl\\u0061ss``) come back unchanged.
    """
    # int @class = 5;
    if token.is_verbatim:
        return token

    # int cl\u0061ss = 5;
    if "\\" in token.text:
        return token

    new_value = apply_convention(token.value_text, convention)
    return token.with_value(new_value)

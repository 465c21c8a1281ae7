"""
Core types for the namecheck engine.

This module provides shared dataclasses, enums and protocols used across the
engine, the C# adapter and the rules.
"""

from dataclasses import dataclass, field, replace
from enum import Enum, Flag, auto
from typing import Any, Dict, Iterable, Iterator, List, Literal, Optional, Protocol, Tuple
from abc import ABC, abstractmethod


# Type aliases for clarity
Severity = Literal["info", "warn", "error"]
Priority = Literal["P0", "P1", "P2"]
Tier = Literal[0, 1, 2]
NodeRange = Tuple[int, int]  # (start_byte, end_byte) 0-based


class NamingConvention(str, Enum):
    """Casing rules a declaration can be required to follow."""
    LOWER_CAMEL_CASE = "lowerCamelCase"
    UPPER_CAMEL_CASE = "UpperCamelCase"
    UNDERSCORE_LOWER_CAMEL_CASE = "_lowerCamelCase"
    INTERFACE_PREFIX_UPPER_CAMEL_CASE = "IUpperCamelCase"


class DeclarationKind(str, Enum):
    """Declaration kinds reported by a language adapter."""
    PROPERTY = "property"
    METHOD = "method"
    CLASS = "class"
    STRUCT = "struct"
    INTERFACE = "interface"
    FIELD = "field"
    LOCAL = "local"
    PARAMETER = "parameter"
    OTHER = "other"


class Modifiers(Flag):
    """Declaration modifier keywords."""
    NONE = 0
    PUBLIC = auto()
    INTERNAL = auto()
    PROTECTED = auto()
    PRIVATE = auto()
    STATIC = auto()
    READONLY = auto()
    CONST = auto()
    ABSTRACT = auto()
    VIRTUAL = auto()
    OVERRIDE = auto()
    SEALED = auto()
    ASYNC = auto()
    EXTERN = auto()
    NEW = auto()
    PARTIAL = auto()
    VOLATILE = auto()
    UNSAFE = auto()
    REQUIRED = auto()

    @classmethod
    def from_keywords(cls, keywords: Iterable[str]) -> "Modifiers":
        """Build a modifier set from source keywords, ignoring unknown ones."""
        result = cls.NONE
        for keyword in keywords:
            member = cls.__members__.get(keyword.strip().upper())
            if member is not None:
                result |= member
        return result


@dataclass(frozen=True)
class IdentifierToken:
    """An identifier token as seen by the parser.

    ``text`` is the raw source text (``@class``, ``cl\\u0061ss``) while
    ``value_text`` has escapes resolved (``class``). ``parent`` points at the
    declaration that owns the token and never takes part in equality.
    """
    text: str
    value_text: str
    start_byte: int
    end_byte: int
    leading_trivia: str = ""
    trailing_trivia: str = ""
    parent: Any = field(default=None, compare=False, repr=False)

    @property
    def is_verbatim(self) -> bool:
        return self.text.startswith("@")

    @property
    def span(self) -> NodeRange:
        return (self.start_byte, self.end_byte)

    def with_value(self, value: str) -> "IdentifierToken":
        """Return a new token carrying ``value`` with this token's span and trivia."""
        return replace(self, text=value, value_text=value)


@dataclass
class Declaration:
    """A declaration node handed to the checker by an adapter."""
    kind: DeclarationKind
    modifiers: Modifiers = Modifiers.NONE
    identifiers: Tuple[IdentifierToken, ...] = ()
    start_byte: int = 0
    end_byte: int = 0
    node_type: str = ""
    parent: Optional["Declaration"] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class NamingViolation:
    """An identifier whose text differs from its convention-correct form."""
    start_byte: int
    end_byte: int
    kind_label: str
    original_text: str
    corrected_text: str
    convention: NamingConvention

    @property
    def message(self) -> str:
        return (
            f"The {self.kind_label} {self.original_text} does not follow naming conventions. "
            f"Should be {self.corrected_text}."
        )


@dataclass(frozen=True)
class Edit:
    """Replace the UTF-8 byte span ``[start_byte, end_byte)`` with ``replacement``."""
    start_byte: int
    end_byte: int
    replacement: str


@dataclass(frozen=True)
class Finding:
    """An issue reported by a rule for one file."""
    rule: str
    message: str
    file: str
    start_byte: int
    end_byte: int
    severity: Severity
    autofix: Optional[List[Edit]] = None
    meta: Optional[Dict[str, Any]] = None

    def _replace(self, **kwargs) -> "Finding":
        return replace(self, **kwargs)


@dataclass(frozen=True)
class RuleMeta:
    """Static description of a rule.

    Attributes:
        id: Dotted rule id, matched by ``--rules`` patterns (e.g. "naming.conventions")
        category: Grouping shown to users
        tier: 0 for rules that only need the syntax tree
        priority: P0/P1/P2
        autofix_safety: safe, caution or suggest-only
        description: One-line summary
        langs: Adapter language ids the rule runs on
    """
    id: str
    category: str
    tier: Tier
    priority: Priority
    autofix_safety: Literal["safe", "caution", "suggest-only"]
    description: str = ""
    langs: List[str] = field(default_factory=list)


@dataclass
class RuleContext:
    """Per-file input handed to ``Rule.visit``; ``config`` holds the rule's own options."""
    file_path: str
    text: str
    tree: Any
    adapter: 'LanguageAdapter'
    config: Dict[str, Any]


class Rule(Protocol):
    """A rule yields findings for one file at a time and keeps no per-file state."""
    meta: RuleMeta

    def visit(self, ctx: RuleContext) -> Iterable[Finding]:
        ...


class LanguageAdapter(ABC):
    """Parser front end for one language."""

    @property
    @abstractmethod
    def language_id(self) -> str:
        """Id matched against ``RuleMeta.langs`` (e.g. 'csharp')."""

    @property
    @abstractmethod
    def file_extensions(self) -> Tuple[str, ...]:
        """Lower-case extensions handled by this adapter, with the dot."""

    @abstractmethod
    def parse(self, text: str) -> Any:
        """Parse source text into a syntax tree."""

    @abstractmethod
    def list_files(self, paths: List[str]) -> List[str]:
        """Expand files and directories into the source files this adapter handles."""

    @abstractmethod
    def iter_declarations(self, tree: Any) -> Iterator[Declaration]:
        """Yield declaration nodes in source order."""

"""
namecheck engine package.

This package provides the naming convention policy, the identifier
transformer and checker, and the tree-sitter host around them.
"""

from .types import (
    NamingConvention, DeclarationKind, Modifiers, IdentifierToken, Declaration,
    NamingViolation, Finding, Edit, RuleMeta, RuleContext, Rule,
    LanguageAdapter, Severity, NodeRange
)

from .conventions import convention_for, naming_convention, member_type

from .transform import apply_convention, normalize, with_convention

from .checker import check, check_all, governing_declaration

from .registry import (
    register_rule, register_adapter, get_adapter, get_all_rules,
    get_enabled_rules, discover_rules, list_supported_languages, clear
)

from .config import (
    ConfigError, EngineConfig, load_config, get_default_config, save_config,
    find_config_file, get_rule_severity
)

__all__ = [
    # Types
    "NamingConvention", "DeclarationKind", "Modifiers", "IdentifierToken", "Declaration",
    "NamingViolation", "Finding", "Edit", "RuleMeta", "RuleContext", "Rule",
    "LanguageAdapter", "Severity", "NodeRange",

    # Policy, transform, checker
    "convention_for", "naming_convention", "member_type",
    "apply_convention", "normalize", "with_convention",
    "check", "check_all", "governing_declaration",

    # Registry
    "register_rule", "register_adapter", "get_adapter", "get_all_rules",
    "get_enabled_rules", "discover_rules", "list_supported_languages", "clear",

    # Config
    "ConfigError", "EngineConfig", "load_config", "get_default_config", "save_config",
    "find_config_file", "get_rule_severity"
]

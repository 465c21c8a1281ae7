"""
Rule and language adapter registry.

Rules are plugged in by listing instances in a module-level ``RULES`` list
inside a rule package; ``discover_rules`` imports the package and every
submodule and registers what it finds. The runner selects rules by language
and fnmatch pattern on the rule id.
"""

import fnmatch
import importlib
import logging
import os
import pkgutil
from typing import Dict, Iterable, List, Optional

from .types import LanguageAdapter, Rule

logger = logging.getLogger(__name__)


class Registry:
    """Rules keyed by id (in registration order) and adapters keyed by language."""

    def __init__(self):
        self._rules: Dict[str, Rule] = {}
        self._adapters: Dict[str, LanguageAdapter] = {}

    def register_rule(self, rule: Rule) -> None:
        """Add a rule; a second rule with an already known id is ignored."""
        rule_id = rule.meta.id
        if rule_id in self._rules:
            logger.debug(f"Rule '{rule_id}' already registered")
            return
        self._rules[rule_id] = rule

    def register_adapter(self, language: str, adapter: LanguageAdapter) -> None:
        # First adapter for a language wins
        self._adapters.setdefault(language, adapter)

    def get_adapter(self, language: str) -> Optional[LanguageAdapter]:
        return self._adapters.get(language)

    def get_adapter_for_file(self, file_path: str) -> Optional[LanguageAdapter]:
        """Pick the adapter claiming the file's extension (case-insensitive)."""
        extension = os.path.splitext(file_path)[1].lower()
        return next(
            (adapter for adapter in self._adapters.values() if extension in adapter.file_extensions),
            None,
        )

    def get_all_rules(self) -> List[Rule]:
        return list(self._rules.values())

    def get_rule_ids(self) -> List[str]:
        return list(self._rules)

    def get_enabled_rules(self, patterns: Iterable[str], language: str) -> List[Rule]:
        """
        Select the rules for ``language`` whose id matches one of ``patterns``.

        An empty pattern list selects nothing; ``*`` selects every rule for
        the language.
        """
        patterns = list(patterns)
        return [
            rule for rule in self._rules.values()
            if language in rule.meta.langs
            and any(fnmatch.fnmatch(rule.meta.id, pattern) for pattern in patterns)
        ]

    def list_supported_languages(self) -> List[str]:
        return list(self._adapters)

    def discover_rules(self, packages: Iterable[str]) -> int:
        """
        Import rule packages and register the rules their modules export.

        Import errors propagate.

        Returns:
            Number of newly registered rules
        """
        packages = list(packages)
        before = len(self._rules)

        for package_name in packages:
            package = importlib.import_module(package_name)
            self._register_module_rules(package)
            for module_info in pkgutil.walk_packages(getattr(package, '__path__', []), package_name + "."):
                self._register_module_rules(importlib.import_module(module_info.name))

        added = len(self._rules) - before
        logger.debug(f"Discovered {added} rule(s) in {', '.join(packages)}")
        return added

    def _register_module_rules(self, module) -> None:
        for rule in getattr(module, 'RULES', ()):
            self.register_rule(rule() if isinstance(rule, type) else rule)

    def clear(self) -> None:
        self._rules.clear()
        self._adapters.clear()


_registry = Registry()


def register_rule(rule: Rule) -> None:
    _registry.register_rule(rule)


def register_adapter(language: str, adapter: LanguageAdapter) -> None:
    _registry.register_adapter(language, adapter)


def get_adapter(language: str) -> Optional[LanguageAdapter]:
    return _registry.get_adapter(language)


def get_all_rules() -> List[Rule]:
    return _registry.get_all_rules()


def get_enabled_rules(patterns: Iterable[str], language: str) -> List[Rule]:
    return _registry.get_enabled_rules(patterns, language)


def list_supported_languages() -> List[str]:
    return _registry.list_supported_languages()


def discover_rules(packages: Iterable[str]) -> int:
    return _registry.discover_rules(packages)


def clear() -> None:
    _registry.clear()

"""
Tests for rule and adapter registration.
"""

from namecheck.engine.registry import Registry
from namecheck.rules.naming_conventions import RuleNamingConventions


class FakeAdapter:
    language_id = "csharp"
    file_extensions = (".cs",)


class TestRegistry:

    def setup_method(self):
        self.registry = Registry()

    def test_discover_rules(self):
        assert self.registry.discover_rules(["namecheck.rules"]) == 1
        assert self.registry.get_rule_ids() == ["naming.conventions"]

    def test_duplicate_registration_ignored(self):
        self.registry.register_rule(RuleNamingConventions())
        self.registry.register_rule(RuleNamingConventions())
        assert len(self.registry.get_all_rules()) == 1

    def test_enabled_rules_by_pattern(self):
        self.registry.register_rule(RuleNamingConventions())
        assert len(self.registry.get_enabled_rules(["*"], "csharp")) == 1
        assert len(self.registry.get_enabled_rules(["naming.*"], "csharp")) == 1
        assert self.registry.get_enabled_rules(["imports.*"], "csharp") == []
        assert self.registry.get_enabled_rules(["*"], "python") == []
        assert self.registry.get_enabled_rules([], "csharp") == []

    def test_adapter_for_file(self):
        adapter = FakeAdapter()
        self.registry.register_adapter("csharp", adapter)
        assert self.registry.get_adapter("csharp") is adapter
        assert self.registry.get_adapter_for_file("src/Program.CS") is adapter
        assert self.registry.get_adapter_for_file("README.md") is None
        assert self.registry.list_supported_languages() == ["csharp"]

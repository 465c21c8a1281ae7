"""
Tests for the naming.conventions rule.
"""

from pathlib import Path

from namecheck.engine.autofix import apply_edits, collect_edits
from namecheck.engine.csharp_adapter import CSharpAdapter
from namecheck.engine.suppressions import filter_suppressed_findings
from namecheck.engine.types import RuleContext
from namecheck.rules.naming_conventions import RULES, RuleNamingConventions

FIXTURE = Path(__file__).parent / "fixtures" / "OrderService.cs"


class TestNamingConventionsRule:
    """Test cases for the naming conventions rule."""

    def setup_method(self):
        self.rule = RuleNamingConventions()
        self.adapter = CSharpAdapter()

    def _run_rule(self, code: str, config: dict = None):
        """Helper to run the rule on code and return findings."""
        ctx = RuleContext(
            file_path="Test.cs",
            text=code,
            tree=self.adapter.parse(code),
            adapter=self.adapter,
            config=config or {},
        )
        return list(self.rule.visit(ctx))

    def test_rule_metadata(self):
        meta = self.rule.meta
        assert meta.id == "naming.conventions"
        assert meta.category == "naming"
        assert meta.langs == ["csharp"]
        assert any(isinstance(rule, RuleNamingConventions) for rule in RULES)

    def test_fixture_findings(self):
        code = FIXTURE.read_text(encoding="utf-8")
        findings = self._run_rule(code)

        pairs = [(f.meta["original_name"], f.meta["suggested_name"]) for f in findings]
        assert pairs == [
            ("iLogger", "ILogger"),
            ("log_message", "LogMessage"),
            ("Message", "message"),
            ("order_service", "OrderService"),
            ("Total", "_total"),
            ("myValue", "MyValue"),
            ("maxItems", "MaxItems"),
            ("item_count", "ItemCount"),
            ("log_message", "LogMessage"),
            ("Message", "message"),
            ("my_value", "myValue"),
            ("Other", "other"),
            ("point", "Point"),
        ]

    def test_message_and_edit(self):
        code = "class Holder\n{\n    public string myValue;\n}\n"
        [finding] = self._run_rule(code)

        assert finding.rule == "naming.conventions"
        assert finding.severity == "warn"
        assert finding.message == "The field myValue does not follow naming conventions. Should be MyValue."
        assert finding.meta["kind"] == "field"
        assert finding.meta["convention"] == "UpperCamelCase"

        [edit] = finding.autofix
        assert code.encode("utf-8")[edit.start_byte:edit.end_byte] == b"myValue"
        assert edit.replacement == "MyValue"

    def test_conforming_code_has_no_findings(self):
        code = """
interface IService
{
    int Count { get; }
}

class Service : IService
{
    private int _count;
    public int Count => _count;

    public void Run(int retryCount)
    {
        var total = retryCount;
    }
}
"""
        assert self._run_rule(code) == []

    def test_params_and_lambda_parameters(self):
        code = (
            "class Worker\n"
            "{\n"
            "    void do_it(int Foo, params int[] Bar)\n"
            "    {\n"
            "        Func<int, int> f = Y => Y;\n"
            "    }\n"
            "}\n"
        )
        findings = self._run_rule(code)

        assert [(f.meta["kind"], f.meta["original_name"], f.meta["suggested_name"]) for f in findings] == [
            ("method", "do_it", "DoIt"),
            ("parameter", "Foo", "foo"),
            ("parameter", "Bar", "bar"),
            ("parameter", "Y", "y"),
        ]
        assert findings[2].message == "The parameter Bar does not follow naming conventions. Should be bar."

    def test_verbatim_parameter_is_ignored(self):
        code = "class Keywords\n{\n    void Use(int @class) { }\n}\n"
        assert self._run_rule(code) == []

    def test_skip_kinds_config(self):
        code = "class Holder\n{\n    void Run(int Count) { int My_total = Count; }\n}\n"
        findings = self._run_rule(code, config={"skip_kinds": ["parameter"]})
        assert [f.meta["kind"] for f in findings] == ["local"]

    def test_applying_all_edits(self):
        code = FIXTURE.read_text(encoding="utf-8")
        fixed = apply_edits(code, collect_edits(self._run_rule(code)))

        assert "public interface ILogger" in fixed
        assert "internal class OrderService : iLogger" in fixed
        assert "private int _count, _total;" in fixed
        assert "public string MyValue;" in fixed
        assert "int myValue = 5, other = 6;" in fixed
        assert "var @class = my_value;" in fixed
        assert self._run_rule(fixed) == []

    def test_suppression_comment(self):
        code = "class Holder\n{\n    public string myValue; // namecheck: ignore[naming.*]\n    public string other;\n}\n"
        findings = filter_suppressed_findings(self._run_rule(code), code)
        assert [f.meta["original_name"] for f in findings] == ["other"]

    def test_other_language_is_skipped(self):
        class PythonAdapter:
            language_id = "python"

        ctx = RuleContext(file_path="x.py", text="", tree=object(), adapter=PythonAdapter(), config={})
        assert list(self.rule.visit(ctx)) == []

"""
Rule to detect identifiers that do not follow the naming convention of their declaration kind.

Properties, methods, classes and structs use UpperCamelCase; locals and
parameters use lowerCamelCase; interfaces use an I prefix; non-private fields
use UpperCamelCase and private fields _lowerCamelCase. Each finding carries a
rename edit for the offending identifier.
"""

from typing import Iterator

from ..engine.checker import check
from ..engine.types import Edit, Finding, RuleContext, RuleMeta


class RuleNamingConventions:
    """Report identifiers that break their declaration's naming convention."""

    meta = RuleMeta(
        id="naming.conventions",
        description="A member does not follow naming conventions.",
        category="naming",
        tier=0,
        priority="P1",
        autofix_safety="caution",
        langs=["csharp"],
    )

    def visit(self, ctx: RuleContext) -> Iterator[Finding]:
        """Visit the file and report naming convention violations."""
        if ctx.adapter is None or ctx.adapter.language_id not in self.meta.langs:
            return
        if ctx.tree is None:
            return

        skip_kinds = set(ctx.config.get("skip_kinds") or [])

        for declaration in ctx.adapter.iter_declarations(ctx.tree):
            for violation in check(declaration):
                if violation.kind_label in skip_kinds:
                    continue

                yield Finding(
                    rule=self.meta.id,
                    message=violation.message,
                    file=ctx.file_path,
                    start_byte=violation.start_byte,
                    end_byte=violation.end_byte,
                    severity="warn",
                    autofix=[Edit(
                        start_byte=violation.start_byte,
                        end_byte=violation.end_byte,
                        replacement=violation.corrected_text,
                    )],
                    meta={
                        "kind": violation.kind_label,
                        "convention": violation.convention.value,
                        "original_name": violation.original_text,
                        "suggested_name": violation.corrected_text,
                    },
                )


RULES = [RuleNamingConventions()]

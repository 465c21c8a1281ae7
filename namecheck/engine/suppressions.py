"""
Suppression comments for namecheck rules.

A finding is dropped when its line carries a comment such as
``// namecheck: ignore[naming.*]``.
"""

import fnmatch
import re
from typing import Dict, List, Set

_IGNORE_PATTERN = re.compile(r'//\s*namecheck:\s*ignore\s*\[\s*([^\]]+)\s*\]', re.IGNORECASE)


class SuppressionParser:
    """Parser for namecheck suppression comments."""

    def __init__(self, text: str):
        self.data = text.encode('utf-8')
        self.line_suppressions: Dict[int, Set[str]] = {}  # line_number -> {rule_patterns}

        for line_num, line in enumerate(text.split('\n'), 1):
            patterns = set()
            for match in _IGNORE_PATTERN.finditer(line):
                patterns.update(p.strip() for p in match.group(1).split(',') if p.strip())
            if patterns:
                self.line_suppressions[line_num] = patterns

    def is_suppressed(self, rule_id: str, start_byte: int) -> bool:
        """Check if a rule finding should be suppressed."""
        line_num = self.data[:max(start_byte, 0)].count(b'\n') + 1
        return any(
            rule_id == pattern or fnmatch.fnmatch(rule_id, pattern)
            for pattern in self.line_suppressions.get(line_num, ())
        )


def filter_suppressed_findings(findings: List, text: str) -> List:
    """Filter out suppressed findings from a list."""
    if not findings:
        return findings

    parser = SuppressionParser(text)
    return [f for f in findings if not parser.is_suppressed(f.rule, f.start_byte)]

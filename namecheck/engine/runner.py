"""
CLI runner for the namecheck engine.

This module provides the main CLI entry point for loading adapters,
parsing files, running rules, and outputting or applying results.
"""

import argparse
import concurrent.futures
import json
import logging
import os
import sys
import time
from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from .autofix import apply_edits, collect_edits, unified_diff
from .config import ConfigError, EngineConfig, find_config_file, load_config, meets_threshold
from .registry import discover_rules, get_adapter, get_enabled_rules, register_adapter
from .schema import (build_runner_output, byte_to_line_col, findings_to_json,
                     normalize_path_for_protocol, validate_runner_output)
from .suppressions import filter_suppressed_findings
from .types import Finding, Rule, RuleContext

logger = logging.getLogger(__name__)

LANGUAGE = "csharp"


def setup_adapters() -> None:
    """Set up and register language adapters."""
    from .csharp_adapter import default_csharp_adapter
    register_adapter(default_csharp_adapter.language_id, default_csharp_adapter)


def analyze_file(file_path: str, rules: List[Rule], config: EngineConfig,
                 content: Optional[str] = None) -> Tuple[List[Finding], float, float]:
    """
    Analyze a single file.

    Args:
        file_path: Path to the file (used for context even if content is provided)
        rules: Rules to run
        config: Engine configuration
        content: Optional file content (if None, reads from disk)

    Returns:
        Tuple of (findings, parse_ms, rules_ms)
    """
    adapter = get_adapter(LANGUAGE)
    if adapter is None:
        raise RuntimeError(f"No adapter registered for '{LANGUAGE}'")

    if content is None:
        with open(file_path, 'r', encoding='utf-8') as f:
            content = f.read()

    parse_start = time.time()
    tree = adapter.parse(content)
    parse_ms = (time.time() - parse_start) * 1000

    rules_start = time.time()
    findings = []
    for rule in rules:
        ctx = RuleContext(
            file_path=file_path,
            text=content,
            tree=tree,
            adapter=adapter,
            config=config.rule_configs.get(rule.meta.id, {}),
        )
        try:
            rule_findings = list(rule.visit(ctx))
        except Exception as e:
            logger.warning(f"Rule '{rule.meta.id}' failed on {file_path}: {e}")
            continue

        severity = config.rule_severities.get(rule.meta.id)
        for finding in rule_findings:
            if severity:
                finding = finding._replace(severity=severity)
            if meets_threshold(finding.severity, config):
                findings.append(finding)

    findings = filter_suppressed_findings(findings, content)
    if len(findings) > config.max_findings_per_file:
        logger.info(f"{file_path}: truncating {len(findings)} findings to {config.max_findings_per_file}")
        findings = findings[:config.max_findings_per_file]

    rules_ms = (time.time() - rules_start) * 1000
    return findings, parse_ms, rules_ms


def run(paths: List[str], config: EngineConfig, rule_patterns: List[str],
        jobs: int = 0) -> Tuple[List[Finding], Dict[str, str], Dict[str, float], int]:
    """
    Analyze every C# file under ``paths``.

    Returns:
        Tuple of (findings, text_cache, metrics, rules_run); text_cache maps
        absolute file paths to their content
    """
    total_start = time.time()
    adapter = get_adapter(LANGUAGE)
    rules = get_enabled_rules(rule_patterns, LANGUAGE)
    files = adapter.list_files(paths)
    logger.info(f"Analyzing {len(files)} files with {len(rules)} rules")

    text_cache: Dict[str, str] = {}
    results: Dict[str, List[Finding]] = {}
    parse_ms = rules_ms = 0.0

    def work(file_path: str):
        with open(file_path, 'r', encoding='utf-8') as f:
            content = f.read()
        return content, analyze_file(file_path, rules, config, content=content)

    max_workers = jobs if jobs > 0 else min(32, (os.cpu_count() or 1) + 4)
    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {executor.submit(work, file_path): file_path for file_path in files}
        for future in concurrent.futures.as_completed(futures):
            file_path = futures[future]
            try:
                content, (file_findings, file_parse_ms, file_rules_ms) = future.result()
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Failed to read {file_path}: {e}")
                continue
            text_cache[normalize_path_for_protocol(file_path)[0]] = content
            results[file_path] = file_findings
            parse_ms += file_parse_ms
            rules_ms += file_rules_ms

    # Report in file order regardless of completion order
    findings = [finding for file_path in files for finding in results.get(file_path, [])]
    metrics = {
        "parse_ms": parse_ms,
        "rules_ms": rules_ms,
        "total_ms": (time.time() - total_start) * 1000,
        "files_scanned": len(results),
    }
    return findings, text_cache, metrics, len(rules)


def format_pretty(findings: List[Finding], text_cache: Dict[str, str]) -> str:
    """Render findings as ``path:line:col: severity: message [rule]`` lines."""
    lines = []
    for finding in findings:
        abs_path, _ = normalize_path_for_protocol(finding.file)
        line, col = byte_to_line_col(text_cache.get(abs_path, ""), finding.start_byte)
        lines.append(f"{finding.file}:{line}:{col + 1}: {finding.severity}: {finding.message} [{finding.rule}]")
    lines.append(f"{len(findings)} finding(s)")
    return "\n".join(lines)


def fix_files(findings: List[Finding], text_cache: Dict[str, str], write: bool) -> List[str]:
    """
    Apply autofix edits per file.

    Returns:
        Unified diffs of every changed file
    """
    by_file: Dict[str, List[Finding]] = defaultdict(list)
    for finding in findings:
        by_file[finding.file].append(finding)

    diffs = []
    for file_path, file_findings in by_file.items():
        before = text_cache[normalize_path_for_protocol(file_path)[0]]
        after = apply_edits(before, collect_edits(file_findings))
        if after == before:
            continue
        diffs.append(unified_diff(file_path, before, after))
        if write:
            with open(file_path, 'w', encoding='utf-8') as f:
                f.write(after)
            logger.info(f"Fixed {len(file_findings)} identifier(s) in {file_path}")
    return diffs


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="namecheck",
        description="Check C# identifiers against naming conventions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  namecheck --paths src/ --format pretty
  namecheck --paths Program.cs --rules "naming.*" --validate
  namecheck --paths src/ --diff
        """
    )
    parser.add_argument("--paths", nargs="+", required=True,
                        help="Paths to files or directories to analyze")
    parser.add_argument("--discover", default="namecheck.rules",
                        help="Comma-separated packages to discover rules from (default: namecheck.rules)")
    parser.add_argument("--rules",
                        help="Rule patterns to run: '*' for all, or comma-separated IDs/patterns "
                             "(default: enabled_rules from config)")
    parser.add_argument("--config", help="Path to configuration file")
    parser.add_argument("--format", choices=["json", "pretty"], default="json",
                        help="Output format (default: json)")
    parser.add_argument("--validate", action="store_true",
                        help="Validate JSON output against schema")
    parser.add_argument("--jobs", type=int, default=0,
                        help="Number of parallel jobs (0=auto, 1=sequential, N=parallel)")
    parser.add_argument("--fix", action="store_true",
                        help="Apply rename edits to files in place")
    parser.add_argument("--diff", action="store_true",
                        help="Print rename edits as a unified diff without writing files")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable verbose output")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    setup_adapters()
    discover_rules([p.strip() for p in args.discover.split(",") if p.strip()])

    config_path = args.config or find_config_file(args.paths[0])
    try:
        config = load_config(config_path, required=bool(args.config))
    except ConfigError as e:
        logger.error(str(e))
        return 2
    logger.debug(f"Using config: {config_path or 'defaults'}")

    if args.rules:
        rule_patterns = [p.strip() for p in args.rules.split(",") if p.strip()]
    else:
        rule_patterns = config.enabled_rules

    findings, text_cache, metrics, rules_run = run(args.paths, config, rule_patterns, args.jobs)

    if args.fix or args.diff:
        diffs = fix_files(findings, text_cache, write=args.fix)
        if args.diff:
            sys.stdout.write("".join(diffs))
        return 0

    if args.format == "pretty":
        print(format_pretty(findings, text_cache))
    else:
        output = build_runner_output(
            findings_to_json(findings, text_cache),
            files_scanned=metrics["files_scanned"],
            rules_run=rules_run,
            parse_ms=metrics["parse_ms"],
            rules_ms=metrics["rules_ms"],
            total_ms=metrics["total_ms"],
        )
        if args.validate:
            errors = validate_runner_output(output)
            if errors:
                for error in errors:
                    logger.error(error)
                return 2
        print(json.dumps(output, indent=2))

    return 1 if findings else 0


if __name__ == "__main__":
    sys.exit(main())

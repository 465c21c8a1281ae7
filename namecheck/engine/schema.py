"""
JSON output protocol (version 1) and its jsonschema contract.

Findings are reported with UTF-8 byte spans plus a line/column range
(1-based lines, 0-based character columns) so editors can place them
without re-reading the file.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

import jsonschema

from .. import __version__
from .types import NamingConvention

PROTOCOL_VERSION = "1"
ENGINE_VERSION = __version__

_BYTE_OFFSET = {"type": "integer", "minimum": 0}
_DURATION = {"type": "number", "minimum": 0}

RANGE_JSON_SCHEMA = {
    "type": "object",
    "properties": {
        "startLine": {"type": "integer", "minimum": 1},
        "startCol": {"type": "integer", "minimum": 0},
        "endLine": {"type": "integer", "minimum": 1},
        "endCol": {"type": "integer", "minimum": 0},
    },
    "required": ["startLine", "startCol", "endLine", "endCol"],
    "additionalProperties": False,
}

EDIT_JSON_SCHEMA = {
    "type": "object",
    "properties": {
        "file_path": {"type": "string"},
        "start_byte": _BYTE_OFFSET,
        "end_byte": _BYTE_OFFSET,
        "replacement": {"type": "string"},
        "range": RANGE_JSON_SCHEMA,
    },
    "required": ["file_path", "start_byte", "end_byte", "replacement", "range"],
    "additionalProperties": False,
}

# Keys the naming rule puts in ``meta``; other rules may add their own
NAMING_META_JSON_SCHEMA = {
    "type": "object",
    "properties": {
        "kind": {"type": "string"},
        "convention": {"enum": [convention.value for convention in NamingConvention]},
        "original_name": {"type": "string"},
        "suggested_name": {"type": "string"},
    },
}

FINDING_JSON_SCHEMA = {
    "type": "object",
    "properties": {
        "rule_id": {"type": "string", "minLength": 1},
        "message": {"type": "string"},
        "file_path": {"type": "string", "description": "Absolute native path"},
        "uri": {"type": "string", "description": "file:// URI of file_path"},
        "start_byte": _BYTE_OFFSET,
        "end_byte": _BYTE_OFFSET,
        "range": RANGE_JSON_SCHEMA,
        "severity": {"enum": ["info", "warn", "error"]},
        "autofix": {"type": "array", "items": EDIT_JSON_SCHEMA},
        "meta": NAMING_META_JSON_SCHEMA,
    },
    "required": ["rule_id", "message", "file_path", "uri", "start_byte", "end_byte", "range", "severity"],
    "additionalProperties": False,
}

RUNNER_OUTPUT_SCHEMA = {
    "type": "object",
    "properties": {
        "protocol_version": {"const": PROTOCOL_VERSION},
        "engine_version": {"type": "string"},
        "files_scanned": {"type": "integer", "minimum": 0},
        "rules_run": {"type": "integer", "minimum": 0},
        "findings": {"type": "array", "items": FINDING_JSON_SCHEMA},
        "metrics": {
            "type": "object",
            "properties": {"parse_ms": _DURATION, "rules_ms": _DURATION, "total_ms": _DURATION},
            "required": ["parse_ms", "rules_ms", "total_ms"],
            "additionalProperties": False,
        },
    },
    "required": ["protocol_version", "engine_version", "files_scanned", "rules_run", "findings", "metrics"],
    "additionalProperties": False,
}


def normalize_path_for_protocol(file_path: str) -> tuple[str, str]:
    """Return ``(absolute_native_path, file_uri)`` for a reported file."""
    path = Path(file_path).resolve()
    return str(path), path.as_uri()


def byte_to_line_col(text: str, byte_offset: int) -> tuple[int, int]:
    """Map a UTF-8 byte offset to a 1-based line and 0-based character column."""
    before = text.encode('utf-8')[:max(byte_offset, 0)].decode('utf-8', errors='ignore')
    line_start = before.rfind('\n') + 1
    return before.count('\n') + 1, len(before) - line_start


def create_range_from_bytes(text: str, start_byte: int, end_byte: int) -> dict:
    start_line, start_col = byte_to_line_col(text, start_byte)
    end_line, end_col = byte_to_line_col(text, end_byte)
    return {"startLine": start_line, "startCol": start_col, "endLine": end_line, "endCol": end_col}


def validate_findings(findings: List[Dict[str, Any]]) -> List[str]:
    """
    Check each finding against FINDING_JSON_SCHEMA.

    Returns:
        One message per invalid finding, empty when all are valid
    """
    errors = []
    for index, finding in enumerate(findings):
        try:
            jsonschema.validate(finding, FINDING_JSON_SCHEMA)
        except jsonschema.ValidationError as e:
            errors.append(f"Finding {index}: {e.message}")
    return errors


def validate_runner_output(output: Dict[str, Any]) -> List[str]:
    """Check a whole runner document; returns a list with the first error, if any."""
    try:
        jsonschema.validate(output, RUNNER_OUTPUT_SCHEMA)
    except jsonschema.ValidationError as e:
        location = "/".join(str(part) for part in e.absolute_path) or "<root>"
        return [f"Output validation at {location}: {e.message}"]
    return []


def _edit_to_json(edit: Any, abs_path: str, text: str) -> Dict[str, Any]:
    return {
        "file_path": abs_path,
        "start_byte": edit.start_byte,
        "end_byte": edit.end_byte,
        "replacement": edit.replacement,
        "range": create_range_from_bytes(text, edit.start_byte, edit.end_byte),
    }


def findings_to_json(findings: List[Any], text_cache: Optional[Dict[str, str]] = None) -> List[Dict[str, Any]]:
    """
    Serialize findings to protocol v1 dictionaries.

    Args:
        findings: Finding objects
        text_cache: Absolute file path -> file text, used to compute ranges.
            Files missing from the cache get ranges at line 1.
    """
    text_cache = text_cache or {}

    serialized = []
    for finding in findings:
        abs_path, uri = normalize_path_for_protocol(finding.file)
        text = text_cache.get(abs_path, "")

        entry = {
            "rule_id": finding.rule,
            "message": finding.message,
            "file_path": abs_path,
            "uri": uri,
            "start_byte": finding.start_byte,
            "end_byte": finding.end_byte,
            "range": create_range_from_bytes(text, finding.start_byte, finding.end_byte),
            "severity": finding.severity,
        }
        if finding.autofix:
            entry["autofix"] = [_edit_to_json(edit, abs_path, text) for edit in finding.autofix]
        if finding.meta:
            entry["meta"] = dict(finding.meta)
        serialized.append(entry)

    return serialized


def build_runner_output(findings_json: List[Dict[str, Any]], files_scanned: int, rules_run: int,
                        parse_ms: float, rules_ms: float, total_ms: float) -> Dict[str, Any]:
    """Assemble the protocol v1 document printed by the runner."""
    return {
        "protocol_version": PROTOCOL_VERSION,
        "engine_version": ENGINE_VERSION,
        "files_scanned": files_scanned,
        "rules_run": rules_run,
        "findings": findings_json,
        "metrics": {
            "parse_ms": round(parse_ms, 2),
            "rules_ms": round(rules_ms, 2),
            "total_ms": round(total_ms, 2),
        },
    }

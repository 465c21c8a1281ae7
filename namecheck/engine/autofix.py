"""
Autofix support: applying rename edits to source text.

Edits carry UTF-8 byte offsets, so they are applied to the encoded text from
the end of the file backwards.
"""

import difflib
import logging
from typing import Any, Iterable, List, Optional

from .checker import governing_declaration
from .conventions import naming_convention
from .transform import with_convention
from .types import Edit, Finding

logger = logging.getLogger(__name__)


def collect_edits(findings: Iterable[Finding]) -> List[Edit]:
    """Gather the autofix edits of findings, dropping exact duplicates."""
    edits = []
    seen = set()
    for finding in findings:
        for edit in finding.autofix or []:
            if edit not in seen:
                seen.add(edit)
                edits.append(edit)
    return edits


def apply_edits(content: str, edits: Iterable[Edit]) -> str:
    """
    Apply edits to content.

    Raises:
        ValueError: If an edit falls outside the content or two edits overlap
    """
    data = content.encode('utf-8')
    ordered = sorted(edits, key=lambda e: (e.start_byte, e.end_byte))

    previous_end = 0
    for edit in ordered:
        if edit.start_byte < 0 or edit.end_byte > len(data) or edit.start_byte > edit.end_byte:
            raise ValueError(f"Edit {edit.start_byte}-{edit.end_byte} is outside the content")
        if edit.start_byte < previous_end:
            raise ValueError(f"Edit {edit.start_byte}-{edit.end_byte} overlaps a previous edit")
        previous_end = edit.end_byte

    for edit in reversed(ordered):
        data = data[:edit.start_byte] + edit.replacement.encode('utf-8') + data[edit.end_byte:]

    return data.decode('utf-8')


def rename_edit(adapter: Any, tree: Any, byte_offset: int) -> Optional[Edit]:
    """
    Build the rename edit for the declared identifier at ``byte_offset``.

    The convention comes from the nearest governing ancestor of the token.
    Returns None when there is no identifier there or it already conforms.
    """
    token = adapter.token_at(tree, byte_offset)
    if token is None:
        return None

    declaration = governing_declaration(token)
    if declaration is None:
        return None

    renamed = with_convention(token, naming_convention(declaration))
    if renamed.text == token.text:
        return None
    return Edit(start_byte=token.start_byte, end_byte=token.end_byte, replacement=renamed.text)


def rename_at(adapter: Any, content: str, byte_offset: int) -> str:
    """Return ``content`` with the identifier at ``byte_offset`` renamed to its convention."""
    tree = adapter.parse(content)
    edit = rename_edit(adapter, tree, byte_offset)
    if edit is None:
        logger.debug(f"Nothing to rename at byte {byte_offset}")
        return content
    return apply_edits(content, [edit])


def unified_diff(file_path: str, before: str, after: str) -> str:
    """Render a unified diff between two versions of a file."""
    return "".join(difflib.unified_diff(
        before.splitlines(keepends=True),
        after.splitlines(keepends=True),
        fromfile=f"a/{file_path}",
        tofile=f"b/{file_path}",
    ))

"""
C# language adapter for tree-sitter.

Parses C# source and exposes its declarations as Declaration nodes with
identifier tokens, modifiers and parent links for the naming checker.
"""
import logging
import os
import re
import threading
from typing import Any, Iterator, List, Optional, Tuple

import tree_sitter
import tree_sitter_c_sharp

from .types import Declaration, DeclarationKind, IdentifierToken, LanguageAdapter, Modifiers

logger = logging.getLogger(__name__)


# tree-sitter node type -> declaration kind governed by the naming policy
NODE_KINDS = {
    "property_declaration": DeclarationKind.PROPERTY,
    "method_declaration": DeclarationKind.METHOD,
    "class_declaration": DeclarationKind.CLASS,
    "struct_declaration": DeclarationKind.STRUCT,
    "interface_declaration": DeclarationKind.INTERFACE,
    "field_declaration": DeclarationKind.FIELD,
    "local_declaration_statement": DeclarationKind.LOCAL,
    "parameter": DeclarationKind.PARAMETER,
    "implicit_parameter": DeclarationKind.PARAMETER,
}

# Declarations outside the policy; reported as OTHER so parent chains stay intact
OTHER_DECLARATIONS = {
    "namespace_declaration",
    "file_scoped_namespace_declaration",
    "enum_declaration",
    "enum_member_declaration",
    "record_declaration",
    "record_struct_declaration",
    "delegate_declaration",
    "constructor_declaration",
    "destructor_declaration",
    "event_declaration",
    "event_field_declaration",
    "indexer_declaration",
    "operator_declaration",
    "conversion_operator_declaration",
    "local_function_statement",
}

# Kinds whose bindings live in a variable_declaration child
MULTI_BINDING_KINDS = {DeclarationKind.FIELD, DeclarationKind.LOCAL}

SKIPPED_DIRS = {'__pycache__', 'bin', 'obj', 'node_modules'}

_UNICODE_ESCAPE = re.compile(r"\\u([0-9A-Fa-f]{4})|\\U([0-9A-Fa-f]{8})")


def identifier_value(text: str) -> str:
    """Resolve the verbatim prefix and unicode escapes of a C# identifier."""
    if text.startswith("@"):
        text = text[1:]
    return _UNICODE_ESCAPE.sub(lambda m: chr(int(m.group(1) or m.group(2), 16)), text)


class CSharpAdapter(LanguageAdapter):
    """Tree-sitter adapter for C# language."""

    def __init__(self):
        # tree-sitter parsers are not safe to share between threads
        self._local = threading.local()

    @property
    def language_id(self) -> str:
        return "csharp"

    @property
    def file_extensions(self) -> Tuple[str, ...]:
        return (".cs",)

    def _get_parser(self) -> tree_sitter.Parser:
        """Get or create the tree-sitter parser."""
        parser = getattr(self._local, "parser", None)
        if parser is None:
            parser = tree_sitter.Parser()
            parser.language = tree_sitter.Language(tree_sitter_c_sharp.language())
            self._local.parser = parser
            logger.debug(f"C# parser initialized for thread {threading.get_ident()}")
        return parser

    def parse(self, text: str) -> Any:
        """Parse text and return a Tree-sitter tree."""
        return self._get_parser().parse(text.encode('utf-8'))

    def list_files(self, paths: List[str]) -> List[str]:
        """List all C# files in the given paths."""
        cs_files = []

        for path in paths:
            if os.path.isfile(path):
                if path.endswith(self.file_extensions):
                    cs_files.append(path)
            elif os.path.isdir(path):
                for root, dirs, files in os.walk(path):
                    dirs[:] = sorted(d for d in dirs if not d.startswith('.') and d not in SKIPPED_DIRS)
                    for file in sorted(files):
                        if file.endswith(self.file_extensions):
                            cs_files.append(os.path.join(root, file))
            else:
                logger.warning(f"Path '{path}' does not exist")

        return cs_files

    def iter_declarations(self, tree: Any) -> Iterator[Declaration]:
        """Yield declarations in source order, each linked to its enclosing declaration."""
        if tree is None:
            return
        root = tree.root_node if hasattr(tree, 'root_node') else tree
        yield from self._visit(root, None)

    def _visit(self, node, parent: Optional[Declaration]) -> Iterator[Declaration]:
        declaration = self._make_declaration(node, parent)
        if declaration is not None:
            yield declaration
            parent = declaration

        for child in node.children:
            # params arrays have no parameter node: `params int[] values` sits in the list itself
            if node.type == "parameter_list" and child.type == "identifier":
                yield self._params_declaration(node, child, parent)
            else:
                yield from self._visit(child, parent)

    def _params_declaration(self, parameter_list, name, parent: Optional[Declaration]) -> Declaration:
        # Span starts at the attributes or `params` keyword after the previous comma
        start_byte = None
        for sibling in parameter_list.children:
            if sibling.start_byte >= name.start_byte:
                break
            if sibling.type in (",", "("):
                start_byte = None
            elif start_byte is None:
                start_byte = sibling.start_byte
        declaration = Declaration(
            kind=DeclarationKind.PARAMETER,
            modifiers=Modifiers.NONE,
            start_byte=name.start_byte if start_byte is None else start_byte,
            end_byte=name.end_byte,
            node_type="params_parameter",
            parent=parent,
        )
        declaration.identifiers = (self._make_token(name, declaration),)
        return declaration

    def _make_declaration(self, node, parent: Optional[Declaration]) -> Optional[Declaration]:
        if node.type in NODE_KINDS:
            kind = NODE_KINDS[node.type]
        elif node.type in OTHER_DECLARATIONS:
            kind = DeclarationKind.OTHER
        else:
            return None

        declaration = Declaration(
            kind=kind,
            modifiers=Modifiers.from_keywords(self._modifier_keywords(node)),
            start_byte=node.start_byte,
            end_byte=node.end_byte,
            node_type=node.type,
            parent=parent,
        )
        if kind in MULTI_BINDING_KINDS:
            name_nodes = self._declarator_names(node)
        elif node.type == "implicit_parameter":
            # `value => value * 2`: the node is the name
            name_nodes = [node]
        else:
            name = node.child_by_field_name('name')
            name_nodes = [name] if name is not None and name.type == 'identifier' else []

        declaration.identifiers = tuple(self._make_token(name, declaration) for name in name_nodes)
        return declaration

    def _modifier_keywords(self, node) -> List[str]:
        return [self._node_text(child) for child in node.children if child.type == 'modifier']

    def _declarator_names(self, node) -> List[Any]:
        """Name nodes of every variable_declarator in a field or local declaration."""
        names = []
        for child in node.children:
            if child.type != 'variable_declaration':
                continue
            for declarator in child.children:
                if declarator.type != 'variable_declarator':
                    continue
                name = declarator.child_by_field_name('name')
                if name is None:
                    name = next((c for c in declarator.children if c.type == 'identifier'), None)
                # Tuple deconstruction has no single name
                if name is not None and name.type == 'identifier':
                    names.append(name)
        return names

    def _make_token(self, node, declaration: Declaration) -> IdentifierToken:
        text = self._node_text(node)
        return IdentifierToken(
            text=text,
            value_text=identifier_value(text),
            start_byte=node.start_byte,
            end_byte=node.end_byte,
            parent=declaration,
        )

    def _node_text(self, node) -> str:
        text = node.text
        if isinstance(text, bytes):
            return text.decode('utf-8', errors='ignore')
        return str(text or "")

    def token_at(self, tree: Any, byte_offset: int) -> Optional[IdentifierToken]:
        """Find the declared identifier token covering ``byte_offset``."""
        for declaration in self.iter_declarations(tree):
            for token in declaration.identifiers:
                if token.start_byte <= byte_offset < token.end_byte:
                    return token
        return None


default_csharp_adapter = CSharpAdapter()

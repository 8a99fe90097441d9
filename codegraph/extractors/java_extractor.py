"""
Line-oriented structural extractor for Java sources.

Nesting is tracked by brace depth: a class or method scope opens with the
first ``{`` after its header and closes when the depth falls back to where the
header started. Method and field declarations are only recognised directly
inside a class body, so statements inside method bodies are never mistaken
for declarations.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

from ..types import EdgeType, ExtractionResult, NodeType
from .base import BaseExtractor, FileGraph


MODIFIERS = r"(?:(?:public|private|protected|static|final|abstract|synchronized|native|default|strictfp|sealed|transient|volatile)\s+)*"

CLASS_PATTERN = re.compile(r"^" + MODIFIERS + r"(?:class|interface|enum|record|@interface)\s+(\w+)")
EXTENDS_PATTERN = re.compile(r"\bextends\s+(.+?)(?=\bimplements\b|\{|$)")
IMPLEMENTS_PATTERN = re.compile(r"\bimplements\s+(.+?)(?=\{|$)")
TYPE = r"[\w.?\[\]]+(?:\s*<[^()]*>)?(?:\[\])*"

METHOD_PATTERN = re.compile(r"^" + MODIFIERS + r"(?:<[^>]*>\s+)?(" + TYPE + r")\s+(\w+)\s*\(")
CONSTRUCTOR_PATTERN = re.compile(r"^" + MODIFIERS + r"(\w+)\s*\(")
FIELD_PATTERN = re.compile(r"^" + MODIFIERS + r"(" + TYPE + r")\s+(\w+)\s*(?:=|;)")
IMPORT_PATTERN = re.compile(r"^import\s+(?:static\s+)?([\w.]+(?:\.\*)?)\s*;")
ANNOTATION_PATTERN = re.compile(r"^(?:@(?!interface\b)[\w.]+(?:\([^)]*\))?\s*)+")
CALL_PATTERN = re.compile(r"(\w+)\s*\.\s*(\w+)\s*\(|(\w+)\s*\(")
NEW_PATTERN = re.compile(r"\bnew\s+(\w+)")
INITIALIZER_PATTERN = re.compile(r"^(?:static\s*)?\{")

STRING_PATTERN = re.compile(r'"(?:\\.|[^"\\])*"|\'(?:\\.|[^\'\\])*\'')
GENERICS_PATTERN = re.compile(r"<.*")

STATEMENT_KEYWORDS = frozenset({
    "return", "new", "throw", "else", "if", "for", "while", "switch", "case", "do",
    "try", "catch", "finally", "assert", "yield", "package", "import", "break", "continue",
})

BUILTIN_CALLS = frozenset({
    "System.out.println", "println", "main", "toString", "equals", "hashCode",
    "getClass", "wait", "notify", "notifyAll", "finalize",
})


@dataclass
class _Scope:
    kind: str
    node_id: Optional[str]
    name: str
    open_depth: int
    opened: bool = False


class JavaExtractor(BaseExtractor):
    """Extracts classes, methods, fields, imports and calls from Java."""

    language = "java"

    def extract(self, code: str, file_path: str) -> ExtractionResult:
        facts = FileGraph(file_path, self.language)
        scopes: List[_Scope] = []
        depth = 0
        in_comment = False
        lines = code.split("\n")

        for index, raw in enumerate(lines):
            line_number = index + 1
            text, in_comment = self._clean(raw, in_comment)
            statement = ANNOTATION_PATTERN.sub("", text.strip())
            if not statement:
                continue

            call_text = self._handle_statement(facts, scopes, statement, depth, line_number)
            self._scan_calls(facts, scopes, call_text, line_number)

            depth, peak = self._brace_depth(depth, text)
            for scope in scopes:
                if not scope.opened and peak > scope.open_depth:
                    scope.opened = True
            while scopes and scopes[-1].opened and depth <= scopes[-1].open_depth:
                self._close(facts, scopes.pop(), line_number)

        while scopes:
            self._close(facts, scopes.pop(), len(lines))

        return facts.result()

    def _clean(self, raw: str, in_comment: bool) -> Tuple[str, bool]:
        """Remove comments and string literals; track open block comments."""
        text = raw.rstrip("\r")
        if in_comment:
            end = text.find("*/")
            if end == -1:
                return "", True
            text = text[end + 2:]

        text = STRING_PATTERN.sub('""', text)
        while "/*" in text:
            start = text.find("/*")
            end = text.find("*/", start + 2)
            if end == -1:
                return text[:start], True
            text = text[:start] + " " + text[end + 2:]

        comment = text.find("//")
        if comment != -1:
            text = text[:comment]
        return text, False

    def _handle_statement(self, facts: FileGraph, scopes: List[_Scope], statement: str,
                          depth: int, line_number: int) -> str:
        """Record declarations starting on this line; return the text left to scan for calls."""
        import_match = IMPORT_PATTERN.match(statement)
        if import_match:
            facts.add_import(import_match.group(1).replace(".", "/"), line_number)
            return ""

        class_match = CLASS_PATTERN.match(statement)
        if class_match:
            name = class_match.group(1)
            node_id = facts.add_symbol(NodeType.CLASS, name, self._qualify(scopes, name), line_number)
            for base in self._supertypes(statement):
                base_id = facts.classes.get(base)
                if base_id and base_id != node_id:
                    facts.add_edge(node_id, base_id, EdgeType.INHERITANCE, line_number)
            scopes.append(_Scope("class", node_id, name, depth))
            return ""

        enclosing = scopes[-1] if scopes else None
        if enclosing is None or enclosing.kind != "class":
            return statement

        method = self._match_method(statement, enclosing.name)
        if method:
            name, remainder = method
            node_id = facts.add_symbol(NodeType.FUNCTION, name, self._qualify(scopes, name),
                                       line_number, **{"class": enclosing.name})
            if not statement.rstrip().endswith(";"):
                scopes.append(_Scope("function", node_id, name, depth))
            return remainder

        field_match = FIELD_PATTERN.match(statement)
        if field_match and field_match.group(1) not in STATEMENT_KEYWORDS:
            name = field_match.group(2)
            facts.add_symbol(NodeType.VARIABLE, name, self._qualify(scopes, name), line_number,
                             **{"class": enclosing.name})
            return statement[field_match.end():]

        initializer_match = INITIALIZER_PATTERN.match(statement)
        if initializer_match and enclosing.opened:
            # static or instance initializer block: its declarations are locals
            scopes.append(_Scope("initializer", None, "", depth))
            return statement[initializer_match.end():]

        return statement

    @staticmethod
    def _close(facts: FileGraph, scope: _Scope, line_end: int):
        if scope.node_id is not None:
            facts.close_symbol(scope.node_id, line_end)

    @staticmethod
    def _match_method(statement: str, class_name: str) -> Optional[Tuple[str, str]]:
        method_match = METHOD_PATTERN.match(statement)
        if method_match:
            return_type, name = method_match.group(1), method_match.group(2)
            if return_type not in STATEMENT_KEYWORDS and name not in STATEMENT_KEYWORDS:
                return name, statement[method_match.end() - 1:]

        constructor_match = CONSTRUCTOR_PATTERN.match(statement)
        if constructor_match and constructor_match.group(1) == class_name:
            return class_name, statement[constructor_match.end() - 1:]
        return None

    def _scan_calls(self, facts: FileGraph, scopes: List[_Scope], text: str, line_number: int):
        if not text:
            return

        source = self._enclosing_method(scopes) or facts.module_id

        instantiated: Set[str] = set()
        for match in NEW_PATTERN.finditer(text):
            name = match.group(1)
            instantiated.add(name)
            if name in facts.classes:
                facts.add_edge(source, facts.classes[name], EdgeType.DEPENDENCY, line_number)

        for match in CALL_PATTERN.finditer(text):
            name = match.group(2) or match.group(3)
            if match.group(3) and name in instantiated:
                continue
            if name in BUILTIN_CALLS or name in STATEMENT_KEYWORDS:
                continue
            target = facts.functions.get(name)
            if target:
                facts.add_edge(source, target, EdgeType.CALL, line_number)

    @staticmethod
    def _supertypes(statement: str) -> List[str]:
        names = []
        for pattern in (EXTENDS_PATTERN, IMPLEMENTS_PATTERN):
            match = pattern.search(statement)
            if not match:
                continue
            for part in match.group(1).split(","):
                part = GENERICS_PATTERN.sub("", part).strip()
                if part:
                    names.append(part.split(".")[-1])
        return names

    @staticmethod
    def _enclosing_method(scopes: List[_Scope]) -> Optional[str]:
        for scope in reversed(scopes):
            if scope.kind == "function":
                return scope.node_id
        return None

    @staticmethod
    def _qualify(scopes: List[_Scope], name: str) -> str:
        return ".".join([scope.name for scope in scopes if scope.name] + [name])

    @staticmethod
    def _brace_depth(depth: int, text: str) -> Tuple[int, int]:
        peak = depth
        for char in text:
            if char == "{":
                depth += 1
                peak = max(peak, depth)
            elif char == "}":
                depth = max(depth - 1, 0)
        return depth, peak

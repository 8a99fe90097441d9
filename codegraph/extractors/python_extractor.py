"""
Line-oriented structural extractor for Python sources.

The extractor walks the file once, keeping a stack of open class/function
scopes keyed by indentation. It recognises:

* ``class`` headers (inheritance to classes defined earlier in the file),
* ``def`` / ``async def`` headers (methods are qualified by their class),
* ``import`` / ``from ... import`` statements,
* module- and class-level assignments,
* call expressions and references to known variables inside functions.

Calls resolve only to functions already seen in the same file, except that
``self.name(`` prefers a method of the enclosing class; everything else is
dropped.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..types import EdgeType, ExtractionResult, NodeType
from .base import BaseExtractor, FileGraph


CLASS_PATTERN = re.compile(r"^class\s+(\w+)\s*(?:\(([^)]*)\)?)?")
FUNCTION_PATTERN = re.compile(r"^(async\s+)?def\s+(\w+)")
IMPORT_PATTERN = re.compile(r"^import\s+(.+)$")
FROM_IMPORT_PATTERN = re.compile(r"^from\s+(\S+)\s+import\b")
ASSIGNMENT_PATTERN = re.compile(r"^([A-Za-z_]\w*)\s*(?::[^=]+)?=(?!=)")
CALL_PATTERN = re.compile(r"(?:(\w+)\s*\.\s*)?(\w+)\s*\(")
IDENTIFIER_PATTERN = re.compile(r"\b[A-Za-z_]\w*\b")


BUILTIN_CALLS = frozenset({
    "print", "len", "str", "int", "float", "list", "dict", "set", "tuple", "range", "input", "open",
})

SELF_RECEIVERS = frozenset({"self", "cls"})

_OPENERS = "([{"
_CLOSERS = ")]}"


@dataclass
class _Scope:
    kind: str
    node_id: str
    name: str
    indent: int


class PythonExtractor(BaseExtractor):
    """Extracts classes, functions, variables, imports and calls from Python."""

    language = "python"

    def extract(self, code: str, file_path: str) -> ExtractionResult:
        facts = FileGraph(file_path, self.language)
        scopes: List[_Scope] = []

        open_string: Optional[str] = None
        bracket_depth = 0
        backslash_continuation = False
        last_code_line = 0

        for index, raw in enumerate(code.split("\n")):
            line_number = index + 1
            raw = raw.expandtabs(8).rstrip("\r")

            in_string = open_string is not None
            text, open_string = self._clean(raw, open_string)
            if not text.strip():
                continue

            # A line closing a multi-line string continues the statement that opened it
            continuation = in_string or bracket_depth > 0 or backslash_continuation
            statement = text.strip()
            call_text = statement

            if not continuation:
                indent = len(raw) - len(raw.lstrip())
                while scopes and indent <= scopes[-1].indent:
                    facts.close_symbol(scopes.pop().node_id, last_code_line)

                call_text = self._handle_statement(facts, scopes, statement, indent, line_number)

            last_code_line = line_number
            self._scan_references(facts, scopes, call_text, line_number)

            bracket_depth = self._bracket_depth(bracket_depth, text)
            backslash_continuation = text.rstrip().endswith("\\")

        while scopes:
            facts.close_symbol(scopes.pop().node_id, last_code_line)

        return facts.result()

    @staticmethod
    def _clean(raw: str, open_string: Optional[str] = None) -> Tuple[str, Optional[str]]:
        """Replace string literals with ``""`` and drop the trailing comment.

        The line is scanned left to right so quotes inside comments and
        comment markers inside strings are not mistaken for each other.
        ``open_string`` is the delimiter of a triple-quoted string still open
        from an earlier line. Returns the remaining code and the delimiter
        left open at the end of this line, if any.
        """
        parts = []
        position = 0
        if open_string is not None:
            end = raw.find(open_string)
            if end == -1:
                return "", open_string
            parts.append('""')
            position = end + 3

        length = len(raw)
        while position < length:
            char = raw[position]
            if char == "#":
                break
            if char not in "\"'":
                parts.append(char)
                position += 1
                continue

            delimiter = raw[position:position + 3]
            if delimiter in ('"""', "'''"):
                end = raw.find(delimiter, position + 3)
                parts.append('""')
                if end == -1:
                    return "".join(parts), delimiter
                position = end + 3
                continue

            position += 1
            while position < length and raw[position] != char:
                position += 2 if raw[position] == "\\" else 1
            parts.append('""')
            position += 1

        return "".join(parts), None

    def _handle_statement(self, facts: FileGraph, scopes: List[_Scope], statement: str,
                          indent: int, line_number: int) -> str:
        """Record definitions starting on this line; return the text left to scan for calls."""
        class_match = CLASS_PATTERN.match(statement)
        if class_match:
            name = class_match.group(1)
            qualified = self._qualify(scopes, name)
            node_id = facts.add_symbol(NodeType.CLASS, name, qualified, line_number)
            for base in self._split_names(class_match.group(2) or ""):
                base_id = facts.classes.get(base.split(".")[-1])
                if base_id and base_id != node_id:
                    facts.add_edge(node_id, base_id, EdgeType.INHERITANCE, line_number)
            scopes.append(_Scope("class", node_id, name, indent))
            return statement[class_match.end():]

        function_match = FUNCTION_PATTERN.match(statement)
        if function_match:
            name = function_match.group(2)
            properties = {}
            if scopes and scopes[-1].kind == "class":
                properties["class"] = scopes[-1].name
            if function_match.group(1):
                properties["async"] = True
            node_id = facts.add_symbol(NodeType.FUNCTION, name, self._qualify(scopes, name),
                                       line_number, **properties)
            scopes.append(_Scope("function", node_id, name, indent))
            return statement[function_match.end():]

        from_match = FROM_IMPORT_PATTERN.match(statement)
        if from_match:
            module = from_match.group(1)
            if module.strip("."):
                facts.add_import(module, line_number)
            else:
                # "from . import views" names sibling modules
                imported = statement[from_match.end():].strip().strip("()")
                for name in self._split_names(imported):
                    facts.add_import(module + name, line_number)
            return ""

        import_match = IMPORT_PATTERN.match(statement)
        if import_match:
            for name in self._split_names(import_match.group(1)):
                facts.add_import(name, line_number)
            return ""

        assignment = ASSIGNMENT_PATTERN.match(statement)
        if assignment and (not scopes or scopes[-1].kind == "class"):
            name = assignment.group(1)
            facts.add_symbol(NodeType.VARIABLE, name, self._qualify(scopes, name), line_number)
            return statement[assignment.end():]

        return statement

    def _scan_references(self, facts: FileGraph, scopes: List[_Scope], text: str, line_number: int):
        if not text:
            return

        caller = self._enclosing_function(scopes)
        source = caller or facts.module_id

        called = set()
        for match in CALL_PATTERN.finditer(text):
            receiver, name = match.group(1), match.group(2)
            called.add(name)
            if name in BUILTIN_CALLS:
                continue
            method = self._own_method(facts, scopes, receiver, name)
            if method:
                facts.add_edge(source, method, EdgeType.CALL, line_number)
            elif name in facts.functions:
                facts.add_edge(source, facts.functions[name], EdgeType.CALL, line_number)
            elif name in facts.classes:
                facts.add_edge(source, facts.classes[name], EdgeType.DEPENDENCY, line_number)

        if caller is None or not facts.variables:
            return
        for name in IDENTIFIER_PATTERN.findall(text):
            if name in facts.variables and name not in called:
                facts.add_edge(caller, facts.variables[name], EdgeType.USAGE, line_number)

    @staticmethod
    def _own_method(facts: FileGraph, scopes: List[_Scope], receiver: Optional[str], name: str) -> Optional[str]:
        """Resolve ``self.name(``/``cls.name(`` to a method of the enclosing class, if it has one."""
        if receiver not in SELF_RECEIVERS:
            return None
        for scope in reversed(scopes):
            if scope.kind == "class":
                return facts.function_id(f"{scope.node_id}.{name}")
        return None

    @staticmethod
    def _enclosing_function(scopes: List[_Scope]) -> Optional[str]:
        for scope in reversed(scopes):
            if scope.kind == "function":
                return scope.node_id
        return None

    @staticmethod
    def _qualify(scopes: List[_Scope], name: str) -> str:
        return ".".join([scope.name for scope in scopes] + [name])

    @staticmethod
    def _split_names(text: str) -> List[str]:
        """Split ``a.b as c, d`` into ``["a.b", "d"]``."""
        names = []
        for part in text.split(","):
            part = part.strip().strip("()\\").strip()
            if not part or part == "*":
                continue
            name = part.split()[0]
            if "=" in name:
                # keyword argument in a class header, e.g. metaclass=ABCMeta
                continue
            names.append(name)
        return names

    @staticmethod
    def _bracket_depth(depth: int, text: str) -> int:
        for char in text:
            if char in _OPENERS:
                depth += 1
            elif char in _CLOSERS:
                depth = max(depth - 1, 0)
        return depth

"""
JavaScript module-format scanner.

Parses one source file with esprima and walks the ESTree AST, recording:
    - ESM syntax (import/export declarations)
    - CommonJS usage (require, module.exports, exports.x)
    - Dynamic import() calls
    - Exports that cannot be determined statically
    - Dependencies that cannot be determined statically

`require`, `module` and `exports` only count when they are free
(unresolved) identifiers: a parameter, variable, function, class or
import binding of the same name in any enclosing scope hides them.

Sources are parsed as modules first, then as scripts (sloppy mode).
If neither parse succeeds, ScanError is raised.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional, Set

import esprima
from esprima.error_handler import Error as EsprimaError


FUNCTION_TYPES = frozenset({
    "FunctionDeclaration", "FunctionExpression", "ArrowFunctionExpression",
})
LOOP_TYPES = frozenset({"ForStatement", "ForInStatement", "ForOfStatement"})


class ScanError(ValueError):
    """Raised when a source file cannot be parsed."""
    pass


@dataclass
class ScanResult:
    """Module-format facts about one source file."""
    is_esm: bool = False
    is_cjs: bool = False
    dynamic_import: bool = False
    non_static_exports: bool = False
    non_static_deps: bool = False
    dependencies: Set[str] = field(default_factory=set)


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _is_node(value: Any) -> bool:
    return hasattr(value, "__dict__") and isinstance(getattr(value, "type", None), str)


def _children(node: Any) -> Iterator[Any]:
    for key, value in vars(node).items():
        if key == "type":
            continue
        if isinstance(value, list):
            for item in value:
                if _is_node(item):
                    yield item
        elif _is_node(value):
            yield value


def _pattern_names(pattern: Any, names: Set[str]) -> None:
    """Collect the identifiers bound by a declaration or parameter pattern."""
    if not _is_node(pattern):
        return
    kind = pattern.type
    if kind == "Identifier":
        names.add(pattern.name)
    elif kind == "ObjectPattern":
        for prop in pattern.properties:
            _pattern_names(prop.argument if prop.type == "RestElement" else prop.value, names)
    elif kind == "ArrayPattern":
        for element in pattern.elements:
            _pattern_names(element, names)
    elif kind == "AssignmentPattern":
        _pattern_names(pattern.left, names)
    elif kind == "RestElement":
        _pattern_names(pattern.argument, names)


def _lexical_names(statements: List[Any], names: Set[str]) -> None:
    for stmt in statements:
        if not _is_node(stmt):
            continue
        if stmt.type == "VariableDeclaration" and stmt.kind in ("let", "const"):
            for decl in stmt.declarations:
                _pattern_names(decl.id, names)
        elif stmt.type in ("ClassDeclaration", "FunctionDeclaration") and stmt.id is not None:
            names.add(stmt.id.name)
        elif stmt.type == "ImportDeclaration":
            for spec in stmt.specifiers:
                names.add(spec.local.name)
        elif stmt.type in ("ExportNamedDeclaration", "ExportDefaultDeclaration"):
            if _is_node(stmt.declaration):
                _lexical_names([stmt.declaration], names)


def _hoisted_names(node: Any, names: Set[str]) -> None:
    """`var` and function declarations hoisted to the enclosing function."""
    for child in _children(node):
        if child.type == "VariableDeclaration" and child.kind == "var":
            for decl in child.declarations:
                _pattern_names(decl.id, names)
        elif child.type == "FunctionDeclaration":
            if child.id is not None:
                names.add(child.id.name)
            continue
        if child.type in FUNCTION_TYPES or child.type in ("ClassDeclaration", "ClassExpression"):
            continue
        _hoisted_names(child, names)


def _scope_names(node: Any) -> Optional[Set[str]]:
    """Names declared by a scope-creating node, or None if it creates no scope."""
    kind = node.type
    names: Set[str] = set()

    if kind == "Program":
        _hoisted_names(node, names)
        _lexical_names(node.body, names)
    elif kind in FUNCTION_TYPES:
        if kind == "FunctionExpression" and node.id is not None:
            names.add(node.id.name)
        for param in node.params:
            _pattern_names(param, names)
        if _is_node(node.body) and node.body.type == "BlockStatement":
            _hoisted_names(node.body, names)
    elif kind == "BlockStatement":
        _lexical_names(node.body, names)
    elif kind == "SwitchStatement":
        for case in node.cases:
            _lexical_names(case.consequent, names)
    elif kind in LOOP_TYPES:
        head = node.init if kind == "ForStatement" else node.left
        _lexical_names([head], names)
    elif kind == "CatchClause":
        _pattern_names(node.param, names)
    elif kind == "ClassExpression" and node.id is not None:
        names.add(node.id.name)
    else:
        return None
    return names


def _pure_string(node: Any) -> Optional[str]:
    """Value of an expression that is statically a string, else None."""
    if not _is_node(node):
        return None
    if node.type == "Literal" and isinstance(node.value, str):
        return node.value
    if node.type == "TemplateLiteral" and not node.expressions:
        return "".join(_field(q.value, "cooked") or "" for q in node.quasis)
    if node.type == "BinaryExpression" and node.operator == "+":
        left = _pure_string(node.left)
        right = _pure_string(node.right)
        if left is not None and right is not None:
            return left + right
    return None


class _ModuleVisitor:
    """Walks an ESTree AST and fills a ScanResult."""

    def __init__(self):
        self.result = ScanResult()
        self.scopes: List[Set[str]] = []

    def is_free(self, name: str) -> bool:
        return not any(name in scope for scope in self.scopes)

    def is_free_ident(self, node: Any, name: str) -> bool:
        return (
            _is_node(node)
            and node.type == "Identifier"
            and node.name == name
            and self.is_free(name)
        )

    def is_module_exports(self, node: Any) -> bool:
        return (
            _is_node(node)
            and node.type == "MemberExpression"
            and not node.computed
            and self.is_free_ident(node.object, "module")
            and _is_node(node.property)
            and node.property.type == "Identifier"
            and node.property.name == "exports"
        )

    def is_exports(self, node: Any) -> bool:
        return self.is_free_ident(node, "exports") or self.is_module_exports(node)

    def add_dependency(self, source: Any) -> None:
        value = _pure_string(source)
        if value is not None:
            self.result.dependencies.add(value)
        else:
            self.result.non_static_deps = True

    def visit(self, node: Any) -> None:
        scope = _scope_names(node)
        if scope is not None:
            self.scopes.append(scope)
        try:
            handler = getattr(self, "visit_" + node.type, None)
            if handler is not None:
                handler(node)
            else:
                self.generic_visit(node)
        finally:
            if scope is not None:
                self.scopes.pop()

    def generic_visit(self, node: Any) -> None:
        for child in _children(node):
            self.visit(child)

    def visit_ImportDeclaration(self, node):
        self.result.is_esm = True
        self.add_dependency(node.source)

    def visit_ExportAllDeclaration(self, node):
        self.result.is_esm = True
        self.add_dependency(node.source)

    def visit_ExportNamedDeclaration(self, node):
        self.result.is_esm = True
        if node.source is not None:
            self.add_dependency(node.source)
        if _is_node(node.declaration):
            self.visit(node.declaration)

    def visit_ExportDefaultDeclaration(self, node):
        self.result.is_esm = True
        self.visit(node.declaration)

    def visit_ImportExpression(self, node):
        self.result.dynamic_import = True
        self.add_dependency(node.source)

    def visit_CallExpression(self, node):
        callee = node.callee
        if _is_node(callee) and callee.type == "Import":
            self.result.dynamic_import = True
            self.add_dependency(node.arguments[0] if node.arguments else None)
        elif self.is_free_ident(callee, "require"):
            self.result.is_cjs = True
            self.add_dependency(node.arguments[0] if node.arguments else None)
        self.generic_visit(node)

    def visit_AssignmentExpression(self, node):
        if self.is_module_exports(node.left):
            self.result.is_cjs = True
            self.visit(node.right)
            return
        self.generic_visit(node)

    def visit_MemberExpression(self, node):
        if self.is_exports(node.object):
            self.result.is_cjs = True
            if node.computed and _pure_string(node.property) is None:
                self.result.non_static_exports = True
            if node.computed:
                self.visit(node.property)
            return
        self.visit(node.object)
        if node.computed:
            self.visit(node.property)

    def visit_Identifier(self, node):
        # `exports` or `module` outside a member expression could be mutated anywhere.
        if node.name in ("exports", "module") and self.is_free(node.name):
            self.result.is_cjs = True
            self.result.non_static_exports = True

    def visit_Property(self, node):
        if node.computed:
            self.visit(node.key)
        self.visit(node.value)

    def visit_MethodDefinition(self, node):
        self.visit_Property(node)

    def visit_LabeledStatement(self, node):
        self.visit(node.body)

    def visit_BreakStatement(self, node):
        pass

    def visit_ContinueStatement(self, node):
        pass

    def visit_MetaProperty(self, node):
        pass


def _strip_hashbang(code: str) -> str:
    if code.startswith("#!"):
        newline = code.find("\n")
        return "" if newline == -1 else code[newline:]
    return code


def parse_source(code: str) -> Any:
    """
    Parse JavaScript as a module, falling back to a sloppy-mode script.

    Raises:
        ScanError: If the source is not valid JavaScript either way
    """
    code = _strip_hashbang(code)
    try:
        return esprima.parseModule(code)
    except EsprimaError:
        pass
    except RecursionError as e:
        raise ScanError("Source nests too deeply to parse") from e
    try:
        return esprima.parseScript(code)
    except EsprimaError as e:
        raise ScanError(f"Could not parse source: {e}") from e
    except RecursionError as e:
        raise ScanError("Source nests too deeply to parse") from e


def scan_source(code: str) -> ScanResult:
    """
    Scan JavaScript source for module-format facts.

    Args:
        code: Source text of one file

    Returns:
        ScanResult with format flags and static dependency specifiers

    Raises:
        ScanError: If the source cannot be parsed
    """
    program = parse_source(code)
    visitor = _ModuleVisitor()
    try:
        visitor.visit(program)
    except RecursionError as e:
        raise ScanError("Source nests too deeply to analyze") from e
    return visitor.result


__all__ = ["ScanError", "ScanResult", "parse_source", "scan_source"]

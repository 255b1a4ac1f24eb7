"""
Static checks for code that runs on the plugin side of the boundary.

Rules:
- ``local-host-import``: importing ``vtxplugin.runtime`` or ``vtxplugin.cli``.
  Both exist only outside the sandbox.
- ``import-time-host-call``: calling a host helper at module level. No host is
  bound while a module is imported, so the call can only fail.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass
from pathlib import Path

LOCAL_ONLY_PACKAGES = ("vtxplugin.runtime", "vtxplugin.cli")

# Helpers that reach the bound host, called by bare name.
_HOST_FUNCTIONS = frozenset({"current_host", "current_user", "open_file", "memory_buffer", "publish_json", "publish_raw"})
# Any attribute call on these names reaches the host.
_HOST_NAMESPACES = frozenset({"db", "stream", "event_bus", "http_client", "context", "ResponseBuilder"})


@dataclass(frozen=True, slots=True)
class BoundaryViolation:
    path: str
    line: int
    rule: str
    detail: str

    def __str__(self) -> str:
        return f"{self.path}:{self.line} {self.rule}: {self.detail}"


def _is_local_only(module: str) -> bool:
    return any(module == pkg or module.startswith(pkg + ".") for pkg in LOCAL_ONLY_PACKAGES)


def _host_helper_name(func: ast.expr) -> str | None:
    if isinstance(func, ast.Name) and func.id in _HOST_FUNCTIONS:
        return func.id
    if isinstance(func, ast.Attribute) and isinstance(func.value, ast.Name) and func.value.id in _HOST_NAMESPACES:
        return f"{func.value.id}.{func.attr}"
    return None


class _PluginSideVisitor(ast.NodeVisitor):
    def __init__(self, rel_path: str, module_package: list[str]):
        self.rel_path = rel_path
        self.module_package = module_package
        self.depth = 0
        self.violations: list[BoundaryViolation] = []

    def _add(self, node: ast.AST, rule: str, detail: str) -> None:
        self.violations.append(BoundaryViolation(self.rel_path, getattr(node, "lineno", 0), rule, detail))

    def _absolute(self, node: ast.ImportFrom) -> str:
        if node.level == 0:
            return node.module or ""
        if not self.module_package:
            return ""
        base = self.module_package[: len(self.module_package) - (node.level - 1)]
        return ".".join(base + ([node.module] if node.module else []))

    def visit_Import(self, node: ast.Import) -> None:
        for alias in node.names:
            if _is_local_only(alias.name):
                self._add(node, "local-host-import", alias.name)

    def visit_ImportFrom(self, node: ast.ImportFrom) -> None:
        module = self._absolute(node)
        if _is_local_only(module):
            self._add(node, "local-host-import", module)
        elif module:
            for alias in node.names:
                if _is_local_only(f"{module}.{alias.name}"):
                    self._add(node, "local-host-import", f"{module}.{alias.name}")

    def _nested(self, node: ast.AST) -> None:
        self.depth += 1
        self.generic_visit(node)
        self.depth -= 1

    visit_FunctionDef = _nested
    visit_AsyncFunctionDef = _nested
    visit_Lambda = _nested

    def visit_Call(self, node: ast.Call) -> None:
        if self.depth == 0:
            name = _host_helper_name(node.func)
            if name:
                self._add(node, "import-time-host-call", name)
        self.generic_visit(node)


def collect_violations(
    root: Path,
    *,
    package: str | None = None,
    skip_dirs: tuple[str, ...] = (),
) -> list[BoundaryViolation]:
    """Check one file or every ``.py`` file under a directory.

    With ``package`` set, ``root`` is that package's directory and relative
    imports are resolved against it.
    """
    root = Path(root).resolve()
    files = [root] if root.is_file() else sorted(root.rglob("*.py"))
    base = root.parent if root.is_file() else root
    violations: list[BoundaryViolation] = []
    for file_path in files:
        rel = file_path.relative_to(base)
        if rel.parts and rel.parts[0] in skip_dirs:
            continue
        rel_path = rel.as_posix()
        try:
            tree = ast.parse(file_path.read_text(encoding="utf-8"), filename=str(file_path))
        except SyntaxError as exc:
            violations.append(BoundaryViolation(rel_path, exc.lineno or 0, "parse-error", str(exc.msg)))
            continue
        module_package = [package, *rel.parts[:-1]] if package else []
        visitor = _PluginSideVisitor(rel_path, module_package)
        visitor.visit(tree)
        violations.extend(visitor.violations)
    return violations


def check_sdk_package(package_root: Path) -> list[BoundaryViolation]:
    """Run the checks over the SDK itself; the local host and CLI are exempt."""
    return collect_violations(package_root, package="vtxplugin", skip_dirs=("runtime", "cli"))

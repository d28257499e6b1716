"""Test discovery.

A test source is resolved into test units by ``find_tests``:

- a ``TestUnit`` is itself
- a module, or a namespace found earlier, contributes its module-level
  ``test_*`` functions, in definition order
- a directory contributes every ``test_*.py`` / ``*_test.py`` module beneath it
- a ``.py`` file path contributes the tests of that module
- any other string names a module (``pkg.mod``) or a test (``pkg.mod:test_x``
  or ``pkg.mod.test_x``)
- any other iterable contributes the tests of each item

Module-level ``once_fixtures`` / ``each_fixtures`` lists and ``__testweave__``
flags become the namespace's fixtures and defaults.
"""

from __future__ import annotations

import importlib
import importlib.util
import inspect
import sys
import threading
import weakref
from collections.abc import Iterable
from functools import singledispatch
from pathlib import Path
from types import ModuleType
from typing import Any

import structlog

from testweave.core.errors import DiscoveryError
from testweave.markers import metadata
from testweave.runner.models import Namespace, TestUnit, join_fixtures

logger = structlog.get_logger()

TEST_PREFIX = "test_"
PRUNABLE_DIRS = frozenset({"__pycache__", "node_modules", "venv", "build", "dist"})

_namespaces: weakref.WeakKeyDictionary[ModuleType, Namespace] = weakref.WeakKeyDictionary()
_namespaces_lock = threading.Lock()


def namespace_for(module: ModuleType) -> Namespace:
    """The namespace for ``module``; the same object for every lookup."""
    with _namespaces_lock:
        ns = _namespaces.get(module)
        if ns is None:
            meta = metadata(module)
            ns = Namespace(
                name=module.__name__,
                once_fixture=join_fixtures(getattr(module, "once_fixtures", ())),
                each_fixture=join_fixtures(getattr(module, "each_fixtures", ())),
                synchronized=bool(meta.get("synchronized", False)),
                slow=bool(meta.get("slow", False)),
            )
            _namespaces[module] = ns
        return ns


def _is_test(module: ModuleType, name: str, obj: Any) -> bool:
    return (
        name.startswith(TEST_PREFIX)
        and inspect.isfunction(obj)
        and obj.__module__ == module.__name__
    )


def _unit(module: ModuleType, name: str, fn: Any) -> TestUnit:
    meta = metadata(fn)
    return TestUnit.create(
        namespace_for(module),
        name,
        fn,
        synchronized=bool(meta.get("synchronized", False)),
        slow=bool(meta.get("slow", False)),
    )


def find_tests_in_module(module: ModuleType) -> list[TestUnit]:
    return [
        _unit(module, name, obj)
        for name, obj in vars(module).items()
        if _is_test(module, name, obj)
    ]


def _is_test_file(path: Path) -> bool:
    if path.suffix != ".py":
        return False
    return path.name.startswith(TEST_PREFIX) or path.stem.endswith("_test")


def _module_name(path: Path, root: Path) -> str:
    return ".".join(path.relative_to(root).with_suffix("").parts)


def _import_file(path: Path, name: str) -> ModuleType:
    existing = sys.modules.get(name)
    if existing is not None:
        existing_file = getattr(existing, "__file__", None)
        if existing_file and Path(existing_file).resolve() == path.resolve():
            return existing
    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise DiscoveryError.import_failed(name, f"cannot load {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        del sys.modules[name]
        raise DiscoveryError.import_failed(name, repr(e)) from e
    return module


def find_namespaces_in_dir(directory: Path) -> list[ModuleType]:
    """Import every test module under ``directory``, in path order."""
    root = directory.resolve()
    modules = []
    for path in sorted(root.rglob("*.py")):
        rel_parts = path.relative_to(root).parts[:-1]
        if any(part.startswith(".") or part in PRUNABLE_DIRS for part in rel_parts):
            continue
        if _is_test_file(path):
            modules.append(_import_file(path, _module_name(path, root)))
    logger.debug("namespaces_found", directory=str(root), count=len(modules))
    return modules


def _import_module(name: str) -> ModuleType:
    try:
        return importlib.import_module(name)
    except ModuleNotFoundError as e:
        if e.name is not None and (name == e.name or name.startswith(e.name + ".")):
            raise DiscoveryError.not_found(name) from e
        raise DiscoveryError.import_failed(name, repr(e)) from e
    except Exception as e:
        raise DiscoveryError.import_failed(name, repr(e)) from e


def _find_named_test(module_name: str, attr: str) -> list[TestUnit]:
    module = _import_module(module_name)
    obj = getattr(module, attr, None)
    if obj is None or not _is_test(module, attr, obj):
        raise DiscoveryError.not_found(f"{module_name}:{attr}")
    return [_unit(module, attr, obj)]


def _find_named(name: str) -> list[TestUnit]:
    if ":" in name:
        module_name, attr = name.split(":", 1)
        return _find_named_test(module_name, attr)
    try:
        return find_tests_in_module(_import_module(name))
    except DiscoveryError as e:
        if "." not in name or e.details.get("source") != name:
            raise
    module_name, attr = name.rsplit(".", 1)
    return _find_named_test(module_name, attr)


def _find_in_path(path: Path) -> list[TestUnit]:
    if path.is_dir():
        return [
            unit
            for module in find_namespaces_in_dir(path)
            for unit in find_tests_in_module(module)
        ]
    return find_tests_in_module(_import_file(path, path.stem))


@singledispatch
def find_tests(source: Any) -> list[TestUnit]:
    """Find the test units described by ``source``.

    Raises:
        DiscoveryError: If a name or path cannot be resolved or imported.
    """
    if isinstance(source, Iterable):
        return [unit for item in source for unit in find_tests(item)]
    raise DiscoveryError.unsupported(source)


@find_tests.register
def _(source: TestUnit) -> list[TestUnit]:
    return [source]


@find_tests.register
def _(source: ModuleType) -> list[TestUnit]:
    return find_tests_in_module(source)


@find_tests.register
def _(source: Namespace) -> list[TestUnit]:
    module = sys.modules.get(source.name)
    if module is None or namespace_for(module) is not source:
        raise DiscoveryError.not_found(source.name)
    return find_tests_in_module(module)


@find_tests.register
def _(source: Path) -> list[TestUnit]:
    if not source.exists():
        raise DiscoveryError.not_found(str(source))
    return _find_in_path(source)


@find_tests.register
def _(source: str) -> list[TestUnit]:
    path = Path(source)
    if source.endswith(".py") or path.is_dir():
        return find_tests(path)
    return _find_named(source)

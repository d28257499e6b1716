"""Runner core models.

Canonical data structures for test units, namespaces, report events and
result counters. Every reporter consumes the events defined here.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from functools import reduce
from typing import Any, ClassVar

# =============================================================================
# Fixtures
# =============================================================================

Fixture = Callable[[Callable[[], None]], Any]
"""A fixture receives the wrapped body and must call it exactly once."""


def _identity_fixture(f: Callable[[], None]) -> None:
    f()


def compose_fixtures(outer: Fixture, inner: Fixture) -> Fixture:
    def composed(f: Callable[[], None]) -> None:
        outer(lambda: inner(f))

    return composed


def join_fixtures(fixtures: Iterable[Fixture]) -> Fixture:
    """Compose fixtures into one; the first listed runs outermost."""
    return reduce(compose_fixtures, fixtures, _identity_fixture)


# =============================================================================
# Test Units and Namespaces
# =============================================================================


@dataclass(frozen=True, eq=False)
class Namespace:
    """A named group of test units sharing fixtures and default flags."""

    __test__ = False

    name: str
    once_fixture: Fixture = _identity_fixture
    each_fixture: Fixture = _identity_fixture
    synchronized: bool = False
    slow: bool = False

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, eq=False)
class TestUnit:
    """A single executable test.

    ``synchronized`` and ``slow`` are resolved when the unit is built, taking
    the namespace default into account, so nothing downstream looks at the
    namespace for them again.
    """

    __test__ = False

    namespace: Namespace
    name: str
    fn: Callable[[], Any]
    synchronized: bool = False
    slow: bool = False

    @classmethod
    def create(
        cls,
        namespace: Namespace,
        name: str,
        fn: Callable[[], Any],
        *,
        synchronized: bool = False,
        slow: bool = False,
    ) -> TestUnit:
        return cls(
            namespace=namespace,
            name=name,
            fn=fn,
            synchronized=synchronized or namespace.synchronized,
            slow=slow or namespace.slow,
        )

    @property
    def id(self) -> str:
        return f"{self.namespace.name}::{self.name}"

    def __str__(self) -> str:
        return self.id


@dataclass
class NamespaceGroup:
    """A namespace together with the units of it selected for this run."""

    namespace: Namespace
    units: list[TestUnit] = field(default_factory=list)


def group_by_namespace(units: Iterable[TestUnit]) -> list[NamespaceGroup]:
    """Group units by namespace, keeping first-seen namespace order."""
    groups: dict[Namespace, NamespaceGroup] = {}
    for unit in units:
        group = groups.get(unit.namespace)
        if group is None:
            group = groups[unit.namespace] = NamespaceGroup(unit.namespace)
        group.units.append(unit)
    return list(groups.values())


# =============================================================================
# Counters
# =============================================================================


@dataclass(frozen=True)
class Counters:
    """Result counters. ``+`` adds field-wise."""

    test: int = 0
    passed: int = 0
    failed: int = 0
    error: int = 0

    def __add__(self, other: Counters) -> Counters:
        if not isinstance(other, Counters):
            return NotImplemented
        return Counters(
            test=self.test + other.test,
            passed=self.passed + other.passed,
            failed=self.failed + other.failed,
            error=self.error + other.error,
        )

    @property
    def has_failures(self) -> bool:
        return self.failed > 0 or self.error > 0


def merge_counters(counters: Iterable[Counters]) -> Counters:
    """Sum any number of counters; an empty input gives all zeros."""
    return sum(counters, Counters())


# =============================================================================
# Report Events
# =============================================================================

TestingPath = tuple[Any, ...]
"""Scope stack naming where an event happened: namespace, then unit or fixture kind."""


@dataclass(frozen=True)
class ReportEvent:
    """Base class for everything sent to a report sink."""

    type: ClassVar[str] = "event"


@dataclass(frozen=True)
class BeginRun(ReportEvent):
    type: ClassVar[str] = "begin-run"

    count: int


@dataclass(frozen=True)
class BeginNamespace(ReportEvent):
    type: ClassVar[str] = "begin-namespace"

    namespace: Namespace


@dataclass(frozen=True)
class EndNamespace(ReportEvent):
    type: ClassVar[str] = "end-namespace"

    namespace: Namespace


@dataclass(frozen=True)
class BeginTest(ReportEvent):
    type: ClassVar[str] = "begin-test"

    unit: TestUnit


@dataclass(frozen=True)
class EndTest(ReportEvent):
    type: ClassVar[str] = "end-test"

    unit: TestUnit


@dataclass(frozen=True)
class Pass(ReportEvent):
    type: ClassVar[str] = "pass"

    unit: TestUnit | None = None


@dataclass(frozen=True)
class Fail(ReportEvent):
    type: ClassVar[str] = "fail"

    unit: TestUnit | None = None
    message: str | None = None
    actual: BaseException | None = None
    testing_path: TestingPath = ()


@dataclass(frozen=True)
class Error(ReportEvent):
    type: ClassVar[str] = "error"

    unit: TestUnit | None = None
    message: str | None = None
    actual: BaseException | None = None
    testing_path: TestingPath = ()


@dataclass(frozen=True)
class LongTest(ReportEvent):
    type: ClassVar[str] = "long-test"

    unit: TestUnit
    duration_ms: float
    testing_path: TestingPath = ()


@dataclass(frozen=True)
class Summary(ReportEvent):
    type: ClassVar[str] = "summary"

    counters: Counters = field(default_factory=Counters)
    duration_ms: float = 0.0

    @property
    def test(self) -> int:
        return self.counters.test

    @property
    def passed(self) -> int:
        return self.counters.passed

    @property
    def failed(self) -> int:
        return self.counters.failed

    @property
    def error(self) -> int:
        return self.counters.error

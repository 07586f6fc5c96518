"""Query constructs and their parameter builders.

Builders are mutable and chain their setters. A construct such as
``CreateIndex`` snapshots its builder into an immutable expression tree
when it is created, so later builder changes never leak into a query.

Usage:
    from faunaquery.expr import IndexPermission, Level, Ref
    from faunaquery.query import CreateIndex, IndexParams, IndexValue, Term

    params = (
        IndexParams("meows", Ref.class_("cats"))
        .permissions(IndexPermission().read(Level.public()))
        .terms([Term.field(["data", "age"]), Term.binding("cats_name")])
        .values([IndexValue.binding("cats_age").reverse()])
    )
    query = CreateIndex(params)
"""

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence

from .expr import Array, Expr, IndexPermission, Literal, Object, Query, Ref

MAX_PARTITIONS = 65535


@dataclass(frozen=True)
class _Field:
    path: tuple[str, ...]

    def pair(self) -> tuple[str, Expr]:
        return "field", Array(tuple(Literal(segment) for segment in self.path))


@dataclass(frozen=True)
class _Binding:
    name: str

    def pair(self) -> tuple[str, Expr]:
        return "binding", Literal(self.name)


def _field(path: Sequence[str]) -> _Field:
    if isinstance(path, str):
        raise TypeError(f"Field path must be a sequence of segments, got {path!r}")
    segments = tuple(path)
    if not segments:
        raise ValueError("Field path must not be empty")
    return _Field(segments)


class Term:
    """Describes a field used to locate entries in an index.

    A term is either a field path or a binding name, never both.
    """

    def __init__(self, source: _Field | _Binding):
        self._source = source

    @classmethod
    def field(cls, path: Sequence[str]) -> "Term":
        """The path of the field within an instance to be indexed."""
        return cls(_field(path))

    @classmethod
    def binding(cls, name: str) -> "Term":
        """The name of a binding from a source object."""
        return cls(_Binding(name))

    def to_expr(self) -> Object:
        return Object((self._source.pair(),))

    def __repr__(self) -> str:
        return f"Term({self._source!r})"


class IndexValue:
    """Describes data covered by an index.

    Covered values are returned by queries on the index and order entries
    sharing the same terms.
    """

    def __init__(self, source: _Field | _Binding):
        self._source = source
        self._reverse = False

    @classmethod
    def field(cls, path: Sequence[str]) -> "IndexValue":
        return cls(_field(path))

    @classmethod
    def binding(cls, name: str) -> "IndexValue":
        return cls(_Binding(name))

    def reverse(self, reverse: bool = True) -> "IndexValue":
        """Reverse the sort order of this value."""
        self._reverse = reverse
        return self

    def to_expr(self) -> Object:
        return Object((self._source.pair(), ("reverse", Literal(self._reverse))))

    def __repr__(self) -> str:
        return f"IndexValue({self._source!r}, reverse={self._reverse})"


class IndexParams:
    """Parameters for ``CreateIndex``.

    The name cannot be ``events``, ``sets``, ``self``, ``instances`` or
    ``_``, and the source must evaluate to a class ref. Neither rule is
    checked here; the server rejects violations with a ``BadRequest``.

    Args:
        name: Name of the index.
        source: Expression evaluating to the source class.

    Example:
        >>> params = IndexParams("cats_by_age", Ref.class_("cats")).unique()
        >>> params.terms([Term.field(["data", "age"])])
    """

    def __init__(self, name: str, source: Any):
        self._name = name
        self._source = Expr.of(source)
        self._active = False
        self._unique = False
        self._serialized = False
        self._terms: tuple[Term, ...] | None = None
        self._values: tuple[IndexValue, ...] | None = None
        self._partitions: int | None = None
        self._permissions: IndexPermission | None = None
        self._data: Expr | None = None

    def active(self, active: bool = True) -> "IndexParams":
        """Skip building the index from existing instances."""
        self._active = active
        return self

    def unique(self, unique: bool = True) -> "IndexParams":
        """Keep a unique constraint on combined terms and values."""
        self._unique = unique
        return self

    def serialized(self, serialized: bool = True) -> "IndexParams":
        """Serialize index writes with concurrent reads and writes."""
        self._serialized = serialized
        return self

    def terms(self, terms: Iterable[Term]) -> "IndexParams":
        self._terms = tuple(terms)
        return self

    def values(self, values: Iterable[IndexValue]) -> "IndexParams":
        self._values = tuple(values)
        return self

    def partitions(self, partitions: int) -> "IndexParams":
        """The number of sub-partitions within each term."""
        if not isinstance(partitions, int) or isinstance(partitions, bool):
            raise TypeError(f"Partitions must be an integer, got {partitions!r}")
        if not 1 <= partitions <= MAX_PARTITIONS:
            raise ValueError(
                f"Partitions must be between 1 and {MAX_PARTITIONS}, got {partitions}"
            )
        self._partitions = partitions
        return self

    def permissions(self, permissions: IndexPermission) -> "IndexParams":
        """Who is allowed to read the index."""
        self._permissions = permissions
        return self

    def data(self, data: Mapping[str, Any] | Object) -> "IndexParams":
        """User-defined metadata stored with the index."""
        self._data = data if isinstance(data, Object) else Object.of(data)
        return self

    def to_expr(self) -> Object:
        pairs: list[tuple[str, Expr]] = [
            ("name", Literal(self._name)),
            ("source", self._source),
            ("active", Literal(self._active)),
            ("unique", Literal(self._unique)),
            ("serialized", Literal(self._serialized)),
        ]
        if self._terms is not None:
            pairs.append(("terms", Array(tuple(t.to_expr() for t in self._terms))))
        if self._values is not None:
            pairs.append(("values", Array(tuple(v.to_expr() for v in self._values))))
        if self._partitions is not None:
            pairs.append(("partitions", Literal(self._partitions)))
        if self._permissions is not None:
            pairs.append(("permissions", self._permissions.to_expr()))
        if self._data is not None:
            pairs.append(("data", self._data))
        return Object(tuple(pairs))


class ClassParams:
    """Parameters for ``CreateClass``."""

    def __init__(self, name: str):
        self._name = name
        self._history_days: int | None = None
        self._ttl_days: int | None = None
        self._permissions: IndexPermission | None = None
        self._data: Expr | None = None

    def history_days(self, days: int) -> "ClassParams":
        """Days to keep instance history."""
        self._history_days = days
        return self

    def ttl_days(self, days: int) -> "ClassParams":
        """Days before instances are removed."""
        self._ttl_days = days
        return self

    def permissions(self, permissions: IndexPermission) -> "ClassParams":
        self._permissions = permissions
        return self

    def data(self, data: Mapping[str, Any] | Object) -> "ClassParams":
        self._data = data if isinstance(data, Object) else Object.of(data)
        return self

    def to_expr(self) -> Object:
        pairs: list[tuple[str, Expr]] = [("name", Literal(self._name))]
        if self._history_days is not None:
            pairs.append(("history_days", Literal(self._history_days)))
        if self._ttl_days is not None:
            pairs.append(("ttl_days", Literal(self._ttl_days)))
        if self._permissions is not None:
            pairs.append(("permissions", self._permissions.to_expr()))
        if self._data is not None:
            pairs.append(("data", self._data))
        return Object(tuple(pairs))


class CreateIndex(Query):
    """Add a new index with the given parameters.

    The index is readable once the transaction completes but may return
    incomplete results until the server marks it active.
    """

    def __init__(self, params: IndexParams):
        super().__init__("create_index", params.to_expr())


class CreateClass(Query):
    """Add a new class with the given parameters."""

    def __init__(self, params: ClassParams):
        super().__init__("create_class", params.to_expr())


class CreateDatabase(Query):
    """Add a new child database."""

    def __init__(
        self,
        name: str,
        api_version: str | None = None,
        data: Mapping[str, Any] | None = None,
    ):
        params: dict[str, Any] = {"name": name}
        if api_version is not None:
            params["api_version"] = api_version
        if data is not None:
            params["data"] = Object.of(data)
        super().__init__("create_database", Object.of(params))


class Get(Query):
    """Read the instance or schema object at ``ref``."""

    def __init__(self, ref: Ref | Expr):
        super().__init__("get", Expr.of(ref))


class Delete(Query):
    """Remove the instance or schema object at ``ref``."""

    def __init__(self, ref: Ref | Expr):
        super().__init__("delete", Expr.of(ref))

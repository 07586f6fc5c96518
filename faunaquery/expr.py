"""Expression nodes.

Every query construct compiles down to a tree of immutable ``Expr`` nodes
before it is serialized to Fauna's JSON wire format. Nodes are frozen
dataclasses holding tuples, so a tree can be shared freely between
concurrent requests.

Usage:
    from faunaquery.expr import Expr, Ref, serialize

    expr = Expr.of({"name": "meows", "source": Ref.class_("cats")})
    serialize(expr)
"""

import json
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from .exceptions import SerializationError


class Expr:
    """Base class for every serializable query value."""

    def to_json(self) -> Any:
        """Return the JSON-compatible structure for this node."""
        raise NotImplementedError

    @staticmethod
    def of(value: Any) -> "Expr":
        """Convert a Python value into an expression node.

        Args:
            value: ``None``, a bool, number or string, a list/tuple, a dict,
                another ``Expr``, or any object exposing ``to_expr()``.

        Returns:
            The matching expression node.

        Raises:
            TypeError: If the value has no expression form.
        """
        if isinstance(value, Expr):
            return value
        if value is None or isinstance(value, (bool, int, float, str)):
            return Literal(value)
        if isinstance(value, (list, tuple)):
            return Array(tuple(Expr.of(v) for v in value))
        if isinstance(value, Mapping):
            return Object.of(value)
        to_expr = getattr(value, "to_expr", None)
        if callable(to_expr):
            return to_expr()
        raise TypeError(f"Cannot convert {type(value).__name__} to an expression")


@dataclass(frozen=True)
class Literal(Expr):
    """A null, boolean, number or string."""

    value: Any

    def to_json(self) -> Any:
        return self.value


@dataclass(frozen=True)
class Array(Expr):
    """An ordered sequence of expressions."""

    items: tuple[Expr, ...] = ()

    def to_json(self) -> list[Any]:
        return [item.to_json() for item in self.items]


@dataclass(frozen=True)
class Object(Expr):
    """A keyed set of expressions, serialized as ``{"object": {...}}``.

    Keys keep their insertion order. Keys are checked only when the object
    is serialized, so ``from_pairs`` accepts anything.
    """

    fields: tuple[tuple[Any, Expr], ...] = ()

    @classmethod
    def of(cls, mapping: Mapping[str, Any]) -> "Object":
        """Create an Object from a mapping, converting each value."""
        return cls(tuple((k, Expr.of(v)) for k, v in mapping.items()))

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[Any, Any]]) -> "Object":
        """Create an Object from ``(key, value)`` pairs, duplicates included."""
        return cls(tuple((k, Expr.of(v)) for k, v in pairs))

    def to_json(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        for key, value in self.fields:
            if not isinstance(key, str):
                raise SerializationError(f"Object key must be a string, got {key!r}")
            if key in body:
                raise SerializationError(f"Duplicate object key: {key!r}")
            body[key] = value.to_json()
        return {"object": body}


@dataclass(frozen=True)
class Ref(Expr):
    """A reference to a class, database, index, function or instance."""

    id: str
    class_ref: "Ref | None" = None

    @classmethod
    def class_(cls, name: str) -> "Ref":
        return cls(name, cls("classes"))

    @classmethod
    def database(cls, name: str) -> "Ref":
        return cls(name, cls("databases"))

    @classmethod
    def index(cls, name: str) -> "Ref":
        return cls(name, cls("indexes"))

    @classmethod
    def function(cls, name: str) -> "Ref":
        return cls(name, cls("functions"))

    @classmethod
    def instance(cls, id: str, class_name: str) -> "Ref":  # noqa: A002
        """Reference an instance ``id`` of the class ``class_name``."""
        return cls(id, cls.class_(class_name))

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "Ref":
        """Decode a ``{"@ref": {...}}`` structure from a response.

        Raises:
            ValueError: If the structure is not a ref.
        """
        body = data.get("@ref") if isinstance(data, Mapping) else None
        if not isinstance(body, Mapping) or "id" not in body:
            raise ValueError(f"Not a ref: {data!r}")
        parent = body.get("class")
        return cls(str(body["id"]), cls.from_json(parent) if parent else None)

    def to_json(self) -> dict[str, Any]:
        body: dict[str, Any] = {"id": self.id}
        if self.class_ref is not None:
            body["class"] = self.class_ref.to_json()
        return {"@ref": body}


@dataclass(frozen=True)
class Query(Expr):
    """A function call, serialized as ``{"<verb>": <argument>}``.

    Every top-level construct sent through the client is a Query.
    """

    verb: str
    argument: Expr

    def to_json(self) -> dict[str, Any]:
        return {self.verb: self.argument.to_json()}


@dataclass(frozen=True)
class Level(Expr):
    """Permission level for reading an index or class."""

    value: Expr

    @classmethod
    def public(cls) -> "Level":
        """Anyone holding a key may read."""
        return cls(Literal("public"))

    @classmethod
    def ref(cls, ref: Ref) -> "Level":
        """Only holders of ``ref`` may read."""
        return cls(ref)

    def to_json(self) -> Any:
        return self.value.to_json()


class IndexPermission:
    """Indicates who is allowed to read an index."""

    def __init__(self) -> None:
        self._read: Level | None = None

    def read(self, level: Level) -> "IndexPermission":
        self._read = level
        return self

    def to_expr(self) -> Object:
        pairs = []
        if self._read is not None:
            pairs.append(("read", self._read))
        return Object(tuple(pairs))


def serialize(value: Any) -> str:
    """Serialize an expression (or convertible value) to a JSON string.

    The same tree always yields the same string; object keys follow their
    insertion order.

    Raises:
        SerializationError: If the tree holds an invalid object key set or
            a value JSON cannot represent.
    """
    try:
        return json.dumps(Expr.of(value).to_json(), allow_nan=False)
    except SerializationError:
        raise
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Cannot serialize expression: {e}") from e

"""Type definitions for Fauna responses."""

from dataclasses import dataclass, field
from typing import Any, Iterator

from .expr import Ref


@dataclass
class Response:
    """Result of a successful query."""

    resource: Any = None

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> "Response":
        """Create Response from a decoded response body."""
        return cls(resource=response.get("resource"))

    @property
    def ref(self) -> Ref | None:
        """Ref of the returned resource, when it has one."""
        if not isinstance(self.resource, dict) or "ref" not in self.resource:
            return None
        try:
            return Ref.from_json(self.resource["ref"])
        except ValueError:
            return None

    @property
    def ts(self) -> int | None:
        if isinstance(self.resource, dict):
            return self.resource.get("ts")
        return None

    @property
    def data(self) -> Any:
        """User data stored on the returned resource."""
        if isinstance(self.resource, dict):
            return self.resource.get("data")
        return None


@dataclass
class FaunaErrorDetail:
    """A single error reported by the server."""

    code: str
    description: str
    position: list[Any] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FaunaErrorDetail":
        """Create FaunaErrorDetail from dictionary.

        Raises:
            ValueError: If ``code`` or ``description`` is missing, or
                ``position`` is not a list.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Error entry must be an object, got {data!r}")
        try:
            code = data["code"]
            description = data["description"]
        except KeyError as e:
            raise ValueError(f"Error entry is missing {e}") from e
        position = data.get("position", [])
        if not isinstance(position, list):
            raise ValueError(f"Error position must be a list, got {position!r}")
        return cls(
            code=str(code),
            description=str(description),
            position=list(position),
        )


@dataclass
class FaunaErrors:
    """Errors returned by the server on a 400 or 404 response."""

    errors: list[FaunaErrorDetail] = field(default_factory=list)

    @classmethod
    def from_response(cls, response: Any) -> "FaunaErrors":
        """Create FaunaErrors from a decoded ``{"errors": [...]}`` body.

        Raises:
            ValueError: If the body does not have the expected shape.
        """
        if not isinstance(response, dict) or not isinstance(response.get("errors"), list):
            raise ValueError(f"Not an errors body: {response!r}")
        return cls(errors=[FaunaErrorDetail.from_dict(e) for e in response["errors"]])

    @property
    def codes(self) -> list[str]:
        return [e.code for e in self.errors]

    @property
    def first_code(self) -> str | None:
        return self.errors[0].code if self.errors else None

    def __iter__(self) -> Iterator[FaunaErrorDetail]:
        return iter(self.errors)

    def __len__(self) -> int:
        return len(self.errors)

    def __str__(self) -> str:
        return "; ".join(f"{e.code}: {e.description}" for e in self.errors)

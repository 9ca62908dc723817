"""Lazy, declarative views over Reddit JSON objects.

A model wraps the ``data`` object of a ``{"kind": ..., "data": {...}}``
envelope without copying it. Each field is declared once as a
:class:`JsonProperty`, which owns the extraction closure for that field:
locate the key, apply the nullability rule, coerce the raw value. Nothing is
cached, so reading a field twice runs the extraction twice against the same
read-only data.

Example:
    ```python
    class Account(RedditObject):
        kind = Kind.ACCOUNT

        name = JsonProperty("name", str)
        is_friend = JsonProperty("is_friend", bool, nullable=True)
    ```
"""

from collections.abc import Callable, Mapping
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar, get_args, get_origin

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import (
    DecodingError,
    FieldTypeMismatchError,
    MalformedResponseError,
    MissingFieldError,
)
from .kinds import Kind

if TYPE_CHECKING:
    from .registry import ModelRegistry

T = TypeVar("T")

Converter = Callable[[Any, "ModelRegistry"], Any]


class FieldState(Enum):
    """Outcome of looking a key up in a JSON object."""

    PRESENT = "present"
    NULL = "null"
    ABSENT = "absent"


def _is_model_type(candidate: Any) -> bool:
    return isinstance(candidate, type) and issubclass(candidate, JsonModel)


def _type_name(type_: Any) -> str:
    return getattr(type_, "__name__", None) or str(type_)


class JsonProperty(Generic[T]):
    """Read-only descriptor that extracts one field from a model's JSON data.

    Args:
        key: The JSON key holding the value.
        type_: The declared Python type. ``JsonModel`` subclasses and
            ``list[JsonModel]`` are decoded through the model's registry;
            anything else is validated with a pydantic ``TypeAdapter``.
        nullable: Whether an absent or ``null`` value is acceptable. Nullable
            fields read as ``None``, or ``[]`` for list types.
        strict: Validate in pydantic strict mode (no ``"1"`` -> ``1``).
        converter: Custom ``(raw, registry) -> value`` coercion that replaces
            the default one.
    """

    def __init__(
        self,
        key: str,
        type_: Any,
        *,
        nullable: bool = False,
        strict: bool = True,
        converter: Converter | None = None,
    ):
        self.key = key
        self.type_ = type_
        self.nullable = nullable
        self.name = key
        self._is_list = get_origin(type_) is list
        self._coerce = self._build_coercer(type_, strict, converter)

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    @staticmethod
    def _build_coercer(type_: Any, strict: bool, converter: Converter | None) -> Converter:
        if converter is not None:
            return converter

        if _is_model_type(type_):

            def coerce_model(raw: Any, registry: "ModelRegistry") -> Any:
                if not isinstance(raw, Mapping):
                    raise TypeError("expected a JSON object")
                return registry.decode(raw, type_)

            return coerce_model

        if get_origin(type_) is list:
            (item_type,) = get_args(type_)
            if _is_model_type(item_type):

                def coerce_models(raw: Any, registry: "ModelRegistry") -> Any:
                    if not isinstance(raw, list) or not all(
                        isinstance(item, Mapping) for item in raw
                    ):
                        raise TypeError("expected an array of JSON objects")
                    return [registry.decode(item, item_type) for item in raw]

                return coerce_models

        adapter: TypeAdapter[Any] = TypeAdapter(type_)

        def coerce_value(raw: Any, registry: "ModelRegistry") -> Any:
            return adapter.validate_python(raw, strict=strict)

        return coerce_value

    def lookup(self, data: Mapping[str, Any]) -> tuple[FieldState, Any]:
        """Finds the raw value for this field and tags how it was found."""
        if self.key not in data:
            return FieldState.ABSENT, None
        value = data[self.key]
        if value is None:
            return FieldState.NULL, None
        return FieldState.PRESENT, value

    def read(self, model: "JsonModel") -> T:
        """Extracts and coerces this field from ``model``'s data.

        Raises:
            MissingFieldError: The field is absent or null and not nullable.
            FieldTypeMismatchError: The value cannot be coerced to ``type_``.
        """
        state, raw = self.lookup(model.data)
        if state is not FieldState.PRESENT:
            if self.nullable:
                return [] if self._is_list else None  # type: ignore[return-value]
            raise MissingFieldError(type(model).__name__, self.name)

        try:
            return self._coerce(raw, model.registry)
        except DecodingError:
            raise
        except (PydanticValidationError, TypeError, ValueError) as e:
            raise FieldTypeMismatchError(
                type(model).__name__, self.name, _type_name(self.type_), raw
            ) from e

    def __get__(self, instance: "JsonModel | None", owner: type | None = None) -> Any:
        if instance is None:
            return self
        return self.read(instance)

    def __set__(self, instance: "JsonModel", value: Any) -> None:
        raise AttributeError(f"{type(instance).__name__}.{self.name} is read-only")


class JsonModel:
    """Base class for every decoded Reddit object.

    Attributes:
        kind: The discriminator this model is registered under, or ``None``
            for bare objects that Reddit sends without a ``kind`` envelope.
        json_properties: Field name to :class:`JsonProperty`, collected from
            the class and its bases.
    """

    kind: ClassVar[Kind | None] = None
    json_properties: ClassVar[Mapping[str, JsonProperty[Any]]] = MappingProxyType({})

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        table: dict[str, JsonProperty[Any]] = {}
        for klass in reversed(cls.__mro__):
            for attr, value in vars(klass).items():
                if isinstance(value, JsonProperty):
                    table[attr] = value
        cls.json_properties = MappingProxyType(table)

    def __init__(self, data: Mapping[str, Any], registry: "ModelRegistry"):
        if not isinstance(data, Mapping):
            raise MalformedResponseError(
                f"{type(self).__name__} expects a JSON object, got {type(data).__name__}"
            )
        self._data: Mapping[str, Any] = (
            data if isinstance(data, MappingProxyType) else MappingProxyType(data)
        )
        self._registry = registry

    @property
    def data(self) -> Mapping[str, Any]:
        """Read-only view of the backing JSON object."""
        return self._data

    @property
    def registry(self) -> "ModelRegistry":
        return self._registry

    def validate(self) -> None:
        """Reads every declared field once, raising the first decoding error."""
        for prop in self.json_properties.values():
            prop.read(self)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return dict(self._data) == dict(other._data)  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self), self._data.get("name"), self._data.get("id")))

    def __repr__(self) -> str:
        label = self._data.get("name") or self._data.get("id") or "?"
        return f"{type(self).__name__}({label!r})"

"""
Type model shared by the resolver, the response coder and the mock synthesizer.

A TypeHint is an ordered union of Type alternatives. Built-in kinds are a
closed enumeration (ScalarKind); any other name refers to an object type
that must be registered with a TypeRegistry.
"""

import json
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Tuple

from .exceptions import InvalidTypeError

if TYPE_CHECKING:
    from .registry import TypeRegistry


class ScalarKind(Enum):
    """Enumeration of built-in type kinds."""

    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    ARRAY = "array"
    OBJECT = "object"
    NULL = "null"
    MIXED = "mixed"

    @classmethod
    def lookup(cls, name: Optional[str]) -> Optional["ScalarKind"]:
        """Return the kind for a (possibly aliased) name, or None for object types."""
        if name is None:
            return cls.NULL
        return _KINDS_BY_NAME.get(name.lower())


_ALIASES = {
    "str": ScalarKind.STRING,
    "integer": ScalarKind.INT,
    "number": ScalarKind.FLOAT,
    "double": ScalarKind.FLOAT,
    "boolean": ScalarKind.BOOL,
    "dict": ScalarKind.OBJECT,
    "map": ScalarKind.OBJECT,
    "list": ScalarKind.ARRAY,
    "none": ScalarKind.NULL,
    "any": ScalarKind.MIXED,
}

_KINDS_BY_NAME = {kind.value: kind for kind in ScalarKind}
_KINDS_BY_NAME.update(_ALIASES)

ARRAY_TYPE = ScalarKind.ARRAY.value
NULL_TYPE = ScalarKind.NULL.value

_TRUE_STRINGS = ("true", "1", "yes", "on")
_FALSE_STRINGS = ("false", "0", "no", "off")


class _NoDefault:
    def __repr__(self):
        return "NO_DEFAULT"

    def __bool__(self):
        return False


NO_DEFAULT: Any = _NoDefault()


def normalize_type_name(name: Optional[str]) -> Optional[str]:
    """Map scalar aliases onto their canonical name; object type names are kept as-is."""
    if name is None:
        return None
    kind = ScalarKind.lookup(name)
    if kind is not None:
        return kind.value
    return name


@dataclass(frozen=True)
class Type:
    """A single type alternative.

    ``generic_type`` names the element type and is set if and only if
    ``type`` is the array marker.
    """

    type: Optional[str]
    generic_type: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "type", normalize_type_name(self.type))
        object.__setattr__(self, "generic_type", normalize_type_name(self.generic_type))

        if self.type == ARRAY_TYPE and not self.generic_type:
            raise InvalidTypeError("Array type requires a generic element type")
        if self.type != ARRAY_TYPE and self.generic_type is not None:
            raise InvalidTypeError(f"Type {self.type!r} must not declare a generic type")
        if self.generic_type == ARRAY_TYPE:
            raise InvalidTypeError("Nested array element types are not supported")

    @property
    def is_null(self) -> bool:
        return self.type is None or self.type == NULL_TYPE

    @property
    def is_array(self) -> bool:
        return self.type == ARRAY_TYPE

    @property
    def kind(self) -> Optional[ScalarKind]:
        """The scalar kind of this alternative, or None for named object types."""
        return ScalarKind.lookup(self.type)

    def __str__(self):
        if self.is_array:
            return f"{self.generic_type}[]"
        return self.type or NULL_TYPE

    @classmethod
    def parse(cls, declaration: Optional[str]) -> "Type":
        """Parse the ``name`` / ``name[]`` shorthand."""
        if declaration is None:
            return cls(None)
        declaration = declaration.strip()
        if declaration.endswith("[]"):
            element = declaration[:-2].strip()
            if element.endswith("[]"):
                raise InvalidTypeError(f"Nested array types are not supported: {declaration!r}")
            return cls(ARRAY_TYPE, element)
        return cls(declaration)


@dataclass(frozen=True)
class TypeHint:
    """Union of possible types for a value slot, plus an optional default."""

    types: Tuple[Type, ...] = ()
    default_value: Any = field(default=NO_DEFAULT)

    def __post_init__(self):
        object.__setattr__(self, "types", tuple(self.types))
        if not self.types and not self.has_default:
            raise InvalidTypeError("A type hint needs at least one type or a default value")

    @property
    def has_default(self) -> bool:
        return self.default_value is not NO_DEFAULT

    @property
    def is_array_valued(self) -> bool:
        return any(t.is_array for t in self.types)

    @property
    def is_nullable(self) -> bool:
        return any(t.is_null for t in self.types)

    def first_concrete(self) -> Optional[Type]:
        """First-match policy: the first alternative with a non-null type."""
        for type_ in self.types:
            if not type_.is_null:
                return type_
        return None

    def pick_random(self, rng: random.Random) -> Optional[Type]:
        """Random-pick policy: a uniformly chosen alternative (possibly the null one)."""
        if not self.types:
            return None
        return rng.choice(self.types)

    def type_names(self) -> Tuple[str, ...]:
        """Every concrete type name referenced by this hint, including element types."""
        names = []
        for type_ in self.types:
            if type_.is_null:
                continue
            names.append(type_.generic_type if type_.is_array else type_.type)
        return tuple(names)

    @classmethod
    def of(cls, *declarations: Optional[str], default: Any = NO_DEFAULT) -> "TypeHint":
        """Build a hint from shorthand declarations, e.g. ``TypeHint.of("int", "null")``."""
        return cls(tuple(Type.parse(d) for d in declarations), default)


def runtime_type_tag(value: Any, registry: Optional["TypeRegistry"] = None) -> str:
    """Get the type tag of a runtime value, comparable with declared type names."""
    if value is None:
        return NULL_TYPE
    if registry is not None:
        registered = registry.name_for(type(value))
        if registered is not None:
            return registered
    # bool is a subclass of int
    if isinstance(value, bool):
        return ScalarKind.BOOL.value
    if isinstance(value, int):
        return ScalarKind.INT.value
    if isinstance(value, float):
        return ScalarKind.FLOAT.value
    if isinstance(value, str):
        return ScalarKind.STRING.value
    if isinstance(value, (list, tuple)):
        return ARRAY_TYPE
    if isinstance(value, dict):
        return ScalarKind.OBJECT.value
    return type(value).__name__


def coerce_value(raw: Any, type_hint: TypeHint, registry: Optional["TypeRegistry"] = None) -> Any:
    """Convert a wire value to the first declared alternative it fits.

    Values that fit no alternative are returned unchanged.
    """
    if raw is None:
        return None

    for type_ in type_hint.types:
        if type_.is_null:
            continue
        if type_.is_array:
            if isinstance(raw, (list, tuple)):
                return [_coerce_element(item, type_.generic_type, registry) for item in raw]
            continue
        try:
            return coerce_to(raw, type_.type, registry)
        except (TypeError, ValueError):
            continue

    return raw


def _coerce_element(item: Any, type_name: Optional[str], registry: Optional["TypeRegistry"]) -> Any:
    try:
        return coerce_to(item, type_name, registry)
    except (TypeError, ValueError):
        return item


def coerce_to(raw: Any, type_name: Optional[str], registry: Optional["TypeRegistry"] = None) -> Any:
    """Convert a single value to the named type.

    Raises:
        ValueError: if the value cannot represent the type
    """
    kind = ScalarKind.lookup(type_name)

    if kind is ScalarKind.MIXED:
        return raw
    if kind is ScalarKind.NULL:
        if raw is None or (isinstance(raw, str) and raw.lower() in ("", "null")):
            return None
        raise ValueError(f"{raw!r} is not null")
    if kind is ScalarKind.STRING:
        if isinstance(raw, str):
            return raw
        raise ValueError(f"{raw!r} is not a string")
    if kind is ScalarKind.BOOL:
        if isinstance(raw, bool):
            return raw
        if isinstance(raw, str):
            lowered = raw.strip().lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
        raise ValueError(f"{raw!r} is not a boolean")
    if kind is ScalarKind.INT:
        if isinstance(raw, bool):
            raise ValueError(f"{raw!r} is not an integer")
        if isinstance(raw, int):
            return raw
        if isinstance(raw, str):
            return int(raw.strip())
        raise ValueError(f"{raw!r} is not an integer")
    if kind is ScalarKind.FLOAT:
        if isinstance(raw, bool):
            raise ValueError(f"{raw!r} is not a number")
        if isinstance(raw, (int, float)):
            return float(raw)
        if isinstance(raw, str):
            return float(raw.strip())
        raise ValueError(f"{raw!r} is not a number")
    if kind is ScalarKind.OBJECT:
        value = _load_json(raw)
        if isinstance(value, dict):
            return value
        raise ValueError(f"{raw!r} is not an object")
    if kind is ScalarKind.ARRAY:
        if isinstance(raw, (list, tuple)):
            return list(raw)
        raise ValueError(f"{raw!r} is not an array")

    # Named object type
    if registry is None:
        raise ValueError(f"No registry to build {type_name}")
    cls = registry.get(type_name)
    if cls is None:
        raise ValueError(f"Unregistered type {type_name}")
    if isinstance(raw, cls):
        return raw
    value = _load_json(raw)
    if not isinstance(value, dict):
        raise ValueError(f"{raw!r} cannot build {type_name}")
    return registry.build(type_name, value)


def _load_json(raw: Any) -> Any:
    if isinstance(raw, (str, bytes)):
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValueError(str(e)) from e
    return raw

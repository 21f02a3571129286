"""
Registry of named object types.

Scalar kinds are built in; every other type name an endpoint declares must be
registered here against a pydantic model or a dataclass so that values can be
built from request data and faked for mock responses.
"""

import dataclasses
import logging
from typing import Any, Callable, Dict, Iterator, Optional, Tuple, Union, overload

from .exceptions import ConfigurationError, UnknownTypeError
from .types import ScalarKind

logger = logging.getLogger(__name__)


def is_pydantic_model(cls: Any) -> bool:
    """Check if the class is a Pydantic model."""
    if cls is None or not isinstance(cls, type):
        return False
    return hasattr(cls, "model_fields") and hasattr(cls, "model_validate")


def is_dataclass_type(cls: Any) -> bool:
    return isinstance(cls, type) and dataclasses.is_dataclass(cls)


class TypeRegistry:
    """Maps type names to constructible classes."""

    def __init__(self, types: Optional[Dict[str, type]] = None):
        self._types: Dict[str, type] = {}
        self._names: Dict[type, str] = {}
        for name, cls in (types or {}).items():
            self.register(cls, name)

    @overload
    def register(self, cls: type, name: Optional[str] = None) -> type: ...

    @overload
    def register(self, cls: None = None, name: Optional[str] = None) -> Callable[[type], type]: ...

    def register(self, cls=None, name=None):
        """Register a pydantic model or dataclass under a type name.

        Can be used directly or as a decorator::

            @registry.register
            class Item(BaseModel): ...

            @registry.register(name="ItemType")
            class Item(BaseModel): ...
        """
        if cls is None:
            def decorator(target: type) -> type:
                return self.register(target, name)

            return decorator

        if not (is_pydantic_model(cls) or is_dataclass_type(cls)):
            raise ConfigurationError(f"{cls!r} is neither a pydantic model nor a dataclass")

        type_name = name or cls.__name__
        if ScalarKind.lookup(type_name) is not None:
            raise ConfigurationError(f"Type name {type_name!r} is reserved for a built-in kind")
        existing = self._types.get(type_name)
        if existing is not None and existing is not cls:
            raise ConfigurationError(f"Type name {type_name!r} is already registered to {existing!r}")

        self._types[type_name] = cls
        self._names.setdefault(cls, type_name)
        logger.debug(f"Registered type {type_name} -> {cls.__module__}.{cls.__qualname__}")
        return cls

    def get(self, name: Optional[str]) -> Optional[type]:
        if name is None:
            return None
        return self._types.get(name)

    def name_for(self, cls: type) -> Optional[str]:
        """Get the registered name of a class, if any."""
        return self._names.get(cls)

    def is_known(self, name: Optional[str]) -> bool:
        return ScalarKind.lookup(name) is not None or name in self._types

    def build(self, name: str, data: Dict[str, Any]) -> Any:
        """Build an instance of a registered type from a mapping.

        Raises:
            ValueError: if the data does not fit the type
        """
        cls = self._types.get(name)
        if cls is None:
            raise UnknownTypeError(name)
        if is_pydantic_model(cls):
            return cls.model_validate(data)  # type: ignore[attr-defined]
        try:
            return cls(**data)
        except TypeError as e:
            raise ValueError(f"Cannot build {name}: {e}") from e

    def validate_endpoint(self, endpoint) -> None:
        """Check that every type an endpoint declares can be resolved.

        Raises:
            UnknownTypeError: for the first unresolvable type name
        """
        for input_ in endpoint.inputs:
            for type_name in input_.type_hint.type_names():
                if not self.is_known(type_name):
                    raise UnknownTypeError(type_name, f"input {input_.variable_name} of {endpoint.method}")
        for output in endpoint.outputs:
            for type_name in output.type_hint.type_names():
                if not self.is_known(type_name):
                    raise UnknownTypeError(type_name, f"output {output.status_code} of {endpoint.method}")

    def items(self) -> Iterator[Tuple[str, type]]:
        return iter(self._types.items())

    def __contains__(self, name: Union[str, type]) -> bool:
        if isinstance(name, type):
            return name in self._names
        return name in self._types

    def __len__(self) -> int:
        return len(self._types)

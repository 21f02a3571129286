"""
Value faker.

Produces plausible instances of scalar kinds and registered object types.
Object types are faked field by field from their annotations.
"""

import collections.abc
import dataclasses
import logging
import random
import string
import types
import typing
import uuid
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Literal, Optional, Union, get_args, get_origin

from pydantic import ValidationError

from .exceptions import UnknownTypeError
from .registry import TypeRegistry, is_dataclass_type, is_pydantic_model
from .types import ScalarKind

logger = logging.getLogger(__name__)

_UNION_TYPES = tuple(t for t in (Union, getattr(types, "UnionType", None)) if t is not None)
_EPOCH = datetime(2000, 1, 1, tzinfo=timezone.utc)


class ValueFaker:
    """Generates synthetic values for type names."""

    def __init__(
        self,
        registry: Optional[TypeRegistry] = None,
        rng: Optional[random.Random] = None,
        max_items: int = 10,
        max_depth: int = 3,
    ):
        self.registry = registry or TypeRegistry()
        self.rng = rng or random.Random()
        self.max_items = max_items
        self.max_depth = max_depth

    def fake(self, type_name: Optional[str]) -> Any:
        """Fake an instance of a scalar kind or registered type.

        Raises:
            UnknownTypeError: if the name is neither a kind nor registered
        """
        kind = ScalarKind.lookup(type_name)
        if kind is not None:
            return self.fake_scalar(kind)

        cls = self.registry.get(type_name)
        if cls is None:
            raise UnknownTypeError(str(type_name))
        return self.fake_class(cls)

    def fake_scalar(self, kind: ScalarKind) -> Any:
        if kind is ScalarKind.STRING or kind is ScalarKind.MIXED:
            return self.word()
        if kind is ScalarKind.INT:
            return self.rng.randint(0, 1000)
        if kind is ScalarKind.FLOAT:
            return round(self.rng.uniform(0, 1000), 2)
        if kind is ScalarKind.BOOL:
            return self.rng.random() < 0.5
        if kind is ScalarKind.OBJECT:
            return {self.word(): self.word() for _ in range(self.rng.randint(0, 3))}
        if kind is ScalarKind.ARRAY:
            return []
        return None

    def word(self) -> str:
        length = self.rng.randint(4, 10)
        return "".join(self.rng.choice(string.ascii_lowercase) for _ in range(length))

    def fake_class(self, cls: type, depth: int = 0) -> Any:
        """Fake a pydantic model or dataclass instance."""
        if depth > self.max_depth:
            return None
        if is_pydantic_model(cls):
            return self._fake_pydantic(cls, depth)
        if is_dataclass_type(cls):
            return self._fake_dataclass(cls, depth)
        raise UnknownTypeError(cls.__name__)

    def _fake_pydantic(self, cls: Any, depth: int) -> Any:
        data: Dict[str, Any] = {}
        for name, field_info in cls.model_fields.items():
            if depth >= self.max_depth and not field_info.is_required():
                continue
            data[name] = self.fake_annotation(field_info.annotation, depth)

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            logger.debug(f"Faked data for {cls.__name__} failed validation, constructing directly: {e}")
            return cls.model_construct(**data)

    def _fake_dataclass(self, cls: type, depth: int) -> Any:
        hints = typing.get_type_hints(cls)
        data: Dict[str, Any] = {}
        for field_ in dataclasses.fields(cls):
            if not field_.init:
                continue
            has_default = (
                field_.default is not dataclasses.MISSING
                or field_.default_factory is not dataclasses.MISSING
            )
            if depth >= self.max_depth and has_default:
                continue
            data[field_.name] = self.fake_annotation(hints.get(field_.name, Any), depth)
        return cls(**data)

    def fake_annotation(self, annotation: Any, depth: int = 0) -> Any:
        """Fake a value for a Python type annotation."""
        if annotation is None or annotation is type(None):
            return None
        if annotation is Any:
            return self.word()

        origin = get_origin(annotation)
        args = get_args(annotation)

        if origin is typing.Annotated:
            return self.fake_annotation(args[0], depth)
        if origin in _UNION_TYPES:
            arms = [arg for arg in args if arg is not type(None)]
            if not arms or (depth >= self.max_depth and len(arms) < len(args)):
                return None
            return self.fake_annotation(arms[0], depth)
        if origin is Literal:
            return self.rng.choice(args)
        if origin in (list, set, frozenset, tuple) or origin in (
            collections.abc.Sequence, collections.abc.Set
        ):
            return self._fake_collection(origin, args, depth)
        if origin is dict or origin is collections.abc.Mapping:
            key_type = args[0] if args else str
            value_type = args[1] if len(args) > 1 else Any
            count = 0 if depth >= self.max_depth else self.rng.randint(0, 3)
            return {
                self.fake_annotation(key_type, depth + 1): self.fake_annotation(value_type, depth + 1)
                for _ in range(count)
            }

        if not isinstance(annotation, type):
            return None
        if issubclass(annotation, Enum):
            return self.rng.choice(list(annotation))
        # bool is a subclass of int
        if issubclass(annotation, bool):
            return self.fake_scalar(ScalarKind.BOOL)
        if issubclass(annotation, int):
            return self.fake_scalar(ScalarKind.INT)
        if issubclass(annotation, float):
            return self.fake_scalar(ScalarKind.FLOAT)
        if issubclass(annotation, str):
            return self.word()
        if issubclass(annotation, Decimal):
            return Decimal(str(self.fake_scalar(ScalarKind.FLOAT)))
        if issubclass(annotation, datetime):
            return _EPOCH + timedelta(seconds=self.rng.randint(0, 10 ** 9))
        if issubclass(annotation, date):
            return (_EPOCH + timedelta(days=self.rng.randint(0, 10 ** 4))).date()
        if issubclass(annotation, uuid.UUID):
            return uuid.UUID(int=self.rng.getrandbits(128), version=4)
        if is_pydantic_model(annotation) or is_dataclass_type(annotation):
            return self.fake_class(annotation, depth + 1)
        if issubclass(annotation, (list, tuple, set)):
            return annotation()
        if issubclass(annotation, dict):
            return {}
        return None

    def _fake_collection(self, origin: Any, args: tuple, depth: int) -> Any:
        if origin is tuple and args and args[-1] is not Ellipsis:
            return tuple(self.fake_annotation(arg, depth + 1) for arg in args)

        item_type = args[0] if args else Any
        count = 0 if depth >= self.max_depth else self.rng.randint(0, self.max_items)
        items = [self.fake_annotation(item_type, depth + 1) for _ in range(count)]
        if origin is tuple:
            return tuple(items)
        if origin in (set, frozenset, collections.abc.Set):
            return set(items)
        return items

"""
Object mapping between boundary models and entities.

Models are pydantic models; entities are dataclasses. By default fields are
copied by name. Pairs that need more than that get an explicit converter
(``map``) or merger (``map_onto``) registered on the Mapper.
"""

import dataclasses
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from pydantic import BaseModel

S = TypeVar("S")
D = TypeVar("D")

Converter = Callable[[Any], Any]
Merger = Callable[[Any, Any], Any]

# Identity and tracking fields are owned by the repository; never overlaid
PROTECTED_FIELDS = frozenset({"id", "is_deleted", "date_created", "date_updated"})


def field_names(target: type | Any) -> set[str]:
    """Names of the settable fields of a dataclass or pydantic model."""
    cls = target if isinstance(target, type) else type(target)
    if issubclass(cls, BaseModel):
        return set(cls.model_fields)
    if dataclasses.is_dataclass(cls):
        return {f.name for f in dataclasses.fields(cls) if f.init}
    raise TypeError(f"Cannot map to or from {cls.__name__}: not a dataclass or pydantic model")


def field_values(source: Any, explicit_only: bool = False) -> dict[str, Any]:
    """
    Shallow field values of a dataclass or pydantic model.

    With explicit_only, a pydantic source only yields fields the caller set
    and a dataclass source skips None values.
    """
    if isinstance(source, BaseModel):
        names = source.model_fields_set if explicit_only else type(source).model_fields
        return {name: getattr(source, name) for name in names}
    if dataclasses.is_dataclass(source) and not isinstance(source, type):
        values = {f.name: getattr(source, f.name) for f in dataclasses.fields(source)}
        if explicit_only:
            values = {k: v for k, v in values.items() if v is not None}
        return values
    raise TypeError(f"Cannot map from {type(source).__name__}: not a dataclass or pydantic model")


class Mapper:
    """
    Maps boundary models to entities and back.

    Example:
        mapper = Mapper()
        mapper.register(UserAddModel, User, lambda m: User(email=m.email.lower()))

        user = mapper.map(add_model, User)
        view = mapper.map(user, UserViewModel)
        mapper.map_onto(update_model, user)
    """

    def __init__(self) -> None:
        self._converters: dict[tuple[type, type], Converter] = {}
        self._mergers: dict[tuple[type, type], Merger] = {}

    def register(self, source_type: type, target_type: type, converter: Converter) -> None:
        """Use converter for every map(source_type -> target_type)."""
        self._converters[(source_type, target_type)] = converter

    def register_merge(self, source_type: type, target_type: type, merger: Merger) -> None:
        """Use merger(source, existing) for every map_onto(source_type -> target_type)."""
        self._mergers[(source_type, target_type)] = merger

    def map(self, source: S, target_type: type[D]) -> D:
        """Build a new target_type instance from source."""
        converter = self._converters.get((type(source), target_type))
        if converter is not None:
            return converter(source)

        names = field_names(target_type)
        values = {k: v for k, v in field_values(source).items() if k in names}
        return target_type(**values)

    def map_many(self, sources: Iterable[S], target_type: type[D]) -> list[D]:
        return [self.map(source, target_type) for source in sources]

    def map_onto(self, source: Any, existing: D) -> D:
        """
        Overlay the fields source explicitly carries onto existing.

        Fields the source did not set, fields the target does not have, the id
        and the tracking fields are left alone. Returns the (mutated) existing
        instance.
        """
        merger = self._mergers.get((type(source), type(existing)))
        if merger is not None:
            return merger(source, existing)

        names = field_names(existing) - PROTECTED_FIELDS
        for name, value in field_values(source, explicit_only=True).items():
            if name in names:
                setattr(existing, name, value)
        return existing

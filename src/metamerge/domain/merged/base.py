"""The merged view contract shared by present and missing views."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from metamerge.domain.errors import AttributeNotFoundError, MissingMetadataError
from metamerge.domain.model import DictOption, LiteralPayload, ValueKind, same_value

from .adapter import adapt
from .synthesized import render

if TYPE_CHECKING:
    from collections.abc import Callable

    from metamerge.domain.model import AttributeSlot, DeclarationType, RawValue


type AttributePredicate = Callable[[str], bool]


class MergedView(ABC):
    """Resolved, adaptation-ready representation of one declared metadata use.

    Values are resolved lazily on every access; only the synthesized record is
    memoized.
    """

    __slots__ = ("_synthesized",)

    def __init__(self) -> None:
        self._synthesized: object | None = None

    # Identity and position

    @property
    @abstractmethod
    def type_id(self) -> str: ...

    @property
    @abstractmethod
    def is_present(self) -> bool: ...

    @property
    @abstractmethod
    def depth(self) -> int: ...

    @property
    @abstractmethod
    def aggregate_index(self) -> int: ...

    @property
    @abstractmethod
    def source(self) -> object | None: ...

    @property
    @abstractmethod
    def parent(self) -> MergedView | None: ...

    @property
    def is_directly_present(self) -> bool:
        return self.is_present and self.depth == 0

    @property
    def is_meta_present(self) -> bool:
        return self.is_present and self.depth > 0

    # Derived views

    @abstractmethod
    def filter_attributes(self, predicate: AttributePredicate) -> MergedView: ...

    @abstractmethod
    def with_non_merged_attributes(self) -> MergedView: ...

    def filter_default_values(self) -> MergedView:
        return self.filter_attributes(self.has_non_default_value)

    # Hooks for concrete views

    @abstractmethod
    def _declaration(self) -> DeclarationType: ...

    @abstractmethod
    def _attribute_value(self, name: str) -> RawValue | None: ...

    @abstractmethod
    def _is_filtered(self, name: str) -> bool: ...

    @abstractmethod
    def nested_for(self, slot: AttributeSlot, payload: LiteralPayload) -> MergedView:
        """View of a nested metadata bag held by ``slot``."""

    @abstractmethod
    def _create_synthesized(self) -> object: ...

    # Values

    def has_default_value(self, name: str) -> bool:
        slot = self._slot(name, required=True)
        return same_value(self._raw(slot, required=True), slot.default)

    def has_non_default_value(self, name: str) -> bool:
        return not self.has_default_value(name)

    def get[T](self, name: str, as_: type[T] = object) -> T:
        """Return the adapted value of ``name``; raise when there is none."""
        slot = self._slot(name, required=True)
        return self._adapt(self._raw(slot, required=True), slot, as_)

    def find[T](self, name: str, as_: type[T] = object) -> T | None:
        """Like ``get`` but return None for unknown, filtered or value-less attributes."""
        slot = self._slot(name, required=False)
        if slot is None:
            return None
        value = self._raw(slot, required=False)
        if value is None:
            return None
        return self._adapt(value, slot, as_)

    def default[T](self, name: str, as_: type[T] = object) -> T | None:
        slot = self._declaration().slot(name)
        if slot is None or slot.default is None:
            return None
        return self._adapt(slot.default, slot, as_)

    def nested(self, name: str, type_id: str | None = None) -> MergedView:
        slot = self._nested_slot(name, type_id, array=False)
        payload = self._raw(slot, required=True)
        if not isinstance(payload, LiteralPayload):
            raise AttributeNotFoundError(
                f"Attribute '{name}' in [{self.type_id}] holds no nested declaration"
            )
        return self.nested_for(slot, payload)

    def nested_array(self, name: str, type_id: str | None = None) -> tuple[MergedView, ...]:
        slot = self._nested_slot(name, type_id, array=True)
        values = self._raw(slot, required=True)
        if not isinstance(values, tuple):
            values = (values,)
        return tuple(
            self.nested_for(slot, payload)
            for payload in values
            if isinstance(payload, LiteralPayload)
        )

    def as_dict(self, *options: DictOption) -> dict[str, object]:
        """Adapted attribute values keyed by name, skipping filtered and absent ones."""
        if not self.is_present:
            raise MissingMetadataError("Unable to build a dict for missing metadata")
        result: dict[str, object] = {}
        for slot in self._declaration():
            if self._is_filtered(slot.name):
                continue
            value = self._raw(slot, required=False)
            if value is None:
                continue
            result[slot.name] = self._dict_value(slot, value, options)
        return result

    def _dict_value(
        self,
        slot: AttributeSlot,
        value: RawValue,
        options: tuple[DictOption, ...],
    ) -> object:
        kind = slot.shape.kind
        if kind is ValueKind.TYPE and DictOption.TYPE_TO_TEXT in options:
            return self._adapt(value, slot, str)
        if kind is ValueKind.NESTED and DictOption.NESTED_TO_DICT in options:
            views = self._adapt(value, slot, MergedView)
            if isinstance(views, tuple):
                nested_views: tuple[MergedView, ...] = views
                return tuple(view.as_dict(*options) for view in nested_views)
            return views.as_dict(*options)
        return self._adapt(value, slot, object)

    # Synthesis

    def synthesize(self) -> object:
        """Return the synthesized record, creating it on first use."""
        if not self.is_present:
            raise MissingMetadataError("Unable to synthesize missing metadata")
        synthesized = self._synthesized
        if synthesized is None:
            synthesized = self._create_synthesized()
            self._synthesized = synthesized
        return synthesized

    def synthesize_if(self, condition: Callable[[MergedView], bool]) -> object | None:
        if condition(self):
            return self.synthesize()
        return None

    # Internals

    def _slot(self, name: str, *, required: bool) -> AttributeSlot | None:
        if not name:
            raise ValueError("Attribute name must not be empty")
        slot = self._declaration().slot(name)
        if slot is None or self._is_filtered(name):
            if required:
                raise AttributeNotFoundError(
                    f"No attribute named '{name}' present in merged view [{self.type_id}]"
                )
            return None
        return slot

    def _raw(self, slot: AttributeSlot, *, required: bool) -> RawValue | None:
        value = self._attribute_value(slot.name)
        if value is None:
            value = slot.default
        if value is None and required:
            raise AttributeNotFoundError(
                f"No value found for attribute named '{slot.name}' in merged view "
                f"[{self.type_id}]"
            )
        return value

    def _nested_slot(self, name: str, type_id: str | None, *, array: bool) -> AttributeSlot:
        slot = self._slot(name, required=True)
        shape = slot.shape
        if shape.kind is not ValueKind.NESTED:
            raise AttributeNotFoundError(f"Attribute '{name}' is not a nested declaration")
        if shape.array != array:
            state = "is not" if array else "is"
            raise AttributeNotFoundError(f"Attribute '{name}' {state} an array type")
        if type_id is not None and type_id != shape.type_id:
            raise AttributeNotFoundError(
                f"Attribute '{name}' is a [{shape.type_id}] and cannot be read as [{type_id}]"
            )
        return slot

    def _adapt(self, value: RawValue, slot: AttributeSlot, requested: type) -> Any:
        return adapt(value, slot, requested, nested=_NestedViews(self))

    def __str__(self) -> str:
        if not self.is_present:
            return "(missing)"
        items: list[tuple[str, object]] = []
        for slot in self._declaration():
            if self._is_filtered(slot.name):
                continue
            value = self.find(slot.name)
            if value is not None:
                items.append((slot.name, value))
        return render(self.type_id, items)


class _NestedViews:
    __slots__ = ("_owner",)

    def __init__(self, owner: MergedView) -> None:
        self._owner = owner

    def view(self, slot: AttributeSlot, payload: LiteralPayload) -> MergedView:
        return self._owner.nested_for(slot, payload)

    def synthesize(self, slot: AttributeSlot, payload: LiteralPayload) -> object:
        return self._owner.nested_for(slot, payload).synthesize()

    def is_view_type(self, requested: type) -> bool:
        return isinstance(requested, type) and issubclass(requested, MergedView)

"""The view returned when a lookup finds nothing."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

from metamerge.domain.errors import MissingMetadataError

from .base import MergedView

if TYPE_CHECKING:
    from collections.abc import Callable

    from metamerge.domain.model import AttributeSlot, DeclarationType, DictOption, LiteralPayload

    from .base import AttributePredicate


def _missing() -> NoReturn:
    raise MissingMetadataError("Unable to read values from missing metadata")


class MissingView(MergedView):
    """Absent metadata: presence queries answer False, value access raises."""

    __slots__ = ()

    @property
    def type_id(self) -> str:
        raise MissingMetadataError("Unable to get the type of missing metadata")

    @property
    def is_present(self) -> bool:
        return False

    @property
    def depth(self) -> int:
        return -1

    @property
    def aggregate_index(self) -> int:
        return -1

    @property
    def source(self) -> object | None:
        return None

    @property
    def parent(self) -> MergedView | None:
        return None

    def filter_attributes(self, predicate: AttributePredicate) -> MissingView:
        return self

    def with_non_merged_attributes(self) -> MissingView:
        return self

    def has_default_value(self, name: str) -> bool:
        _missing()

    def get[T](self, name: str, as_: type[T] = object) -> T:
        _missing()

    def find[T](self, name: str, as_: type[T] = object) -> T | None:
        return None

    def default[T](self, name: str, as_: type[T] = object) -> T | None:
        return None

    def nested(self, name: str, type_id: str | None = None) -> MergedView:
        _missing()

    def nested_array(self, name: str, type_id: str | None = None) -> tuple[MergedView, ...]:
        _missing()

    def as_dict(self, *options: DictOption) -> dict[str, object]:
        _missing()

    def synthesize_if(self, condition: Callable[[MergedView], bool]) -> object | None:
        return None

    def _declaration(self) -> DeclarationType:
        _missing()

    def _attribute_value(self, name: str) -> None:
        _missing()

    def _is_filtered(self, name: str) -> bool:
        return False

    def nested_for(self, slot: AttributeSlot, payload: LiteralPayload) -> MergedView:
        _missing()

    def _create_synthesized(self) -> object:
        _missing()

    def __repr__(self) -> str:
        return "MissingView()"


MISSING = MissingView()


__all__ = ["MISSING", "MissingView"]

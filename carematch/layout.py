"""Row packing for dashboard widgets."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, List, Optional, Protocol, Sequence, Set, TypeVar

from .schemas import WidgetSize


class Sized(Protocol):
    size: WidgetSize


T = TypeVar("T", bound=Sized)


@dataclass(frozen=True)
class LayoutRow(Generic[T]):
    first: T
    second: Optional[T] = None

    @property
    def is_full_width(self) -> bool:
        return self.first.size == WidgetSize.LARGE

    @property
    def has_empty_slot(self) -> bool:
        return not self.is_full_width and self.second is None

    @property
    def widgets(self) -> List[T]:
        return [self.first] if self.second is None else [self.first, self.second]


def layout_rows(widgets: Sequence[T]) -> List[LayoutRow[T]]:
    """Pack widgets into rows, left to right.

    A large widget takes a row to itself. A small widget shares its row with
    the immediately following widget when that one is also small, otherwise it
    sits next to an empty slot.
    """
    rows: List[LayoutRow[T]] = []
    placed: Set[int] = set()
    for index, widget in enumerate(widgets):
        if index in placed:
            continue
        placed.add(index)
        if widget.size == WidgetSize.LARGE:
            rows.append(LayoutRow(widget))
            continue
        next_index = index + 1
        if (
            next_index < len(widgets)
            and next_index not in placed
            and widgets[next_index].size == WidgetSize.SMALL
        ):
            placed.add(next_index)
            rows.append(LayoutRow(widget, widgets[next_index]))
        else:
            rows.append(LayoutRow(widget))
    return rows

"""Page arithmetic and windowed page controls."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

ControlKind = Literal["previous", "page", "next"]


@dataclass(slots=True, frozen=True)
class PageControl:
    kind: ControlKind
    page: int
    label: str
    disabled: bool = False
    active: bool = False


@dataclass(slots=True, frozen=True)
class PaginationWindow:
    start_page: int
    end_page: int

    def pages(self) -> range:
        return range(self.start_page, self.end_page + 1)


@dataclass(slots=True, frozen=True)
class Pagination:
    total_items: int
    page_size: int
    current_page: int
    total_pages: int
    window: PaginationWindow
    controls: list[PageControl] = field(default_factory=list)


def total_pages(total_items: int, page_size: int) -> int:
    if page_size < 1:
        raise ValueError("page_size must be a positive integer.")
    if total_items <= 0:
        return 0
    return -(-total_items // page_size)


def page_window(current_page: int, window_size: int, pages: int) -> PaginationWindow:
    """Window anchored to blocks of ``window_size`` pages, not centred."""

    if window_size < 1:
        raise ValueError("window_size must be a positive integer.")
    start = ((current_page - 1) // window_size) * window_size + 1
    end = min(start + window_size - 1, pages)
    return PaginationWindow(start_page=start, end_page=end)


def paginate(
    total_items: int,
    page_size: int,
    current_page: int,
    window_size: int,
    *,
    previous_label: str = "Previous",
    next_label: str = "Next",
) -> Pagination:
    pages = total_pages(total_items, page_size)
    window = page_window(current_page, window_size, pages)
    controls: list[PageControl] = []
    if pages:
        controls.append(
            PageControl(
                kind="previous",
                page=current_page - 1,
                label=previous_label,
                disabled=current_page == 1,
            )
        )
        for page in window.pages():
            controls.append(
                PageControl(kind="page", page=page, label=str(page), active=page == current_page)
            )
        controls.append(
            PageControl(
                kind="next",
                page=current_page + 1,
                label=next_label,
                disabled=current_page == pages,
            )
        )
    return Pagination(
        total_items=total_items,
        page_size=page_size,
        current_page=current_page,
        total_pages=pages,
        window=window,
        controls=controls,
    )


__all__ = [
    "PageControl",
    "Pagination",
    "PaginationWindow",
    "page_window",
    "paginate",
    "total_pages",
]

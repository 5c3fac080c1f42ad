"""Filtering, sorting, pagination and facet counts over a snapshot.

Everything here is a pure function of a record sequence and a
:class:`TableState`; nothing mutates the data store.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Iterable, Mapping, Sequence
from urllib.parse import urlencode

from ..limits import PAGE_SIZE_OPTIONS
from .records import LiquidationRecord, parse_usd

DEFAULT_SORT_KEY = "timestamp"
DEFAULT_PAGE_SIZE = 10


def _numeric(value: Any) -> float | None:
    return parse_usd(value)


def _text(value: Any) -> str | None:
    return None if value in (None, "") else str(value).lower()


# column id -> (record attribute, sort value coercion)
SORTABLE_COLUMNS: dict[str, tuple[str, Callable[[Any], Any]]] = {
    "timestamp": ("timestamp", _numeric),
    "chainId": ("chain_id", lambda value: value),
    "protocol": ("protocol", _text),
    "borrower": ("borrower", _text),
    "liquidator": ("liquidator", _text),
    "txHash": ("tx_hash", _text),
    "collateralAsset": ("collateral_asset", _text),
    "debtAsset": ("debt_asset", _text),
    "repaidAssetsUSD": ("repaid_assets_usd", _numeric),
    "seizedAssetsUSD": ("seized_assets_usd", _numeric),
}


@dataclass(frozen=True)
class TableState:
    """User-selected predicates, ordering and page position."""

    search: str = ""
    protocols: frozenset[str] = field(default_factory=frozenset)
    chains: frozenset[int] = field(default_factory=frozenset)
    sort_key: str = DEFAULT_SORT_KEY
    descending: bool = True
    page_size: int = DEFAULT_PAGE_SIZE
    page_index: int = 0

    def __post_init__(self) -> None:
        if self.sort_key not in SORTABLE_COLUMNS:
            raise ValueError(f"Unknown sort column: {self.sort_key}")
        if self.page_size not in PAGE_SIZE_OPTIONS:
            raise ValueError(f"page_size must be one of {PAGE_SIZE_OPTIONS}")
        if self.page_index < 0:
            raise ValueError("page_index must be >= 0")
        object.__setattr__(self, "protocols", frozenset(self.protocols))
        object.__setattr__(self, "chains", frozenset(int(c) for c in self.chains))

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def toggle_sort(self, column: str) -> "TableState":
        """Flip direction on the active column, or make ``column`` active (descending)."""

        if column not in SORTABLE_COLUMNS:
            raise ValueError(f"Unknown sort column: {column}")
        if column == self.sort_key:
            return replace(self, descending=not self.descending, page_index=0)
        return replace(self, sort_key=column, descending=True, page_index=0)

    def with_page_size(self, page_size: int) -> "TableState":
        return replace(self, page_size=page_size, page_index=0)

    def with_search(self, search: str) -> "TableState":
        return replace(self, search=search, page_index=0)

    def with_protocols(self, protocols: Iterable[str]) -> "TableState":
        return replace(self, protocols=frozenset(protocols), page_index=0)

    def with_chains(self, chains: Iterable[int]) -> "TableState":
        return replace(self, chains=frozenset(chains), page_index=0)

    def with_page(self, page_index: int) -> "TableState":
        return replace(self, page_index=max(0, page_index))

    # ------------------------------------------------------------------
    # Navigable address
    # ------------------------------------------------------------------
    def to_query(self) -> str:
        """Encode the state as URL query parameters (defaults are omitted)."""

        params: list[tuple[str, str]] = [("pageSize", str(self.page_size))]
        if self.page_index:
            params.append(("page", str(self.page_index + 1)))
        if self.sort_key != DEFAULT_SORT_KEY:
            params.append(("sort", self.sort_key))
        if not self.descending:
            params.append(("desc", "0"))
        if self.search:
            params.append(("q", self.search))
        params.extend(("protocol", p) for p in sorted(self.protocols))
        params.extend(("chain", str(c)) for c in sorted(self.chains))
        return urlencode(params)

    @classmethod
    def from_query(
        cls,
        params: Mapping[str, Any] | Iterable[tuple[str, str]],
        default_page_size: int = DEFAULT_PAGE_SIZE,
    ) -> "TableState":
        """Decode query parameters; unusable values fall back to defaults."""

        pairs = params.items() if isinstance(params, Mapping) else params
        multi: dict[str, list[str]] = {}
        for key, value in pairs:
            values = value if isinstance(value, (list, tuple)) else [value]
            multi.setdefault(key, []).extend(str(v) for v in values)

        def first(name: str) -> str | None:
            values = multi.get(name)
            return values[0] if values else None

        page_size = _int_or(first("pageSize"), default_page_size)
        if page_size not in PAGE_SIZE_OPTIONS:
            page_size = default_page_size if default_page_size in PAGE_SIZE_OPTIONS else DEFAULT_PAGE_SIZE
        page_number = _int_or(first("page"), 1)
        sort_key = first("sort") or DEFAULT_SORT_KEY
        if sort_key not in SORTABLE_COLUMNS:
            sort_key = DEFAULT_SORT_KEY
        desc_raw = (first("desc") or "1").strip().lower()
        chains = {parsed for parsed in (_int_or(c, None) for c in multi.get("chain", [])) if parsed is not None}
        protocols = {p for p in multi.get("protocol", []) if p}
        return cls(
            search=first("q") or "",
            protocols=frozenset(protocols),
            chains=frozenset(chains),
            sort_key=sort_key,
            descending=desc_raw not in ("0", "false", "no", "asc"),
            page_size=page_size,
            page_index=max(0, page_number - 1),
        )


def _int_or(value: str | None, fallback: Any) -> Any:
    if value is None:
        return fallback
    try:
        return int(value.strip())
    except ValueError:
        return fallback


# ----------------------------------------------------------------------
# Predicates
# ----------------------------------------------------------------------
def searchable_text(record: LiquidationRecord) -> str:
    # Newline-separated so a needle cannot span two fields
    return "\n".join(
        (
            record.borrower,
            record.liquidator,
            record.protocol,
            record.tx_hash,
            record.collateral_asset or "",
            record.debt_asset or "",
        )
    ).lower()


def matches_search(record: LiquidationRecord, needle: str) -> bool:
    if not needle:
        return True
    return needle.lower() in searchable_text(record)


def matches_protocols(record: LiquidationRecord, protocols: frozenset[str]) -> bool:
    return not protocols or record.protocol in protocols


def matches_chains(record: LiquidationRecord, chains: frozenset[int]) -> bool:
    return not chains or record.chain_id in chains


def apply_filters(
    records: Iterable[LiquidationRecord],
    state: TableState,
    *,
    skip: str | None = None,
) -> list[LiquidationRecord]:
    """Apply every predicate (AND). ``skip`` names one set filter to ignore."""

    protocols = frozenset() if skip == "protocol" else state.protocols
    chains = frozenset() if skip == "chainId" else state.chains
    return [
        record
        for record in records
        if matches_search(record, state.search)
        and matches_protocols(record, protocols)
        and matches_chains(record, chains)
    ]


# ----------------------------------------------------------------------
# Sorting and paging
# ----------------------------------------------------------------------
def sort_records(
    records: Iterable[LiquidationRecord], sort_key: str, descending: bool
) -> list[LiquidationRecord]:
    """Stable sort; values that are missing or non-numeric go last either way."""

    attribute, coerce = SORTABLE_COLUMNS[sort_key]
    present: list[tuple[Any, LiquidationRecord]] = []
    missing: list[LiquidationRecord] = []
    for record in records:
        value = coerce(getattr(record, attribute))
        if value is None:
            missing.append(record)
        else:
            present.append((value, record))
    present.sort(key=lambda item: item[0], reverse=descending)
    return [record for _, record in present] + missing


@dataclass(frozen=True)
class Page:
    rows: list[LiquidationRecord]
    page_index: int
    page_count: int
    page_size: int
    total: int

    @property
    def has_previous(self) -> bool:
        return self.page_index > 0

    @property
    def has_next(self) -> bool:
        return self.page_index + 1 < self.page_count


def paginate(records: Sequence[LiquidationRecord], page_size: int, page_index: int) -> Page:
    """Slice one page; out-of-range indices are clamped to the last page."""

    total = len(records)
    page_count = max(1, math.ceil(total / page_size))
    index = min(max(0, page_index), page_count - 1)
    start = index * page_size
    return Page(
        rows=list(records[start : start + page_size]),
        page_index=index,
        page_count=page_count,
        page_size=page_size,
        total=total,
    )


# ----------------------------------------------------------------------
# Facets
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class Facets:
    protocols: dict[str, int]
    chains: dict[int, int]


def facet_counts(records: Sequence[LiquidationRecord], state: TableState) -> Facets:
    """Count matches per protocol and per chain.

    Each column's counts honour every other filter but not its own, so the
    menu shows what selecting another value would yield.
    """

    protocols: dict[str, int] = {}
    for record in apply_filters(records, state, skip="protocol"):
        protocols[record.protocol] = protocols.get(record.protocol, 0) + 1
    chains: dict[int, int] = {}
    for record in apply_filters(records, state, skip="chainId"):
        chains[record.chain_id] = chains.get(record.chain_id, 0) + 1
    return Facets(
        protocols=dict(sorted(protocols.items())),
        chains=dict(sorted(chains.items())),
    )


@dataclass(frozen=True)
class TableView:
    """Everything a renderer needs for one frame."""

    state: TableState
    page: Page
    loaded: int
    facets: Facets

    @property
    def rows(self) -> list[LiquidationRecord]:
        return self.page.rows

    @property
    def matching(self) -> int:
        return self.page.total


def build_view(records: Sequence[LiquidationRecord], state: TableState) -> TableView:
    filtered = apply_filters(records, state)
    ordered = sort_records(filtered, state.sort_key, state.descending)
    return TableView(
        state=state,
        page=paginate(ordered, state.page_size, state.page_index),
        loaded=len(records),
        facets=facet_counts(records, state),
    )


__all__ = [
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_SORT_KEY",
    "Facets",
    "Page",
    "SORTABLE_COLUMNS",
    "TableState",
    "TableView",
    "apply_filters",
    "build_view",
    "facet_counts",
    "matches_chains",
    "matches_protocols",
    "matches_search",
    "paginate",
    "searchable_text",
    "sort_records",
]

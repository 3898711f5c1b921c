"""
Cursor-paginated list queries and single-object detail queries.

A query object owns the state a list view needs: the active filters, the
cursor of the page being fetched, the accumulated items and the cursor of the
next page. Changing a filter starts over; ``load_more()`` appends.

Cancellation is advisory. Each load takes a generation token; when the response
resolves after a newer load started or the filters changed, it is dropped. The
underlying request is not aborted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Mapping, Optional, Sequence, Type, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from .http import ApiError, HttpClient, MalformedResponseError, build_url

log = structlog.get_logger()

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


@dataclass
class PageResult(Generic[T]):
    """One fetched page."""
    items: list[T]
    next_cursor: str | None = None


def parse_page(payload: Any, model: Type[BaseModel] | None = None) -> PageResult:
    """Validate a ``{items, nextCursor}`` payload.

    A non-string or empty ``nextCursor`` means there is no further page.
    Raises ``MalformedResponseError`` for anything that is not a page.
    """
    if not isinstance(payload, dict):
        raise MalformedResponseError(
            f"Expected a page object, got {type(payload).__name__}"
        )

    raw_items = payload.get("items")
    if not isinstance(raw_items, list):
        raise MalformedResponseError("Page has no 'items' list")

    if model is None:
        items: list[Any] = raw_items
    else:
        try:
            items = [model.model_validate(item) for item in raw_items]
        except ValidationError as exc:
            raise MalformedResponseError(f"Invalid page item: {exc}") from exc

    cursor = payload.get("nextCursor")
    next_cursor = cursor if isinstance(cursor, str) and cursor else None
    return PageResult(items=items, next_cursor=next_cursor)


def parse_object(payload: Any, model: Type[M]) -> M:
    """Validate a single-object payload against ``model``."""
    if not isinstance(payload, dict):
        raise MalformedResponseError(
            f"Expected an object, got {type(payload).__name__}"
        )
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise MalformedResponseError(str(exc)) from exc


def _clean(filters: Mapping[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in filters.items() if v is not None and v != ""}


class PaginatedQuery:
    """
    Stateful, cursor-paginated list over one backend path.

    ``noun`` names the listed things in the error message shown to users
    ("Failed to load events.").
    """

    def __init__(
        self,
        client: HttpClient,
        path: str,
        noun: str,
        *,
        filters: Mapping[str, Any] | None = None,
        required: Sequence[str] = ("org",),
        model: Type[BaseModel] | None = None,
        base_url: str | None = None,
    ):
        self._client = client
        self._path = path
        self._noun = noun
        self._required = tuple(required)
        self._model = model
        self._base_url = base_url

        self.filters: dict[str, Any] = _clean(filters or {})
        self.cursor: str | None = None
        self.items: list[Any] = []
        self.next_cursor: str | None = None
        self.loading = False
        self.error: str | None = None

        self._appending = False
        self._generation = 0

    @property
    def noun(self) -> str:
        return self._noun

    @property
    def has_more(self) -> bool:
        return self.next_cursor is not None

    @property
    def error_message(self) -> str:
        return f"Failed to load {self._noun}."

    @property
    def url(self) -> str | None:
        """URL of the page to fetch, or ``None`` while a required filter is unset."""
        if any(not self.filters.get(key) for key in self._required):
            return None
        query = dict(self.filters)
        if self.cursor:
            query["cursor"] = self.cursor
        if self._base_url is not None:
            return build_url(self._base_url, self._path, query)
        return self._client.url_for(self._path, query)

    def set_filters(self, **changes: Any) -> bool:
        """Apply filter changes. Returns ``True`` when anything changed.

        A change resets the cursor and the accumulated items.
        """
        updated = _clean({**self.filters, **changes})
        if updated == self.filters:
            return False

        self.filters = updated
        self._reset()
        log.debug("pagination.filters_changed", noun=self._noun, filters=updated)
        return True

    def _reset(self) -> None:
        self._generation += 1  # drop responses still in flight
        self._appending = False
        self.cursor = None
        self.next_cursor = None
        self.items = []
        self.loading = False

    async def load(self) -> list[Any]:
        """Fetch the page at the current cursor and return the visible items."""
        self._generation += 1
        token = self._generation
        appending = self._appending

        url = self.url
        if url is None:
            self.items = []
            self.next_cursor = None
            self._appending = False
            return self.items

        self.loading = True
        self.error = None
        try:
            payload = await self._client.get_json(url)
            page = parse_page(payload, self._model)
        except (ApiError, MalformedResponseError) as exc:
            if token != self._generation:
                log.debug("pagination.stale_error_dropped", noun=self._noun)
                return self.items
            log.warning(
                "pagination.load_failed",
                noun=self._noun,
                url=url,
                status=getattr(exc, "status", None),
                error=str(exc),
            )
            self.error = self.error_message
            if not appending:
                self.items = []
                self.next_cursor = None
            self.loading = False
            self._appending = False
            return self.items

        if token != self._generation:
            log.debug("pagination.stale_page_dropped", noun=self._noun, url=url)
            return self.items

        self.items = [*self.items, *page.items] if appending else page.items
        self.next_cursor = page.next_cursor
        self.loading = False
        self._appending = False
        log.debug(
            "pagination.loaded",
            noun=self._noun,
            count=len(page.items),
            total=len(self.items),
            has_more=self.has_more,
        )
        return self.items

    async def load_more(self) -> bool:
        """Fetch the next page and append it. ``False`` when there is none."""
        if not self.next_cursor:
            return False
        self._appending = True
        self.cursor = self.next_cursor
        await self.load()
        return True

    async def refresh(self) -> list[Any]:
        """Refetch the page at the current cursor, replacing the items."""
        self._appending = False
        return await self.load()

    async def load_all(self, max_pages: int | None = None) -> list[Any]:
        """Load the first page and keep following the cursor."""
        await self.load()
        pages = 1
        while self.has_more and self.error is None:
            if max_pages is not None and pages >= max_pages:
                break
            await self.load_more()
            pages += 1
        return self.items


class DetailQuery(Generic[M]):
    """Fetch of one object; ``item`` is ``None`` until all params are set."""

    def __init__(
        self,
        client: HttpClient,
        path: str,
        noun: str,
        model: Type[M],
        *,
        params: Mapping[str, Any] | None = None,
    ):
        self._client = client
        self._path = path
        self._noun = noun
        self._model = model
        self._required = tuple((params or {}).keys())
        self.params: dict[str, Any] = dict(params or {})
        self.item: Optional[M] = None
        self.loading = False
        self.error: str | None = None
        self._generation = 0

    @property
    def error_message(self) -> str:
        return f"Failed to load {self._noun}."

    @property
    def url(self) -> str | None:
        if any(not self.params.get(key) for key in self._required):
            return None
        return self._client.url_for(self._path, self.params)

    def set_params(self, **changes: Any) -> bool:
        updated = {**self.params, **changes}
        if updated == self.params:
            return False
        self.params = updated
        self._generation += 1  # drop the response still in flight
        self.item = None
        self.loading = False
        return True

    async def load(self) -> Optional[M]:
        self._generation += 1
        token = self._generation

        url = self.url
        if url is None:
            self.item = None
            self.loading = False
            return None

        self.loading = True
        self.error = None
        try:
            item = parse_object(await self._client.get_json(url), self._model)
        except (ApiError, MalformedResponseError) as exc:
            if token == self._generation:
                log.warning(
                    "detail.load_failed",
                    noun=self._noun,
                    url=url,
                    status=getattr(exc, "status", None),
                    error=str(exc),
                )
                self.error = self.error_message
                self.item = None
                self.loading = False
            return self.item

        if token == self._generation:
            self.item = item
            self.loading = False
        return self.item

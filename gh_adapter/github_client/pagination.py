"""Multi-page listing retrieval.

``ResultPager`` drives a resource's listing method page by page. It has two
explicit entry points: ``fetch_all`` drains every page, ``fetch_page`` makes
exactly one bounded request. Cancellation and the listing deadline are checked
between pages, never in the middle of one.
"""

import logging
import threading
import time
from collections.abc import Callable
from typing import Any

from ..exceptions import ListingTimeout, OperationCancelled, TransportFailure

logger = logging.getLogger(__name__)

DEFAULT_PER_PAGE = 30
MAX_PER_PAGE = 100
DEFAULT_MAX_PAGES = 1000


class CancellationToken:
    """Lets a caller abort a multi-page fetch from another thread."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise OperationCancelled("Listing cancelled between pages")


class ResultPager:
    """Flattens paginated listings into one ordered list."""

    def __init__(
        self,
        per_page: int = DEFAULT_PER_PAGE,
        timeout: float | None = None,
        max_pages: int = DEFAULT_MAX_PAGES,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the pager.

        Args:
            per_page: Page size used by fetch_all when none is given
            timeout: Time budget in seconds for one whole listing, or None
            max_pages: Ceiling on pages per listing
            clock: Monotonic clock, replaceable in tests
        """
        self.per_page = self._validate_size(per_page)
        self.timeout = timeout
        self.max_pages = max_pages
        self._clock = clock

    @staticmethod
    def _validate_size(per_page: int) -> int:
        if not 1 <= per_page <= MAX_PER_PAGE:
            raise ValueError(
                f"Page size must be between 1 and {MAX_PER_PAGE}, got {per_page}"
            )
        return per_page

    def fetch_all(
        self,
        resource: Any,
        method: str,
        *args: Any,
        per_page: int | None = None,
        cancel: CancellationToken | None = None,
    ) -> list[Any]:
        """Fetch every page of a listing.

        Stops on an empty page, or when the response has a ``Link`` header
        without a ``next`` relation. A failure on any page discards what was
        collected so far.

        Args:
            resource: Resource object exposing the listing method
            method: Name of the listing method, e.g. ``"all"``
            *args: Positional arguments for the listing method
            per_page: Page size, defaults to the pager's
            cancel: Token checked before each page request

        Returns:
            All items in server order
        """
        size = self._validate_size(self.per_page if per_page is None else per_page)
        listing = getattr(resource, method)
        deadline = None if self.timeout is None else self._clock() + self.timeout

        items: list[Any] = []
        page = 1
        while True:
            self._checkpoint(cancel, deadline, method)
            if page > self.max_pages:
                raise TransportFailure(
                    f"Listing '{method}' exceeded {self.max_pages} pages"
                )

            result = listing(*args, page=page, per_page=size)
            logger.debug("%s page %d: %d items", method, page, len(result.items))
            if not result.items:
                break
            items.extend(result.items)
            if result.links is not None and "next" not in result.links:
                break
            page += 1

        return items

    def fetch_page(
        self,
        resource: Any,
        method: str,
        *args: Any,
        page: int,
        per_page: int | None = None,
        cancel: CancellationToken | None = None,
    ) -> list[Any]:
        """Fetch exactly one page of a listing.

        Args:
            resource: Resource object exposing the listing method
            method: Name of the listing method
            *args: Positional arguments for the listing method
            page: 1-based page number
            per_page: Page size, defaults to the pager's
            cancel: Token checked before the request

        Returns:
            Items on that page, possibly empty
        """
        if page < 1:
            raise ValueError(f"Page numbers start at 1, got {page}")
        size = self._validate_size(self.per_page if per_page is None else per_page)
        self._checkpoint(cancel, None, method)

        result = getattr(resource, method)(*args, page=page, per_page=size)
        logger.debug("%s page %d: %d items", method, page, len(result.items))
        return list(result.items)

    def _checkpoint(
        self, cancel: CancellationToken | None, deadline: float | None, method: str
    ) -> None:
        if cancel is not None:
            cancel.raise_if_cancelled()
        if deadline is not None and self._clock() > deadline:
            raise ListingTimeout(
                f"Listing '{method}' exceeded its {self.timeout}s time budget"
            )

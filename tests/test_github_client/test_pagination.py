"""Tests for the result pager."""

from typing import Any

import pytest

from gh_adapter.exceptions import (
    ListingTimeout,
    NotFoundFailure,
    OperationCancelled,
    TransportFailure,
)
from gh_adapter.github_client.pagination import CancellationToken, ResultPager
from gh_adapter.github_client.resources import Page
from tests.fakes import FakeListing


class TestFetchAll:
    """Test draining every page of a listing."""

    def test_concatenates_pages_until_empty(self) -> None:
        """Pages of 2, 2 and 1 items yield 5 items after 4 requests."""
        resource = FakeListing([["a", "b"], ["c", "d"], ["e"]])

        items = ResultPager(per_page=2).fetch_all(resource, "all", "acme", "widgets")

        assert items == ["a", "b", "c", "d", "e"]
        assert len(resource.calls) == 4
        assert [call["page"] for call in resource.calls] == [1, 2, 3, 4]

    def test_passes_positional_args_and_page_size(self) -> None:
        """Listing arguments and page size reach every request."""
        resource = FakeListing([["a"]])

        ResultPager().fetch_all(
            resource, "all", "acme", "widgets", {"state": "open"}, per_page=50
        )

        assert resource.calls[0]["args"] == ("acme", "widgets", {"state": "open"})
        assert all(call["per_page"] == 50 for call in resource.calls)

    def test_stops_when_link_header_has_no_next(self) -> None:
        """A Link header without rel=next ends the listing without an extra call."""
        resource = FakeListing(
            [["a", "b"], ["c"]],
            links=[{"next": "p2", "last": "p2"}, {"first": "p1", "prev": "p1"}],
        )

        items = ResultPager(per_page=2).fetch_all(resource, "all")

        assert items == ["a", "b", "c"]
        assert len(resource.calls) == 2

    def test_empty_listing(self) -> None:
        """An empty first page produces an empty result."""
        resource = FakeListing([])

        assert ResultPager().fetch_all(resource, "all") == []
        assert len(resource.calls) == 1

    def test_failure_discards_partial_result(self) -> None:
        """A failing page aborts the whole listing."""

        class FailingListing:
            def __init__(self) -> None:
                self.calls = 0

            def all(self, page: int, per_page: int) -> Page:
                self.calls += 1
                if page == 2:
                    raise NotFoundFailure("gone")
                return Page(items=["a"], links=None)

        resource = FailingListing()

        with pytest.raises(NotFoundFailure):
            ResultPager().fetch_all(resource, "all")
        assert resource.calls == 2

    def test_restartable_after_failure(self) -> None:
        """A repeated call builds the listing again from the first page."""
        resource = FakeListing([["a"], ["b"]])
        pager = ResultPager()

        first = pager.fetch_all(resource, "all")
        second = pager.fetch_all(resource, "all")

        assert first == second == ["a", "b"]

    @pytest.mark.parametrize("per_page", [0, 101])
    def test_rejects_invalid_size(self, per_page: int) -> None:
        """An explicit size is validated, never replaced by the default."""
        resource = FakeListing([["a"]])

        with pytest.raises(ValueError, match="Page size must be between 1 and 100"):
            ResultPager().fetch_all(resource, "all", per_page=per_page)
        assert resource.calls == []

    def test_page_ceiling(self) -> None:
        """A server that never runs dry is cut off."""

        class EndlessListing:
            def all(self, page: int, per_page: int) -> Page:
                return Page(items=[page], links=None)

        with pytest.raises(TransportFailure, match="exceeded 3 pages"):
            ResultPager(max_pages=3).fetch_all(EndlessListing(), "all")


class TestFetchPage:
    """Test single bounded page requests."""

    def test_fetches_exactly_one_page(self) -> None:
        """Only the requested page is fetched, with the requested size."""
        resource = FakeListing([["a", "b"], ["c", "d"], ["e"]])

        items = ResultPager().fetch_page(resource, "all", "acme", page=2, per_page=2)

        assert items == ["c", "d"]
        assert resource.calls == [{"args": ("acme",), "page": 2, "per_page": 2}]

    def test_page_past_the_end_is_empty(self) -> None:
        """A page beyond the listing returns no items."""
        resource = FakeListing([["a"]])

        assert ResultPager().fetch_page(resource, "all", page=5) == []

    def test_defaults_to_pager_size(self) -> None:
        """Without per_page the pager's size is used."""
        resource = FakeListing([["a"]])

        ResultPager(per_page=25).fetch_page(resource, "all", page=1)

        assert resource.calls[0]["per_page"] == 25

    @pytest.mark.parametrize("page", [0, -1])
    def test_rejects_invalid_page(self, page: int) -> None:
        """Page numbers start at 1."""
        with pytest.raises(ValueError, match="Page numbers start at 1"):
            ResultPager().fetch_page(FakeListing([]), "all", page=page)

    @pytest.mark.parametrize("per_page", [0, 101])
    def test_rejects_invalid_size(self, per_page: int) -> None:
        """Page size must fit the platform limit."""
        resource = FakeListing([["a"]])

        with pytest.raises(ValueError, match="Page size must be between 1 and 100"):
            ResultPager().fetch_page(resource, "all", page=1, per_page=per_page)
        assert resource.calls == []


class TestCancellationAndDeadline:
    """Test aborting listings between pages."""

    def test_cancelled_before_first_page(self) -> None:
        """A cancelled token prevents any request."""
        resource = FakeListing([["a"]])
        token = CancellationToken()
        token.cancel()

        with pytest.raises(OperationCancelled):
            ResultPager().fetch_all(resource, "all", cancel=token)
        assert resource.calls == []

    def test_cancelled_between_pages(self) -> None:
        """Cancelling during a listing stops it before the next page."""
        token = CancellationToken()

        class CancellingListing(FakeListing):
            def all(self, *args: Any, page: int, per_page: int) -> Page:
                result = super().all(*args, page=page, per_page=per_page)
                token.cancel()
                return result

        resource = CancellingListing([["a"], ["b"], ["c"]])

        with pytest.raises(OperationCancelled):
            ResultPager().fetch_all(resource, "all", cancel=token)
        assert len(resource.calls) == 1

    def test_token_state(self) -> None:
        """Tokens start active and stay cancelled."""
        token = CancellationToken()
        assert not token.cancelled
        token.cancel()
        assert token.cancelled

    def test_listing_deadline(self) -> None:
        """Running past the time budget raises ListingTimeout."""
        ticks = iter([0.0, 1.0, 2.0, 11.0, 12.0])
        resource = FakeListing([["a"], ["b"], ["c"], ["d"]])
        pager = ResultPager(timeout=10.0, clock=lambda: next(ticks))

        with pytest.raises(ListingTimeout, match="10.0s time budget"):
            pager.fetch_all(resource, "all")
        assert len(resource.calls) == 2

    def test_listing_timeout_is_transport_failure(self) -> None:
        """Timeouts can be handled as transport failures."""
        assert issubclass(ListingTimeout, TransportFailure)

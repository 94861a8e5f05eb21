"""Unit tests for the sliding-window rate limiter."""

import pytest

from src.fetch.rate_limiter import SlidingWindowRateLimiter
from tests.helpers.clock import FakeClock


def make_limiter(clock: FakeClock, max_requests: int = 2) -> SlidingWindowRateLimiter:
    """Create a limiter on the fake clock."""
    return SlidingWindowRateLimiter(
        max_requests=max_requests,
        window_ms=1000,
        clock=clock,
        sleep=clock.sleep,
    )


class TestSlidingWindowRateLimiter:
    """Tests for SlidingWindowRateLimiter."""

    @pytest.mark.unit
    def test_allows_up_to_limit(self) -> None:
        """Test that requests beyond the limit are rejected within the window."""
        clock = FakeClock()
        limiter = make_limiter(clock)

        assert limiter.allow("tmdb") is True
        assert limiter.allow("tmdb") is True
        assert limiter.allow("tmdb") is False
        assert limiter.rate_limited_count == 1

    @pytest.mark.unit
    def test_window_slides(self) -> None:
        """Test that old requests stop counting once the window passes."""
        clock = FakeClock()
        limiter = make_limiter(clock)
        limiter.allow("tmdb")
        limiter.allow("tmdb")

        clock.advance(1000)

        assert limiter.allow("tmdb") is True

    @pytest.mark.unit
    def test_keys_are_independent(self) -> None:
        """Test that each key has its own budget."""
        clock = FakeClock()
        limiter = make_limiter(clock, max_requests=1)

        assert limiter.allow("a") is True
        assert limiter.allow("b") is True
        assert limiter.allow("a") is False

    @pytest.mark.unit
    def test_acquire_waits_for_window(self) -> None:
        """Test that acquire sleeps until the oldest request leaves the window."""
        clock = FakeClock()
        limiter = make_limiter(clock, max_requests=1)
        limiter.acquire("tmdb")
        clock.advance(400)

        limiter.acquire("tmdb")

        assert clock.sleeps == [0.6]

    @pytest.mark.unit
    def test_clear_resets_budget(self) -> None:
        """Test that clear forgets recorded requests."""
        clock = FakeClock()
        limiter = make_limiter(clock, max_requests=1)
        limiter.allow("tmdb")

        limiter.clear()

        assert limiter.allow("tmdb") is True

    @pytest.mark.unit
    def test_rejects_non_positive_limits(self) -> None:
        """Test that invalid limits fail at construction."""
        with pytest.raises(ValueError, match="must be positive"):
            SlidingWindowRateLimiter(max_requests=0, window_ms=1000)

from datetime import UTC, datetime, timedelta


class SystemClock:
    def now_utc(self) -> datetime:
        return datetime.now(UTC)


class FixedClock:
    """
    Clock that returns a fixed time until moved.

    Useful for deterministic testing of timestamps and due-entry checks.
    """

    def __init__(self, frozen_utc: datetime) -> None:
        if frozen_utc.tzinfo is None:
            frozen_utc = frozen_utc.replace(tzinfo=UTC)
        self._now = frozen_utc

    def now_utc(self) -> datetime:
        return self._now

    def advance(self, seconds: float) -> datetime:
        self._now = self._now + timedelta(seconds=seconds)
        return self._now

    def set(self, utc_dt: datetime) -> None:
        self._now = utc_dt if utc_dt.tzinfo else utc_dt.replace(tzinfo=UTC)

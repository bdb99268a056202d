from sports_events.db.base import Base, TimestampMixin, UTCDateTime, as_utc, utcnow

__all__ = ["Base", "TimestampMixin", "UTCDateTime", "as_utc", "utcnow"]

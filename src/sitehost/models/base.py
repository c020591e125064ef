from datetime import UTC, datetime


def utc_now() -> datetime:
    """Return current UTC time as naive datetime (for TIMESTAMP columns).

    The sites table uses TIMESTAMP WITHOUT TIME ZONE, so tzinfo is stripped.
    All times are stored in UTC by convention.
    """
    return datetime.now(UTC).replace(tzinfo=None)

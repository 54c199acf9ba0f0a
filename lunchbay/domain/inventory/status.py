"""Freshness status derivation.

Status is never stored. It is computed from an item's expiration date and
the evaluation-time date every time an item is read.
"""
from dataclasses import dataclass
from datetime import date, datetime
import enum
from typing import Union

from lunchbay.core.config import settings

DateLike = Union[date, datetime]


class ItemStatus(str, enum.Enum):
    FRESH = "fresh"
    EXPIRING = "expiring"
    EXPIRED = "expired"


class ExpiryBucket(str, enum.Enum):
    EXPIRED = "expired"
    TODAY = "today"
    ONE_TO_THREE_DAYS = "1-3 days"
    FOUR_TO_SEVEN_DAYS = "4-7 days"
    ONE_TO_TWO_WEEKS = "1-2 weeks"
    OVER_TWO_WEEKS = "2+ weeks"


# Upper day edges of the timeline buckets, independent of the expiring threshold
SHORT_TERM_BUCKET_DAYS = 3
WEEK_BUCKET_DAYS = 7
TWO_WEEK_BUCKET_DAYS = 14


@dataclass(frozen=True)
class StatusPolicy:
    """Days-until-expiry at or below which an item counts as expiring."""

    expiring_threshold_days: int = 3

    def __post_init__(self):
        if self.expiring_threshold_days < 0:
            raise ValueError("expiring_threshold_days must be >= 0")

    @classmethod
    def from_settings(cls) -> "StatusPolicy":
        return cls(expiring_threshold_days=settings.EXPIRING_THRESHOLD_DAYS)


DEFAULT_POLICY = StatusPolicy()


def _as_date(value: DateLike) -> date:
    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        return value.date()
    return value


def days_until_expiry(expiration_date: DateLike, reference_now: DateLike) -> int:
    """Whole days from ``reference_now`` to ``expiration_date``.

    Both sides are truncated to calendar dates, so the time of day of
    ``reference_now`` never changes the result.
    """
    return (_as_date(expiration_date) - _as_date(reference_now)).days


def classify(
    expiration_date: DateLike,
    reference_now: DateLike,
    policy: StatusPolicy = DEFAULT_POLICY,
) -> ItemStatus:
    days = days_until_expiry(expiration_date, reference_now)
    if days < 0:
        return ItemStatus.EXPIRED
    if days <= policy.expiring_threshold_days:
        return ItemStatus.EXPIRING
    return ItemStatus.FRESH


def expiry_bucket(days: int) -> ExpiryBucket:
    """Dashboard timeline grouping for a days-until-expiry value."""
    if days < 0:
        return ExpiryBucket.EXPIRED
    if days == 0:
        return ExpiryBucket.TODAY
    if days <= SHORT_TERM_BUCKET_DAYS:
        return ExpiryBucket.ONE_TO_THREE_DAYS
    if days <= WEEK_BUCKET_DAYS:
        return ExpiryBucket.FOUR_TO_SEVEN_DAYS
    if days <= TWO_WEEK_BUCKET_DAYS:
        return ExpiryBucket.ONE_TO_TWO_WEEKS
    return ExpiryBucket.OVER_TWO_WEEKS

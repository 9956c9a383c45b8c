from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


# fmt: off
@dataclass(frozen=True)
class UrlRecordModel:
    id: int                 # Store-assigned identifier, immutable
    original_url: str       # Original long URL the short code redirects to
    shortcode: str          # Unique short identifier of shortened URL
    expires_at: datetime    # UTC moment after which the short URL stops redirecting
    clicks: int = 0         # Successful redirects so far

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at
# fmt: on


class RedirectOutcome(StrEnum):
    FOUND = 'found'
    NOT_FOUND = 'not_found'
    EXPIRED = 'expired'


@dataclass(frozen=True)
class RedirectResult:
    """Outcome of resolving a short code.

    Attributes:
        outcome (RedirectOutcome):
            FOUND, NOT_FOUND or EXPIRED.
        record (UrlRecordModel | None):
            The resolved record. None when the short code is unknown.
    """

    outcome: RedirectOutcome
    record: UrlRecordModel | None = None

    @property
    def target(self) -> str | None:
        if self.outcome is not RedirectOutcome.FOUND or self.record is None:
            return None
        return self.record.original_url


@dataclass(frozen=True)
class ShortenResult:
    record: UrlRecordModel
    created: bool  # False when an existing record was returned or re-aliased


@dataclass(frozen=True)
class SweepResult:
    deleted_count: int
    timestamp: datetime

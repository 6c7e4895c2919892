"""Column contracts and models for the company rollup.

The input side is described by plain column-name constants (the audit export
is read by name, not position). The output side is the `CompanyScores`
Pydantic model, which renders the 25-column presentation row used by the
exporter, dashboard and tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

GROUP_KEY = "Associated Company Name"

# (family, passed column, taken column)
METRIC_FAMILIES: tuple[tuple[str, str, str], ...] = (
    ("audit", "Total Passed", "Total Results"),
    ("presence", "Presence Tests Passed", "Presence Tests Taken"),
    ("reputation", "Reputation Tests Passed", "Reputation Total Tests Taken"),
    ("marketing", "Marketing Tests Passed", "Marketing Total Tests Taken"),
    ("messaging", "Messaging Tests Passed", "Messaging Tests Taken"),
)

# accumulator field -> input column
FLAG_COLUMNS: dict[str, str] = {
    "verified": "Is Claimed",
    "tracking": "Has Website Utm Codes",
    "phone_number": "Has Phone Number",
    "website_url": "Has Website Url",
    "reviews_high_total": "Has Reviews High Total",
    "high_ratings": "Has Reviews Average Rating",
    "listings_posting": "Has Posts",
    "listings_multiple_posts": "Has Posts Multiple",
}

METRIC_COLUMNS: tuple[str, ...] = tuple(
    col for _, passed, taken in METRIC_FAMILIES for col in (passed, taken)
) + tuple(FLAG_COLUMNS.values())

OUTPUT_COLUMNS: tuple[str, ...] = (
    "Company Name",
    "Count",
    "Audit Score",
    "Presence",
    "Reputation",
    "Marketing",
    "Messaging",
    "Company Name 1",
    "Count 1",
    "Presence 1",
    "Verified",
    "Tracking",
    "Phone Number",
    "Website URL",
    "Company Name 2",
    "Count 2",
    "Reputation 2",
    "Low Review Count",
    "High Ratings",
    "Company Name 3",
    "Count 3",
    "Marketing 2",
    "Listings Posting",
    "Listings Not Posting",
    "Listings with Multiple Posts",
)

RATIO_COLUMNS: frozenset[str] = frozenset(
    {
        "Audit Score",
        "Presence",
        "Reputation",
        "Marketing",
        "Messaging",
        "Presence 1",
        "Reputation 2",
        "Marketing 2",
    }
)

TEXT_COLUMNS: frozenset[str] = frozenset(
    {"Company Name", "Company Name 1", "Company Name 2", "Company Name 3"}
)

# A ratio is a 2-decimal float, or the integer 0 when nothing was taken.
Ratio = Union[int, float]

OutputRecord = dict[str, Any]


@dataclass
class GroupAccumulator:
    """Running totals for one company during a single rollup run.

    Attributes:
        count: Number of records seen for the company.
        *_passed / *_taken: Paired sums per metric family.
        verified ... listings_multiple_posts: Raw sums of the flag columns.
    """
    count: int = 0
    audit_passed: float = 0.0
    audit_taken: float = 0.0
    presence_passed: float = 0.0
    presence_taken: float = 0.0
    reputation_passed: float = 0.0
    reputation_taken: float = 0.0
    marketing_passed: float = 0.0
    marketing_taken: float = 0.0
    messaging_passed: float = 0.0
    messaging_taken: float = 0.0
    verified: float = 0.0
    tracking: float = 0.0
    phone_number: float = 0.0
    website_url: float = 0.0
    reviews_high_total: float = 0.0
    high_ratings: float = 0.0
    listings_posting: float = 0.0
    listings_multiple_posts: float = 0.0


class CompanyScores(BaseModel):
    """Canonical rolled-up values for one company.

    Only canonical values live on the model; the repeated presentation
    columns are copied from them in `to_record`.
    """
    model_config = ConfigDict(extra="forbid")
    company_name: str
    count: int = Field(..., ge=0)
    audit_score: Ratio
    presence: Ratio
    reputation: Ratio
    marketing: Ratio
    messaging: Ratio
    verified: float
    tracking: float
    phone_number: float
    website_url: float
    low_review_count: float
    high_ratings: float
    listings_posting: float
    listings_not_posting: float
    listings_multiple_posts: float

    def to_record(self) -> OutputRecord:
        """Return the presentation row keyed by `OUTPUT_COLUMNS`, in order."""
        name, count = self.company_name, self.count
        values = (
            name,
            count,
            self.audit_score,
            self.presence,
            self.reputation,
            self.marketing,
            self.messaging,
            name,
            count,
            self.presence,
            self.verified,
            self.tracking,
            self.phone_number,
            self.website_url,
            name,
            count,
            self.reputation,
            self.low_review_count,
            self.high_ratings,
            name,
            count,
            self.marketing,
            self.listings_posting,
            self.listings_not_posting,
            self.listings_multiple_posts,
        )
        return dict(zip(OUTPUT_COLUMNS, values))

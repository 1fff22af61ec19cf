"""
Data models for the 1688 search server.

This module defines the core data structures used throughout the application:
request/response models exposed through the MCP tool (pydantic) and the
transient records used inside one search invocation (dataclasses).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SearchRequest(BaseModel):
    """Parameters of one search invocation.

    Attributes:
        query: Search keywords, at least two characters
        max_results: Maximum number of listing cards to scrape (1-20)
        min_price: Inclusive lower price bound (optional)
        max_price: Inclusive upper price bound (optional)
    """
    model_config = ConfigDict(frozen=True)

    query: str = Field(min_length=2)
    max_results: int = Field(default=5, ge=1, le=20)
    min_price: Optional[float] = None
    max_price: Optional[float] = None


class Listing(BaseModel):
    """One parsed 1688 offer card.

    Every field is best-effort: a selector that matched nothing leaves it unset.
    ``price`` is the raw card text, currency and unit noise included.
    """
    title: Optional[str] = None
    price: Optional[str] = None
    link: Optional[str] = None
    seller: Optional[str] = None


class SearchResults(BaseModel):
    """Structured payload returned by the search tool."""
    results: List[Listing] = Field(default_factory=list)


@dataclass(frozen=True)
class FieldResult:
    """Outcome of scraping a single field from a listing card.

    Distinguishes "element missing" (``present=False``) from
    "element present but empty" (``present=True, text=''``).
    """
    present: bool
    text: str = ""

    @classmethod
    def found(cls, text: Optional[str]) -> "FieldResult":
        return cls(present=True, text=(text or "").strip())

    @classmethod
    def absent(cls) -> "FieldResult":
        return cls(present=False)

    @property
    def value(self) -> str:
        """Text of the field, or an empty string when absent."""
        return self.text if self.present else ""


@dataclass
class RawListing:
    """Per-field scrape results for one listing card."""
    title: FieldResult
    price: FieldResult
    link: FieldResult
    seller: FieldResult

    def to_listing(self) -> Listing:
        """Convert to the public Listing model using empty strings for misses."""
        return Listing(
            title=self.title.value,
            price=self.price.value,
            link=self.link.value,
            seller=self.seller.value,
        )


@dataclass
class CaptchaTask:
    """A CapSolver task for one solve attempt.

    Attributes:
        website_url: URL of the page showing the captcha
        task_type: CapSolver task type name
        website_key: Site key taken from the page config (optional)
        challenge: Challenge token taken from the page config (optional)
        scene: Captcha scene identifier
    """
    website_url: str
    task_type: str
    website_key: Optional[str] = None
    challenge: Optional[str] = None
    scene: Optional[str] = None

    def to_payload(self, client_key: str) -> Dict[str, Any]:
        """Build the createTask request body, omitting unset fields."""
        task: Dict[str, Any] = {
            "type": self.task_type,
            "websiteURL": self.website_url,
        }
        if self.website_key:
            task["websiteKey"] = self.website_key
        if self.challenge:
            task["challenge"] = self.challenge
        if self.scene:
            task["scene"] = self.scene

        return {"clientKey": client_key, "task": task}


class SolveOutcome(str, Enum):
    """Result of one captcha solve attempt."""
    SOLVED = "solved"
    FAILED = "failed"
    TIMED_OUT = "timed_out"

    @property
    def solved(self) -> bool:
        return self is SolveOutcome.SOLVED


class PollState(str, Enum):
    """States of the CapSolver task result polling loop."""
    CREATED = "created"
    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"
    TIMED_OUT = "timed_out"

    @property
    def terminal(self) -> bool:
        return self in (PollState.READY, PollState.FAILED, PollState.TIMED_OUT)

"""Domain records for the volunteer workflow.

Records are stored with snake_case keys. Each model validates a raw store
row with ``from_record`` so a malformed row fails loudly at the boundary.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as SchemaError

from access_hub.config import ANONYMOUS_VOLUNTEER, COORDINATOR_ROLE, DEFAULT_DURATION_HOURS
from access_hub.errors import ValidationError


class RequestStatus(str, Enum):
    OPEN = "open"
    MATCHED = "matched"
    COMPLETED = "completed"


class OfferStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class SessionStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


class Record(BaseModel):
    """Base for stored records: unknown columns are ignored."""
    model_config = ConfigDict(extra="ignore")

    @classmethod
    def from_record(cls, record: dict):
        try:
            return cls.model_validate(record)
        except SchemaError as e:
            raise ValidationError(f"Malformed {cls.__name__} record: {e}") from e


class UserIdentity(BaseModel):
    """The signed-in caller."""
    model_config = ConfigDict(frozen=True)

    uid: str
    name: str
    roles: frozenset[str] = frozenset()

    @property
    def is_coordinator(self) -> bool:
        return COORDINATOR_ROLE in self.roles


class HelpRequest(Record):
    id: str
    owner_id: str
    description: str
    status: RequestStatus = RequestStatus.OPEN
    duration_hours: int = DEFAULT_DURATION_HOURS
    created_at: datetime | None = None


class VolunteerOffer(Record):
    id: str
    request_id: str
    volunteer_id: str
    volunteer_name: str = ANONYMOUS_VOLUNTEER
    status: OfferStatus = OfferStatus.PENDING
    created_at: datetime | None = None


class ChatMessage(Record):
    model_config = ConfigDict(extra="ignore", frozen=True)

    sender_id: str
    sender_name: str
    content: str
    timestamp: datetime


class Session(Record):
    id: str
    request_id: str
    participant_ids: list[str] = Field(min_length=2, max_length=2)
    status: SessionStatus = SessionStatus.ACTIVE
    chat_log: list[ChatMessage] = Field(default_factory=list)
    created_at: datetime | None = None

    @field_validator("participant_ids")
    @classmethod
    def _distinct_participants(cls, value: list[str]) -> list[str]:
        if len(set(value)) != len(value):
            raise ValueError("participant_ids must be distinct")
        return value

    @field_validator("chat_log", mode="before")
    @classmethod
    def _null_chat_log(cls, value):
        return value or []

    def has_participant(self, user_id: str) -> bool:
        return user_id in self.participant_ids


class ReactionType(str, Enum):
    LIKE = "like"
    SUPPORT = "support"
    CELEBRATE = "celebrate"


class Comment(Record):
    model_config = ConfigDict(extra="ignore", frozen=True)

    user_id: str
    user_name: str
    content: str
    timestamp: datetime


class Post(Record):
    """A community post. Comments are appended in place; reactions map user id to reaction."""
    id: str
    user_id: str
    user_name: str
    content: str
    comments: list[Comment] = Field(default_factory=list)
    reactions: dict[str, ReactionType] = Field(default_factory=dict)
    reaction_version: int = 0
    created_at: datetime | None = None

    @field_validator("comments", "reactions", mode="before")
    @classmethod
    def _null_collections(cls, value, info):
        if value is None:
            return [] if info.field_name == "comments" else {}
        return value

    def reaction_counts(self) -> dict[ReactionType, int]:
        counts = {reaction: 0 for reaction in ReactionType}
        for reaction in self.reactions.values():
            counts[reaction] += 1
        return counts

    def reaction_of(self, user_id: str) -> ReactionType | None:
        return self.reactions.get(user_id)

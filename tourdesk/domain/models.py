"""Domain models for the Tourdesk admin console.

All entities are immutable (frozen dataclasses). The list store replaces an
entity with an updated copy instead of mutating it, so views holding an old
reference never observe a half-applied change.
"""

from dataclasses import dataclass, fields, replace
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union

from dateutil.parser import isoparse

EntityId = Union[int, str]


class MessageStatus(Enum):
    """Read state of an inbound contact message."""

    UNREAD = "unread"
    READ = "read"

    def can_transition_to(self, target: "MessageStatus") -> bool:
        """Messages only ever move from unread to read."""
        return target == MessageStatus.READ


class ReportStatus(Enum):
    """Moderation state of an abuse report ticket."""

    PENDING = "pending"
    REVIEWED = "reviewed"
    IGNORED = "ignored"

    def can_transition_to(self, target: "ReportStatus") -> bool:
        # Reviewed/ignored tickets may be re-opened.
        return target != self


class AgencyStatus(Enum):
    """Verification state of an agency account."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    def can_transition_to(self, target: "AgencyStatus") -> bool:
        return target != self


class AgencyType(Enum):
    """Kind of organisation behind an agency account."""

    AGENCY = "agency"
    CLUB = "club"


class ReportTarget(Enum):
    """What a report ticket is about."""

    TOUR = "tour"
    AGENCY = "agency"
    USER = "user"
    OTHER = "other"


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an API timestamp, returning None for missing or malformed values."""
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return isoparse(str(value))
    except (ValueError, OverflowError):
        return None


def _parse_enum(enum_cls, value: Any, default):
    if value is None:
        return default
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        return default


class EntityMixin:
    """Shared helpers for all managed records."""

    __slots__ = ()

    def with_updates(self, **changes: Any):
        """Create a new instance with the given fields replaced.

        Unknown field names are ignored so form payloads carrying extra keys
        (e.g. passwords) can be merged straight into an entity.
        """
        known = {f.name for f in fields(self)}
        return replace(self, **{k: v for k, v in changes.items() if k in known})


@dataclass(frozen=True, slots=True)
class Agency(EntityMixin):
    """An agency row: a user account joined with its agency profile."""

    id: EntityId
    name: str
    email: str
    agency_id: Optional[EntityId] = None
    phone: Optional[str] = None
    logo: Optional[str] = None
    status: AgencyStatus = AgencyStatus.PENDING
    type: AgencyType = AgencyType.AGENCY
    agreement_file: Optional[str] = None

    @property
    def remote_id(self) -> EntityId:
        """Identifier the agency endpoints expect."""
        return self.agency_id if self.agency_id is not None else self.id

    @classmethod
    def from_api(cls, user: dict, agency: Optional[dict] = None) -> "Agency":
        """Build an agency row from a user payload and its agency profile."""
        agency = agency or {}
        return cls(
            id=user["id"],
            name=user.get("name") or "",
            email=user.get("email") or "",
            agency_id=agency.get("id"),
            phone=user.get("phone_number"),
            logo=agency.get("logo"),
            status=_parse_enum(AgencyStatus, agency.get("status"), AgencyStatus.PENDING),
            type=_parse_enum(AgencyType, agency.get("type"), AgencyType.AGENCY),
            agreement_file=agency.get("verification_agreement"),
        )


@dataclass(frozen=True, slots=True)
class Tourist(EntityMixin):
    """A registered tourist account."""

    id: EntityId
    name: str
    email: str
    phone_number: Optional[str] = None
    profile_photo: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: dict) -> "Tourist":
        return cls(
            id=data["id"],
            name=data.get("name") or "",
            email=data.get("email") or "",
            phone_number=data.get("phone_number"),
            profile_photo=data.get("profile_photo_path"),
            created_at=parse_timestamp(data.get("created_at")),
        )


@dataclass(frozen=True, slots=True)
class Message(EntityMixin):
    """An inbound contact-form message."""

    id: EntityId
    name: str
    email: str
    message: str
    subject: Optional[str] = None
    phone: Optional[str] = None
    status: MessageStatus = MessageStatus.UNREAD
    created_at: Optional[datetime] = None

    @property
    def is_unread(self) -> bool:
        return self.status == MessageStatus.UNREAD

    @classmethod
    def from_api(cls, data: dict) -> "Message":
        return cls(
            id=data["id"],
            name=data.get("name") or "",
            email=data.get("email") or "",
            message=data.get("message") or "",
            subject=data.get("subject"),
            phone=data.get("phone"),
            status=_parse_enum(MessageStatus, data.get("status"), MessageStatus.UNREAD),
            created_at=parse_timestamp(data.get("created_at")),
        )


@dataclass(frozen=True, slots=True)
class Report(EntityMixin):
    """An abuse report filed by a user against a tour, agency or user.

    Nested reporter/target objects from the API are flattened so the
    filter can address them as plain field names.
    """

    id: EntityId
    reason: str
    status: ReportStatus = ReportStatus.PENDING
    description: Optional[str] = None
    target_type: ReportTarget = ReportTarget.OTHER
    reporter_name: Optional[str] = None
    reporter_email: Optional[str] = None
    tour_title: Optional[str] = None
    agency_name: Optional[str] = None
    target_user_name: Optional[str] = None
    target_user_email: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def target_display(self) -> str:
        """Human-readable description of what was reported."""
        if self.target_type == ReportTarget.TOUR:
            return f"Tour: {self.tour_title or 'Unknown Tour'}"
        if self.target_type == ReportTarget.AGENCY:
            return f"Agency: {self.agency_name or 'Unknown Agency'}"
        if self.target_type == ReportTarget.USER:
            return (
                f"User: {self.target_user_name or 'Unknown User'} "
                f"({self.target_user_email or 'No email'})"
            )
        return "Other"

    @classmethod
    def from_api(cls, data: dict) -> "Report":
        user = data.get("user") or {}
        tour = data.get("tour") or {}
        agency = data.get("agency") or {}
        target_user = data.get("target_user") or {}
        return cls(
            id=data["id"],
            reason=data.get("reason") or "",
            status=_parse_enum(ReportStatus, data.get("status"), ReportStatus.PENDING),
            description=data.get("description"),
            target_type=_parse_enum(ReportTarget, data.get("target_type"), ReportTarget.OTHER),
            reporter_name=user.get("name"),
            reporter_email=user.get("email"),
            tour_title=tour.get("title"),
            agency_name=agency.get("name"),
            target_user_name=target_user.get("name"),
            target_user_email=target_user.get("email"),
            created_at=parse_timestamp(data.get("created_at")),
        )


@dataclass(frozen=True, slots=True)
class Category(EntityMixin):
    """A tour category."""

    id: EntityId
    name: str
    comment: Optional[str] = None
    icon: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict) -> "Category":
        return cls(
            id=data["id"],
            name=data.get("name") or "",
            comment=data.get("comment"),
            icon=data.get("icon"),
        )


@dataclass(frozen=True, slots=True)
class DashboardStats:
    """Headline figures shown above the admin tabs."""

    total_agencies: int = 0
    total_tourists: int = 0
    total_bookings: int = 0
    total_tours: int = 0

    @classmethod
    def from_api(cls, data: dict) -> "DashboardStats":
        return cls(
            total_agencies=int(data.get("total_agencies") or 0),
            total_tourists=int(data.get("total_users") or 0),
            total_bookings=int(data.get("total_bookings") or 0),
            total_tours=int(data.get("total_tours") or 0),
        )


def field_text(entity: Any, name: str) -> str:
    """Return the textual value of an entity field for display and matching.

    Missing fields and None map to an empty string; enums map to their value.
    """
    value = getattr(entity, name, None)
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)

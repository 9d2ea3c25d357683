"""Domain error codes for the ticketing module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    TIER_NOT_FOUND = "TIER_NOT_FOUND"
    TICKET_NOT_FOUND = "TICKET_NOT_FOUND"
    CATEGORY_NOT_FOUND = "CATEGORY_NOT_FOUND"
    BANNER_NOT_FOUND = "BANNER_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    INVALID_ID = "INVALID_ID"
    INVALID_INPUT = "INVALID_INPUT"
    EVENT_NOT_PUBLISHED = "EVENT_NOT_PUBLISHED"
    EVENT_ENDED = "EVENT_ENDED"
    SALE_CLOSED = "SALE_CLOSED"
    INSUFFICIENT_INVENTORY = "INSUFFICIENT_INVENTORY"
    INVALID_QUANTITY = "INVALID_QUANTITY"
    INVALID_RELEASE = "INVALID_RELEASE"
    INVALID_TICKET_STATUS = "INVALID_TICKET_STATUS"
    PERSISTENCE_FAILURE = "PERSISTENCE_FAILURE"
    UNAVAILABLE = "UNAVAILABLE"
    CATEGORY_IN_USE = "CATEGORY_IN_USE"
    SLUG_TAKEN = "SLUG_TAKEN"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    EMAIL_TAKEN = "EMAIL_TAKEN"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    retryable = False

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(code=ErrorCode.EVENT_NOT_FOUND, message="Event not found")
        self.event_id = event_id


class TierNotFoundError(DomainError):
    """Raised when a price tier does not exist or belongs to another event."""

    def __init__(self, tier_id: str) -> None:
        super().__init__(code=ErrorCode.TIER_NOT_FOUND, message="Price tier not found")
        self.tier_id = tier_id


class TicketNotFoundError(DomainError):
    def __init__(self, ticket_id: str) -> None:
        super().__init__(code=ErrorCode.TICKET_NOT_FOUND, message="Ticket not found")
        self.ticket_id = ticket_id


class CategoryNotFoundError(DomainError):
    def __init__(self, category_id: str) -> None:
        super().__init__(code=ErrorCode.CATEGORY_NOT_FOUND, message="Category not found")
        self.category_id = category_id


class BannerNotFoundError(DomainError):
    def __init__(self, banner_id: str) -> None:
        super().__init__(code=ErrorCode.BANNER_NOT_FOUND, message="Banner not found")
        self.banner_id = banner_id


class UserNotFoundError(DomainError):
    def __init__(self, user_id: str) -> None:
        super().__init__(code=ErrorCode.USER_NOT_FOUND, message="User not found")
        self.user_id = user_id


class InvalidIdError(DomainError):
    """Raised when an identifier is malformed."""

    def __init__(self, kind: str = "resource") -> None:
        super().__init__(code=ErrorCode.INVALID_ID, message=f"Invalid {kind} ID format")


class EventNotPublishedError(DomainError):
    """Raised when tickets are requested for a draft event."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_PUBLISHED,
            message="Event is not open for ticket sales",
        )
        self.event_id = event_id


class EventEndedError(DomainError):
    def __init__(self, event_id: str) -> None:
        super().__init__(code=ErrorCode.EVENT_ENDED, message="Event has already taken place")
        self.event_id = event_id


class SaleClosedError(DomainError):
    """Raised outside a price tier's sale window."""

    def __init__(self, tier_id: str) -> None:
        super().__init__(
            code=ErrorCode.SALE_CLOSED,
            message="Tickets for this tier are not on sale",
        )
        self.tier_id = tier_id


class InsufficientInventoryError(DomainError):
    """Raised when a reservation would exceed the tier's quantity_total."""

    def __init__(self, tier_id: str, requested: int) -> None:
        super().__init__(
            code=ErrorCode.INSUFFICIENT_INVENTORY,
            message="Not enough tickets left for this tier",
        )
        self.tier_id = tier_id
        self.requested = requested


class InvalidQuantityError(DomainError):
    def __init__(self, quantity: object, maximum: int) -> None:
        super().__init__(
            code=ErrorCode.INVALID_QUANTITY,
            message=f"Quantity must be between 1 and {maximum}",
        )
        self.quantity = quantity


class InvalidReleaseError(DomainError):
    """Raised when a release would drive quantity_sold below zero."""

    def __init__(self, tier_id: str, quantity: int) -> None:
        super().__init__(
            code=ErrorCode.INVALID_RELEASE,
            message="Cannot release more tickets than were sold",
        )
        self.tier_id = tier_id
        self.quantity = quantity


class InvalidTicketStatusError(DomainError):
    """Why a scanned ticket in a terminal status was refused entry."""

    def __init__(self, status: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_TICKET_STATUS,
            message=f"Ticket status is {status}",
        )
        self.status = status


class PersistenceFailureError(DomainError):
    """Raised when tickets could not be stored; inventory has been restored."""

    retryable = True

    def __init__(self, detail: str = "") -> None:
        super().__init__(
            code=ErrorCode.PERSISTENCE_FAILURE,
            message="Tickets could not be issued, please try again",
        )
        self.detail = detail


class UnavailableError(DomainError):
    """Raised when a lock or the database could not be acquired in time."""

    retryable = True

    def __init__(self, detail: str = "") -> None:
        super().__init__(
            code=ErrorCode.UNAVAILABLE,
            message="Service temporarily unavailable, please retry",
        )
        self.detail = detail


class CategoryInUseError(DomainError):
    def __init__(self, category_id: str) -> None:
        super().__init__(
            code=ErrorCode.CATEGORY_IN_USE,
            message="Category is still used by events",
        )
        self.category_id = category_id


class SlugTakenError(DomainError):
    def __init__(self, slug: str) -> None:
        super().__init__(code=ErrorCode.SLUG_TAKEN, message=f"Slug '{slug}' is already taken")
        self.slug = slug


class PermissionDeniedError(DomainError):
    def __init__(self, permission: str = "") -> None:
        super().__init__(
            code=ErrorCode.PERMISSION_DENIED,
            message="You do not have permission to perform this action",
        )
        self.permission = permission


class InvalidCredentialsError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_CREDENTIALS,
            message="Invalid email or password",
        )


class EmailTakenError(DomainError):
    def __init__(self) -> None:
        super().__init__(code=ErrorCode.EMAIL_TAKEN, message="Email is already registered")

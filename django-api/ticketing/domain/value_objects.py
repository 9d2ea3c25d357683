"""Domain primitives that enforce validity at creation time."""

import secrets
from dataclasses import dataclass
from typing import Self
from uuid import UUID, uuid4

QR_CODE_PREFIX = "DTIX-"
QR_CODE_ENTROPY_BYTES = 24
QR_CODE_MAX_LENGTH = 64


@dataclass(frozen=True)
class _Identifier:
    """UUID-backed identifier shared by all aggregate ids."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))

    @classmethod
    def generate(cls) -> Self:
        return cls(value=uuid4())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class EventId(_Identifier):
    """Unique identifier for an Event."""


@dataclass(frozen=True)
class PriceTierId(_Identifier):
    """Unique identifier for a PriceTier."""


@dataclass(frozen=True)
class TicketId(_Identifier):
    """Unique identifier for a Ticket."""


@dataclass(frozen=True)
class CategoryId(_Identifier):
    """Unique identifier for a Category."""


@dataclass(frozen=True)
class BannerId(_Identifier):
    """Unique identifier for a PromoBanner."""


@dataclass(frozen=True)
class UserId:
    """Identifier issued by the identity gateway."""

    value: int

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=int(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Money:
    """Price in the minor currency unit."""

    amount: int

    def __post_init__(self) -> None:
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise ValueError("Money amount must be an integer")
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")

    def __add__(self, other: "Money") -> "Money":
        return Money(self.amount + other.amount)

    def __mul__(self, factor: int) -> "Money":
        return Money(self.amount * factor)

    def __str__(self) -> str:
        return f"{self.amount:,}"


@dataclass(frozen=True)
class Capacity:
    """Non-negative integer representing capacity."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Capacity cannot be negative")


@dataclass(frozen=True)
class QrCode:
    """Opaque, unguessable check-in token."""

    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise ValueError("QR code cannot be blank")

    @classmethod
    def generate(cls) -> Self:
        return cls(value=QR_CODE_PREFIX + secrets.token_urlsafe(QR_CODE_ENTROPY_BYTES))

    def __str__(self) -> str:
        return self.value

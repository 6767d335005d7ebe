"""Domain enumerations and state-transition rules."""

import enum


class BookingStatus(str, enum.Enum):
    PENDING = "PENDING"
    BIDDING = "BIDDING"
    ACCEPTED = "ACCEPTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


# State machine: maps current status -> set of valid next statuses
BOOKING_TRANSITIONS: dict[BookingStatus, set[BookingStatus]] = {
    BookingStatus.PENDING: {BookingStatus.BIDDING},
    BookingStatus.BIDDING: {BookingStatus.ACCEPTED},
    BookingStatus.ACCEPTED: {BookingStatus.IN_PROGRESS},
    BookingStatus.IN_PROGRESS: {BookingStatus.COMPLETED},
    BookingStatus.COMPLETED: set(),
}

OPEN_FOR_BIDDING: frozenset[BookingStatus] = frozenset(
    {BookingStatus.PENDING, BookingStatus.BIDDING}
)


class TruckType(str, enum.Enum):
    MINI = "Mini Truck (1T)"
    LCV = "LCV (2.5T)"
    FT14 = "14ft Truck"
    FT20 = "20ft Container"
    FT32 = "32ft Container"


class SenderRole(str, enum.Enum):
    CUSTOMER = "CUSTOMER"
    DRIVER = "DRIVER"
    FLEET_OWNER = "FLEET_OWNER"


class TruckStatus(str, enum.Enum):
    IDLE = "IDLE"
    ACTIVE = "ACTIVE"
    MAINTENANCE = "MAINTENANCE"


class AlertType(str, enum.Enum):
    OVERDUE = "overdue"
    UPCOMING = "upcoming"


MATERIALS: tuple[str, ...] = (
    "Household Goods",
    "FMCG",
    "Steel / Iron",
    "Cement / Construction",
    "Electronics",
    "Textiles",
    "Perishables (Fruits/Veg)",
)

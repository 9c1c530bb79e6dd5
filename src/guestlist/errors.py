class GuestListError(Exception):
    """Base class for every refusal the guest list raises."""


class PermissionDeniedError(GuestListError):
    """Raised when the actor lacks the capability a mutation requires."""

    def __init__(self, capability: str) -> None:
        self.capability = capability
        super().__init__(f"Permission denied: {capability}")


class NotFoundError(GuestListError):
    entity = "Entity"

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"{self.entity} '{identifier}' not found")


class EventNotFoundError(NotFoundError):
    entity = "Event"


class GuestNotFoundError(NotFoundError):
    entity = "Guest"


class PromoterNotFoundError(NotFoundError):
    entity = "Promoter"


class UserNotFoundError(NotFoundError):
    entity = "User"


class CapacityExceededError(GuestListError):
    """Raised when public registration is attempted on a full event."""

    def __init__(self, event_id: str, max_capacity: int) -> None:
        self.event_id = event_id
        self.max_capacity = max_capacity
        super().__init__(f"Event '{event_id}' has reached its capacity of {max_capacity}")


class QuotaExceededError(GuestListError):
    def __init__(self, promoter_id: str, guest_quota: int) -> None:
        self.promoter_id = promoter_id
        self.guest_quota = guest_quota
        super().__init__(f"Promoter '{promoter_id}' reached the guest quota of {guest_quota}")


class InvalidTransitionError(GuestListError):
    """Raised when an operation is not allowed from the entity's current state."""


class FeatureDisabledError(GuestListError):
    def __init__(self, event_id: str, feature: str) -> None:
        self.event_id = event_id
        self.feature = feature
        super().__init__(f"'{feature}' is disabled for event '{event_id}'")


class CodeGenerationError(GuestListError):
    """Raised when no collision-free confirmation identifier could be produced."""


class StorageError(GuestListError):
    """Raised when the blob store cannot be read or written."""

# Domain exceptions raised by the interactions service layer.
# The controller layer catches these and converts them to HTTPException.


class ItemNotFoundError(Exception):
    def __init__(self, item_id) -> None:
        self.item_id = item_id
        super().__init__(f"Item {item_id} not found")


class TenantIsolationError(Exception):
    """The item belongs to a different city than the caller's."""

    def __init__(self, item_id, caller_city_id: str, item_city_id: str) -> None:
        self.item_id = item_id
        self.caller_city_id = caller_city_id
        self.item_city_id = item_city_id
        super().__init__(
            f"Item {item_id} belongs to city {item_city_id}, caller is in {caller_city_id}"
        )


class InvalidDurationError(Exception):
    """View duration must be a finite, non-negative number of seconds."""
    pass

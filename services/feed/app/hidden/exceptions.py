# Domain exceptions raised by the hidden-items / content-report service layer.
# The controller layer catches these and converts them to HTTPException.


class PermanentlyHiddenError(Exception):
    """The user reported this item, so it stays hidden for them."""
    pass


class AlreadyReportedError(Exception):
    pass


class SelfReportError(Exception):
    """Raised when a user tries to report their own item."""
    pass

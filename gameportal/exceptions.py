"""Domain errors raised by the service layer."""


class ResourceNotFoundError(Exception):
    """The referenced resource does not exist."""

    def __init__(self, resource: str, resource_id: str):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} not found")


class ConflictError(Exception):
    """A unique key (e.g. a page slug) is already taken."""

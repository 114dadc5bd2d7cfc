"""Command framework exceptions."""


class CommandError(Exception):
    """Expected, user-facing failure while interpreting a command.

    Raised for malformed arguments, failed lookups, missing permissions and
    bad argument counts. The message is shown to the caller as-is.
    """

    pass


class EntityNotFoundError(LookupError):
    """Raised by a directory service when an id does not resolve."""

    def __init__(self, kind: str, entity_id: str):
        super().__init__(f"{kind} {entity_id} not found")
        self.kind = kind
        self.entity_id = entity_id

"""Exceptions raised by TaskOrbit."""


class InvalidArgumentError(ValueError):
    """Raised when a caller passes malformed criteria or arguments."""


class NotFoundError(KeyError):
    """Raised when an entity id does not exist in the data store."""

    def __init__(self, kind: str, entity_id: str):
        super().__init__(f"{kind} '{entity_id}' not found")
        self.kind = kind
        self.entity_id = entity_id

    def __str__(self) -> str:
        return self.args[0]

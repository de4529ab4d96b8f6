from __future__ import annotations


class ReadOnlyViolation(TypeError):
    """
    Raised when a mutating operation is attempted on a read-only collection.

    This is a programming error on the caller's side: the operation is rejected before the
    underlying collection is touched, so nothing is ever partially applied.

    Attributes:
        action (str):
            Human-readable description of the attempted action, e.g. "add an element to".
    """

    def __init__(self, action: str):
        super().__init__(f"Could not {action} read-only collection.")
        self.action = action

    @classmethod
    def invalid_access(cls, action: str) -> ReadOnlyViolation:
        return cls(action)


class UnsupportedCapability(TypeError):
    """
    Raised when an operation needs a capability the wrapped collection does not implement.

    Attributes:
        capability (str):
            Name of the required capability protocol, e.g. "Queryable".
        collection_type (type):
            Concrete type of the collection lacking the capability.
        operation (str):
            Name of the operation that was called.
    """

    def __init__(self, capability: str, collection_type: type, operation: str):
        super().__init__(
            f"Collection {collection_type.__name__} does not implement {capability}, "
            f"so you cannot call {operation}() over it."
        )
        self.capability = capability
        self.collection_type = collection_type
        self.operation = operation

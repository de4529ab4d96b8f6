from typing import Type, TypeVar, Tuple, cast

from ro_collections.containers.read_only.read_only_errors import UnsupportedCapability

T = TypeVar('T')

def format_type_name(tp: Type[object] | Tuple[Type[object], ...]) -> str:
    """
    Helper to format type names nicely for error messages.
    """
    if isinstance(tp, tuple):
        return ", ".join(t.__name__ for t in tp)
    return tp.__name__

def require_capability(capability: Type[T], obj: object, operation: str) -> T:
    """
    Check that an object implements a capability protocol before using it as such.

    The check is **shallow**: `capability` must be a `@runtime_checkable` protocol (or any
    class), and only the presence of its members is verified, not their signatures.

    Args:
        capability (Type[T]):
            The protocol or class the object must implement.
        obj (object):
            The object to check.
        operation (str):
            Name of the operation requiring the capability, used in the error message.

    Returns:
        T:
            `obj`, narrowed to the capability type.

    Raises:
        UnsupportedCapability:
            If `obj` does not implement `capability`.

    Example:
        >>> require_capability(Queryable, ArrayCollection(), "matching")
        ArrayCollection({})

        >>> require_capability(Queryable, [1, 2], "matching")
        UnsupportedCapability: Collection list does not implement Queryable, so you cannot call
        matching() over it.
    """
    if not isinstance(obj, capability):
        raise UnsupportedCapability(format_type_name(capability), type(obj), operation)

    # generic protocols lose their type arguments at runtime
    return cast(T, obj)

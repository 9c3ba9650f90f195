class InvalidKeyType(TypeError):
    """
    Raised when a value that cannot be weakly referenced (e.g. `int`, `str`,
    `tuple` or `None`) is used as an element of an `IterableWeakSet`.
    """


class ReclamationError(RuntimeError):
    """
    Raised by the next operation on an `IterableWeakSet` after one of its
    reclamation callbacks failed. This always indicates a bug in the container
    bookkeeping rather than in user code.
    """


class ReclamationWarning(RuntimeWarning):
    """
    Emitted as soon as a reclamation callback fails, since the failure happens
    outside of any user-facing call and would otherwise only be printed by the
    garbage collector.
    """


class BaseTypeError(BaseException):
    """
    A base class for type-related errors that derives from `BaseException`
    so we can bypass the generic `Exception` handlers (e.g. for typing generics
    that swallow errors raised when `__orig_class__` is set). Where possible,
    `TypeError` should be used instead.
    """


class ItemTypeError(TypeError):
    """
    Raised when an element does not match the item type of a parameterized
    container, e.g. when adding a `str` to an `IterableWeakSet[Foo]`.
    """


class ItemTypeParameterError(BaseTypeError):
    """
    Raised when existing elements do not match the item type a container is
    parameterized with, e.g. `IterableWeakSet[Foo]([bar])`. Since this happens
    while `__orig_class__` is being set, it cannot be an `ItemTypeError`.
    """

import itertools
import weakref
from typing import Any, Optional


class WeakHandle(weakref.ref):
    """
    A non-owning reference to exactly one element.

    CPython hands out the same `weakref.ref` instance for repeated
    `weakref.ref(obj)` calls when no callback is supplied; subclass instances
    are never shared, so every insertion into a container gets a handle of its
    own. Handles hash and compare by identity.
    """

    __slots__ = ()

    def resolve(self) -> Optional[Any]:
        """
        Return the referenced element, or `None` if it has been reclaimed. Once
        `None` has been returned, it will be returned forever after.
        """
        return self()

    @property
    def alive(self) -> bool:
        return self() is not None

    __hash__ = object.__hash__

    def __eq__(self, other):
        return self is other

    def __ne__(self, other):
        return self is not other

    def __repr__(self):
        element = self()
        if element is None:
            return f"<{self.__class__.__name__} at {hex(id(self))}; dead>"
        return f"<{self.__class__.__name__} at {hex(id(self))}; to {type(element).__name__!r} at {hex(id(element))}>"


class Token:
    """
    An opaque cancellation key for a pending reclamation subscription.

    Tokens are unique by identity. Each carries a strictly increasing `serial`
    (process-wide), which orders entries for traversal but has no other
    meaning.
    """

    __slots__ = ("serial",)
    _serials = itertools.count(1)

    def __init__(self):
        self.serial = next(Token._serials)

    def __repr__(self):
        return f"<Token #{self.serial}>"

import weakref
from collections.abc import MutableMapping
from typing import Any

from iterable_weakset.types import WeakHandle


class IdentityRef:
    """
    A hashable stand-in for an object that compares by the identity of the
    object rather than by its `__eq__`, and works for unhashable objects.

    `weakref.ref(obj)` hands back the same basic reference for as long as one
    exists, so two `IdentityRef` instances for the same live object share
    `_ref` and hence compare equal.
    """

    __slots__ = ("_ref", "__weakref__")

    def __init__(self, obj: Any):
        self._ref = weakref.ref(obj)

    def __hash__(self):
        return id(self._ref)

    def __eq__(self, other):
        return isinstance(other, IdentityRef) and self._ref is other._ref


class WeakIdentityIndex(MutableMapping):
    """
    A mapping from objects to the `WeakHandle` instances that reference them,
    keyed by object identity rather than by equality.

    `weakref.WeakKeyDictionary` uses `__hash__` and `__eq__` of its keys, so on
    its own it would merge distinct-but-equal objects and reject unhashable
    ones. Instead, each object is represented by an `IdentityRef`, which is
    held strongly by `_refs` (a `WeakValueDictionary` whose values are the
    objects themselves) and weakly by `_handles`. When an object is reclaimed,
    `_refs` drops its entry, the `IdentityRef` is released and `_handles` drops
    the handle in turn; no bookkeeping of our own is involved.
    """

    def __init__(self):
        self._refs = weakref.WeakValueDictionary()
        self._handles = weakref.WeakKeyDictionary()

    def __getitem__(self, obj: Any) -> WeakHandle:
        try:
            return self._handles[IdentityRef(obj)]
        except TypeError:
            raise KeyError(obj) from None

    def __setitem__(self, obj: Any, handle: WeakHandle):
        if handle.resolve() is not obj:
            raise ValueError(f"Handle {handle!r} does not reference {obj!r}.")
        ref = IdentityRef(obj)
        self._refs[ref] = obj
        self._handles[ref] = handle

    def __delitem__(self, obj: Any):
        try:
            ref = IdentityRef(obj)
        except TypeError:
            raise KeyError(obj) from None
        del self._handles[ref]
        del self._refs[ref]

    def __contains__(self, obj: Any) -> bool:
        try:
            return IdentityRef(obj) in self._handles
        except TypeError:
            return False

    def __iter__(self):
        yield from self._refs.values()

    def __len__(self):
        return len(self._refs)

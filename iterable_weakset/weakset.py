import weakref
from collections.abc import MutableSet, Set
from contextlib import contextmanager
from typing import (
    Any,
    Callable,
    Generic,
    Iterable,
    Iterator,
    List,
    Optional,
    Tuple,
    TypeVar,
)

from iterable_weakset.errors import (
    InvalidKeyType,
    ItemTypeError,
    ItemTypeParameterError,
    ReclamationError,
)
from iterable_weakset.notifier import ReclamationNotifier
from iterable_weakset.reference_log import ReferenceLog
from iterable_weakset.types import MISSING, Token, WeakHandle
from iterable_weakset.utils.type_checking import check_type, type_label
from iterable_weakset.utils.weakref_index import WeakIdentityIndex

ItemType = TypeVar("ItemType")


class IterableWeakSet(
    Generic[ItemType], MutableSet
):  # pylint: disable=too-many-ancestors
    """
    A set-like container that only weakly references its elements, and which
    (unlike `weakref.WeakSet`) iterates in insertion order and compares its
    elements by identity rather than equality. Elements disappear from the
    container once they are no longer referenced elsewhere, without any
    explicit removal.

    Complexity:
    - O(1) `add`, `has`/`in` and `delete`/`discard`
    - O(n) `len`/`size`, which count live elements by iterating

    Under the hood this is implemented using three structures:
    - a membership index, mapping (by identity) each element to a weak handle
      referencing it, which backs `has` and deduplication;
    - a reference log, mapping each handle to a token in insertion order,
      which backs iteration and size;
    - a reclamation notifier, which removes the log entries of reclaimed
      elements in the background, using the tokens as cancellation keys.

    Reclaimed elements are never returned by any method: iteration prunes
    stale entries it encounters, so correctness does not depend on when (or
    whether) the garbage collector reports reclamation. Reclamation reports
    that arrive while an operation is underway are staged and applied once it
    completes.

    Args:
        iterable: An optional iterable of elements with which to populate the
            new `IterableWeakSet` instance. Duplicates (by identity) are
            ignored.

    Raises:
        InvalidKeyType: When any element cannot be weakly referenced.
    """

    def __init__(self, iterable: Optional[Iterable[ItemType]] = None):
        self._type = self.__class__
        self._index = WeakIdentityIndex()
        self._log = ReferenceLog()
        self._pending_removals: List[Tuple[WeakHandle, Token]] = []
        self._depth = 0

        # The notifier callback must not keep the container alive.
        def _remove(handle, token, selfref=weakref.ref(self)):
            self = selfref()  # pylint: disable=redefined-outer-name
            if self is not None:
                self._pending_removals.append((handle, token))
                if not self._depth:
                    self._commit_removals()

        self._notifier = ReclamationNotifier(_remove)
        self._finalizer = weakref.finalize(self, self._notifier.unregister_all)
        self._finalizer.atexit = False

        if iterable is not None:
            for item in iterable:
                self.add(item)

    # Public API

    @property
    def size(self) -> int:
        """
        The number of live elements. This is computed by iterating over the
        container, since not all reclaimed elements may have been purged yet.
        """
        return sum(1 for _ in self)

    def has(self, value: ItemType) -> bool:
        """
        Check whether `value` (by identity) is in this container.

        Raises:
            InvalidKeyType: If `value` cannot be weakly referenced.
        """
        with self._operation():
            self._validate_key(value)
            return value in self._index

    def add(self, value: ItemType) -> "IterableWeakSet[ItemType]":
        """
        Append `value` to the end of this container, unless it is already
        present (in which case its position is unchanged).

        Returns:
            This container, to allow chaining.
        """
        with self._operation():
            self._validate_item(value)
            if value not in self._index:
                handle = WeakHandle(value)
                token = self._log.append(handle)
                self._index[value] = handle
                self._notifier.register(value, handle, token)
        return self

    def delete(self, value: ItemType) -> bool:
        """
        Remove `value` from this container, if present.

        Returns:
            `True` if `value` was present and has been removed, or `False`
            otherwise.
        """
        with self._operation():
            self._validate_key(value)
            handle = self._index.get(value)
            if handle is None:
                return False
            del self._index[value]
            token = self._log.token_for(handle)
            if token is not None:
                self._notifier.unregister(token)
                self._log.remove(handle, token)
            return True

    def discard(self, value: ItemType):
        self.delete(value)

    def clear(self):
        for value in self:
            self.delete(value)

    def for_each(self, callback: Callable[..., Any], context: Any = MISSING):
        """
        Call `callback(value, key, container)` for each live element, in
        insertion order. Since this is a set, `key` is always `value`.

        Args:
            callback: The callable to invoke for each element.
            context: If provided, the object to pass as the first argument to
                each invocation of `callback`, i.e. `callback(context, value,
                key, container)`. This allows (e.g.) an unbound method to be
                applied on behalf of `context`.
        """
        for value in self:
            if context is MISSING:
                callback(value, value, self)
            else:
                callback(context, value, value, self)

    def entries(self) -> Iterator[Tuple[ItemType, ItemType]]:
        """
        Iterate over `(value, value)` pairs for each live element, in insertion
        order, mirroring the key/value duality of other collections.
        """
        for value in self:
            yield value, value

    def copy(self) -> "IterableWeakSet[ItemType]":
        return self._type(self)

    __copy__ = copy

    # MutableSet implementation

    def __contains__(self, value: Any) -> bool:
        try:
            return self.has(value)
        except InvalidKeyType:
            return False

    def __iter__(self) -> Iterator[ItemType]:
        traversal = self._log.traverse()
        while True:
            with self._operation():
                value = self._advance(traversal)
            if value is MISSING:
                return
            yield value

    keys = values = __iter__

    def __len__(self):
        return self.size

    # Set comparisons
    # The `Set` mixins test membership with `value in other`, which raises for
    # unhashable elements when `other` is hash-based (e.g. `set`).

    def __le__(self, other):
        if not isinstance(other, Set):
            return NotImplemented
        if len(self) > len(other):
            return False
        return all(self._is_member(value, other) for value in self)

    def __sub__(self, other):
        if not isinstance(other, Set):
            if not isinstance(other, Iterable):
                return NotImplemented
            other = self._from_iterable(other)
        return self._from_iterable(
            value for value in self if not self._is_member(value, other)
        )

    # Magic methods

    def __repr__(self):
        return f"{type_label(self._type)}({list(self)!r})"

    def __reduce__(self):
        raise TypeError(f"Cannot pickle `{type_label(self._type)}` instances.")

    # Hooks

    @property
    def __orig_class__(self):
        """
        This is set after construction by the `Generic` constructor wrapper if
        there were any type vars set.
        """
        return self._type  # pragma: no cover

    @__orig_class__.setter
    def __orig_class__(self, type_):
        self._type = type_
        try:
            for item in self:
                self._validate_item(item)
        except ItemTypeError as e:
            raise ItemTypeParameterError(str(e)) from None

    # Helpers

    def _validate_key(self, value: Any):
        try:
            weakref.ref(value)
        except TypeError:
            raise InvalidKeyType(
                f"Invalid element. Got: `{repr(value)}`; `{type_label(type(value))}` "
                "instances cannot be weakly referenced."
            ) from None

    def _validate_item(self, value: Any):
        self._validate_key(value)
        if hasattr(self._type, "__args__"):
            (item_type,) = self._type.__args__
            if not check_type(value, item_type):
                raise ItemTypeError(
                    f"Invalid item type. Got: `{repr(value)}`; Expected instance of: `{type_label(item_type)}`."
                )

    @staticmethod
    def _is_member(value: Any, container: Set) -> bool:
        try:
            return value in container
        except TypeError:
            return False

    def _advance(self, traversal: Iterator[Tuple[WeakHandle, Token]]) -> Any:
        """
        Step `traversal` to the next live element, pruning any stale entries
        along the way. Returns `MISSING` when the traversal is exhausted.
        """
        for handle, token in traversal:
            value = handle.resolve()
            if value is not None:
                return value
            self._forget(handle, token)
        return MISSING

    def _forget(self, handle: WeakHandle, token: Token):
        self._notifier.unregister(token)
        self._log.remove(handle, token)

    @contextmanager
    def _operation(self):
        """
        Mark the duration of a public operation. Reclamation reports arriving
        in the meantime are only staged, and are committed once the outermost
        operation completes.
        """
        if not self._depth:
            failure = self._notifier.pop_failure()
            if failure is not None:
                raise ReclamationError(
                    "The bookkeeping of this container failed to process a "
                    "reclaimed element."
                ) from failure
            self._commit_removals()
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1
            if not self._depth:
                self._commit_removals()

    def _commit_removals(self):
        self._depth += 1
        try:
            while self._pending_removals:
                self._forget(*self._pending_removals.pop())
        finally:
            self._depth -= 1

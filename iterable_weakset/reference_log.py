from typing import Dict, Iterator, Optional, Tuple

from iterable_weakset.types import Token, WeakHandle


class ReferenceLog:
    """
    The insertion-ordered record of `(handle, token)` pairs backing a weak
    container. It holds both handles and tokens strongly, and is the source of
    truth for iteration order; entries are only ever removed explicitly.

    Since handles may go stale (and be pruned) at any point during a
    traversal, `traverse` works on snapshots of the underlying `dict` with a
    cursor over token serials rather than iterating it directly. This makes
    traversals immune to "dictionary changed size during iteration" errors
    while keeping native insertion-ordered semantics: entries removed ahead of
    the cursor are skipped and entries appended behind it are surfaced.
    """

    def __init__(self):
        self._entries: Dict[WeakHandle, Token] = {}
        self._last_serial = 0

    def append(self, handle: WeakHandle) -> Token:
        """
        Append a new entry for `handle`, returning the freshly allocated token
        for it.
        """
        if handle in self._entries:
            raise ValueError(f"{handle!r} is already present in this log.")
        token = Token()
        self._entries[handle] = token
        self._last_serial = token.serial
        return token

    def remove(
        self, handle: WeakHandle, token: Optional[Token] = None
    ) -> Optional[Token]:
        """
        Remove the entry for `handle`, if present (and, if `token` is provided,
        only if the entry still carries that token).

        Returns:
            The token of the removed entry, or `None` if nothing was removed.
        """
        current = self._entries.get(handle)
        if current is None or token is not None and current is not token:
            return None
        del self._entries[handle]
        return current

    def token_for(self, handle: WeakHandle) -> Optional[Token]:
        return self._entries.get(handle)

    def traverse(self) -> Iterator[Tuple[WeakHandle, Token]]:
        """
        Lazily yield the `(handle, token)` entries present in this log, in
        insertion order, each at most once. Stale handles are yielded too; it
        is up to the caller to resolve and prune them.
        """
        cursor = 0
        while cursor < self._last_serial:
            batch = [
                (handle, token)
                for handle, token in list(self._entries.items())
                if token.serial > cursor
            ]
            if not batch:
                return
            for handle, token in batch:
                cursor = token.serial
                if self._entries.get(handle) is token:
                    yield handle, token

    def __contains__(self, handle: WeakHandle) -> bool:
        return handle in self._entries

    def __len__(self):
        """
        The raw number of entries, which may include stale ones.
        """
        return len(self._entries)

    def __repr__(self):
        return f"ReferenceLog({list(self._entries.items())!r})"

import warnings
import weakref
from typing import Any, Callable, Dict, List, Optional

from iterable_weakset.errors import ReclamationWarning
from iterable_weakset.types import Token


class ReclamationNotifier:
    """
    Token-keyed subscriptions to the reclamation of objects, built on
    `weakref.finalize`.

    Each call to `register` arranges for `callback(held, token)` to be called
    at some point after `target` is reclaimed, and can be cancelled ahead of
    time with `unregister(token)`. Subscriptions are never run at interpreter
    exit.

    The notifier itself holds `callback` strongly, and the finalizers hold the
    notifier strongly; callbacks which close over their owner should therefore
    only keep weak references to it, lest the owner be kept alive by the
    elements it tracks.

    Failures raised by `callback` cannot propagate anywhere useful (they happen
    inside the garbage collector), so they are reported with a
    `ReclamationWarning` and kept in `failures` for the owner to act on.

    Args:
        callback: The callable to invoke, with the held payload and the token,
            for every reclaimed target.
    """

    def __init__(self, callback: Callable[[Any, Token], None]):
        self.callback = callback
        self.failures: List[BaseException] = []
        self._subscriptions: Dict[Token, weakref.finalize] = {}

    def register(self, target: Any, held: Any, token: Token):
        """
        Subscribe to the reclamation of `target`.

        Args:
            target: The object whose reclamation should be reported.
            held: The payload passed to the callback. It must not reference
                `target` strongly, or `target` will never be reclaimed.
            token: The key with which the subscription can be cancelled.
        """
        if token in self._subscriptions:
            raise ValueError(f"{token!r} is already registered.")
        finalizer = weakref.finalize(target, self._fire, held, token)
        finalizer.atexit = False
        self._subscriptions[token] = finalizer

    def unregister(self, token: Token) -> bool:
        """
        Cancel the subscription keyed by `token`. Cancelling a subscription
        that already fired (or was already cancelled) is a no-op.

        Returns:
            Whether a pending subscription was cancelled.
        """
        finalizer = self._subscriptions.pop(token, None)
        if finalizer is None:
            return False
        return finalizer.detach() is not None

    def unregister_all(self):
        while self._subscriptions:
            _, finalizer = self._subscriptions.popitem()
            finalizer.detach()

    def pop_failure(self) -> Optional[BaseException]:
        if self.failures:
            return self.failures.pop(0)
        return None

    def _fire(self, held: Any, token: Token):
        self._subscriptions.pop(token, None)
        try:
            self.callback(held, token)
        except Exception as e:  # pylint: disable=broad-except
            self.failures.append(e)
            warnings.warn(
                f"Reclamation callback for {token!r} failed: {e!r}.",
                ReclamationWarning,
                stacklevel=2,
            )

    def __contains__(self, token: Token) -> bool:
        return token in self._subscriptions

    def __len__(self):
        return len(self._subscriptions)

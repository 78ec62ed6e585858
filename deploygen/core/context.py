"""
Request context — namespace, identity and cancellation for one call.

The generator never inspects the context beyond its namespace; it hands
it to every store call so stores can scope lookups and honour
cancellation:

    ctx = RequestContext(namespace="web")
    generator.generate(ctx, "frontend")

Cancellation is cooperative.  ``cancel()`` flips a shared event and the
next ``check()`` raises ``ContextCancelledError``.  Derived contexts
(``with_namespace``) share the parent's event, so cancelling the parent
cancels them too.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace

from deploygen.core.errors import ContextCancelledError


@dataclass(frozen=True)
class RequestContext:
    """Per-request values propagated to store calls."""

    namespace: str = ""
    user: str = ""
    _cancel_event: threading.Event = field(
        default_factory=threading.Event, repr=False, compare=False,
    )

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def cancel(self) -> None:
        """Mark this context (and every context derived from it) cancelled."""
        self._cancel_event.set()

    def check(self) -> None:
        """Raise if the context has been cancelled."""
        if self._cancel_event.is_set():
            raise ContextCancelledError()

    def with_namespace(self, namespace: str) -> RequestContext:
        """Return a context scoped to another namespace."""
        if not namespace or namespace == self.namespace:
            return self
        return replace(self, namespace=namespace)

"""Error types raised by the routing core.

Both are fatal: callers are expected to let them propagate.  They exist to
surface programming-contract violations (a move generator that addressed a
depot, a pass that left a route structurally broken) as early as possible.
"""


class InvalidOperationError(ValueError):
    """A Route primitive was called with indexes that break its contract."""


class InvariantViolationError(RuntimeError):
    """A solution failed its structural validity check after an optimizer pass."""

"""Custom exceptions for the trend mining engine.

Custom exceptions let the HTTP and CLI layers decide how to present a failure
without knowing where in the mining pipeline it happened:

1. Configuration errors are the caller's fault and are rejected before mining
2. Upstream errors mean the registry or record store failed; nothing partial
   is returned because patterns without a run id (or a run id without
   patterns) are not useful
3. Missing saved patterns are reported as "not found"

Data-quality gaps (a missing feature value, a null outcome) are deliberately
NOT exceptions. They are absorbed by the discretizer's "null" bin and by the
rule that anything not truthy is not a win.

Inheritance Pattern:
Exceptions also inherit from the matching builtin (ValueError, LookupError)
so callers can catch either the specific exception or the broader one.

Usage Examples:
- raise InvalidModelConfigError("selected_features must not be empty")
- raise UpstreamError(f"Failed to save model: {e}") from e
- raise PatternNotFoundError(f"Saved pattern {pattern_id} not found")
"""


class TrendMinerError(Exception):
    """Base class for all trend mining errors."""


class InvalidModelConfigError(TrendMinerError, ValueError):
    """Raised when a mining request is not usable as given.

    Common Scenarios:
    - Blank model_name
    - Empty selected_features, or the same feature listed twice
    - Empty target

    Unrecognized target names are NOT rejected here; they pass through to the
    outcome lookup and simply never count as wins.
    """


class UpstreamError(TrendMinerError):
    """Raised when the model registry or the record store fails.

    Not retried. The original exception is chained with ``raise ... from e``
    and its message is surfaced to the caller as the failure details.
    """


class PatternNotFoundError(TrendMinerError, LookupError):
    """Raised when a saved pattern id does not exist."""

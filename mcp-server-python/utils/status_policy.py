"""
Transition rules for application statuses.

This module decides which statuses an application may move to next:
- The current status is always a valid (noop) choice
- Applied can never be re-entered once left
- Interview stages only move forward (or stay)
- Offer, Rejected and Ghosted are reachable from anywhere in the pipeline
- Offer and Rejected only convert into each other
- Ghosted is recoverable: any status except Applied may follow it

The same rules back the advisory ``get_valid_next_statuses`` tool and the
authoritative check in ``update_application_status``.
"""

import logging
from typing import Any, Dict, List, Optional

from models.errors import create_illegal_transition_error, create_validation_error
from models.status import (
    DEFINITIVE_END_STATES,
    EXIT_STATUSES,
    ApplicationStatus,
    all_statuses,
    parse_status,
    rank_of,
    sorted_by_rank,
)

logger = logging.getLogger(__name__)


class TransitionResult:
    """Result of a transition policy check."""

    def __init__(
        self,
        allowed: bool,
        is_noop: bool = False,
        error_message: Optional[str] = None,
        allowed_targets: Optional[List[ApplicationStatus]] = None,
    ):
        """
        Initialize a transition result.

        Args:
            allowed: Whether the transition is allowed
            is_noop: Whether this is a no-op (target == current)
            error_message: Error message if transition is blocked
            allowed_targets: Legal targets from the current status, in rank order
        """
        self.allowed = allowed
        self.is_noop = is_noop
        self.error_message = error_message
        self.allowed_targets = allowed_targets or []

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary format."""
        result = {
            "allowed": self.allowed,
            "is_noop": self.is_noop,
            "allowed_targets": [s.value for s in self.allowed_targets],
        }
        if self.error_message:
            result["error_message"] = self.error_message
        return result


def _is_reachable(current: ApplicationStatus, target: ApplicationStatus) -> bool:
    """Rule check for a recognized, non-definitive current status."""
    if target == current:
        return True

    if target == ApplicationStatus.APPLIED:
        return False

    if target in EXIT_STATUSES:
        return True

    if current == ApplicationStatus.GHOSTED:
        return True

    # Applied and the interview stages only move up the rank order
    return rank_of(target) > rank_of(current)


def valid_next_statuses(current, strict: bool = False) -> List[ApplicationStatus]:
    """
    Compute the statuses an application in ``current`` may legally move to.

    Pure and deterministic; the result is ordered by ascending rank and
    always contains ``current`` itself.

    Args:
        current: Current status (ApplicationStatus or its display string)
        strict: Raise instead of failing open on an unrecognized status

    Returns:
        List of legal target statuses in ascending rank order

    Raises:
        ToolError: VALIDATION_ERROR if ``current`` is unrecognized and strict is set

    Examples:
        >>> [s.value for s in valid_next_statuses("Offer")]
        ['Offer', 'Rejected']

        >>> [s.value for s in valid_next_statuses("Final Interview")]
        ['Final Interview', 'Offer', 'Rejected', 'Ghosted']
    """
    status = parse_status(current)

    if status is None:
        if strict:
            raise create_validation_error(f"Unknown current status: '{current}'")
        logger.warning(
            "Unknown current status %r; returning every status as a valid next move", current
        )
        return all_statuses()

    if status in DEFINITIVE_END_STATES:
        return sorted_by_rank(DEFINITIVE_END_STATES)

    return [target for target in all_statuses() if _is_reachable(status, target)]


def validate_transition(current, target, strict: bool = False) -> TransitionResult:
    """
    Validate a status transition according to the transition rules.

    Args:
        current: The status currently recorded for the application
        target: The desired target status
        strict: Raise instead of failing open on an unrecognized current status

    Returns:
        TransitionResult indicating whether the transition is allowed

    Examples:
        >>> validate_transition("Applied", "Applied").is_noop
        True

        >>> validate_transition("Final Interview", "Screening Interview").allowed
        False
    """
    allowed_targets = valid_next_statuses(current, strict=strict)
    target_status = parse_status(target)

    if target_status is not None and target_status == parse_status(current):
        return TransitionResult(allowed=True, is_noop=True, allowed_targets=allowed_targets)

    if target_status in allowed_targets:
        return TransitionResult(allowed=True, is_noop=False, allowed_targets=allowed_targets)

    current_label = getattr(current, "value", current)
    target_label = getattr(target, "value", target)
    error_msg = (
        f"Transition from '{current_label}' to '{target_label}' is not allowed. "
        f"Allowed transitions from '{current_label}': "
        + ", ".join(f"'{s.value}'" for s in allowed_targets)
    )
    return TransitionResult(allowed=False, error_message=error_msg, allowed_targets=allowed_targets)


def check_transition_or_raise(current, target, strict: bool = False) -> TransitionResult:
    """
    Validate transition and raise ToolError if blocked.

    Convenience wrapper around validate_transition for the authority layer.

    Returns:
        TransitionResult if transition is allowed (including noop)

    Raises:
        ToolError: With ILLEGAL_TRANSITION code if transition is blocked
    """
    result = validate_transition(current, target, strict=strict)

    if not result.allowed:
        raise create_illegal_transition_error(
            current_status=getattr(current, "value", str(current)),
            target_status=getattr(target, "value", str(target)),
            allowed_statuses=[s.value for s in result.allowed_targets],
        )

    return result

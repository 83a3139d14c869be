"""
Application Status Workflow for IRRRL applications.

The transition table and the per-status side effects are fixed policy,
held in read-only module-level mappings. A requested transition outside
the table is rejected with a TransitionResult (never an exception) and
leaves the application untouched.

Callers must serialize transitions per application (one writer at a
time); prepare_for_underwriter in particular performs two transitions
that must not interleave with another writer.
"""

from collections import deque
from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import Callable, FrozenSet, List, Mapping, Optional

from irrrl_gateway.domain.entities import (
    Application,
    ApplicationStatus,
    ApplicationType,
    StatusTransitionRecord,
)

SYSTEM_ACTOR = "System"

S = ApplicationStatus

ALLOWED_TRANSITIONS: Mapping[ApplicationStatus, FrozenSet[ApplicationStatus]] = MappingProxyType({
    S.SUBMITTED: frozenset({S.AI_ANALYZING, S.PENDING_APPROVAL, S.CANCELLED}),
    S.AI_ANALYZING: frozenset({S.DOCUMENT_GATHERING, S.DECLINED, S.CANCELLED}),
    S.PENDING_APPROVAL: frozenset({S.AI_ANALYZING, S.DECLINED, S.CANCELLED}),
    S.DOCUMENT_GATHERING: frozenset({S.AI_PROCESSING, S.CANCELLED}),
    S.AI_PROCESSING: frozenset({S.FILE_PREPARATION, S.DOCUMENT_GATHERING, S.CANCELLED}),
    S.FILE_PREPARATION: frozenset({S.UNDERWRITER_READY, S.DOCUMENT_GATHERING, S.CANCELLED}),
    S.UNDERWRITER_READY: frozenset({S.IN_UNDERWRITING, S.CANCELLED}),
    S.IN_UNDERWRITING: frozenset({S.APPROVED, S.DECLINED, S.DOCUMENT_GATHERING, S.CANCELLED}),
    S.APPROVED: frozenset({S.CLOSED}),
    S.DECLINED: frozenset(),
    S.CANCELLED: frozenset(),
    S.CLOSED: frozenset(),
})

TERMINAL_STATUSES: FrozenSet[ApplicationStatus] = frozenset(
    status for status, allowed in ALLOWED_TRANSITIONS.items() if not allowed
)


@dataclass(frozen=True)
class TransitionResult:
    """
    Outcome of a requested status transition.

    Truthy when accepted. A rejected result carries the reason and no record.
    """

    accepted: bool
    from_status: ApplicationStatus
    to_status: ApplicationStatus
    reason: Optional[str] = None
    record: Optional[StatusTransitionRecord] = None

    def __bool__(self) -> bool:
        return self.accepted


def bypasses_manual_review(
    application_type: Optional[ApplicationType],
    current: ApplicationStatus,
    target: ApplicationStatus,
) -> bool:
    """Cash-out applications reach AIAnalyzing only through PendingApproval."""
    return (
        application_type == ApplicationType.CASH_OUT
        and target == S.AI_ANALYZING
        and current != S.PENDING_APPROVAL
    )


def can_transition(
    current: ApplicationStatus,
    target: ApplicationStatus,
    application_type: Optional[ApplicationType] = None,
) -> bool:
    """
    Check whether `target` is an allowed next status of `current`.

    Without `application_type` only the transition table is consulted.
    """
    if target not in ALLOWED_TRANSITIONS.get(current, frozenset()):
        return False
    return not bypasses_manual_review(application_type, current, target)


def valid_next_statuses(
    current: ApplicationStatus,
    application_type: Optional[ApplicationType] = None,
) -> List[ApplicationStatus]:
    """Allowed next statuses in workflow order."""
    return [
        status for status in ApplicationStatus
        if can_transition(current, status, application_type)
    ]


def is_terminal(status: ApplicationStatus) -> bool:
    return status in TERMINAL_STATUSES


def reachable_statuses(
    start: ApplicationStatus = ApplicationStatus.SUBMITTED,
) -> FrozenSet[ApplicationStatus]:
    """All statuses reachable from `start` (inclusive) via the transition table."""
    seen = {start}
    queue = deque([start])
    while queue:
        for nxt in ALLOWED_TRANSITIONS[queue.popleft()]:
            if nxt not in seen:
                seen.add(nxt)
                queue.append(nxt)
    return frozenset(seen)


# =============================================================================
# Side Effects (keyed by target status)
# =============================================================================

def _on_submitted(application: Application, at: datetime, actor: Optional[str], note: Optional[str]) -> None:
    application.submitted_at = at


def _on_approved(application: Application, at: datetime, actor: Optional[str], note: Optional[str]) -> None:
    application.approved_at = at
    application.approved_by = actor


def _on_declined(application: Application, at: datetime, actor: Optional[str], note: Optional[str]) -> None:
    application.decline_reason = note


def _on_closed(application: Application, at: datetime, actor: Optional[str], note: Optional[str]) -> None:
    application.completed_at = at
    application.actual_closing_date = at


SideEffect = Callable[[Application, datetime, Optional[str], Optional[str]], None]

SIDE_EFFECTS: Mapping[ApplicationStatus, SideEffect] = MappingProxyType({
    S.SUBMITTED: _on_submitted,
    S.APPROVED: _on_approved,
    S.DECLINED: _on_declined,
    S.CLOSED: _on_closed,
})


# =============================================================================
# Transitions
# =============================================================================

def submit(application: Application, now: Optional[datetime] = None) -> None:
    """Stamp a newly created application as submitted."""
    SIDE_EFFECTS[S.SUBMITTED](application, now or datetime.utcnow(), None, None)


def request_transition(
    application: Application,
    target: ApplicationStatus,
    actor: Optional[str] = None,
    note: Optional[str] = None,
    now: Optional[datetime] = None,
) -> TransitionResult:
    """
    Move an application to `target` if the transition table allows it
    and, for cash-out applications, manual review is not skipped.

    On acceptance the status is updated, a StatusTransitionRecord is
    appended and the side effect for the target status fires. On
    rejection nothing changes.

    Args:
        application: The application to transition
        target: Requested status
        actor: Identifier of the user or system making the change
        note: Optional free-text note stored on the record
        now: Transition timestamp (defaults to UTC now)

    Returns:
        TransitionResult describing acceptance or rejection
    """
    current = application.status

    if not can_transition(current, target, application.application_type):
        if is_terminal(current):
            reason = f"{current.value} is a terminal status"
        elif can_transition(current, target):
            reason = (
                f"cash_out applications must pass through "
                f"{S.PENDING_APPROVAL.value} before {target.value}"
            )
        else:
            reason = f"cannot transition from {current.value} to {target.value}"
        return TransitionResult(
            accepted=False,
            from_status=current,
            to_status=target,
            reason=reason,
        )

    at = now or datetime.utcnow()
    record = StatusTransitionRecord(
        from_status=current,
        to_status=target,
        changed_at=at,
        changed_by=actor,
        note=note,
    )

    application.status = target
    application.status_history.append(record)

    side_effect = SIDE_EFFECTS.get(target)
    if side_effect is not None:
        side_effect(application, at, actor, note)

    return TransitionResult(
        accepted=True,
        from_status=current,
        to_status=target,
        record=record,
    )


# =============================================================================
# Workflow Steps
# =============================================================================

def start_ai_analysis(application: Application, now: Optional[datetime] = None) -> TransitionResult:
    """
    Begin analysis of a submitted application.

    Cash-out applications are routed to manual review (PendingApproval);
    rate-and-term applications go straight to AIAnalyzing.
    """
    if application.application_type == ApplicationType.CASH_OUT:
        return request_transition(
            application,
            S.PENDING_APPROVAL,
            SYSTEM_ACTOR,
            "Cash-out application flagged for manual review",
            now,
        )

    return request_transition(
        application,
        S.AI_ANALYZING,
        SYSTEM_ACTOR,
        "Starting AI analysis for rate-and-term refinance",
        now,
    )


def complete_ai_analysis(application: Application, now: Optional[datetime] = None) -> TransitionResult:
    return request_transition(
        application,
        S.DOCUMENT_GATHERING,
        SYSTEM_ACTOR,
        "AI analysis complete. Action items generated for loan officer.",
        now,
    )


def start_document_gathering(application: Application, now: Optional[datetime] = None) -> TransitionResult:
    return request_transition(
        application,
        S.DOCUMENT_GATHERING,
        SYSTEM_ACTOR,
        "Document gathering phase started",
        now,
    )


def complete_document_gathering(application: Application, now: Optional[datetime] = None) -> TransitionResult:
    return request_transition(
        application,
        S.AI_PROCESSING,
        SYSTEM_ACTOR,
        "All required documents received. Starting AI processing.",
        now,
    )


def prepare_for_underwriter(
    application: Application,
    now: Optional[datetime] = None,
) -> List[TransitionResult]:
    """
    Move an application through FilePreparation to UnderwriterReady.

    The second transition is only attempted if the first is accepted.

    Returns:
        Results of the attempted transitions, in order
    """
    results = [
        request_transition(
            application,
            S.FILE_PREPARATION,
            SYSTEM_ACTOR,
            "Preparing final file package for underwriter",
            now,
        )
    ]
    if not results[0]:
        return results

    results.append(
        request_transition(
            application,
            S.UNDERWRITER_READY,
            SYSTEM_ACTOR,
            "File package complete and ready for underwriting",
            now,
        )
    )
    return results

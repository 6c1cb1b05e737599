from dataclasses import replace
from datetime import timedelta

from django.utils import timezone

from .enums import TermStatus
from ..config import (
    FAILURE_DELAY,
    FALLBACK_INTERVAL_DAYS,
    INTERVAL_DAYS,
    MAX_STAGE,
)


def interval_for_stage(stage: int) -> timedelta:
    if 0 <= stage < len(INTERVAL_DAYS):
        return timedelta(days=INTERVAL_DAYS[stage])
    return timedelta(days=FALLBACK_INTERVAL_DAYS)


def _transition(term, success: bool, now):
    if success:
        # Interval is looked up with the stage *before* promotion
        return replace(
            term,
            review_stage=min(MAX_STAGE, term.review_stage + 1),
            status=TermStatus.LEARNED,
            next_review_at=now + interval_for_stage(term.review_stage),
        )
    return replace(
        term,
        review_stage=0,
        status=TermStatus.LEARNING,
        next_review_at=now + FAILURE_DELAY,
    )


def apply_review_result(term, success: bool, clock=timezone.now):
    """
    Return a copy of ``term`` rescheduled after one quiz outcome.

    A success promotes the term one stage (capped at the top rung) and pushes
    the next review out by the interval of its current stage; a failure drops
    it back to stage 0 and brings it back in twelve hours.
    """
    return _transition(term, success, clock())


def apply_review_results(terms, outcomes, clock=timezone.now):
    """
    Apply a batch of outcomes to a term collection.

    Terms without an outcome pass through unchanged and outcomes that name an
    unknown term are dropped. The clock is read once for the whole batch.
    """
    results = {o.term_id: o.success for o in outcomes}
    if not results:
        return list(terms)

    now = clock()
    return [
        _transition(t, results[t.id], now) if t.id in results else t
        for t in terms
    ]


def produce_review_pool(terms, now, group_id=None):
    """In-memory form of the due-pool rule.

    ``data.repos.fetch_due_cards`` is the ORM form and must select the same
    terms in the same order.
    """
    pool = [t for t in terms if t.is_due(now)]
    if group_id is not None:
        pool = [t for t in pool if t.group_id == group_id]
    return sorted(pool, key=lambda t: t.next_review_at)

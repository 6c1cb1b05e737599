from dataclasses import dataclass
from typing import Optional

from django.db import transaction
from django.utils import timezone
import structlog

from ..data.repos import (
    create_session_record,
    fetch_cards,
    fetch_due_cards,
    get_group,
    get_session_for_update,
    get_session_record,
    save_cards,
    save_session,
)
from ..domain.enums import SessionState
from ..domain.logic import apply_review_results
from ..domain.session import ReviewSession, random_permutation
from ..domain.types import QuizItem

logger = structlog.get_logger()


@dataclass
class AnswerResult:
    session: ReviewSession
    correct: Optional[bool]
    item: Optional[QuizItem] = None

    @property
    def ignored(self):
        return self.correct is None


def record_outcomes(outcomes, clock=timezone.now):
    """
    Reschedule every stored term named in ``outcomes`` and persist the result.
    Outcomes for terms that no longer exist are skipped.
    """
    outcomes = list(outcomes)
    cards = fetch_cards(o.term_id for o in outcomes)
    updated = apply_review_results(cards, outcomes, clock=clock)
    saved = save_cards(updated)

    logger.info("outcomes_applied",
        outcome_count=len(outcomes),
        updated_count=saved,
        failed_count=sum(1 for o in outcomes if not o.success),
    )
    return updated


def due_cards(group_id=None, until=None, clock=timezone.now):
    if group_id is not None:
        get_group(group_id)
    return fetch_due_cards(until or clock(), group_id)


def start_session(group_id=None, shuffle=random_permutation, clock=timezone.now):
    if group_id is not None:
        get_group(group_id)

    pool = fetch_due_cards(clock(), group_id)
    session = ReviewSession(pool, shuffle=shuffle)
    record = create_session_record(session, group_id)

    logger.info("session_started",
        session_id=str(record.id),
        group_id=group_id,
        pool_size=len(pool),
        state=session.state.value,
    )
    return record, session


def load_session(session_id):
    record = get_session_record(session_id)
    return record, ReviewSession.restore(record.snapshot)


def answer_question(session_id, position, option, shuffle=random_permutation,
                    clock=timezone.now):
    """
    Score one answer for the presentation at ``position``.

    Answers for any other position (a repeated submit, a stale client) are
    ignored. When the answer exhausts the queue the session's outcomes are
    applied to the stored terms in the same transaction.
    """
    with transaction.atomic():
        record = get_session_for_update(session_id)
        emitted = []
        session = ReviewSession.restore(
            record.snapshot, shuffle=shuffle, on_complete=emitted.extend
        )

        if session.state != SessionState.PRESENTING or session.position != position:
            logger.info("answer_ignored",
                session_id=str(session_id),
                position=position,
                current_position=session.position,
                state=session.state.value,
            )
            return AnswerResult(session, None)

        item = session.current
        correct = session.answer(option)
        logger.info("answer_received",
            session_id=str(session_id),
            term_id=item.term_id,
            position=position,
            correct=correct,
            failures=session.failure_count(item.term_id),
        )

        applied = None
        if session.state == SessionState.FINISHED and not record.applied:
            record_outcomes(emitted, clock=clock)
            applied = True
            logger.info("session_finished",
                session_id=str(session_id),
                outcome_count=len(emitted),
                presentations=session.queue_length,
            )

        save_session(record, session, applied=applied)
    return AnswerResult(session, correct, item)


def abandon_session(session_id):
    with transaction.atomic():
        record = get_session_for_update(session_id)
        session = ReviewSession.restore(record.snapshot)
        if session.is_over:
            return record, session

        discarded = len(session.outcomes)
        session.abandon()
        save_session(record, session)

    logger.info("session_abandoned",
        session_id=str(session_id),
        discarded_outcomes=discarded,
    )
    return record, session

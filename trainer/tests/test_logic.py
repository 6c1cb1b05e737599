import logging
from datetime import datetime, timedelta, timezone

import pytest

from trainer.domain.enums import TermStatus
from trainer.domain.logic import (
    apply_review_result,
    apply_review_results,
    interval_for_stage,
    produce_review_pool,
)
from trainer.domain.types import ReviewOutcome, TermCard

logger = logging.getLogger(__name__)

NOW = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
DAY_MS = 86_400_000


def clock():
    return NOW


def make_card(term_id="t1", stage=0, status=TermStatus.NEW, due=NOW, group_id="default"):
    return TermCard(
        id=term_id,
        group_id=group_id,
        term=f"term-{term_id}",
        definition_cn=f"definition of {term_id}",
        wrong_definitions=("wrong a", "wrong b"),
        next_review_at=due,
        status=status,
        review_stage=stage,
    )


def delta_ms(card):
    return (card.next_review_at - NOW) / timedelta(milliseconds=1)


# Single transition

def test_success_at_stage_two_moves_to_three():
    """Stage 2 + correct answer -> stage 3, learned, due in 4 days."""
    card = apply_review_result(make_card(stage=2), True, clock=clock)

    assert card.review_stage == 3
    assert card.status == TermStatus.LEARNED
    assert card.next_review_at == NOW + timedelta(days=4)
    logger.info("✓ Passed: stage 2 success scheduled in 4 days")


def test_success_at_top_stage_stays_clamped():
    """Stage 5 + correct answer -> stage stays 5, due in 21 days."""
    card = apply_review_result(make_card(stage=5), True, clock=clock)

    assert card.review_stage == 5
    assert card.next_review_at == NOW + timedelta(days=21)


def test_failure_resets_to_stage_zero():
    """Stage 4 + wrong answer -> stage 0, learning, due in 12 hours."""
    card = apply_review_result(make_card(stage=4, status=TermStatus.LEARNED), False, clock=clock)

    assert card.review_stage == 0
    assert card.status == TermStatus.LEARNING
    assert card.next_review_at == NOW + timedelta(hours=12)


@pytest.mark.parametrize(
    "stage, days", [(0, 1), (1, 2), (2, 4), (3, 7), (4, 14), (5, 21)]
)
def test_success_interval_uses_stage_before_promotion(stage, days):
    card = apply_review_result(make_card(stage=stage), True, clock=clock)

    assert delta_ms(card) == days * DAY_MS


@pytest.mark.parametrize("stage", range(6))
def test_failure_always_waits_twelve_hours(stage):
    card = apply_review_result(make_card(stage=stage), False, clock=clock)

    assert card.review_stage == 0
    assert card.status == TermStatus.LEARNING
    assert delta_ms(card) == 12 * 3_600_000


def test_repeated_success_never_exceeds_top_stage():
    card = make_card()
    stages = []
    for _ in range(10):
        card = apply_review_result(card, True, clock=clock)
        stages.append(card.review_stage)

    assert stages == [1, 2, 3, 4, 5, 5, 5, 5, 5, 5]


def test_out_of_range_stage_falls_back_to_one_day():
    assert interval_for_stage(6) == timedelta(days=1)
    assert interval_for_stage(-1) == timedelta(days=1)


def test_transition_returns_new_record():
    original = make_card(stage=1)
    updated = apply_review_result(original, True, clock=clock)

    assert updated is not original
    assert original.review_stage == 1
    assert original.status == TermStatus.NEW
    assert updated.term == original.term
    assert updated.wrong_definitions == original.wrong_definitions


def test_consecutive_failures_is_left_alone():
    from dataclasses import replace

    card = replace(make_card(stage=3), consecutive_failures=2)

    assert apply_review_result(card, False, clock=clock).consecutive_failures == 2
    assert apply_review_result(card, True, clock=clock).consecutive_failures == 2


# Batch

def test_batch_only_touches_matching_terms():
    terms = [make_card("a", stage=1), make_card("b", stage=2), make_card("c", stage=3)]
    outcomes = [ReviewOutcome("a", True), ReviewOutcome("c", False)]

    updated = apply_review_results(terms, outcomes, clock=clock)

    assert [t.id for t in updated] == ["a", "b", "c"]
    assert updated[0].review_stage == 2
    assert updated[1] is terms[1]
    assert updated[2].review_stage == 0


def test_batch_ignores_unknown_term_ids():
    terms = [make_card("a")]

    updated = apply_review_results(terms, [ReviewOutcome("ghost", True)], clock=clock)

    assert updated == terms


def test_batch_reads_clock_once():
    calls = []

    def counting_clock():
        calls.append(1)
        return NOW

    terms = [make_card(str(i)) for i in range(5)]
    outcomes = [ReviewOutcome(str(i), i % 2 == 0) for i in range(5)]
    apply_review_results(terms, outcomes, clock=counting_clock)

    assert len(calls) == 1


def test_batch_order_of_outcomes_does_not_matter():
    terms = [make_card("a", stage=2), make_card("b", stage=4)]
    outcomes = [ReviewOutcome("a", True), ReviewOutcome("b", False)]

    forward = apply_review_results(terms, outcomes, clock=clock)
    backward = apply_review_results(terms, list(reversed(outcomes)), clock=clock)

    assert forward == backward


# Due pool

def test_review_pool_filters_due_terms_and_sorts_oldest_first():
    terms = [
        make_card("later", due=NOW - timedelta(hours=1)),
        make_card("future", due=NOW + timedelta(seconds=1)),
        make_card("oldest", due=NOW - timedelta(days=3)),
        make_card("exact", due=NOW),
    ]

    pool = produce_review_pool(terms, NOW)

    assert [t.id for t in pool] == ["oldest", "later", "exact"]


def test_review_pool_group_filter():
    terms = [
        make_card("a", group_id="g1", due=NOW - timedelta(hours=1)),
        make_card("b", group_id="g2", due=NOW - timedelta(hours=2)),
    ]

    assert [t.id for t in produce_review_pool(terms, NOW, group_id="g1")] == ["a"]
    assert [t.id for t in produce_review_pool(terms, NOW)] == ["b", "a"]


def test_review_pool_empty_group_id_is_a_filter():
    terms = [make_card("a", group_id="g1", due=NOW - timedelta(hours=1))]

    assert produce_review_pool(terms, NOW, group_id="") == []

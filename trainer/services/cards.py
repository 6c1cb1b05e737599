from django.utils import timezone
import structlog

from ..data.repos import (
    create_group,
    create_term,
    delete_group,
    delete_term,
    get_group,
    get_or_create_default_group,
    update_term_content,
)

logger = structlog.get_logger()


def accept_card(content, group_id=None, clock=timezone.now):
    """
    Store a generated card as a new term. The term starts at stage 0 and is
    due immediately. Without a group it lands in the default group.
    """
    group = get_group(group_id) if group_id else get_or_create_default_group()
    term = create_term(group, content, clock())

    logger.info("card_accepted",
        term_id=term.id,
        group_id=group.id,
        term=term.term,
        distractor_count=len(term.wrong_definitions),
    )
    return term


def edit_term(term_id, **fields):
    return update_term_content(term_id, **fields)


def remove_term(term_id):
    removed = delete_term(term_id)
    logger.info("term_deleted", term_id=term_id, removed=removed)
    return removed


def add_group(name, group_id=None, is_default=False):
    group = create_group(name, group_id, is_default)
    logger.info("group_created", group_id=group.id, name=group.name)
    return group


def remove_group(group_id):
    term_count = delete_group(group_id)
    logger.info("group_deleted", group_id=group_id, term_count=term_count)
    return term_count

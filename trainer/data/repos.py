from django.db import transaction
from django.utils import timezone

from .models import Group, ReviewSessionRecord, Term
from ..config import DEFAULT_GROUP_ID
from ..domain.enums import TermStatus
from ..domain.types import TermCard
from ..errors import DefaultGroupProtected

SCHEDULING_FIELDS = ["status", "next_review_at", "review_stage", "consecutive_failures"]
CONTENT_FIELDS = [
    "term",
    "phonetic",
    "term_translation",
    "definition_en",
    "definition_cn",
    "example",
    "wrong_definitions",
]


def to_card(term):
    return TermCard(
        id=term.id,
        group_id=term.group_id,
        term=term.term,
        phonetic=term.phonetic,
        term_translation=term.term_translation,
        definition_en=term.definition_en,
        definition_cn=term.definition_cn,
        example=term.example,
        wrong_definitions=tuple(term.wrong_definitions or ()),
        created_at=term.created_at,
        status=TermStatus(term.status),
        next_review_at=term.next_review_at,
        review_stage=term.review_stage,
        consecutive_failures=term.consecutive_failures,
    )


# Groups

def get_or_create_default_group():
    group, _ = Group.objects.get_or_create(
        id=DEFAULT_GROUP_ID, defaults={"name": "Default Group", "is_default": True}
    )
    return group


def get_group(group_id):
    return Group.objects.get(pk=group_id)


def list_groups():
    return list(Group.objects.all())


def create_group(name, group_id=None, is_default=False):
    kwargs = {"name": name, "is_default": is_default}
    if group_id:
        kwargs["id"] = group_id
    with transaction.atomic():
        return Group.objects.create(**kwargs)


def delete_group(group_id):
    """
    Delete a group and, through the foreign key cascade, all of its terms.
    Returns the number of terms removed.
    """
    group = Group.objects.get(pk=group_id)
    if group.is_default:
        raise DefaultGroupProtected(group_id)
    with transaction.atomic():
        term_count = group.terms.count()
        group.delete()
    return term_count


# Terms

def list_terms(group_id=None):
    qs = Term.objects.all()
    if group_id:
        qs = qs.filter(group_id=group_id)
    return list(qs.order_by("-created_at"))


def create_term(group, content, now):
    return Term.objects.create(
        group=group,
        status=TermStatus.NEW.value,
        review_stage=0,
        next_review_at=now,
        created_at=now,
        consecutive_failures=0,
        **{f: content[f] for f in CONTENT_FIELDS if f in content},
    )


def update_term_content(term_id, **fields):
    term = Term.objects.get(pk=term_id)
    changed = [f for f in CONTENT_FIELDS if f in fields]
    for f in changed:
        setattr(term, f, fields[f])
    if changed:
        term.save(update_fields=changed)
    return term


def delete_term(term_id):
    deleted, _ = Term.objects.filter(pk=term_id).delete()
    return deleted > 0


def fetch_due_cards(now, group_id=None):
    qs = Term.objects.filter(next_review_at__lte=now)
    if group_id is not None:
        qs = qs.filter(group_id=group_id)
    return [to_card(t) for t in qs.order_by("next_review_at")]


def fetch_cards(term_ids):
    return [to_card(t) for t in Term.objects.filter(pk__in=set(term_ids))]


def save_cards(cards):
    """Write the scheduling fields of ``cards`` back to their rows."""
    by_id = {c.id: c for c in cards}
    rows = list(Term.objects.filter(pk__in=by_id))
    for row in rows:
        card = by_id[row.pk]
        row.status = TermStatus(card.status).value
        row.next_review_at = card.next_review_at
        row.review_stage = card.review_stage
        row.consecutive_failures = card.consecutive_failures
    Term.objects.bulk_update(rows, SCHEDULING_FIELDS)
    return len(rows)


# Review sessions

def create_session_record(session, group_id=None):
    return ReviewSessionRecord.objects.create(
        group_id=group_id,
        state=session.state.value,
        snapshot=session.snapshot(),
        finished_at=timezone.now() if session.is_over else None,
    )


def get_session_record(session_id):
    return ReviewSessionRecord.objects.get(pk=session_id)


def get_session_for_update(session_id):
    """
    Fetch a session row and lock it for the rest of the caller's transaction
    so that two answers for the same presentation are scored one at a time.
    """
    return ReviewSessionRecord.objects.select_for_update().get(pk=session_id)


def save_session(record, session, applied=None):
    record.state = session.state.value
    record.snapshot = session.snapshot()
    fields = ["state", "snapshot"]
    if session.is_over and record.finished_at is None:
        record.finished_at = timezone.now()
        fields.append("finished_at")
    if applied is not None:
        record.applied = applied
        fields.append("applied")
    record.save(update_fields=fields)
    return record

import io
import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from trainer.data.models import Group, Term


def keep_order(items):
    return list(items)


@pytest.fixture
def seeded(db):
    call_command("init_data", stdout=io.StringIO())


@pytest.fixture
def fixed_order(monkeypatch):
    # Correct answer is always option 1, the first distractor option 2
    monkeypatch.setattr(
        "trainer.management.commands.review.random_permutation", keep_order
    )


def run_review(answers, *args):
    out = io.StringIO()
    call_command("review", *args, stdin=io.StringIO(answers), stdout=out)
    return out.getvalue()


def test_init_data_loads_groups_and_terms(seeded):
    assert set(Group.objects.values_list("id", flat=True)) == {"default", "group-1"}
    assert Group.objects.get(pk="default").is_default
    assert Term.objects.count() == 4
    assert set(Term.objects.values_list("status", flat=True)) == {"new"}


def test_init_data_missing_file(db):
    with pytest.raises(CommandError):
        call_command("init_data", file="nope.json", stdout=io.StringIO())


def test_review_all_correct(seeded, fixed_order):
    output = run_review("1\n" * 4)

    assert "Session finished: 4/4 remembered, 4 terms rescheduled" in output
    assert set(Term.objects.values_list("review_stage", flat=True)) == {1}
    assert set(Term.objects.values_list("status", flat=True)) == {"learned"}


def test_review_group_with_retry(seeded, fixed_order):
    # first term wrong once, then both right
    output = run_review("2\n1\n1\n", "--group", "group-1")

    assert output.count("Incorrect.") == 1
    assert "Session finished: 2/2 remembered" in output
    assert Term.objects.filter(group_id="group-1", review_stage=1).count() == 2
    assert Term.objects.filter(group_id="default", review_stage=0).count() == 2


def test_review_quit_saves_nothing(seeded, fixed_order):
    output = run_review("1\nq\n")

    assert "Session abandoned" in output
    assert set(Term.objects.values_list("review_stage", flat=True)) == {0}


def test_review_rejects_out_of_range_input(seeded, fixed_order):
    output = run_review("9\nabc\n1\n1\n1\n1\n")

    assert output.count("Please enter a number between 1 and 3") == 2
    assert "4/4 remembered" in output


def test_review_nothing_due(db):
    assert "No cards to review!" in run_review("")


def test_review_unknown_group(db):
    with pytest.raises(CommandError):
        run_review("", "--group", "missing")


def test_migrations_match_models(db):
    # Exits non-zero when a model change has no migration
    call_command(
        "makemigrations", "trainer", check=True, dry_run=True, stdout=io.StringIO()
    )


def test_test_database_is_fully_migrated(db):
    call_command("migrate", check=True, plan=True, stdout=io.StringIO())

import sys

from django.core.exceptions import ObjectDoesNotExist
from django.core.management.base import BaseCommand, CommandError

from trainer.domain.enums import SessionState
from trainer.domain.session import ReviewSession, random_permutation
from trainer.services.reviews import due_cards, record_outcomes

QUIT = {"q", "quit", "exit"}


class Command(BaseCommand):
    help = "Run a multiple-choice review over the terms that are due now"
    stealth_options = ("stdin",)

    def add_arguments(self, parser):
        parser.add_argument("--group", default=None, help="Only review this group")

    def handle(self, *args, **options):
        self.stdin = options.get("stdin") or sys.stdin
        group_id = options.get("group")

        try:
            pool = due_cards(group_id=group_id)
        except ObjectDoesNotExist:
            raise CommandError(f"Group {group_id} not found")

        emitted = []
        session = ReviewSession(pool, shuffle=random_permutation, on_complete=emitted.extend)
        if session.state == SessionState.EMPTY:
            self.stdout.write("No cards to review!")
            return

        while session.state == SessionState.PRESENTING:
            item = session.current
            options_shown = session.options
            self.stdout.write(
                f"\n[{session.position + 1}/{session.queue_length}] {item.term} {item.phonetic}"
            )
            for i, opt in enumerate(options_shown, 1):
                self.stdout.write(f"  {i}. {opt}")

            choice = self._read_choice(len(options_shown))
            if choice is None:
                session.abandon()
                self.stdout.write(self.style.WARNING("Session abandoned, nothing was saved"))
                return

            if session.submit(options_shown[choice]):
                self.stdout.write(self.style.SUCCESS("Correct!"))
            else:
                self.stdout.write(self.style.ERROR(f"Incorrect. Answer: {item.answer}"))
            session.advance()

        updated = record_outcomes(emitted)
        passed = sum(1 for o in emitted if o.success)
        self.stdout.write(
            self.style.SUCCESS(
                f"Session finished: {passed}/{len(emitted)} remembered, "
                f"{len(updated)} terms rescheduled"
            )
        )

    def _read_choice(self, count):
        while True:
            self.stdout.write(f"Your answer (1-{count}, q to quit): ", ending="")
            line = self.stdin.readline()
            if not line:
                return None
            raw = line.strip().lower()
            if raw in QUIT:
                return None
            if raw.isdigit() and 1 <= int(raw) <= count:
                return int(raw) - 1
            self.stdout.write(f"Please enter a number between 1 and {count}")

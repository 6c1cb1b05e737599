import json
import os
from django.core.management.base import BaseCommand, CommandError
from trainer.data.models import Group, ReviewSessionRecord, Term
from trainer.services.cards import accept_card, add_group


class Command(BaseCommand):
    help = "Reset the trainer tables and load groups and terms from a JSON file"

    def add_arguments(self, parser):
        parser.add_argument(
            "--file", default="MOCK_DATA.json", help="JSON file name to load data from"
        )

    def handle(self, *args, **options):
        ReviewSessionRecord.objects.all().delete()
        Term.objects.all().delete()
        Group.objects.all().delete()

        self.stdout.write(self.style.SUCCESS("All existing term data has been deleted"))

        file_name = options.get("file", "MOCK_DATA.json")
        json_file_path = os.path.join(os.path.dirname(__file__), file_name)

        try:
            with open(json_file_path, encoding="utf-8") as json_file:
                data = json.load(json_file)
        except (OSError, ValueError) as e:
            raise CommandError(f"Error loading data: {e}")

        for g in data.get("groups", []):
            add_group(g["name"], g.get("id"), bool(g.get("is_default")))

        for t in data.get("terms", []):
            content = dict(t)
            group_id = content.pop("group_id", None)
            accept_card(content, group_id)

        self.stdout.write(
            self.style.SUCCESS(
                f"Mock data loaded successfully from {file_name}: "
                f"{Group.objects.count()} groups, {Term.objects.count()} terms"
            )
        )

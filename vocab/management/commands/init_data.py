import json
import os
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from vocab.models import Card, Deck, User


class Command(BaseCommand):
    help = "Reset demo users and load decks and cards from a JSON file"

    def add_arguments(self, parser):
        parser.add_argument(
            "--file", default="seed_vocab.json", help="JSON file name to load data from"
        )

    def handle(self, *args, **options):
        # Only files shipped next to this command can be loaded
        file_name = os.path.basename(options.get("file") or "seed_vocab.json")
        json_file_path = os.path.join(os.path.dirname(__file__), file_name)

        try:
            with open(json_file_path, encoding="utf-8") as json_file:
                data = json.load(json_file)
        except (OSError, ValueError) as e:
            raise CommandError(f"Error loading data from {file_name}: {e}")

        with transaction.atomic():
            # Cascades to decks, cards and study progress
            User.objects.all().delete()
            self.stdout.write(self.style.SUCCESS("All existing user data has been deleted"))

            owner = User.objects.create_superuser(
                "testuser", email="testuser@example.com", password="testpassword"
            )
            for i in range(1, 6):
                User.objects.create_user(
                    f"testuser{i}",
                    email=f"testuser{i}@example.com",
                    password="testpassword",
                )

            card_count = 0
            for deck_data in data.get("decks", []):
                deck = Deck.objects.create(
                    name=deck_data["name"],
                    description=deck_data.get("description", ""),
                    user=owner,
                )
                for card_data in deck_data.get("cards", []):
                    Card.objects.create(
                        deck=deck,
                        front=card_data["front"],
                        back=card_data["back"],
                        reading=card_data.get("reading", ""),
                        example=card_data.get("example", ""),
                        example_translation=card_data.get("example_translation", ""),
                        part_of_speech=card_data.get("part_of_speech", ""),
                    )
                    card_count += 1

        self.stdout.write(
            self.style.SUCCESS(
                f"Mock data loaded successfully from {file_name} ({card_count} cards)"
            )
        )

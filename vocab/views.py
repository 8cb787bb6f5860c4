from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response
from django.core.management import call_command
from django.core.management.base import CommandError
import structlog

from .models import Deck, User

logger = structlog.get_logger()


@api_view(["POST"])
def initialize_data(request):
    file_name = request.data.get("file", "seed_vocab.json")
    logger.info("initialize_data", file=file_name)
    try:
        call_command("init_data", file=file_name)
    except CommandError as e:
        return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(
        {
            "message": f"Data initialized successfully from {file_name}",
            "users": {u.username: u.pk for u in User.objects.order_by("id")},
            "decks": [
                {
                    "id": deck.pk,
                    "name": deck.name,
                    "owner": deck.user.username if deck.user else None,
                    "card_ids": list(deck.cards.order_by("id").values_list("id", flat=True)),
                }
                for deck in Deck.objects.select_related("user").order_by("id")
            ],
        },
        status=status.HTTP_200_OK,
    )

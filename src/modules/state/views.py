"""State API views.

Serves the whole board document under a single configured key:
``GET`` loads it (``[]`` when nothing is stored yet), ``POST`` replaces
it wholesale.  Other methods are rejected with 405 by DRF.
"""

from __future__ import annotations

from django.conf import settings
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.state.exceptions import StoredStateCorrupt
from modules.state.repositories import StateEntryDjangoRepository


class OrderStateView(APIView):
    """GET / POST the serialized order collection."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._repository = StateEntryDjangoRepository()

    def get(self, request: Request) -> Response:
        """GET /api/orders"""
        try:
            document = self._repository.get(settings.STATE_KEY)
        except StoredStateCorrupt as exc:
            return Response(
                {"detail": f"Error loading state: {exc}"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        return Response(document if document is not None else [])

    def post(self, request: Request) -> Response:
        """POST /api/orders

        The body must be a JSON array of order objects; anything else is
        rejected so a broken client cannot overwrite the board with junk.
        """
        document = request.data
        if not isinstance(document, list) or not all(
            isinstance(item, dict) for item in document
        ):
            return Response(
                {"detail": "State must be a JSON array of objects."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        self._repository.put(settings.STATE_KEY, document)
        return Response({"detail": "State saved successfully.", "count": len(document)})

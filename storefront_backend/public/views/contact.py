# public/views/contact.py
"""
CONTACT FORM

POST /api/contact/  {name, email, subject?, message}

Rules:
- Sent synchronously; the caller learns whether it was delivered.
- Mail not configured => 500 (never silently dropped).
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from notifications.services import (
    MailDeliveryError,
    MailNotConfiguredError,
    send_contact_message,
)
from public.serializers import ContactMessageSerializer
from public.views.checkout import PublicWriteThrottle


class ContactView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = [PublicWriteThrottle]

    @extend_schema(
        tags=["Contact"],
        request=ContactMessageSerializer,
        responses={
            200: OpenApiResponse(description="Message sent"),
            400: OpenApiResponse(description="Validation error"),
            500: OpenApiResponse(description="Mail not configured / delivery failed"),
        },
        description="Send a message to the store inbox.",
    )
    def post(self, request, *args, **kwargs):
        serializer = ContactMessageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            send_contact_message(**serializer.validated_data)
        except MailNotConfiguredError:
            return Response(
                {"error": "Contact form is currently unavailable"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        except MailDeliveryError as e:
            return Response({"error": str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response(
            {
                "success": True,
                "message": "Thank you for your message! We'll get back to you soon.",
            },
            status=status.HTTP_200_OK,
        )

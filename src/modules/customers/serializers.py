"""Customer DRF serializers.

The Service Layer validates requests with Pydantic DTOs and renders
responses from ``CustomerResponseDTO``; these serializers describe the
same shapes to drf-spectacular so the OpenAPI schema matches what the
views actually accept and return.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.customers.models import Customer, CustomerStatus


class CustomerSerializer(serializers.ModelSerializer):
    """Response shape of a single customer."""

    phone = serializers.CharField(allow_null=True, read_only=True)
    address = serializers.CharField(allow_null=True, read_only=True)

    class Meta:
        model = Customer
        fields = [
            "id",
            "customer_code",
            "full_name",
            "email",
            "phone",
            "address",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class CustomerRequestSerializer(serializers.Serializer):
    """Request body for ``POST`` and ``PUT``.

    ``PATCH`` accepts the same fields, all optional.
    """

    customer_code = serializers.RegexField(
        r"^C\d{3,}$", min_length=3, max_length=20
    )
    full_name = serializers.CharField(min_length=2, max_length=100)
    email = serializers.EmailField()
    phone = serializers.RegexField(
        r"^\+?\d{10,20}$", required=False, allow_null=True, allow_blank=True
    )
    address = serializers.CharField(
        max_length=500, required=False, allow_null=True, allow_blank=True
    )
    status = serializers.ChoiceField(
        choices=CustomerStatus.choices, required=False, allow_null=True
    )


class CustomerPageSerializer(serializers.Serializer):
    customers = CustomerSerializer(many=True)
    current_page = serializers.IntegerField()
    total_items = serializers.IntegerField()
    total_pages = serializers.IntegerField()


class MessageSerializer(serializers.Serializer):
    message = serializers.CharField()


class ErrorSerializer(serializers.Serializer):
    timestamp = serializers.DateTimeField()
    status = serializers.IntegerField()
    message = serializers.CharField()
    path = serializers.CharField()
    field_errors = serializers.DictField(
        child=serializers.ListField(child=serializers.CharField()),
        required=False,
    )

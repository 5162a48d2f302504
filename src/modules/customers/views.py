"""Customer API views.

Exposes the ``CustomerService`` via HTTP using a DRF ``GenericViewSet``.
Views only parse the request and render the result: validation,
uniqueness and not-found handling live in the service, and the domain
exceptions it raises are turned into error responses by
``modules.core.exceptions.api_exception_handler``.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.pagination import PageRequest
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.customers.serializers import (
    CustomerPageSerializer,
    CustomerRequestSerializer,
    CustomerSerializer,
    ErrorSerializer,
    MessageSerializer,
)
from modules.customers.services import CustomerService

DELETED_MESSAGE = "Customer deleted successfully"

_ERRORS = {
    400: ErrorSerializer,
    404: ErrorSerializer,
    409: ErrorSerializer,
}


@extend_schema_view(
    list=extend_schema(
        parameters=[
            OpenApiParameter("page", int, description="Zero-based page number."),
            OpenApiParameter("size", int, description="Page size (max 100)."),
            OpenApiParameter(
                "sort_by",
                str,
                description="id, customer_code, full_name, email, status or created_at.",
            ),
            OpenApiParameter("sort_dir", str, enum=["asc", "desc"]),
        ],
        responses={200: CustomerPageSerializer},
    ),
    retrieve=extend_schema(responses={200: CustomerSerializer, **_ERRORS}),
    create=extend_schema(
        request=CustomerRequestSerializer,
        responses={201: CustomerSerializer, **_ERRORS},
    ),
    update=extend_schema(
        request=CustomerRequestSerializer,
        responses={200: CustomerSerializer, **_ERRORS},
    ),
    partial_update=extend_schema(
        request=CustomerRequestSerializer(partial=True),
        responses={200: CustomerSerializer, **_ERRORS},
    ),
    destroy=extend_schema(responses={200: MessageSerializer, 404: ErrorSerializer}),
)
class CustomerViewSet(GenericViewSet):
    """ViewSet for Customer CRUD, search and status filtering.

    Uses ``CustomerService`` with ``CustomerDjangoRepository`` (DIP).
    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.
    """

    serializer_class = CustomerSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CustomerService(repository=CustomerDjangoRepository())

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/customers/?page=&size=&sort_by=&sort_dir="""
        page_request = PageRequest.from_query_params(request.query_params)
        page = self._service.list_customers(page_request)
        return Response(page.model_dump(mode="json"))

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/customers/{pk}/"""
        customer = self._service.get_customer(pk)
        return Response(customer.model_dump(mode="json"))

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/customers/"""
        customer = self._service.create_customer(request.data)
        return Response(customer.model_dump(mode="json"), status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/customers/{pk}/"""
        customer = self._service.update_customer(pk, request.data)
        return Response(customer.model_dump(mode="json"))

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/customers/{pk}/"""
        customer = self._service.partial_update_customer(pk, request.data)
        return Response(customer.model_dump(mode="json"))

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/customers/{pk}/"""
        self._service.delete_customer(pk)
        return Response({"message": DELETED_MESSAGE})

    # ------------------------------------------------------------------
    # Search / Status filter
    # ------------------------------------------------------------------

    @extend_schema(
        parameters=[
            OpenApiParameter(
                "keyword",
                str,
                description="Matches name, email or code; blank returns everyone.",
            )
        ],
        responses={200: CustomerSerializer(many=True)},
    )
    @action(detail=False, methods=["get"], url_path="search")
    def search(self, request: Request) -> Response:
        """GET /api/v1/customers/search/?keyword="""
        customers = self._service.search_customers(request.query_params.get("keyword"))
        return Response([c.model_dump(mode="json") for c in customers])

    @extend_schema(
        responses={200: CustomerSerializer(many=True), 400: ErrorSerializer},
    )
    @action(
        detail=False,
        methods=["get"],
        url_path=r"status/(?P<customer_status>[^/.]+)",
    )
    def by_status(self, request: Request, customer_status: str) -> Response:
        """GET /api/v1/customers/status/{status}/"""
        customers = self._service.get_customers_by_status(customer_status)
        return Response([c.model_dump(mode="json") for c in customers])

"""API views for the sales app."""
from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from api.v1.pagination import SalesResultsSetPagination
from api.v1.permissions import IsAdminOrDistributor, IsAdminRole
from catalog.models import Product
from sales.models import Sale
from sales.sale_serializers import SaleCreateSerializer, SaleSerializer

logger = logging.getLogger(__name__)


class SaleViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """
    Sales of the network.

    - list / retrieve: admins see every sale, distributors only their own
    - create: registers a sale (distributors always sell as themselves)
    - confirm: admin confirms a pending distributor payment
    - destroy: admin deletes a sale and restores stock
    """

    serializer_class = SaleSerializer
    queryset = Sale.objects.select_related("product", "distributor")
    filterset_fields = ["payment_status", "distributor", "product"]
    ordering_fields = ["sale_date", "total_profit", "sale_price"]
    pagination_class = SalesResultsSetPagination

    def get_permissions(self):
        if self.action in ("confirm", "destroy"):
            return [IsAuthenticated(), IsAdminRole()]
        return [IsAuthenticated(), IsAdminOrDistributor()]

    def get_queryset(self):
        qs = super().get_queryset()
        user = self.request.user
        if not user.is_admin:
            qs = qs.filter(distributor=user)

        date_from = self.request.query_params.get("date_from")
        date_to = self.request.query_params.get("date_to")
        if date_from:
            qs = qs.filter(sale_date__date__gte=date_from)
        if date_to:
            qs = qs.filter(sale_date__date__lte=date_to)
        return qs

    def create(self, request, *args, **kwargs):
        serializer = SaleCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            product = Product.objects.get(pk=data["product_id"])
        except Product.DoesNotExist:
            return Response({"detail": "Producto no encontrado."}, status=status.HTTP_404_NOT_FOUND)

        if request.user.is_admin:
            distributor = None
            distributor_id = data.get("distributor_id")
            if distributor_id:
                distributor = get_user_model().objects.distributors().filter(pk=distributor_id).first()
                if distributor is None:
                    return Response(
                        {"detail": "Distribuidor no encontrado."},
                        status=status.HTTP_400_BAD_REQUEST,
                    )
        else:
            distributor = request.user

        from sales.services import register_sale
        try:
            sale = register_sale(
                product=product,
                quantity=data["quantity"],
                sale_price=data["sale_price"],
                distributor=distributor,
                sale_date=data.get("sale_date"),
                notes=data.get("notes", ""),
                actor=request.user,
            )
        except ValueError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(SaleSerializer(sale).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"], url_path="confirm")
    def confirm(self, request, pk=None):
        """Confirm the payment of a pending distributor sale."""
        sale = self.get_object()
        from sales.services import confirm_payment
        try:
            sale = confirm_payment(sale, actor=request.user)
        except ValueError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(SaleSerializer(sale).data)

    def perform_destroy(self, instance):
        from sales.services import delete_sale
        delete_sale(instance, actor=self.request.user)

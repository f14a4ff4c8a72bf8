import logging

from django.core.exceptions import ValidationError
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from inventory.models import Ingredient
from .exceptions import InvalidDraftTransition
from .models import PurchaseOrder, PurchaseOrderLine
from .serializers import (
    GenerateDraftsSerializer,
    LineCreateSerializer,
    LineUpdateSerializer,
    PurchaseOrderSerializer,
)
from .services import DraftOrderService, ReplenishmentDrafter

logger = logging.getLogger(__name__)


def _error_response(exc: ValidationError):
    # Rule violations on a non-draft order conflict with its state; the rest is bad input
    code = status.HTTP_409_CONFLICT if isinstance(exc, InvalidDraftTransition) else status.HTTP_400_BAD_REQUEST
    return Response({"error": " ".join(exc.messages)}, status=code)


def _order_queryset():
    return PurchaseOrder.objects.select_related('supplier').prefetch_related('lines__ingredient')


class PurchaseOrderListCreateView(APIView):
    def get(self, request):
        queryset = _order_queryset()
        for param in ('status', 'supplier'):
            value = request.query_params.get(param)
            if value:
                queryset = queryset.filter(**{param: value})
        return Response(PurchaseOrderSerializer(queryset, many=True).data)

    def post(self, request):
        serializer = PurchaseOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = DraftOrderService.create_draft(
            serializer.validated_data['supplier'],
            notes=serializer.validated_data.get('notes', ''),
            created_by=request.user.get_username(),
        )
        return Response(PurchaseOrderSerializer(order).data, status=status.HTTP_201_CREATED)


class PurchaseOrderDetailView(APIView):
    def get(self, request, pk):
        order = get_object_or_404(_order_queryset(), pk=pk)
        return Response(PurchaseOrderSerializer(order).data)

    def delete(self, request, pk):
        order = get_object_or_404(PurchaseOrder, pk=pk)
        try:
            DraftOrderService.delete_draft(order)
        except ValidationError as e:
            return _error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)


class PurchaseOrderLineCreateView(APIView):
    def post(self, request, pk):
        order = get_object_or_404(PurchaseOrder, pk=pk)
        serializer = LineCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        ingredient = get_object_or_404(Ingredient, pk=serializer.validated_data['ingredient'])
        try:
            DraftOrderService.add_line(
                order,
                ingredient,
                quantity=serializer.validated_data.get('quantity'),
                unit_cost=serializer.validated_data.get('unit_cost'),
            )
        except ValidationError as e:
            return _error_response(e)
        order = _order_queryset().get(pk=pk)
        return Response(PurchaseOrderSerializer(order).data, status=status.HTTP_201_CREATED)


class PurchaseOrderLineDetailView(APIView):
    def patch(self, request, pk, line_id):
        order = get_object_or_404(PurchaseOrder, pk=pk)
        get_object_or_404(PurchaseOrderLine, pk=line_id, order=order)
        serializer = LineUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            DraftOrderService.update_line(
                order,
                line_id,
                quantity=serializer.validated_data.get('quantity'),
                unit_cost=serializer.validated_data.get('unit_cost'),
            )
        except ValidationError as e:
            return _error_response(e)
        return Response(PurchaseOrderSerializer(_order_queryset().get(pk=pk)).data)

    def delete(self, request, pk, line_id):
        order = get_object_or_404(PurchaseOrder, pk=pk)
        get_object_or_404(PurchaseOrderLine, pk=line_id, order=order)
        try:
            DraftOrderService.remove_line(order, line_id)
        except ValidationError as e:
            return _error_response(e)
        return Response(PurchaseOrderSerializer(_order_queryset().get(pk=pk)).data)


class AutoFillView(APIView):
    def post(self, request, pk):
        order = get_object_or_404(PurchaseOrder, pk=pk)
        try:
            result = ReplenishmentDrafter.auto_fill_to_par(order)
        except ValidationError as e:
            return _error_response(e)
        return Response({
            "order": PurchaseOrderSerializer(_order_queryset().get(pk=pk)).data,
            "auto_fill": result.as_dict(),
        })


class PlaceOrderView(APIView):
    def post(self, request, pk):
        order = get_object_or_404(PurchaseOrder, pk=pk)
        try:
            order = DraftOrderService.place_order(order)
        except ValidationError as e:
            return _error_response(e)
        return Response(PurchaseOrderSerializer(_order_queryset().get(pk=order.pk)).data)


class GenerateDraftsView(APIView):
    def post(self, request):
        serializer = GenerateDraftsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        generation = ReplenishmentDrafter.generate_drafts(
            supplier_ids=serializer.validated_data.get('suppliers'),
            created_by=request.user.get_username(),
        )
        return Response(generation.as_dict(), status=status.HTTP_200_OK)

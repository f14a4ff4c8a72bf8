import logging

from django.core.exceptions import ValidationError
from django.shortcuts import get_object_or_404
from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from inventory.exceptions import DeductionError
from sales.models import Sale
from sales.serializers import SaleCreateSerializer, SaleDetailSerializer, SaleSerializer
from sales.services import SaleService

logger = logging.getLogger(__name__)


class SaleListCreateView(APIView):
    """
    GET: sales, newest first (?deduction_status=pending|applied|failed).
    POST: record a completed sale and deduct its ingredients.
    """

    def get(self, request):
        queryset = Sale.objects.prefetch_related('lines__menu_item', 'lines__add_ons__add_on')
        deduction_status = request.query_params.get('deduction_status')
        if deduction_status:
            queryset = queryset.filter(deduction_status=deduction_status)
        return Response(SaleSerializer(queryset, many=True).data)

    def post(self, request):
        serializer = SaleCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        staff_name = data.get('staff_name') or request.user.get_username()
        try:
            submission = SaleService.submit_sale(
                data['items'],
                external_id=data.get('external_id') or None,
                sale_type=data['sale_type'],
                staff_name=staff_name,
                staff_email=getattr(request.user, 'email', '') or '',
            )
        except ValidationError as e:
            return Response({"error": e.messages}, status=status.HTTP_400_BAD_REQUEST)

        body = {
            "sale": SaleSerializer(submission.sale).data,
            "deduction": submission.deduction,
        }
        if submission.error is not None:
            # The sale is durable; stock was not (or no longer) touched
            return Response(body, status=status.HTTP_409_CONFLICT)
        return Response(body, status=status.HTTP_201_CREATED if submission.created else status.HTTP_200_OK)


class SaleDetailView(generics.RetrieveAPIView):
    queryset = Sale.objects.prefetch_related('lines__menu_item', 'lines__add_ons__add_on')
    serializer_class = SaleDetailSerializer


class SaleDeductView(APIView):
    """
    Retries (or resumes) stock deduction for a sale.
    """

    def post(self, request, pk):
        sale = get_object_or_404(Sale, pk=pk)
        try:
            result = SaleService.retry_deduction(sale)
        except DeductionError as e:
            sale.refresh_from_db()
            return Response(
                {"sale": SaleSerializer(sale).data, "deduction": e.as_dict()},
                status=status.HTTP_409_CONFLICT
            )
        return Response({"sale": SaleSerializer(sale).data, "deduction": result.as_dict()})

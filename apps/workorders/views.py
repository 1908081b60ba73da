from rest_framework import viewsets, mixins, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from django.db.models import Q
from drf_spectacular.utils import extend_schema

from .models import InboundOrder, WorkOrder
from .serializers import (
    InboundOrderSerializer,
    OrderMaterialSerializer,
    ReceiveMaterialSerializer,
    WorkOrderListSerializer,
    WorkOrderPartSerializer,
    WorkOrderSerializer,
    WorkOrderUpdateSerializer,
)

from apps.numbering.services import DuplicateNumberError, InvalidNumberError
from apps.workorders.services import (
    get_orderable_parts,
    order_material,
    receive_material,
    # Exceptions
    WorkOrderNotFoundError,
    NoOrderablePartsError,
)


class WorkOrderPagination(PageNumberPagination):
    """Custom pagination for work orders."""
    page_size = 25
    page_size_query_param = 'page_size'
    max_page_size = 100


class WorkOrderViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    viewsets.GenericViewSet
):
    """
    ViewSet for work orders.

    Work orders are only created by converting an estimate
    (POST /api/estimates/{id}/convert/) and only removed by voiding
    their DR number.

    list: Get work orders (filter with ?status= and ?search=)
    retrieve: Get a work order with its parts
    update / partial_update: Edit scheduling fields
    """

    queryset = WorkOrder.objects.prefetch_related('parts')
    serializer_class = WorkOrderSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = WorkOrderPagination

    def get_queryset(self):
        queryset = super().get_queryset()
        status_filter = self.request.query_params.get('status')
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        search = self.request.query_params.get('search')
        if search:
            queryset = queryset.filter(
                Q(order_number__icontains=search)
                | Q(client_name__icontains=search)
                | Q(client_purchase_order_number__icontains=search)
            )
        return queryset

    def get_serializer_class(self):
        """Use different serializers for different actions."""
        if self.action == 'list':
            return WorkOrderListSerializer
        elif self.action in ['update', 'partial_update']:
            return WorkOrderUpdateSerializer
        return WorkOrderSerializer

    def update(self, request, *args, **kwargs):
        """Update scheduling fields and return the full work order."""
        partial = kwargs.pop('partial', False)
        work_order = self.get_object()
        serializer = self.get_serializer(work_order, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(WorkOrderSerializer(work_order).data)

    @extend_schema(responses={200: WorkOrderPartSerializer(many=True)})
    @action(detail=True, methods=['get'])
    def orderable_parts(self, request, pk=None):
        """Shop-supplied parts that still need material ordered."""
        try:
            parts = get_orderable_parts(work_order_id=pk)
        except WorkOrderNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(WorkOrderPartSerializer(parts, many=True).data)

    @extend_schema(request=OrderMaterialSerializer, responses={201: InboundOrderSerializer(many=True)})
    @action(detail=True, methods=['post'])
    def order_material(self, request, pk=None):
        """Order material for selected parts; one PO per supplier."""
        serializer = OrderMaterialSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            inbound_orders = order_material(work_order_id=pk, **serializer.validated_data)
        except WorkOrderNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except (NoOrderablePartsError, InvalidNumberError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except DuplicateNumberError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(
            {
                'message': f'Created {len(inbound_orders)} purchase order(s)',
                'purchase_orders': InboundOrderSerializer(inbound_orders, many=True).data,
            },
            status=status.HTTP_201_CREATED
        )

    @extend_schema(request=ReceiveMaterialSerializer, responses={200: WorkOrderSerializer})
    @action(detail=True, methods=['post'])
    def receive_material(self, request, pk=None):
        """Mark material received for selected parts."""
        serializer = ReceiveMaterialSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            work_order = receive_material(work_order_id=pk, **serializer.validated_data)
        except WorkOrderNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        work_order = WorkOrder.objects.prefetch_related('parts').get(id=work_order.id)
        return Response(WorkOrderSerializer(work_order).data)


class InboundOrderViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Supplier orders created by material ordering (read only).

    Filter with ?work_order= and ?status=.
    """

    queryset = InboundOrder.objects.select_related('work_order')
    serializer_class = InboundOrderSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = WorkOrderPagination

    def get_queryset(self):
        queryset = super().get_queryset()
        work_order = self.request.query_params.get('work_order')
        if work_order:
            queryset = queryset.filter(work_order_id=work_order)
        status_filter = self.request.query_params.get('status')
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        return queryset

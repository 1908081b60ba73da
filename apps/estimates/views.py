from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated, IsAdminUser
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from django.db.models import Q
from drf_spectacular.utils import extend_schema

from .models import Estimate, LaborMinimumRule
from .serializers import (
    EstimateSerializer,
    EstimateListSerializer,
    EstimateCreateSerializer,
    EstimateUpdateSerializer,
    EstimatePartSerializer,
    EstimateTotalsSerializer,
    PartInputSerializer,
    LaborMinimumRuleSerializer,
    DuplicateEstimateSerializer,
    ConvertEstimateSerializer,
)

from apps.estimates.services import (
    create_estimate,
    update_estimate,
    delete_estimate,
    add_part,
    update_part,
    remove_part,
    duplicate_estimate,
    archive_old_estimates,
    compute_estimate_totals,
    recalculate_all_estimates,
    # Exceptions
    EstimateNotFoundError,
    PartNotFoundError,
    DuplicateEstimateNumberError,
    InvalidEstimateNumberError,
)
from apps.numbering.services import DuplicateNumberError, InvalidNumberError
from apps.workorders.serializers import WorkOrderSerializer
from apps.workorders.services import (
    convert_estimate,
    reset_conversion,
    AlreadyConvertedError,
    WorkOrderExistsError,
)


class EstimatePagination(PageNumberPagination):
    """Custom pagination for estimates."""
    page_size = 25
    page_size_query_param = 'page_size'
    max_page_size = 100


class EstimateViewSet(viewsets.ModelViewSet):
    """
    ViewSet for estimates and their parts.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Get estimates (filter with ?status= and ?search=)
    create: Create a draft estimate
    retrieve: Get an estimate with its parts
    update / partial_update: Update estimate fields (totals are recomputed)
    destroy: Delete an estimate
    """

    queryset = Estimate.objects.select_related('work_order').prefetch_related('parts')
    serializer_class = EstimateSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = EstimatePagination

    def get_queryset(self):
        queryset = super().get_queryset()
        status_filter = self.request.query_params.get('status')
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        search = self.request.query_params.get('search')
        if search:
            queryset = queryset.filter(
                Q(estimate_number__icontains=search) | Q(client_name__icontains=search)
            )
        return queryset

    def get_serializer_class(self):
        """Use different serializers for different actions."""
        if self.action == 'list':
            return EstimateListSerializer
        elif self.action == 'create':
            return EstimateCreateSerializer
        elif self.action in ['update', 'partial_update']:
            return EstimateUpdateSerializer
        return EstimateSerializer

    def get_permissions(self):
        """Bulk maintenance actions are staff only."""
        if self.action in ['recalculate_all', 'archive_old', 'reset_conversion']:
            return [IsAuthenticated(), IsAdminUser()]
        return [IsAuthenticated()]

    def _estimate_response(self, estimate_id, status_code=status.HTTP_200_OK):
        estimate = Estimate.objects.prefetch_related('parts').get(id=estimate_id)
        serializer = EstimateSerializer(estimate, context={'request': self.request})
        return Response(serializer.data, status=status_code)

    def create(self, request, *args, **kwargs):
        """Create a new estimate."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            estimate = create_estimate(**serializer.validated_data)
        except DuplicateEstimateNumberError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return self._estimate_response(estimate.id, status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        """Update an estimate and recompute its totals."""
        partial = kwargs.pop('partial', False)
        serializer = self.get_serializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            estimate = update_estimate(estimate_id=self.kwargs['pk'], **serializer.validated_data)
        except EstimateNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidEstimateNumberError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except DuplicateEstimateNumberError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return self._estimate_response(estimate.id)

    def destroy(self, request, *args, **kwargs):
        """Delete an estimate."""
        try:
            delete_estimate(estimate_id=self.kwargs['pk'])
        except EstimateNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(responses={200: EstimateTotalsSerializer})
    @action(detail=True, methods=['get'])
    def totals(self, request, pk=None):
        """Full totals breakdown (labor minimum, rush charges, discount, tax)."""
        estimate = self.get_object()
        totals = compute_estimate_totals(estimate, parts=list(estimate.parts.all()))
        return Response(EstimateTotalsSerializer(totals).data)

    @extend_schema(request=PartInputSerializer, responses={201: EstimatePartSerializer})
    @action(detail=True, methods=['post'])
    def parts(self, request, pk=None):
        """Add a part to the estimate."""
        serializer = PartInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            part = add_part(estimate_id=pk, data=serializer.validated_data)
        except EstimateNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(EstimatePartSerializer(part).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=PartInputSerializer, responses={200: EstimatePartSerializer})
    @action(detail=True, methods=['put', 'patch', 'delete'], url_path=r'parts/(?P<part_id>[^/.]+)')
    def part_detail(self, request, pk=None, part_id=None):
        """Update or delete one part of the estimate."""
        try:
            if request.method == 'DELETE':
                remove_part(estimate_id=pk, part_id=part_id)
                return Response(status=status.HTTP_204_NO_CONTENT)

            serializer = PartInputSerializer(data=request.data, partial=True)
            serializer.is_valid(raise_exception=True)
            part = update_part(estimate_id=pk, part_id=part_id, data=serializer.validated_data)
        except (EstimateNotFoundError, PartNotFoundError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(EstimatePartSerializer(part).data)

    @extend_schema(request=DuplicateEstimateSerializer, responses={201: EstimateSerializer})
    @action(detail=True, methods=['post'])
    def duplicate(self, request, pk=None):
        """Copy the estimate and its parts into a new draft."""
        serializer = DuplicateEstimateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            copy = duplicate_estimate(estimate_id=pk, notes=serializer.validated_data.get('notes'))
        except EstimateNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return self._estimate_response(copy.id, status.HTTP_201_CREATED)

    @extend_schema(request=ConvertEstimateSerializer, responses={201: WorkOrderSerializer})
    @action(detail=True, methods=['post'])
    def convert(self, request, pk=None):
        """Convert the estimate into a work order with a DR number."""
        serializer = ConvertEstimateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            work_order = convert_estimate(estimate_id=pk, **serializer.validated_data)
        except EstimateNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except DuplicateNumberError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        except (AlreadyConvertedError, InvalidNumberError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(WorkOrderSerializer(work_order).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'])
    def reset_conversion(self, request, pk=None):
        """Clear a dangling conversion so the estimate can be converted again (staff only)."""
        try:
            estimate = reset_conversion(estimate_id=pk)
        except EstimateNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except WorkOrderExistsError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return self._estimate_response(estimate.id)

    @action(detail=False, methods=['post'])
    def recalculate_all(self, request):
        """Recompute stored totals of every estimate (staff only)."""
        dry_run = str(request.data.get('dry_run', '')).lower() in ('1', 'true', 'yes')
        changed = recalculate_all_estimates(dry_run=dry_run)
        return Response({
            'changed': changed,
            'count': len(changed),
            'dry_run': dry_run,
        })

    @action(detail=False, methods=['post'])
    def archive_old(self, request):
        """Archive estimates older than a month that were never accepted (staff only)."""
        count = archive_old_estimates()
        return Response({'message': f'{count} estimates archived', 'count': count})


class LaborMinimumRuleViewSet(viewsets.ModelViewSet):
    """
    Labor minimum rules.

    Anyone signed in can read the rules; only staff can change them.
    """

    queryset = LaborMinimumRule.objects.all()
    serializer_class = LaborMinimumRuleSerializer
    permission_classes = [IsAuthenticated]

    def get_permissions(self):
        if self.action in ['list', 'retrieve']:
            return [IsAuthenticated()]
        return [IsAuthenticated(), IsAdminUser()]

    def get_queryset(self):
        queryset = super().get_queryset()
        part_type = self.request.query_params.get('part_type')
        if part_type:
            queryset = queryset.filter(part_type=part_type)
        return queryset

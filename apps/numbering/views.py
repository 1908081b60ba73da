from rest_framework import viewsets, mixins, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated, IsAdminUser
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from .models import DRNumber, IssuanceStatus, PONumber
from .serializers import (
    AssignDRNumberSerializer,
    AssignPONumberSerializer,
    DRNumberSerializer,
    NextNumberSerializer,
    NumberStatsSerializer,
    PONumberSerializer,
    SetNextNumberSerializer,
    VoidNumberSerializer,
)

from apps.numbering.services import (
    DR_COUNTER,
    PO_COUNTER,
    issue,
    void as void_number,
    release as release_number,
    peek_next,
    set_next,
    stats as number_stats,
    # Exceptions
    DuplicateNumberError,
    IssuanceNotFoundError,
    MissingVoidReasonError,
    AlreadyVoidedError,
    InvalidNumberError,
)


class IssuancePagination(PageNumberPagination):
    """Custom pagination for issued numbers."""
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


class IssuanceViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet
):
    """
    Base ViewSet for one number series.

    Subclasses set ``counter`` and the series' model and serializers.
    Looked up by number, not by primary key.
    """

    counter = None
    assign_serializer_class = None
    permission_classes = [IsAuthenticated]
    pagination_class = IssuancePagination
    lookup_field = 'number'
    lookup_value_regex = r'\d+'

    def get_queryset(self):
        queryset = super().get_queryset()
        status_filter = self.request.query_params.get('status')
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        return queryset

    def get_permissions(self):
        """Moving the counter and releasing numbers are staff only."""
        if self.action == 'destroy' or (self.action == 'next' and self.request.method == 'PUT'):
            return [IsAuthenticated(), IsAdminUser()]
        return [IsAuthenticated()]

    def _next_response(self):
        next_number = peek_next(self.counter)
        return Response({
            'next_number': next_number,
            'display': self.counter.format(next_number),
        })

    @extend_schema(request=SetNextNumberSerializer, responses={200: NextNumberSerializer})
    @action(detail=False, methods=['get', 'put'])
    def next(self, request):
        """Preview the next number (GET) or move the counter (PUT, staff only)."""
        if request.method == 'GET':
            return self._next_response()

        serializer = SetNextNumberSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            set_next(self.counter, serializer.validated_data['next_number'])
        except DuplicateNumberError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return self._next_response()

    @action(detail=False, methods=['post'])
    def assign(self, request):
        """Issue the next number, or a custom one."""
        serializer = self.assign_serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        attrs = dict(serializer.validated_data)
        custom_number = attrs.pop('custom_number', None)

        try:
            issuance = issue(self.counter, custom_number, **attrs)
        except DuplicateNumberError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        except InvalidNumberError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(self.get_serializer(issuance).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=VoidNumberSerializer)
    @action(detail=True, methods=['post'])
    def void(self, request, number=None):
        """Void a number; it stays on record and is never reused."""
        serializer = VoidNumberSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            issuance = void_number(
                self.counter,
                number,
                reason=serializer.validated_data['reason'],
                voided_by=request.user.get_username(),
            )
        except IssuanceNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except (MissingVoidReasonError, AlreadyVoidedError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(self.get_serializer(issuance).data)

    def destroy(self, request, number=None):
        """Release a number as if it had never been issued (staff only)."""
        try:
            release_number(self.counter, number)
        except IssuanceNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(responses={200: NumberStatsSerializer})
    @action(detail=False, methods=['get'])
    def stats(self, request):
        """Last used and next number, with active and void counts."""
        return Response(number_stats(self.counter))

    @action(detail=False, methods=['get'])
    def voided(self, request):
        """Voided numbers, newest first."""
        queryset = self.get_queryset().filter(status=IssuanceStatus.VOID).order_by('-voided_at')
        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = self.get_serializer(page, many=True)
            return self.get_paginated_response(serializer.data)
        return Response(self.get_serializer(queryset, many=True).data)


class DRNumberViewSet(IssuanceViewSet):
    """
    DR (delivery receipt) numbers.

    Voiding a DR deletes the work order it was issued for.
    """

    counter = DR_COUNTER
    queryset = DRNumber.objects.select_related('work_order', 'estimate')
    serializer_class = DRNumberSerializer
    assign_serializer_class = AssignDRNumberSerializer


class PONumberViewSet(IssuanceViewSet):
    """
    PO (purchase order) numbers.

    Releasing a PO puts the parts ordered under it back to unordered.
    """

    counter = PO_COUNTER
    queryset = PONumber.objects.select_related('work_order', 'inbound_order')
    serializer_class = PONumberSerializer
    assign_serializer_class = AssignPONumberSerializer

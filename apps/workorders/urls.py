from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'workorders'

# Router for ViewSets
router = DefaultRouter()
router.register(r'inbound-orders', views.InboundOrderViewSet, basename='inbound-order')
router.register(r'', views.WorkOrderViewSet, basename='workorder')

urlpatterns = [
    # Work order ViewSet routes
    # GET    /api/workorders/                              - List work orders
    # GET    /api/workorders/{id}/                         - Work order with parts
    # PUT    /api/workorders/{id}/                         - Update scheduling fields
    # PATCH  /api/workorders/{id}/                         - Partial update

    # Custom work order actions
    # GET    /api/workorders/{id}/orderable_parts/         - Parts needing material
    # POST   /api/workorders/{id}/order_material/          - Order material (one PO per supplier)
    # POST   /api/workorders/{id}/receive_material/        - Mark material received

    # Inbound orders
    # GET    /api/workorders/inbound-orders/               - List supplier orders
    # GET    /api/workorders/inbound-orders/{id}/          - Supplier order detail

    path('', include(router.urls)),
]

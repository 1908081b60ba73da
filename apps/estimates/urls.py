from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'estimates'

# Router for ViewSets
router = DefaultRouter()
router.register(r'labor-minimums', views.LaborMinimumRuleViewSet, basename='labor-minimum')
router.register(r'', views.EstimateViewSet, basename='estimate')

urlpatterns = [
    # Estimate ViewSet routes
    # GET    /api/estimates/                          - List estimates
    # POST   /api/estimates/                          - Create estimate
    # GET    /api/estimates/{id}/                     - Estimate with parts
    # PUT    /api/estimates/{id}/                     - Update estimate
    # PATCH  /api/estimates/{id}/                     - Partial update
    # DELETE /api/estimates/{id}/                     - Delete estimate

    # Custom estimate actions
    # GET    /api/estimates/{id}/totals/              - Totals breakdown
    # POST   /api/estimates/{id}/parts/               - Add part
    # PATCH  /api/estimates/{id}/parts/{part_id}/     - Update part
    # DELETE /api/estimates/{id}/parts/{part_id}/     - Delete part (renumbers the rest)
    # POST   /api/estimates/{id}/duplicate/           - Copy into a new draft
    # POST   /api/estimates/{id}/convert/             - Convert to work order
    # POST   /api/estimates/{id}/reset_conversion/    - Clear a dangling conversion (staff)
    # POST   /api/estimates/recalculate_all/          - Recompute all totals (staff)
    # POST   /api/estimates/archive_old/              - Archive stale estimates (staff)

    # Labor minimum rules
    # GET/POST             /api/estimates/labor-minimums/
    # GET/PUT/PATCH/DELETE /api/estimates/labor-minimums/{id}/

    path('', include(router.urls)),
]

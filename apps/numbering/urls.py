from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'numbering'

# Router for ViewSets
router = DefaultRouter()
router.register(r'dr', views.DRNumberViewSet, basename='dr-number')
router.register(r'po', views.PONumberViewSet, basename='po-number')

urlpatterns = [
    # Routes per series ({series} is dr or po)
    # GET    /api/numbers/{series}/                    - List issued numbers (?status=active|void)
    # GET    /api/numbers/{series}/{number}/           - Issued number detail
    # DELETE /api/numbers/{series}/{number}/           - Release number (staff)
    # POST   /api/numbers/{series}/{number}/void/      - Void number (reason required)
    # GET    /api/numbers/{series}/next/               - Preview next number
    # PUT    /api/numbers/{series}/next/               - Set next number (staff)
    # POST   /api/numbers/{series}/assign/             - Issue next or custom number
    # GET    /api/numbers/{series}/stats/              - Last used, next, counts
    # GET    /api/numbers/{series}/voided/             - Voided numbers

    path('', include(router.urls)),
]

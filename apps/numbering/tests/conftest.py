import pytest
from django.contrib.auth import get_user_model
from django.test import override_settings
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.estimates.models import Estimate
from apps.workorders.models import WorkOrder


User = get_user_model()

NUMBERING = {'STARTING_DR_NUMBER': 2950, 'STARTING_PO_NUMBER': 7764}


@pytest.fixture(autouse=True)
def numbering_floors():
    """Pin the DR and PO floors regardless of the environment."""
    with override_settings(SHOP_NUMBERING=NUMBERING):
        yield


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def office_user(db):
    """Create and return an office user."""
    return User.objects.create_user(
        username='office',
        email='office@example.com',
        password='TestPass123!',
    )


@pytest.fixture
def office_client(api_client, office_user):
    """Return API client authenticated as office user."""
    refresh = RefreshToken.for_user(office_user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def shop_admin(db):
    """Create and return a staff user."""
    return User.objects.create_user(
        username='shopadmin',
        email='admin@example.com',
        password='TestPass123!',
        is_staff=True,
    )


@pytest.fixture
def admin_client(api_client, shop_admin):
    """Return API client authenticated as staff."""
    refresh = RefreshToken.for_user(shop_admin)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def estimate(db):
    return Estimate.objects.create(estimate_number='EST-NUM-001', client_name='Pioneer Rail')


@pytest.fixture
def legacy_work_order(db, estimate):
    """Work order carrying DR 2955 without an issuance record."""
    return WorkOrder.objects.create(
        order_number='DR-2955',
        dr_number=2955,
        client_name='Pioneer Rail',
        estimate=estimate,
    )

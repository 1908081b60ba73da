import pytest
from decimal import Decimal
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.estimates.models import Estimate, EstimatePart, LaborMinimumRule, PartType


User = get_user_model()


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def estimator(db):
    """Create and return a shop estimator."""
    return User.objects.create_user(
        username='estimator',
        email='estimator@example.com',
        password='TestPass123!',
    )


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
def estimator_client(api_client, estimator):
    """Return API client authenticated as estimator."""
    refresh = RefreshToken.for_user(estimator)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def admin_client(api_client, shop_admin):
    """Return API client authenticated as staff."""
    refresh = RefreshToken.for_user(shop_admin)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def plate_rules(db):
    """Plate roll minimums: $125 any width, $150 for 24-60" wide."""
    return [
        LaborMinimumRule.objects.create(
            part_type=PartType.PLATE_ROLL,
            label='Plate up to 3/8"',
            max_size=Decimal('0.375'),
            minimum=Decimal('125.00'),
        ),
        LaborMinimumRule.objects.create(
            part_type=PartType.PLATE_ROLL,
            label='Plate up to 3/8" (24-60" wide)',
            max_size=Decimal('0.375'),
            min_width=Decimal('24'),
            max_width=Decimal('60'),
            minimum=Decimal('150.00'),
        ),
    ]


@pytest.fixture
def estimate(db):
    """Create a draft estimate without parts."""
    return Estimate.objects.create(
        estimate_number='EST-TEST-001',
        client_name='Acme Fabrication',
        contact_name='Jane Roller',
        tax_rate=Decimal('9.750'),
    )


@pytest.fixture
def plate_part(db, estimate):
    """Each-priced plate roll part with $80 labor."""
    return EstimatePart.objects.create(
        estimate=estimate,
        part_number=1,
        part_type=PartType.PLATE_ROLL,
        quantity=1,
        thickness='3/8"',
        width='30',
        labor_total=Decimal('80.00'),
        part_total=Decimal('80.00'),
    )


@pytest.fixture
def generic_part(db, estimate):
    """Computed part: $100 rolling, no material or services."""
    return EstimatePart.objects.create(
        estimate=estimate,
        part_number=2,
        part_type=PartType.OTHER,
        quantity=1,
        rolling_cost=Decimal('100.00'),
        part_total=Decimal('100.00'),
    )


@pytest.fixture
def plate_rules_unsaved():
    """The same plate minimums without touching the database."""
    return [
        LaborMinimumRule(
            part_type=PartType.PLATE_ROLL,
            label='any width',
            max_size=Decimal('0.375'),
            minimum=Decimal('125.00'),
        ),
        LaborMinimumRule(
            part_type=PartType.PLATE_ROLL,
            label='wide',
            max_size=Decimal('0.375'),
            min_width=Decimal('24'),
            max_width=Decimal('60'),
            minimum=Decimal('150.00'),
        ),
    ]

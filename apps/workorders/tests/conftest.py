import pytest
from decimal import Decimal
from django.contrib.auth import get_user_model
from django.test import override_settings
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.estimates.models import Estimate, EstimatePart, MaterialSource, PartType
from apps.workorders.services import convert_estimate


User = get_user_model()


@pytest.fixture(autouse=True)
def numbering_floors():
    """Pin the DR and PO floors regardless of the environment."""
    with override_settings(SHOP_NUMBERING={'STARTING_DR_NUMBER': 2950, 'STARTING_PO_NUMBER': 7764}):
        yield


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def shop_user(db):
    """Create and return a shop user."""
    return User.objects.create_user(
        username='shopuser',
        email='shop@example.com',
        password='TestPass123!',
    )


@pytest.fixture
def shop_client(api_client, shop_user):
    """Return API client authenticated as shop user."""
    refresh = RefreshToken.for_user(shop_user)
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
    """Sent estimate with one customer-supplied part."""
    estimate = Estimate.objects.create(
        estimate_number='EST-WO-001',
        client_name='Harbor Marine',
        contact_name='Sam Keel',
        contact_email='sam@harbor.example',
        status='sent',
        tax_rate=Decimal('9.750'),
        trucking_description='Flatbed delivery',
        trucking_cost=Decimal('85.00'),
        minimum_override=True,
        minimum_override_reason='Repeat customer',
        notes='Roll to 48" radius',
    )
    EstimatePart.objects.create(
        estimate=estimate,
        part_number=1,
        part_type=PartType.PLATE_ROLL,
        quantity=2,
        thickness='1/4"',
        width='48',
        labor_total=Decimal('90.00'),
        part_total=Decimal('90.00'),
        form_data={'_rollNotes': 'tight'},
    )
    return estimate


@pytest.fixture
def material_estimate(db):
    """Estimate whose parts need material ordered from two suppliers."""
    estimate = Estimate.objects.create(
        estimate_number='EST-WO-002',
        client_name='Delta Tanks',
        tax_rate=Decimal('9.750'),
    )
    parts = [
        ('Steel Co', '1/2" A36 plate 48x96'),
        ('Alloy Supply', '6" SCH40 pipe x 20\''),
        ('Steel Co', '3/8" A36 plate 48x96'),
        ('', '2x2x1/4 angle x 20\''),
    ]
    for number, (supplier, description) in enumerate(parts, start=1):
        EstimatePart.objects.create(
            estimate=estimate,
            part_number=number,
            part_type=PartType.OTHER,
            material_source=MaterialSource.WE_ORDER,
            supplier_name=supplier,
            material_description=description,
            material_unit_cost=Decimal('100.00'),
            part_total=Decimal('120.00'),
        )
    EstimatePart.objects.create(
        estimate=estimate,
        part_number=5,
        part_type=PartType.OTHER,
        material_source=MaterialSource.CUSTOMER_SUPPLIED,
        material_description='Customer tube',
        rolling_cost=Decimal('60.00'),
        part_total=Decimal('60.00'),
    )
    return estimate


@pytest.fixture
def work_order(estimate):
    """Work order converted from the sent estimate."""
    return convert_estimate(estimate_id=estimate.id)


@pytest.fixture
def material_work_order(material_estimate):
    """Work order waiting for materials."""
    return convert_estimate(estimate_id=material_estimate.id)

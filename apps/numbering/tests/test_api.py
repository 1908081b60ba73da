import pytest
from django.urls import reverse
from rest_framework import status
from apps.numbering.models import DRNumber, IssuanceStatus, PONumber
from apps.numbering.services import DR_COUNTER, PO_COUNTER, issue, void
from apps.workorders.models import WorkOrder


# =============================================================================
# Listing Tests
# =============================================================================

@pytest.mark.django_db
class TestNumberList:
    """Tests for GET /api/numbers/{series}/"""

    def test_list_requires_auth(self, api_client):
        url = reverse('numbering:dr-number-list')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_list_dr_numbers(self, office_client):
        issue(DR_COUNTER, client_name='Pioneer Rail')
        issue(DR_COUNTER, client_name='Harbor Marine')

        url = reverse('numbering:dr-number-list')
        response = office_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert [r['number'] for r in response.data['results']] == [2952, 2951]
        assert response.data['results'][0]['display'] == 'DR-2952'

    def test_filter_by_status(self, office_client):
        first = issue(PO_COUNTER)
        issue(PO_COUNTER)
        void(PO_COUNTER, first.number, reason='Cancelled')

        url = reverse('numbering:po-number-list')
        response = office_client.get(url, {'status': 'void'})

        assert len(response.data['results']) == 1
        assert response.data['results'][0]['display'] == 'PO7765'

    def test_retrieve_by_number(self, office_client):
        issue(PO_COUNTER, supplier='Steel Co')

        url = reverse('numbering:po-number-detail', kwargs={'number': 7765})
        response = office_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['supplier'] == 'Steel Co'

    def test_voided_list(self, office_client):
        first = issue(DR_COUNTER)
        issue(DR_COUNTER)
        void(DR_COUNTER, first.number, reason='Typo')

        url = reverse('numbering:dr-number-voided')
        response = office_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert [r['number'] for r in response.data['results']] == [first.number]
        assert response.data['results'][0]['void_reason'] == 'Typo'


# =============================================================================
# Counter Tests
# =============================================================================

@pytest.mark.django_db
class TestNextNumber:
    """Tests for /api/numbers/{series}/next/"""

    def test_preview(self, office_client):
        url = reverse('numbering:dr-number-next')
        response = office_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'next_number': 2951, 'display': 'DR-2951'}
        assert not DRNumber.objects.exists()

    def test_set_next_staff_only(self, office_client):
        url = reverse('numbering:dr-number-next')
        response = office_client.put(url, {'next_number': 3000}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_set_next(self, admin_client):
        url = reverse('numbering:po-number-next')
        response = admin_client.put(url, {'next_number': 8000}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['display'] == 'PO8000'

    def test_set_next_to_issued(self, admin_client):
        issue(DR_COUNTER)

        url = reverse('numbering:dr-number-next')
        response = admin_client.put(url, {'next_number': 2951}, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_stats(self, office_client):
        issue(DR_COUNTER)

        url = reverse('numbering:dr-number-stats')
        response = office_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['last_used'] == 2951
        assert response.data['next_number'] == 2952
        assert response.data['active_count'] == 1


# =============================================================================
# Assign / Void / Release Tests
# =============================================================================

@pytest.mark.django_db
class TestAssign:
    """Tests for POST /api/numbers/{series}/assign/"""

    def test_assign_next(self, office_client, estimate):
        url = reverse('numbering:dr-number-assign')
        data = {'client_name': 'Pioneer Rail', 'estimate': str(estimate.id)}
        response = office_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['number'] == 2951
        assert DRNumber.objects.get(number=2951).estimate_id == estimate.id

    def test_assign_custom(self, office_client):
        url = reverse('numbering:po-number-assign')
        data = {'custom_number': 9100, 'supplier': 'Alloy Supply'}
        response = office_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['display'] == 'PO9100'
        assert PONumber.objects.get(number=9100).supplier == 'Alloy Supply'

    def test_assign_custom_taken(self, office_client):
        issue(PO_COUNTER, 9100)

        url = reverse('numbering:po-number-assign')
        response = office_client.post(url, {'custom_number': 9100}, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert PONumber.objects.count() == 1


@pytest.mark.django_db
class TestVoidAndRelease:
    """Tests for voiding and releasing numbers."""

    def test_void(self, office_client, office_user):
        issue(PO_COUNTER)

        url = reverse('numbering:po-number-void', kwargs={'number': 7765})
        response = office_client.post(url, {'reason': 'Supplier cancelled'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == IssuanceStatus.VOID
        assert response.data['voided_by'] == office_user.username

    def test_void_requires_reason(self, office_client):
        issue(PO_COUNTER)

        url = reverse('numbering:po-number-void', kwargs={'number': 7765})
        response = office_client.post(url, {'reason': '  '}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_void_twice(self, office_client):
        issuance = issue(PO_COUNTER)
        void(PO_COUNTER, issuance.number, reason='First')

        url = reverse('numbering:po-number-void', kwargs={'number': issuance.number})
        response = office_client.post(url, {'reason': 'Again'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_void_not_issued(self, office_client):
        url = reverse('numbering:dr-number-void', kwargs={'number': 4242})
        response = office_client.post(url, {'reason': 'Typo'}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_void_dr_deletes_work_order(self, office_client, legacy_work_order):
        issue(DR_COUNTER, 2955, work_order=legacy_work_order)

        url = reverse('numbering:dr-number-void', kwargs={'number': 2955})
        response = office_client.post(url, {'reason': 'Job cancelled'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert not WorkOrder.objects.filter(id=legacy_work_order.id).exists()

    def test_release_staff_only(self, office_client):
        issue(DR_COUNTER)

        url = reverse('numbering:dr-number-detail', kwargs={'number': 2951})
        response = office_client.delete(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert DRNumber.objects.exists()

    def test_release(self, admin_client):
        issue(DR_COUNTER)

        url = reverse('numbering:dr-number-detail', kwargs={'number': 2951})
        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not DRNumber.objects.exists()

    def test_release_not_issued(self, admin_client):
        url = reverse('numbering:dr-number-detail', kwargs={'number': 2951})
        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

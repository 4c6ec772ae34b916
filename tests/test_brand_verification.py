import pytest

from product_management.models import Brand, BrandVerificationRequest, Product

pytestmark = pytest.mark.django_db

VERIFICATIONS_URL = "/products/brand-verifications/"
STATUS_URL = f"{VERIFICATIONS_URL}status/"


def process_url(verification_id):
    return f"{VERIFICATIONS_URL}{verification_id}/process/"


@pytest.fixture
def submitted(client_for, brand_user, brand):
    response = client_for(brand_user).post(
        VERIFICATIONS_URL,
        {"business_registration": "HRB-1234", "website": "https://acme.example", "additional_info": "Est. 1949"},
        format="json",
    )
    assert response.status_code == 201
    return BrandVerificationRequest.objects.get(pk=response.data["verification_id"])


def test_status_before_submitting(client_for, brand_user, brand):
    response = client_for(brand_user).get(STATUS_URL)

    assert response.status_code == 200
    assert response.data["verification_status"] == "not_submitted"
    assert response.data["is_verified"] is False
    assert response.data["submitted_at"] is None
    assert response.data["next_steps"].startswith("Submit your verification documents")


def test_submit_creates_pending_request(submitted, brand, client_for, brand_user):
    assert submitted.brand == brand
    assert submitted.status == BrandVerificationRequest.PENDING
    brand.refresh_from_db()
    assert brand.website == "https://acme.example"

    status = client_for(brand_user).get(STATUS_URL).data
    assert status["verification_status"] == "pending"
    assert status["submitted_at"] is not None


def test_second_pending_request_conflicts(submitted, client_for, brand_user):
    response = client_for(brand_user).post(VERIFICATIONS_URL, {"business_registration": "HRB-9"}, format="json")

    assert response.status_code == 409
    assert BrandVerificationRequest.objects.count() == 1


def test_only_brand_accounts_with_a_brand_submit(auth_client, client_for, brand_user, api_client):
    assert auth_client.post(VERIFICATIONS_URL, {}, format="json").status_code == 403
    assert api_client.get(STATUS_URL).status_code == 401
    # brand account without a registered brand
    assert client_for(brand_user).post(VERIFICATIONS_URL, {}, format="json").status_code == 404


def test_staff_lists_pending_requests(client_for, staff_user, brand_user, submitted, product):
    response = client_for(staff_user).get(VERIFICATIONS_URL)

    assert response.status_code == 200
    assert [v["verification_id"] for v in response.data] == [submitted.id]
    assert response.data[0]["brand_name"] == "Acme"
    assert response.data[0]["product_count"] == Product.objects.filter(brand=submitted.brand).count()

    assert client_for(staff_user).get(VERIFICATIONS_URL, {"status": "approved"}).data == []
    assert client_for(brand_user).get(VERIFICATIONS_URL).status_code == 403


def test_approval_verifies_brand(client_for, staff_user, brand_user, submitted):
    response = client_for(staff_user).post(
        process_url(submitted.id), {"status": "approved", "notes": "Registry checked"}, format="json"
    )

    assert response.status_code == 200
    assert response.data["verification"]["status"] == "approved"
    submitted.refresh_from_db()
    assert submitted.reviewed_by == staff_user
    assert submitted.reviewed_at is not None
    assert Brand.objects.get(pk=submitted.brand_id).is_verified is True

    status = client_for(brand_user).get(STATUS_URL).data
    assert status["verification_status"] == "approved"
    assert status["notes"] == "Registry checked"
    assert status["next_steps"].startswith("Your brand is verified")

    # verified brands do not resubmit
    assert client_for(brand_user).post(VERIFICATIONS_URL, {}, format="json").status_code == 409


def test_rejection_allows_resubmission(client_for, staff_user, brand_user, submitted):
    staff = client_for(staff_user)
    response = staff.post(process_url(submitted.id), {"status": "rejected", "notes": "Blurry scan"}, format="json")

    assert response.status_code == 200
    assert Brand.objects.get(pk=submitted.brand_id).is_verified is False
    assert staff.post(process_url(submitted.id), {"status": "approved"}, format="json").status_code == 409

    status = client_for(brand_user).get(STATUS_URL).data
    assert status["verification_status"] == "rejected"
    assert status["notes"] == "Blurry scan"

    resubmitted = client_for(brand_user).post(VERIFICATIONS_URL, {"business_registration": "HRB-1234"}, format="json")
    assert resubmitted.status_code == 201


@pytest.mark.parametrize("payload", [{}, {"status": "pending"}, {"status": "maybe"}])
def test_process_requires_a_decision(client_for, staff_user, submitted, payload):
    response = client_for(staff_user).post(process_url(submitted.id), payload, format="json")

    assert response.status_code == 400


def test_process_unknown_request(client_for, staff_user, db):
    assert client_for(staff_user).post(process_url(987654), {"status": "approved"}, format="json").status_code == 404

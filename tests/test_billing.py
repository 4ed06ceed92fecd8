import hashlib
import hmac
import json
from decimal import Decimal
from unittest import mock

import pytest

from apps.billing.exceptions import PaymentGatewayError
from apps.billing.gateway import to_paise
from apps.billing.models import Payment
from apps.billing.services import EscrowService
from apps.notifications.models import Notification
from apps.orders.models import Order
from apps.projects.models import ProjectRequest
from apps.proposals.models import Proposal
from apps.proposals.services.proposal_workflow import accept_proposal, submit_proposal
from apps.users.models import Profile
from tests.conftest import WEBHOOK_SECRET


def sign(body):
    return hmac.new(WEBHOOK_SECRET.encode(), body, hashlib.sha256).hexdigest()


def captured_event(razorpay_order_id, payment_id="pay_1"):
    return json.dumps({
        "event": "payment.captured",
        "payload": {"payment": {"entity": {"id": payment_id, "order_id": razorpay_order_id}}},
    }).encode()


def post_webhook(client, body, signature=None):
    headers = {}
    if signature is not None:
        headers["HTTP_X_RAZORPAY_SIGNATURE"] = signature
    return client.post("/razorpay", data=body, content_type="application/json", **headers)


@pytest.fixture
def gateway():
    fake = mock.Mock()
    fake.key_id = "rzp_test_key"
    fake.currency = "INR"
    fake.create_order.return_value = {"id": "order_RZP1"}
    fake.fetch_transfer_id.return_value = "trf_1"
    fake.transfer.return_value = {"id": "trf_release"}
    fake.create_linked_account.return_value = {"id": "acc_123"}
    with mock.patch("apps.billing.services.get_gateway", return_value=fake):
        yield fake


@pytest.fixture
def accepted(freelancer, other_freelancer, client_user, project):
    """A project with one proposal awaiting payment and one pending sibling."""
    winner = submit_proposal(freelancer, project.id, "a", Decimal("500"), 7)
    sibling = submit_proposal(other_freelancer, project.id, "b", Decimal("600"), 10)
    _, order = accept_proposal(client_user, winner.id)
    payment = Payment.objects.create(
        order=order,
        razorpay_order_id="order_RZP1",
        amount=order.price,
    )
    return {"winner": winner, "sibling": sibling, "order": order, "payment": payment}


@pytest.mark.django_db
class TestCreateRazorpayOrder:

    def test_opens_gateway_order_and_records_payment(self, auth_client, client_user, freelancer, project, gateway):
        proposal = submit_proposal(freelancer, project.id, "a", Decimal("500"), 7)
        _, order = accept_proposal(client_user, proposal.id)

        response = auth_client(client_user).post(
            "/api/payments/razorpay-order/", {"order_id": order.id}, format="json"
        )

        assert response.status_code == 201
        assert response.data["razorpay_order_id"] == "order_RZP1"
        assert response.data["amount"] == 50000
        assert response.data["key_id"] == "rzp_test_key"

        gateway.create_order.assert_called_once()
        assert gateway.create_order.call_args.kwargs["receipt"] == order.id

        payment = Payment.objects.get(razorpay_order_id="order_RZP1")
        assert payment.status == Payment.PENDING
        assert payment.amount == Decimal("500")

    def test_missing_keys(self, auth_client, client_user, freelancer, project, settings):
        settings.RAZORPAY_KEY_ID = ""
        proposal = submit_proposal(freelancer, project.id, "a", Decimal("500"), 7)
        _, order = accept_proposal(client_user, proposal.id)

        response = auth_client(client_user).post(
            "/api/payments/razorpay-order/", {"order_id": order.id}, format="json"
        )

        assert response.status_code == 503
        assert not Payment.objects.exists()

    def test_only_client_may_pay(self, auth_client, client_user, freelancer, project, gateway):
        proposal = submit_proposal(freelancer, project.id, "a", Decimal("500"), 7)
        _, order = accept_proposal(client_user, proposal.id)

        response = auth_client(freelancer).post(
            "/api/payments/razorpay-order/", {"order_id": order.id}, format="json"
        )

        assert response.status_code == 403
        gateway.create_order.assert_not_called()

    def test_second_checkout_refused_while_payment_open(self, auth_client, client_user, freelancer, project, gateway):
        proposal = submit_proposal(freelancer, project.id, "a", Decimal("500"), 7)
        _, order = accept_proposal(client_user, proposal.id)
        api = auth_client(client_user)
        api.post("/api/payments/razorpay-order/", {"order_id": order.id}, format="json")

        response = api.post("/api/payments/razorpay-order/", {"order_id": order.id}, format="json")

        assert response.status_code == 400
        assert gateway.create_order.call_count == 1
        assert Payment.objects.filter(order=order).count() == 1

    def test_gateway_failure_surfaces(self, auth_client, client_user, freelancer, project, gateway):
        gateway.create_order.side_effect = PaymentGatewayError("boom")
        proposal = submit_proposal(freelancer, project.id, "a", Decimal("500"), 7)
        _, order = accept_proposal(client_user, proposal.id)

        response = auth_client(client_user).post(
            "/api/payments/razorpay-order/", {"order_id": order.id}, format="json"
        )

        assert response.status_code == 502
        assert not Payment.objects.exists()


def test_to_paise_rounds_half_up():
    assert to_paise(Decimal("500")) == 50000
    assert to_paise(Decimal("10.005")) == 1001


@pytest.mark.django_db
class TestWebhook:

    def test_missing_signature(self, client, accepted):
        response = post_webhook(client, captured_event("order_RZP1"))

        assert response.status_code == 401
        accepted["payment"].refresh_from_db()
        assert accepted["payment"].status == Payment.PENDING

    def test_tampered_body(self, client, accepted, gateway):
        body = captured_event("order_RZP1")
        signature = sign(body)
        tampered = body.replace(b"pay_1", b"pay_2")

        response = post_webhook(client, tampered, signature)

        assert response.status_code == 401
        accepted["payment"].refresh_from_db()
        assert accepted["payment"].status == Payment.PENDING

    def test_body_with_invalid_utf8_fails_verification(self, client, accepted, gateway):
        body = captured_event("order_RZP1")
        signature = sign(body)
        tampered = body[:5] + b"\xff" + body[6:]

        response = post_webhook(client, tampered, signature)

        assert response.status_code == 401
        accepted["payment"].refresh_from_db()
        assert accepted["payment"].status == Payment.PENDING

    def test_verification_error_is_bad_request(self, client, accepted, settings):
        settings.RAZORPAY_WEBHOOK_SECRET = ""
        body = captured_event("order_RZP1")

        response = post_webhook(client, body, sign(body))

        assert response.status_code == 400

    def test_captured_payment_funds_everything(self, client, accepted, freelancer, client_user, project, gateway):
        body = captured_event("order_RZP1")

        response = post_webhook(client, body, sign(body))

        assert response.status_code == 200
        gateway.fetch_transfer_id.assert_called_once_with("pay_1")

        payment = Payment.objects.get(id=accepted["payment"].id)
        assert payment.status == Payment.FUNDED
        assert payment.razorpay_transfer_id == "trf_1"
        assert payment.razorpay_payment_id == "pay_1"
        assert payment.funded_at is not None

        order = Order.objects.get(id=accepted["order"].id)
        assert order.status == Order.IN_PROGRESS

        project.refresh_from_db()
        assert project.status == ProjectRequest.IN_PROGRESS
        assert project.selected_freelancer == freelancer

        accepted["winner"].refresh_from_db()
        accepted["sibling"].refresh_from_db()
        assert accepted["winner"].status == Proposal.ACCEPTED
        assert accepted["sibling"].status == Proposal.REJECTED

        for party in (client_user, freelancer):
            assert Notification.objects.filter(
                recipient=party, notif_type=Notification.PAYMENT_FUNDED
            ).count() == 1

    def test_one_accepted_proposal_per_funded_project(self, client, accepted, project, gateway):
        body = captured_event("order_RZP1")
        post_webhook(client, body, sign(body))

        proposals = Proposal.objects.filter(project=project)
        assert proposals.filter(status=Proposal.ACCEPTED).count() == 1
        assert set(proposals.exclude(status=Proposal.ACCEPTED).values_list("status", flat=True)) == {
            Proposal.REJECTED
        }

    def test_replay_is_a_no_op(self, client, accepted, client_user, gateway):
        body = captured_event("order_RZP1")
        post_webhook(client, body, sign(body))

        Order.objects.filter(id=accepted["order"].id).update(status=Order.DELIVERED)
        response = post_webhook(client, body, sign(body))

        assert response.status_code == 200
        assert Order.objects.get(id=accepted["order"].id).status == Order.DELIVERED
        assert Notification.objects.filter(
            recipient=client_user, notif_type=Notification.PAYMENT_FUNDED
        ).count() == 1

    def test_transfer_lookup_failure_is_tolerated(self, client, accepted, gateway):
        gateway.fetch_transfer_id.side_effect = RuntimeError("network down")
        body = captured_event("order_RZP1")

        response = post_webhook(client, body, sign(body))

        assert response.status_code == 200
        payment = Payment.objects.get(id=accepted["payment"].id)
        assert payment.status == Payment.FUNDED
        assert payment.razorpay_transfer_id == ""

    def test_other_events_ignored(self, client, accepted, gateway):
        body = json.dumps({"event": "payment.failed", "payload": {}}).encode()

        response = post_webhook(client, body, sign(body))

        assert response.status_code == 200
        accepted["payment"].refresh_from_db()
        assert accepted["payment"].status == Payment.PENDING

    def test_processing_errors_still_acknowledged(self, client, accepted):
        body = b"not json"

        response = post_webhook(client, body, sign(body))

        assert response.status_code == 200

    def test_unknown_gateway_order(self, client, accepted, gateway):
        body = captured_event("order_UNKNOWN")

        response = post_webhook(client, body, sign(body))

        assert response.status_code == 200
        accepted["payment"].refresh_from_db()
        assert accepted["payment"].status == Payment.PENDING


@pytest.mark.django_db
class TestMarkAsFunded:

    def test_sibling_orders_cancelled(self, accepted, client_user):
        _, sibling_order = accept_proposal(client_user, accepted["sibling"].id)

        EscrowService.mark_as_funded("order_RZP1", transfer_id="trf_1")

        sibling_order.refresh_from_db()
        assert sibling_order.status == Order.CANCELLED

    def test_late_capture_for_losing_proposal_is_disputed(self, accepted, client_user):
        _, sibling_order = accept_proposal(client_user, accepted["sibling"].id)
        late_payment = Payment.objects.create(
            order=sibling_order, razorpay_order_id="order_RZP2", amount=sibling_order.price
        )
        EscrowService.mark_as_funded("order_RZP1")

        EscrowService.mark_as_funded("order_RZP2")

        late_payment.refresh_from_db()
        sibling_order.refresh_from_db()
        assert late_payment.status == Payment.FUNDED
        assert sibling_order.status == Order.DISPUTED
        accepted["sibling"].refresh_from_db()
        assert accepted["sibling"].status == Proposal.REJECTED

    def test_second_capture_for_paid_order_keeps_it_in_progress(self, accepted, client_user):
        order = accepted["order"]
        EscrowService.mark_as_funded("order_RZP1")
        extra = Payment.objects.create(order=order, razorpay_order_id="order_RZP2", amount=order.price)

        EscrowService.mark_as_funded("order_RZP2")

        order.refresh_from_db()
        extra.refresh_from_db()
        accepted["winner"].refresh_from_db()
        assert order.status == Order.IN_PROGRESS
        assert accepted["winner"].status == Proposal.ACCEPTED
        assert extra.status == Payment.FUNDED
        notices = Notification.objects.filter(recipient=client_user, notif_type=Notification.PAYMENT_FUNDED)
        assert [n.data.get("duplicate") for n in notices].count(True) == 1

    def test_unknown_order_returns_none(self, db):
        assert EscrowService.mark_as_funded("order_missing") is None


@pytest.fixture
def funded(accepted):
    EscrowService.mark_as_funded("order_RZP1", transfer_id="trf_1")
    accepted["payment"].refresh_from_db()
    return accepted["payment"]


@pytest.mark.django_db
class TestReleaseEscrow:

    def test_without_payout_account(self, auth_client, client_user, funded, gateway):
        response = auth_client(client_user).post(f"/api/payments/{funded.id}/release/")

        assert response.status_code == 400
        assert response.data["detail"].code == "payout_account_missing"
        funded.refresh_from_db()
        assert funded.status == Payment.FUNDED
        gateway.transfer.assert_not_called()

    def test_release_to_linked_account(self, auth_client, client_user, freelancer, funded, gateway):
        Profile.objects.filter(user=freelancer).update(razorpay_account_id="acc_123")

        response = auth_client(client_user).post(f"/api/payments/{funded.id}/release/")

        assert response.status_code == 200
        gateway.transfer.assert_called_once()
        assert gateway.transfer.call_args.args[:2] == ("acc_123", Decimal("500.00"))

        funded.refresh_from_db()
        assert funded.status == Payment.RELEASED
        assert funded.released_at is not None
        assert funded.razorpay_transfer_id == "trf_release"
        assert Notification.objects.filter(
            recipient=freelancer, notif_type=Notification.ESCROW_RELEASED
        ).exists()

    def test_admin_may_release(self, auth_client, admin_user, freelancer, funded, gateway):
        Profile.objects.filter(user=freelancer).update(razorpay_account_id="acc_123")

        response = auth_client(admin_user).post(f"/api/payments/{funded.id}/release/")

        assert response.status_code == 200

    def test_freelancer_may_not_release(self, auth_client, freelancer, funded, gateway):
        response = auth_client(freelancer).post(f"/api/payments/{funded.id}/release/")

        assert response.status_code == 403
        funded.refresh_from_db()
        assert funded.status == Payment.FUNDED

    def test_pending_payment_cannot_be_released(self, auth_client, client_user, accepted, gateway):
        response = auth_client(client_user).post(f"/api/payments/{accepted['payment'].id}/release/")

        assert response.status_code == 400
        gateway.transfer.assert_not_called()

    def test_disputed_order_cannot_be_released(self, auth_client, client_user, freelancer, funded, gateway):
        Profile.objects.filter(user=freelancer).update(razorpay_account_id="acc_123")
        Order.objects.filter(id=funded.order_id).update(status=Order.DISPUTED)

        response = auth_client(client_user).post(f"/api/payments/{funded.id}/release/")

        assert response.status_code == 400
        gateway.transfer.assert_not_called()
        funded.refresh_from_db()
        assert funded.status == Payment.FUNDED

    def test_second_release_is_refused(self, auth_client, client_user, freelancer, funded, gateway):
        Profile.objects.filter(user=freelancer).update(razorpay_account_id="acc_123")
        api = auth_client(client_user)
        api.post(f"/api/payments/{funded.id}/release/")

        response = api.post(f"/api/payments/{funded.id}/release/")

        assert response.status_code == 400
        gateway.transfer.assert_called_once()

    def test_extra_payment_not_released_after_payout(self, auth_client, client_user, freelancer, funded, gateway):
        Profile.objects.filter(user=freelancer).update(razorpay_account_id="acc_123")
        extra = Payment.objects.create(
            order_id=funded.order_id, razorpay_order_id="order_RZP2", amount=funded.amount
        )
        EscrowService.mark_as_funded("order_RZP2")
        api = auth_client(client_user)
        api.post(f"/api/payments/{funded.id}/release/")

        response = api.post(f"/api/payments/{extra.id}/release/")

        assert response.status_code == 400
        gateway.transfer.assert_called_once()

    def test_gateway_failure_leaves_payment_funded(self, auth_client, client_user, freelancer, funded, gateway):
        Profile.objects.filter(user=freelancer).update(razorpay_account_id="acc_123")
        gateway.transfer.side_effect = PaymentGatewayError("declined")

        response = auth_client(client_user).post(f"/api/payments/{funded.id}/release/")

        assert response.status_code == 502
        funded.refresh_from_db()
        assert funded.status == Payment.FUNDED


@pytest.mark.django_db
class TestPayoutsAndReads:

    def test_onboard_freelancer(self, auth_client, freelancer, gateway):
        response = auth_client(freelancer).post("/api/payments/onboard/")

        assert response.status_code == 200
        assert response.data["razorpay_account_id"] == "acc_123"
        assert Profile.objects.get(user=freelancer).razorpay_account_id == "acc_123"
        gateway.create_linked_account.assert_called_once_with("freelancer@example.com", "Fred Lancer")

    def test_onboard_requires_freelancer(self, auth_client, client_user, gateway):
        response = auth_client(client_user).post("/api/payments/onboard/")

        assert response.status_code == 403

    def test_payments_for_order_parties_only(self, auth_client, client_user, freelancer, other_freelancer, accepted):
        url = f"/api/orders/{accepted['order'].id}/payments/"

        response = auth_client(client_user).get(url)
        assert response.status_code == 200
        assert [p["razorpay_order_id"] for p in response.data] == ["order_RZP1"]

        assert auth_client(freelancer).get(url).status_code == 200
        assert auth_client(other_freelancer).get(url).status_code == 403

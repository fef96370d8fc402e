"""Unit tests for CheckoutService."""

import time
from unittest.mock import MagicMock

import pytest
import stripe

from beatstore.api.middleware.error_handler import (
    APIError,
    NotFoundError,
    ProductNotFoundError,
    UpstreamUnavailableError,
)
from beatstore.services.checkout_service import CheckoutService


@pytest.fixture
def checkout_service(fake_supabase, mock_stripe: MagicMock) -> CheckoutService:
    """Create CheckoutService with mocked dependencies."""
    session = MagicMock()
    session.id = "cs_test_123"
    session.url = "https://checkout.stripe.com/c/pay/cs_test_123"
    mock_stripe.checkout.Session.create.return_value = session
    return CheckoutService()


class TestCreateCheckoutSession:
    """Tests for create_checkout_session method."""

    @pytest.mark.asyncio
    async def test_creates_session_and_pending_order(
        self,
        checkout_service: CheckoutService,
        mock_stripe: MagicMock,
        fake_supabase,
    ) -> None:
        """Test that a known product yields a session and one pending order."""
        result = await checkout_service.create_checkout_session("drumkit-essential")

        assert result["session_id"] == "cs_test_123"
        assert result["checkout_url"] == "https://checkout.stripe.com/c/pay/cs_test_123"

        rows = fake_supabase.orders().rows
        assert len(rows) == 1
        assert rows[0]["stripe_session_id"] == "cs_test_123"
        assert rows[0]["status"] == "pending"
        assert rows[0]["price_paid"] == 25.0

    @pytest.mark.asyncio
    async def test_sends_catalog_price_and_redirects(
        self,
        checkout_service: CheckoutService,
        mock_stripe: MagicMock,
    ) -> None:
        """Test the parameters passed to Stripe."""
        before = int(time.time())
        await checkout_service.create_checkout_session("bundle-completo")

        params = mock_stripe.checkout.Session.create.call_args.kwargs
        line_item = params["line_items"][0]
        assert params["mode"] == "payment"
        assert line_item["price_data"]["unit_amount"] == 9900
        assert line_item["price_data"]["product_data"]["name"] == "BUNDLE COMPLETO"
        assert line_item["quantity"] == 1
        assert params["metadata"] == {"product_id": "bundle-completo"}
        assert params["success_url"] == (
            "https://shop.example.com/success.html?session_id={CHECKOUT_SESSION_ID}"
        )
        assert params["cancel_url"] == "https://shop.example.com/?canceled=true"
        assert before + 1800 <= params["expires_at"] <= int(time.time()) + 1800

    @pytest.mark.asyncio
    async def test_unknown_product_creates_nothing(
        self,
        checkout_service: CheckoutService,
        mock_stripe: MagicMock,
        fake_supabase,
    ) -> None:
        """Test that an unknown product is rejected before calling Stripe."""
        with pytest.raises(ProductNotFoundError) as exc_info:
            await checkout_service.create_checkout_session("does-not-exist")

        assert exc_info.value.status_code == 400
        mock_stripe.checkout.Session.create.assert_not_called()
        assert fake_supabase.orders().rows == []

    @pytest.mark.asyncio
    async def test_stripe_connection_error_is_retryable(
        self,
        checkout_service: CheckoutService,
        mock_stripe: MagicMock,
    ) -> None:
        """Test that connectivity failures map to a 503."""
        mock_stripe.checkout.Session.create.side_effect = stripe.APIConnectionError("network down")

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await checkout_service.create_checkout_session("drumkit-essential")

        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_other_stripe_errors_are_server_errors(
        self,
        checkout_service: CheckoutService,
        mock_stripe: MagicMock,
    ) -> None:
        """Test that other Stripe failures map to a 500."""
        mock_stripe.checkout.Session.create.side_effect = stripe.InvalidRequestError("bad", "expires_at")

        with pytest.raises(APIError) as exc_info:
            await checkout_service.create_checkout_session("drumkit-essential")

        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_storage_failure_does_not_fail_checkout(
        self,
        checkout_service: CheckoutService,
        fake_supabase,
    ) -> None:
        """Test that a failed insert is swallowed."""
        fake_supabase.orders().fail_with = RuntimeError("database asleep")

        result = await checkout_service.create_checkout_session("drumkit-essential")

        assert result["session_id"] == "cs_test_123"


class TestGetSessionStatus:
    """Tests for get_session_status method."""

    @pytest.mark.asyncio
    async def test_paid_session(self, checkout_service: CheckoutService, mock_stripe: MagicMock) -> None:
        """Test status of a paid session."""
        session = MagicMock()
        session.payment_status = "paid"
        session.customer_details.email = "buyer@example.com"
        mock_stripe.checkout.Session.retrieve.return_value = session

        result = await checkout_service.get_session_status("cs_test_123")

        assert result == {"status": "paid", "email": "buyer@example.com", "completed": True}

    @pytest.mark.asyncio
    async def test_unpaid_session_without_details(
        self, checkout_service: CheckoutService, mock_stripe: MagicMock
    ) -> None:
        """Test status of a session the buyer has not paid yet."""
        session = MagicMock()
        session.payment_status = "unpaid"
        session.customer_details = None
        mock_stripe.checkout.Session.retrieve.return_value = session

        result = await checkout_service.get_session_status("cs_test_123")

        assert result == {"status": "unpaid", "email": None, "completed": False}

    @pytest.mark.asyncio
    async def test_unknown_session(self, checkout_service: CheckoutService, mock_stripe: MagicMock) -> None:
        """Test that Stripe errors become NotFoundError."""
        mock_stripe.checkout.Session.retrieve.side_effect = stripe.InvalidRequestError(
            "No such checkout.session", "id"
        )

        with pytest.raises(NotFoundError):
            await checkout_service.get_session_status("cs_missing")

"""Tests for order, capital entry and user form validation."""

from decimal import Decimal

import pytest

from shop_ledger.models.capital import CapitalSource, CapitalType
from shop_ledger.models.order import OrderStatus
from shop_ledger.models.user import User, UserRole
from shop_ledger.validation import (
    ValidationError,
    validate_capital_entry_input,
    validate_order_input,
    validate_user_input,
)


def valid_order_form() -> dict[str, object]:
    return {
        "etsyOrderId": "ORD12345",
        "orderDate": "2024-05-15T10:30:00Z",
        "status": "Delivered",
        "orderPrice": 120.5,
        "orderCost": 45,
        "shippingCost": "12.50",
        "additionalFees": 0,
        "trackingNumber": "1Z999AA10123456789",
    }


def valid_capital_form() -> dict[str, object]:
    return {
        "type": "Withdrawal",
        "source": "Loan Repayment",
        "amount": "250",
        "transactionDate": "2024-06-01",
        "submittedBy": "admin@example.com",
    }


class TestValidateOrderInput:
    """Tests for validate_order_input."""

    def test_valid_form(self) -> None:
        cleaned = validate_order_input(valid_order_form())

        assert cleaned["etsyOrderId"] == "ORD12345"
        assert cleaned["status"] is OrderStatus.DELIVERED
        assert cleaned["orderPrice"] == Decimal("120.5")
        assert cleaned["shippingCost"] == Decimal("12.50")
        assert cleaned["additionalFees"] == Decimal("0")
        assert "notes" not in cleaned

    def test_missing_required_fields(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_order_input({})

        errors = exc_info.value.errors
        assert errors["etsyOrderId"] == "Etsy Order ID is required"
        assert errors["orderDate"] == "Order date is required"
        assert errors["orderPrice"] == "Required"
        assert errors["status"] == "Required"

    def test_blank_order_id(self) -> None:
        form = valid_order_form()
        form["etsyOrderId"] = "   "
        with pytest.raises(ValidationError) as exc_info:
            validate_order_input(form)
        assert exc_info.value.errors == {"etsyOrderId": "Etsy Order ID is required"}

    @pytest.mark.parametrize("price", [0, -5, "0.00"])
    def test_price_must_be_positive(self, price: object) -> None:
        form = valid_order_form()
        form["orderPrice"] = price
        with pytest.raises(ValidationError) as exc_info:
            validate_order_input(form)
        assert exc_info.value.errors["orderPrice"] == "Must be positive"

    @pytest.mark.parametrize("field", ["orderCost", "shippingCost", "additionalFees"])
    def test_costs_must_not_be_negative(self, field: str) -> None:
        form = valid_order_form()
        form[field] = -0.01
        with pytest.raises(ValidationError) as exc_info:
            validate_order_input(form)
        assert exc_info.value.errors == {field: "Must be zero or more"}

    @pytest.mark.parametrize("value", ["abc", "NaN", True])
    def test_non_numeric_amount(self, value: object) -> None:
        form = valid_order_form()
        form["orderCost"] = value
        with pytest.raises(ValidationError) as exc_info:
            validate_order_input(form)
        assert exc_info.value.errors["orderCost"] == "Must be a number"

    def test_unknown_status(self) -> None:
        form = valid_order_form()
        form["status"] = "Lost"
        with pytest.raises(ValidationError) as exc_info:
            validate_order_input(form)
        assert exc_info.value.errors["status"].startswith("Must be one of")

    def test_bad_date(self) -> None:
        form = valid_order_form()
        form["orderDate"] = "15/05/2024"
        with pytest.raises(ValidationError) as exc_info:
            validate_order_input(form)
        assert exc_info.value.errors["orderDate"] == "Must be an ISO-8601 date"

    def test_partial_update(self) -> None:
        cleaned = validate_order_input({"status": "Shipped"}, partial=True)
        assert cleaned == {"status": OrderStatus.SHIPPED}

    def test_partial_update_still_checks_values(self) -> None:
        with pytest.raises(ValidationError):
            validate_order_input({"orderPrice": -1}, partial=True)

    def test_error_message_lists_fields(self) -> None:
        form = valid_order_form()
        form["orderPrice"] = 0
        with pytest.raises(ValidationError, match="orderPrice: Must be positive"):
            validate_order_input(form)


class TestValidateCapitalEntryInput:
    """Tests for validate_capital_entry_input."""

    def test_valid_withdrawal_loan_repayment(self) -> None:
        cleaned = validate_capital_entry_input(valid_capital_form())

        assert cleaned["type"] is CapitalType.WITHDRAWAL
        assert cleaned["source"] is CapitalSource.LOAN_REPAYMENT
        assert cleaned["amount"] == Decimal("250")

    def test_loan_repayment_not_allowed_for_deposit(self) -> None:
        form = valid_capital_form()
        form["type"] = "Deposit"
        with pytest.raises(ValidationError) as exc_info:
            validate_capital_entry_input(form)
        assert exc_info.value.errors == {
            "source": "'Loan Repayment' is not allowed for a Deposit"
        }

    @pytest.mark.parametrize("amount", [0, -100])
    def test_amount_must_be_positive(self, amount: int) -> None:
        form = valid_capital_form()
        form["amount"] = amount
        with pytest.raises(ValidationError) as exc_info:
            validate_capital_entry_input(form)
        assert exc_info.value.errors["amount"] == "Amount must be positive"

    def test_unknown_source(self) -> None:
        form = valid_capital_form()
        form["source"] = "Lottery"
        with pytest.raises(ValidationError) as exc_info:
            validate_capital_entry_input(form)
        assert "source" in exc_info.value.errors

    def test_missing_submitter_and_date(self) -> None:
        form = valid_capital_form()
        del form["submittedBy"]
        del form["transactionDate"]
        with pytest.raises(ValidationError) as exc_info:
            validate_capital_entry_input(form)
        assert exc_info.value.errors == {
            "transactionDate": "Transaction date is required",
            "submittedBy": "Submitter is required",
        }


class TestValidateUserInput:
    """Tests for validate_user_input."""

    @pytest.fixture
    def existing_users(self) -> list[User]:
        return [
            User(id="u1", name="Admin User", email="admin@etsyatlas.com", role=UserRole.ADMIN),
            User(id="u2", name="Sophia Williams", email="sophia.w@example.com"),
        ]

    def test_valid_user(self, existing_users: list[User]) -> None:
        cleaned = validate_user_input(
            {"name": " New Person ", "email": "new@example.com", "role": "user"},
            existing_users,
        )
        assert cleaned == {"name": "New Person", "email": "new@example.com", "role": UserRole.USER}

    def test_duplicate_email_ignores_case(self, existing_users: list[User]) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_user_input(
                {"name": "Copy", "email": "Admin@EtsyAtlas.com", "role": "user"},
                existing_users,
            )
        assert exc_info.value.errors == {"email": "Email is already in use"}

    def test_own_email_allowed_on_update(self, existing_users: list[User]) -> None:
        cleaned = validate_user_input(
            {"email": "sophia.w@example.com"},
            existing_users,
            user_id="u2",
            partial=True,
        )
        assert cleaned == {"email": "sophia.w@example.com"}

    @pytest.mark.parametrize("email", ["not-an-email", "a@b", "two words@example.com"])
    def test_invalid_email(self, email: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_user_input({"name": "X", "email": email, "role": "user"})
        assert exc_info.value.errors == {"email": "Invalid email"}

    def test_invalid_role_and_missing_name(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_user_input({"email": "x@example.com", "role": "owner"})
        errors = exc_info.value.errors
        assert errors["name"] == "Name is required"
        assert errors["role"] == "Must be one of 'admin', 'user'"

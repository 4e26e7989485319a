"""Input validation for order, capital entry and user forms.

These rules guard what reaches the store, so the aggregation code can
assume clean numbers. Each validator returns the cleaned values keyed by
the store's field names, or raises ValidationError listing every problem.
Pass partial=True to validate an update, where absent fields are allowed.
"""

import re
from collections.abc import Iterable

from shop_ledger.models.capital import ALLOWED_SOURCES, CapitalSource, CapitalType
from shop_ledger.models.order import OrderStatus
from shop_ledger.models.user import User, UserRole
from shop_ledger.utils.date_utils import parse_iso_date
from shop_ledger.utils.decimal_utils import ZERO, to_decimal

# local@domain.tld, no whitespace
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class ValidationError(Exception):
    """Raised when form input breaks one or more field rules.

    Attributes:
        errors: Mapping of field name to error message.
    """

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        details = "; ".join(f"{name}: {message}" for name, message in errors.items())
        super().__init__(f"Invalid input: {details}")


class _FieldChecker:
    """Collects cleaned values and errors for one form."""

    def __init__(self, data: dict[str, object], partial: bool):
        self.data = data
        self.partial = partial
        self.cleaned: dict[str, object] = {}
        self.errors: dict[str, str] = {}

    def _value(self, name: str, missing_message: str = "Required") -> tuple[bool, object]:
        """Return (present, value); absence is an error unless partial."""
        if self.data.get(name) is not None:
            return True, self.data[name]
        if not self.partial:
            self.errors[name] = missing_message
        return False, None

    def text(self, name: str, message: str) -> None:
        present, value = self._value(name, message)
        if not present:
            return
        text = str(value).strip()
        if not text:
            self.errors[name] = message
            return
        self.cleaned[name] = text

    def optional_text(self, name: str) -> None:
        value = self.data.get(name)
        if value is not None:
            self.cleaned[name] = str(value)

    def choice(self, name: str, enum_type: type) -> None:
        present, value = self._value(name)
        if not present:
            return
        try:
            self.cleaned[name] = enum_type(value)
        except ValueError:
            options = ", ".join(repr(member.value) for member in enum_type)
            self.errors[name] = f"Must be one of {options}"

    def amount(self, name: str, positive: bool, message: str) -> None:
        present, value = self._value(name)
        if not present:
            return
        try:
            amount = to_decimal(value)
        except ValueError:
            self.errors[name] = "Must be a number"
            return
        if not amount.is_finite():
            self.errors[name] = "Must be a number"
        elif positive and amount <= ZERO:
            self.errors[name] = message
        elif not positive and amount < ZERO:
            self.errors[name] = message
        else:
            self.cleaned[name] = amount

    def iso_date(self, name: str, message: str) -> None:
        present, value = self._value(name, message)
        if not present:
            return
        text = str(value).strip()
        if not text:
            self.errors[name] = message
            return
        try:
            parse_iso_date(text)
        except ValueError:
            self.errors[name] = "Must be an ISO-8601 date"
            return
        self.cleaned[name] = text

    def email(self, name: str, existing_users: Iterable[User], user_id: str | None) -> None:
        present, value = self._value(name)
        if not present:
            return
        email = str(value).strip()
        if not EMAIL_PATTERN.match(email):
            self.errors[name] = "Invalid email"
        elif any(
            user.email.lower() == email.lower() and user.id != user_id
            for user in existing_users
        ):
            self.errors[name] = "Email is already in use"
        else:
            self.cleaned[name] = email

    def result(self) -> dict[str, object]:
        if self.errors:
            raise ValidationError(self.errors)
        return self.cleaned


def validate_order_input(data: dict[str, object], partial: bool = False) -> dict[str, object]:
    """Validate an order form.

    Rules: order reference and date required, status one of the order
    statuses, price positive, cost, shipping and fees zero or more.

    Args:
        data: Form values keyed by store field names.
        partial: Validate an update (absent fields allowed).

    Returns:
        Cleaned values (amounts as Decimal, status as OrderStatus).

    Raises:
        ValidationError: If any rule fails.
    """
    checker = _FieldChecker(data, partial)
    checker.text("etsyOrderId", "Etsy Order ID is required")
    checker.iso_date("orderDate", "Order date is required")
    checker.choice("status", OrderStatus)
    checker.amount("orderPrice", positive=True, message="Must be positive")
    checker.amount("orderCost", positive=False, message="Must be zero or more")
    checker.amount("shippingCost", positive=False, message="Must be zero or more")
    checker.amount("additionalFees", positive=False, message="Must be zero or more")
    checker.optional_text("notes")
    checker.optional_text("trackingNumber")
    return checker.result()


def validate_capital_entry_input(
    data: dict[str, object],
    partial: bool = False,
) -> dict[str, object]:
    """Validate a capital entry form.

    Rules: type and source from their enumerations, with Loan Repayment
    only allowed on withdrawals; amount positive; transaction date and
    submitter required.

    Args:
        data: Form values keyed by store field names.
        partial: Validate an update (absent fields allowed).

    Returns:
        Cleaned values (amount as Decimal, type and source as enums).

    Raises:
        ValidationError: If any rule fails.
    """
    checker = _FieldChecker(data, partial)
    checker.choice("type", CapitalType)
    checker.choice("source", CapitalSource)
    checker.amount("amount", positive=True, message="Amount must be positive")
    checker.iso_date("transactionDate", "Transaction date is required")
    checker.text("submittedBy", "Submitter is required")
    checker.optional_text("notes")

    entry_type = checker.cleaned.get("type")
    source = checker.cleaned.get("source")
    if isinstance(entry_type, CapitalType) and isinstance(source, CapitalSource):
        if source not in ALLOWED_SOURCES[entry_type]:
            checker.errors["source"] = f"'{source.value}' is not allowed for a {entry_type.value}"

    return checker.result()


def validate_user_input(
    data: dict[str, object],
    existing_users: Iterable[User] = (),
    user_id: str | None = None,
    partial: bool = False,
) -> dict[str, object]:
    """Validate a user form.

    Rules: name required, email well-formed and not used by another user,
    role admin or user. Email comparison ignores case.

    Args:
        data: Form values keyed by store field names.
        existing_users: Users already in the store.
        user_id: ID of the user being updated, so their own email is allowed.
        partial: Validate an update (absent fields allowed).

    Returns:
        Cleaned values (role as UserRole).

    Raises:
        ValidationError: If any rule fails.
    """
    checker = _FieldChecker(data, partial)
    checker.text("name", "Name is required")
    checker.choice("role", UserRole)

    checker.email("email", existing_users, user_id)

    return checker.result()


"""Value objects consumed by the receipt layout engine.

These are built by the caller for each print request and thrown away
once the receipt text has been produced.  Money values may be int,
float or Decimal; the layout engine normalises them when it formats
them.
"""

from dataclasses import dataclass, field
from decimal import Decimal
import datetime

# Configuration of money
money_decimal_places = 2

# Used for quantization of money
zero = Decimal("0.{}".format("0" * money_decimal_places))
penny = Decimal("0.{}1".format("0" * (money_decimal_places - 1)))

# Print languages
MAIN_LOCALIZED = "MAIN_LOCALIZED"
MAIN_ONLY = "MAIN_ONLY"
LOCALIZED_ONLY = "LOCALIZED_ONLY"
print_languages = (MAIN_LOCALIZED, MAIN_ONLY, LOCALIZED_ONLY)

# Order types, and how they are described on a receipt
DINE_IN = "DINE_IN"
PICKUP = "PICKUP"
DELIVERY = "DELIVERY"
DRIVE_THRU = "DRIVE_THRU"
order_types = {
    DINE_IN: "Dine In",
    PICKUP: "Pickup",
    DELIVERY: "Delivery",
    DRIVE_THRU: "Drive Thru",
}

default_invoice_title = "Simplified Tax Invoice"


@dataclass(frozen=True)
class ReceiptSettings:
    """Receipt print configuration.

    Each show_/hide_/print_ flag controls exactly one optional line or
    section of the receipt.
    """
    print_language: str = MAIN_LOCALIZED
    main_language: str = "en"
    localized_language: str | None = "ar"
    receipt_header: str | None = None
    receipt_footer: str | None = None
    invoice_title: str | None = default_invoice_title

    show_order_number: bool = True
    show_calories: bool = False
    show_subtotal: bool = True
    show_rounding: bool = False
    show_closer_username: bool = False
    show_creator_username: bool = False
    show_check_number: bool = True
    hide_free_modifier_options: bool = False
    print_customer_phone_in_pickup: bool = False


@dataclass(frozen=True)
class OrderItemModifier:
    name: str
    price: Decimal | float | int = zero
    is_default: bool = False


@dataclass(frozen=True)
class OrderItem:
    product_name: str
    quantity: int = 1
    unit_price: Decimal | float | int = zero
    total_price: Decimal | float | int = zero
    product_name_localized: str | None = None
    calories: int | None = None
    modifiers: tuple[OrderItemModifier, ...] = ()
    discount_amount: Decimal | float | int | None = None


@dataclass(frozen=True)
class OrderPayment:
    method: str
    amount: Decimal | float | int = zero


@dataclass(frozen=True)
class OrderForReceipt:
    """An order, resolved and ready to be laid out as a receipt."""
    order_no: str
    business_date: datetime.date | None
    branch_name: str
    type: str = DINE_IN
    check_no: str | None = None
    opened_at: datetime.datetime | None = None
    closed_at: datetime.datetime | None = None
    branch_code: str | None = None
    guests: int | None = None
    table_no: str | None = None

    subtotal: Decimal | float | int = zero
    discount_total: Decimal | float | int = zero
    tax_total: Decimal | float | int = zero
    rounding: Decimal | float | int | None = None
    net_total: Decimal | float | int = zero

    created_by_name: str | None = None
    closed_by_name: str | None = None
    customer_name: str | None = None
    customer_phone: str | None = None

    items: tuple[OrderItem, ...] = field(default_factory=tuple)
    payments: tuple[OrderPayment, ...] = field(default_factory=tuple)

"""Plain text receipt layout for character-mode thermal printers.

build_receipt_text() takes an OrderForReceipt and a ReceiptSettings
and returns the receipt as newline-separated lines of a fixed width:
32 columns for 58mm paper, 42 or 48 for 80mm paper.

Nothing in here raises for bad input.  A receipt with a blank field
is better than a print job that never happens, so missing values are
printed as empty strings and numbers that can't be understood are
printed as zero.
"""

import datetime
import textwrap
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext

from .models import ReceiptSettings, LOCALIZED_ONLY, PICKUP, DRIVE_THRU
from .models import order_types, default_invoice_title, zero, penny

import logging
log = logging.getLogger(__name__)

default_width = 42
default_brand_name = "SADI"

dateformat = "%m/%d/%Y"
timeformat = "%I:%M %p"

# Item table columns.  The name column gets whatever is left after
# these and the three single-space separators.
QTY_WIDTH = 3
PRICE_WIDTH = 7
TOTAL_WIDTH = 8

# Width of the value column on totals and payment lines
MONEY_WIDTH = 10

# Overpayments smaller than this are not reported as change
change_tolerance = Decimal("0.005")

thanks = "Thank you for visiting!"
tearoff_lines = 3


def _text(s):
    if s is None:
        return ""
    return str(s)


def _money(v):
    """Coerce v to a finite Decimal; anything else is zero."""
    if v is None:
        return zero
    try:
        d = v if isinstance(v, Decimal) else Decimal(str(v).strip())
    except (InvalidOperation, ValueError, TypeError):
        return zero
    if not d.is_finite():
        return zero
    return d


def _count(v):
    """Format a quantity or count: 2.0 prints as 2, NaN as 0."""
    if v is None:
        return ""
    d = _money(v)
    if d == d.to_integral_value():
        return str(int(d))
    return f"{d.normalize():f}"


def pad_right(text, width):
    """Left-align text in exactly width characters, truncating if necessary.
    """
    text = _text(text)
    width = max(width, 0)
    if len(text) >= width:
        return text[:width]
    return text + " " * (width - len(text))


def pad_left(text, width):
    """Right-align text in exactly width characters, truncating if necessary.
    """
    text = _text(text)
    width = max(width, 0)
    if len(text) >= width:
        return text[:width]
    return " " * (width - len(text)) + text


def center(text, width):
    """Centre text in exactly width characters, truncating if necessary.

    When the padding can't be split evenly the extra space goes on the
    right.
    """
    text = _text(text)
    width = max(width, 0)
    if len(text) >= width:
        return text[:width]
    padding = width - len(text)
    left = padding // 2
    return " " * left + text + " " * (padding - left)


def wrap_text(text, width):
    """Greedily wrap text into lines of at most width characters.

    Runs of whitespace are collapsed to single spaces.  Words longer
    than width are not split; they end up on a line of their own which
    is longer than width.
    """
    words = _text(text).split()
    if not words:
        return []
    return textwrap.wrap(" ".join(words), max(width, 1),
                         break_long_words=False, break_on_hyphens=False)


def format_money(v):
    """Format an amount with two decimal places and no currency symbol."""
    d = _money(v)
    try:
        with localcontext() as ctx:
            # Room for every integer digit plus the pence
            ctx.prec = max(ctx.prec, d.adjusted() + 4)
            d = d.quantize(penny, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # Exponent too large for the context
        d = zero
    if d == zero:
        # Avoid printing "-0.00"
        d = zero
    return f"{d:f}"


def format_date(d):
    "Returns d formatted as MM/DD/YYYY"
    if d is None:
        return ""
    return d.strftime(dateformat)


def format_time(t):
    "Returns t formatted as hh:mm AM/PM; a plain date is midnight"
    if t is None:
        return ""
    if not isinstance(t, datetime.datetime):
        t = datetime.datetime.combine(t, datetime.time())
    return t.strftime(timeformat)


def _money_line(label, amount, width):
    return pad_right(label, width - MONEY_WIDTH) \
        + pad_left(amount, MONEY_WIDTH)


def _name_width(width):
    return width - QTY_WIDTH - PRICE_WIDTH - TOTAL_WIDTH - 3


def _indented(text, width):
    return " " * (QTY_WIDTH + 1) + pad_right(text, width)


def header_section(order, settings, width, brand_name):
    lines = [
        center(_text(brand_name).upper(), width),
        center(order.branch_name, width),
        center(settings.invoice_title or default_invoice_title, width),
    ]
    for l in wrap_text(settings.receipt_header, width):
        lines.append(center(l, width))
    lines.append("-" * width)
    return lines


def order_info_section(order, settings, width):
    when = order.closed_at or order.opened_at or order.business_date
    info = [
        f"Date: {format_date(order.business_date)}",
        f"Time: {format_time(when)}",
    ]
    if settings.show_order_number:
        info.append(f"Order: {_text(order.order_no)}")
    if settings.show_check_number and order.check_no:
        info.append(f"Check: {order.check_no}")
    # Anything we don't recognise is described as a drive-thru order
    info.append(
        f"Type: {order_types.get(order.type, order_types[DRIVE_THRU])}")
    if order.table_no:
        info.append(f"Table: {order.table_no}")
    if order.guests is not None:
        info.append(f"Guests: {_count(order.guests)}")
    if settings.show_creator_username and order.created_by_name:
        info.append(f"Created by: {order.created_by_name}")
    if settings.show_closer_username and order.closed_by_name:
        info.append(f"Closed by: {order.closed_by_name}")
    if settings.print_customer_phone_in_pickup and order.type == PICKUP \
       and order.customer_phone:
        info.append(f"Customer: {order.customer_phone}")
    lines = [pad_right(l, width) for l in info]
    lines.append("-" * width)
    return lines


def item_table_header(width):
    return [
        pad_right("QTY", QTY_WIDTH) + " "
        + pad_right("ITEM", _name_width(width)) + " "
        + pad_left("PRICE", PRICE_WIDTH) + " "
        + pad_left("TOTAL", TOTAL_WIDTH),
        "-" * width,
    ]


def item_name(item, settings):
    """The name to print for an item, given the print language."""
    if settings.print_language == LOCALIZED_ONLY \
       and item.product_name_localized:
        return item.product_name_localized
    return item.product_name


def item_lines(item, settings, width):
    """Lines for one item, including its calories, modifiers and discount.
    """
    name_width = _name_width(width)
    name_lines = wrap_text(item_name(item, settings), name_width)
    first = name_lines.pop(0) if name_lines else ""

    lines = [
        pad_left(_count(item.quantity), QTY_WIDTH) + " "
        + pad_right(first, name_width) + " "
        + pad_left(format_money(item.unit_price), PRICE_WIDTH) + " "
        + pad_left(format_money(item.total_price), TOTAL_WIDTH)
    ]
    for l in name_lines:
        lines.append(_indented(l, name_width))

    if settings.show_calories and item.calories is not None:
        lines.append(
            _indented(f"Calories: {_count(item.calories)}", name_width))

    for m in item.modifiers or ():
        price = _money(m.price)
        if settings.hide_free_modifier_options and not price:
            continue
        mod_lines = wrap_text(f"+ {_text(m.name)}", name_width)
        first = mod_lines.pop(0) if mod_lines else ""
        lines.append(
            _indented(first, name_width) + " "
            + pad_left(format_money(price) if price else "", PRICE_WIDTH)
            + " " * (TOTAL_WIDTH + 1))
        for l in mod_lines:
            lines.append(_indented(l, name_width))

    discount = _money(item.discount_amount)
    if discount > zero:
        lines.append(_indented(f"Item discount: -{format_money(discount)}",
                               width - QTY_WIDTH - 1))
    return lines


def items_section(order, settings, width):
    lines = item_table_header(width)
    for item in order.items or ():
        lines.extend(item_lines(item, settings, width))
    lines.append("-" * width)
    return lines


def totals_section(order, settings, width):
    lines = []
    if settings.show_subtotal:
        lines.append(_money_line(
            "Subtotal", format_money(order.subtotal), width))
    discount = _money(order.discount_total)
    if discount > zero:
        lines.append(_money_line(
            "Discount", "-" + format_money(discount), width))
    lines.append(_money_line("VAT", format_money(order.tax_total), width))
    rounding = _money(order.rounding)
    if settings.show_rounding and rounding != zero:
        label = "Rounding (+)" if rounding > zero else "Rounding (-)"
        lines.append(_money_line(label, format_money(rounding), width))
    lines.append("-" * width)
    lines.append(_money_line("TOTAL", format_money(order.net_total), width))
    return lines


def payments_section(order, width):
    """Payment lines and change due; empty if there are no payments."""
    if not order.payments:
        return []
    lines = ["-" * width, "Payments:"]
    for p in order.payments:
        lines.append(_money_line(
            _text(p.method), format_money(p.amount), width))
    paid = sum((_money(p.amount) for p in order.payments), zero)
    change = paid - _money(order.net_total)
    if abs(change) >= change_tolerance:
        lines.append(_money_line("Change", format_money(change), width))
    return lines


def footer_section(settings, width):
    lines = ["-" * width]
    for l in wrap_text(settings.receipt_footer, width):
        lines.append(center(l, width))
    lines.append(center(thanks, width))
    lines.extend([""] * tearoff_lines)
    return lines


def receipt_lines(order, settings=None, width=None, brand_name=None):
    """Lay out a receipt and return it as a list of lines."""
    if settings is None:
        settings = ReceiptSettings()
    if width is None:
        width = default_width
    if brand_name is None:
        brand_name = default_brand_name

    lines = header_section(order, settings, width, brand_name)
    lines.extend(order_info_section(order, settings, width))
    lines.extend(items_section(order, settings, width))
    lines.extend(totals_section(order, settings, width))
    lines.extend(payments_section(order, width))
    lines.extend(footer_section(settings, width))
    log.debug("order %s laid out at width %d: %d lines",
              order.order_no, width, len(lines))
    return lines


def build_receipt_text(order, settings=None, width=None, brand_name=None):
    """Lay out a receipt for a thermal printer.

    width is the number of characters per line: 42 (the default) for
    80mm paper, 32 for 58mm paper or 48 for wide 80mm printers.
    brand_name is printed, upper-cased, at the top of the receipt.

    Returns the receipt as a single string with lines separated by
    newlines.
    """
    return "\n".join(receipt_lines(order, settings, width, brand_name))

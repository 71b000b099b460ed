"""Build receipt objects from loosely typed order records.

Orders usually arrive as JSON from the back office API, with camelCase
keys and money values that may be numbers, strings or missing.  Field
names that have changed over time are all accepted.  Values that can't
be understood are logged and replaced rather than rejected, so that a
receipt can still be printed.
"""

import json
import sys
from decimal import Decimal, InvalidOperation
from urllib.parse import urlparse
from dateutil.parser import isoparse
import datetime
import requests

from .models import OrderForReceipt, OrderItem, OrderItemModifier
from .models import OrderPayment, DINE_IN

import logging
log = logging.getLogger(__name__)

# Seconds to wait for an order to be fetched over HTTP
fetch_timeout = 3

default_branch_name = "Branch"


class LoadError(Exception):
    def __init__(self, desc):
        self.desc = desc

    def __str__(self):
        return f"LoadError('{self.desc}')"


def safe_number(v, fallback=0):
    """Convert v to a Decimal, or return fallback if that's not possible.

    Non-finite values (NaN, infinities) are replaced by fallback too.
    """
    fallback = Decimal(fallback)
    if v is None:
        return fallback
    if isinstance(v, bool):
        log.warning("Ignoring boolean %r where a number was expected", v)
        return fallback
    try:
        d = v if isinstance(v, Decimal) else Decimal(str(v).strip())
    except (InvalidOperation, ValueError):
        log.warning("Ignoring non-numeric value %r", v)
        return fallback
    if not d.is_finite():
        log.warning("Ignoring non-finite value %r", v)
        return fallback
    return d


def _safe_int(v):
    if v is None:
        return None
    d = safe_number(v, fallback="NaN")
    if not d.is_finite():
        return None
    return int(d)


def _date(v):
    if v is None or v == "":
        return None
    if isinstance(v, (datetime.date, datetime.datetime)):
        return v
    try:
        return isoparse(str(v))
    except (ValueError, OverflowError):
        log.warning("Ignoring unparseable date %r", v)
        return None


def _get(d, *keys):
    """The first of keys present in d with a value that isn't None."""
    for k in keys:
        v = d.get(k)
        if v is not None:
            return v


def _str(v):
    if v is None:
        return None
    return str(v)


def _object(v, what):
    """v if it's a dict; otherwise log and return an empty dict."""
    if isinstance(v, dict):
        return v
    if v is not None:
        log.warning("Ignoring %s %r that isn't an object", what, v)
    return {}


def _objects(v, what):
    """The dicts in list v; anything else is logged and skipped."""
    if v is None:
        return []
    if not isinstance(v, (list, tuple)):
        log.warning("Ignoring %s %r that isn't a list", what, v)
        return []
    objects = []
    for o in v:
        if isinstance(o, dict):
            objects.append(o)
        else:
            log.warning("Ignoring %s entry %r that isn't an object", what, o)
    return objects


def _modifier(m):
    return OrderItemModifier(
        name=_str(m.get("name")) or "",
        price=safe_number(m.get("price")),
        is_default=bool(_get(m, "isDefault", "is_default")),
    )


def _item(it):
    product = _object(it.get("product"), "product")
    quantity = _safe_int(safe_number(_get(it, "quantity", "qty"), 1))
    unit_price = safe_number(_get(it, "unitPrice", "unit_price", "price"))
    total = _get(it, "totalPrice", "total_price", "lineTotal", "netTotal")
    total_price = safe_number(total) if total is not None \
        else quantity * unit_price
    return OrderItem(
        product_name=_str(_get(it, "productName", "product_name")
                          or product.get("name")) or "",
        product_name_localized=_str(
            _get(it, "productNameLocalized", "product_name_localized")
            or product.get("nameLocalized")),
        quantity=quantity,
        unit_price=unit_price,
        total_price=total_price,
        calories=_safe_int(it.get("calories")),
        modifiers=tuple(_modifier(m) for m in
                        _objects(it.get("modifiers"), "modifiers")),
        discount_amount=safe_number(
            _get(it, "discountAmount", "discount_amount")),
    )


def _payment(p):
    return OrderPayment(
        method=_str(p.get("method")) or "",
        amount=safe_number(p.get("amount")),
    )


def order_from_dict(d):
    """Build an OrderForReceipt from a dict, as decoded from JSON.

    Keys may be camelCase, as sent by the back office API, or
    snake_case.  Raises LoadError if d isn't a dict.
    """
    if not isinstance(d, dict):
        raise LoadError("An order must be a JSON object")
    branch = _object(d.get("branch"), "branch")
    customer = _object(d.get("customer"), "customer")
    rounding = d.get("rounding")
    return OrderForReceipt(
        order_no=_str(_get(d, "orderNo", "order_no")) or "",
        check_no=_str(_get(d, "checkNo", "check_no")),
        type=_str(d.get("type")) or DINE_IN,
        business_date=_date(_get(d, "businessDate", "business_date")),
        opened_at=_date(_get(d, "openedAt", "opened_at")),
        closed_at=_date(_get(d, "closedAt", "closed_at")),
        branch_name=_str(_get(d, "branchName", "branch_name")
                         or branch.get("name")) or default_branch_name,
        branch_code=_str(_get(d, "branchCode", "branch_code")
                         or branch.get("code")),
        guests=_safe_int(d.get("guests")),
        table_no=_str(_get(d, "tableNo", "table_no")),
        subtotal=safe_number(d.get("subtotal")),
        discount_total=safe_number(
            _get(d, "discountTotal", "discount_total")),
        tax_total=safe_number(_get(d, "taxTotal", "tax_total")),
        rounding=safe_number(rounding) if rounding is not None else None,
        net_total=safe_number(_get(d, "netTotal", "net_total")),
        created_by_name=_str(_get(d, "createdByName", "created_by_name",
                                  "createdBy")),
        closed_by_name=_str(_get(d, "closedByName", "closed_by_name",
                                 "closedBy")),
        customer_name=_str(_get(d, "customerName", "customer_name")
                           or customer.get("name")),
        customer_phone=_str(_get(d, "customerPhone", "customer_phone")
                            or customer.get("phone")),
        items=tuple(_item(it) for it in _objects(d.get("items"), "items")),
        payments=tuple(_payment(p) for p in
                       _objects(d.get("payments"), "payments")),
    )


def _fetch(url, requests_session):
    if not requests_session:
        requests_session = requests
    try:
        r = requests_session.get(url, timeout=fetch_timeout)
    except requests.exceptions.ConnectionError:
        raise LoadError(f"{url}: unable to connect to the server")
    except requests.exceptions.Timeout:
        raise LoadError(f"{url}: the server did not respond quickly enough")
    if r.status_code != 200:
        raise LoadError(f"{url}: web request returned status "
                        f"{r.status_code}")
    return r.text


def load_order(source, requests_session=None):
    """Read an order from a file, stdin ("-") or an http(s) URL.

    Returns an OrderForReceipt.  Raises LoadError if the order can't be
    read or isn't a JSON object.
    """
    log.info("reading order %s", source)
    if source == "-":
        text = sys.stdin.read()
    elif urlparse(source).scheme in ("http", "https"):
        text = _fetch(source, requests_session)
    else:
        try:
            with open(source, encoding="utf-8") as f:
                text = f.read()
        except OSError as e:
            raise LoadError(f"{source}: {e.strerror}")
        except UnicodeDecodeError:
            raise LoadError(f"{source}: not a UTF-8 text file")
    try:
        d = json.loads(text, parse_float=Decimal)
    except json.JSONDecodeError as e:
        raise LoadError(f"{source}: invalid JSON: {e}")
    return order_from_dict(d)

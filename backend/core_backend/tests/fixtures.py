"""
Shared test fixtures for all backend tests.

This module provides reusable pytest fixtures for common test objects
like staff users, tables and orders.
"""
from datetime import datetime, timezone as dt_timezone
from decimal import Decimal

import pytest

from orders.models import Order, OrderItem
from tables.models import Table
from users.models import User


def utc(*args):
    """Aware UTC datetime, e.g. utc(2024, 1, 3, 12, 30)."""
    return datetime(*args, tzinfo=dt_timezone.utc)


def menu_item(menu_item_id="espresso", price="3.50", quantity=1, **overrides):
    """A valid item payload as a client would send it."""
    payload = {
        "menu_item_id": menu_item_id,
        "name": menu_item_id.replace("-", " ").title(),
        "description": f"Freshly made {menu_item_id}",
        "price": price,
        "category": "Drinks",
        "image": f"/images/{menu_item_id}.jpg",
        "quantity": quantity,
    }
    payload.update(overrides)
    return payload


# ============================================================================
# USER FIXTURES
# ============================================================================

@pytest.fixture
def admin_user(db):
    """Create an admin staff member"""
    return User.objects.create_user(
        username="admin",
        email="admin@cafe.test",
        password="admin-pass-123",
        role=User.Role.ADMIN,
        is_staff=True,
    )


@pytest.fixture
def waiter_user(db):
    """Create a waiter"""
    return User.objects.create_user(
        username="waiter",
        email="waiter@cafe.test",
        password="waiter-pass-123",
        role=User.Role.WAITER,
    )


@pytest.fixture
def other_waiter(db):
    """Create a second waiter"""
    return User.objects.create_user(
        username="waiter2",
        email="waiter2@cafe.test",
        password="waiter-pass-123",
        role=User.Role.WAITER,
    )


@pytest.fixture
def cashier_user(db):
    """Create a cashier"""
    return User.objects.create_user(
        username="cashier",
        email="cashier@cafe.test",
        password="cashier-pass-123",
        role=User.Role.CASHIER,
    )


# ============================================================================
# TABLE FIXTURES
# ============================================================================

@pytest.fixture
def table(db):
    return Table.objects.create(name="T1")


@pytest.fixture
def other_table(db):
    return Table.objects.create(name="T2")


# ============================================================================
# ORDER FIXTURES
# ============================================================================

@pytest.fixture
def make_order(table):
    """
    Factory that writes an order straight to the database, bypassing the
    services, so tests can set any lifecycle timestamps.

    `items` is a list of (menu_item_id, unit_price, quantity) tuples; without
    items the order carries `total` and no lines.
    """

    def _make_order(
        items=None,
        total="10.00",
        table=table,
        created_at=None,
        served_at=None,
        handled_by=None,
        closed_at=None,
        closed_by=None,
    ):
        lines = [(menu_id, Decimal(price), qty) for menu_id, price, qty in (items or [])]
        if lines:
            total = sum((price * qty for _, price, qty in lines), Decimal("0"))
        fields = {
            "table": table,
            "total_price": Decimal(total),
            "served_at": served_at,
            "handled_by": handled_by,
            "closed_at": closed_at,
            "closed_by": closed_by,
        }
        if created_at is not None:
            fields["created_at"] = created_at
        order = Order.objects.create(**fields)
        for menu_id, price, qty in lines:
            OrderItem.objects.create(
                order=order,
                menu_item_id=menu_id,
                name=menu_id.title(),
                description=f"Freshly made {menu_id}",
                category="Drinks",
                image=f"/images/{menu_id}.jpg",
                unit_price=price,
                quantity=qty,
            )
        return order

    return _make_order

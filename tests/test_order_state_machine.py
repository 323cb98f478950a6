"""Tests for order status transitions"""

import pytest

from tvmerch.api.v1.orders.state_machine import OrderStateMachine
from tvmerch.models.order import OrderStatus


@pytest.fixture
def machine():
    return OrderStateMachine()


@pytest.mark.parametrize(
    "current, new",
    [
        ("payment_pending", "confirmed"),
        ("payment_pending", "cancelled"),
        ("confirmed", "processing"),
        ("processing", "shipped"),
        ("shipped", "delivered"),
        ("shipped", "cancelled"),
    ],
)
def test_allowed_transitions(machine, current, new):
    assert machine.can_transition(current, new)


@pytest.mark.parametrize(
    "current, new",
    [
        ("payment_pending", "shipped"),
        ("confirmed", "delivered"),
        ("delivered", "cancelled"),
        ("cancelled", "confirmed"),
        ("shipped", "processing"),
    ],
)
def test_rejected_transitions(machine, current, new):
    assert not machine.can_transition(current, new)


def test_terminal_states(machine):
    assert machine.is_terminal_state(OrderStatus.DELIVERED)
    assert machine.is_terminal_state("cancelled")
    assert not machine.is_terminal_state("shipped")


def test_valid_transitions_listed_in_lifecycle_order(machine):
    assert machine.get_valid_transitions("confirmed") == [
        OrderStatus.PROCESSING,
        OrderStatus.CANCELLED,
    ]


def test_cancellable(machine):
    assert machine.is_cancellable("processing")
    assert not machine.is_cancellable("delivered")


def test_parse_rejects_unknown_status(machine):
    assert machine.parse(" Shipped ") == OrderStatus.SHIPPED
    with pytest.raises(ValueError):
        machine.parse("lost")

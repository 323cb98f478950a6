"""
Order state machine for managing order status transitions
"""

from typing import Dict, List, Set, Union
from tvmerch.models.order import OrderStatus

StatusLike = Union[OrderStatus, str]

class OrderStateMachine:
    """
    Manages valid order status transitions
    """

    def __init__(self):
        self.transitions: Dict[OrderStatus, Set[OrderStatus]] = {
            OrderStatus.PAYMENT_PENDING: {
                OrderStatus.CONFIRMED,
                OrderStatus.CANCELLED
            },
            OrderStatus.CONFIRMED: {
                OrderStatus.PROCESSING,
                OrderStatus.CANCELLED
            },
            OrderStatus.PROCESSING: {
                OrderStatus.SHIPPED,
                OrderStatus.CANCELLED
            },
            OrderStatus.SHIPPED: {
                OrderStatus.DELIVERED,
                OrderStatus.CANCELLED
            },
            OrderStatus.DELIVERED: set(),
            OrderStatus.CANCELLED: set()
        }

    @staticmethod
    def parse(status: StatusLike) -> OrderStatus:
        """
        Coerce a raw status string

        Raises:
            ValueError: Unknown status
        """
        if isinstance(status, OrderStatus):
            return status
        return OrderStatus((status or "").strip().lower())

    def can_transition(
        self,
        current_status: StatusLike,
        new_status: StatusLike
    ) -> bool:
        """
        Check if transition is valid

        Args:
            current_status: Current order status
            new_status: Desired new status

        Returns:
            True if transition is allowed
        """
        valid_transitions = self.transitions.get(self.parse(current_status), set())
        return self.parse(new_status) in valid_transitions

    def get_valid_transitions(self, current_status: StatusLike) -> List[OrderStatus]:
        """Statuses reachable in one step, in declaration order"""
        valid = self.transitions.get(self.parse(current_status), set())
        return [s for s in OrderStatus if s in valid]

    def is_terminal_state(self, status: StatusLike) -> bool:
        return len(self.transitions.get(self.parse(status), set())) == 0

    def is_cancellable(self, status: StatusLike) -> bool:
        return OrderStatus.CANCELLED in self.transitions.get(self.parse(status), set())

"""Execution: order attachments and venue acknowledgements."""

from perp_momentum.execution.orders import ConditionalOrder, OrderResult

__all__ = ["ConditionalOrder", "OrderResult"]

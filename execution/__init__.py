"""limit-order-lab — execution package."""

from .balance_checker import BalanceAllowanceChecker, BalanceSnapshot, CheckOutcome, CheckStatus
from .order_builder import OrderBuilder
from .remediation_script import render_script, write_script
from .workflow import LimitOrderWorkflow, OrderRequest, WorkflowResult, WorkflowState

__all__ = [
    "BalanceAllowanceChecker",
    "BalanceSnapshot",
    "CheckOutcome",
    "CheckStatus",
    "LimitOrderWorkflow",
    "OrderBuilder",
    "OrderRequest",
    "WorkflowResult",
    "WorkflowState",
    "render_script",
    "write_script",
]

"""
Mock adapter — stands in for a host adapter in tests.

Register it under the name it replaces (``shell``, ``filesystem``,
``git``, ``download``). It never touches the host: it records each
context it is given and answers from a script keyed by action ID,
falling back to success.
"""

from __future__ import annotations

from auditgate.adapters.base import Adapter, ExecutionContext
from auditgate.core.models.action import Receipt


class MockAdapter(Adapter):
    """Recording fake for any adapter name."""

    def __init__(
        self,
        adapter_name: str = "mock",
        available: bool = True,
        default_output: str = "[mock] executed",
    ):
        self._name = adapter_name
        self._available = available
        self._default_output = default_output
        self._scripted: dict[str, Receipt] = {}
        self._calls: list[ExecutionContext] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[ExecutionContext]:
        return self._calls

    @property
    def call_count(self) -> int:
        return len(self._calls)

    def is_available(self) -> bool:
        return self._available

    def set_response(self, action_id: str, receipt: Receipt) -> None:
        self._scripted[action_id] = receipt

    def set_failure(self, action_id: str, error: str = "Mock failure", return_code: int = 1) -> None:
        """Make ``action_id`` fail as a tool exiting ``return_code`` would."""
        self.set_response(
            action_id,
            Receipt.failure(self._name, action_id, error, return_code=return_code),
        )

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        self._calls.append(context)
        action_id = context.action.id
        return self._scripted.get(action_id) or Receipt.success(
            self._name,
            action_id,
            self._default_output,
            return_code=0,
            metadata={"mock": True},
        )

    def reset(self) -> None:
        self._calls.clear()
        self._scripted.clear()

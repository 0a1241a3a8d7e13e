"""Confirm-before-execute protocol for destructive and state-changing actions.

Every delete, bulk delete and status change goes through an ``ActionGate``:

    IDLE -> CONFIRMING -> EXECUTING -> SUCCEEDED | FAILED
                 \\-> IDLE (declined, no side effect)

A gate is created per action invocation. The ``GateRegistry`` refuses to
open a second gate on an entity that already has one confirming or
executing; gates on unrelated entities run independently. Unconfirmed
mutations (edits, marking a message read) claim their entity through the
same registry, so at most one mutation per entity is ever in flight.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Iterable, Optional

from tourdesk.data.errors import TourdeskError
from tourdesk.domain.models import EntityId

logger = logging.getLogger(__name__)


class GateState(Enum):
    """Lifecycle of a single gated action."""

    IDLE = "idle"
    CONFIRMING = "confirming"
    EXECUTING = "executing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class GateStateError(RuntimeError):
    """Raised when a gate is driven through an invalid transition."""


@dataclass(frozen=True)
class ConfirmPrompt:
    """What the user is asked before the action runs."""

    title: str
    text: str
    confirm_label: str = "Confirm"
    destructive: bool = True


Confirmer = Callable[[ConfirmPrompt], Awaitable[bool]]
Action = Callable[[], Awaitable[None]]


class ActionGate:
    """One confirm -> execute -> report cycle for a set of target entities."""

    def __init__(self, targets: Iterable[EntityId], prompt: ConfirmPrompt, action: Action):
        """Initialize an idle gate.

        Args:
            targets: Identifiers of the entities the action touches
            prompt: Confirmation text shown to the user
            action: Coroutine function performing the mutation
        """
        self.targets = frozenset(targets)
        self.prompt = prompt
        self._action = action
        self.state = GateState.IDLE
        self.error: Optional[TourdeskError] = None

    def _move(self, expected: GateState, new_state: GateState) -> None:
        if self.state != expected:
            raise GateStateError(
                f"Cannot move gate from {self.state.value} to {new_state.value}"
            )
        logger.debug(f"Gate {self.prompt.title!r}: {self.state.value} -> {new_state.value}")
        self.state = new_state

    def request(self) -> None:
        """Ask for confirmation (IDLE -> CONFIRMING)."""
        self._move(GateState.IDLE, GateState.CONFIRMING)

    def decline(self) -> None:
        """User declined (CONFIRMING -> IDLE)."""
        self._move(GateState.CONFIRMING, GateState.IDLE)

    async def execute(self) -> bool:
        """User confirmed: run the action (CONFIRMING -> EXECUTING -> result).

        Application errors are captured in ``error`` and reported through the
        FAILED state rather than raised.

        Returns:
            True if the action succeeded
        """
        self._move(GateState.CONFIRMING, GateState.EXECUTING)
        try:
            await self._action()
        except TourdeskError as e:
            self.error = e
            self._move(GateState.EXECUTING, GateState.FAILED)
            logger.warning(f"{self.prompt.title} failed: {e}")
            return False
        self._move(GateState.EXECUTING, GateState.SUCCEEDED)
        logger.info(f"{self.prompt.title} succeeded for {len(self.targets)} item(s)")
        return True

    @property
    def is_active(self) -> bool:
        return self.state in (GateState.CONFIRMING, GateState.EXECUTING)


class GateRegistry:
    """Tracks which entities currently have an active gate.

    Example:
        >>> registry = GateRegistry()
        >>> gate = await registry.run({7}, prompt, delete_seven, confirmer)
        >>> gate.state  # GateState.SUCCEEDED
    """

    def __init__(self):
        self._busy: set[EntityId] = set()

    def is_busy(self, id: EntityId) -> bool:
        return id in self._busy

    def claim(self, targets: Iterable[EntityId], reason: str) -> bool:
        """Mark targets busy for an action that needs no confirmation.

        Edits and read-on-view use this directly; gates claim through ``open``.

        Returns:
            False if any target already has a pending action
        """
        targets = frozenset(targets)
        if targets & self._busy:
            logger.info(f"Ignoring {reason!r}: target already has a pending action")
            return False
        self._busy |= targets
        return True

    def unclaim(self, targets: Iterable[EntityId]) -> None:
        self._busy -= frozenset(targets)

    def open(self, targets: Iterable[EntityId], prompt: ConfirmPrompt, action: Action) -> Optional[ActionGate]:
        """Open a gate in the CONFIRMING state.

        Returns:
            The gate, or None if any target already has an active gate
        """
        targets = frozenset(targets)
        if not self.claim(targets, prompt.title):
            return None
        gate = ActionGate(targets, prompt, action)
        gate.request()
        return gate

    def release(self, gate: ActionGate) -> None:
        self.unclaim(gate.targets)

    async def run(
        self,
        targets: Iterable[EntityId],
        prompt: ConfirmPrompt,
        action: Action,
        confirmer: Confirmer,
    ) -> Optional[ActionGate]:
        """Drive a gate through confirmation and execution.

        Returns:
            The finished gate (IDLE if declined, SUCCEEDED or FAILED
            otherwise), or None if the trigger was ignored as a duplicate
        """
        gate = self.open(targets, prompt, action)
        if gate is None:
            return None
        try:
            if await confirmer(gate.prompt):
                await gate.execute()
            else:
                gate.decline()
        finally:
            self.release(gate)
        return gate

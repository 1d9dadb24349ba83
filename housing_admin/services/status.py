"""
Registration status lifecycle.
A transition table decides which status changes an admin may apply.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from housing_admin.schemas.house import RegistrationStatus, parse_status
from housing_admin.utils.exceptions import StatusTransitionError

logger = logging.getLogger(__name__)


class StatusLifecycle:
    """
    Finite set of states with an allowed-transition table.

    Without a table every state may move to every state. Staying in the
    current state is always allowed.
    """

    def __init__(
        self,
        states: Sequence[str],
        initial: str,
        transitions: Optional[Mapping[str, Iterable[str]]] = None
    ):
        if initial not in states:
            raise ValueError(f"Initial state '{initial}' is not one of {list(states)}")

        self.states: List[str] = list(states)
        self.initial = initial
        self.transitions: Optional[Dict[str, List[str]]] = None

        if transitions is not None:
            table = {}
            for source, targets in transitions.items():
                source = self._known(source)
                table[source] = [self._known(target) for target in targets]
            self.transitions = table

    def _known(self, state: str) -> str:
        value = getattr(state, "value", state)
        if value not in self.states:
            raise ValueError(f"Unknown state '{value}'")
        return value

    @property
    def unrestricted(self) -> bool:
        return self.transitions is None

    def allowed_from(self, current: str) -> List[str]:
        """States reachable from `current`, in declaration order."""
        current = getattr(current, "value", current)
        if self.transitions is None:
            return list(self.states)
        targets = set(self.transitions.get(current, []))
        targets.add(current)
        return [state for state in self.states if state in targets]

    def can_transition(self, current: str, target: str) -> bool:
        target = getattr(target, "value", target)
        if target not in self.states:
            return False
        return target in self.allowed_from(current)

    def check(self, current: str, target: str) -> None:
        """
        Raise when the lifecycle forbids the change.

        Raises:
            StatusTransitionError: If `target` is not reachable from `current`
        """
        if not self.can_transition(current, target):
            current = getattr(current, "value", current)
            target = getattr(target, "value", target)
            logger.warning(f"Rejected status transition {current} -> {target}")
            raise StatusTransitionError(current, target)

    @classmethod
    def registration(cls, transitions: Optional[Mapping[str, Iterable[str]]] = None) -> "StatusLifecycle":
        """Lifecycle of house registration review statuses."""
        table = None
        if transitions is not None:
            table = {
                getattr(parse_status(source), "value", source): [
                    getattr(parse_status(target), "value", target) for target in targets
                ]
                for source, targets in transitions.items()
            }
        return cls(
            [status.value for status in RegistrationStatus],
            RegistrationStatus.PENDING.value,
            table,
        )

    @classmethod
    def from_settings(cls, settings) -> "StatusLifecycle":
        """Registration lifecycle restricted by `settings.registration_status_transitions`."""
        return cls.registration(settings.registration_status_transitions)

import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class SimpleState:
    """@brief Base for FSM states. Subclasses set ``stateId``."""
    stateId: str = ""


class SimpleFsm:
    """@brief Table-driven state machine.

    @param stateMap      stateId → set of stateIds reachable from it.
    @param initialState  State the machine starts in.
    """

    def __init__(
        self,
        stateMap: dict[str, set[str]],
        initialState: SimpleState,
        onEnter: Optional[Callable] = None,
        onExit: Optional[Callable] = None,
        onFailedTransition: Optional[Callable] = None,
        onDeadStates: Optional[Callable] = None
    ):
        self._initialState          = initialState
        self._currentState          = initialState
        self._stateMap              = stateMap
        self._onEnter               = onEnter or self.trivialOnEnter
        self._onExit                = onExit or self.trivialOnExit
        self._onFailedTransition    = onFailedTransition or self.trivialOnFailedTransition
        self._onDeadStates          = onDeadStates or self.trivialOnDeadStates

        self._deadStates            = self.checkUnreachableStates(
                                        self._stateMap,
                                        self._initialState.stateId
                                    )

        self._onDeadStates(self._deadStates)

    @property
    def currentState(self) -> SimpleState:
        return self._currentState

    def requestUpdate(self, newState: SimpleState, requestor) -> bool:
        """@brief Move to ``newState`` if the map allows it. Returns True on success."""
        if newState.stateId in self._stateMap.get(self._currentState.stateId, set()):
            self._onExit(self._currentState, requestor)
            self._onEnter(newState, requestor)
            self._currentState = newState
            return True
        self._onFailedTransition(newState, requestor)
        return False

    def updateState(self, state: SimpleState):
        """@brief Replace the payload of the current state without a transition."""
        if state.stateId != self._currentState.stateId:
            raise ValueError(
                f"updateState cannot change {self._currentState.stateId} into {state.stateId}"
            )
        self._currentState = state

    def trivialOnEnter(self, newState: SimpleState, requestor):
        logger.info("Going to new state: %s as requested by %s", newState.stateId, requestor)

    def trivialOnExit(self, currentState: SimpleState, requestor):
        logger.debug("Exiting current state: %s as requested by %s", currentState.stateId, requestor)

    def trivialOnFailedTransition(self, newState: SimpleState, requestor):
        logger.debug("Can't transition to new state: %s as requested by %s", newState.stateId, requestor)

    def checkUnreachableStates(self, state_map: dict[str, set[str]], initial: str) -> set[str]:
        all_states = set(state_map.keys())
        for targets in state_map.values():
            all_states |= targets
        visited, queue = set(), [initial]
        while queue:
            current = queue.pop(0)
            if current in visited:
                continue
            visited.add(current)
            queue.extend(state_map.get(current, set()) - visited)
        return all_states - visited

    def trivialOnDeadStates(self, deadStatesSet: set[str]):
        if len(deadStatesSet) > 0:
            logger.warning("Dead states exist: %s", sorted(deadStatesSet))

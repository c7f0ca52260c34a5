"""Game interface over immutable states and a rules engine that reports instead of raising."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, Mapping, Protocol, Sequence, TypeVar

from .errors import IllegalMoveError
from .move import Move
from .observation import Observation
from .result import MatchResult

PlayerId = str
StateT = TypeVar("StateT")
StateT_co = TypeVar("StateT_co", covariant=True)
MoveT = TypeVar("MoveT", bound=Move)
ObservationT = TypeVar("ObservationT", bound=Observation)
LegalMovesSpec = Sequence[MoveT] | Mapping[str, Any]


class MoveResolution(Protocol[StateT_co]):
    """Engine verdict for one move: the next state, or the unchanged state and a reason."""

    @property
    def state(self) -> StateT_co: ...

    @property
    def applied(self) -> bool: ...

    @property
    def message(self) -> str: ...


class Game(ABC, Generic[StateT, MoveT, ObservationT]):
    """Seats, moves and per-seat views for one game.

    Subclasses implement `resolve_move`; `is_legal` and `apply_move` are
    derived from its verdict so the two can never disagree.
    """

    game_name: str = "game"

    @abstractmethod
    def new_game(self, seed: int | None, config: dict[str, Any] | None = None) -> StateT:
        """Create a fresh state, seeded when `seed` is given."""

    @abstractmethod
    def player_ids(self, state: StateT) -> Sequence[PlayerId]:
        """Return all seats of the game."""

    @abstractmethod
    def role_for_player(self, state: StateT, player_id: PlayerId) -> str | None:
        """Return the role a seat currently holds."""

    @abstractmethod
    def current_player(self, state: StateT) -> PlayerId | None:
        """Return the seat expected to act next, or None when the game is over."""

    @abstractmethod
    def legal_moves(self, state: StateT, player_id: PlayerId) -> LegalMovesSpec:
        """Return legal moves, or a template when they cannot be enumerated."""

    @abstractmethod
    def resolve_move(self, state: StateT, player_id: PlayerId, move: MoveT) -> MoveResolution[StateT]:
        """Run `move` through the rules engine without raising."""

    @abstractmethod
    def is_terminal(self, state: StateT) -> bool:
        """Return whether the state is terminal."""

    @abstractmethod
    def outcome(self, state: StateT) -> MatchResult:
        """Return a structured result for a terminal state."""

    @abstractmethod
    def observation(self, state: StateT, player_id: PlayerId) -> ObservationT:
        """Return a seat's partial view of the state."""

    @abstractmethod
    def render(self, state: StateT, player_id: PlayerId | None = None) -> str:
        """Render the state as text for terminal play and logs."""

    def is_legal(self, state: StateT, player_id: PlayerId, move: MoveT) -> tuple[bool, str | None]:
        resolution = self.resolve_move(state, player_id, move)
        if resolution.applied:
            return True, None
        return False, resolution.message

    def apply_move(self, state: StateT, player_id: PlayerId, move: MoveT) -> StateT:
        """Return the next state, raising IllegalMoveError when the engine rejects `move`."""
        resolution = self.resolve_move(state, player_id, move)
        if not resolution.applied:
            raise IllegalMoveError(player_id, move, resolution.message)
        return resolution.state

    def parse_move(self, data: Mapping[str, Any]) -> MoveT:
        """Parse a move payload sent by a client."""
        raise NotImplementedError(f"{self.__class__.__name__} does not implement parse_move().")

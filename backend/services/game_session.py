"""
Game session host.

A GameSession owns one engine and one tick scheduler. It is the only place
that mutates the engine, and it serialises every call (ticks from the
scheduler thread, input from request threads) behind a single lock.
"""

import logging
import threading
import time
import uuid
from typing import Any, Callable, Dict, List, Optional

from controls import get_control
from domain.constants import DEFAULT_FINISHED_TTL_SECONDS, DEFAULT_IDLE_TTL_SECONDS
from domain.game_state import GameState
from main import FoodPlacementError, SnakeGame
from services.scheduler import TickScheduler

logger = logging.getLogger(__name__)

StateListener = Callable[[GameState], None]

RESTART_SOURCE = "restart"


class GameSession:
    """
    Wires a SnakeGame to a scheduler and to state listeners (renderer,
    score display). Listeners get a snapshot after start/restart and after
    every tick.
    """

    def __init__(
        self,
        game: SnakeGame,
        scheduler: TickScheduler,
        game_id: Optional[str] = None,
        clock: Callable[[], float] = time.time
    ):
        self.game_id = game_id or str(uuid.uuid4())
        self.game = game
        self.scheduler = scheduler
        self._clock = clock
        self.created_at = clock()
        # Last start, restart, read or input from a client; ticks do not count.
        self.last_active = self.created_at
        self._lock = threading.RLock()
        self._listeners: List[StateListener] = []
        # Bumped on every (re)start and stop; ticks from older streams are dropped.
        self._generation = 0

    def add_listener(self, listener: StateListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def start(self) -> GameState:
        """Reset the game and begin ticking, replacing any running tick stream."""
        with self._lock:
            self.scheduler.cancel()
            self._generation += 1
            generation = self._generation
            self.last_active = self._clock()
            state = self.game.restart()
            self.scheduler.start(lambda: self._on_tick(generation))
            logger.info("Game %s started", self.game_id)
            self._publish(state)
            return state

    def restart(self) -> GameState:
        """Restart in any status; same as start()."""
        return self.start()

    def stop(self) -> None:
        """Tear the session down; no further ticks will run."""
        with self._lock:
            self._generation += 1
            self.scheduler.cancel()
            logger.info("Game %s stopped", self.game_id)

    @property
    def is_over(self) -> bool:
        with self._lock:
            return self.game.is_over

    def idle_seconds(self, now: Optional[float] = None) -> float:
        if now is None:
            now = self._clock()
        return now - self.last_active

    def get_state(self) -> GameState:
        with self._lock:
            self.last_active = self._clock()
            return self.game.get_current_state()

    def change_direction(self, dx: int, dy: int) -> GameState:
        with self._lock:
            self.last_active = self._clock()
            return self.game.set_direction(dx, dy)

    def handle_input(self, event: Dict[str, Any]) -> GameState:
        """
        Route a raw input event by its "source" field.

        Raises:
            ValueError: If the source is not a known control.
        """
        source = event.get("source")
        if isinstance(source, str) and source.strip().lower() == RESTART_SOURCE:
            return self.restart()

        control = get_control(source)
        direction = control.get_direction(event)
        if direction is None:
            logger.debug("Input %s produced no direction", event)
            return self.get_state()
        return self.change_direction(*direction)

    def _on_tick(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            try:
                state = self.game.tick()
            except FoodPlacementError:
                self.scheduler.cancel()
                self.game.end_game("no_room")
                logger.error("Game %s stopped: no room left for food", self.game_id)
                self._publish(self.game.get_current_state())
                raise
            if state.is_over:
                self.scheduler.cancel()
                logger.info(
                    "Game %s over (%s). Final score: %d",
                    self.game_id, state.death_reason, state.score
                )
            self._publish(state)

    def _publish(self, state: GameState) -> None:
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                logger.warning("State listener failed for game %s: %s", self.game_id, e)


class SessionStore:
    """
    In-memory registry of live sessions, keyed by game id.

    Abandoned sessions are swept whenever a new one is added: any session
    idle for idle_ttl_seconds, and finished games idle for
    finished_ttl_seconds, are removed and stopped.
    """

    def __init__(
        self,
        idle_ttl_seconds: float = DEFAULT_IDLE_TTL_SECONDS,
        finished_ttl_seconds: float = DEFAULT_FINISHED_TTL_SECONDS,
        clock: Callable[[], float] = time.time
    ):
        self.idle_ttl_seconds = idle_ttl_seconds
        self.finished_ttl_seconds = finished_ttl_seconds
        self._clock = clock
        self._sessions: Dict[str, GameSession] = {}
        self._lock = threading.Lock()

    def add(self, session: GameSession) -> GameSession:
        self.sweep()
        with self._lock:
            if session.game_id in self._sessions:
                raise ValueError(f"Game with id {session.game_id} already exists.")
            self._sessions[session.game_id] = session
        return session

    def get(self, game_id: str) -> Optional[GameSession]:
        with self._lock:
            return self._sessions.get(game_id)

    def remove(self, game_id: str) -> bool:
        with self._lock:
            session = self._sessions.pop(game_id, None)
        if session is None:
            return False
        session.stop()
        return True

    def sweep(self) -> List[str]:
        """Remove and stop stale sessions. Returns the removed game ids."""
        now = self._clock()
        with self._lock:
            sessions = list(self._sessions.values())

        stale = [s for s in sessions if self._is_stale(s, now)]
        removed = []
        with self._lock:
            for session in stale:
                if self._sessions.pop(session.game_id, None) is not None:
                    removed.append(session)

        for session in removed:
            session.stop()
        if removed:
            logger.info("Evicted %d stale game(s)", len(removed))
        return [s.game_id for s in removed]

    def _is_stale(self, session: GameSession, now: float) -> bool:
        idle = session.idle_seconds(now)
        if idle >= self.idle_ttl_seconds:
            return True
        return session.is_over and idle >= self.finished_ttl_seconds

    def clear(self) -> None:
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            session.stop()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

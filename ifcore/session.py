import logging
import threading
import weakref
from enum import Enum

from ifcore.containers import ContainerStateManager

logger = logging.getLogger(__name__)


class GameState(str, Enum):
    WAITING_FOR_START_ANSWER = "WAITING_FOR_START_ANSWER"
    PLAYING = "PLAYING"
    WAITING_FOR_RESTART_CONFIRMATION = "WAITING_FOR_RESTART_CONFIRMATION"
    WAITING_FOR_QUIT_CONFIRMATION = "WAITING_FOR_QUIT_CONFIRMATION"
    WAITING_FOR_UNLOCK_CODE = "WAITING_FOR_UNLOCK_CODE"
    WAITING_FOR_OPEN_CODE = "WAITING_FOR_OPEN_CODE"


CODE_STATES = (GameState.WAITING_FOR_UNLOCK_CODE, GameState.WAITING_FOR_OPEN_CODE)


class Session:
    """
    All mutable play state for one player id.

    The session owns its own copy of the world, so nothing here is ever
    shared with another session. pending_lockable and last_referenced are
    weak references: after a reset the old world's objects go away and both
    read back as None.
    """

    def __init__(self, session_id, world, responses, state=GameState.WAITING_FOR_START_ANSWER):
        self.session_id = session_id
        self.responses = responses
        self.lock = threading.Lock()
        self.game_state = state
        self._pending_ref = None
        self._last_ref = None
        # Per-turn output flags, reset by the engine each call
        self.boldable_text = None
        self.exit_requested = False
        # Answer to the start question; kept across restarts
        self.experienced = False
        self.load_world(world)

    def load_world(self, world):
        self.world = world
        self.current_location = world.starting_location
        self.current_location.visited = True
        self.inventory = []
        self.containment = ContainerStateManager()
        self.hint_counts = {}
        self.last_hint_phase = None
        self._pending_ref = None
        self._last_ref = None
        for item, container in world.initial_contents:
            self.containment.set_container(item, container)

    def reset(self, world):
        """Back to the start of the game on a fresh world; state becomes PLAYING."""
        self.load_world(world)
        self.game_state = GameState.PLAYING
        logger.info("Session %s reset", self.session_id)

    # ==========================================================
    # STATE
    # ==========================================================
    def set_state(self, state):
        if state != self.game_state:
            logger.debug("Session %s: %s -> %s", self.session_id, self.game_state.value, state.value)
        self.game_state = state

    def await_code(self, lockable, state):
        if state not in CODE_STATES:
            raise ValueError(f"{state} is not a code-wait state")
        self._pending_ref = weakref.ref(lockable)
        self.set_state(state)

    def take_pending(self):
        """Returns the pending lockable (or None) and clears it."""
        lockable = self._pending_ref() if self._pending_ref else None
        self._pending_ref = None
        return lockable

    @property
    def pending_lockable(self):
        return self._pending_ref() if self._pending_ref else None

    @property
    def last_referenced(self):
        return self._last_ref() if self._last_ref else None

    @last_referenced.setter
    def last_referenced(self, entity):
        self._last_ref = weakref.ref(entity) if entity is not None else None

    # ==========================================================
    # INVENTORY
    # ==========================================================
    def add_item(self, item):
        if item not in self.inventory:
            self.inventory.append(item)

    def remove_item(self, item):
        if item in self.inventory:
            self.inventory.remove(item)

    def find_inventory_items(self, name):
        return [i for i in self.inventory if i.match_name(name)]

    def find_inventory_item(self, name):
        matches = self.find_inventory_items(name)
        return matches[0] if matches else None

    def has_item(self, name):
        return self.find_inventory_item(name) is not None

    def is_in_scope(self, entity):
        location = self.current_location
        return (entity in self.inventory
                or entity in location.items
                or entity in location.scenery
                or entity is location)

    # ==========================================================
    # HINTS
    # ==========================================================
    def next_hint_count(self, phase_key):
        if phase_key != self.last_hint_phase:
            # A new phase starts over at the gentlest hint
            self.last_hint_phase = phase_key
            self.hint_counts[phase_key] = 0
        self.hint_counts[phase_key] = self.hint_counts.get(phase_key, 0) + 1
        return self.hint_counts[phase_key]

import logging
import re
from dataclasses import dataclass

from ifcore.containers import Container
from ifcore.world import Item, Location, SceneryObject

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UnlockResult:
    success: bool
    message: str


@dataclass(frozen=True)
class OpenResult:
    success: bool
    message: str


def normalize_code(code):
    """'1, 2 3,4' -> ['1', '2', '3', '4']"""
    if not code:
        return []
    return [token for token in re.split(r"[\s,]+", str(code).strip()) if token]


class Lockable:
    """
    The unlock/open capability shared by held items, scenery and locations.

    A lockable is key-based (key_name must be held) or code-based (code must
    be typed). Rules are checked in a fixed order: already done, no lock at
    all, then the key or code. Whatever happens, open is never true while
    unlocked is false.

    Host classes call _init_lockable() and may override on_unlock/on_open.
    """

    def _init_lockable(self, requires_unlocking=True, key_name=None, code=None,
                       unlocked=None, is_open=False, target_names=(), messages=None):
        self.requires_unlocking = requires_unlocking
        self.key_name = key_name
        self.code = normalize_code(code) or None
        self.unlocked = (not requires_unlocking) if unlocked is None else unlocked
        self.open = bool(is_open) and self.unlocked
        self.target_names = [t.lower() for t in target_names]
        # Story-specific wording keyed like the response provider methods
        self.messages = dict(messages or {})

    @property
    def uses_code(self):
        return self.code is not None

    @property
    def lock_name(self):
        """The name lock messages use."""
        return self.name

    def inferred_target_names(self):
        names = {self.name.lower()}
        names.update(a.lower() for a in self.aliases)
        names.update(self.target_names)
        return names

    def matches_unlock_target(self, name):
        return name.strip().lower() in self.inferred_target_names()

    def matches_open_target(self, name):
        return name.strip().lower() in self.inferred_target_names()

    def set_unlocked(self, unlocked):
        self.unlocked = unlocked
        if not unlocked:
            self.open = False

    def set_open(self, is_open):
        if is_open and not self.unlocked:
            raise ValueError(f"{self.name} cannot be open while locked")
        self.open = is_open

    # ==========================================================
    # ATTEMPTS
    # ==========================================================
    def try_unlock(self, session, provided_answer=None):
        answer = (provided_answer or "").strip()

        if self.requires_unlocking and self.unlocked:
            return UnlockResult(False, self._message(session, 'unlock_already'))
        if not self.requires_unlocking:
            return UnlockResult(False, self._message(session, 'unlock_not_needed'))

        failure = self._unlock_blocker(session, answer)
        if failure:
            return UnlockResult(False, failure)

        self.unlocked = True
        logger.debug("%s unlocked", self.name)
        self.on_unlock(session)
        return UnlockResult(True, self._message(session, 'unlock_success'))

    def try_open(self, session, provided_answer=None):
        answer = (provided_answer or "").strip()

        if self.open:
            return OpenResult(False, self._message(session, 'open_already'))

        parts = []
        if not self.unlocked:
            failure = self._unlock_blocker(session, answer)
            if failure:
                if self.uses_code:
                    return OpenResult(False, failure)
                return OpenResult(False, self._message(session, 'open_locked'))
            self.unlocked = True
            self.on_unlock(session)
            parts.append(self._message(session, 'unlock_success'))

        self.open = True
        logger.debug("%s opened", self.name)
        self.on_open(session)
        parts.append(self._message(session, 'open_success'))
        return OpenResult(True, " ".join(parts))

    def needs_code_prompt(self, result, provided_answer, opening=False):
        """True when a failed attempt should leave the session waiting for a code."""
        if result.success or (provided_answer or "").strip():
            return False
        if opening and self.open:
            return False
        return self.requires_unlocking and not self.unlocked and self.uses_code

    def on_unlock(self, session):
        pass

    def on_open(self, session):
        pass

    def _unlock_blocker(self, session, answer):
        if self.uses_code:
            if not answer:
                return self._message(session, 'code_prompt')
            if normalize_code(answer) != self.code:
                return self._message(session, 'code_wrong')
            return None

        key = session.find_inventory_item(self.key_name) if self.key_name else None
        if key is None:
            return self._message(session, 'unlock_no_key')
        if answer and not key.match_name(answer):
            # Naming anything other than the key counts as not having it
            return self._message(session, 'unlock_no_key')
        return None

    def _message(self, session, key):
        if key in self.messages:
            return self.messages[key]
        return getattr(session.responses, key)(self.lock_name)


# ==========================================
# VARIANTS
# ==========================================

class OpenableItem(Item, Lockable):
    def __init__(self, name, inventory_description=None, location_description=None,
                 detailed_description=None, aliases=(), requires_unlocking=True,
                 key_name=None, code=None, is_open=False, messages=None):
        super().__init__(name, inventory_description, location_description,
                         detailed_description, aliases)
        self._init_lockable(requires_unlocking, key_name, code, is_open=is_open,
                            messages=messages)


class OpenableItemContainer(OpenableItem, Container):
    """A chest or lockbox: things go inside only while it is open."""

    def __init__(self, name, inventory_description=None, location_description=None,
                 detailed_description=None, aliases=(), requires_unlocking=True,
                 key_name=None, code=None, is_open=False, messages=None,
                 capacity=None, allowed_items=(), prepositions=('in', 'into')):
        super().__init__(name, inventory_description, location_description,
                         detailed_description, aliases, requires_unlocking,
                         key_name, code, is_open, messages)
        self._init_container(capacity, allowed_items, prepositions)

    def is_reachable(self):
        return self.open


class OpenableSceneryObject(SceneryObject, Lockable):
    def __init__(self, name, aliases=(), responses=None, custom_responses=None,
                 container=False, allowed_items=(), prepositions=('in', 'into'),
                 capacity=None, requires_unlocking=True, key_name=None, code=None,
                 is_open=False, messages=None, reveals=()):
        super().__init__(name, aliases, responses, custom_responses, container,
                         allowed_items, prepositions, capacity, reveals)
        self._init_lockable(requires_unlocking, key_name, code, is_open=is_open,
                            messages=messages)

    def is_reachable(self):
        return self.open


class OpenableLocation(Location, Lockable):
    """
    A location whose lock is a door, gate or hatch named by target_names.

    Opening can reveal exits: opens_exits maps a direction to the name of the
    location it leads to. Descriptions follow the lock state when the
    optional open/unlocked texts are given.
    """

    def __init__(self, name, long_description, short_description=None, aliases=(),
                 target_names=(), requires_unlocking=True, key_name=None, code=None,
                 is_open=False, messages=None, opens_exits=None,
                 open_description=None, unlocked_description=None):
        super().__init__(name, long_description, short_description, aliases)
        self._init_lockable(requires_unlocking, key_name, code, is_open=is_open,
                            target_names=target_names, messages=messages)
        self.opens_exits = dict(opens_exits or {})
        self.open_description = open_description
        self.unlocked_description = unlocked_description

    def inferred_target_names(self):
        # The room's own name is not a lock target, only its door
        names = set(self.target_names)
        return names or {self.name.lower()}

    @property
    def lock_name(self):
        return self.target_names[0] if self.target_names else self.name

    def describe(self, long=True):
        if self.open and self.open_description:
            return self.open_description
        if self.unlocked and self.unlocked_description:
            return self.unlocked_description
        return super().describe(long)

    def on_open(self, session):
        for direction, location_name in self.opens_exits.items():
            target = session.world.get_location(location_name)
            if target is None:
                logger.warning("%s opens toward unknown location %r", self.name, location_name)
                continue
            self.connect(direction, target)

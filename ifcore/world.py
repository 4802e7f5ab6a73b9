import copy
import logging
from enum import Enum

from ifcore.containers import Container, ContainerStateManager, LocationContainer

logger = logging.getLogger(__name__)

DIRECTION_ORDER = (
    'north', 'south', 'east', 'west',
    'northeast', 'northwest', 'southeast', 'southwest',
    'up', 'down', 'in', 'out',
)

OPPOSITES = {
    'north': 'south', 'south': 'north',
    'east': 'west', 'west': 'east',
    'northeast': 'southwest', 'southwest': 'northeast',
    'northwest': 'southeast', 'southeast': 'northwest',
    'up': 'down', 'down': 'up',
    'in': 'out', 'out': 'in',
}

SHORT_DIRECTIONS = {
    'n': 'north', 's': 'south', 'e': 'east', 'w': 'west',
    'ne': 'northeast', 'nw': 'northwest', 'se': 'southeast', 'sw': 'southwest',
    'u': 'up', 'd': 'down',
}


class ConfigurationError(ValueError):
    """Raised while building a world that cannot be played."""


class InteractionType(str, Enum):
    CLIMB = "climb"
    DRINK = "drink"
    EAT = "eat"
    KICK = "kick"
    LOOK = "look"
    PUNCH = "punch"
    READ = "read"
    SWIM = "swim"
    TAKE = "take"


def canonical_direction(direction):
    direction = direction.strip().lower()
    return SHORT_DIRECTIONS.get(direction, direction)


# ==========================================
# CORE OBJECT MODEL
# ==========================================

class Entity:
    def __init__(self, name, aliases=()):
        self.name = name
        self.aliases = [a for a in aliases]

    def match_name(self, name):
        name = name.strip().lower()
        if self.name.lower() == name: return True
        for alias in self.aliases:
            if alias.lower() == name: return True
        return False

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r})"


class Item(Entity):
    def __init__(self, name, inventory_description=None, location_description=None,
                 detailed_description=None, aliases=(), edible=False, text=None):
        super().__init__(name, aliases)
        self.inventory_description = inventory_description or f"a {name}"
        self.location_description = location_description or f"There is a {name} here."
        self.detailed_description = detailed_description or f"It's a {name}."
        self.edible = edible
        # Writing shown by "read"
        self.text = text


class ItemContainer(Item, Container):
    """A portable item that holds other items (a bag, a jar)."""

    def __init__(self, name, inventory_description=None, location_description=None,
                 detailed_description=None, aliases=(), capacity=None,
                 allowed_items=(), prepositions=('in', 'into')):
        super().__init__(name, inventory_description, location_description,
                         detailed_description, aliases)
        self._init_container(capacity, allowed_items, prepositions)


class SceneryObject(Entity):
    """
    Fixed part of a location. It cannot be taken but answers interactions
    such as LOOK or CLIMB with canned text, and may act as a container.
    """

    def __init__(self, name, aliases=(), responses=None, custom_responses=None,
                 container=False, allowed_items=(), prepositions=('on', 'onto'),
                 capacity=None, reveals=()):
        super().__init__(name, aliases)
        try:
            self.responses = {InteractionType(k): v for k, v in (responses or {}).items()}
        except ValueError as e:
            raise ConfigurationError(f"Scenery '{name}': {e}") from e
        self.custom_responses = {k.lower(): v for k, v in (custom_responses or {}).items()}
        self.is_container = container
        self.allowed_items = tuple(allowed_items)
        self.prepositions = tuple(prepositions)
        self.capacity = capacity
        # Hidden items in the same location that looking at this brings out
        self.reveals = tuple(reveals)

        if not self.responses and not self.custom_responses:
            raise ConfigurationError(f"Scenery '{name}' needs at least one interaction")

    def response_for(self, interaction):
        return self.responses.get(InteractionType(interaction))

    def custom_response(self, verb):
        return self.custom_responses.get(verb.lower())

    def is_reachable(self):
        return True


class Location(Entity):
    def __init__(self, name, long_description, short_description=None, aliases=()):
        super().__init__(name, aliases)
        self.long_description = long_description
        self.short_description = short_description or long_description
        self.connections = {}
        self.items = []
        self.scenery = []
        self.hidden_items = []
        self.revealed_descriptions = {}
        self.containment = ContainerStateManager()
        self.visited = False
        self._containers = []

    def describe(self, long=True):
        return self.long_description if long else self.short_description

    # --- EXITS ---
    def connect(self, direction, location):
        self.connections[canonical_direction(direction)] = location

    def get_connection(self, direction):
        return self.connections.get(canonical_direction(direction))

    def available_directions(self):
        known = [d for d in DIRECTION_ORDER if d in self.connections]
        extra = [d for d in self.connections if d not in DIRECTION_ORDER]
        return known + extra

    # --- ITEMS ---
    def add_item(self, item):
        if item not in self.items:
            self.items.append(item)

    def remove_item(self, item):
        if item in self.items:
            self.items.remove(item)
        self.containment.remove(item)
        self.revealed_descriptions.pop(item, None)

    def has_item(self, item):
        return item in self.items

    def find_items(self, name):
        return [i for i in self.items if i.match_name(name)]

    # --- HIDDEN ITEMS ---
    def add_hidden_item(self, item, revealed_description=None):
        """item stays out of sight until reveal_item(); it then lists with revealed_description."""
        if item not in self.hidden_items:
            self.hidden_items.append(item)
        if revealed_description:
            self.revealed_descriptions[item] = revealed_description

    def is_item_hidden(self, item):
        return item in self.hidden_items

    def reveal_item(self, item):
        """Accepts an item or a name. Returns False if nothing hidden matched."""
        if isinstance(item, str):
            matches = [i for i in self.hidden_items if i.match_name(item)]
            if not matches:
                return False
            item = matches[0]
        if item not in self.hidden_items:
            return False
        self.hidden_items.remove(item)
        self.add_item(item)
        logger.debug("Revealed %s in %s", item.name, self.name)
        return True

    # --- SCENERY ---
    def add_scenery(self, scenery):
        self.scenery.append(scenery)
        if scenery.is_container:
            self._containers.append(LocationContainer(scenery))

    def find_scenery(self, name):
        return [s for s in self.scenery if s.match_name(name)]

    def containers(self):
        return list(self._containers)

    def container_named(self, name):
        for container in self._containers:
            if container.match_name(name):
                return container
        return None


# ==========================================
# GAME MAP
# ==========================================

class GameMap:
    """A built, validated world. Sessions play on their own fresh_copy()."""

    def __init__(self, locations, items, starting_location):
        self.locations = locations
        self.items = items
        self.starting_location_name = starting_location
        self.title = "Untitled"
        self.hints = None
        self.intro_handler = None
        self.intro_responses = None
        self.intro_message = None
        self.skip_intro = False
        self.commands = []
        # (item, container) pairs for item containers, seeded into each session
        self.initial_contents = []

    @property
    def starting_location(self):
        return self.locations[self.starting_location_name]

    def get_location(self, name):
        return self.locations.get(name)

    def find_item(self, name):
        for item in self.items.values():
            if item.match_name(name):
                return item
        return None

    def fresh_copy(self):
        return copy.deepcopy(self)


class GameMapBuilder:
    """
    Collects locations, items and wiring in any order; build() checks the
    result and raises ConfigurationError for anything unplayable.
    """

    def __init__(self):
        self._locations = {}
        self._items = {}
        self._placements = []
        self._contained = []
        self._hidden = []
        self._connections = []
        self._start = None
        self._title = "Untitled"
        self._hints = None
        self._intro_handler = None
        self._intro_responses = None
        self._intro_message = None
        self._skip_intro = False
        self._commands = []

    def title(self, title):
        self._title = title
        return self

    def add_location(self, location):
        self._locations[location.name] = location
        return self

    def add_item(self, item):
        self._items[item.name] = item
        return self

    def place_item(self, item, location_name):
        if isinstance(item, Item):
            self.add_item(item)
            item = item.name
        self._placements.append((item, location_name))
        return self

    def place_in(self, item, container_name, location_name):
        """Starts item in or on a container that sits in location_name."""
        self.place_item(item, location_name)
        item_name = item.name if isinstance(item, Item) else item
        self._contained.append((item_name, container_name, location_name))
        return self

    def hide_item(self, item, location_name, revealed_description=None):
        """Starts item hidden in location_name; see Location.reveal_item."""
        if isinstance(item, Item):
            self.add_item(item)
            item = item.name
        self._hidden.append((item, location_name, revealed_description))
        return self

    def connect(self, from_name, direction, to_name):
        self._connections.append((from_name, direction, to_name, True))
        return self

    def connect_one_way(self, from_name, direction, to_name):
        self._connections.append((from_name, direction, to_name, False))
        return self

    def set_starting_location(self, name):
        self._start = name
        return self

    def with_hints(self, hints):
        self._hints = hints
        return self

    def with_intro_handler(self, handler):
        self._intro_handler = handler
        return self

    def with_intro_responses(self, yes_response, no_response):
        self._intro_responses = (yes_response, no_response)
        return self

    def with_intro_message(self, message):
        self._intro_message = message
        return self

    def skip_intro(self, skip=True):
        self._skip_intro = skip
        return self

    def with_command(self, verb, handler, aliases=()):
        self._commands.append((verb, handler, tuple(aliases)))
        return self

    def build(self):
        if not self._locations:
            raise ConfigurationError("A game map needs at least one location")
        if self._start is None:
            raise ConfigurationError("No starting location was set")
        if self._start not in self._locations:
            raise ConfigurationError(f"Starting location '{self._start}' does not exist")

        for from_name, direction, to_name, both_ways in self._connections:
            source = self._require_location(from_name)
            target = self._require_location(to_name)
            direction = canonical_direction(direction)
            source.connect(direction, target)
            if both_ways:
                if direction not in OPPOSITES:
                    raise ConfigurationError(f"Direction '{direction}' has no opposite; use connect_one_way")
                target.connect(OPPOSITES[direction], source)

        for item_name, location_name in self._placements:
            if item_name not in self._items:
                raise ConfigurationError(f"Unknown item '{item_name}'")
            self._require_location(location_name).add_item(self._items[item_name])

        for item_name, location_name, revealed in self._hidden:
            if item_name not in self._items:
                raise ConfigurationError(f"Unknown item '{item_name}'")
            self._require_location(location_name).add_hidden_item(self._items[item_name], revealed)
        for location in self._locations.values():
            for scenery in location.scenery:
                for name in scenery.reveals:
                    if not any(i.match_name(name) for i in location.hidden_items):
                        raise ConfigurationError(
                            f"'{scenery.name}' reveals '{name}', which is not hidden in '{location.name}'")

        initial_contents = []
        for item_name, container_name, location_name in self._contained:
            location = self._require_location(location_name)
            item = self._items[item_name]
            holder = location.container_named(container_name)
            if holder is not None:
                location.containment.set_container(item, holder)
                continue
            holder = self._items.get(container_name)
            if not isinstance(holder, Container) or holder not in location.items:
                raise ConfigurationError(f"No container '{container_name}' in '{location_name}'")
            initial_contents.append((item, holder))

        game_map = GameMap(dict(self._locations), dict(self._items), self._start)
        game_map.title = self._title
        game_map.hints = self._hints
        game_map.intro_handler = self._intro_handler
        game_map.intro_responses = self._intro_responses
        game_map.intro_message = self._intro_message
        game_map.skip_intro = self._skip_intro
        game_map.commands = list(self._commands)
        game_map.initial_contents = initial_contents

        logger.info("Built map '%s': %d locations, %d items, start=%s",
                    self._title, len(self._locations), len(self._items), self._start)
        return game_map

    def _require_location(self, name):
        if name not in self._locations:
            raise ConfigurationError(f"Unknown location '{name}'")
        return self._locations[name]

import logging

logger = logging.getLogger(__name__)


class Container:
    """
    Mixin for anything items can be put in or on.

    Call _init_container() from the host class constructor. An empty
    allowed_items set accepts any item; capacity None means unlimited.
    """

    def _init_container(self, capacity=None, allowed_items=(), prepositions=('in', 'into')):
        self.capacity = capacity
        self.allowed_items = frozenset(n.lower() for n in allowed_items)
        self.prepositions = tuple(p.lower() for p in prepositions) or ('in', 'into')

    @property
    def container_name(self):
        return self.name

    @property
    def preferred_preposition(self):
        return self.prepositions[0]

    def accepts_preposition(self, preposition):
        return preposition.lower() in self.prepositions

    def can_accept(self, item):
        if item is self:
            return False
        if not self.allowed_items:
            return True
        names = [item.name.lower()] + [a.lower() for a in item.aliases]
        return any(n in self.allowed_items for n in names)

    def is_full(self, current_count):
        return self.capacity is not None and current_count >= self.capacity

    def is_reachable(self):
        """Closed lockable containers override this."""
        return True


class LocationContainer(Container):
    """A container view over a piece of scenery (a table, a shelf, a stump)."""

    def __init__(self, scenery):
        self.scenery = scenery
        self._init_container(
            capacity=scenery.capacity,
            allowed_items=scenery.allowed_items,
            prepositions=scenery.prepositions or ('on', 'onto'),
        )

    @property
    def name(self):
        return self.scenery.name

    @property
    def aliases(self):
        return self.scenery.aliases

    def match_name(self, name):
        return self.scenery.match_name(name)

    def is_reachable(self):
        return self.scenery.is_reachable()

    def __repr__(self):
        return f"LocationContainer({self.scenery.name!r})"


class ContainerStateManager:
    """Containment edges (item -> container) for one owner."""

    def __init__(self):
        self._edges = {}

    def set_container(self, item, container):
        self._edges[item] = container
        logger.debug("%s is now in %s", item.name, container.container_name)

    def container_for(self, item):
        return self._edges.get(item)

    def is_contained(self, item):
        return item in self._edges

    def remove(self, item):
        return self._edges.pop(item, None)

    def contents_of(self, container):
        return [item for item, holder in self._edges.items() if holder is container]

    def clear(self):
        self._edges.clear()

    def __len__(self):
        return len(self._edges)


# ==========================================
# DUAL-OWNERSHIP LOOKUP
# ==========================================
def owner_for(container, session):
    """Item containers keep their edges on the session, scenery on the location."""
    if isinstance(container, LocationContainer):
        for location in session.world.locations.values():
            if container in location.containers():
                return location.containment
        return session.current_location.containment
    return session.containment


def container_for(item, session):
    container = session.containment.container_for(item)
    if container is not None:
        return container
    return session.current_location.containment.container_for(item)


def put_in(item, container, session):
    remove_from_container(item, session)
    owner_for(container, session).set_container(item, container)


def remove_from_container(item, session):
    removed = session.containment.remove(item)
    if removed is None:
        removed = session.current_location.containment.remove(item)
    return removed


def contents_of(container, session):
    return owner_for(container, session).contents_of(container)


def all_contents(container, session):
    """Everything inside container, at any depth."""
    found = []
    for inner in contents_of(container, session):
        found.append(inner)
        if isinstance(inner, Container):
            found.extend(all_contents(inner, session))
    return found


def is_inside(container, item, session):
    """True if container sits inside item, directly or through nesting."""
    holder = container_for(container, session)
    while holder is not None and not isinstance(holder, LocationContainer):
        if holder is item:
            return True
        holder = container_for(holder, session)
    return False

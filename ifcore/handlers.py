import logging

from ifcore.containers import (
    Container, LocationContainer, all_contents, container_for, contents_of, is_inside,
    put_in, remove_from_container,
)
from ifcore.parser import is_pronoun
from ifcore.resolver import Resolution
from ifcore.session import GameState
from ifcore.world import InteractionType, SceneryObject

logger = logging.getLogger(__name__)

ALL_WORDS = ('all', 'everything')
PUT_PREPOSITIONS = ('in', 'into', 'on', 'onto')
SCENERY_VERBS = ('climb', 'punch', 'kick', 'drink', 'swim')


# ==========================================
# LOCATION TEXT
# ==========================================

def format_items(session, location):
    """One line per item; loose items first, then ones in or on something."""
    loose = []
    contained = []
    for item in location.items:
        desc = location.revealed_descriptions.get(item, item.location_description)
        holder = container_for(item, session)
        if holder is None:
            loose.append(desc)
        elif not holder.is_reachable():
            continue
        elif isinstance(holder, LocationContainer):
            contained.append(f"{desc} - {holder.preferred_preposition} {holder.name}")
        else:
            contained.append(f"{desc} - in {holder.name}")
    return "\n".join(loose + contained)


def describe_location(session, long=True):
    location = session.current_location
    text = location.describe(long)
    listing = format_items(session, location)
    if listing:
        text += "\n\n" + listing
    return text


def format_inventory(session):
    lines = []
    for item in session.inventory:
        holder = session.containment.container_for(item)
        if holder is not None:
            lines.append(f"  {item.inventory_description} (in the {holder.name})")
        else:
            lines.append(f"  {item.inventory_description}")
    return "\n".join(lines)


class Handler:
    """Built-in handler base: claims `verbs`, answers with display text."""

    verbs = ()

    def __init__(self, resolver, responses):
        self.resolver = resolver
        self.responses = responses

    def handle(self, session, command):
        raise NotImplementedError

    def __repr__(self):
        return type(self).__name__


# ==========================================
# TAKE / DROP / PUT
# ==========================================

class TakeHandler(Handler):
    verbs = ('take',)

    def handle(self, session, command):
        r = self.responses
        location = session.current_location
        source = command.first_indirect_object if command.preposition == 'from' else ""
        names = command.direct_objects

        if not names:
            if source:
                return r.take_what()
            if not location.items:
                return r.take_nothing_here()
            result = self.resolver.resolve_implied_object('take', session)
            if result.ambiguous:
                return r.take_need_to_specify()
            if not result.success:
                return r.take_nothing_here()
            return self._take(result.entity, session)

        if names[0] in ALL_WORDS:
            if not location.items:
                return r.take_nothing_here()
            taken = 0
            for item in list(location.items):
                if item in location.items and self._reachable(item, session):
                    self._take(item, session)
                    taken += 1
            if not taken:
                return r.take_nothing_here()
            return r.take_success()

        if len(names) == 1:
            return self._take_named(names[0], source, session)
        return "\n".join(f"{name}: {self._take_named(name, source, session)}" for name in names)

    def _take_named(self, name, source, session):
        r = self.responses
        result = self.resolver.resolve(name, 'take', session)
        if result.ambiguous:
            return r.take_need_to_specify()
        if not result.success:
            return r.item_not_present(name)

        entity = result.entity
        if isinstance(entity, SceneryObject):
            return entity.response_for(InteractionType.TAKE) or r.take_cant(entity.name)

        holder = container_for(entity, session)
        if source and (holder is None or not holder.match_name(source)):
            return r.take_not_in(entity.name, source)

        if entity in session.inventory:
            if holder is not None and source:
                # Taking something out of a carried container
                remove_from_container(entity, session)
                return r.take_success()
            return r.take_already_have()

        if not self._reachable(entity, session):
            return r.put_container_closed(holder.name)
        return self._take(entity, session)

    def _reachable(self, item, session):
        holder = container_for(item, session)
        return holder is None or holder.is_reachable()

    def _take(self, item, session):
        location = session.current_location
        location.remove_item(item)
        remove_from_container(item, session)
        session.add_item(item)

        # Contents travel with their container, however deep
        if isinstance(item, Container):
            for inner in all_contents(item, session):
                if inner in location.items:
                    location.items.remove(inner)
                    session.add_item(inner)
        return self.responses.take_success()


class DropHandler(Handler):
    verbs = ('drop',)

    def handle(self, session, command):
        r = self.responses
        names = command.direct_objects

        if not session.inventory:
            return r.drop_carrying_nothing()

        if not names:
            result = self.resolver.resolve_implied_object('drop', session)
            if result.ambiguous:
                return r.drop_need_to_specify()
            return self._drop(result.entity, session)

        if names[0] in ALL_WORDS:
            for item in list(session.inventory):
                if item in session.inventory:
                    self._drop(item, session)
            return r.drop_success()

        if len(names) == 1:
            return self._drop_named(names[0], session)
        return "\n".join(f"{name}: {self._drop_named(name, session)}" for name in names)

    def _drop_named(self, name, session):
        result = self.resolver.resolve(name, 'drop', session)
        if result.ambiguous:
            return self.responses.drop_need_to_specify()
        if not result.success or result.entity not in session.inventory:
            return self.responses.drop_dont_have(name)
        return self._drop(result.entity, session)

    def _drop(self, item, session):
        location = session.current_location
        remove_from_container(item, session)
        session.remove_item(item)
        location.add_item(item)

        if isinstance(item, Container):
            for inner in all_contents(item, session):
                if inner in session.inventory:
                    session.remove_item(inner)
                    location.add_item(inner)
        logger.debug("Session %s dropped %s", session.session_id, item.name)
        return self.responses.drop_success()


class PutHandler(Handler):
    verbs = ('put',)

    def handle(self, session, command):
        r = self.responses
        name = command.first_direct_object
        if not name:
            return r.put_what()
        return self.put(session, name, command.preposition, command.first_indirect_object)

    def put(self, session, name, preposition, target):
        r = self.responses
        result = self.resolver.resolve(name, 'put', session)
        if result.ambiguous:
            return r.which_one(name)
        item = result.entity
        location = session.current_location
        if not result.success or (item not in session.inventory and item not in location.items):
            return r.put_item_not_present(name)

        if not preposition or not target:
            return r.put_where(item.name)
        if preposition not in PUT_PREPOSITIONS:
            return r.put_unsupported_preposition(preposition)

        found = self.resolver.resolve_object(target, session)
        if found.ambiguous:
            return r.which_one(target)
        if not found.success:
            return r.put_container_not_found(target)
        container = self._as_container(found.entity, location)
        if container is None:
            return r.put_not_a_container(found.entity.name)

        if container is item or is_inside(container, item, session):
            return r.put_circular()
        if not container.accepts_preposition(preposition):
            return r.put_invalid_preposition(container.name, container.preferred_preposition)
        if not container.is_reachable():
            return r.put_container_closed(container.name)
        if not container.can_accept(item):
            return r.put_not_accepted(container.name, item.name)
        if container.is_full(len(contents_of(container, session))):
            return r.put_container_full(container.name)

        self._place(item, container, session)
        # The put leaves the container as "it"
        session.last_referenced = found.entity
        return r.put_success(item.name, preposition, container.name)

    def _as_container(self, entity, location):
        if isinstance(entity, SceneryObject):
            return location.container_named(entity.name)
        if isinstance(entity, Container):
            return entity
        return None

    def _place(self, item, container, session):
        location = session.current_location
        carried = isinstance(container, Container) and container in session.inventory
        if carried and item in location.items:
            location.items.remove(item)
            session.add_item(item)
        elif not carried and item in session.inventory:
            session.remove_item(item)
            location.add_item(item)
        put_in(item, container, session)


# ==========================================
# LOOK / READ / EAT / SCENERY
# ==========================================

class LookHandler(Handler):
    verbs = ('look',)

    def handle(self, session, command):
        name = command.object_phrase
        if not name or (command.preposition == 'around' and not command.direct_objects):
            return describe_location(session, long=True)

        result = self.resolver.resolve(name, 'look', session)
        if result.ambiguous:
            return self.responses.which_one(name)
        if not result.success:
            lockable = self.resolver.resolve_lockable(name, 'open', session)
            if lockable.success and lockable.entity is session.current_location:
                return session.current_location.describe(long=True)
            return self.responses.look_not_present(name)

        entity = result.entity
        if isinstance(entity, SceneryObject):
            for hidden in entity.reveals:
                session.current_location.reveal_item(hidden)
            return entity.response_for(InteractionType.LOOK) or self.responses.look_not_present(name)
        return self._describe_item(entity, session)

    def _describe_item(self, item, session):
        text = item.detailed_description
        if isinstance(item, Container) and item.is_reachable():
            inside = contents_of(item, session)
            if inside:
                text += "\n" + ", ".join(i.inventory_description for i in inside) + f" {item.preferred_preposition} it."
        return text


class ReadHandler(Handler):
    verbs = ('read',)

    def handle(self, session, command):
        r = self.responses
        name = command.object_phrase
        if not name:
            return r.read_what()

        result = self.resolver.resolve(name, 'read', session)
        if result.ambiguous:
            return r.which_one(name)
        if not result.success:
            return r.read_not_present()

        entity = result.entity
        if isinstance(entity, SceneryObject):
            return entity.response_for(InteractionType.READ) or r.cant_read(entity.name)
        return entity.text or r.cant_read(entity.name)


class EatHandler(Handler):
    verbs = ('eat',)

    def handle(self, session, command):
        r = self.responses
        name = command.object_phrase
        if not name:
            return r.eat_what()

        result = self.resolver.resolve(name, 'eat', session)
        if result.ambiguous:
            return r.which_one(name)
        if not result.success:
            return r.eat_dont_have(name)

        entity = result.entity
        if isinstance(entity, SceneryObject):
            return entity.response_for(InteractionType.EAT) or r.eat_not_edible()
        if not entity.edible:
            return r.eat_not_edible()
        if entity not in session.inventory:
            return r.eat_dont_have(name)

        remove_from_container(entity, session)
        session.remove_item(entity)
        session.last_referenced = None
        return r.eat_success()


class SceneryHandler(Handler):
    """climb, punch, kick, drink and swim only mean something for scenery."""

    verbs = SCENERY_VERBS

    def handle(self, session, command):
        r = self.responses
        verb = command.verb
        name = command.object_phrase
        if not name:
            return r.interaction_what(verb)

        result = self.resolver.resolve(name, verb, session)
        if result.ambiguous:
            return r.which_one(name)
        if not result.success:
            return r.interaction_not_present(verb)

        entity = result.entity
        if isinstance(entity, SceneryObject):
            text = entity.response_for(verb)
            if text:
                return text
        return r.interaction_cant(verb, entity.name)

    def custom_response(self, session, command):
        """Story-defined scenery verbs such as 'smell' with no handler of their own."""
        name = command.object_phrase
        if not name or is_pronoun(name):
            return None
        for scenery in session.current_location.find_scenery(name):
            text = scenery.custom_response(command.verb)
            if text:
                return text
        return None


# ==========================================
# SYSTEM
# ==========================================

class SystemHandler(Handler):
    verbs = ('inventory', 'help', 'info', 'status')

    def handle(self, session, command):
        r = self.responses
        if command.verb == 'inventory':
            if not session.inventory:
                return r.inventory_empty()
            return r.inventory(format_inventory(session))
        if command.verb == 'help':
            return r.help()
        if command.verb == 'info':
            return r.info()
        if command.verb == 'status':
            visited = sum(1 for loc in session.world.locations.values() if loc.visited)
            return r.status(session.current_location.name, len(session.inventory), visited)
        return r.not_understood(command.original_input.strip())


class HintHandler(Handler):
    verbs = ('hint',)

    def handle(self, session, command):
        config = session.world.hints
        if config is None:
            return self.responses.no_hints()
        phase = config.phase_for(session)
        if phase is None:
            return self.responses.no_hints()
        level = session.next_hint_count(phase.phase_key)
        return phase.hint(level)


# ==========================================
# UNLOCK / OPEN
# ==========================================

class UnlockHandler(Handler):
    verbs = ('unlock',)
    verb = 'unlock'
    wait_state = GameState.WAITING_FOR_UNLOCK_CODE

    def handle(self, session, command):
        # "unlock box with 1 2 3 4" -> answer "1 2 3 4"
        answer = " ".join(command.indirect_objects) or None
        name = command.first_direct_object

        if not name or is_pronoun(name):
            result = self.resolver.resolve_implied_object(self.verb, session, pronoun=bool(name))
            if result.ambiguous:
                return self._need_to_specify("")
            if not result.success:
                return self._nothing()
        else:
            result = self.resolver.resolve_lockable(name, self.verb, session)
            if result.ambiguous:
                return self._need_to_specify(name)
            if not result.success:
                if self.resolver.resolve_object(name, session).outcome != Resolution.NOT_FOUND:
                    return self._cant(name)
                return self._not_present(name)

        lockable = result.entity
        outcome = self._attempt(lockable, session, answer)
        if lockable.needs_code_prompt(outcome, answer, opening=self.verb == 'open'):
            session.await_code(lockable, self.wait_state)
        return outcome.message

    def _attempt(self, lockable, session, answer):
        return lockable.try_unlock(session, answer)

    def _need_to_specify(self, name):
        return self.responses.unlock_need_to_specify(name)

    def _nothing(self):
        return self.responses.unlock_nothing()

    def _cant(self, name):
        return self.responses.unlock_cant(name)

    def _not_present(self, name):
        return self.responses.unlock_not_present(name)


class OpenHandler(UnlockHandler):
    verbs = ('open',)
    verb = 'open'
    wait_state = GameState.WAITING_FOR_OPEN_CODE

    def _attempt(self, lockable, session, answer):
        return lockable.try_open(session, answer)

    def _need_to_specify(self, name):
        return self.responses.open_need_to_specify(name)

    def _nothing(self):
        return self.responses.open_nothing()

    def _cant(self, name):
        return self.responses.open_cant(name)

    def _not_present(self, name):
        return self.responses.open_not_present(name)


def builtin_handlers(resolver, responses):
    return [
        TakeHandler(resolver, responses),
        DropHandler(resolver, responses),
        PutHandler(resolver, responses),
        LookHandler(resolver, responses),
        ReadHandler(resolver, responses),
        EatHandler(resolver, responses),
        SceneryHandler(resolver, responses),
        UnlockHandler(resolver, responses),
        OpenHandler(resolver, responses),
        HintHandler(resolver, responses),
        SystemHandler(resolver, responses),
    ]

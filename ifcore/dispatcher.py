import logging
import threading

from ifcore.containers import container_for
from ifcore.handlers import PutHandler

logger = logging.getLogger(__name__)

# Returned by a custom command to let the built-in handler take over
FALLBACK = "FALLBACK"


class CommandContext:
    """What custom commands get besides the session and the parsed command."""

    def __init__(self, resolver, responses, vocabulary):
        self.resolver = resolver
        self.responses = responses
        self.vocabulary = vocabulary
        self._put = PutHandler(resolver, responses)

    def resolve(self, name, verb, session):
        return self.resolver.resolve(name, verb, session)

    def current_location(self, session):
        return session.current_location

    def player_has_item(self, session, name):
        return session.has_item(name)

    def put_item_in_container(self, session, item_name, container_name, preposition='in'):
        """Runs a put as if the player had typed it and returns the reply."""
        return self._put.put(session, item_name, preposition.lower(), container_name)

    def is_item_in_container(self, session, item_name, container_name=None):
        """
        True if a carried or nearby item named item_name is in something;
        with container_name, only if that something matches the name.
        """
        nearby = session.inventory + session.current_location.items
        for item in nearby:
            if not item.match_name(item_name):
                continue
            holder = container_for(item, session)
            if holder is not None and (container_name is None or holder.match_name(container_name)):
                return True
        return False


class CustomCommandAdapter:
    """
    Wraps a story-supplied function as a handler.

    The function is called as func(session, command, context). Returning
    None or FALLBACK hands the command to the fallback handler, which is
    whatever was registered for the verb before this one.
    """

    def __init__(self, verb, func, context, aliases=(), fallback=None):
        self.verb = verb.lower()
        self.func = func
        self.context = context
        self.fallback = fallback
        self.verbs = (self.verb,) + tuple(a.lower() for a in aliases)

    def handle(self, session, command):
        result = self.func(session, command, self.context)
        if result is None or result == FALLBACK:
            if self.fallback is None:
                return None
            logger.debug("Custom '%s' deferred to %s", self.verb, type(self.fallback).__name__)
            return self.fallback.handle(session, command)
        return result

    def __repr__(self):
        return f"CustomCommandAdapter({self.verb!r})"


class CommandDispatcher:
    """
    Case-insensitive verb -> handler routing.

    A handler is any object with handle(session, command) returning text or
    None and, optionally, a `verbs` tuple naming what it claims. The
    dispatcher only routes: resolving objects is the handler's job.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._handlers = {}

    def register_handler(self, handler, verbs=None):
        verbs = verbs if verbs is not None else getattr(handler, 'verbs', ())
        if isinstance(verbs, str):
            verbs = (verbs,)
        if not verbs:
            raise ValueError(f"{handler!r} claims no verbs")
        with self._lock:
            handlers = dict(self._handlers)
            for verb in verbs:
                handlers[verb.strip().lower()] = handler
            self._handlers = handlers
        logger.debug("Registered %r for %s", handler, ", ".join(verbs))
        return handler

    def register_custom(self, verb, func, context, aliases=()):
        fallback = self._handlers.get(verb.strip().lower())
        adapter = CustomCommandAdapter(verb, func, context, aliases, fallback)
        return self.register_handler(adapter)

    def handle(self, session, command):
        handler = self._handlers.get(command.verb.lower())
        if handler is None:
            return None
        return handler.handle(session, command)

    def unregister_verb(self, verb):
        with self._lock:
            handlers = dict(self._handlers)
            removed = handlers.pop(verb.strip().lower(), None)
            self._handlers = handlers
        return removed is not None

    def unregister_handler(self, handler):
        with self._lock:
            handlers = {v: h for v, h in self._handlers.items() if h is not handler}
            removed = len(self._handlers) - len(handlers)
            self._handlers = handlers
        return removed

    def clear(self):
        with self._lock:
            self._handlers = {}

    def has_handler(self, verb):
        return verb.strip().lower() in self._handlers

    def handler_for(self, verb):
        return self._handlers.get(verb.strip().lower())

    @property
    def verb_count(self):
        return len(self._handlers)

    @property
    def handler_count(self):
        return len({id(h) for h in self._handlers.values()})

import logging
from dataclasses import dataclass
from enum import Enum

from ifcore.lockable import Lockable
from ifcore.parser import is_pronoun
from ifcore.vocabulary import Vocabulary

logger = logging.getLogger(__name__)

LOCK_VERBS = ('unlock', 'open')


class Resolution(str, Enum):
    FOUND = "FOUND"
    AMBIGUOUS = "AMBIGUOUS"
    NOT_FOUND = "NOT_FOUND"


@dataclass(frozen=True)
class ResolutionResult:
    outcome: Resolution
    entity: object = None
    candidates: tuple = ()

    @property
    def success(self):
        return self.outcome == Resolution.FOUND

    @property
    def ambiguous(self):
        return self.outcome == Resolution.AMBIGUOUS


NOT_FOUND = ResolutionResult(Resolution.NOT_FOUND)


class ObjectResolver:
    """
    Maps object names to world entities for one session.

    Named lookups search inventory, then location items, then scenery, and
    stop at the first tier with a match. Matching is exact name or alias,
    never partial. Two matches in one tier is ambiguous rather than a guess.
    Every successful lookup becomes the session's "it".
    """

    def __init__(self, vocabulary=None):
        self.vocabulary = vocabulary or Vocabulary()

    def resolve(self, name, verb, session):
        """Entry point for handlers: empty names and pronouns fall back to inference."""
        if not name or is_pronoun(name):
            return self.resolve_implied_object(verb, session, pronoun=bool(name))
        return self.resolve_object(name, session)

    # ==========================================================
    # 1. NAMED OBJECTS
    # ==========================================================
    def resolve_object(self, name, session):
        if not name or is_pronoun(name):
            # Left to resolve_implied_object by the caller
            return NOT_FOUND

        name = self.vocabulary.strip_articles(name)
        location = session.current_location
        for tier in (session.inventory, location.items, location.scenery):
            result = self._pick([e for e in tier if e.match_name(name)])
            if result.outcome != Resolution.NOT_FOUND:
                return self._remember(result, session)
        return NOT_FOUND

    # ==========================================================
    # 2. IMPLIED OBJECTS
    # ==========================================================
    def resolve_implied_object(self, verb, session, pronoun=False):
        verb = self.vocabulary.normalize_verb(verb)

        if pronoun:
            last = session.last_referenced
            if last is not None and self._still_valid(last, verb, session):
                return self._remember(ResolutionResult(Resolution.FOUND, last), session)

        result = self._pick(self.candidates_for(verb, session))
        if result.ambiguous:
            logger.debug("Implied object for %r is ambiguous: %s", verb, result.candidates)
        return self._remember(result, session)

    def candidates_for(self, verb, session):
        location = session.current_location
        if verb == 'take':
            return list(location.items)
        if verb in ('drop', 'put', 'eat'):
            return list(session.inventory)
        if verb == 'unlock':
            return [e for e in self._lockables_in_scope(session)
                    if e.requires_unlocking and not e.unlocked]
        if verb == 'open':
            return [e for e in self._lockables_in_scope(session) if not e.open]
        return list(session.inventory) + list(location.items)

    # ==========================================================
    # 3. LOCKABLE DISCOVERY
    # ==========================================================
    def resolve_lockable(self, name, verb, session):
        """
        Finds the lockable a player means by name for unlock/open.

        Priority: held item, location item, location scenery, the location
        itself. Only lockables whose target names match are considered.
        """
        location = session.current_location
        for tier in (session.inventory, location.items, location.scenery, [location]):
            matches = [e for e in tier if isinstance(e, Lockable) and self._targets(e, name, verb)]
            result = self._pick(matches)
            if result.outcome != Resolution.NOT_FOUND:
                return self._remember(result, session)
        return NOT_FOUND

    def _targets(self, lockable, name, verb):
        if verb == 'open':
            return lockable.matches_open_target(name)
        return lockable.matches_unlock_target(name)

    def _lockables_in_scope(self, session):
        location = session.current_location
        entities = list(session.inventory) + list(location.items) + list(location.scenery) + [location]
        return [e for e in entities if isinstance(e, Lockable)]

    # ==========================================================
    # HELPERS
    # ==========================================================
    def _still_valid(self, entity, verb, session):
        if not session.is_in_scope(entity):
            return False
        if verb in LOCK_VERBS:
            return isinstance(entity, Lockable)
        return True

    def _pick(self, matches):
        if len(matches) == 1:
            return ResolutionResult(Resolution.FOUND, matches[0], tuple(matches))
        if len(matches) > 1:
            return ResolutionResult(Resolution.AMBIGUOUS, None, tuple(matches))
        return NOT_FOUND

    def _remember(self, result, session):
        if result.success:
            session.last_referenced = result.entity
        return result

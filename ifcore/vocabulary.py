import logging
import threading

logger = logging.getLogger(__name__)

# ==========================================
# DEFAULT TABLES
# ==========================================
DEFAULT_VERBS = {
    # Movement
    'go': 'go', 'move': 'go', 'walk': 'go', 'run': 'go',
    # Bare directions act as verbs
    'north': 'north', 'n': 'north',
    'south': 'south', 's': 'south',
    'east': 'east', 'e': 'east',
    'west': 'west', 'w': 'west',
    'up': 'up', 'u': 'up',
    'down': 'down', 'd': 'down',
    'northeast': 'northeast', 'ne': 'northeast',
    'northwest': 'northwest', 'nw': 'northwest',
    'southeast': 'southeast', 'se': 'southeast',
    'southwest': 'southwest', 'sw': 'southwest',
    'in': 'in', 'out': 'out',
    # Looking and reading
    'look': 'look', 'l': 'look', 'x': 'look', 'examine': 'look',
    'read': 'read',
    # Items
    'take': 'take', 'get': 'take', 'grab': 'take', 'pick': 'take', 'pickup': 'take',
    'drop': 'drop', 'set': 'drop', 'leave': 'drop',
    'put': 'put',
    'inventory': 'inventory', 'inv': 'inventory', 'i': 'inventory',
    # Locks
    'open': 'open', 'unlock': 'unlock', 'turn': 'turn',
    # System
    'help': 'help', 'h': 'help',
    'info': 'info', 'information': 'info',
    'quit': 'quit', 'exit': 'quit', 'q': 'quit',
    'status': 'status', 'stats': 'status',
    'restart': 'restart', 'reset': 'restart',
    'hint': 'hint', 'hints': 'hint',
}

DEFAULT_DIRECTIONS = {
    'north': 'north', 'n': 'north',
    'south': 'south', 's': 'south',
    'east': 'east', 'e': 'east',
    'west': 'west', 'w': 'west',
    'northeast': 'northeast', 'ne': 'northeast',
    'northwest': 'northwest', 'nw': 'northwest',
    'southeast': 'southeast', 'se': 'southeast',
    'southwest': 'southwest', 'sw': 'southwest',
    'up': 'up', 'u': 'up',
    'down': 'down', 'd': 'down',
    'in': 'in', 'out': 'out',
}

ARTICLES = frozenset(['a', 'an', 'the', 'some', 'any'])

PREPOSITIONS = frozenset([
    'in', 'on', 'under', 'behind', 'above', 'below', 'inside', 'outside',
    'around', 'from', 'into', 'onto', 'toward', 'towards', 'with', 'using',
    'by', 'for', 'against', 'about', 'at', 'up', 'down', 'to',
])

# Words that are both a direction and a preposition
AMBIGUOUS_WORDS = frozenset(['up', 'down', 'to', 'in', 'out'])

# Verbs missing from this table accept any preposition
VALID_PREPOSITIONS = {
    'put': frozenset(['in', 'into', 'on', 'onto']),
    'take': frozenset(['from']),
    'look': frozenset(['at', 'around']),
    'open': frozenset(['with', 'using']),
    'unlock': frozenset(['with', 'using']),
}

MOVEMENT_VERB = 'go'


class Vocabulary:
    """
    Maps player words to canonical verbs and directions.

    One instance is shared by every session of an engine. Lookups read the
    current table without locking; registration builds a new table under a
    lock and swaps it in, so a parse never sees a half-written table.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._verbs = dict(DEFAULT_VERBS)
        self._directions = dict(DEFAULT_DIRECTIONS)

    # ==========================================================
    # 1. NORMALIZATION
    # ==========================================================
    def normalize_verb(self, word):
        word = word.strip().lower()
        return self._verbs.get(word, word)

    def normalize_direction(self, word):
        word = word.strip().lower()
        return self._directions.get(word, word)

    def strip_articles(self, phrase):
        return " ".join(w for w in phrase.split() if not self.is_article(w))

    # ==========================================================
    # 2. CLASSIFICATION
    # ==========================================================
    def is_article(self, word):
        return word.lower() in ARTICLES

    def is_preposition(self, word):
        return word.lower() in PREPOSITIONS

    def is_direction(self, word):
        return word.strip().lower() in self._directions

    def is_movement_verb(self, verb):
        verb = self.normalize_verb(verb)
        return verb == MOVEMENT_VERB or self.is_direction(verb)

    def should_treat_as_direction(self, word, preceding_verb=None):
        """
        Decides whether a word that could be either a direction or a
        preposition is a direction in this command.

        "up" and "down" are directions unless proven otherwise; "to", "in"
        and "out" are prepositions unless they follow the movement verb.
        """
        lower = word.lower()
        if lower not in AMBIGUOUS_WORDS:
            return self.is_direction(lower)

        if preceding_verb and self.normalize_verb(preceding_verb) == MOVEMENT_VERB:
            return True

        return lower in ('up', 'down')

    def is_valid_verb_preposition(self, verb, preposition):
        allowed = VALID_PREPOSITIONS.get(self.normalize_verb(verb))
        if allowed is None:
            return True
        return preposition.lower() in allowed

    # ==========================================================
    # 3. RUNTIME REGISTRATION
    # ==========================================================
    def add_verb_synonym(self, synonym, canonical):
        synonym = synonym.strip().lower()
        canonical = canonical.strip().lower()
        with self._lock:
            verbs = dict(self._verbs)
            # Point at the final canonical form so normalizing twice is a no-op
            canonical = verbs.get(canonical, canonical)
            if synonym != canonical:
                for word, target in verbs.items():
                    if target == synonym:
                        verbs[word] = canonical
            verbs[synonym] = canonical
            verbs.setdefault(canonical, canonical)
            self._verbs = verbs
        logger.debug("Registered verb synonym %r -> %r", synonym, canonical)

    def add_direction_mapping(self, word, canonical):
        word = word.strip().lower()
        canonical = canonical.strip().lower()
        with self._lock:
            directions = dict(self._directions)
            canonical = directions.get(canonical, canonical)
            if word != canonical:
                for key, target in directions.items():
                    if target == word:
                        directions[key] = canonical
            directions[word] = canonical
            directions.setdefault(canonical, canonical)
            self._directions = directions
        logger.debug("Registered direction %r -> %r", word, canonical)

    def synonyms_for(self, canonical):
        canonical = canonical.lower()
        return sorted(w for w, target in self._verbs.items() if target == canonical)

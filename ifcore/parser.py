import re
from dataclasses import dataclass
from enum import Enum

from ifcore.vocabulary import Vocabulary

# Split out of object phrases as standalone objects
PRONOUNS = frozenset(['it', 'them', 'they', 'its', 'their'])
# Also accepted as a reference to the implied object
REFERENCE_WORDS = PRONOUNS | frozenset(['that', 'this'])
CONJUNCTIONS = frozenset(['and', '&'])
SEQUENCE_WORDS = frozenset(['then', ';'])


class CommandType(str, Enum):
    SINGLE = "SINGLE"
    CONJUNCTION = "CONJUNCTION"
    SEQUENCE = "SEQUENCE"
    MOVEMENT = "MOVEMENT"


def is_pronoun(word):
    return bool(word) and word.strip().lower() in REFERENCE_WORDS


@dataclass(frozen=True)
class ParsedCommand:
    verb: str
    direct_objects: tuple = ()
    indirect_objects: tuple = ()
    preposition: str = None
    command_type: CommandType = CommandType.SINGLE
    original_input: str = ""
    sequence_commands: tuple = ()

    @property
    def is_compound(self):
        return self.command_type in (CommandType.CONJUNCTION, CommandType.SEQUENCE)

    @property
    def has_preposition(self):
        return bool(self.preposition)

    @property
    def first_direct_object(self):
        return self.direct_objects[0] if self.direct_objects else ""

    @property
    def first_indirect_object(self):
        return self.indirect_objects[0] if self.indirect_objects else ""

    @property
    def object_phrase(self):
        """Direct object, or the indirect one for forms like 'look at key'."""
        return self.first_direct_object or self.first_indirect_object


class CommandParser:
    """
    Turns a raw input line into a ParsedCommand.

    Parsing never fails: empty input gives a command with an empty verb and
    unknown words pass through unchanged for the engine to reject.
    """

    def __init__(self, vocabulary=None):
        self.vocabulary = vocabulary or Vocabulary()

    def parse(self, raw_input):
        tokens = self._tokenize(raw_input)
        if not tokens:
            return ParsedCommand(verb="", original_input=raw_input)

        if any(t in SEQUENCE_WORDS for t in tokens):
            return self._parse_sequence(tokens, raw_input)
        if any(t in CONJUNCTIONS for t in tokens):
            return self._parse_single(tokens, raw_input, CommandType.CONJUNCTION)
        return self._parse_single(tokens, raw_input, CommandType.SINGLE)

    # ==========================================================
    # TOKENIZING
    # ==========================================================
    def _tokenize(self, raw_input):
        text = " ".join(raw_input.strip().lower().split())
        text = re.sub(r"([;&])", r" \1 ", text)
        return text.split()

    # ==========================================================
    # SHAPES
    # ==========================================================
    def _parse_single(self, tokens, raw_input, command_type):
        vocab = self.vocabulary
        verb = vocab.normalize_verb(tokens[0])

        prep_index = None
        for i in range(1, len(tokens)):
            if vocab.should_treat_as_direction(tokens[i], verb):
                continue
            if vocab.is_preposition(tokens[i]):
                prep_index = i
                break

        end = prep_index if prep_index is not None else len(tokens)
        direct = self._extract_objects(tokens[1:end], verb)
        indirect = ()
        preposition = None
        if prep_index is not None:
            preposition = tokens[prep_index]
            indirect = self._extract_objects(tokens[prep_index + 1:], verb)

        if command_type == CommandType.SINGLE and self._is_movement(verb, direct, preposition):
            command_type = CommandType.MOVEMENT

        return ParsedCommand(
            verb=verb,
            direct_objects=direct,
            indirect_objects=indirect,
            preposition=preposition,
            command_type=command_type,
            original_input=raw_input,
        )

    def _parse_sequence(self, tokens, raw_input):
        # First command is parsed now; the rest are kept as raw text
        segments = [[]]
        for token in tokens:
            if token in SEQUENCE_WORDS:
                segments.append([])
            else:
                segments[-1].append(token)

        first = segments[0]
        remaining = tuple(" ".join(seg) for seg in segments[1:] if seg)
        if not first:
            return ParsedCommand(verb="", original_input=raw_input)

        inner_type = CommandType.SINGLE
        if any(t in CONJUNCTIONS for t in first):
            inner_type = CommandType.CONJUNCTION
        parsed = self._parse_single(first, raw_input, inner_type)

        return ParsedCommand(
            verb=parsed.verb,
            direct_objects=parsed.direct_objects,
            indirect_objects=parsed.indirect_objects,
            preposition=parsed.preposition,
            command_type=CommandType.SEQUENCE,
            original_input=raw_input,
            sequence_commands=remaining,
        )

    def _extract_objects(self, tokens, verb):
        """
        Groups tokens into object names.

        Articles are dropped, "and"/"&" split the list, pronouns stand alone,
        and consecutive words join into one multi-word name.
        """
        vocab = self.vocabulary
        movement = vocab.is_movement_verb(verb)
        objects = []
        current = []

        def flush():
            if current:
                name = " ".join(current)
                objects.append(vocab.normalize_direction(name) if movement else name)
                del current[:]

        for token in tokens:
            if vocab.is_article(token):
                continue
            if token in PRONOUNS:
                flush()
                objects.append(token)
                continue
            if token in CONJUNCTIONS:
                flush()
                continue
            current.append(token)
        flush()

        return tuple(objects)

    def _is_movement(self, verb, direct, preposition):
        vocab = self.vocabulary
        if preposition:
            return False
        if vocab.is_direction(verb) and not direct:
            return True
        return verb == 'go' and len(direct) == 1 and vocab.is_direction(direct[0])

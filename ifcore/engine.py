import json
import logging
import threading
from dataclasses import dataclass, field

from ifcore.dispatcher import CommandContext, CommandDispatcher
from ifcore.handlers import SceneryHandler, builtin_handlers, describe_location
from ifcore.parser import CommandParser, CommandType
from ifcore.resolver import ObjectResolver
from ifcore.responses import DefaultResponses
from ifcore.session import GameState, Session
from ifcore.vocabulary import Vocabulary

logger = logging.getLogger(__name__)

YES_ANSWERS = ('yes', 'y', 'yeah', 'yep', 'sure')
NO_ANSWERS = ('no', 'n', 'nah', 'nope', 'no thanks')


def is_yes(answer):
    return answer.strip().lower() in YES_ANSWERS


def is_no(answer):
    return answer.strip().lower() in NO_ANSWERS


@dataclass(frozen=True)
class IntroResult:
    """What a custom intro handler returns: stay on the question or begin."""
    transition_to_playing: bool
    message: str


@dataclass
class Response:
    message: str
    game_state: GameState
    valid_directions: list = field(default_factory=list)
    boldable_text: str = None
    # Set after a confirmed quit; hosts may end the process
    exit: bool = False
    type: str = "game_response"

    def to_dict(self):
        return {
            "type": self.type,
            "message": self.message,
            "boldableText": self.boldable_text,
            "gameState": self.game_state.value,
            "validDirections": list(self.valid_directions),
            "exit": self.exit,
        }

    def to_json(self, indent=None):
        return json.dumps(self.to_dict(), indent=indent)


class GameEngine:
    """
    The session state machine.

    One engine serves any number of sessions. Each session plays on its own
    copy of the game map, so process_command for different ids can run on
    different threads; calls for the same id are serialized.
    """

    def __init__(self, game_map, responses=None, vocabulary=None):
        self.game_map = game_map
        self.responses = responses or DefaultResponses()
        self.vocabulary = vocabulary or Vocabulary()
        self.parser = CommandParser(self.vocabulary)
        self.resolver = ObjectResolver(self.vocabulary)
        self.dispatcher = CommandDispatcher()
        self.context = CommandContext(self.resolver, self.responses, self.vocabulary)

        self._sessions = {}
        self._sessions_lock = threading.Lock()
        self._scenery_handler = None

        for handler in builtin_handlers(self.resolver, self.responses):
            self.dispatcher.register_handler(handler)
            if isinstance(handler, SceneryHandler):
                self._scenery_handler = handler

        for verb, func, aliases in game_map.commands:
            self.register_command(verb, func, aliases)

        self._state_handlers = {
            GameState.WAITING_FOR_START_ANSWER: self._handle_start_answer,
            GameState.PLAYING: self._handle_playing,
            GameState.WAITING_FOR_RESTART_CONFIRMATION: self._handle_restart_confirmation,
            GameState.WAITING_FOR_QUIT_CONFIRMATION: self._handle_quit_confirmation,
            GameState.WAITING_FOR_UNLOCK_CODE: self._handle_unlock_code,
            GameState.WAITING_FOR_OPEN_CODE: self._handle_open_code,
        }

    def register_command(self, verb, func, aliases=()):
        """Custom verb; return None or FALLBACK from func to use the built-in one."""
        return self.dispatcher.register_custom(verb, func, self.context, aliases)

    # ==========================================================
    # 1. SESSIONS
    # ==========================================================
    def get_session(self, session_id):
        with self._sessions_lock:
            return self._sessions.get(session_id)

    def _get_or_create(self, session_id):
        with self._sessions_lock:
            session = self._sessions.get(session_id)
            if session is None:
                world = self.game_map.fresh_copy()
                state = GameState.PLAYING if world.skip_intro else GameState.WAITING_FOR_START_ANSWER
                session = Session(session_id, world, self.responses, state)
                self._sessions[session_id] = session
                logger.info("Created session %s in %s", session_id, state.value)
            return session

    def cleanup_session(self, session_id):
        with self._sessions_lock:
            removed = self._sessions.pop(session_id, None)
        if removed is not None:
            logger.info("Cleaned up session %s", session_id)
        return removed is not None

    @property
    def session_count(self):
        with self._sessions_lock:
            return len(self._sessions)

    def start_session(self, session_id):
        """Greets a session: the intro question, or the first room when the intro is skipped."""
        session = self._get_or_create(session_id)
        with session.lock:
            session.boldable_text = None
            if session.game_state == GameState.WAITING_FOR_START_ANSWER:
                message = self.responses.have_you_played_before()
                if session.world.intro_message:
                    message = session.world.intro_message + "\n\n" + message
            else:
                message = self._look_at_location(session, long=True)
            return self._response(session, message)

    # ==========================================================
    # 2. THE TURN
    # ==========================================================
    def process_command(self, session_id, raw_input):
        session = self._get_or_create(session_id)
        with session.lock:
            session.boldable_text = None
            session.exit_requested = False
            logger.debug("Session %s [%s] < %r", session_id, session.game_state.value, raw_input)
            handler = self._state_handlers[session.game_state]
            message = handler(session, raw_input)
            return self._response(session, message)

    def _response(self, session, message):
        directions = []
        if session.game_state == GameState.PLAYING:
            directions = session.current_location.available_directions()
        return Response(
            message=message,
            game_state=session.game_state,
            valid_directions=directions,
            boldable_text=session.boldable_text,
            exit=session.exit_requested,
        )

    # ==========================================================
    # 3. STATES
    # ==========================================================
    def _handle_start_answer(self, session, raw_input):
        answer = raw_input.strip()
        world = session.world

        if world.intro_handler is not None:
            result = world.intro_handler(session, answer, world)
            if result.transition_to_playing:
                session.set_state(GameState.PLAYING)
            return result.message

        if is_yes(answer):
            session.experienced = True
            intro = world.intro_responses[0] if world.intro_responses else self.responses.experienced_player_intro()
        elif is_no(answer):
            session.experienced = False
            intro = world.intro_responses[1] if world.intro_responses else self.responses.new_player_intro()
        else:
            return self.responses.please_answer()

        session.set_state(GameState.PLAYING)
        return intro + "\n\n" + self._look_at_location(session, long=True)

    def _handle_playing(self, session, raw_input):
        command = self.parser.parse(raw_input)
        if not command.verb:
            return self.responses.not_understood(raw_input.strip())

        parts = [self._execute(session, command)]
        if command.command_type == CommandType.SEQUENCE:
            for text in command.sequence_commands:
                # A confirmation or code prompt ends the sequence
                if session.game_state != GameState.PLAYING:
                    break
                parts.append(self._execute(session, self.parser.parse(text)))
        return "\n\n".join(parts)

    def _handle_restart_confirmation(self, session, raw_input):
        if is_yes(raw_input):
            self._reset(session)
            return self.responses.restart(self._look_at_location(session, long=True))
        if is_no(raw_input):
            session.set_state(GameState.PLAYING)
            return self.responses.restart_cancelled()
        return self.responses.please_answer()

    def _handle_quit_confirmation(self, session, raw_input):
        if is_yes(raw_input):
            self._reset(session)
            session.set_state(GameState.WAITING_FOR_START_ANSWER)
            session.exit_requested = True
            return self.responses.have_you_played_before()
        if is_no(raw_input):
            session.set_state(GameState.PLAYING)
            return self.responses.quit_cancelled()
        return self.responses.please_answer()

    def _handle_unlock_code(self, session, raw_input):
        return self._handle_code(session, raw_input, opening=False)

    def _handle_open_code(self, session, raw_input):
        return self._handle_code(session, raw_input, opening=True)

    def _handle_code(self, session, raw_input, opening):
        # The raw line is the answer; it is never parsed as a command
        answer = raw_input.strip()
        lockable = session.take_pending()
        session.set_state(GameState.PLAYING)
        if lockable is None:
            logger.warning("Session %s had no pending lockable for a code", session.session_id)
            return self.responses.not_understood(answer)

        if opening:
            return lockable.try_open(session, answer).message
        return lockable.try_unlock(session, answer).message

    # ==========================================================
    # 4. COMMANDS IN PLAY
    # ==========================================================
    def _execute(self, session, command):
        verb = command.verb
        if not verb:
            return self.responses.not_understood(command.original_input.strip())

        if command.has_preposition and not self.vocabulary.is_valid_verb_preposition(verb, command.preposition):
            return self.responses.verb_preposition_invalid()

        if verb == 'look' and not command.direct_objects and not command.indirect_objects:
            session.boldable_text = session.current_location.describe(True)

        text = self.dispatcher.handle(session, command)
        if text is not None:
            return text

        if self.vocabulary.is_movement_verb(verb):
            return self._move(session, command)
        if verb == 'restart':
            session.set_state(GameState.WAITING_FOR_RESTART_CONFIRMATION)
            return self.responses.restart_confirmation()
        if verb == 'quit':
            session.set_state(GameState.WAITING_FOR_QUIT_CONFIRMATION)
            return self.responses.quit_confirmation()

        if self._scenery_handler is not None:
            text = self._scenery_handler.custom_response(session, command)
            if text:
                return text
        return self.responses.not_understood(verb)

    def _move(self, session, command):
        verb = command.verb
        if verb == 'go':
            if not command.direct_objects:
                return self.responses.go_where()
            direction = self.vocabulary.normalize_direction(command.first_direct_object)
            if not self.vocabulary.is_direction(direction):
                return self.responses.direction_not_understood(command.first_direct_object)
        else:
            direction = verb

        destination = session.current_location.get_connection(direction)
        if destination is None:
            return self.responses.cant_go_that_way()

        first_visit = not destination.visited
        destination.visited = True
        session.current_location = destination
        logger.debug("Session %s moved %s to %s", session.session_id, direction, destination.name)
        return self._look_at_location(session, long=first_visit)

    def _look_at_location(self, session, long=True):
        session.boldable_text = session.current_location.describe(long)
        return describe_location(session, long)

    def _reset(self, session):
        session.reset(self.game_map.fresh_copy())

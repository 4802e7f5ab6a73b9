from ifcore.dispatcher import FALLBACK, CommandContext, CommandDispatcher
from ifcore.engine import GameEngine, IntroResult, Response
from ifcore.hints import HintConfiguration, HintConfigurationBuilder
from ifcore.lockable import (
    Lockable, OpenableItem, OpenableItemContainer, OpenableLocation, OpenableSceneryObject,
)
from ifcore.parser import CommandParser, CommandType, ParsedCommand
from ifcore.resolver import ObjectResolver, Resolution
from ifcore.responses import DefaultResponses
from ifcore.session import GameState, Session
from ifcore.story import build_story, load_story_file
from ifcore.vocabulary import Vocabulary
from ifcore.world import (
    ConfigurationError, GameMap, GameMapBuilder, InteractionType, Item, ItemContainer,
    Location, SceneryObject,
)

__version__ = "0.3.0"

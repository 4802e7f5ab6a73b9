import logging
import os

import yaml

from ifcore.hints import HintConfigurationBuilder
from ifcore.lockable import (
    OpenableItem, OpenableItemContainer, OpenableLocation, OpenableSceneryObject,
)
from ifcore.world import (
    ConfigurationError, GameMapBuilder, Item, ItemContainer, Location, SceneryObject,
)

logger = logging.getLogger(__name__)

STORY_EXTENSIONS = (".yaml", ".yml")


# ==========================================
# FILES
# ==========================================

def list_stories(stories_dir):
    """Story files in a directory, sorted by name."""
    if not os.path.isdir(stories_dir):
        return []
    return sorted(f for f in os.listdir(stories_dir) if f.endswith(STORY_EXTENSIONS))


def load_story_file(path, commands=None):
    """
    Reads a YAML story and builds its GameMap.

    yaml.YAMLError is left to the caller; a file that parses but does not
    describe a playable world raises ConfigurationError.
    """
    with open(path, "r") as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} does not contain a story")
    logger.info("Loaded story file %s", path)
    return build_story(data, commands)


# ==========================================
# DATA -> GAME MAP
# ==========================================

def build_story(data, commands=None):
    """
    Builds a GameMap from story data.

    commands maps a verb to a custom handler func(session, command, context),
    for stories written in Python. Each exit a scene lists is one-way, so a
    passage both ways is listed on both scenes.
    """
    scenes = data.get('scenes') or []
    if not scenes:
        raise ConfigurationError("A story needs at least one scene")

    builder = GameMapBuilder().title(data.get('title', 'Untitled'))

    for scene in scenes:
        location = _make_location(scene)
        builder.add_location(location)
        for scenery_data in scene.get('scenery', []):
            scenery = _make_scenery(scenery_data)
            location.add_scenery(scenery)
            for child in scenery_data.get('contents', []):
                _load_item(builder, child, location.name, scenery.name)
        for item_data in scene.get('contents', []):
            _load_item(builder, item_data, location.name)
        for item_data in scene.get('hidden', []):
            _load_item(builder, item_data, location.name, hidden=True)

    for scene in scenes:
        for direction, info in (scene.get('exits') or {}).items():
            target = info if isinstance(info, str) else info.get('target')
            if not target:
                raise ConfigurationError(f"Exit '{direction}' from '{scene['id']}' has no target")
            builder.connect_one_way(scene['id'], direction, target)

    builder.set_starting_location(data.get('start_room', scenes[0].get('id')))
    builder.skip_intro(bool(data.get('skip_intro', False)))

    intro = data.get('intro') or {}
    if intro.get('message'):
        builder.with_intro_message(intro['message'])
    if intro.get('experienced') and intro.get('new'):
        builder.with_intro_responses(intro['experienced'], intro['new'])

    if data.get('hints'):
        builder.with_hints(_make_hints(data['hints']))

    for verb, func in (commands or {}).items():
        builder.with_command(verb, func)

    return builder.build()


def location_phase(session, world):
    """Hint phases keyed by the name of the player's location."""
    return session.current_location.name


def _make_hints(hints):
    builder = HintConfigurationBuilder().determiner(location_phase)
    for phase_key, levels in hints.items():
        levels = list(levels or [])
        if len(levels) != 3:
            raise ConfigurationError(f"Hint phase '{phase_key}' needs exactly three hints")
        builder.add_phase(phase_key, *levels)
    return builder.build()


def _make_location(scene):
    if 'id' not in scene:
        raise ConfigurationError("Every scene needs an id")
    name = scene['id']
    description = scene.get('description', scene.get('name', name))
    lock = scene.get('lock')
    if lock is None:
        return Location(name, description, scene.get('short'), scene.get('aliases', ()))

    targets = lock.get('target', ())
    if isinstance(targets, str):
        targets = [targets]
    return OpenableLocation(
        name, description, scene.get('short'), scene.get('aliases', ()),
        target_names=targets,
        requires_unlocking=lock.get('locked', True),
        key_name=lock.get('key'),
        code=lock.get('code'),
        is_open=lock.get('open', False),
        messages=lock.get('messages'),
        opens_exits=lock.get('opens'),
        open_description=lock.get('open_description'),
        unlocked_description=lock.get('unlocked_description'),
    )


def _make_scenery(data):
    if 'name' not in data:
        raise ConfigurationError("Every piece of scenery needs a name")
    common = dict(
        aliases=data.get('aliases', ()),
        responses=data.get('responses'),
        custom_responses=data.get('custom'),
        container=bool(data.get('container', False) or data.get('contents')),
        allowed_items=data.get('accepts', ()),
        capacity=data.get('capacity'),
        reveals=data.get('reveals', ()),
    )
    lock = data.get('lock')
    if lock is None:
        return SceneryObject(data['name'], prepositions=data.get('prepositions', ('on', 'onto')), **common)
    return OpenableSceneryObject(
        data['name'], prepositions=data.get('prepositions', ('in', 'into')),
        requires_unlocking=lock.get('locked', True),
        key_name=lock.get('key'),
        code=lock.get('code'),
        is_open=lock.get('open', False),
        messages=lock.get('messages'),
        **common
    )


def _load_item(builder, data, location_name, container_name=None, hidden=False):
    if 'name' not in data:
        raise ConfigurationError(f"An item in '{location_name}' has no name")

    kind = data.get('kind', 'item')
    descriptions = (
        data.get('inventory'),
        data.get('here'),
        data.get('description'),
        data.get('aliases', ()),
    )
    if kind in ('item', 'edible'):
        item = Item(data['name'], *descriptions,
                    edible=kind == 'edible' or data.get('edible', False),
                    text=data.get('text'))
    elif kind == 'container':
        item = ItemContainer(data['name'], *descriptions,
                             capacity=data.get('capacity'),
                             allowed_items=data.get('accepts', ()),
                             prepositions=data.get('prepositions', ('in', 'into')))
    elif kind == 'openable':
        item = OpenableItem(data['name'], *descriptions,
                            requires_unlocking=data.get('locked', True),
                            key_name=data.get('key'), code=data.get('code'),
                            is_open=data.get('open', False), messages=data.get('messages'))
    elif kind == 'lockbox':
        item = OpenableItemContainer(data['name'], *descriptions,
                                     requires_unlocking=data.get('locked', True),
                                     key_name=data.get('key'), code=data.get('code'),
                                     is_open=data.get('open', False), messages=data.get('messages'),
                                     capacity=data.get('capacity'),
                                     allowed_items=data.get('accepts', ()),
                                     prepositions=data.get('prepositions', ('in', 'into')))
    else:
        raise ConfigurationError(f"Unknown kind '{kind}' for '{data['name']}'")

    if hidden:
        builder.hide_item(item, location_name, data.get('revealed'))
    elif container_name:
        builder.place_in(item, container_name, location_name)
    else:
        builder.place_item(item, location_name)

    for child in data.get('contents', []):
        _load_item(builder, child, location_name, item.name)
    return item

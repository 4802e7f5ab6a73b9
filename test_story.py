import os
import tempfile
import unittest

import yaml

from ifcore.containers import container_for
from ifcore.engine import GameEngine
from ifcore.lockable import OpenableItemContainer, OpenableLocation
from ifcore.session import GameState
from ifcore.story import build_story, list_stories, load_story_file
from ifcore.world import ConfigurationError

GARDEN_STORY = """
title: The Walled Garden
start_room: Gate
skip_intro: true

scenes:
  - id: Gate
    description: A rusted gate in a high wall. The garden lies north.
    short: The gate.
    lock:
      target: [gate]
      code: "3 1"
      opens: {north: Garden}
      open_description: The gate hangs open. The garden lies north.
    scenery:
      - name: plaque
        responses:
          look: "A plaque: THREE THEN ONE."
          read: "THREE THEN ONE."
    exits:
      west: Lane

  - id: Lane
    description: A muddy lane.
    contents:
      - name: basket
        kind: container
        contents:
          - name: pear
            kind: edible
    exits:
      east: {target: Gate}

  - id: Garden
    description: Overgrown beds and a sundial.
    scenery:
      - name: sundial
        aliases: [dial]
        responses:
          look: It has stopped at noon.
        contents:
          - name: ring
            description: A thin silver ring.
    exits:
      south: Gate

hints:
  Gate:
    - Read everything.
    - The plaque is a code.
    - UNLOCK GATE WITH 3 1.
"""


def story_data():
    return yaml.safe_load(GARDEN_STORY)


class TestBuildStory(unittest.TestCase):
    def setUp(self):
        self.game_map = build_story(story_data())

    def test_header(self):
        self.assertEqual(self.game_map.title, "The Walled Garden")
        self.assertEqual(self.game_map.starting_location_name, "Gate")
        self.assertTrue(self.game_map.skip_intro)

    def test_exits_are_one_way(self):
        gate = self.game_map.get_location("Gate")
        lane = self.game_map.get_location("Lane")
        self.assertIsInstance(gate, OpenableLocation)
        self.assertEqual(gate.available_directions(), ["west"])
        self.assertIs(lane.get_connection("east"), gate)
        self.assertIsNone(lane.get_connection("west"))

    def test_scenery_contents_start_on_the_scenery(self):
        garden = self.game_map.get_location("Garden")
        ring = garden.find_items("ring")[0]
        self.assertIs(garden.containment.container_for(ring), garden.container_named("sundial"))

    def test_nested_item_contents_are_seeded(self):
        pairs = [(item.name, holder.name) for item, holder in self.game_map.initial_contents]
        self.assertEqual(pairs, [("pear", "basket")])
        self.assertTrue(self.game_map.find_item("pear").edible)

    def test_playing_the_story(self):
        engine = GameEngine(self.game_map)
        self.assertEqual(engine.process_command("p1", "hint").message, "Read everything.")
        self.assertEqual(engine.process_command("p1", "read plaque").message, "THREE THEN ONE.")
        self.assertEqual(engine.process_command("p1", "open gate").message, "Enter the code.")
        self.assertEqual(engine.process_command("p1", "3 1").message,
                         "You unlock the gate. You open the gate.")

        response = engine.process_command("p1", "n")
        self.assertTrue(response.message.startswith("Overgrown beds and a sundial."))
        self.assertIn("There is a ring here. - on sundial", response.message)
        self.assertEqual(engine.process_command("p1", "take ring from dial").message, "Taken.")
        self.assertEqual(engine.process_command("p1", "look at ring").message, "A thin silver ring.")

        session = engine.get_session("p1")
        engine.process_command("p1", "s")
        engine.process_command("p1", "w")
        self.assertEqual(engine.process_command("p1", "take basket").message, "Taken.")
        pear = session.find_inventory_item("pear")
        self.assertIsNotNone(pear)
        self.assertEqual(container_for(pear, session).name, "basket")
        self.assertEqual(engine.process_command("p1", "eat pear").message, "Eaten.")
        self.assertEqual(session.game_state, GameState.PLAYING)

    def test_python_commands(self):
        game_map = build_story(story_data(), commands={'whistle': lambda s, c, ctx: "A dog barks."})
        engine = GameEngine(game_map)
        self.assertEqual(engine.process_command("p1", "whistle").message, "A dog barks.")


class TestStoryErrors(unittest.TestCase):
    def assertBroken(self, data):
        with self.assertRaises(ConfigurationError):
            build_story(data)

    def test_no_scenes(self):
        self.assertBroken({'title': 'Empty'})
        self.assertBroken({'scenes': []})

    def test_scene_without_id(self):
        self.assertBroken({'scenes': [{'description': 'Nowhere.'}]})

    def test_unknown_exit(self):
        data = story_data()
        data['scenes'][1]['exits']['north'] = 'Orchard'
        self.assertBroken(data)

    def test_exit_without_target(self):
        data = story_data()
        data['scenes'][1]['exits']['east'] = {'locked': True}
        self.assertBroken(data)

    def test_unknown_item_kind(self):
        data = story_data()
        data['scenes'][1]['contents'][0]['kind'] = 'vehicle'
        self.assertBroken(data)

    def test_unknown_scenery_interaction(self):
        data = story_data()
        data['scenes'][2]['scenery'][0]['responses']['dance'] = 'No.'
        self.assertBroken(data)

    def test_hint_phase_needs_three_hints(self):
        data = story_data()
        data['hints']['Gate'] = ['Only one.']
        self.assertBroken(data)

    def test_unknown_start_room(self):
        data = story_data()
        data['start_room'] = 'Attic'
        self.assertBroken(data)


class TestStoryFiles(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def write(self, name, text):
        path = os.path.join(self.tmp.name, name)
        with open(path, "w") as f:
            f.write(text)
        return path

    def test_load_story_file(self):
        path = self.write("garden.yaml", GARDEN_STORY)
        game_map = load_story_file(path)
        self.assertEqual(game_map.find_item("basket").name, "basket")
        self.assertEqual(sorted(game_map.locations), ["Garden", "Gate", "Lane"])

    def test_lockbox_kind(self):
        path = self.write("box.yml", "scenes:\n  - id: Room\n    contents:\n"
                                     "      - {name: box, kind: lockbox, code: '9'}\n")
        self.assertIsInstance(load_story_file(path).find_item("box"), OpenableItemContainer)

    def test_not_a_story(self):
        path = self.write("list.yaml", "- just\n- a list\n")
        with self.assertRaises(ConfigurationError):
            load_story_file(path)

    def test_malformed_yaml(self):
        path = self.write("broken.yaml", "scenes: [unclosed\n")
        with self.assertRaises(yaml.YAMLError):
            load_story_file(path)

    def test_list_stories(self):
        self.write("b.yaml", GARDEN_STORY)
        self.write("a.yml", GARDEN_STORY)
        self.write("notes.txt", "not a story")
        self.assertEqual(list_stories(self.tmp.name), ["a.yml", "b.yaml"])
        self.assertEqual(list_stories(os.path.join(self.tmp.name, "missing")), [])


if __name__ == '__main__':
    unittest.main()


import unittest
import tempfile
import os

import yaml

from ifcore import GameEngine, GameState, load_story_file

STORY_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), '../yaml/lighthouse.yaml'))


class TestLighthouse(unittest.TestCase):
    def setUp(self):
        self.game_map = load_story_file(STORY_PATH)
        self.engine = GameEngine(self.game_map)
        print(f"\nTesting Story: {self.game_map.title}")

    def play(self, cmd):
        print(f"> {cmd}")
        response = self.engine.process_command("keeper", cmd)
        print(response.message)
        return response

    def test_story(self):
        greeting = self.engine.start_session("keeper")
        self.assertTrue(greeting.message.startswith("The ferry leaves you on the rocks"))

        response = self.play('yes')
        self.assertTrue(response.message.startswith("Good. You know how this goes.\n\nWet black rocks"))
        self.assertIn("An iron key lies between two rocks.", response.message)

        expected = [
            ('swim', "Swim where?"),
            ('swim in sea', "Too cold. Far too cold."),
            ('hint', "Have a look at what the sea has left."),
            ('take key', "Taken."),
            ('n', None),
            ('hint', "The keeper kept notes."),
            ('read log', "Last entry: cabinet reset to 7 4 1. Trapdoor key left on the shore."),
            ('take oil', "The cabinet is closed."),
            ('open cabinet', "The cabinet has a three-wheel combination lock. Enter the code."),
            ('7 4 1', "You unlock the cabinet. You open the cabinet."),
            ('take oil from cabinet', "Taken."),
            ('open hatch', "You unlock the trapdoor. You open the trapdoor."),
            ('d', "A cold cellar under the keeper's room. Steps lead up."),
            ('u', None),
            ('up', "The lamp room. The great lens is dry and dark."),
            ('look at lens', "It wants oil."),
            ('climb lens', "The lens is not for climbing."),
        ]
        for cmd, message in expected:
            response = self.play(cmd)
            if message is not None:
                self.assertEqual(response.message, message)

        session = self.engine.get_session("keeper")
        self.assertEqual(session.current_location.name, 'Lamp Room')
        self.assertEqual([i.name for i in session.inventory], ['iron key', 'oil can'])

    def test_wrong_combination(self):
        self.engine.start_session("keeper")
        for cmd in ('no', 'n'):
            self.play(cmd)
        response = self.play('unlock cupboard')
        self.assertEqual(response.game_state, GameState.WAITING_FOR_UNLOCK_CODE)
        response = self.play('1 4 7')
        self.assertEqual(response.message, "That's not the right code.")
        self.assertEqual(response.valid_directions, ['south', 'up'])

    def test_desk_hides_the_matches(self):
        self.engine.start_session("keeper")
        for cmd in ('no', 'n'):
            self.play(cmd)
        self.assertEqual(self.play('take matches').message, "You don't see a 'matches' here.")
        self.play('look at desk')
        self.assertIn("A box of matches you pulled from behind the inkwell lies here.", self.play('look').message)
        self.assertEqual(self.play('take box').message, "Taken.")

    def test_malformed_story(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'broken.yaml')
            with open(path, 'w') as f:
                f.write("scenes:\n  - id: Shore\n    exits: {north: [\n")
            with self.assertRaises(yaml.YAMLError):
                load_story_file(path)


if __name__ == '__main__':
    unittest.main()

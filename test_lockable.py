import itertools
import unittest

from ifcore.lockable import (
    OpenableItem, OpenableItemContainer, OpenableLocation, OpenableSceneryObject, normalize_code,
)
from ifcore.responses import DefaultResponses
from ifcore.session import GameState, Session
from ifcore.world import GameMapBuilder, Item, Location


def make_session(*locations):
    builder = GameMapBuilder()
    for location in locations:
        builder.add_location(location)
    game_map = builder.set_starting_location(locations[0].name).build()
    return Session("test", game_map, DefaultResponses(), GameState.PLAYING)


class TestCodeLock(unittest.TestCase):
    def setUp(self):
        self.box = OpenableItemContainer("lockbox", code="1 2 3 4")
        self.session = make_session(Location("Room", "A room."))

    def test_normalize_code(self):
        self.assertEqual(normalize_code("1, 2 3,4"), ["1", "2", "3", "4"])
        self.assertEqual(normalize_code(" 1234 "), ["1234"])
        self.assertEqual(normalize_code(""), [])

    def test_blank_answer_asks_for_the_code(self):
        result = self.box.try_unlock(self.session)
        self.assertFalse(result.success)
        self.assertEqual(result.message, "Enter the code.")
        self.assertTrue(self.box.needs_code_prompt(result, None))

    def test_wrong_code(self):
        result = self.box.try_unlock(self.session, "9, 9, 9, 9")
        self.assertFalse(result.success)
        self.assertEqual(result.message, "That's not the right code.")
        self.assertFalse(self.box.unlocked)
        self.assertFalse(self.box.needs_code_prompt(result, "9, 9, 9, 9"))

    def test_code_token_sequence_must_match(self):
        self.assertFalse(self.box.try_unlock(self.session, "1234").success)
        self.assertTrue(self.box.try_unlock(self.session, "1,2,3,4").success)

    def test_already_unlocked(self):
        self.box.try_unlock(self.session, "1 2 3 4")
        result = self.box.try_unlock(self.session, "1 2 3 4")
        self.assertFalse(result.success)
        self.assertEqual(result.message, "The lockbox is already unlocked.")

    def test_open_with_code_unlocks_first(self):
        result = self.box.try_open(self.session, "1 2 3 4")
        self.assertTrue(result.success)
        self.assertEqual(result.message, "You unlock the lockbox. You open the lockbox.")
        self.assertTrue(self.box.open)

    def test_open_without_code_prompts(self):
        result = self.box.try_open(self.session)
        self.assertEqual(result.message, "Enter the code.")
        self.assertTrue(self.box.needs_code_prompt(result, "", opening=True))
        self.assertFalse(self.box.open)

    def test_story_wording(self):
        box = OpenableItem("safe", code="7", messages={'code_wrong': "The dial clicks uselessly."})
        self.assertEqual(box.try_unlock(self.session, "8").message, "The dial clicks uselessly.")


class TestKeyLock(unittest.TestCase):
    def setUp(self):
        self.chest = OpenableSceneryObject("chest", responses={'look': 'An iron chest.'},
                                           key_name="iron key")
        room = Location("Room", "A room.")
        room.add_scenery(self.chest)
        self.session = make_session(room)
        self.key = Item("iron key", aliases=["key"])

    def test_no_key(self):
        result = self.chest.try_unlock(self.session)
        self.assertFalse(result.success)
        self.assertEqual(result.message, "You don't have the key.")

    def test_open_without_key_changes_nothing(self):
        result = self.chest.try_open(self.session)
        self.assertEqual(result.message, "The chest is locked.")
        self.assertFalse(self.chest.unlocked)
        self.assertFalse(self.chest.open)

    def test_key_in_inventory(self):
        self.session.add_item(self.key)
        result = self.chest.try_unlock(self.session)
        self.assertTrue(result.success)
        self.assertEqual(result.message, "You unlock the chest.")

    def test_naming_the_wrong_item_counts_as_no_key(self):
        self.session.add_item(self.key)
        self.session.add_item(Item("spoon"))
        self.assertEqual(self.chest.try_unlock(self.session, "spoon").message, "You don't have the key.")
        self.assertTrue(self.chest.try_unlock(self.session, "key").success)

    def test_open_auto_unlocks(self):
        self.session.add_item(self.key)
        result = self.chest.try_open(self.session)
        self.assertEqual(result.message, "You unlock the chest. You open the chest.")
        self.assertTrue(self.chest.unlocked and self.chest.open)
        self.assertTrue(self.chest.is_reachable())

    def test_key_locks_never_prompt(self):
        result = self.chest.try_unlock(self.session)
        self.assertFalse(self.chest.needs_code_prompt(result, None))


class TestNoLock(unittest.TestCase):
    def setUp(self):
        self.jar = OpenableItem("jar", requires_unlocking=False)
        self.session = make_session(Location("Room", "A room."))

    def test_starts_unlocked(self):
        self.assertTrue(self.jar.unlocked)
        self.assertFalse(self.jar.open)

    def test_unlock_is_not_needed(self):
        self.assertEqual(self.jar.try_unlock(self.session).message, "The jar doesn't have a lock.")

    def test_open_then_already_open(self):
        self.assertEqual(self.jar.try_open(self.session).message, "You open the jar.")
        self.assertEqual(self.jar.try_open(self.session).message, "The jar is already open.")


class TestOpenInvariant(unittest.TestCase):
    def test_open_never_holds_while_locked(self):
        session = make_session(Location("Room", "A room."))
        session.add_item(Item("key"))
        calls = [
            lambda l: l.try_unlock(session),
            lambda l: l.try_unlock(session, "4 2"),
            lambda l: l.try_unlock(session, "0"),
            lambda l: l.try_open(session),
            lambda l: l.try_open(session, "4 2"),
            lambda l: l.set_unlocked(False),
        ]
        for order in itertools.permutations(calls, 4):
            for lockable in (OpenableItem("box", code="4 2"), OpenableItem("tin", key_name="key")):
                for call in order:
                    call(lockable)
                    self.assertFalse(lockable.open and not lockable.unlocked)

    def test_set_open_refuses_when_locked(self):
        box = OpenableItem("box", code="1")
        with self.assertRaises(ValueError):
            box.set_open(True)

    def test_relocking_closes(self):
        box = OpenableItem("box", requires_unlocking=False, is_open=True)
        self.assertTrue(box.open)
        box.set_unlocked(False)
        self.assertFalse(box.open)


class TestLockedLocation(unittest.TestCase):
    def setUp(self):
        self.porch = OpenableLocation(
            "Porch", "The door is shut.", target_names=["front door", "door"],
            key_name="brass key", opens_exits={'north': 'Hall'},
            open_description="The door stands open.",
        )
        self.hall = Location("Hall", "A hall.")
        self.session = make_session(self.porch, self.hall)

    def test_messages_name_the_door(self):
        self.assertEqual(self.porch.try_open(self.session).message, "The front door is locked.")

    def test_opening_reveals_the_exit(self):
        self.assertIsNone(self.porch.get_connection('north'))
        self.session.add_item(Item("brass key"))
        result = self.porch.try_open(self.session)

        self.assertEqual(result.message, "You unlock the front door. You open the front door.")
        self.assertIs(self.porch.get_connection('n'), self.hall)
        self.assertEqual(self.porch.describe(), "The door stands open.")


if __name__ == '__main__':
    unittest.main()

import unittest

from ifcore.lockable import OpenableItemContainer, OpenableLocation, OpenableSceneryObject
from ifcore.resolver import ObjectResolver, Resolution
from ifcore.responses import DefaultResponses
from ifcore.session import GameState, Session
from ifcore.world import GameMapBuilder, Item, Location, SceneryObject


def make_session(location, *held):
    game_map = GameMapBuilder().add_location(location).set_starting_location(location.name).build()
    session = Session("test", game_map, DefaultResponses(), GameState.PLAYING)
    for item in held:
        session.add_item(item)
    return session


class TestResolveObject(unittest.TestCase):
    def setUp(self):
        self.resolver = ObjectResolver()
        self.room = Location("Room", "A bare room.")
        self.table = SceneryObject("table", responses={'look': 'A table.'})
        self.room.add_scenery(self.table)

    def test_inventory_beats_location(self):
        held = Item("key", detailed_description="The held key.")
        here = Item("key", detailed_description="The other key.")
        self.room.add_item(here)
        session = make_session(self.room, held)

        result = self.resolver.resolve_object("key", session)
        self.assertEqual(result.outcome, Resolution.FOUND)
        self.assertIs(result.entity, held)

    def test_alias_and_case(self):
        lamp = Item("brass lamp", aliases=["lamp", "lantern"])
        self.room.add_item(lamp)
        session = make_session(self.room)

        self.assertIs(self.resolver.resolve_object("LANTERN", session).entity, lamp)
        self.assertIs(self.resolver.resolve_object("the lamp", session).entity, lamp)

    def test_no_partial_matches(self):
        self.room.add_item(Item("brass lamp"))
        session = make_session(self.room)
        self.assertEqual(self.resolver.resolve_object("brass", session).outcome, Resolution.NOT_FOUND)

    def test_scenery_is_the_last_tier(self):
        session = make_session(self.room)
        self.assertIs(self.resolver.resolve_object("table", session).entity, self.table)

    def test_two_matches_in_a_tier_is_ambiguous(self):
        first = Item("gold coin", aliases=["coin"])
        second = Item("silver coin", aliases=["coin"])
        self.room.add_item(first)
        self.room.add_item(second)
        session = make_session(self.room)

        result = self.resolver.resolve_object("coin", session)
        self.assertEqual(result.outcome, Resolution.AMBIGUOUS)
        self.assertEqual(set(result.candidates), {first, second})
        self.assertIsNone(session.last_referenced)
        self.assertEqual(session.current_location.items, [first, second])

    def test_success_becomes_it(self):
        lamp = Item("lamp")
        self.room.add_item(lamp)
        session = make_session(self.room)

        self.resolver.resolve_object("lamp", session)
        self.assertIs(session.last_referenced, lamp)
        self.assertIs(self.resolver.resolve("it", "take", session).entity, lamp)

    def test_pronoun_is_never_a_name(self):
        session = make_session(self.room)
        self.assertEqual(self.resolver.resolve_object("it", session).outcome, Resolution.NOT_FOUND)


class TestResolveImpliedObject(unittest.TestCase):
    def setUp(self):
        self.resolver = ObjectResolver()
        self.room = Location("Room", "A bare room.")

    def test_single_candidate(self):
        apple = Item("apple")
        self.room.add_item(apple)
        session = make_session(self.room)
        self.assertIs(self.resolver.resolve_implied_object("take", session).entity, apple)

    def test_two_held_items_are_ambiguous_and_nothing_changes(self):
        first, second = Item("key"), Item("key")
        session = make_session(self.room, first, second)

        result = self.resolver.resolve_implied_object("drop", session)
        self.assertTrue(result.ambiguous)
        self.assertEqual(session.inventory, [first, second])
        self.assertIsNone(session.last_referenced)

    def test_nothing_available(self):
        session = make_session(self.room)
        self.assertEqual(self.resolver.resolve_implied_object("drop", session).outcome, Resolution.NOT_FOUND)

    def test_stale_it_falls_back_to_inference(self):
        apple, pear = Item("apple"), Item("pear")
        self.room.add_item(pear)
        session = make_session(self.room)
        # apple was never in scope here
        session.last_referenced = apple

        result = self.resolver.resolve("it", "take", session)
        self.assertIs(result.entity, pear)

    def test_it_must_be_lockable_for_unlock(self):
        apple = Item("apple")
        box = OpenableItemContainer("lockbox", code="1 2")
        self.room.add_item(apple)
        self.room.add_item(box)
        session = make_session(self.room)
        session.last_referenced = apple

        result = self.resolver.resolve("it", "unlock", session)
        self.assertIs(result.entity, box)

    def test_unlock_candidates_skip_unlocked_ones(self):
        locked = OpenableItemContainer("safe", code="9")
        loose = OpenableItemContainer("crate", requires_unlocking=False)
        self.room.add_item(locked)
        self.room.add_item(loose)
        session = make_session(self.room)

        self.assertIs(self.resolver.resolve_implied_object("unlock", session).entity, locked)
        self.assertTrue(self.resolver.resolve_implied_object("open", session).ambiguous)


class TestResolveLockable(unittest.TestCase):
    def setUp(self):
        self.resolver = ObjectResolver()

    def test_priority_held_item_location_item_scenery_location(self):
        room = OpenableLocation("Vault", "A vault.", target_names=["box"], key_name="key")
        here = OpenableItemContainer("box", code="1")
        scenery = OpenableSceneryObject("box", responses={'look': 'A built-in box.'}, code="2")
        held = OpenableItemContainer("box", code="3")
        room.add_item(here)
        room.add_scenery(scenery)
        session = make_session(room, held)

        self.assertIs(self.resolver.resolve_lockable("box", "unlock", session).entity, held)
        session.remove_item(held)
        self.assertIs(self.resolver.resolve_lockable("box", "unlock", session).entity, here)
        room.remove_item(here)
        self.assertIs(self.resolver.resolve_lockable("box", "unlock", session).entity, scenery)
        room.scenery.remove(scenery)
        self.assertIs(self.resolver.resolve_lockable("box", "open", session).entity, room)

    def test_location_matches_its_door_not_its_name(self):
        room = OpenableLocation("Porch", "A porch.", target_names=["front door", "door"], key_name="key")
        session = make_session(room)
        self.assertIs(self.resolver.resolve_lockable("front door", "open", session).entity, room)
        self.assertEqual(self.resolver.resolve_lockable("porch", "open", session).outcome, Resolution.NOT_FOUND)

    def test_same_tier_twice_is_ambiguous(self):
        room = Location("Room", "A room.")
        room.add_item(OpenableItemContainer("chest", aliases=["box"], code="1"))
        room.add_item(OpenableItemContainer("crate", aliases=["box"], code="2"))
        session = make_session(room)
        self.assertTrue(self.resolver.resolve_lockable("box", "unlock", session).ambiguous)

    def test_non_lockables_are_ignored(self):
        room = Location("Room", "A room.")
        room.add_item(Item("box"))
        session = make_session(room)
        self.assertEqual(self.resolver.resolve_lockable("box", "unlock", session).outcome, Resolution.NOT_FOUND)


if __name__ == '__main__':
    unittest.main()

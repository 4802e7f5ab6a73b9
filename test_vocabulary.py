import unittest

from ifcore.vocabulary import DEFAULT_DIRECTIONS, DEFAULT_VERBS, Vocabulary


class TestNormalization(unittest.TestCase):
    def setUp(self):
        self.vocab = Vocabulary()

    def test_synonyms_map_to_canonical_verb(self):
        self.assertEqual(self.vocab.normalize_verb("get"), "take")
        self.assertEqual(self.vocab.normalize_verb("GRAB"), "take")
        self.assertEqual(self.vocab.normalize_verb("  x "), "look")
        self.assertEqual(self.vocab.normalize_verb("n"), "north")

    def test_unknown_words_pass_through(self):
        self.assertEqual(self.vocab.normalize_verb("Xyzzy"), "xyzzy")
        self.assertEqual(self.vocab.normalize_direction("sideways"), "sideways")

    def test_normalizing_twice_changes_nothing(self):
        words = list(DEFAULT_VERBS) + list(DEFAULT_DIRECTIONS) + ["dance", "Take", "NE"]
        for word in words:
            once = self.vocab.normalize_verb(word)
            self.assertEqual(self.vocab.normalize_verb(once), once, word)
            once = self.vocab.normalize_direction(word)
            self.assertEqual(self.vocab.normalize_direction(once), once, word)

    def test_every_synonym_round_trips(self):
        for canonical in set(DEFAULT_VERBS.values()):
            for synonym in self.vocab.synonyms_for(canonical):
                self.assertEqual(self.vocab.normalize_verb(synonym.upper()), canonical)

    def test_strip_articles(self):
        self.assertEqual(self.vocab.strip_articles("the brass key"), "brass key")
        self.assertEqual(self.vocab.strip_articles("An Apple"), "Apple")


class TestDirectionOrPreposition(unittest.TestCase):
    def setUp(self):
        self.vocab = Vocabulary()

    def test_up_and_down_default_to_directions(self):
        self.assertTrue(self.vocab.should_treat_as_direction("up"))
        self.assertTrue(self.vocab.should_treat_as_direction("down", "climb"))

    def test_in_out_to_default_to_prepositions(self):
        for word in ("in", "out", "to"):
            self.assertFalse(self.vocab.should_treat_as_direction(word, "put"), word)

    def test_movement_verb_makes_them_directions(self):
        self.assertTrue(self.vocab.should_treat_as_direction("in", "go"))
        self.assertTrue(self.vocab.should_treat_as_direction("to", "walk"))

    def test_plain_words(self):
        self.assertTrue(self.vocab.should_treat_as_direction("north"))
        self.assertFalse(self.vocab.should_treat_as_direction("table"))


class TestVerbPrepositions(unittest.TestCase):
    def setUp(self):
        self.vocab = Vocabulary()

    def test_listed_verbs_are_checked(self):
        self.assertTrue(self.vocab.is_valid_verb_preposition("put", "in"))
        self.assertTrue(self.vocab.is_valid_verb_preposition("put", "ONTO"))
        self.assertFalse(self.vocab.is_valid_verb_preposition("put", "with"))
        self.assertTrue(self.vocab.is_valid_verb_preposition("get", "from"))
        self.assertFalse(self.vocab.is_valid_verb_preposition("look", "with"))

    def test_unlisted_verbs_accept_anything(self):
        self.assertTrue(self.vocab.is_valid_verb_preposition("climb", "on"))
        self.assertTrue(self.vocab.is_valid_verb_preposition("knock", "against"))


class TestRegistration(unittest.TestCase):
    def setUp(self):
        self.vocab = Vocabulary()

    def test_new_synonym(self):
        self.vocab.add_verb_synonym("Yank", "take")
        self.assertEqual(self.vocab.normalize_verb("yank"), "take")
        self.assertIn("yank", self.vocab.synonyms_for("take"))

    def test_synonym_of_a_synonym_points_at_the_canonical_verb(self):
        self.vocab.add_verb_synonym("yank", "take")
        self.vocab.add_verb_synonym("tug", "yank")
        self.assertEqual(self.vocab.normalize_verb("tug"), "take")

    def test_later_registration_repoints_earlier_words(self):
        self.vocab.add_verb_synonym("tug", "pull")
        self.vocab.add_verb_synonym("pull", "take")
        self.assertEqual(self.vocab.normalize_verb("tug"), "take")
        self.assertEqual(self.vocab.normalize_verb(self.vocab.normalize_verb("tug")), "take")

    def test_direction_mapping(self):
        self.vocab.add_direction_mapping("fore", "north")
        self.assertEqual(self.vocab.normalize_direction("fore"), "north")
        self.assertTrue(self.vocab.is_direction("fore"))

    def test_instances_do_not_share_registrations(self):
        self.vocab.add_verb_synonym("yank", "take")
        self.assertEqual(Vocabulary().normalize_verb("yank"), "yank")


if __name__ == '__main__':
    unittest.main()

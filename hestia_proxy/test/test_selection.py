import unittest

from hestia_proxy.selection import ItemAction, parse_item_action, parse_menu_choice


class MenuChoiceSuite(unittest.TestCase):

    def test_valid_numbers(self):
        self.assertEqual(parse_menu_choice("1", 3), 1)
        self.assertEqual(parse_menu_choice(" 3 ", 3), 3)

    def test_invalid_input(self):
        for text in ("0", "4", "-1", "", None, "a", "2d", "1.5"):
            self.assertIsNone(parse_menu_choice(text, 3), text)


class ItemActionSuite(unittest.TestCase):

    def test_verbs(self):
        self.assertEqual(parse_item_action("3d", 5), ItemAction(3, "delete"))
        self.assertEqual(parse_item_action("1e", 5), ItemAction(1, "edit"))
        self.assertEqual(parse_item_action("2s", 5), ItemAction(2, "edit_ssl"))

    def test_case_and_whitespace_are_ignored(self):
        self.assertEqual(parse_item_action(" 4 D ", 5), ItemAction(4, "delete"))

    def test_invalid_input(self):
        for text in ("3", "d", "3x", "6d", "0e", "3dd", "", None, "d3"):
            self.assertIsNone(parse_item_action(text, 5), text)


if __name__ == "__main__":
    unittest.main()

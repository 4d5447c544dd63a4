"""
Parsers for the two kinds of numbered input the menus accept.

Plain menus take a 1-indexed number. The template list also takes an
index followed by a one-letter verb, e.g. ``3d`` to delete the third
template or ``2s`` to edit the HTTPS variant of the second one.
"""
import re
from collections import namedtuple

ACTIONS = {
    'e': 'edit',
    's': 'edit_ssl',
    'd': 'delete',
}

ItemAction = namedtuple('ItemAction', ['index', 'action'])

_NUMBER_RE = re.compile(r"^\s*([0-9]+)\s*$")
_ITEM_ACTION_RE = re.compile(r"^\s*([0-9]+)\s*([A-Za-z])\s*$")


def _in_range(index, count):
    return 1 <= index <= count


def parse_menu_choice(text, count):
    """Returns the 1-indexed choice, or None if `text` is not a valid one."""
    match = _NUMBER_RE.match(text or "")
    if not match:
        return None
    index = int(match.group(1))
    return index if _in_range(index, count) else None


def parse_item_action(text, count):
    """
    Returns an ItemAction for input like ``3e``, or None when the index
    is out of range or the verb is unknown.
    """
    match = _ITEM_ACTION_RE.match(text or "")
    if not match:
        return None
    index = int(match.group(1))
    action = ACTIONS.get(match.group(2).lower())
    if action is None or not _in_range(index, count):
        return None
    return ItemAction(index, action)

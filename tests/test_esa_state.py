#!/usr/bin/python3

# emoji-selector - An emoji selector applet for the desktop panel
#
# Copyright (c) 2024 The emoji-selector authors
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>

'''
This file implements test cases for the selector session state,
the keyboard shortcuts and the grid geometry in esa_state.py.
'''

import sys
import os
import logging
import unittest

# pylint: disable=wrong-import-position
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../engine'))
from esa_emoji import Emoji, EmojiCatalog, Group # pylint: disable=import-error
from esa_emoji import SkinTone, SkinToneMode # pylint: disable=import-error
from esa_config import Config, ClickMode # pylint: disable=import-error
from esa_state import SelectorState, GridGeometry # pylint: disable=import-error
from esa_state import KeyAction, action_for_key # pylint: disable=import-error
from esa_state import PopupController, PopupIntent # pylint: disable=import-error
from esa_scrollable import Point, Rectangle, Size # pylint: disable=import-error
sys.path.pop(0)
# pylint: enable=wrong-import-position

LOGGER = logging.getLogger('emoji-selector')

# pylint: disable=missing-class-docstring
# pylint: disable=missing-function-docstring

SMILEYS = Group.SMILEYS_AND_EMOTION
PEOPLE = Group.PEOPLE_AND_BODY
ANIMALS = Group.ANIMALS_AND_NATURE

GRINNING = Emoji('😀', 'grinning face', SMILEYS)
BEAMING = Emoji('😁', 'beaming face with smiling eyes', SMILEYS)
GRIN_CAT = Emoji('😸', 'grinning cat with smiling eyes', SMILEYS)
WAVE = Emoji('👋', 'waving hand', PEOPLE, skin_tone=SkinTone.DEFAULT)
WAVE_LIGHT = Emoji('👋🏻', 'waving hand: light skin tone', PEOPLE,
                   skin_tone=SkinTone.LIGHT)
WAVE_DARK = Emoji('👋🏿', 'waving hand: dark skin tone', PEOPLE,
                  skin_tone=SkinTone.DARK)
COUPLE_LIGHT_DARK = Emoji(
    '🧑🏻‍🤝‍🧑🏿', 'people holding hands: light skin tone, dark skin tone',
    PEOPLE, skin_tone=SkinTone.LIGHT_AND_DARK)
DOG = Emoji('🐶', 'dog face', ANIMALS)
CAT = Emoji('🐱', 'cat face', ANIMALS)

CATALOG = EmojiCatalog([GRINNING, BEAMING, GRIN_CAT, WAVE, WAVE_LIGHT,
                        WAVE_DARK, COUPLE_LIGHT_DARK, DOG, CAT])

class SelectorStateTestCase(unittest.TestCase):
    def setUp(self) -> None:
        pass

    def tearDown(self) -> None:
        pass

    def test_dummy(self) -> None:
        self.assertEqual(True, True)

    def test_default_filter(self) -> None:
        state = SelectorState(CATALOG, Config())
        self.assertEqual(
            [GRINNING, BEAMING, GRIN_CAT, WAVE, DOG, CAT], state.matches)
        self.assertEqual([], state.favorites)

    def test_skin_tone_filter(self) -> None:
        config = Config(skin_tone_mode=SkinToneMode.LIGHT | SkinToneMode.DARK)
        state = SelectorState(CATALOG, config)
        self.assertEqual([WAVE_LIGHT, WAVE_DARK, COUPLE_LIGHT_DARK],
                         state.matches)
        state.refilter(config.toggle_skin_tone(SkinToneMode.DARK))
        self.assertEqual([WAVE_LIGHT], state.matches)

    def test_search_in_group(self) -> None:
        state = SelectorState(CATALOG, Config(last_used=['😸']))
        self.assertTrue(state.select_group(SMILEYS))
        state.set_search('grin')
        self.assertEqual([GRINNING, GRIN_CAT], state.matches)
        self.assertEqual([GRIN_CAT], state.favorites)
        # the favorite is shown first and is what Return copies
        self.assertEqual(GRIN_CAT, state.relevant())

    def test_search_case_insensitive(self) -> None:
        state = SelectorState(CATALOG, Config())
        state.set_search('CAT')
        self.assertEqual([GRIN_CAT, CAT], state.matches)
        # regular expression characters match literally
        state.set_search('cat.')
        self.assertEqual([], state.matches)
        self.assertEqual(None, state.relevant())

    def test_empty_search_matches_everything(self) -> None:
        state = SelectorState(CATALOG, Config())
        state.set_search('dog')
        self.assertEqual([DOG], state.matches)
        state.set_search('')
        self.assertEqual(6, len(state.matches))

    def test_search_uses_localized_names(self) -> None:
        class Names:
            tts = ['Hund']
        catalog = EmojiCatalog([DOG, CAT], annotations={'🐶': Names()})
        state = SelectorState(catalog, Config())
        state.set_search('hund')
        self.assertEqual([DOG], state.matches)
        state.set_search('dog')
        self.assertEqual([], state.matches)

    def test_favorites_most_recent_first(self) -> None:
        state = SelectorState(CATALOG, Config())
        state.activate(DOG, ClickMode.COPY)
        state.activate(CAT, ClickMode.COPY)
        state.activate(DOG, ClickMode.COPY)
        self.assertEqual(['🐶', '🐱'], state.config.last_used)
        self.assertEqual([DOG, CAT], state.favorites)

    def test_favorites_limit(self) -> None:
        state = SelectorState(CATALOG, Config(last_used_limit=3))
        for emoji in (GRINNING, BEAMING, GRIN_CAT, DOG):
            state.activate(emoji, ClickMode.COPY)
        self.assertEqual(['🐶', '😸', '😁'], state.config.last_used)

    def test_favorites_follow_filter(self) -> None:
        state = SelectorState(CATALOG, Config(last_used=['🐶', '😀']))
        self.assertEqual([DOG, GRINNING], state.favorites)
        state.select_group(SMILEYS)
        self.assertEqual([GRINNING], state.favorites)

    def test_relevant(self) -> None:
        state = SelectorState(CATALOG, Config(last_used=['🐱']))
        self.assertEqual(CAT, state.relevant())
        state.hovered = DOG
        self.assertEqual(DOG, state.relevant())
        state.reset()
        self.assertEqual(CAT, state.relevant())
        state = SelectorState(CATALOG, Config())
        self.assertEqual(GRINNING, state.relevant())

    def test_activate_copy_close(self) -> None:
        state = SelectorState(CATALOG, Config())
        activation = state.activate(GRINNING, ClickMode.COPY | ClickMode.CLOSE)
        self.assertEqual('😀', activation.copy_text)
        self.assertTrue(activation.close)
        self.assertTrue(activation.config_changed)
        self.assertEqual(['😀'], activation.config.last_used)
        # copying the most recent emoji again changes nothing
        activation = state.activate(GRINNING, ClickMode.COPY)
        self.assertFalse(activation.close)
        self.assertFalse(activation.config_changed)

    def test_activate_private(self) -> None:
        state = SelectorState(CATALOG, Config())
        activation = state.activate(DOG, ClickMode.COPY | ClickMode.PRIVATE)
        self.assertEqual('🐶', activation.copy_text)
        self.assertFalse(activation.config_changed)
        self.assertEqual([], state.config.last_used)

    def test_activate_append(self) -> None:
        state = SelectorState(CATALOG, Config())
        activation = state.activate(DOG, ClickMode.APPEND)
        self.assertEqual(None, activation.copy_text)
        self.assertFalse(activation.close)
        self.assertEqual('🐶', state.search)

    def test_activate_append_and_copy(self) -> None:
        state = SelectorState(CATALOG, Config())
        activation = state.activate(CAT, ClickMode.APPEND | ClickMode.COPY)
        self.assertEqual('🐱', state.search)
        self.assertEqual('🐱', activation.copy_text)
        self.assertTrue(activation.config_changed)
        self.assertEqual(['🐱'], state.config.last_used)
        # the search for the grapheme finds nothing by name
        self.assertEqual([], state.matches)

    def test_groups(self) -> None:
        state = SelectorState(CATALOG, Config())
        self.assertTrue(state.toggle_group(ANIMALS))
        self.assertEqual([DOG, CAT], state.matches)
        self.assertTrue(state.toggle_group(ANIMALS))
        self.assertEqual(None, state.selected_group)
        self.assertTrue(state.select_digit(2))
        self.assertEqual(PEOPLE, state.selected_group)
        self.assertEqual([WAVE], state.matches)
        self.assertFalse(state.select_digit(2))
        self.assertTrue(state.cycle_group(-1))
        self.assertEqual(SMILEYS, state.selected_group)
        self.assertTrue(state.select_digit(0))
        self.assertEqual(None, state.selected_group)

    def test_group_change_clears_hover(self) -> None:
        state = SelectorState(CATALOG, Config())
        state.hovered = DOG
        state.select_group(SMILEYS)
        self.assertEqual(None, state.hovered)

class KeyActionTestCase(unittest.TestCase):
    def test_digits(self) -> None:
        self.assertEqual((KeyAction.SELECT_GROUP, 0), action_for_key('0'))
        self.assertEqual((KeyAction.SELECT_GROUP, 5), action_for_key('KP_5'))

    def test_navigation(self) -> None:
        self.assertEqual((KeyAction.FOCUS_SEARCH, 0), action_for_key('slash'))
        self.assertEqual((KeyAction.NEXT_GROUP, 0), action_for_key('Right'))
        self.assertEqual((KeyAction.PREVIOUS_GROUP, 0), action_for_key('Left'))
        self.assertEqual((KeyAction.SCROLL_HOME, 0), action_for_key('Home'))
        self.assertEqual((KeyAction.SCROLL_END, 0), action_for_key('End'))
        self.assertEqual((KeyAction.PAGE_DOWN, 0),
                         action_for_key('Page_Down'))
        self.assertEqual(None, action_for_key('a'))

    def test_search_focused(self) -> None:
        self.assertEqual(None, action_for_key('Left', search_focused=True))
        self.assertEqual(None, action_for_key('slash', search_focused=True))
        self.assertEqual((KeyAction.COPY_RELEVANT, 0),
                         action_for_key('Return', search_focused=True))
        self.assertEqual((KeyAction.PAGE_UP, 0),
                         action_for_key('Page_Up', search_focused=True))

class PopupControllerTestCase(unittest.TestCase):
    def test_toggle(self) -> None:
        controller = PopupController()
        (intent, first) = controller.toggle()
        self.assertEqual(PopupIntent.OPEN, intent)
        self.assertEqual((PopupIntent.CLOSE, first), controller.toggle())
        self.assertEqual(None, controller.popup)
        (intent, second) = controller.toggle()
        self.assertEqual(PopupIntent.OPEN, intent)
        self.assertNotEqual(first, second)

    def test_close(self) -> None:
        controller = PopupController()
        self.assertEqual(None, controller.close())
        (_intent, popup) = controller.toggle()
        self.assertEqual((PopupIntent.CLOSE, popup), controller.close())
        self.assertEqual(None, controller.close())

    def test_closed(self) -> None:
        controller = PopupController()
        (_intent, popup) = controller.toggle()
        controller.closed(popup + 1)
        self.assertEqual(popup, controller.popup)
        controller.closed(popup)
        self.assertEqual(None, controller.popup)

class GridGeometryTestCase(unittest.TestCase):
    def test_content_size(self) -> None:
        self.assertEqual(Size(350.0, 0.0), GridGeometry([]).content_size())
        self.assertEqual(Size(350.0, 0.0), GridGeometry([0, 0]).content_size())
        self.assertEqual(Size(350.0, 70.0),
                         GridGeometry([0, 11]).content_size())
        self.assertEqual(Size(350.0, 78.0),
                         GridGeometry([10, 2]).content_size())

    def test_hit(self) -> None:
        grid = GridGeometry([3, 25])
        self.assertEqual((0, 0), grid.hit(Point(0, 0)))
        self.assertEqual((0, 2), grid.hit(Point(70, 34)))
        # right of the last favorite
        self.assertEqual(None, grid.hit(Point(110, 10)))
        # the gap between the sections
        self.assertEqual(None, grid.hit(Point(10, 40)))
        self.assertEqual((1, 0), grid.hit(Point(0, 43)))
        self.assertEqual((1, 24), grid.hit(Point(140, 43 + 70)))
        self.assertEqual(None, grid.hit(Point(175, 43 + 70)))
        self.assertEqual(None, grid.hit(Point(350, 50)))
        self.assertEqual(None, grid.hit(Point(-1, 50)))
        self.assertEqual(None, grid.hit(Point(10, 500)))

    def test_cells_in(self) -> None:
        grid = GridGeometry([3, 25])
        cells = list(grid.cells_in(Rectangle(0, 0, 350, 50)))
        self.assertEqual([(0, 0), (0, 1), (0, 2), (1, 0), (1, 1)],
                         [(section, index)
                          for section, index, _bounds in cells][:5])
        self.assertEqual(Rectangle(35.0, 43.0, 35.0, 35.0),
                         grid.cell_bounds(1, 1))
        cells = list(grid.cells_in(Rectangle(0, 80, 350, 10)))
        self.assertEqual(list(range(10, 20)),
                         [index for _section, index, _bounds in cells])

if __name__ == '__main__':
    unittest.main()

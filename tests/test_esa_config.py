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
This file implements test cases for reading and writing the
configuration in esa_config.py.
'''

import sys
import os
import logging
import tempfile
import unittest

# pylint: disable=wrong-import-position
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../engine'))
import esa_config # pylint: disable=import-error
from esa_config import Config, ConfigStore, ClickMode # pylint: disable=import-error
from esa_emoji import SkinToneMode # pylint: disable=import-error
sys.path.pop(0)
# pylint: enable=wrong-import-position

LOGGER = logging.getLogger('emoji-selector')

# pylint: disable=missing-class-docstring
# pylint: disable=missing-function-docstring

class EsaConfigTestCase(unittest.TestCase):
    def setUp(self) -> None:
        # pylint: disable=consider-using-with
        self._tempdir = tempfile.TemporaryDirectory()
        # pylint: enable=consider-using-with
        self._path = os.path.join(self._tempdir.name, 'config')

    def tearDown(self) -> None:
        self._tempdir.cleanup()

    def _write(self, text: str) -> None:
        with open(self._path, mode='w', encoding='UTF-8') as config_file:
            config_file.write(text)

    def test_dummy(self) -> None:
        self.assertEqual(True, True)

    def test_defaults(self) -> None:
        config = Config()
        self.assertFalse(config.show_tooltip)
        self.assertEqual(20, config.last_used_limit)
        self.assertEqual([], config.last_used)
        self.assertEqual('Noto Color Emoji', config.font_family)
        self.assertTrue(config.show_preview)
        self.assertFalse(config.show_unicode)
        self.assertEqual(ClickMode.COPY | ClickMode.CLOSE, config.click_left)
        self.assertEqual(ClickMode.APPEND, config.click_middle)
        self.assertEqual(ClickMode.COPY | ClickMode.PRIVATE,
                         config.click_right)
        self.assertEqual(SkinToneMode.NO_SKIN | SkinToneMode.DEFAULT,
                         config.skin_tone_mode)

    def test_missing_file(self) -> None:
        self.assertEqual(Config(), ConfigStore(self._path).load())

    def test_round_trip(self) -> None:
        config = Config(
            show_tooltip=True,
            last_used_limit=5,
            last_used=['😀', '🐶'],
            font_family='Twemoji',
            show_unicode=True,
            click_middle=ClickMode.COPY | ClickMode.PRIVATE,
            skin_tone_mode=(SkinToneMode.LIGHT
                            | SkinToneMode.LIGHT_AND_DARK
                            | SkinToneMode.FILTER_EXACT))
        store = ConfigStore(self._path)
        self.assertTrue(store.save(config))
        self.assertEqual(config, store.load())

    def test_corrupt_file(self) -> None:
        self._write('{"show_tooltip": True,')
        with self.assertLogs('emoji-selector', level='ERROR'):
            self.assertEqual(Config(), ConfigStore(self._path).load())
        self._write('[1, 2, 3]')
        self.assertEqual(Config(), ConfigStore(self._path).load())

    def test_wrong_version(self) -> None:
        self._write(repr({'version': 0, 'show_tooltip': True}))
        with self.assertLogs('emoji-selector', level='WARNING'):
            self.assertEqual(Config(), ConfigStore(self._path).load())

    def test_invalid_values_ignored(self) -> None:
        self._write(repr({
            'version': esa_config.CONFIG_VERSION,
            'show_tooltip': 'yes',
            'last_used_limit': -1,
            'last_used': ['😀', 3],
            'font_family': '',
            'click_left': 99,
            'skin_tone_mode': SkinToneMode.FILTER_EXACT.value,
            'show_preview': False,
        }))
        config = ConfigStore(self._path).load()
        expected = Config(show_preview=False)
        self.assertEqual(expected, config)

    def test_last_used_truncated_to_limit(self) -> None:
        self._write(repr({
            'version': esa_config.CONFIG_VERSION,
            'last_used_limit': 2,
            'last_used': ['😀', '🐶', '🐱'],
        }))
        self.assertEqual(['😀', '🐶'], ConfigStore(self._path).load().last_used)

    def test_save_fails(self) -> None:
        store = ConfigStore(os.path.join(self._tempdir.name, 'no', 'config'))
        with self.assertLogs('emoji-selector', level='ERROR'):
            self.assertFalse(store.save(Config()))

    def test_update_last_used(self) -> None:
        self.assertEqual(['a'], esa_config.update_last_used([], 'a', 20))
        self.assertEqual(['a', 'b'],
                         esa_config.update_last_used(['a', 'b'], 'a', 20))
        self.assertEqual([], esa_config.update_last_used(['a'], 'b', 0))

    def test_quick_toggles(self) -> None:
        toggles = Config().quick_toggles()
        self.assertEqual(6, len(toggles))
        self.assertTrue(toggles[0].active)
        self.assertEqual(SkinToneMode.NO_SKIN | SkinToneMode.DEFAULT,
                         toggles[0].mode)
        self.assertFalse(any(toggle.active for toggle in toggles[1:]))
        config = Config().toggle_skin_tone(toggles[3].mode)
        self.assertTrue(config.quick_toggles()[3].active)
        config = config.toggle_skin_tone(toggles[0].mode)
        self.assertFalse(config.quick_toggles()[0].active)
        self.assertEqual(SkinToneMode.MEDIUM, config.skin_tone_mode)

    def test_click_mode(self) -> None:
        config = Config()
        self.assertEqual(config.click_left, config.click_mode(1))
        self.assertEqual(config.click_middle, config.click_mode(2))
        self.assertEqual(config.click_right, config.click_mode(3))

if __name__ == '__main__':
    unittest.main()

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
This file implements test cases for miscellaneous stuff in esa_util.py.
'''

import sys
import os
import gzip
import logging
import tempfile
import unittest
from unittest import mock

# pylint: disable=wrong-import-position
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../engine'))
import esa_util # pylint: disable=import-error
sys.path.pop(0)
# pylint: enable=wrong-import-position

LOGGER = logging.getLogger('emoji-selector')

# pylint: disable=missing-class-docstring
# pylint: disable=missing-function-docstring

class EsaUtilTestCase(unittest.TestCase):
    def setUp(self) -> None:
        pass

    def tearDown(self) -> None:
        pass

    def test_dummy(self) -> None:
        self.assertEqual(True, True)

    def test_color_string_to_rgba(self) -> None:
        self.assertEqual(esa_util.Rgba(0.0, 0.0, 1.0, 1.0),
                         esa_util.color_string_to_rgba('#0000FF'))
        self.assertEqual('rgba(255,200,61,1)',
                         esa_util.color_string_to_rgba('#ffc83d').to_css())
        for invalid in ('', 'ffffff', '#ff', '#gggggg', '#fffff'):
            with self.assertRaises(ValueError):
                esa_util.color_string_to_rgba(invalid)

    def test_codepoints(self) -> None:
        self.assertEqual('U+0041', esa_util.codepoints('A'))
        self.assertEqual('U+1F600', esa_util.codepoints('😀'))
        self.assertEqual('', esa_util.codepoints(''))

    def test_strip_presentation_selectors(self) -> None:
        self.assertEqual('❤', esa_util.strip_presentation_selectors('❤️'))
        self.assertEqual('👍🏽', esa_util.strip_presentation_selectors('👍🏽'))

    def test_get_languages(self) -> None:
        self.assertEqual(['de', 'fr_FR'],
                         esa_util.get_languages('de:fr_FR'))
        with mock.patch.dict(os.environ,
                             {'LANGUAGE': 'pt_BR:pt',
                              'LANG': 'de_DE.UTF-8'}):
            self.assertEqual(['pt_BR', 'pt'], esa_util.get_languages())
        with mock.patch.dict(os.environ, {'LANG': 'ja_JP.UTF-8@x'}):
            for name in ('LANGUAGE', 'LC_ALL', 'LC_MESSAGES'):
                os.environ.pop(name, None)
            self.assertEqual(['ja_JP'], esa_util.get_languages())
        with mock.patch.dict(os.environ, {'LANG': 'C.UTF-8'}):
            for name in ('LANGUAGE', 'LC_ALL', 'LC_MESSAGES'):
                os.environ.pop(name, None)
            self.assertEqual(['en_US'], esa_util.get_languages())

    def test_expand_languages(self) -> None:
        self.assertEqual(['de_AT', 'de', 'en_US', 'en_001', 'en'],
                         esa_util.expand_languages(['de_AT', 'en_US']))
        self.assertEqual(['en'], esa_util.expand_languages(['en']))

    def test_xdg_data_dirs(self) -> None:
        with mock.patch.dict(os.environ, {'XDG_DATA_DIRS': '/a::/b'}):
            self.assertEqual(['/a', '/b'], esa_util.xdg_data_dirs())
        with mock.patch.dict(os.environ, {'XDG_DATA_DIRS': ''}):
            self.assertEqual(['/usr/share', '/usr/local/share'],
                             esa_util.xdg_data_dirs())

    def test_xdg_save_data_path(self) -> None:
        with tempfile.TemporaryDirectory() as tempdir:
            with mock.patch.dict(os.environ, {'XDG_DATA_HOME': tempdir}):
                path = esa_util.xdg_save_data_path('emoji-selector')
            self.assertEqual(os.path.join(tempdir, 'emoji-selector'), path)
            self.assertTrue(os.path.isdir(path))

    def test_find_path_and_open_function(self) -> None:
        with tempfile.TemporaryDirectory() as tempdir:
            os.makedirs(os.path.join(tempdir, 'b', 'de'))
            path = os.path.join(tempdir, 'b', 'de', 'data.json.gz')
            with gzip.open(path, mode='wt', encoding='utf-8') as data_file:
                data_file.write('{}')
            dirnames = [os.path.join(tempdir, 'a'),
                        os.path.join(tempdir, 'b')]
            self.assertEqual(
                (path, gzip.open),
                esa_util.find_path_and_open_function(
                    dirnames, ['data.json'], subdir='de'))
            self.assertEqual(
                ('', None),
                esa_util.find_path_and_open_function(
                    dirnames, ['data.json'], subdir='fr'))

if __name__ == '__main__':
    unittest.main()

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
This file implements test cases for loading localized emoji names
in esa_annotations.py.
'''

from typing import Any
import sys
import os
import gzip
import json
import logging
import tempfile
import unittest

# pylint: disable=wrong-import-position
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../engine'))
import esa_annotations # pylint: disable=import-error
from esa_annotations import Annotation # pylint: disable=import-error
sys.path.pop(0)
# pylint: enable=wrong-import-position

LOGGER = logging.getLogger('emoji-selector')

# pylint: disable=missing-class-docstring
# pylint: disable=missing-function-docstring

CLDR_XML = '''<?xml version="1.0" encoding="UTF-8" ?>
<ldml>
	<identity>
		<language type="fr"/>
	</identity>
	<annotations>
		<annotation cp="😀">sourire | visage</annotation>
		<annotation cp="😀" type="tts">visage rieur</annotation>
		<annotation cp="❤️" type="tts">cœur &amp; rouge</annotation>
		<annotation cp="🐶">↑↑↑</annotation>
	</annotations>
</ldml>
'''

class EsaAnnotationsTestCase(unittest.TestCase):
    def setUp(self) -> None:
        # pylint: disable=consider-using-with
        self._tempdir = tempfile.TemporaryDirectory()
        # pylint: enable=consider-using-with
        self._json_dir = os.path.join(self._tempdir.name, 'i18n-json')
        self._cldr_dir = os.path.join(self._tempdir.name, 'cldr')
        os.makedirs(self._json_dir)
        os.makedirs(os.path.join(self._cldr_dir, 'annotations'))

    def tearDown(self) -> None:
        self._tempdir.cleanup()

    def _write_json(self, locale: str, data: Any,
                    compress: bool = False) -> None:
        dirname = os.path.join(self._json_dir, locale)
        os.makedirs(dirname, exist_ok=True)
        if compress:
            with gzip.open(os.path.join(dirname, 'annotations.json.gz'),
                           mode='wt', encoding='utf-8') as json_file:
                json.dump(data, json_file)
            return
        with open(os.path.join(dirname, 'annotations.json'),
                  mode='w', encoding='utf-8') as json_file:
            if isinstance(data, str):
                json_file.write(data)
            else:
                json.dump(data, json_file)

    def _load(self, languages: Any) -> Any:
        return esa_annotations.load_annotations(
            languages, dirnames=[self._json_dir],
            cldr_dirnames=[self._cldr_dir])

    def test_dummy(self) -> None:
        self.assertEqual(True, True)

    def test_negotiate_languages(self) -> None:
        self.assertEqual(
            ['de', 'en'],
            esa_annotations.negotiate_languages(['de_DE'], ['en', 'de']))
        self.assertEqual(
            ['en_001', 'en'],
            esa_annotations.negotiate_languages(['en_GB'],
                                                ['en', 'en_001', 'fr']))
        self.assertEqual(
            ['fr', 'de'],
            esa_annotations.negotiate_languages(['fr', 'de'], ['de', 'fr']))
        self.assertEqual(
            [], esa_annotations.negotiate_languages(['de'], []))

    def test_parse_annotation_json(self) -> None:
        self.assertEqual(
            {'☺': Annotation(default=['smile'], tts=['smiling face'])},
            esa_annotations.parse_annotation_json(
                {'☺️': {'default': ['smile'], 'tts': ['smiling face']}}))
        for data in ([], {'😀': []}, {'😀': {'tts': 'grin'}},
                     {'😀': {'tts': [1]}}):
            with self.assertRaises(ValueError):
                esa_annotations.parse_annotation_json(data)

    def test_preferred_locale_wins(self) -> None:
        self._write_json('en', {
            '😀': {'tts': ['grinning face']},
            '🐶': {'tts': ['dog face']},
        })
        self._write_json('de', {'😀': {'tts': ['grinsendes Gesicht']}})
        annotations = self._load(['de_DE'])
        self.assertEqual(['grinsendes Gesicht'], annotations['😀'].tts)
        self.assertEqual(['dog face'], annotations['🐶'].tts)

    def test_gzip(self) -> None:
        self._write_json('fr', {'🐶': {'tts': ['tête de chien']}},
                         compress=True)
        annotations = self._load(['fr'])
        self.assertEqual(['tête de chien'], annotations['🐶'].tts)

    def test_broken_locale_skipped(self) -> None:
        self._write_json('en', {'🐶': {'tts': ['dog face']}})
        self._write_json('de', '{"🐶": ')
        with self.assertLogs('emoji-selector', level='WARNING'):
            annotations = self._load(['de'])
        self.assertEqual(['dog face'], annotations['🐶'].tts)

    def test_cldr_fallback(self) -> None:
        with open(os.path.join(self._cldr_dir, 'annotations', 'fr.xml'),
                  mode='w', encoding='utf-8') as xml_file:
            xml_file.write(CLDR_XML)
        annotations = self._load(['fr_FR'])
        self.assertEqual(['visage rieur'], annotations['😀'].tts)
        self.assertEqual(['sourire', 'visage'], annotations['😀'].default)
        self.assertEqual(['cœur & rouge'], annotations['❤'].tts)
        self.assertNotIn('🐶', annotations)

    def test_cldr_english_lower_cased(self) -> None:
        path = os.path.join(self._tempdir.name, 'en.xml')
        with open(path, mode='w', encoding='utf-8') as xml_file:
            xml_file.write(
                '<annotation cp="😀" type="tts">Grinning Face</annotation>\n')
        annotations = esa_annotations.load_cldr_annotation_xml(path, 'en')
        self.assertEqual(['grinning face'], annotations['😀'].tts)

    def test_nothing_available(self) -> None:
        annotations = esa_annotations.load_annotations(
            ['de'],
            dirnames=[os.path.join(self._tempdir.name, 'missing')],
            cldr_dirnames=[])
        self.assertEqual({}, annotations)

    def test_available_locales(self) -> None:
        self._write_json('en', {})
        self._write_json('ja', {})
        self.assertEqual(['en', 'ja'],
                         esa_annotations.available_locales(self._json_dir))
        self.assertEqual([], esa_annotations.available_locales(
            os.path.join(self._tempdir.name, 'missing')))

if __name__ == '__main__':
    unittest.main()

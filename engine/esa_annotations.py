# vim:et sts=4 sw=4
#
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

'''Loads localized emoji names (annotations).

Two sources are supported:

- ``<datadir>/<APP_ID>/i18n-json/<locale>/annotations.json`` holding
  ``{emoji: {"default": [...], "tts": [...]}}``
- CLDR annotation files ``<cldrdir>/annotations/<locale>.xml`` and
  ``<cldrdir>/annotationsDerived/<locale>.xml``

Both may be gzipped. Broken files are logged and skipped.
'''

from typing import Any
from typing import List
from typing import Dict
from typing import Optional
from typing import Iterable
from typing import Callable
from dataclasses import dataclass, field
import os
import re
import html
import json
import logging

import esa_util

LOGGER = logging.getLogger('emoji-selector')

ANNOTATIONS_BASENAME = 'annotations.json'

CLDR_ANNOTATION_DIRNAMES = (
    '/usr/share/unicode/cldr/common/',
)

CLDR_SUBDIRS = ('annotations', 'annotationsDerived')

_CLDR_PATTERN = re.compile(
    r'.*<annotation cp="(?P<emojistring>[^"]+)"'
    +r'\s*(?P<tts>type="tts"){0,1}'
    +r'[^>]*>'
    +r'(?P<content>.+)'
    +r'</annotation>.*'
)

@dataclass
class Annotation:
    '''Localized names of one emoji

    default: keywords describing the emoji
    tts: text-to-speech names, the first one is the display name
    '''
    default: List[str] = field(default_factory=list)
    tts: List[str] = field(default_factory=list)

def annotation_dirs(app_id: str = esa_util.APP_ID) -> List[str]:
    '''Returns the directories which may contain annotation locales

    The user data directory comes first, followed by the
    directories in $XDG_DATA_DIRS.
    '''
    xdg_data_home = os.environ.get('XDG_DATA_HOME') or os.path.join(
        os.path.expanduser('~'), '.local', 'share')
    return [os.path.join(dirname, app_id, 'i18n-json')
            for dirname in [xdg_data_home] + esa_util.xdg_data_dirs()]

def available_locales(dirname: str) -> List[str]:
    '''Returns the locale subdirectories of an annotation directory'''
    try:
        return sorted(
            entry for entry in os.listdir(dirname)
            if os.path.isdir(os.path.join(dirname, entry)))
    except OSError as error:
        LOGGER.debug('Cannot list %s: %s: %s',
                     dirname, error.__class__.__name__, error)
        return []

def negotiate_languages(
        requested: Iterable[str],
        available: Iterable[str],
        default: str = 'en') -> List[str]:
    '''Returns the available locales in order of preference

    :param requested: The languages the user asked for, most
                      preferred first. Fallbacks are added.
    :param available: The locales data exists for
    :param default: Appended if available and not yet included

    Examples:

    >>> negotiate_languages(['de_AT'], ['fr', 'de', 'en'])
    ['de', 'en']

    >>> negotiate_languages(['xx'], ['fr'])
    []
    '''
    available = set(available)
    negotiated = [language
                  for language in esa_util.expand_languages(requested)
                  if language in available]
    if default not in negotiated and default in available:
        negotiated.append(default)
    return negotiated

def _merge(target: Dict[str, Annotation],
           source: Dict[str, Annotation]) -> None:
    for emoji, annotation in source.items():
        target[emoji] = annotation

def parse_annotation_json(data: Any) -> Dict[str, Annotation]:
    '''Converts decoded annotation JSON into Annotation objects

    Raises ValueError if the data does not have the expected shape.

    Examples:

    >>> parse_annotation_json({'😀': {'tts': ['grinning face']}})
    {'😀': Annotation(default=[], tts=['grinning face'])}
    '''
    if not isinstance(data, dict):
        raise ValueError('annotations must be a JSON object')
    annotations: Dict[str, Annotation] = {}
    for emoji, value in data.items():
        if not isinstance(value, dict):
            raise ValueError(f'annotation of {emoji!r} is not an object')
        default = value.get('default', [])
        tts = value.get('tts', [])
        if (not isinstance(default, list) or not isinstance(tts, list)
                or not all(isinstance(x, str) for x in default + tts)):
            raise ValueError(f'annotation of {emoji!r} is not a list '
                             f'of strings')
        annotations[esa_util.strip_presentation_selectors(emoji)] = (
            Annotation(default=default, tts=tts))
    return annotations

def load_annotation_json(
        path: str,
        open_function: Callable[..., Any] = open) -> Dict[str, Annotation]:
    '''Reads one annotations.json (or annotations.json.gz) file'''
    with open_function(path, mode='rt', encoding='utf-8') as json_file:
        return parse_annotation_json(json.load(json_file))

def load_cldr_annotation_xml(
        path: str,
        language: str,
        open_function: Callable[..., Any] = open) -> Dict[str, Annotation]:
    '''Reads a CLDR annotation .xml file

    Lines of type “tts” become text-to-speech names, the others
    are split at “|” into keywords. English names are lower cased.
    '''
    annotations: Dict[str, Annotation] = {}
    with open_function(path, mode='rt', encoding='utf-8') as cldr_file:
        for line in cldr_file.readlines():
            match = _CLDR_PATTERN.match(line)
            if not match:
                continue
            emoji = esa_util.strip_presentation_selectors(
                match.group('emojistring'))
            content = html.unescape(match.group('content'))
            if content == '↑↑↑':
                continue
            if language.startswith('en'):
                content = content.lower()
            annotation = annotations.setdefault(emoji, Annotation())
            if match.group('tts'):
                annotation.tts.append(content)
            else:
                annotation.default.extend(
                    keyword.strip() for keyword in content.split('|'))
    return annotations

def _load_locale(dirname: str, locale: str) -> Dict[str, Annotation]:
    (path, open_function) = esa_util.find_path_and_open_function(
        [dirname], [ANNOTATIONS_BASENAME], subdir=locale)
    if not path or open_function is None:
        return {}
    LOGGER.debug('Loading annotations from %s', path)
    return load_annotation_json(path, open_function)

def _load_cldr_locale(
        cldr_dirnames: Iterable[str], locale: str) -> Dict[str, Annotation]:
    annotations: Dict[str, Annotation] = {}
    # annotationsDerived first so that annotations override it
    for subdir in reversed(CLDR_SUBDIRS):
        (path, open_function) = esa_util.find_path_and_open_function(
            cldr_dirnames, [locale + '.xml'], subdir=subdir)
        if not path or open_function is None:
            continue
        LOGGER.debug('Loading CLDR annotations from %s', path)
        _merge(annotations,
               load_cldr_annotation_xml(path, locale, open_function))
    return annotations

def load_annotations(
        languages: Iterable[str],
        dirnames: Optional[Iterable[str]] = None,
        cldr_dirnames: Iterable[str] = CLDR_ANNOTATION_DIRNAMES,
) -> Dict[str, Annotation]:
    '''Loads the annotations for a list of languages

    The first directory in “dirnames” which exists is used. The
    locales found there are negotiated against “languages” and
    loaded from least to most preferred, so entries of more
    preferred locales replace those of less preferred ones.
    Locales without annotations.json are looked up in the CLDR
    directories.

    Errors while reading one locale are logged and that locale
    is skipped.

    :param languages: The requested languages, most preferred first
    :param dirnames: Directories containing one subdirectory per
                     locale. Defaults to annotation_dirs().
    :param cldr_dirnames: CLDR “common” directories
    '''
    languages = list(languages)
    if dirnames is None:
        dirnames = annotation_dirs()
    dirname = ''
    for candidate in dirnames:
        if os.path.isdir(candidate):
            dirname = candidate
            break
    available = set(available_locales(dirname)) if dirname else set()
    for language in esa_util.expand_languages(languages):
        (path, _open_function) = esa_util.find_path_and_open_function(
            cldr_dirnames, [language + '.xml'], subdir=CLDR_SUBDIRS[0])
        if path:
            available.add(language)
    chain = negotiate_languages(languages, available)
    LOGGER.info('Annotation locales: %s', chain)
    annotations: Dict[str, Annotation] = {}
    for locale in reversed(chain):
        try:
            locale_annotations = {}
            if dirname:
                locale_annotations = _load_locale(dirname, locale)
            if not locale_annotations:
                locale_annotations = _load_cldr_locale(cldr_dirnames, locale)
        except (OSError, ValueError, UnicodeDecodeError, EOFError) as error:
            LOGGER.warning('Skipping annotations for %s: %s: %s',
                           locale, error.__class__.__name__, error)
            continue
        _merge(annotations, locale_annotations)
    return annotations

if __name__ == "__main__":
    import doctest
    (FAILED, _ATTEMPTED) = doctest.testmod()
    if FAILED:
        raise SystemExit(1)

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

'''
Utility functions used by the emoji selector applet
'''

from typing import Any
from typing import List
from typing import Tuple
from typing import Optional
from typing import Iterable
from typing import Callable
from typing import NamedTuple
import os
import re
import gzip
import logging

LOGGER = logging.getLogger('emoji-selector')

APP_ID = 'dev.dominiccgeh.CosmicAppletEmojiSelector'
APP_NAME = 'emoji-selector'
VERSION = '0.1.0'

# Default for XDG_DATA_DIRS when the variable is unset or empty
DEFAULT_XDG_DATA_DIRS = '/usr/share:/usr/local/share'

PRESENTATION_SELECTORS = ('\ufe0e', '\ufe0f')

SKIN_TONE_MODIFIERS = ('🏻', '🏼', '🏽', '🏾', '🏿')

class Rgba(NamedTuple):
    '''A color with red, green, blue and alpha in the range 0.0 to 1.0'''
    red: float
    green: float
    blue: float
    alpha: float = 1.0

    def to_css(self) -> str:
        '''
        Return the color as a CSS rgba() expression

        Examples:

        >>> Rgba(1.0, 0.5, 0.0, 1.0).to_css()
        'rgba(255,128,0,1)'
        '''
        return 'rgba(%d,%d,%d,%g)' % (
            round(self.red * 255),
            round(self.green * 255),
            round(self.blue * 255),
            self.alpha)

def color_string_to_rgba(color_string: str) -> Rgba:
    '''
    Converts a hex color string to an Rgba tuple

    :param color_string: The color to convert. Can be expressed as
                         “#rgb”, “#rrggbb” or “#rrggbbaa”.

    Raises ValueError if the string cannot be parsed.

    Examples:

    >>> color_string_to_rgba('#ff0000')
    Rgba(red=1.0, green=0.0, blue=0.0, alpha=1.0)

    >>> color_string_to_rgba('#fff')
    Rgba(red=1.0, green=1.0, blue=1.0, alpha=1.0)

    >>> round(color_string_to_rgba('#00000080').alpha, 3)
    0.502
    '''
    value = color_string.strip()
    if not value.startswith('#'):
        raise ValueError(f'Not a hex color: {color_string!r}')
    value = value[1:]
    if len(value) == 3:
        value = ''.join(char * 2 for char in value)
    if len(value) == 6:
        value += 'ff'
    if len(value) != 8 or not re.fullmatch(r'[0-9a-fA-F]{8}', value):
        raise ValueError(f'Not a hex color: {color_string!r}')
    red, green, blue, alpha = (
        int(value[index:index + 2], 16) / 255
        for index in range(0, 8, 2))
    return Rgba(red, green, blue, alpha)

def strip_presentation_selectors(text: str) -> str:
    '''
    Removes the text and emoji presentation selectors from a string

    :param text: An emoji sequence

    Examples:

    >>> strip_presentation_selectors('☺️')
    '☺'

    >>> strip_presentation_selectors('❤︎')
    '❤'
    '''
    for selector in PRESENTATION_SELECTORS:
        text = text.replace(selector, '')
    return text

def codepoints(text: str) -> str:
    '''
    Returns the code points of a string in “U+XXXX” notation

    Examples:

    >>> codepoints('👍🏽')
    'U+1F44D U+1F3FD'
    '''
    return ' '.join(f'U+{ord(char):04X}' for char in text)

def xdg_save_data_path(*resource: str) -> str:
    '''
    Returns the user data directory for “resource” and creates it
    if it does not exist yet.

    :param resource: Path components relative to XDG_DATA_HOME
    '''
    xdg_data_home = os.environ.get('XDG_DATA_HOME') or os.path.join(
        os.path.expanduser('~'), '.local', 'share')
    resource_joined = os.path.join(*resource)
    assert not resource_joined.startswith('/')
    path = os.path.join(xdg_data_home, resource_joined)
    if not os.path.isdir(path):
        os.makedirs(path, exist_ok=True)
    return path

def xdg_data_dirs() -> List[str]:
    '''
    Returns the list of system data directories

    Uses $XDG_DATA_DIRS and falls back to the default of the
    XDG base directory specification if it is unset or empty.
    '''
    value = os.environ.get('XDG_DATA_DIRS') or DEFAULT_XDG_DATA_DIRS
    return [path for path in value.split(':') if path]

def get_languages(languages_option: str = '') -> List[str]:
    '''
    Return the list of languages.

    Get it from the command line option if that is used.
    If not, get it from the environment variables.

    :param languages_option: Colon separated list of languages
                             as given on the command line
    '''
    if languages_option:
        return list(languages_option.split(':'))
    environment_variable = os.getenv('LANGUAGE')
    if not environment_variable:
        environment_variable = os.getenv('LC_ALL')
    if not environment_variable:
        environment_variable = os.getenv('LC_MESSAGES')
    if not environment_variable:
        environment_variable = os.getenv('LANG')
    if not environment_variable:
        return ['en_US']
    languages = []
    for language in environment_variable.split(':'):
        language = re.sub(r'[.@].*', '', language)
        if language and language not in ('C', 'POSIX'):
            languages.append(language)
    if not languages:
        return ['en_US']
    return languages

def expand_languages(languages: Iterable[str]) -> List[str]:
    '''Expands the given list of languages by including fallbacks.

    Returns a possibly longer list of languages by adding
    fallbacks. Duplicates are removed, the first occurrence wins.

    :param languages: A list of languages (or locale names)

    Examples:

    >>> expand_languages(['de_DE', 'fr'])
    ['de_DE', 'de', 'fr', 'en']

    >>> expand_languages(['sr_Latn_RS'])
    ['sr_Latn_RS', 'sr_Latn', 'sr', 'en']

    >>> expand_languages(['en_GB'])
    ['en_GB', 'en_001', 'en']

    >>> expand_languages([])
    ['en']
    '''
    expanded_languages: List[str] = []
    for language in languages:
        candidates = [language]
        if language[:2] == 'en' and language != 'en':
            candidates.append('en_001')
        language_parts = language.split('_')
        while len(language_parts) > 1:
            language_parts.pop()
            candidates.append('_'.join(language_parts))
        for candidate in candidates:
            if candidate not in expanded_languages:
                expanded_languages.append(candidate)
    if 'en' not in expanded_languages:
        expanded_languages.append('en')
    return expanded_languages

def find_path_and_open_function(
        dirnames: Iterable[str],
        basenames: Iterable[str],
        subdir: str = '') -> Tuple[str, Optional[Callable[..., Any]]]:
    '''Find the first existing file of a list of basenames and dirnames

    For each file in “basenames”, tries whether that file or the
    file with “.gz” added can be found in the list of directories
    “dirnames” where “subdir” is added to each directory in the list.

    Returns a tuple (path, open_function) where “path” is the
    complete path of the first file found and the open function
    is either “open()” or “gzip.open()”.

    :param dirnames: A list of directories to search in
    :param basenames: A list of file names to search for
    :param subdir: A subdirectory to be added to each directory in the list
    '''
    for basename in basenames:
        for dirname in dirnames:
            path = os.path.join(dirname, subdir, basename)
            if os.path.exists(path):
                if path.endswith('.gz'):
                    return (path, gzip.open)
                return (path, open)
            path = os.path.join(dirname, subdir, basename + '.gz')
            if os.path.exists(path):
                return (path, gzip.open)
    return ('', None)

if __name__ == "__main__":
    import doctest
    (FAILED, _ATTEMPTED) = doctest.testmod()
    if FAILED:
        raise SystemExit(1)

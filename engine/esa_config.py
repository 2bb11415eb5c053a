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
Configuration of the emoji selector and its persistence
'''

from typing import Any
from typing import List
from typing import Dict
from typing import Optional
from typing import NamedTuple
from enum import Flag
from dataclasses import dataclass, field, replace
import os
import ast
import logging

import esa_util
from esa_emoji import SkinToneMode, DEFAULT_SKIN_TONE_MODE, TONES

LOGGER = logging.getLogger('emoji-selector')

CONFIG_VERSION = 1

class ClickMode(Flag):
    '''Actions bound to a mouse button

    COPY: copy the emoji to the clipboard
    CLOSE: close the popup
    APPEND: append the emoji to the search entry, combines with COPY
    PRIVATE: do not record the emoji in the recently used list

    Examples:

    >>> ClickMode.COPY in (ClickMode.COPY | ClickMode.CLOSE)
    True

    >>> int(ClickMode.COPY | ClickMode.PRIVATE)
    9
    '''
    COPY = 1
    CLOSE = 2
    APPEND = 4
    PRIVATE = 8

class QuickToggle(NamedTuple):
    '''A colored button switching a group of skin tones on or off'''
    color: esa_util.Rgba
    mode: SkinToneMode
    active: bool

# Colors of the quick toggle buttons. The first one stands for
# emoji without a skin tone and their default (yellow) form.
QUICK_TOGGLE_COLORS = (
    ('#ffc83d', SkinToneMode.NO_SKIN | SkinToneMode.DEFAULT),
    ('#f7dece', SkinToneMode.LIGHT),
    ('#f3d2a2', SkinToneMode.MEDIUM_LIGHT),
    ('#d5ab88', SkinToneMode.MEDIUM),
    ('#af7e57', SkinToneMode.MEDIUM_DARK),
    ('#7c533e', SkinToneMode.DARK),
)

@dataclass
class Config:
    '''The persisted settings of the emoji selector'''
    show_tooltip: bool = False
    last_used_limit: int = 20
    last_used: List[str] = field(default_factory=list)
    font_family: str = 'Noto Color Emoji'
    show_preview: bool = True
    show_unicode: bool = False
    click_left: ClickMode = ClickMode.COPY | ClickMode.CLOSE
    click_middle: ClickMode = ClickMode.APPEND
    click_right: ClickMode = ClickMode.COPY | ClickMode.PRIVATE
    skin_tone_mode: SkinToneMode = DEFAULT_SKIN_TONE_MODE

    def quick_toggles(self) -> List[QuickToggle]:
        '''Returns the skin tone quick toggle buttons

        A toggle is active when all of its tones are enabled.
        '''
        return [
            QuickToggle(color=esa_util.color_string_to_rgba(color),
                        mode=mode,
                        active=mode in self.skin_tone_mode)
            for color, mode in QUICK_TOGGLE_COLORS]

    def toggle_skin_tone(self, mode: SkinToneMode) -> 'Config':
        '''Returns a copy with the tones in “mode” flipped

        If all tones of “mode” are enabled they are all disabled,
        otherwise they are all enabled.

        Examples:

        >>> config = Config().toggle_skin_tone(SkinToneMode.LIGHT)
        >>> SkinToneMode.LIGHT in config.skin_tone_mode
        True

        >>> config = config.toggle_skin_tone(SkinToneMode.LIGHT)
        >>> SkinToneMode.LIGHT in config.skin_tone_mode
        False
        '''
        if mode in self.skin_tone_mode:
            return replace(self, skin_tone_mode=self.skin_tone_mode & ~mode)
        return replace(self, skin_tone_mode=self.skin_tone_mode | mode)

    def click_mode(self, button: int) -> ClickMode:
        '''Returns the click mode of a mouse button (1, 2 or 3)'''
        if button == 2:
            return self.click_middle
        if button == 3:
            return self.click_right
        return self.click_left

    def to_dict(self) -> Dict[str, Any]:
        '''Returns the config as a dict of literals'''
        return {
            'version': CONFIG_VERSION,
            'show_tooltip': self.show_tooltip,
            'last_used_limit': self.last_used_limit,
            'last_used': list(self.last_used),
            'font_family': self.font_family,
            'show_preview': self.show_preview,
            'show_unicode': self.show_unicode,
            'click_left': self.click_left.value,
            'click_middle': self.click_middle.value,
            'click_right': self.click_right.value,
            'skin_tone_mode': self.skin_tone_mode.value,
        }

    @classmethod
    def from_dict(cls, options_dict: Dict[str, Any]) -> 'Config':
        '''Builds a config from a dict as written by to_dict()

        Values of the wrong type are ignored and replaced by the
        defaults. A different version discards everything.
        '''
        config = cls()
        if options_dict.get('version') != CONFIG_VERSION:
            LOGGER.warning('Ignoring config of version %r, expected %r',
                           options_dict.get('version'), CONFIG_VERSION)
            return config
        for key in ('show_tooltip', 'show_preview', 'show_unicode'):
            if isinstance(options_dict.get(key), bool):
                setattr(config, key, options_dict[key])
        limit = options_dict.get('last_used_limit')
        if (isinstance(limit, int) and not isinstance(limit, bool)
                and limit >= 0):
            config.last_used_limit = limit
        last_used = options_dict.get('last_used')
        if (isinstance(last_used, list)
                and all(isinstance(emoji, str) and emoji
                        for emoji in last_used)):
            config.last_used = last_used[:config.last_used_limit]
        if (isinstance(options_dict.get('font_family'), str)
                and options_dict['font_family']):
            config.font_family = options_dict['font_family']
        for key in ('click_left', 'click_middle', 'click_right'):
            value = options_dict.get(key)
            if isinstance(value, int) and 0 <= value <= 0xf:
                setattr(config, key, ClickMode(value))
        value = options_dict.get('skin_tone_mode')
        if isinstance(value, int) and value >= 0:
            mode = SkinToneMode(value & _ALL_SKIN_TONE_BITS)
            # Nothing could ever be shown without any tone bit
            if mode & TONES:
                config.skin_tone_mode = mode
        return config

_ALL_SKIN_TONE_BITS = (
    TONES | SkinToneMode.FILTER_EXACT | SkinToneMode.FILTER_INTERSECT).value

def update_last_used(last_used: List[str], emoji: str, limit: int) -> List[str]:
    '''Returns the recently used list after copying “emoji”

    The emoji moves to the front, it is never duplicated, and the
    list is truncated to “limit” entries.

    :param last_used: The recently used emoji, most recent first
    :param emoji: The emoji just copied
    :param limit: The maximum length of the list

    Examples:

    >>> update_last_used(['b', 'a'], 'a', 20)
    ['a', 'b']

    >>> update_last_used(['c', 'b', 'a'], 'd', 3)
    ['d', 'c', 'b']
    '''
    updated = [emoji] + [item for item in last_used if item != emoji]
    return updated[:max(limit, 0)]

class ConfigStore:
    '''Reads and writes the config file

    The file contains the repr() of a dict and is read with
    ast.literal_eval().

    :param path: The config file, by default “config” in the
                 user data directory of the emoji selector.
    '''
    def __init__(self, path: Optional[str] = None) -> None:
        if path is None:
            path = os.path.join(
                esa_util.xdg_save_data_path(esa_util.APP_NAME), 'config')
        self.path = path

    def load(self) -> Config:
        '''
        Read the config from the file

        Returns the defaults if the file is missing or broken.
        Never raises.
        '''
        options_dict: Any = {}
        if not os.path.isfile(self.path):
            LOGGER.info('No config file %s, using defaults', self.path)
            return Config()
        try:
            with open(self.path, mode='r', encoding='UTF-8') as options_file:
                options_dict = ast.literal_eval(options_file.read())
        except (PermissionError, SyntaxError, IndentationError,
                ValueError, UnicodeDecodeError) as error:
            LOGGER.exception('Error when reading config: %s: %s',
                             error.__class__.__name__, error)
        except Exception as error: # pylint: disable=broad-except
            LOGGER.exception(
                'Unexpected error when reading config: %s: %s',
                error.__class__.__name__, error)
        else: # no exception occured
            LOGGER.debug('File %s has been read and evaluated.', self.path)
        finally: # executes always
            if not isinstance(options_dict, dict):
                LOGGER.debug('Not a dict: repr(options_dict) = %s',
                             options_dict)
                options_dict = {}
        if not options_dict:
            return Config()
        return Config.from_dict(options_dict)

    def save(self, config: Config) -> bool:
        '''
        Save the config to the file

        Returns False and logs the error if it could not be written.
        '''
        try:
            with open(self.path, mode='w', encoding='UTF-8') as options_file:
                options_file.write(repr(config.to_dict()))
                options_file.write('\n')
        except OSError as error:
            LOGGER.exception('Error when saving config: %s: %s',
                             error.__class__.__name__, error)
            return False
        return True

if __name__ == "__main__":
    import doctest
    (FAILED, _ATTEMPTED) = doctest.testmod()
    if FAILED:
        raise SystemExit(1)

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

'''The state of one emoji selector session.

Holds the selected group, the search text and the hovered emoji and
recomputes the list of visible emoji whenever one of them or the
configuration changes.
'''

from typing import List
from typing import Dict
from typing import Tuple
from typing import Iterator
from typing import Optional
from typing import Sequence
from typing import NamedTuple
from enum import Enum
from dataclasses import replace
import re
import itertools
import logging

from esa_emoji import Emoji, EmojiCatalog, Group
from esa_emoji import cycle_group, group_from_digit
from esa_config import Config, ClickMode, update_last_used
from esa_scrollable import Point, Rectangle, Size

LOGGER = logging.getLogger('emoji-selector')

class Activation(NamedTuple):
    '''Result of clicking an emoji or pressing Return

    copy_text: the text to put into the clipboard, None for no copy
    close: whether the popup should be closed
    config: the possibly changed configuration
    config_changed: whether “config” has to be saved
    '''
    copy_text: Optional[str]
    close: bool
    config: Config
    config_changed: bool

class SelectorState:
    '''Group, search, hover and the filtered emoji lists

    :param catalog: The emoji catalog
    :param config: The configuration used for filtering
    '''
    def __init__(self, catalog: EmojiCatalog, config: Config) -> None:
        self.catalog = catalog
        self.config = config
        self.selected_group: Optional[Group] = None
        self.search = ''
        self.hovered: Optional[Emoji] = None
        self.favorites: List[Emoji] = []
        self.matches: List[Emoji] = []
        self.refilter()

    def localized_name(self, emoji: Emoji) -> str:
        '''Returns the localized name of an emoji'''
        return self.catalog.localized_name(emoji)

    def refilter(self, config: Optional[Config] = None) -> None:
        '''Recomputes “matches” and “favorites”

        One pass over the catalog keeps the emoji of the selected
        group which pass the skin tone filter and, if a search text
        is set, whose localized name matches it case-insensitively.
        The matches stay in catalog order. The favorites are the
        matches which are in the recently used list, most recently
        used first.

        :param config: A new configuration to use from now on
        '''
        if config is not None:
            self.config = config
        mode = self.config.skin_tone_mode
        pattern = None
        if self.search:
            pattern = re.compile(re.escape(self.search), re.IGNORECASE)
        matches = []
        for emoji in self.catalog:
            if (self.selected_group is not None
                    and emoji.group is not self.selected_group):
                continue
            if not mode.matches(emoji.skin_tone):
                continue
            if pattern and not pattern.search(self.localized_name(emoji)):
                continue
            matches.append(emoji)
        by_grapheme: Dict[str, Emoji] = {
            emoji.grapheme: emoji for emoji in matches}
        self.matches = matches
        self.favorites = [by_grapheme[grapheme]
                          for grapheme in self.config.last_used
                          if grapheme in by_grapheme]
        LOGGER.debug('group=%s search=%r: %d matches, %d favorites',
                     self.selected_group, self.search,
                     len(self.matches), len(self.favorites))

    def relevant(self) -> Optional[Emoji]:
        '''Returns the emoji Return copies and the preview shows

        The hovered emoji, else the first favorite, else the first
        match, else None.
        '''
        if self.hovered is not None:
            return self.hovered
        if self.favorites:
            return self.favorites[0]
        if self.matches:
            return self.matches[0]
        return None

    def reset(self) -> None:
        '''Forget the hovered emoji, used when the popup opens'''
        self.hovered = None

    def set_search(self, search: str) -> None:
        if search == self.search:
            return
        self.search = search
        self.hovered = None
        self.refilter()

    def select_group(self, group: Optional[Group]) -> bool:
        '''Selects a group, None selects all groups

        Returns True if the selection changed.
        '''
        if group is self.selected_group:
            return False
        self.selected_group = group
        self.hovered = None
        self.refilter()
        return True

    def toggle_group(self, group: Group) -> bool:
        '''Selects “group”, or all groups if it is already selected'''
        if group is self.selected_group:
            return self.select_group(None)
        return self.select_group(group)

    def select_digit(self, digit: int) -> bool:
        '''Selects the group of a digit key, 0 selects all groups'''
        return self.select_group(group_from_digit(digit))

    def cycle_group(self, step: int) -> bool:
        '''Selects the next (step=1) or previous (step=-1) group'''
        return self.select_group(cycle_group(self.selected_group, step))

    def activate(self, emoji: Emoji, mode: ClickMode) -> Activation:
        '''Performs the actions of a click mode on an emoji

        APPEND adds the emoji to the search text, COPY returns it as
        the text to copy and records it as recently used unless
        PRIVATE is set.

        :param emoji: The emoji clicked
        :param mode: The actions bound to the mouse button used
        '''
        copy_text = None
        config_changed = False
        if ClickMode.APPEND in mode:
            self.search += emoji.grapheme
        if ClickMode.COPY in mode:
            copy_text = emoji.grapheme
            if ClickMode.PRIVATE not in mode:
                last_used = update_last_used(
                    self.config.last_used,
                    emoji.grapheme,
                    self.config.last_used_limit)
                if last_used != self.config.last_used:
                    self.config = replace(self.config, last_used=last_used)
                    config_changed = True
        if ClickMode.APPEND in mode or config_changed:
            self.refilter()
        return Activation(copy_text=copy_text,
                          close=ClickMode.CLOSE in mode,
                          config=self.config,
                          config_changed=config_changed)

class GridGeometry:
    '''Arrangement of the emoji grid

    The grid has one section per list shown (the favorites, then
    all matches). Every section starts on a new row and sections
    are separated by a gap.

    :param sections: The number of emoji in each section
    :param columns: Emoji per row
    :param cell: Width and height of one emoji cell in pixels
    :param gap: Space between two non-empty sections in pixels

    Examples:

    >>> grid = GridGeometry([3, 25], columns=10, cell=35, gap=8)
    >>> grid.content_size()
    Size(width=350.0, height=148.0)

    >>> grid.hit(Point(40, 45))
    (1, 1)
    '''
    def __init__(self,
                 sections: Sequence[int],
                 columns: int = 10,
                 cell: float = 35.0,
                 gap: float = 8.0) -> None:
        self.sections = list(sections)
        self.columns = columns
        self.cell = float(cell)
        self.gap = float(gap)
        self._tops: List[float] = []
        top = 0.0
        for count in self.sections:
            self._tops.append(top)
            if count:
                top += self.rows(count) * self.cell + self.gap
        self._height = max(top - self.gap, 0.0)

    def rows(self, count: int) -> int:
        return -(-count // self.columns)

    def content_size(self) -> Size:
        return Size(self.columns * self.cell, self._height)

    def cell_bounds(self, section: int, index: int) -> Rectangle:
        row, column = divmod(index, self.columns)
        return Rectangle(column * self.cell,
                         self._tops[section] + row * self.cell,
                         self.cell,
                         self.cell)

    def hit(self, point: Point) -> Optional[Tuple[int, int]]:
        '''Returns (section, index) of the cell at a content position'''
        column = int(point.x // self.cell)
        if point.x < 0 or column >= self.columns:
            return None
        for section, count in enumerate(self.sections):
            top = self._tops[section]
            if not count or point.y < top:
                continue
            row = int((point.y - top) // self.cell)
            index = row * self.columns + column
            if row < self.rows(count):
                if index < count:
                    return (section, index)
                return None
        return None

    def cells_in(self, area: Rectangle
                 ) -> Iterator[Tuple[int, int, Rectangle]]:
        '''Yields (section, index, bounds) of the cells overlapping “area”'''
        for section, count in enumerate(self.sections):
            top = self._tops[section]
            if not count:
                continue
            first_row = max(int((area.y - top) // self.cell), 0)
            last_row = min(int((area.y + area.height - top) // self.cell),
                           self.rows(count) - 1)
            for row in range(first_row, last_row + 1):
                for column in range(self.columns):
                    index = row * self.columns + column
                    if index >= count:
                        break
                    yield (section, index, self.cell_bounds(section, index))

class KeyAction(Enum):
    '''Actions of the keyboard shortcuts'''
    FOCUS_SEARCH = 'focus-search'
    SELECT_GROUP = 'select-group'
    NEXT_GROUP = 'next-group'
    PREVIOUS_GROUP = 'previous-group'
    CLOSE = 'close'
    SCROLL_HOME = 'scroll-home'
    SCROLL_END = 'scroll-end'
    PAGE_UP = 'page-up'
    PAGE_DOWN = 'page-down'
    COPY_RELEVANT = 'copy-relevant'

_KEY_ACTIONS: Dict[str, KeyAction] = {
    'slash': KeyAction.FOCUS_SEARCH,
    'KP_Divide': KeyAction.FOCUS_SEARCH,
    'Left': KeyAction.PREVIOUS_GROUP,
    'Right': KeyAction.NEXT_GROUP,
    'Escape': KeyAction.CLOSE,
    'Home': KeyAction.SCROLL_HOME,
    'End': KeyAction.SCROLL_END,
    'Page_Up': KeyAction.PAGE_UP,
    'Page_Down': KeyAction.PAGE_DOWN,
    'Return': KeyAction.COPY_RELEVANT,
    'KP_Enter': KeyAction.COPY_RELEVANT,
}

# Keys which still act as shortcuts while the search entry has focus
_KEYS_IN_SEARCH = ('Escape', 'Page_Up', 'Page_Down', 'Return', 'KP_Enter')

def action_for_key(
        keyname: str,
        search_focused: bool = False) -> Optional[Tuple[KeyAction, int]]:
    '''Returns the shortcut action of a key

    Returns a tuple (action, digit) where digit is only meaningful
    for KeyAction.SELECT_GROUP, or None if the key is no shortcut.

    :param keyname: The name of the key as returned by
                    Gdk.keyval_name(), e.g. “slash” or “Page_Up”
    :param search_focused: Whether the search entry has the focus.
                           Then only keys which cannot be typed into
                           it are shortcuts.

    Examples:

    >>> action_for_key('7')
    (<KeyAction.SELECT_GROUP: 'select-group'>, 7)

    >>> action_for_key('7', search_focused=True) is None
    True

    >>> action_for_key('Escape', search_focused=True)
    (<KeyAction.CLOSE: 'close'>, 0)
    '''
    if search_focused and keyname not in _KEYS_IN_SEARCH:
        return None
    if len(keyname) == 1 and keyname in '0123456789':
        return (KeyAction.SELECT_GROUP, int(keyname))
    if keyname.startswith('KP_') and keyname[3:] in tuple('0123456789'):
        return (KeyAction.SELECT_GROUP, int(keyname[3:]))
    if keyname in _KEY_ACTIONS:
        return (_KEY_ACTIONS[keyname], 0)
    return None

class PopupIntent(Enum):
    OPEN = 'open'
    CLOSE = 'close'

class PopupController:
    '''Tracks whether the popup is open

    toggle() is called when the panel icon is clicked and returns
    what the window layer has to do.
    '''
    def __init__(self) -> None:
        self.popup: Optional[int] = None
        self._ids = itertools.count(1)

    def toggle(self) -> Tuple[PopupIntent, int]:
        '''Returns (intent, popup id) for a click on the panel icon'''
        if self.popup is not None:
            popup = self.popup
            self.popup = None
            return (PopupIntent.CLOSE, popup)
        self.popup = next(self._ids)
        return (PopupIntent.OPEN, self.popup)

    def close(self) -> Optional[Tuple[PopupIntent, int]]:
        '''Returns the close intent if the popup is open'''
        if self.popup is None:
            return None
        return self.toggle()

    def closed(self, popup: int) -> None:
        '''Forget the popup once the window layer destroyed it'''
        if self.popup == popup:
            self.popup = None

if __name__ == "__main__":
    import doctest
    (FAILED, _ATTEMPTED) = doctest.testmod()
    if FAILED:
        raise SystemExit(1)

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

'''A module used by the emoji selector to hold the emoji catalog
and to decide which emoji are visible for a skin tone configuration.

The catalog is built once from the emoji-data-python package. Every
emoji which has skin tone variants is expanded into its variants so
that skin tone filtering can treat all entries the same way.
'''

from typing import Any
from typing import List
from typing import Dict
from typing import Tuple
from typing import Optional
from typing import Iterable
from typing import Iterator
from typing import Mapping
from typing import Callable
from enum import Enum, Flag, auto
from dataclasses import dataclass
import functools
import logging
import gettext

import esa_util

DOMAINNAME = 'emoji-selector'
_: Callable[[str], str] = lambda a: gettext.dgettext(DOMAINNAME, a)
N_: Callable[[str], str] = lambda a: a

LOGGER = logging.getLogger('emoji-selector')

class Group(Enum):
    '''The 9 fixed emoji groups in display order.

    The value of a group is also the digit key selecting it.

    Examples:

    >>> Group(1)
    <Group.SMILEYS_AND_EMOTION: 1>

    >>> Group.FLAGS.category
    'Flags'
    '''
    SMILEYS_AND_EMOTION = 1
    PEOPLE_AND_BODY = 2
    ANIMALS_AND_NATURE = 3
    FOOD_AND_DRINK = 4
    TRAVEL_AND_PLACES = 5
    ACTIVITIES = 6
    OBJECTS = 7
    SYMBOLS = 8
    FLAGS = 9

    @property
    def category(self) -> str:
        '''The category name used by the Unicode emoji data'''
        return _GROUP_CATEGORIES[self]

    @property
    def label(self) -> str:
        '''The translated name of the group'''
        return _(self.category)

    @property
    def symbol(self) -> str:
        '''An emoji representing the group on its button'''
        return _GROUP_SYMBOLS[self]

_GROUP_CATEGORIES: Dict[Group, str] = {
    Group.SMILEYS_AND_EMOTION: N_('Smileys & Emotion'),
    Group.PEOPLE_AND_BODY: N_('People & Body'),
    Group.ANIMALS_AND_NATURE: N_('Animals & Nature'),
    Group.FOOD_AND_DRINK: N_('Food & Drink'),
    Group.TRAVEL_AND_PLACES: N_('Travel & Places'),
    Group.ACTIVITIES: N_('Activities'),
    Group.OBJECTS: N_('Objects'),
    Group.SYMBOLS: N_('Symbols'),
    Group.FLAGS: N_('Flags'),
}

_GROUP_SYMBOLS: Dict[Group, str] = {
    Group.SMILEYS_AND_EMOTION: '😀',
    Group.PEOPLE_AND_BODY: '👋',
    Group.ANIMALS_AND_NATURE: '🐾',
    Group.FOOD_AND_DRINK: '🍔',
    Group.TRAVEL_AND_PLACES: '🌍',
    Group.ACTIVITIES: '🚶',
    Group.OBJECTS: '💡',
    Group.SYMBOLS: '🔣',
    Group.FLAGS: '🏴',
}

CATEGORY_GROUPS: Dict[str, Group] = {
    category: group for group, category in _GROUP_CATEGORIES.items()}

def group_from_digit(digit: int) -> Optional[Group]:
    '''Returns the group selected by a digit key, None means “all”

    Raises ValueError for anything but 0 to 9.

    Examples:

    >>> group_from_digit(0) is None
    True

    >>> group_from_digit(9)
    <Group.FLAGS: 9>
    '''
    if digit == 0:
        return None
    return Group(digit)

def cycle_group(group: Optional[Group], step: int = 1) -> Optional[Group]:
    '''Returns the group “step” positions away from “group”

    The groups form a ring where “all” (None) sits between the last
    and the first group.

    :param group: The currently selected group, None means “all”
    :param step: 1 to move right, -1 to move left

    Examples:

    >>> cycle_group(Group.FLAGS) is None
    True

    >>> cycle_group(None)
    <Group.SMILEYS_AND_EMOTION: 1>

    >>> cycle_group(None, -1)
    <Group.FLAGS: 9>
    '''
    ring: List[Optional[Group]] = [None]
    ring.extend(Group)
    return ring[(ring.index(group) + step) % len(ring)]

class SkinTone(Enum):
    '''Skin tone of an emoji: the default (yellow) form, one of the
    five Fitzpatrick based tones or an ordered pair of two different
    tones for emoji showing two people.
    '''
    DEFAULT = 'default'
    LIGHT = 'light'
    MEDIUM_LIGHT = 'medium-light'
    MEDIUM = 'medium'
    MEDIUM_DARK = 'medium-dark'
    DARK = 'dark'
    LIGHT_AND_MEDIUM_LIGHT = ('light', 'medium-light')
    LIGHT_AND_MEDIUM = ('light', 'medium')
    LIGHT_AND_MEDIUM_DARK = ('light', 'medium-dark')
    LIGHT_AND_DARK = ('light', 'dark')
    MEDIUM_LIGHT_AND_LIGHT = ('medium-light', 'light')
    MEDIUM_LIGHT_AND_MEDIUM = ('medium-light', 'medium')
    MEDIUM_LIGHT_AND_MEDIUM_DARK = ('medium-light', 'medium-dark')
    MEDIUM_LIGHT_AND_DARK = ('medium-light', 'dark')
    MEDIUM_AND_LIGHT = ('medium', 'light')
    MEDIUM_AND_MEDIUM_LIGHT = ('medium', 'medium-light')
    MEDIUM_AND_MEDIUM_DARK = ('medium', 'medium-dark')
    MEDIUM_AND_DARK = ('medium', 'dark')
    MEDIUM_DARK_AND_LIGHT = ('medium-dark', 'light')
    MEDIUM_DARK_AND_MEDIUM_LIGHT = ('medium-dark', 'medium-light')
    MEDIUM_DARK_AND_MEDIUM = ('medium-dark', 'medium')
    MEDIUM_DARK_AND_DARK = ('medium-dark', 'dark')
    DARK_AND_LIGHT = ('dark', 'light')
    DARK_AND_MEDIUM_LIGHT = ('dark', 'medium-light')
    DARK_AND_MEDIUM = ('dark', 'medium')
    DARK_AND_MEDIUM_DARK = ('dark', 'medium-dark')

    @property
    def parts(self) -> Tuple['SkinTone', ...]:
        '''The single tones this tone is made of

        Examples:

        >>> SkinTone.LIGHT_AND_DARK.parts
        (<SkinTone.LIGHT: 'light'>, <SkinTone.DARK: 'dark'>)

        >>> SkinTone.MEDIUM.parts
        (<SkinTone.MEDIUM: 'medium'>,)

        >>> SkinTone.DEFAULT.parts
        ()
        '''
        if self is SkinTone.DEFAULT:
            return ()
        if isinstance(self.value, tuple):
            return tuple(SkinTone(value) for value in self.value)
        return (self,)

    @property
    def is_combination(self) -> bool:
        '''Whether this is a pair of two different tones'''
        return isinstance(self.value, tuple)

    @property
    def description(self) -> str:
        '''
        Examples:

        >>> SkinTone.MEDIUM_DARK.description
        'medium-dark skin tone'

        >>> SkinTone.LIGHT_AND_DARK.description
        'light skin tone, dark skin tone'
        '''
        if self is SkinTone.DEFAULT:
            return ''
        return ', '.join(f'{part.value} skin tone' for part in self.parts)

    @classmethod
    def from_modifiers(cls, modifiers: Iterable[str]) -> Optional['SkinTone']:
        '''Returns the tone for a sequence of skin tone modifier characters

        A pair of equal modifiers is the single tone. Returns None
        if the sequence does not describe a tone.

        :param modifiers: Skin tone modifier characters U+1F3FB to U+1F3FF

        Examples:

        >>> SkinTone.from_modifiers(['🏻', '🏽'])
        <SkinTone.LIGHT_AND_MEDIUM: ('light', 'medium')>

        >>> SkinTone.from_modifiers(['🏿', '🏿'])
        <SkinTone.DARK: 'dark'>

        >>> SkinTone.from_modifiers('x') is None
        True
        '''
        singles = []
        for modifier in modifiers:
            if modifier not in esa_util.SKIN_TONE_MODIFIERS:
                return None
            singles.append(
                _SINGLE_TONES[esa_util.SKIN_TONE_MODIFIERS.index(modifier)])
        if len(singles) == 2 and singles[0] == singles[1]:
            singles.pop()
        if len(singles) == 1:
            return singles[0]
        if len(singles) == 2:
            return cls((singles[0].value, singles[1].value))
        return None

    @classmethod
    def from_unified(cls, unified: str) -> Optional['SkinTone']:
        '''Returns the tone for a skin variation key like “1F3FB-1F3FC”

        Examples:

        >>> SkinTone.from_unified('1F3FE')
        <SkinTone.MEDIUM_DARK: 'medium-dark'>
        '''
        try:
            modifiers = [chr(int(code, 16)) for code in unified.split('-')]
        except ValueError:
            return None
        return cls.from_modifiers(modifiers)

_SINGLE_TONES = (
    SkinTone.LIGHT,
    SkinTone.MEDIUM_LIGHT,
    SkinTone.MEDIUM,
    SkinTone.MEDIUM_DARK,
    SkinTone.DARK,
)

class SkinToneMode(Flag):
    '''Set of skin tones to display plus two policy bits.

    NO_SKIN stands for emoji which have no skin tone at all, DEFAULT
    for the yellow default form of emoji which have tone variants.
    FILTER_EXACT matches the precise combination bit of an emoji,
    FILTER_INTERSECT is satisfied by any overlapping bit instead of
    requiring all bits of an emoji. When both policy bits are set,
    FILTER_EXACT takes precedence.

    Examples:

    >>> SkinToneMode.LIGHT in (SkinToneMode.LIGHT | SkinToneMode.DARK)
    True

    >>> bool(SkinToneMode.LIGHT & SkinToneMode.DARK)
    False
    '''
    NO_SKIN = auto()
    DEFAULT = auto()
    LIGHT = auto()
    MEDIUM_LIGHT = auto()
    MEDIUM = auto()
    MEDIUM_DARK = auto()
    DARK = auto()
    LIGHT_AND_MEDIUM_LIGHT = auto()
    LIGHT_AND_MEDIUM = auto()
    LIGHT_AND_MEDIUM_DARK = auto()
    LIGHT_AND_DARK = auto()
    MEDIUM_LIGHT_AND_LIGHT = auto()
    MEDIUM_LIGHT_AND_MEDIUM = auto()
    MEDIUM_LIGHT_AND_MEDIUM_DARK = auto()
    MEDIUM_LIGHT_AND_DARK = auto()
    MEDIUM_AND_LIGHT = auto()
    MEDIUM_AND_MEDIUM_LIGHT = auto()
    MEDIUM_AND_MEDIUM_DARK = auto()
    MEDIUM_AND_DARK = auto()
    MEDIUM_DARK_AND_LIGHT = auto()
    MEDIUM_DARK_AND_MEDIUM_LIGHT = auto()
    MEDIUM_DARK_AND_MEDIUM = auto()
    MEDIUM_DARK_AND_DARK = auto()
    DARK_AND_LIGHT = auto()
    DARK_AND_MEDIUM_LIGHT = auto()
    DARK_AND_MEDIUM = auto()
    DARK_AND_MEDIUM_DARK = auto()
    FILTER_EXACT = auto()
    FILTER_INTERSECT = auto()

    @classmethod
    def for_tone(cls,
                 tone: Optional[SkinTone],
                 exact: bool = False) -> 'SkinToneMode':
        '''Returns the bits describing an emoji of the given tone

        :param tone: The tone of the emoji, None if it has none
        :param exact: If True, a pair of tones maps to its own
                      combination bit, otherwise to the bits of
                      both single tones.

        Examples:

        >>> SkinToneMode.for_tone(None)
        <SkinToneMode.NO_SKIN: 1>

        >>> SkinToneMode.for_tone(SkinTone.LIGHT_AND_DARK) == (
        ...     SkinToneMode.LIGHT | SkinToneMode.DARK)
        True

        >>> SkinToneMode.for_tone(SkinTone.LIGHT_AND_DARK, exact=True)
        <SkinToneMode.LIGHT_AND_DARK: 1024>
        '''
        if tone is None:
            return cls.NO_SKIN
        if exact or not tone.is_combination:
            return cls[tone.name]
        bits = cls(0)
        for part in tone.parts:
            bits |= cls[part.name]
        return bits

    @property
    def is_exact(self) -> bool:
        '''Whether the exact matching policy applies'''
        return bool(self & (SkinToneMode.FILTER_EXACT | COMBINATIONS))

    def matches(self, tone: Optional[SkinTone]) -> bool:
        '''Decides whether an emoji of tone “tone” is visible

        :param tone: The tone of the emoji, None if it has none

        Examples:

        >>> DEFAULT_SKIN_TONE_MODE.matches(None)
        True

        >>> DEFAULT_SKIN_TONE_MODE.matches(SkinTone.LIGHT)
        False

        >>> (SkinToneMode.LIGHT | SkinToneMode.MEDIUM).matches(
        ...     SkinTone.LIGHT_AND_MEDIUM)
        True

        >>> SkinToneMode.LIGHT.matches(SkinTone.LIGHT_AND_MEDIUM)
        False

        >>> (SkinToneMode.LIGHT | SkinToneMode.FILTER_INTERSECT).matches(
        ...     SkinTone.LIGHT_AND_MEDIUM)
        True
        '''
        if self.is_exact:
            return bool(self & SkinToneMode.for_tone(tone, exact=True))
        bits = SkinToneMode.for_tone(tone)
        if SkinToneMode.FILTER_INTERSECT in self:
            return bool(self & bits)
        return bits in self

SINGLE_TONE_MODES = (
    SkinToneMode.LIGHT
    | SkinToneMode.MEDIUM_LIGHT
    | SkinToneMode.MEDIUM
    | SkinToneMode.MEDIUM_DARK
    | SkinToneMode.DARK)

COMBINATIONS = functools.reduce(
    lambda mask, tone: mask | SkinToneMode[tone.name],
    (tone for tone in SkinTone if tone.is_combination),
    SkinToneMode(0))

TONES = SkinToneMode.NO_SKIN | SkinToneMode.DEFAULT | SINGLE_TONE_MODES | COMBINATIONS

DEFAULT_SKIN_TONE_MODE = SkinToneMode.NO_SKIN | SkinToneMode.DEFAULT

@dataclass(frozen=True)
class Emoji:
    '''An entry of the emoji catalog'''
    grapheme: str
    name: str
    group: Group
    skin_tone: Optional[SkinTone] = None
    short_code: Optional[str] = None

    def __str__(self) -> str:
        return self.grapheme

def load_emoji_data() -> List[Emoji]:
    '''Builds the expanded list of emoji from emoji-data-python

    Emoji are ordered by group, then by the sort order of the
    Unicode emoji data. An emoji with skin tone variants is
    replaced by its default form followed by all of its variants.
    Entries outside of the 9 groups (the bare skin tone modifiers
    for example) are skipped.
    '''
    # pylint: disable=import-outside-toplevel
    from emoji_data_python import emoji_data # type: ignore
    # pylint: enable=import-outside-toplevel
    chars = sorted(
        (char for char in emoji_data if char.category in CATEGORY_GROUPS),
        key=lambda char: (CATEGORY_GROUPS[char.category].value,
                          char.sort_order or 0))
    emoji_list: List[Emoji] = []
    for char in chars:
        group = CATEGORY_GROUPS[char.category]
        name = (char.name or char.short_name or '').lower()
        if not char.skin_variations:
            emoji_list.append(Emoji(char.char, name, group,
                                    short_code=char.short_name))
            continue
        emoji_list.append(Emoji(char.char, name, group,
                                skin_tone=SkinTone.DEFAULT,
                                short_code=char.short_name))
        for unified, variation in char.skin_variations.items():
            tone = SkinTone.from_unified(unified)
            if tone is None:
                LOGGER.debug('Unknown skin variation %s of %s',
                             unified, char.unified)
                continue
            emoji_list.append(Emoji(variation.char,
                                    f'{name}: {tone.description}',
                                    group,
                                    skin_tone=tone,
                                    short_code=char.short_name))
    LOGGER.info('Loaded %d emoji', len(emoji_list))
    return emoji_list

class EmojiCatalog:
    '''The static, ordered set of all known emoji

    :param emoji: The catalog entries in display order. If None,
                  the entries are loaded with load_emoji_data().
    :param annotations: Localized names keyed by the emoji with
                        presentation selectors removed. Values need a
                        “tts” attribute holding a list of names.
    '''
    def __init__(self,
                 emoji: Optional[Iterable[Emoji]] = None,
                 annotations: Optional[Mapping[str, Any]] = None) -> None:
        if emoji is None:
            emoji = load_emoji_data()
        self._emoji: Tuple[Emoji, ...] = tuple(emoji)
        self._by_grapheme: Dict[str, Emoji] = {
            item.grapheme: item for item in self._emoji}
        self._annotations: Mapping[str, Any] = annotations or {}
        self._names: Dict[Emoji, str] = {}

    def __iter__(self) -> Iterator[Emoji]:
        return iter(self._emoji)

    def __len__(self) -> int:
        return len(self._emoji)

    def __getitem__(self, index: int) -> Emoji:
        return self._emoji[index]

    def get(self, grapheme: str) -> Optional[Emoji]:
        '''Returns the catalog entry for a grapheme or None'''
        return self._by_grapheme.get(grapheme)

    def localized_name(self, emoji: Emoji) -> str:
        '''Returns the name search is matched against

        This is the first text-to-speech name of the annotation of
        the emoji if there is one, else the built-in English name.

        :param emoji: A catalog entry
        '''
        if emoji in self._names:
            return self._names[emoji]
        name = emoji.name
        annotation = self._annotations.get(
            esa_util.strip_presentation_selectors(emoji.grapheme))
        if annotation is not None and annotation.tts:
            name = annotation.tts[0]
        self._names[emoji] = name
        return name

if __name__ == "__main__":
    import doctest
    (FAILED, _ATTEMPTED) = doctest.testmod()
    if FAILED:
        raise SystemExit(1)

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

'''Visual attributes of buttons and scrollbars, and the emoji font.

Button looks are a pure function of a closed set of styles and the
interaction state. The results are turned into GTK CSS by the applet.
'''

from typing import List
from typing import Dict
from typing import Optional
from typing import NamedTuple
from enum import Enum
from dataclasses import dataclass
import functools
import logging

from esa_util import Rgba, color_string_to_rgba
from esa_scrollable import Rectangle, ScrollbarPaint, ScrollbarStatus

LOGGER = logging.getLogger('emoji-selector')

TRANSPARENT = Rgba(0.0, 0.0, 0.0, 0.0)

class Component(NamedTuple):
    '''Colors of a themed component in its states'''
    base: Rgba
    hover: Rgba
    pressed: Rgba
    on: Rgba
    selected_state: Rgba = TRANSPARENT

TRANSPARENT_COMPONENT = Component(
    TRANSPARENT, TRANSPARENT, TRANSPARENT, TRANSPARENT)

def _component(base: str, hover: str, pressed: str, on: str,
               selected_state: str = '#00000000') -> Component:
    return Component(*(color_string_to_rgba(color) for color in
                       (base, hover, pressed, on, selected_state)))

class Palette(NamedTuple):
    '''The colors and corner radii buttons and scrollbars are drawn with'''
    accent: Rgba
    background_on: Rgba
    button: Component
    text_button: Component
    accent_button: Component
    destructive_button: Component
    icon_button: Component
    background_component: Component
    scrollbar_track: Rgba
    scroller: Rgba
    scroller_hovered: Rgba
    scroller_dragging: Rgba
    radius_0: float = 0.0
    radius_s: float = 4.0
    radius_m: float = 8.0
    radius_xl: float = 16.0

DEFAULT_PALETTE = Palette(
    accent=color_string_to_rgba('#3584e4'),
    background_on=color_string_to_rgba('#1e1e1e'),
    button=_component('#e0e0e0', '#d0d0d0', '#c0c0c0', '#1e1e1e'),
    text_button=_component('#00000000', '#0000001a', '#00000033',
                           '#1e1e1e'),
    accent_button=_component('#3584e4', '#4a90e8', '#1c71d8', '#ffffff'),
    destructive_button=_component('#e01b24', '#e5333b', '#c01c28',
                                  '#ffffff'),
    icon_button=_component('#00000000', '#0000001a', '#00000033',
                           '#1e1e1e', '#3584e433'),
    background_component=_component('#fafafa', '#ebebeb', '#dddddd',
                                    '#1e1e1e'),
    scrollbar_track=color_string_to_rgba('#0000000d'),
    scroller=color_string_to_rgba('#00000059'),
    scroller_hovered=color_string_to_rgba('#00000080'),
    scroller_dragging=color_string_to_rgba('#000000a6'),
)

class ButtonStyle(Enum):
    '''The button styles, STANDARD is the default'''
    APPLET_ICON = 'applet-icon'
    APPLET_MENU = 'applet-menu'
    DESTRUCTIVE = 'destructive'
    HEADER_BAR = 'header-bar'
    ICON = 'icon'
    ICON_VERTICAL = 'icon-vertical'
    IMAGE = 'image'
    LINK = 'link'
    MENU_ITEM = 'menu-item'
    MENU_ROOT = 'menu-root'
    STANDARD = 'standard'
    SUGGESTED = 'suggested'
    TEXT = 'text'
    TRANSPARENT = 'transparent'

class ButtonState(Enum):
    ACTIVE = 'active'
    HOVERED = 'hovered'
    PRESSED = 'pressed'

@dataclass
class Appearance:
    '''How a button looks'''
    background: Optional[Rgba] = None
    overlay: Optional[Rgba] = None
    text_color: Optional[Rgba] = None
    icon_color: Optional[Rgba] = None
    border_radius: float = 0.0
    border_width: float = 0.0
    border_color: Rgba = TRANSPARENT
    outline_width: float = 0.0
    outline_color: Rgba = TRANSPARENT

_ICON_STYLES = (ButtonStyle.ICON, ButtonStyle.ICON_VERTICAL,
                ButtonStyle.HEADER_BAR)

def _state_color(component: Component, state: ButtonState) -> Rgba:
    if state is ButtonState.HOVERED:
        return component.hover
    if state is ButtonState.PRESSED:
        return component.pressed
    return component.base

def appearance(style: ButtonStyle,
               state: ButtonState = ButtonState.ACTIVE,
               focused: bool = False,
               selected: bool = False,
               palette: Palette = DEFAULT_PALETTE) -> Appearance:
    '''Returns the appearance of a button

    :param style: The style of the button
    :param state: Whether the button is idle, hovered or pressed
    :param focused: Whether the button has the keyboard focus
    :param selected: Whether the button is selected (toggled on)
    :param palette: The colors to use

    Examples:

    >>> appearance(ButtonStyle.LINK).background is None
    True

    >>> appearance(ButtonStyle.ICON, selected=True).icon_color == (
    ...     DEFAULT_PALETTE.accent)
    True

    >>> appearance(ButtonStyle.STANDARD, focused=True).outline_width
    1.0
    '''
    result = Appearance()
    radius = palette.radius_xl
    on_color = palette.background_on
    if style in (ButtonStyle.STANDARD, ButtonStyle.TEXT,
                 ButtonStyle.SUGGESTED, ButtonStyle.DESTRUCTIVE,
                 ButtonStyle.TRANSPARENT):
        component = {
            ButtonStyle.STANDARD: palette.button,
            ButtonStyle.TEXT: palette.text_button,
            ButtonStyle.SUGGESTED: palette.accent_button,
            ButtonStyle.DESTRUCTIVE: palette.destructive_button,
            ButtonStyle.TRANSPARENT: TRANSPARENT_COMPONENT,
        }[style]
        result.background = _state_color(component, state)
        if style is not ButtonStyle.STANDARD:
            result.text_color = component.on
            result.icon_color = component.on
    elif style in _ICON_STYLES:
        if style is ButtonStyle.ICON_VERTICAL:
            radius = palette.radius_m
            if selected:
                result.overlay = palette.icon_button.selected_state
        if focused or selected:
            result.icon_color = palette.accent
            result.text_color = palette.accent
        result.background = _state_color(palette.icon_button, state)
    elif style is ButtonStyle.IMAGE:
        result.text_color = palette.accent
        result.icon_color = palette.accent
        result.border_radius = palette.radius_s
        if focused or selected:
            result.border_width = 2.0
            result.border_color = palette.accent
        return result
    elif style is ButtonStyle.LINK:
        result.text_color = palette.accent
        result.icon_color = palette.accent
        radius = palette.radius_0
    elif style in (ButtonStyle.APPLET_MENU, ButtonStyle.APPLET_ICON):
        result.background = _state_color(palette.text_button, state)
        result.text_color = on_color
        result.icon_color = on_color
        if style is ButtonStyle.APPLET_MENU:
            radius = palette.radius_0
    elif style is ButtonStyle.MENU_ITEM:
        result.background = _state_color(palette.background_component, state)
        result.text_color = on_color
        result.icon_color = on_color
        radius = palette.radius_s
    # MENU_ROOT has neither background nor colors
    result.border_radius = radius
    if focused:
        result.outline_width = 1.0
        result.outline_color = palette.accent
        result.border_width = 2.0
        result.border_color = TRANSPARENT
    return result

def appearance_css(selector: str, button: Appearance) -> str:
    '''Returns a GTK CSS rule for an appearance

    Examples:

    >>> print(appearance_css('.link', appearance(ButtonStyle.LINK)))
    .link { background-image: none; background-color: transparent; color: rgba(53,132,228,1); border-radius: 0px; border-width: 0px; border-style: solid; border-color: rgba(0,0,0,0); outline-width: 0px; }
    '''
    declarations = ['background-image: none']
    if button.overlay is not None:
        declarations.append(
            'background-image: linear-gradient(%s, %s)'
            % (button.overlay.to_css(), button.overlay.to_css()))
    if button.background is None:
        declarations.append('background-color: transparent')
    else:
        declarations.append(
            f'background-color: {button.background.to_css()}')
    if button.text_color is not None:
        declarations.append(f'color: {button.text_color.to_css()}')
    declarations.append(f'border-radius: {button.border_radius:g}px')
    declarations.append(f'border-width: {button.border_width:g}px')
    declarations.append('border-style: solid')
    declarations.append(f'border-color: {button.border_color.to_css()}')
    declarations.append(f'outline-width: {button.outline_width:g}px')
    if button.outline_width:
        declarations.append('outline-style: solid')
        declarations.append(
            f'outline-color: {button.outline_color.to_css()}')
    return selector + ' { ' + '; '.join(declarations) + '; }'

_PSEUDO_CLASSES: Dict[ButtonState, str] = {
    ButtonState.ACTIVE: '',
    ButtonState.HOVERED: ':hover',
    ButtonState.PRESSED: ':active',
}

@functools.lru_cache(maxsize=None)
def button_css(palette: Palette = DEFAULT_PALETTE) -> str:
    '''Returns the GTK CSS for all button styles

    A button gets the style class “esa-<style>”. The selected form
    uses the “:checked” pseudo class, the focused one “:focus”.
    '''
    rules = []
    for style in ButtonStyle:
        for state, pseudo_class in _PSEUDO_CLASSES.items():
            selector = f'button.esa-{style.value}{pseudo_class}'
            rules.append(appearance_css(
                selector, appearance(style, state, palette=palette)))
            rules.append(appearance_css(
                selector + ':checked',
                appearance(style, state, selected=True, palette=palette)))
        rules.append(appearance_css(
            f'button.esa-{style.value}:focus',
            appearance(style, focused=True, palette=palette)))
    return '\n'.join(rules) + '\n'

class ScrollbarAppearance(NamedTuple):
    '''How a scrollbar track and its scroller look'''
    background: Optional[Rgba]
    border_radius: float
    border_width: float
    border_color: Rgba
    scroller_color: Rgba
    scroller_border_radius: float
    scroller_border_width: float
    scroller_border_color: Rgba

def scrollbar_appearance(status: ScrollbarStatus,
                         mouse_over: bool = False,
                         palette: Palette = DEFAULT_PALETTE
                         ) -> ScrollbarAppearance:
    '''Returns the look of a scrollbar

    The track is only shown while the pointer is over the scrollbar
    or the scroller is dragged.
    '''
    show_track = (status is ScrollbarStatus.DRAGGING
                  or (status is ScrollbarStatus.HOVERED and mouse_over))
    if status is ScrollbarStatus.DRAGGING:
        scroller_color = palette.scroller_dragging
    elif status is ScrollbarStatus.HOVERED and mouse_over:
        scroller_color = palette.scroller_hovered
    else:
        scroller_color = palette.scroller
    return ScrollbarAppearance(
        background=palette.scrollbar_track if show_track else None,
        border_radius=palette.radius_s,
        border_width=0.0,
        border_color=TRANSPARENT,
        scroller_color=scroller_color,
        scroller_border_radius=palette.radius_s,
        scroller_border_width=0.0,
        scroller_border_color=TRANSPARENT)

class Quad(NamedTuple):
    '''A filled rounded rectangle'''
    bounds: Rectangle
    color: Rgba
    border_radius: float = 0.0
    border_width: float = 0.0
    border_color: Rgba = TRANSPARENT

def scrollbar_quads(paint: ScrollbarPaint,
                    look: ScrollbarAppearance) -> List[Quad]:
    '''Returns the quads to fill for one scrollbar

    The track is drawn if it has a size and a background or a
    visible border, the scroller if it has a size and a visible
    color or border.
    '''
    quads = []
    track = paint.track
    if (track.width > 0 and track.height > 0
            and (look.background is not None
                 or (look.border_color.alpha > 0
                     and look.border_width > 0))):
        quads.append(Quad(track,
                          look.background or TRANSPARENT,
                          look.border_radius,
                          look.border_width,
                          look.border_color))
    scroller = paint.scroller
    if (scroller.width > 0 and scroller.height > 0
            and (look.scroller_color.alpha > 0
                 or (look.scroller_border_color.alpha > 0
                     and look.scroller_border_width > 0))):
        quads.append(Quad(scroller,
                          look.scroller_color,
                          look.scroller_border_radius,
                          look.scroller_border_width,
                          look.scroller_border_color))
    return quads

@dataclass(frozen=True)
class FontHandle:
    '''The font emoji are rendered with

    Created from the configuration when it is loaded and replaced by
    a new handle whenever the configured family changes.
    '''
    family: str
    size: float = 25.0

    @classmethod
    def from_config(cls,
                    family: str,
                    override: Optional[str] = None,
                    size: float = 25.0) -> 'FontHandle':
        '''Returns the handle for the configured family

        :param family: The family from the configuration
        :param override: A family given on the command line, wins
                         if not empty
        '''
        return cls(family=override or family, size=size)

    def reload(self, family: str) -> 'FontHandle':
        '''Returns the handle to use after a configuration change'''
        if family == self.family:
            return self
        LOGGER.info('Emoji font changed from %r to %r', self.family, family)
        return FontHandle(family=family, size=self.size)

    def css(self, selector: str = '.esa-emoji') -> str:
        '''
        Examples:

        >>> print(FontHandle('Noto Color Emoji').css())
        .esa-emoji { font-family: "Noto Color Emoji"; font-size: 25px; }
        '''
        family = self.family.replace('\\', '\\\\').replace('"', '\\"')
        return (f'{selector} {{ font-family: "{family}"; '
                f'font-size: {self.size:g}px; }}')

if __name__ == "__main__":
    import doctest
    (FAILED, _ATTEMPTED) = doctest.testmod()
    if FAILED:
        raise SystemExit(1)

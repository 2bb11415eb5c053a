#!/usr/bin/python3
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
A panel applet to browse, search and copy emoji
'''

from typing import Any
from typing import List
from typing import Dict
from typing import Union
from typing import Optional
from typing import Callable
import os
import sys
import signal
import argparse
import locale
import logging
import logging.handlers
import gettext

from gi import require_version # type: ignore
# pylint: disable=wrong-import-position
require_version('Gdk', '3.0')
from gi.repository import Gdk
require_version('Gtk', '3.0')
from gi.repository import Gtk
from gi.repository import GLib
require_version('Pango', '1.0')
from gi.repository import Pango
require_version('PangoCairo', '1.0')
from gi.repository import PangoCairo
# pylint: enable=wrong-import-position

import esa_util
import esa_style
import esa_clipboard
from esa_emoji import Emoji, EmojiCatalog, Group
from esa_annotations import load_annotations
from esa_config import Config, ConfigStore, ClickMode
from esa_state import SelectorState, GridGeometry, KeyAction
from esa_state import PopupController, PopupIntent, action_for_key
from esa_scrollable import (
    AbsoluteOffset, ButtonPressed, ButtonReleased, Cursor, CursorMoved,
    Direction, EventStatus, FingerLifted, FingerLost, FingerMoved,
    FingerPressed, Interaction, Layout, Limits, Lines, ModifiersChanged,
    MouseButton, Pixels, Point, Rectangle, RelativeOffset, Scrollable,
    Size, StateTree, Vector, Viewport, WheelScrolled, layout)

LOGGER = logging.getLogger('emoji-selector')

DOMAINNAME = 'emoji-selector'
_: Callable[[str], str] = lambda a: gettext.dgettext(DOMAINNAME, a)
N_: Callable[[str], str] = lambda a: a

POPUP_MIN_WIDTH = 300
POPUP_MAX_WIDTH = 475
POPUP_MIN_HEIGHT = 200
POPUP_MAX_HEIGHT = 1080
GRID_HEIGHT = 500
GRID_COLUMNS = 10
GRID_CELL = 35

# Fraction of the visible height scrolled by Page_Up and Page_Down
PAGE_FRACTION = 0.9

def parse_args() -> Any:
    '''
    Parse the command line arguments.
    '''
    parser = argparse.ArgumentParser(
        description='An emoji selector for the desktop panel')
    parser.add_argument(
        '-l', '--languages',
        nargs='?',
        type=str,
        action='store',
        default='',
        help=('Set a list of languages used for the names of emoji. '
              'For example: "emoji-applet -l de:fr" '
              'would use German and French. '
              'If empty, the locale settings are used to '
              'determine the languages.'))
    parser.add_argument(
        '-f', '--font',
        nargs='?',
        type=str,
        action='store',
        default=None,
        help=('Set a font to display emoji. '
              'If not specified, the font is read from the config file. '
              'default: "%(default)s"'))
    parser.add_argument(
        '-p', '--popup',
        action='store_true',
        default=False,
        help=('Open the popup right away. '
              'default: %(default)s'))
    parser.add_argument(
        '-d', '--debug',
        action='store_true',
        default=False,
        help=('Print some debug output to stdout. '
              'default: %(default)s'))
    parser.add_argument(
        '--log-file',
        action='store_true',
        default=False,
        help=('Write debug output to a log file in the user data '
              'directory, rotated at midnight. '
              'default: %(default)s'))
    parser.add_argument(
        '--version',
        action='store_true',
        default=False,
        help=('Output version information and exit. '
              'default: %(default)s'))
    return parser.parse_args()

_ARGS = parse_args()

class EmojiGridArea(Gtk.DrawingArea): # type: ignore
    '''
    The emoji grid inside a scrollable region

    Draws the favorites and the matching emoji of a SelectorState
    and feeds all pointer, wheel and touch events through the
    scrollable region.
    '''
    def __init__(self,
                 state: SelectorState,
                 font: esa_style.FontHandle,
                 on_activate: Callable[[Emoji, MouseButton], None],
                 on_hover: Callable[[], None]) -> None:
        Gtk.DrawingArea.__init__(self)
        self._state = state
        self._font = font
        self._on_activate = on_activate
        self._on_hover = on_hover
        self._tree = StateTree()
        self._scrollable = Scrollable(
            self._tree,
            direction=Direction.vertical_only(),
            on_scroll=self._on_scroll,
            widget_id='emoji-grid',
            name=_('Emoji'))
        self._cursor = Cursor()
        self._grid = GridGeometry([], GRID_COLUMNS, GRID_CELL)
        self._layout = Layout(Rectangle(), [Layout(Rectangle())])
        self.set_size_request(GRID_COLUMNS * GRID_CELL, GRID_HEIGHT)
        self.set_can_focus(False)
        self.set_has_tooltip(True)
        self.add_events(
            Gdk.EventMask.POINTER_MOTION_MASK
            | Gdk.EventMask.BUTTON_PRESS_MASK
            | Gdk.EventMask.BUTTON_RELEASE_MASK
            | Gdk.EventMask.SCROLL_MASK
            | Gdk.EventMask.SMOOTH_SCROLL_MASK
            | Gdk.EventMask.TOUCH_MASK
            | Gdk.EventMask.LEAVE_NOTIFY_MASK)
        self.connect('draw', self._on_draw)
        self.connect('size-allocate', self._on_size_allocate)
        self.connect('motion-notify-event', self._on_motion_notify)
        self.connect('button-press-event', self._on_button_press)
        self.connect('button-release-event', self._on_button_release)
        self.connect('scroll-event', self._on_scroll_event)
        self.connect('touch-event', self._on_touch_event)
        self.connect('leave-notify-event', self._on_leave_notify)
        self.connect('query-tooltip', self._on_query_tooltip)

    def set_font(self, font: esa_style.FontHandle) -> None:
        self._font = font
        self.queue_draw()

    def refresh(self, scroll_to_start: bool = False) -> None:
        '''Call after the lists of the SelectorState changed'''
        self._grid = GridGeometry(
            [len(self._state.favorites), len(self._state.matches)],
            GRID_COLUMNS, GRID_CELL)
        if scroll_to_start:
            self._scrollable.scroll_to(AbsoluteOffset(0.0, 0.0))
        self._relayout()
        self.queue_draw()

    def _relayout(self) -> None:
        allocation = self.get_allocation()
        self._layout = layout(
            Limits(max=Size(allocation.width, allocation.height)),
            self._scrollable.direction,
            lambda limits: self._grid.content_size())
        self._update_accessible()

    def _update_accessible(self) -> None:
        node = self._scrollable.a11y_nodes(self._layout, self._cursor)
        accessible = self.get_accessible()
        if accessible is None:
            return
        accessible.set_name(node.name or '')
        for child in node.children:
            if child.numeric_value is not None:
                accessible.set_description(
                    _('Scrolled to %d%%') % round(child.numeric_value))
                return
        accessible.set_description('')

    def _emoji_at(self, position: Optional[Point]) -> Optional[Emoji]:
        if position is None:
            return None
        hit = self._grid.hit(position)
        if hit is None:
            return None
        section, index = hit
        if section == 0:
            return self._state.favorites[index]
        return self._state.matches[index]

    def scroll_home(self) -> None:
        self._scrollable.scroll_to(AbsoluteOffset(0.0, 0.0))
        self._after_scroll()

    def scroll_end(self) -> None:
        self._scrollable.snap_to(RelativeOffset(0.0, 1.0))
        self._after_scroll()

    def scroll_page(self, pages: int) -> None:
        '''Scrolls down (pages > 0) or up (pages < 0)'''
        height = self._layout.bounds.height * PAGE_FRACTION
        self._scrollable.scroll_by(Vector(0.0, -pages * height), self._layout)
        self._after_scroll()

    def _after_scroll(self) -> None:
        self._update_accessible()
        self.queue_draw()

    def _on_scroll(self, viewport: Viewport) -> None:
        LOGGER.debug('Scrolled to %s', viewport.relative_offset())

    def _update_content(self,
                        event: Any,
                        content_layout: Layout,
                        cursor: Cursor,
                        _viewport: Rectangle) -> EventStatus:
        '''Handles the events for the emoji cells'''
        if isinstance(event, CursorMoved):
            emoji = self._emoji_at(cursor.position)
            if emoji is not self._state.hovered:
                self._state.hovered = emoji
                self._on_hover()
                self.queue_draw()
            return EventStatus.IGNORED
        if isinstance(event, ButtonPressed):
            emoji = self._emoji_at(cursor.position)
            if emoji is None:
                return EventStatus.IGNORED
            self._on_activate(emoji, event.button)
            return EventStatus.CAPTURED
        return EventStatus.IGNORED

    def _content_interaction(self,
                             content_layout: Layout,
                             cursor: Cursor,
                             _viewport: Rectangle) -> Interaction:
        if self._emoji_at(cursor.position) is not None:
            return Interaction.POINTER
        return Interaction.IDLE

    def _dispatch(self, event: Any, cursor: Cursor) -> bool:
        self._cursor = cursor
        status = self._scrollable.update(
            event, self._layout, cursor, self._update_content)
        interaction = self._scrollable.mouse_interaction(
            self._layout, cursor, self._content_interaction)
        window = self.get_window()
        if window is not None:
            window.set_cursor(Gdk.Cursor.new_from_name(
                self.get_display(), interaction.value))
        if status is EventStatus.CAPTURED:
            self._after_scroll()
        else:
            self.queue_draw()
        return status is EventStatus.CAPTURED

    def _on_size_allocate(self, _widget: Gtk.Widget, _allocation: Any) -> None:
        self._relayout()

    def _on_motion_notify(self,
                          _widget: Gtk.Widget,
                          event: Gdk.EventMotion) -> bool:
        position = Point(event.x, event.y)
        return self._dispatch(CursorMoved(position), Cursor(position))

    def _on_button_press(self,
                         _widget: Gtk.Widget,
                         event: Gdk.EventButton) -> bool:
        if event.type != Gdk.EventType.BUTTON_PRESS:
            return False
        try:
            button = MouseButton(event.button)
        except ValueError:
            return False
        position = Point(event.x, event.y)
        return self._dispatch(ButtonPressed(button), Cursor(position))

    def _on_button_release(self,
                           _widget: Gtk.Widget,
                           event: Gdk.EventButton) -> bool:
        try:
            button = MouseButton(event.button)
        except ValueError:
            return False
        position = Point(event.x, event.y)
        return self._dispatch(ButtonReleased(button), Cursor(position))

    def _on_scroll_event(self,
                         _widget: Gtk.Widget,
                         event: Gdk.EventScroll) -> bool:
        position = Point(event.x, event.y)
        shift = bool(event.state & Gdk.ModifierType.SHIFT_MASK)
        self._dispatch(ModifiersChanged(shift), Cursor(position))
        delta: Union[Lines, Pixels]
        if event.direction == Gdk.ScrollDirection.SMOOTH:
            (_ok, delta_x, delta_y) = event.get_scroll_deltas()
            delta = Lines(-delta_x, -delta_y)
        elif event.direction == Gdk.ScrollDirection.UP:
            delta = Lines(0.0, 1.0)
        elif event.direction == Gdk.ScrollDirection.DOWN:
            delta = Lines(0.0, -1.0)
        elif event.direction == Gdk.ScrollDirection.LEFT:
            delta = Lines(1.0, 0.0)
        else:
            delta = Lines(-1.0, 0.0)
        return self._dispatch(WheelScrolled(delta), Cursor(position))

    def _on_touch_event(self,
                        _widget: Gtk.Widget,
                        event: Gdk.EventTouch) -> bool:
        finger = hash(event.sequence) if event.sequence is not None else 0
        events = {
            Gdk.EventType.TOUCH_BEGIN: FingerPressed,
            Gdk.EventType.TOUCH_UPDATE: FingerMoved,
            Gdk.EventType.TOUCH_END: FingerLifted,
            Gdk.EventType.TOUCH_CANCEL: FingerLost,
        }
        if event.type not in events:
            return False
        position = Point(event.x, event.y)
        return self._dispatch(events[event.type](finger), Cursor(position))

    def _on_leave_notify(self,
                         _widget: Gtk.Widget,
                         _event: Gdk.EventCrossing) -> bool:
        self._dispatch(CursorMoved(Point(-1.0, -1.0)), Cursor(None))
        return False

    def _on_query_tooltip(self,
                          _widget: Gtk.Widget,
                          x: int,
                          y: int,
                          _keyboard_mode: bool,
                          tooltip: Gtk.Tooltip) -> bool:
        if not self._state.config.show_tooltip:
            return False
        translation = self._scrollable.translation(self._layout)
        emoji = self._emoji_at(Point(x, y) + translation)
        if emoji is None:
            return False
        tooltip.set_text(self._state.localized_name(emoji))
        return True

    def _font_description(self) -> Pango.FontDescription:
        description = Pango.FontDescription()
        description.set_family(self._font.family)
        description.set_absolute_size(self._font.size * Pango.SCALE)
        return description

    def _on_draw(self, _widget: Gtk.Widget, cairo_context: Any) -> bool:
        info = self._scrollable.draw(self._layout, self._cursor)
        cairo_context.save()
        cairo_context.rectangle(*info.clip)
        cairo_context.clip()
        cairo_context.translate(-info.translation.x, -info.translation.y)
        visible = info.clip.translate(info.translation)
        pango_layout = PangoCairo.create_layout(cairo_context)
        pango_layout.set_font_description(self._font_description())
        hover = esa_style.appearance(
            esa_style.ButtonStyle.ICON, esa_style.ButtonState.HOVERED)
        for section, index, bounds in self._grid.cells_in(visible):
            if section == 0:
                emoji = self._state.favorites[index]
            else:
                emoji = self._state.matches[index]
            if emoji is self._state.hovered and hover.background is not None:
                cairo_context.set_source_rgba(*hover.background)
                _rounded_rectangle(cairo_context, bounds, hover.border_radius)
                cairo_context.fill()
            pango_layout.set_text(emoji.grapheme, -1)
            (_ink, logical) = pango_layout.get_pixel_extents()
            cairo_context.move_to(
                bounds.x + (bounds.width - logical.width) / 2,
                bounds.y + (bounds.height - logical.height) / 2)
            cairo_context.set_source_rgba(0.0, 0.0, 0.0, 1.0)
            PangoCairo.show_layout(cairo_context, pango_layout)
        cairo_context.restore()
        for paint in info.scrollbars:
            look = esa_style.scrollbar_appearance(paint.status,
                                                  paint.mouse_over)
            for quad in esa_style.scrollbar_quads(paint, look):
                cairo_context.set_source_rgba(*quad.color)
                _rounded_rectangle(cairo_context, quad.bounds,
                                   quad.border_radius)
                cairo_context.fill()
        return True

def _rounded_rectangle(cairo_context: Any,
                       bounds: Rectangle,
                       radius: float) -> None:
    radius = min(radius, bounds.width / 2, bounds.height / 2)
    x, y, width, height = bounds
    cairo_context.new_sub_path()
    cairo_context.arc(x + width - radius, y + radius, radius, -1.5708, 0)
    cairo_context.arc(x + width - radius, y + height - radius, radius,
                      0, 1.5708)
    cairo_context.arc(x + radius, y + height - radius, radius,
                      1.5708, 3.14159)
    cairo_context.arc(x + radius, y + radius, radius, 3.14159, 4.71239)
    cairo_context.close_path()

class EmojiPopup(Gtk.Window): # type: ignore
    '''
    The popup with the group buttons, the search entry, the skin
    tone toggles, the emoji grid and the preview
    '''
    def __init__(self,
                 catalog: EmojiCatalog,
                 config_store: ConfigStore,
                 config: Config,
                 font: esa_style.FontHandle,
                 on_close: Callable[[], None]) -> None:
        Gtk.Window.__init__(self, title=_('Emoji Selector'))
        self.set_name('EmojiSelectorPopup')
        self.set_decorated(False)
        self.set_skip_taskbar_hint(True)
        self.set_keep_above(True)
        self.set_type_hint(Gdk.WindowTypeHint.DIALOG)
        geometry = Gdk.Geometry()
        geometry.min_width = POPUP_MIN_WIDTH
        geometry.min_height = POPUP_MIN_HEIGHT
        geometry.max_width = POPUP_MAX_WIDTH
        geometry.max_height = POPUP_MAX_HEIGHT
        self.set_geometry_hints(
            None, geometry,
            Gdk.WindowHints.MIN_SIZE | Gdk.WindowHints.MAX_SIZE)
        self._config_store = config_store
        self._font = font
        self._on_close = on_close
        self._state = SelectorState(catalog, config)
        self._clipboard = Gtk.Clipboard.get(Gdk.SELECTION_CLIPBOARD)
        self._style_provider = Gtk.CssProvider()
        Gtk.StyleContext.add_provider_for_screen(
            Gdk.Screen.get_default(),
            self._style_provider,
            Gtk.STYLE_PROVIDER_PRIORITY_APPLICATION)
        self._load_css()

        vbox = Gtk.Box(orientation=Gtk.Orientation.VERTICAL, spacing=8)
        vbox.set_margin_start(8)
        vbox.set_margin_end(8)
        vbox.set_margin_top(8)
        vbox.set_margin_bottom(8)
        self.add(vbox)

        group_box = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL)
        group_box.set_homogeneous(True)
        self._group_buttons: Dict[Group, Gtk.ToggleButton] = {}
        self._group_handlers: Dict[Group, int] = {}
        for group in Group:
            button = Gtk.ToggleButton(label=group.symbol)
            button.get_style_context().add_class('esa-icon')
            button.get_style_context().add_class('esa-emoji-small')
            button.set_tooltip_text(f'{group.value}: {group.label}')
            button.set_relief(Gtk.ReliefStyle.NONE)
            self._group_handlers[group] = button.connect(
                'toggled', self._on_group_toggled, group)
            self._group_buttons[group] = button
            group_box.pack_start(button, True, True, 0)
        vbox.pack_start(group_box, False, False, 0)

        self._search_entry = Gtk.SearchEntry()
        self._search_entry.set_placeholder_text(_('Search for emoji'))
        self._search_entry.connect('search-changed', self._on_search_changed)
        vbox.pack_start(self._search_entry, False, False, 0)

        tone_box = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=4)
        self._tone_buttons: List[Gtk.ToggleButton] = []
        self._tone_handlers: List[int] = []
        for number, quick_toggle in enumerate(config.quick_toggles()):
            button = Gtk.ToggleButton()
            button.set_size_request(24, 24)
            button.get_style_context().add_class(f'esa-tone-{number}')
            self._tone_handlers.append(button.connect(
                'toggled', self._on_tone_toggled, quick_toggle.mode))
            self._tone_buttons.append(button)
            tone_box.pack_start(button, False, False, 0)
        vbox.pack_start(tone_box, False, False, 0)

        self._grid_area = EmojiGridArea(
            self._state, font, self._on_emoji_activated, self._update_preview)
        vbox.pack_start(self._grid_area, True, True, 0)

        self._preview_box = Gtk.Box(
            orientation=Gtk.Orientation.HORIZONTAL, spacing=8)
        self._preview_emoji = Gtk.Label()
        self._preview_emoji.get_style_context().add_class('esa-emoji')
        self._preview_box.pack_start(self._preview_emoji, False, False, 0)
        self._preview_name = Gtk.Label()
        self._preview_name.set_xalign(0)
        self._preview_name.set_line_wrap(True)
        self._preview_name.set_selectable(True)
        self._preview_box.pack_start(self._preview_name, True, True, 0)
        vbox.pack_start(self._preview_box, False, False, 0)

        self.connect('key-press-event', self._on_key_press)
        self.connect('delete-event', self._on_delete_event)
        vbox.show_all()
        self._sync_buttons()
        self._grid_area.refresh(scroll_to_start=True)
        self._update_preview()

    def _load_css(self) -> None:
        css = esa_style.button_css()
        css += self._font.css('.esa-emoji') + '\n'
        css += esa_style.FontHandle(self._font.family, 16).css(
            '.esa-emoji-small') + '\n'
        for number, quick_toggle in enumerate(
                self._state.config.quick_toggles()):
            css += (f'button.esa-tone-{number} {{ background-image: none; '
                    f'background-color: {quick_toggle.color.to_css()}; '
                    f'border-radius: 12px; }}\n'
                    f'button.esa-tone-{number}:checked {{ '
                    f'border: 2px solid @theme_selected_bg_color; }}\n')
        try:
            self._style_provider.load_from_data(css.encode('utf-8'))
        except GLib.Error as error:
            LOGGER.exception('Error loading CSS: %s: %s',
                             error.__class__.__name__, error)

    def set_font(self, font: esa_style.FontHandle) -> None:
        self._font = font
        self._load_css()
        self._grid_area.set_font(font)

    def set_config(self, config: Config) -> None:
        '''Uses a configuration loaded again from the file'''
        self._state.refilter(config)
        self._load_css()
        self._sync_buttons()
        self._grid_area.refresh()
        self._update_preview()

    def open(self) -> None:
        '''Shows the popup with hover and scroll position reset'''
        self._state.reset()
        self._grid_area.refresh(scroll_to_start=True)
        self._update_preview()
        self.show()
        self.present()
        # Digits and arrows are shortcuts until slash focuses the search
        self.set_focus(None)

    def _sync_buttons(self) -> None:
        for group, button in self._group_buttons.items():
            with button.handler_block(self._group_handlers[group]):
                button.set_active(group is self._state.selected_group)
        for button, handler, quick_toggle in zip(
                self._tone_buttons,
                self._tone_handlers,
                self._state.config.quick_toggles()):
            with button.handler_block(handler):
                button.set_active(quick_toggle.active)

    def _update_preview(self) -> None:
        config = self._state.config
        if not config.show_preview:
            self._preview_box.hide()
            return
        self._preview_box.show()
        emoji = self._state.relevant()
        if emoji is None:
            self._preview_emoji.set_text('')
            self._preview_name.set_text(_('No emoji found'))
            return
        self._preview_emoji.set_text(emoji.grapheme)
        text = self._state.localized_name(emoji)
        if config.show_unicode:
            text += '\n' + esa_util.codepoints(emoji.grapheme)
        self._preview_name.set_text(text)

    def _group_changed(self) -> None:
        self._sync_buttons()
        self._grid_area.refresh(scroll_to_start=True)
        self._update_preview()

    def _on_group_toggled(self, _button: Gtk.ToggleButton,
                          group: Group) -> None:
        if self._state.toggle_group(group):
            self._group_changed()

    def _on_tone_toggled(self, _button: Gtk.ToggleButton,
                         mode: Any) -> None:
        config = self._state.config.toggle_skin_tone(mode)
        self._config_store.save(config)
        self._state.refilter(config)
        self._sync_buttons()
        self._grid_area.refresh(scroll_to_start=True)
        self._update_preview()

    def _on_search_changed(self, entry: Gtk.SearchEntry) -> None:
        self._state.set_search(entry.get_text())
        self._grid_area.refresh(scroll_to_start=True)
        self._update_preview()

    def _copy_relevant(self) -> None:
        emoji = self._state.relevant()
        if emoji is not None:
            self._activate(emoji, self._state.config.click_left)

    def _on_emoji_activated(self, emoji: Emoji, button: MouseButton) -> None:
        self._activate(emoji, self._state.config.click_mode(button.value))

    def _activate(self, emoji: Emoji, mode: ClickMode) -> None:
        LOGGER.debug('Activated %s with %s', emoji.grapheme, mode)
        activation = self._state.activate(emoji, mode)
        if ClickMode.APPEND in mode:
            self._search_entry.set_text(self._state.search)
            self._search_entry.set_position(-1)
        if activation.copy_text is not None:
            GLib.idle_add(self._copy, activation.copy_text)
        if activation.config_changed:
            self._config_store.save(activation.config)
        self._grid_area.refresh()
        self._update_preview()
        if activation.close:
            self._close()

    def _set_clipboard(self, text: str) -> None:
        self._clipboard.set_text(text, -1)
        # Keep the text available after the popup is gone
        self._clipboard.store()

    def _copy(self, text: str) -> bool:
        esa_clipboard.copy_text(text, self._set_clipboard)
        return False

    def _close(self) -> None:
        self.hide()
        self._on_close()

    def _on_delete_event(self, *_args: Any) -> bool:
        self._close()
        return True

    def _on_key_press(self, _window: Gtk.Window, event: Gdk.EventKey) -> bool:
        keyname = Gdk.keyval_name(event.keyval)
        if keyname is None:
            return False
        command = action_for_key(
            keyname, search_focused=self._search_entry.is_focus())
        if command is None:
            return False
        (action, digit) = command
        LOGGER.debug('Key %s: %s', keyname, action)
        if action is KeyAction.FOCUS_SEARCH:
            self._search_entry.grab_focus()
        elif action is KeyAction.SELECT_GROUP:
            if self._state.select_digit(digit):
                self._group_changed()
        elif action is KeyAction.NEXT_GROUP:
            if self._state.cycle_group(1):
                self._group_changed()
        elif action is KeyAction.PREVIOUS_GROUP:
            if self._state.cycle_group(-1):
                self._group_changed()
        elif action is KeyAction.CLOSE:
            self._close()
        elif action is KeyAction.SCROLL_HOME:
            self._grid_area.scroll_home()
        elif action is KeyAction.SCROLL_END:
            self._grid_area.scroll_end()
        elif action is KeyAction.PAGE_UP:
            self._grid_area.scroll_page(-1)
        elif action is KeyAction.PAGE_DOWN:
            self._grid_area.scroll_page(1)
        elif action is KeyAction.COPY_RELEVANT:
            self._copy_relevant()
        return True

class EmojiSelectorApplet(Gtk.Window): # type: ignore
    '''
    The panel icon, a click toggles the popup
    '''
    def __init__(self,
                 languages: List[str],
                 font: Optional[str] = None) -> None:
        Gtk.Window.__init__(self, title=_('Emoji Selector'))
        self.set_name('EmojiSelectorApplet')
        self.set_decorated(False)
        self.set_resizable(False)
        self._config_store = ConfigStore()
        self._config = self._config_store.load()
        self._font = esa_style.FontHandle.from_config(
            self._config.font_family, override=font)
        annotations = load_annotations(languages)
        self._catalog = EmojiCatalog(annotations=annotations)
        self._controller = PopupController()
        self._popup: Optional[EmojiPopup] = None
        style_provider = Gtk.CssProvider()
        style_provider.load_from_data(esa_style.button_css().encode('utf-8'))
        Gtk.StyleContext.add_provider_for_screen(
            Gdk.Screen.get_default(),
            style_provider,
            Gtk.STYLE_PROVIDER_PRIORITY_APPLICATION)

        icon_name = esa_util.APP_ID
        if not Gtk.IconTheme.get_default().has_icon(icon_name):
            icon_name = 'face-smile-symbolic'
        button = Gtk.Button()
        button.set_image(Gtk.Image.new_from_icon_name(
            icon_name, Gtk.IconSize.LARGE_TOOLBAR))
        button.get_style_context().add_class('esa-applet-icon')
        button.set_tooltip_text(_('Emoji Selector'))
        button.connect('clicked', self._on_icon_clicked)
        self.add(button)
        self.connect('destroy', Gtk.main_quit)
        self.show_all()

    def _on_icon_clicked(self, _button: Gtk.Button) -> None:
        self.toggle_popup()

    def toggle_popup(self) -> None:
        (intent, popup_id) = self._controller.toggle()
        LOGGER.debug('Popup %s: %s', popup_id, intent)
        if intent is PopupIntent.CLOSE:
            if self._popup is not None:
                self._popup.hide()
            self._controller.closed(popup_id)
            return
        # Pick up changes other instances wrote meanwhile
        config = self._config_store.load()
        font = self._font.reload(_ARGS.font or config.font_family)
        if self._popup is None:
            self._popup = EmojiPopup(
                self._catalog, self._config_store, config, font,
                self._on_popup_closed)
        else:
            self._popup.set_config(config)
            self._popup.set_font(font)
        self._font = font
        self._popup.open()

    def _on_popup_closed(self) -> None:
        if self._controller.popup is not None:
            self._controller.closed(self._controller.popup)

if __name__ == '__main__':
    LOG_HANDLER: Union[logging.NullHandler,
                       logging.StreamHandler, # type: ignore[type-arg]
                       logging.handlers.TimedRotatingFileHandler] = (
                           logging.NullHandler())
    if _ARGS.log_file:
        LOG_HANDLER = logging.handlers.TimedRotatingFileHandler(
            os.path.join(esa_util.xdg_save_data_path(esa_util.APP_NAME),
                         'debug.log'),
            when='midnight',
            interval=1,
            backupCount=7,
            encoding='UTF-8',
            delay=False,
            utc=False,
            atTime=None)
    elif _ARGS.debug:
        LOG_HANDLER = logging.StreamHandler(stream=sys.stdout)
    LOG_FORMATTER = logging.Formatter(
        '%(asctime)s %(filename)s '
        'line %(lineno)d %(funcName)s %(levelname)s: '
        '%(message)s')
    LOG_HANDLER.setFormatter(LOG_FORMATTER)
    if _ARGS.debug or _ARGS.log_file:
        LOGGER.setLevel(logging.DEBUG)
    LOGGER.addHandler(LOG_HANDLER)
    LOGGER.info('********** STARTING **********')

    # Workaround for
    # https://bugzilla.gnome.org/show_bug.cgi?id=622084
    # Bug 622084 - Ctrl+C does not exit gtk app
    signal.signal(signal.SIGINT, signal.SIG_DFL)
    try:
        locale.setlocale(locale.LC_ALL, '')
    except locale.Error:
        LOGGER.error("Using the fallback 'C' locale")
        locale.setlocale(locale.LC_ALL, 'C')

    LOCALEDIR = os.getenv('EMOJI_SELECTOR_LOCALEDIR')
    gettext.bindtextdomain(DOMAINNAME, LOCALEDIR)

    if _ARGS.version:
        print(esa_util.VERSION)
        sys.exit(0)

    APPLET = EmojiSelectorApplet(
        languages=esa_util.get_languages(_ARGS.languages),
        font=_ARGS.font)
    if _ARGS.popup:
        APPLET.toggle_popup()
    Gtk.main()

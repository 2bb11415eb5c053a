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

'''A scrollable region which does not depend on any toolkit.

The region shows a content element which may be larger than the
region itself and lets the user pan it with the mouse wheel, by
dragging the scrollbars or by touch. It keeps the scroll offset of
both axes, computes the scrollbar geometry, translates the events it
forwards into the coordinate space of the content and calls
“on_scroll” whenever the visible part of the content changed.

All geometry is in floating point pixels. No operation raises:
out of range values are clamped and NaN is treated as 0.
'''

from typing import Any
from typing import List
from typing import Tuple
from typing import Union
from typing import Optional
from typing import Callable
from typing import Iterable
from typing import NamedTuple
from enum import Enum
from dataclasses import dataclass, field, replace
import sys
import math
import logging

LOGGER = logging.getLogger('emoji-selector')

# Pixels scrolled per line of a wheel event
LINE_HEIGHT = 60.0

# Wheel deltas below this are ignored on a single-axis region
MIN_WHEEL_DELTA = 0.1

# Minimum length of a scroller so it stays grabbable on long content
MIN_SCROLLER_LENGTH = 2.0

EPSILON = sys.float_info.epsilon

def clamp(value: float, low: float, high: float) -> float:
    '''Clamps “value” into [low, high], NaN becomes “low”

    Examples:

    >>> clamp(5.0, 0.0, 1.0)
    1.0

    >>> clamp(float('nan'), 0.0, 1.0)
    0.0
    '''
    if math.isnan(value):
        return low
    return max(low, min(value, high))

def _finite(value: float) -> float:
    if math.isnan(value) or math.isinf(value):
        return 0.0
    return value

class Point(NamedTuple):
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Any) -> 'Point': # type: ignore[override]
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Any) -> 'Vector':
        return Vector(self.x - other.x, self.y - other.y)

class Vector(NamedTuple):
    x: float = 0.0
    y: float = 0.0

    def __mul__(self, factor: Any) -> 'Vector': # type: ignore[override]
        return Vector(self.x * factor, self.y * factor)

class Size(NamedTuple):
    width: float = 0.0
    height: float = 0.0

class Rectangle(NamedTuple):
    '''An axis aligned rectangle

    Examples:

    >>> Rectangle(0, 0, 10, 10).contains(Point(10, 5))
    False

    >>> Rectangle(0, 0, 10, 10).contains(Point(0, 9.5))
    True
    '''
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    def contains(self, point: Point) -> bool:
        '''Whether the point is inside, the far edges excluded'''
        return (self.x <= point.x < self.x + self.width
                and self.y <= point.y < self.y + self.height)

    def translate(self, vector: Vector) -> 'Rectangle':
        return self._replace(x=self.x + vector.x, y=self.y + vector.y)

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)

class Axis(Enum):
    X = 'x'
    Y = 'y'

class Alignment(Enum):
    '''Where the content sticks to when the offset is 0'''
    START = 'start'
    END = 'end'

class Properties(NamedTuple):
    '''Scrollbar properties of one axis'''
    width: float = 10.0
    margin: float = 0.0
    scroller_width: float = 10.0
    alignment: Alignment = Alignment.START

class Direction(NamedTuple):
    '''The axes which can be scrolled

    The default scrolls vertically only.
    '''
    horizontal: Optional[Properties] = None
    vertical: Optional[Properties] = Properties()

    @classmethod
    def vertical_only(
            cls, properties: Properties = Properties()) -> 'Direction':
        return cls(horizontal=None, vertical=properties)

    @classmethod
    def horizontal_only(
            cls, properties: Properties = Properties()) -> 'Direction':
        return cls(horizontal=properties, vertical=None)

    @classmethod
    def both(cls,
             horizontal: Properties = Properties(),
             vertical: Properties = Properties()) -> 'Direction':
        return cls(horizontal=horizontal, vertical=vertical)

    @property
    def is_vertical_only(self) -> bool:
        return self.vertical is not None and self.horizontal is None

    @property
    def is_horizontal_only(self) -> bool:
        return self.horizontal is not None and self.vertical is None

class AbsoluteOffset(NamedTuple):
    '''Scroll position in pixels from the start of the content'''
    x: float = 0.0
    y: float = 0.0

class RelativeOffset(NamedTuple):
    '''Scroll position as a fraction (0 to 1) of the scroll range'''
    x: float = 0.0
    y: float = 0.0

    @classmethod
    def start(cls) -> 'RelativeOffset':
        return cls(0.0, 0.0)

    @classmethod
    def end(cls) -> 'RelativeOffset':
        return cls(1.0, 1.0)

class Offset(NamedTuple):
    '''The offset of one axis

    Either an absolute pixel distance or a percentage of the scroll
    range which is resolved against the sizes known at that time.

    Examples:

    >>> Offset.absolute_of(500).absolute(100, 250)
    150.0

    >>> Offset.relative_of(0.5).absolute(100, 300)
    100.0

    >>> Offset.relative_of(0.5).absolute(100, 80)
    0.0
    '''
    value: float = 0.0
    relative: bool = False

    @classmethod
    def absolute_of(cls, value: float) -> 'Offset':
        return cls(_finite(float(value)), False)

    @classmethod
    def relative_of(cls, value: float) -> 'Offset':
        return cls(_finite(float(value)), True)

    def absolute(self, viewport: float, content: float) -> float:
        '''Resolves the offset to pixels'''
        scroll_range = max(content - viewport, 0.0)
        if self.relative:
            return _finite(max((content - viewport) * self.value, 0.0))
        return _finite(min(self.value, scroll_range))

    def translation(self,
                    viewport: float,
                    content: float,
                    alignment: Alignment) -> float:
        '''How far the content is moved for this offset'''
        offset = self.absolute(viewport, content)
        if alignment is Alignment.END:
            return max(max(content - viewport, 0.0) - offset, 0.0)
        return offset

@dataclass(frozen=True)
class Viewport:
    '''The visible part of the content, passed to “on_scroll”'''
    offset_x: Offset
    offset_y: Offset
    bounds: Rectangle
    content_bounds: Rectangle

    def absolute_offset(self) -> AbsoluteOffset:
        return AbsoluteOffset(
            self.offset_x.absolute(self.bounds.width,
                                   self.content_bounds.width),
            self.offset_y.absolute(self.bounds.height,
                                   self.content_bounds.height))

    def absolute_offset_reversed(self) -> AbsoluteOffset:
        '''The absolute offset measured from the end of the content

        Useful to switch the alignment while keeping the position.
        '''
        offset = self.absolute_offset()
        return AbsoluteOffset(
            max(self.content_bounds.width - self.bounds.width, 0.0)
            - offset.x,
            max(self.content_bounds.height - self.bounds.height, 0.0)
            - offset.y)

    def relative_offset(self) -> RelativeOffset:
        '''The offset as a fraction of the scroll range

        An axis without scroll range has the relative offset 0.

        Examples:

        >>> Viewport(Offset.absolute_of(0), Offset.absolute_of(50),
        ...          Rectangle(0, 0, 100, 100),
        ...          Rectangle(0, 0, 100, 300)).relative_offset()
        RelativeOffset(x=0.0, y=0.25)
        '''
        offset = self.absolute_offset()
        range_x = self.content_bounds.width - self.bounds.width
        range_y = self.content_bounds.height - self.bounds.height
        return RelativeOffset(
            offset.x / range_x if range_x > 0 else 0.0,
            offset.y / range_y if range_y > 0 else 0.0)

def _unchanged(old: float, new: float) -> bool:
    return (abs(old - new) <= EPSILON
            or (math.isnan(old) and math.isnan(new)))

@dataclass
class State:
    '''The scroll state of a region

    Both axes start at the absolute offset 0.
    '''
    offset_x: Offset = Offset()
    offset_y: Offset = Offset()
    x_scroller_grabbed_at: Optional[float] = None
    y_scroller_grabbed_at: Optional[float] = None
    scroll_area_touched_at: Optional[Point] = None
    shift_pressed: bool = False
    last_notified: Optional[Viewport] = None

    def translation(self,
                    direction: Direction,
                    bounds: Rectangle,
                    content_bounds: Rectangle) -> Vector:
        '''How far the content is moved for the current offsets'''
        translation_x = 0.0
        translation_y = 0.0
        if direction.horizontal is not None:
            translation_x = self.offset_x.translation(
                bounds.width, content_bounds.width,
                direction.horizontal.alignment)
        if direction.vertical is not None:
            translation_y = self.offset_y.translation(
                bounds.height, content_bounds.height,
                direction.vertical.alignment)
        return Vector(translation_x, translation_y)

    def scroll(self,
               delta: Vector,
               direction: Direction,
               bounds: Rectangle,
               content_bounds: Rectangle) -> None:
        '''Moves the content by “delta” pixels

        A positive delta moves the content towards its end, that is it
        scrolls back towards the start for a start aligned axis. Axes
        whose content fits into the region are left alone.
        '''
        delta_x = _finite(delta.x)
        delta_y = _finite(delta.y)
        if (direction.horizontal is not None
                and direction.horizontal.alignment is Alignment.END):
            delta_x = -delta_x
        if (direction.vertical is not None
                and direction.vertical.alignment is Alignment.END):
            delta_y = -delta_y
        if bounds.height < content_bounds.height:
            self.offset_y = Offset.absolute_of(clamp(
                self.offset_y.absolute(bounds.height, content_bounds.height)
                - delta_y,
                0.0, content_bounds.height - bounds.height))
        if bounds.width < content_bounds.width:
            self.offset_x = Offset.absolute_of(clamp(
                self.offset_x.absolute(bounds.width, content_bounds.width)
                - delta_x,
                0.0, content_bounds.width - bounds.width))

    def scroll_y_to(self,
                    percentage: float,
                    bounds: Rectangle,
                    content_bounds: Rectangle) -> None:
        '''Scrolls the y axis to a fraction of its range

        0 is the start and 1 the end. The offset is converted to an
        absolute offset right away so that a later resize does not
        make the content jump.
        '''
        self.offset_y = Offset.relative_of(clamp(percentage, 0.0, 1.0))
        self.unsnap(bounds, content_bounds)

    def scroll_x_to(self,
                    percentage: float,
                    bounds: Rectangle,
                    content_bounds: Rectangle) -> None:
        '''Scrolls the x axis to a fraction of its range'''
        self.offset_x = Offset.relative_of(clamp(percentage, 0.0, 1.0))
        self.unsnap(bounds, content_bounds)

    def scroll_to_percentage(self,
                             axis: Axis,
                             percentage: float,
                             bounds: Rectangle,
                             content_bounds: Rectangle) -> None:
        if axis is Axis.X:
            self.scroll_x_to(percentage, bounds, content_bounds)
        else:
            self.scroll_y_to(percentage, bounds, content_bounds)

    def snap_to(self, offset: RelativeOffset) -> None:
        '''Sets both axes to a relative offset

        The offset stays relative until the next unsnap().
        '''
        self.offset_x = Offset.relative_of(clamp(offset.x, 0.0, 1.0))
        self.offset_y = Offset.relative_of(clamp(offset.y, 0.0, 1.0))

    def scroll_to(self, offset: AbsoluteOffset) -> None:
        '''Sets both axes to an absolute offset'''
        self.offset_x = Offset.absolute_of(max(_finite(offset.x), 0.0))
        self.offset_y = Offset.absolute_of(max(_finite(offset.y), 0.0))

    def unsnap(self, bounds: Rectangle, content_bounds: Rectangle) -> None:
        '''Converts both offsets to absolute ones'''
        self.offset_x = Offset.absolute_of(
            self.offset_x.absolute(bounds.width, content_bounds.width))
        self.offset_y = Offset.absolute_of(
            self.offset_y.absolute(bounds.height, content_bounds.height))

    def scrollers_grabbed(self) -> bool:
        return (self.x_scroller_grabbed_at is not None
                or self.y_scroller_grabbed_at is not None)

    def notify_on_scroll(
            self,
            on_scroll: Optional[Callable[[Viewport], Any]],
            bounds: Rectangle,
            content_bounds: Rectangle) -> bool:
        '''Calls “on_scroll” if the viewport changed since the last call

        Nothing is reported while the content fits into the region.
        Returns True if “on_scroll” was called.
        '''
        if on_scroll is None:
            return False
        if (content_bounds.width <= bounds.width
                and content_bounds.height <= bounds.height):
            return False
        viewport = Viewport(self.offset_x, self.offset_y,
                            bounds, content_bounds)
        if self.last_notified is not None:
            last_relative = self.last_notified.relative_offset()
            relative = viewport.relative_offset()
            last_absolute = self.last_notified.absolute_offset()
            absolute = viewport.absolute_offset()
            if (_unchanged(last_relative.x, relative.x)
                    and _unchanged(last_relative.y, relative.y)
                    and _unchanged(last_absolute.x, absolute.x)
                    and _unchanged(last_absolute.y, absolute.y)):
                return False
        on_scroll(viewport)
        self.last_notified = viewport
        return True

class Scroller(NamedTuple):
    '''The handle of a scrollbar'''
    bounds: Rectangle

class Scrollbar(NamedTuple):
    '''Geometry of one scrollbar

    total_bounds: the area reacting to the mouse, track plus margin
    bounds: the visible track
    '''
    total_bounds: Rectangle
    bounds: Rectangle
    scroller: Scroller
    alignment: Alignment

    def is_mouse_over(self, position: Point) -> bool:
        return self.total_bounds.contains(position)

    def scroll_percentage_y(self,
                            grabbed_at: float,
                            position: Point) -> float:
        '''The y percentage putting the grab point under the cursor'''
        track = self.bounds.height - self.scroller.bounds.height
        if track <= 0:
            return 0.0
        percentage = (position.y - self.bounds.y
                      - self.scroller.bounds.height * grabbed_at) / track
        if self.alignment is Alignment.END:
            return 1.0 - percentage
        return percentage

    def scroll_percentage_x(self,
                            grabbed_at: float,
                            position: Point) -> float:
        '''The x percentage putting the grab point under the cursor'''
        track = self.bounds.width - self.scroller.bounds.width
        if track <= 0:
            return 0.0
        percentage = (position.x - self.bounds.x
                      - self.scroller.bounds.width * grabbed_at) / track
        if self.alignment is Alignment.END:
            return 1.0 - percentage
        return percentage

def _grab(scrollbar: Optional[Scrollbar],
          position: Point,
          axis: Axis) -> Optional[float]:
    if scrollbar is None or not scrollbar.total_bounds.contains(position):
        return None
    scroller = scrollbar.scroller.bounds
    if not scroller.contains(position):
        return 0.5
    if axis is Axis.Y:
        return (position.y - scroller.y) / scroller.height
    return (position.x - scroller.x) / scroller.width

class Scrollbars(NamedTuple):
    '''The scrollbars of a region, None for an axis without one'''
    y: Optional[Scrollbar]
    x: Optional[Scrollbar]

    @classmethod
    def new(cls,
            state: State,
            direction: Direction,
            bounds: Rectangle,
            content_bounds: Rectangle) -> 'Scrollbars':
        '''Computes the scrollbars for the current state

        A scrollbar exists for each scrollable axis whose content
        is larger than the region. When both exist the vertical one
        is shortened by the height of the horizontal one and the
        horizontal one by the width of the vertical one.
        '''
        translation = state.translation(direction, bounds, content_bounds)
        horizontal = direction.horizontal
        if content_bounds.width <= bounds.width:
            horizontal = None
        vertical = direction.vertical
        if content_bounds.height <= bounds.height:
            vertical = None

        y_scrollbar = None
        if vertical is not None:
            x_scrollbar_height = 0.0
            if horizontal is not None:
                x_scrollbar_height = (
                    max(horizontal.width, horizontal.scroller_width)
                    + horizontal.margin)
            total_width = (max(vertical.width, vertical.scroller_width)
                           + 2.0 * vertical.margin)
            height = max(bounds.height - x_scrollbar_height, 0.0)
            total_bounds = Rectangle(
                bounds.x + bounds.width - total_width,
                bounds.y,
                total_width,
                height)
            track = Rectangle(
                bounds.x + bounds.width - total_width / 2.0
                - vertical.width / 2.0,
                bounds.y,
                vertical.width,
                height)
            ratio = bounds.height / content_bounds.height
            scroller_height = max(track.height * ratio, MIN_SCROLLER_LENGTH)
            scroller_offset = 0.0
            if bounds.height > 0:
                scroller_offset = (translation.y * ratio * track.height
                                   / bounds.height)
            scroller = Scroller(Rectangle(
                bounds.x + bounds.width - total_width / 2.0
                - vertical.scroller_width / 2.0,
                max(track.y + scroller_offset, 0.0),
                vertical.scroller_width,
                scroller_height))
            y_scrollbar = Scrollbar(
                total_bounds, track, scroller, vertical.alignment)

        x_scrollbar = None
        if horizontal is not None:
            y_scrollbar_width = 0.0
            if y_scrollbar is not None:
                y_scrollbar_width = y_scrollbar.total_bounds.width
            total_height = (max(horizontal.width, horizontal.scroller_width)
                            + 2.0 * horizontal.margin)
            width = max(bounds.width - y_scrollbar_width, 0.0)
            total_bounds = Rectangle(
                bounds.x,
                bounds.y + bounds.height - total_height,
                width,
                total_height)
            track = Rectangle(
                bounds.x,
                bounds.y + bounds.height - total_height / 2.0
                - horizontal.width / 2.0,
                width,
                horizontal.width)
            ratio = bounds.width / content_bounds.width
            scroller_length = max(track.width * ratio, MIN_SCROLLER_LENGTH)
            scroller_offset = 0.0
            if bounds.width > 0:
                scroller_offset = (translation.x * ratio * track.width
                                   / bounds.width)
            scroller = Scroller(Rectangle(
                max(track.x + scroller_offset, 0.0),
                bounds.y + bounds.height - total_height / 2.0
                - horizontal.scroller_width / 2.0,
                scroller_length,
                horizontal.scroller_width))
            x_scrollbar = Scrollbar(
                total_bounds, track, scroller, horizontal.alignment)
        return cls(y=y_scrollbar, x=x_scrollbar)

    def is_mouse_over(self, cursor: 'Cursor') -> Tuple[bool, bool]:
        '''Returns (over y scrollbar, over x scrollbar)'''
        if cursor.position is None:
            return (False, False)
        return (
            self.y is not None and self.y.is_mouse_over(cursor.position),
            self.x is not None and self.x.is_mouse_over(cursor.position))

    def grab_y_scroller(self, position: Point) -> Optional[float]:
        '''Where the y scroller is grabbed, as a fraction of its length

        0.5 if the position is on the track but not on the scroller,
        None if it is not on the scrollbar at all.
        '''
        return _grab(self.y, position, Axis.Y)

    def grab_x_scroller(self, position: Point) -> Optional[float]:
        return _grab(self.x, position, Axis.X)

    def active(self) -> bool:
        return self.y is not None or self.x is not None

class Cursor(NamedTuple):
    '''The pointer position, None if it is not available'''
    position: Optional[Point] = None

    def position_over(self, bounds: Rectangle) -> Optional[Point]:
        if self.position is not None and bounds.contains(self.position):
            return self.position
        return None

    def is_over(self, bounds: Rectangle) -> bool:
        return self.position_over(bounds) is not None

CURSOR_UNAVAILABLE = Cursor(None)

class MouseButton(Enum):
    LEFT = 1
    MIDDLE = 2
    RIGHT = 3

@dataclass(frozen=True)
class CursorMoved:
    position: Point

@dataclass(frozen=True)
class ButtonPressed:
    button: MouseButton = MouseButton.LEFT

@dataclass(frozen=True)
class ButtonReleased:
    button: MouseButton = MouseButton.LEFT

@dataclass(frozen=True)
class Lines:
    x: float = 0.0
    y: float = 0.0

@dataclass(frozen=True)
class Pixels:
    x: float = 0.0
    y: float = 0.0

@dataclass(frozen=True)
class WheelScrolled:
    delta: Union[Lines, Pixels]

@dataclass(frozen=True)
class FingerPressed:
    finger: int = 0

@dataclass(frozen=True)
class FingerMoved:
    finger: int = 0

@dataclass(frozen=True)
class FingerLifted:
    finger: int = 0

@dataclass(frozen=True)
class FingerLost:
    finger: int = 0

@dataclass(frozen=True)
class ModifiersChanged:
    shift: bool = False

@dataclass(frozen=True)
class DndEnter:
    x: float
    y: float

@dataclass(frozen=True)
class DndMotion:
    x: float
    y: float

@dataclass(frozen=True)
class DndLeave:
    pass

TOUCH_EVENTS = (FingerPressed, FingerMoved, FingerLifted, FingerLost)

class EventStatus(Enum):
    IGNORED = 'ignored'
    CAPTURED = 'captured'

class Interaction(Enum):
    '''Mouse cursor shapes'''
    IDLE = 'default'
    POINTER = 'pointer'
    GRAB = 'grab'
    GRABBING = 'grabbing'
    TEXT = 'text'

class Length(Enum):
    FILL = 'fill'
    SHRINK = 'shrink'

class Limits(NamedTuple):
    min: Size = Size(0.0, 0.0)
    max: Size = Size(math.inf, math.inf)

    def resolve(self, width: Length, height: Length, content: Size) -> Size:
        '''The size within the limits for the requested lengths'''
        if width is Length.FILL:
            resolved_width = self.max.width
        else:
            resolved_width = clamp(content.width,
                                   self.min.width, self.max.width)
        if height is Length.FILL:
            resolved_height = self.max.height
        else:
            resolved_height = clamp(content.height,
                                    self.min.height, self.max.height)
        return Size(resolved_width, resolved_height)

@dataclass
class Layout:
    '''Bounds of a widget and its children'''
    bounds: Rectangle
    children: List['Layout'] = field(default_factory=list)

    @property
    def content(self) -> 'Layout':
        '''The layout of the (single) content child'''
        return self.children[0]

def layout(limits: Limits,
           direction: Direction,
           layout_content: Callable[[Limits], Size],
           width: Length = Length.FILL,
           height: Length = Length.FILL,
           position: Point = Point()) -> Layout:
    '''Lays out a scrollable region

    The content may grow without limit along the scrollable axes.

    :param limits: The limits of the region
    :param direction: The scrollable axes
    :param layout_content: Returns the size of the content for
                           the limits it is given
    '''
    child_limits = Limits(
        min=limits.min,
        max=Size(
            math.inf if direction.horizontal is not None
            else limits.max.width,
            sys.float_info.max if direction.vertical is not None
            else limits.max.height))
    content_size = layout_content(child_limits)
    size = limits.resolve(width, height, content_size)
    if math.isinf(size.width):
        size = size._replace(width=content_size.width)
    if math.isinf(size.height):
        size = size._replace(height=content_size.height)
    return Layout(
        Rectangle(position.x, position.y, size.width, size.height),
        [Layout(Rectangle(position.x, position.y,
                          content_size.width, content_size.height))])

class StateTree:
    '''An arena of widget states addressed by index

    A widget keeps the index of its own node. Walking the tree is
    left to whoever composes the widgets.
    '''
    def __init__(self) -> None:
        self._states: List[Any] = []
        self._parents: List[Optional[int]] = []
        self._children: List[List[int]] = []

    def add(self, state: Any, parent: Optional[int] = None) -> int:
        '''Adds a node and returns its index'''
        index = len(self._states)
        self._states.append(state)
        self._parents.append(parent)
        self._children.append([])
        if parent is not None:
            self._children[parent].append(index)
        return index

    def state(self, index: int) -> Any:
        return self._states[index]

    def replace(self, index: int, state: Any) -> None:
        self._states[index] = state

    def parent(self, index: int) -> Optional[int]:
        return self._parents[index]

    def children(self, index: int) -> List[int]:
        return list(self._children[index])

    def __len__(self) -> int:
        return len(self._states)

class Role(Enum):
    SCROLL_VIEW = 'scroll-view'
    SCROLL_BAR = 'scroll-bar'

@dataclass
class A11yNode:
    '''A node of the accessibility tree'''
    node_id: str
    role: Role
    bounds: Rectangle
    name: Optional[str] = None
    description: Optional[str] = None
    described_by: List[str] = field(default_factory=list)
    labelled_by: List[str] = field(default_factory=list)
    controls: List[str] = field(default_factory=list)
    hovered: bool = False
    numeric_value: Optional[float] = None
    children: List['A11yNode'] = field(default_factory=list)

class ScrollbarStatus(Enum):
    ACTIVE = 'active'
    HOVERED = 'hovered'
    DRAGGING = 'dragging'

class ScrollbarPaint(NamedTuple):
    '''What to paint for one scrollbar

    mouse_over tells whether the pointer is over this scrollbar,
    the status is HOVERED whenever it is over the region.
    '''
    axis: Axis
    status: ScrollbarStatus
    mouse_over: bool
    track: Rectangle
    scroller: Rectangle

class DrawInfo(NamedTuple):
    '''Result of Scrollable.draw()

    The content is drawn moved by -translation and clipped to
    “clip”, the content cursor is already translated.
    '''
    clip: Rectangle
    translation: Vector
    content_cursor: Cursor
    scrollbars: List[ScrollbarPaint]

ContentUpdate = Callable[[Any, Layout, Cursor, Rectangle], EventStatus]
ContentInteraction = Callable[[Layout, Cursor, Rectangle], Interaction]

class Scrollable:
    '''A scrollable region wrapping a single content element

    :param tree: The state tree holding the scroll state
    :param direction: The scrollable axes and their scrollbars
    :param on_scroll: Called with the new Viewport when the visible
                      part of the content changed
    :param node: The index of an existing State in “tree”. A new
                 node is added if None.
    :param name: Accessible name
    :param description: Accessible description
    :param described_by: Ids of nodes describing the region
    :param labelled_by: Ids of nodes labelling the region
    '''
    def __init__(self,
                 tree: StateTree,
                 direction: Direction = Direction(),
                 on_scroll: Optional[Callable[[Viewport], Any]] = None,
                 node: Optional[int] = None,
                 widget_id: str = 'scrollable',
                 name: Optional[str] = None,
                 description: Optional[str] = None,
                 described_by: Iterable[str] = (),
                 labelled_by: Iterable[str] = ()) -> None:
        self.tree = tree
        if node is None:
            node = tree.add(State())
        self.node = node
        self.direction = direction
        self.on_scroll = on_scroll
        self.widget_id = widget_id
        self.scrollbar_id = widget_id + '-scrollbar'
        self.name = name
        self.description = description
        self.described_by = list(described_by)
        self.labelled_by = list(labelled_by)

    @property
    def state(self) -> State:
        state: State = self.tree.state(self.node)
        return state

    def translation(self, layout_: Layout) -> Vector:
        return self.state.translation(
            self.direction, layout_.bounds, layout_.content.bounds)

    def _content_cursor(self,
                        cursor: Cursor,
                        bounds: Rectangle,
                        translation: Vector,
                        over_scrollbar: bool) -> Cursor:
        position = cursor.position_over(bounds)
        if position is None or over_scrollbar:
            return CURSOR_UNAVAILABLE
        return Cursor(position + translation)

    def update(self,
               event: Any,
               layout_: Layout,
               cursor: Cursor,
               update_content: Optional[ContentUpdate] = None,
               ) -> EventStatus:
        '''Processes an event

        The event is offered to the content first, with the cursor and
        drag and drop coordinates moved into content coordinates. If
        the content does not capture it, the region handles wheel,
        touch, modifier and scrollbar events.

        :param event: One of the event classes of this module
        :param layout_: The layout of the region
        :param cursor: The pointer (or finger) position
        :param update_content: Forwards an event to the content
        '''
        state = self.state
        direction = self.direction
        bounds = layout_.bounds
        content_layout = layout_.content
        content_bounds = content_layout.bounds
        cursor_over_scrollable = cursor.position_over(bounds)
        scrollbars = Scrollbars.new(state, direction, bounds, content_bounds)
        (mouse_over_y_scrollbar,
         mouse_over_x_scrollbar) = scrollbars.is_mouse_over(cursor)
        over_scrollbar = mouse_over_y_scrollbar or mouse_over_x_scrollbar

        translation = state.translation(direction, bounds, content_bounds)
        if update_content is not None:
            content_event = event
            if isinstance(event, (DndEnter, DndMotion)):
                content_event = replace(event,
                                        x=event.x + translation.x,
                                        y=event.y + translation.y)
            status = update_content(
                content_event,
                content_layout,
                self._content_cursor(
                    cursor, bounds, translation, over_scrollbar),
                bounds.translate(translation))
            if status is EventStatus.CAPTURED:
                return EventStatus.CAPTURED

        if isinstance(event, ModifiersChanged):
            state.shift_pressed = event.shift
            return EventStatus.IGNORED

        if isinstance(event, WheelScrolled):
            if cursor_over_scrollable is None:
                return EventStatus.IGNORED
            if isinstance(event.delta, Lines):
                if state.shift_pressed:
                    delta = Vector(event.delta.y, event.delta.x)
                else:
                    delta = Vector(event.delta.x, event.delta.y)
                delta = delta * LINE_HEIGHT
            else:
                delta = Vector(event.delta.x, event.delta.y)
            if ((direction.is_vertical_only
                 and abs(delta.y) < MIN_WHEEL_DELTA)
                    or (direction.is_horizontal_only
                        and abs(delta.x) < MIN_WHEEL_DELTA)):
                return EventStatus.IGNORED
            state.scroll(delta, direction, bounds, content_bounds)
            state.notify_on_scroll(self.on_scroll, bounds, content_bounds)
            # The content moved under the pointer
            if update_content is not None and not over_scrollbar:
                translation = state.translation(
                    direction, bounds, content_bounds)
                update_content(
                    CursorMoved(cursor_over_scrollable),
                    content_layout,
                    Cursor(cursor_over_scrollable + translation),
                    bounds.translate(translation))
            return EventStatus.CAPTURED

        if (isinstance(event, TOUCH_EVENTS)
                and (state.scroll_area_touched_at is not None
                     or not over_scrollbar)):
            if isinstance(event, FingerPressed):
                if cursor.position is None:
                    return EventStatus.IGNORED
                state.scroll_area_touched_at = cursor.position
            elif isinstance(event, FingerMoved):
                if state.scroll_area_touched_at is not None:
                    if cursor.position is None:
                        return EventStatus.IGNORED
                    delta = cursor.position - state.scroll_area_touched_at
                    state.scroll(delta, direction, bounds, content_bounds)
                    state.scroll_area_touched_at = cursor.position
                    state.notify_on_scroll(
                        self.on_scroll, bounds, content_bounds)
            else:
                state.scroll_area_touched_at = None
            return EventStatus.CAPTURED

        released = (
            (isinstance(event, ButtonReleased)
             and event.button is MouseButton.LEFT)
            or isinstance(event, (FingerLifted, FingerLost)))
        moved = isinstance(event, (CursorMoved, FingerMoved))
        pressed = (
            (isinstance(event, ButtonPressed)
             and event.button is MouseButton.LEFT)
            or isinstance(event, FingerPressed))

        if state.y_scroller_grabbed_at is not None:
            if released:
                state.y_scroller_grabbed_at = None
                return EventStatus.CAPTURED
            if moved and scrollbars.y is not None:
                if cursor.position is None:
                    return EventStatus.IGNORED
                state.scroll_y_to(
                    scrollbars.y.scroll_percentage_y(
                        state.y_scroller_grabbed_at, cursor.position),
                    bounds, content_bounds)
                state.notify_on_scroll(self.on_scroll, bounds, content_bounds)
                return EventStatus.CAPTURED
        elif mouse_over_y_scrollbar and pressed:
            if cursor.position is None:
                return EventStatus.IGNORED
            grabbed_at = scrollbars.grab_y_scroller(cursor.position)
            if grabbed_at is not None and scrollbars.y is not None:
                state.scroll_y_to(
                    scrollbars.y.scroll_percentage_y(
                        grabbed_at, cursor.position),
                    bounds, content_bounds)
                state.y_scroller_grabbed_at = grabbed_at
                state.notify_on_scroll(self.on_scroll, bounds, content_bounds)
            return EventStatus.CAPTURED

        if state.x_scroller_grabbed_at is not None:
            if released:
                state.x_scroller_grabbed_at = None
                return EventStatus.CAPTURED
            if moved:
                if cursor.position is None:
                    return EventStatus.IGNORED
                if scrollbars.x is not None:
                    state.scroll_x_to(
                        scrollbars.x.scroll_percentage_x(
                            state.x_scroller_grabbed_at, cursor.position),
                        bounds, content_bounds)
                    state.notify_on_scroll(
                        self.on_scroll, bounds, content_bounds)
                return EventStatus.CAPTURED
        elif mouse_over_x_scrollbar and pressed:
            if cursor.position is None:
                return EventStatus.IGNORED
            grabbed_at = scrollbars.grab_x_scroller(cursor.position)
            if grabbed_at is not None and scrollbars.x is not None:
                state.scroll_x_to(
                    scrollbars.x.scroll_percentage_x(
                        grabbed_at, cursor.position),
                    bounds, content_bounds)
                state.x_scroller_grabbed_at = grabbed_at
                state.notify_on_scroll(self.on_scroll, bounds, content_bounds)
                return EventStatus.CAPTURED

        return EventStatus.IGNORED

    def mouse_interaction(
            self,
            layout_: Layout,
            cursor: Cursor,
            content_interaction: Optional[ContentInteraction] = None,
    ) -> Interaction:
        '''The cursor shape for the pointer position

        IDLE over a scrollbar or while dragging one, otherwise
        whatever the content wants for the translated cursor.
        '''
        state = self.state
        bounds = layout_.bounds
        content_bounds = layout_.content.bounds
        scrollbars = Scrollbars.new(
            state, self.direction, bounds, content_bounds)
        (mouse_over_y_scrollbar,
         mouse_over_x_scrollbar) = scrollbars.is_mouse_over(cursor)
        if (mouse_over_y_scrollbar or mouse_over_x_scrollbar
                or state.scrollers_grabbed()):
            return Interaction.IDLE
        if content_interaction is None:
            return Interaction.IDLE
        translation = state.translation(
            self.direction, bounds, content_bounds)
        return content_interaction(
            layout_.content,
            self._content_cursor(cursor, bounds, translation, False),
            bounds.translate(translation))

    def draw(self, layout_: Layout, cursor: Cursor) -> DrawInfo:
        '''Returns what has to be painted for the current state'''
        state = self.state
        bounds = layout_.bounds
        content_bounds = layout_.content.bounds
        scrollbars = Scrollbars.new(
            state, self.direction, bounds, content_bounds)
        cursor_over_scrollable = cursor.position_over(bounds)
        (mouse_over_y_scrollbar,
         mouse_over_x_scrollbar) = scrollbars.is_mouse_over(cursor)
        translation = state.translation(
            self.direction, bounds, content_bounds)
        content_cursor = self._content_cursor(
            cursor, bounds, translation,
            mouse_over_y_scrollbar or mouse_over_x_scrollbar)
        paints = []
        for axis, scrollbar, grabbed, mouse_over in (
                (Axis.Y, scrollbars.y, state.y_scroller_grabbed_at,
                 mouse_over_y_scrollbar),
                (Axis.X, scrollbars.x, state.x_scroller_grabbed_at,
                 mouse_over_x_scrollbar)):
            if scrollbar is None:
                continue
            if grabbed is not None:
                status = ScrollbarStatus.DRAGGING
            elif cursor_over_scrollable is not None:
                status = ScrollbarStatus.HOVERED
            else:
                status = ScrollbarStatus.ACTIVE
            paints.append(ScrollbarPaint(
                axis, status, mouse_over,
                scrollbar.bounds, scrollbar.scroller.bounds))
        return DrawInfo(bounds, translation, content_cursor, paints)

    def a11y_nodes(self,
                   layout_: Layout,
                   cursor: Cursor,
                   content_nodes: Iterable[A11yNode] = ()) -> A11yNode:
        '''Builds the accessibility tree of the region

        A scroll view node holding the nodes of the content followed
        by one scroll bar node per visible scrollbar. The value of a
        scroll bar node is the scroll position in percent.
        '''
        state = self.state
        bounds = layout_.bounds
        content_bounds = layout_.content.bounds
        node = A11yNode(
            node_id=self.widget_id,
            role=Role.SCROLL_VIEW,
            bounds=bounds,
            name=self.name,
            description=self.description,
            described_by=list(self.described_by),
            labelled_by=list(self.labelled_by),
            hovered=cursor.is_over(bounds),
            children=list(content_nodes))
        scrollbars = Scrollbars.new(
            state, self.direction, bounds, content_bounds)
        for axis, scrollbar, viewport, content, offset in (
                (Axis.X, scrollbars.x, bounds.width, content_bounds.width,
                 state.offset_x),
                (Axis.Y, scrollbars.y, bounds.height, content_bounds.height,
                 state.offset_y)):
            if scrollbar is None:
                continue
            scroll_range = content - viewport
            value = 0.0
            if scroll_range > 0:
                value = 100.0 * offset.absolute(viewport, content) / scroll_range
            node.children.append(A11yNode(
                node_id=f'{self.scrollbar_id}-{axis.value}',
                role=Role.SCROLL_BAR,
                bounds=scrollbar.total_bounds,
                hovered=cursor.is_over(scrollbar.total_bounds),
                controls=[self.widget_id],
                numeric_value=value))
        return node

    def translate_overlay(self,
                          layout_: Layout,
                          rectangle: Rectangle) -> Rectangle:
        '''Moves a rectangle of a content overlay to window coordinates'''
        translation = self.translation(layout_)
        return rectangle.translate(Vector(-translation.x, -translation.y))

    def drag_destinations(
            self,
            layout_: Layout,
            rectangles: Iterable[Rectangle]) -> List[Rectangle]:
        '''Moves the drop target rectangles of the content'''
        return [self.translate_overlay(layout_, rectangle)
                for rectangle in rectangles]

    def snap_to(self, offset: RelativeOffset) -> None:
        '''Snaps the region to a relative offset'''
        self.state.snap_to(offset)

    def scroll_to(self, offset: AbsoluteOffset) -> None:
        '''Scrolls the region to an absolute offset'''
        self.state.scroll_to(offset)

    def scroll_by(self, delta: Vector, layout_: Layout) -> None:
        '''Scrolls by a delta and reports the change'''
        bounds = layout_.bounds
        content_bounds = layout_.content.bounds
        self.state.scroll(delta, self.direction, bounds, content_bounds)
        self.state.notify_on_scroll(self.on_scroll, bounds, content_bounds)

if __name__ == "__main__":
    import doctest
    (FAILED, _ATTEMPTED) = doctest.testmod()
    if FAILED:
        raise SystemExit(1)

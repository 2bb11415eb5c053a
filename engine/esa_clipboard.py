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

'''Best effort copying of text to the clipboard
'''

from typing import List
from typing import Tuple
from typing import Optional
from typing import Callable
import os
import shutil
import subprocess
import logging

LOGGER = logging.getLogger('emoji-selector')

# (environment variable which has to be set, command line)
COPY_COMMANDS: Tuple[Tuple[str, List[str]], ...] = (
    ('WAYLAND_DISPLAY', ['wl-copy']),
    ('DISPLAY', ['xclip', '-selection', 'clipboard']),
    ('DISPLAY', ['xsel', '--clipboard', '--input']),
)

COPY_TIMEOUT = 5

def copy_with_command(text: str) -> bool:
    '''Copies “text” with the first external copy command which works

    Returns True on success.
    '''
    for (environment_variable, command) in COPY_COMMANDS:
        if not os.environ.get(environment_variable):
            continue
        binary = shutil.which(command[0])
        if not binary:
            continue
        try:
            subprocess.run([binary] + command[1:],
                           input=text,
                           encoding='utf-8',
                           check=True,
                           # wl-copy and xclip leave a child serving the
                           # selection which inherits stdout and stderr
                           stdout=subprocess.DEVNULL,
                           stderr=subprocess.DEVNULL,
                           timeout=COPY_TIMEOUT)
        except (OSError,
                subprocess.CalledProcessError,
                subprocess.TimeoutExpired) as error:
            LOGGER.warning('Exception when calling %s: %s: %s',
                           binary, error.__class__.__name__, error)
            continue
        LOGGER.debug('Copied %r with %s', text, binary)
        return True
    return False

def copy_text(text: str,
              setter: Optional[Callable[[str], None]] = None) -> bool:
    '''Copies “text” to the clipboard, never raises

    :param text: The text to copy
    :param setter: Copies with the toolkit clipboard, tried first.
                   The external copy commands are the fallback.

    Returns True if one of the mechanisms succeeded.
    '''
    if setter is not None:
        try:
            setter(text)
        except Exception as error: # pylint: disable=broad-except
            LOGGER.warning('Setting the clipboard failed: %s: %s',
                           error.__class__.__name__, error)
        else:
            return True
    if copy_with_command(text):
        return True
    LOGGER.error('Could not copy %r to the clipboard', text)
    return False

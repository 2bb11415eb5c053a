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
This file implements test cases for copying to the clipboard
in esa_clipboard.py.
'''

from typing import Any
from typing import List
import sys
import os
import logging
import stat
import time
import tempfile
import subprocess
import unittest
from unittest import mock

# pylint: disable=wrong-import-position
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../engine'))
import esa_clipboard # pylint: disable=import-error
sys.path.pop(0)
# pylint: enable=wrong-import-position

LOGGER = logging.getLogger('emoji-selector')

# pylint: disable=missing-class-docstring
# pylint: disable=missing-function-docstring

def which(name: str) -> str:
    return '/usr/bin/' + name

class EsaClipboardTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.which_patcher = mock.patch.object(
            esa_clipboard.shutil, 'which', side_effect=which)
        self.run_patcher = mock.patch.object(esa_clipboard.subprocess, 'run')
        self.which = self.which_patcher.start()
        self.run = self.run_patcher.start()

    def tearDown(self) -> None:
        self.run_patcher.stop()
        self.which_patcher.stop()

    def test_dummy(self) -> None:
        self.assertEqual(True, True)

    def test_setter_first(self) -> None:
        copied: List[str] = []
        self.assertTrue(esa_clipboard.copy_text('😀', copied.append))
        self.assertEqual(['😀'], copied)
        self.run.assert_not_called()

    def test_wayland(self) -> None:
        with mock.patch.dict(os.environ,
                             {'WAYLAND_DISPLAY': 'wayland-0',
                              'DISPLAY': ':0'}):
            self.assertTrue(esa_clipboard.copy_text('🐶'))
        self.run.assert_called_once()
        (args, kwargs) = self.run.call_args
        self.assertEqual(['/usr/bin/wl-copy'], args[0])
        self.assertEqual('🐶', kwargs['input'])

    def test_setter_fails(self) -> None:
        def broken_setter(_text: str) -> None:
            raise RuntimeError('no display')
        with mock.patch.dict(os.environ, {'DISPLAY': ':0'}):
            os.environ.pop('WAYLAND_DISPLAY', None)
            with self.assertLogs('emoji-selector', level='WARNING'):
                self.assertTrue(
                    esa_clipboard.copy_text('🐱', broken_setter))
        (args, _kwargs) = self.run.call_args
        self.assertEqual(['/usr/bin/xclip', '-selection', 'clipboard'],
                         args[0])

    def test_fallback_to_next_command(self) -> None:
        def run(command: List[str], **_kwargs: Any) -> Any:
            if command[0].endswith('xclip'):
                raise subprocess.CalledProcessError(1, command, stderr='no')
            return subprocess.CompletedProcess(command, 0)
        self.run.side_effect = run
        with mock.patch.dict(os.environ, {'DISPLAY': ':0'}):
            os.environ.pop('WAYLAND_DISPLAY', None)
            self.assertTrue(esa_clipboard.copy_with_command('😀'))
        self.assertEqual(
            ['/usr/bin/xclip', '/usr/bin/xsel'],
            [call[0][0][0] for call in self.run.call_args_list])

    def test_missing_binary(self) -> None:
        self.which.side_effect = lambda name: None
        with mock.patch.dict(os.environ, {'WAYLAND_DISPLAY': 'wayland-0'}):
            self.assertFalse(esa_clipboard.copy_with_command('😀'))
        self.run.assert_not_called()

    def test_nothing_works(self) -> None:
        self.run.side_effect = OSError('broken')
        with mock.patch.dict(os.environ, {'WAYLAND_DISPLAY': 'wayland-0'}):
            os.environ.pop('DISPLAY', None)
            with self.assertLogs('emoji-selector', level='ERROR'):
                self.assertFalse(esa_clipboard.copy_text('😀'))

# Stores its input and leaves a child running, like the real wl-copy
# which keeps serving the selection in the background
FAKE_WL_COPY = '''#!/bin/sh
cat > "$ESA_COPIED"
( sleep 3 ) &
exit 0
'''

@unittest.skipUnless(
    os.path.exists('/bin/sh'),
    'Skipping because this test requires a POSIX shell.')
class EsaClipboardCommandTestCase(unittest.TestCase):
    def setUp(self) -> None:
        # pylint: disable=consider-using-with
        self._tempdir = tempfile.TemporaryDirectory()
        # pylint: enable=consider-using-with
        self.copied = os.path.join(self._tempdir.name, 'copied')
        wl_copy = os.path.join(self._tempdir.name, 'wl-copy')
        with open(wl_copy, 'w', encoding='utf-8') as script:
            script.write(FAKE_WL_COPY)
        os.chmod(wl_copy, stat.S_IRWXU)

    def tearDown(self) -> None:
        self._tempdir.cleanup()

    def test_dummy(self) -> None:
        self.assertEqual(True, True)

    def test_background_child_does_not_block(self) -> None:
        with mock.patch.dict(
                os.environ,
                {'PATH': (self._tempdir.name + os.pathsep
                          + os.environ.get('PATH', '/usr/bin:/bin')),
                 'WAYLAND_DISPLAY': 'wayland-0',
                 'ESA_COPIED': self.copied}):
            start = time.monotonic()
            self.assertTrue(esa_clipboard.copy_with_command('🐶'))
            elapsed = time.monotonic() - start
        self.assertLess(elapsed, 2.0)
        with open(self.copied, encoding='utf-8') as copied_file:
            self.assertEqual('🐶', copied_file.read())

if __name__ == '__main__':
    unittest.main()

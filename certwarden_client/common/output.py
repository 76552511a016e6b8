"""
Console status lines
"""

import os
import sys

COLORS = {
    'red': '0;31',
    'green': '0;32',
    'yellow': '0;33',
}

_color_enabled = None


def set_color(enabled):
    """Force colored output on or off (None restores auto detection)"""
    global _color_enabled
    _color_enabled = enabled


def use_color(stream):
    if _color_enabled is not None:
        return _color_enabled
    if os.environ.get('NO_COLOR'):
        return False
    return hasattr(stream, 'isatty') and stream.isatty()


def color(color_name, message, stream=None):
    """Wrap message in an ANSI color code when the stream is a terminal"""
    stream = stream or sys.stdout
    if not use_color(stream):
        return message
    code = COLORS.get(color_name, '0;37')
    return f"\033[{code}m{message}\033[0m"


def print_error(message):
    print(f"{color('red', '[ERROR]', sys.stderr)} {message}", file=sys.stderr)


def print_success(message):
    print(f"{color('green', '[SUCCESS]')} {message}")


def print_info(message):
    print(message)

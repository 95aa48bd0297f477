"""
Greedy text wrapping for help output.

wrap(text, width) splits `text` into lines of at most `width` characters (the
trailing line break is not counted). Existing line breaks are kept; a line that
has to be broken at a space gets that space replaced by a line break. The last
line carries no break unless the text itself ended with one.

Preconditions (not validated)
- no word is longer than `width`.
- no runs of consecutive spaces.
Text violating them still terminates, but the layout is unspecified.

Example
    >>> list(wrap("hello world", 5))
    ['hello\\n', 'world']
"""
from collections.abc import Iterable


def split_at(text, index, /):
    """
    Split `text` right after `index`: the head keeps text[index].
    """
    return text[:index + 1], text[index + 1:]


def take_line(text, width, /):
    """
    Extract one line of at most `width` characters from the front of `text`.

    Returns
    - tuple[str, str]: the line (ending with a break unless it is the tail of
      the text) and the remaining text.
    """
    newline = text.find("\n")
    if 0 <= newline <= width:
        return split_at(text, newline)
    if len(text) <= width:
        return text, ""

    # index 0 is always a candidate, so the scan makes progress on long words
    current, previous = 0, -1
    while 0 <= current <= width:
        previous = current
        current = text.find(" ", current + 1)

    line, rest = split_at(text, previous)
    if line.endswith(" "):
        line = line[:-1] + "\n"
    return line, rest


class Wrapped(Iterable):
    """
    Lazy, restartable view over the lines of a wrapped text.

    Every iteration recomputes the lines from the source text, so the same
    object can be consumed any number of times.
    """
    __slots__ = ("_text", "_width")

    def __init__(self, text, width, /):
        self._text = text
        self._width = width

    @property
    def text(self):
        return self._text

    @property
    def width(self):
        return self._width

    def __iter__(self):
        rest = self._text
        while rest:
            line, rest = take_line(rest, self._width)
            yield line

    def __repr__(self):
        return f"wrapped(text={self._text!r}, width={self._width!r})"


def wrap(text, width, /):
    """
    Wrap `text` to `width` columns.

    Raises
    - TypeError: text is not a string or width is not an integer.
    - ValueError: width is not positive.
    """
    if not isinstance(text, str):
        raise TypeError("wrap() text must be a string")
    if not isinstance(width, int) or isinstance(width, bool):
        raise TypeError("wrap() width must be an integer")
    if width < 1:
        raise ValueError("wrap() width must be a positive integer")
    return Wrapped(text, width)


__all__ = (
    "Wrapped",
    "wrap",
    "take_line",
    "split_at",
)

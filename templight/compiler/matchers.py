"""Hand-written matchers for the parts of a templ tag that regexes cannot
express: brace groups nest, and attribute values and spread attributes may
contain brace groups.

Every matcher offers the subset of the compiled-regex interface the
tokenizer relies on: ``search(text, pos=0)`` and ``match(text, pos=0)``
returning a ``Span`` (``start()``, ``end()``, ``group()``) or None.
"""

import re

# whitespace, // line comment, /* block comment */
SPACE_PATTERN = re.compile(r"(?:\s|//.*(?!.)|/\*(?:[^*]|\*(?!/))*\*/)")

TAG_NAME_RE = re.compile(r"[\w.:-]+")
ATTR_NAME_RE = re.compile(r"[\w.:$-]+")
UNQUOTED_VALUE_RE = re.compile(r"""[^\s{'"/>=]+""")

DEFAULT_BRACE_DEPTH = 2


class Span:
    __slots__ = ("string", "_start", "_end")

    def __init__(self, string, start, end):
        self.string = string
        self._start = start
        self._end = end

    def start(self):
        return self._start

    def end(self):
        return self._end

    def span(self):
        return self._start, self._end

    def group(self, index=0):
        if index != 0:
            raise IndexError("no such group")
        return self.string[self._start:self._end]

    def __repr__(self):
        return f"Span({self._start}, {self._end}, {self.group()!r})"


def skip_space(space, text, pos):
    """Consume as many space units as possible; return ``(pos, count)``."""
    count = 0
    while pos < len(text):
        match = space.match(text, pos)
        if match is None or match.end() == pos:
            break
        pos = match.end()
        count += 1
    return pos, count


class Matcher:
    trigger = None  # every match starts with this character

    def match_end(self, text, pos):
        raise NotImplementedError

    def match(self, text, pos=0):
        end = self.match_end(text, pos)
        if end is None:
            return None
        return Span(text, pos, end)

    def search(self, text, pos=0):
        while True:
            start = text.find(self.trigger, pos)
            if start < 0:
                return None
            end = self.match_end(text, start)
            if end is not None:
                return Span(text, start, end)
            pos = start + 1


class BraceMatcher(Matcher):
    """``{ ... }`` holding at most ``max_depth`` levels of nested groups."""

    trigger = "{"

    def __init__(self, max_depth=DEFAULT_BRACE_DEPTH):
        if max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {max_depth}")
        self.max_depth = max_depth

    def match_end(self, text, pos):
        return self._group(text, pos, self.max_depth)

    def _group(self, text, pos, depth):
        if not text.startswith("{", pos):
            return None
        pos += 1
        while pos < len(text):
            char = text[pos]
            if char == "}":
                return pos + 1
            if char == "{":
                if depth == 0:
                    return None
                end = self._group(text, pos, depth - 1)
                if end is None:
                    return None
                pos = end
                continue
            pos += 1
        return None

    def __repr__(self):
        return f"BraceMatcher(max_depth={self.max_depth})"


class SpreadMatcher(Matcher):
    """``{ ...expr }``: spread every attribute of ``expr`` into the tag."""

    trigger = "{"

    def __init__(self, space, braces):
        self.space = space
        self.braces = braces

    def match_end(self, text, pos):
        if not text.startswith("{", pos):
            return None
        pos, _ = skip_space(self.space, text, pos + 1)
        if not text.startswith("...", pos):
            return None
        pos += 3
        while pos < len(text):
            char = text[pos]
            if char == "}":
                return pos + 1
            if char == "{":
                end = self.braces.match_end(text, pos)
                if end is None:
                    return None
                pos = end
                continue
            pos += 1
        return None


class PrefixMatcher(Matcher):
    """A literal prefix immediately followed by whatever ``inner`` matches."""

    def __init__(self, prefix, inner):
        self.prefix = prefix
        self.inner = inner
        self.trigger = prefix[0]

    def match_end(self, text, pos):
        if not text.startswith(self.prefix, pos):
            return None
        return self.inner.match_end(text, pos + len(self.prefix))


class TagMatcher(Matcher):
    """A whole tag: ``</?`` name, attributes and spreads, ``/?>``.

    Attribute values may be double or single quoted (backslash escapes are
    honored), bare, or a brace group.
    """

    trigger = "<"

    def __init__(self, space, braces, spread):
        self.space = space
        self.braces = braces
        self.spread = spread

    def match_end(self, text, pos):
        if not text.startswith("<", pos):
            return None
        pos += 1
        if text.startswith("/", pos):
            pos += 1

        name = TAG_NAME_RE.match(text, pos)
        if name:
            pos = name.end()
            while True:
                after_space, count = skip_space(self.space, text, pos)
                if not count:
                    break
                end = self._attribute(text, after_space)
                if end is None:
                    break
                pos = end
            pos, _ = skip_space(self.space, text, pos)
            if text.startswith("/", pos):
                pos += 1

        if text.startswith(">", pos):
            return pos + 1
        return None

    def _attribute(self, text, pos):
        name = ATTR_NAME_RE.match(text, pos)
        if name is None:
            return self.spread.match_end(text, pos)
        pos = name.end()
        if text.startswith("=", pos):
            end = self._value(text, pos + 1)
            if end is not None:
                return end
        return pos

    def _value(self, text, pos):
        if pos >= len(text):
            return None
        char = text[pos]
        if char == '"' or char == "'":
            return _quoted_end(text, pos)
        if char == "{":
            return self.braces.match_end(text, pos)
        bare = UNQUOTED_VALUE_RE.match(text, pos)
        return bare.end() if bare else None


def _quoted_end(text, pos):
    quote = text[pos]
    pos += 1
    while pos < len(text):
        char = text[pos]
        if char == "\\":
            pos += 2
            continue
        if char == quote:
            return pos + 1
        pos += 1
    return None

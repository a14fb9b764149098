import enum

class TokenKind(enum.Enum):
    TAG = "tag"                         # <div class="x">, </div>, <br/>
    TAG_NAME = "tag-name"               # <div
    ATTR_NAME = "attr-name"             # class
    ATTR_VALUE = "attr-value"           # ="x"
    SPREAD = "spread"                   # { ...attrs }
    SCRIPT = "script"                   # ={ expr }
    SPECIAL_ATTR = "special-attr"
    COMMENT = "comment"
    PUNCTUATION = "punctuation"
    PLAIN_TEXT = "plain-text"           # literal text in a tag body
    CLASS_NAME = "class-name"           # Component.Name
    NAMESPACE = "namespace"             # svg:
    PROLOG = "prolog"
    DOCTYPE = "doctype"
    CDATA = "cdata"
    ENTITY = "entity"                   # &amp;
    STRING = "string"
    CHAR = "char"
    KEYWORD = "keyword"
    BOOLEAN = "boolean"
    NUMBER = "number"
    OPERATOR = "operator"
    FUNCTION = "function"
    BUILTIN = "builtin"

    @classmethod
    def from_name(cls, name):
        """Resolve a rule name such as 'attr-value' or 'script-punctuation'."""
        try:
            return cls(name)
        except ValueError:
            return None


class Token:
    """A typed span of source text.

    ``content`` is either the matched text or a list of child items, each
    item being a Token or a raw string. Tokens are not modified once built.
    """

    __slots__ = ("kind", "content", "alias", "_raw")

    def __init__(self, kind, content, alias=(), raw_text=None):
        if isinstance(alias, str):
            alias = (alias,)
        self.kind = kind
        self.content = content
        self.alias = tuple(alias)
        self._raw = raw_text

    @property
    def raw_text(self):
        if self._raw is None:
            self._raw = stringify(self.content)
        return self._raw

    @property
    def is_nested(self):
        return isinstance(self.content, list)

    def with_content(self, content):
        return Token(self.kind, content, self.alias, self._raw)

    def __eq__(self, other):
        if not isinstance(other, Token):
            return NotImplemented
        return (self.kind, self.content, self.alias) == (other.kind, other.content, other.alias)

    def __hash__(self):
        return hash((self.kind, self.raw_text, self.alias))

    def __repr__(self):
        return f"Token({self.kind.value}, {self.content!r})"


def stringify(item):
    """Return the source text covered by a token, raw string or item list."""
    if item is None:
        return ""
    if isinstance(item, str):
        return item
    if isinstance(item, Token):
        if item._raw is not None:
            return item._raw
        return stringify(item.content)
    return "".join(stringify(child) for child in item)

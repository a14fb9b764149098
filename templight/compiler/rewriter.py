"""
Plain-text rewrite for templ token trees.

Text between an opening tag and its closing tag is literal content, yet the
Go rules of the templ grammar still split it into keywords, operators and
the like. ``rewrite`` walks the tree, tracks the open tags and, per open
tag, how many ``{`` are unmatched, and turns everything that sits directly
in a tag body into ``plain-text`` tokens.
"""

from dataclasses import dataclass

from ..engine.tokens import Token, TokenKind, stringify


@dataclass
class OpenTagFrame:
    tag_name: str
    opened_braces: int = 0


def _tag_head(token):
    """Return the tag-name child of a tag token, or None."""
    if token.kind is not TokenKind.TAG or not token.is_nested or not token.content:
        return None
    head = token.content[0]
    if isinstance(head, Token) and head.kind is TokenKind.TAG_NAME and head.is_nested:
        return head
    return None


def _tag_name(head):
    return stringify(head.content[1:])


def _is_closing(head):
    first = head.content[0] if head.content else None
    return isinstance(first, Token) and first.content == "</"


def _is_self_closing(token):
    return token.raw_text.endswith("/>")


def _is_punctuation(item, text):
    return isinstance(item, Token) and item.kind is TokenKind.PUNCTUATION and item.content == text


def _is_text(item):
    return isinstance(item, str) or item.kind is TokenKind.PLAIN_TEXT


def _plain_text(text):
    return Token(TokenKind.PLAIN_TEXT, text, raw_text=text)


def rewrite(tokens):
    """Return a new item list with tag-body text merged into plain-text tokens.

    Never raises on unbalanced tags or braces: unmatched closing tags are
    ignored, and unclosed tags simply stay open until the end of the list.
    Nested token lists are rewritten with their own, fresh stack.
    """
    stack = []
    result = []

    for item in tokens:
        if isinstance(item, Token):
            head = _tag_head(item)
            if head is not None:
                if _is_closing(head):
                    if stack and stack[-1].tag_name == _tag_name(head):
                        stack.pop()
                elif not _is_self_closing(item):
                    stack.append(OpenTagFrame(_tag_name(head)))
                result.append(_descend(item))
                continue
            if stack and _is_punctuation(item, "{"):
                # entering an expression inside the tag body
                stack[-1].opened_braces += 1
                result.append(item)
                continue
            if stack and stack[-1].opened_braces > 0 and _is_punctuation(item, "}"):
                stack[-1].opened_braces -= 1
                result.append(item)
                continue

        if stack and stack[-1].opened_braces == 0:
            text = stringify(item)
            if result and _is_text(result[-1]):
                text = stringify(result.pop()) + text
            result.append(_plain_text(text))
        else:
            result.append(_descend(item))

    return result


def _descend(item):
    if isinstance(item, Token) and item.is_nested:
        return item.with_content(rewrite(item.content))
    return item


class RewriteHook:
    """after-tokenize hook applying ``rewrite`` to one language only."""

    def __init__(self, language_id):
        self.language_id = language_id

    def __call__(self, env):
        if env.get("language") != self.language_id:
            return
        env["tokens"] = rewrite(env["tokens"])

    def __eq__(self, other):
        return isinstance(other, RewriteHook) and other.language_id == self.language_id

    def __hash__(self):
        return hash((RewriteHook, self.language_id))

    def __repr__(self):
        return f"RewriteHook({self.language_id!r})"

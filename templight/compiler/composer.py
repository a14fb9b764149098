"""Builds the templ grammar out of the ``markup`` and ``go`` base grammars.

Composition never modifies the base grammars: every step returns a new
rule set, and the result is installed in the registry in one replace.
"""

import logging
import re

from ..config import HighlightConfig
from ..engine.grammar import ROOT, Rule, RuleSet
from ..engine.registry import AFTER_TOKENIZE
from ..engine.tokens import TokenKind
from ..exceptions import MissingDependency
from .matchers import (
    DEFAULT_BRACE_DEPTH, SPACE_PATTERN,
    BraceMatcher, PrefixMatcher, SpreadMatcher, TagMatcher,
)
from .rewriter import RewriteHook

logger = logging.getLogger(__name__)

TAG_NAME_PATTERN = re.compile(r"^</?[^\s>/]*")
CLASS_NAME_PATTERN = re.compile(r"^[A-Z]\w*(?:\.[A-Z]\w*)*$")
ATTR_VALUE_PATTERN = re.compile(r"""=(?!\{)(?:"(?:\\[\s\S]|[^\\"])*"|'(?:\\[\s\S]|[^\\'])*'|[^\s'"/>]+)""")
SCRIPT_PUNCTUATION_PATTERN = re.compile(r"^=(?=\{)")


def _rules_of(grammar, name):
    if grammar is None or name not in grammar:
        return ()
    return grammar.rules(name)


def extend_keywords(base, keywords, name="go"):
    """
    Widen the keyword rule of ``base`` to also match ``keywords``.

    The result matches any word the base rule matched plus every keyword
    given, as whole, case-sensitive words. ``name`` is the grammar id
    reported when ``base`` cannot be extended.
    """
    if base is None:
        raise MissingDependency(name)
    if "keyword" not in base:
        raise MissingDependency(name, "grammar has no keyword rule")
    keywords = sorted(set(keywords), key=lambda word: (-len(word), word))
    if not keywords:
        return base.copy()

    alternation = "|".join(re.escape(word) for word in keywords)
    widened = []
    for rule in base.rules("keyword"):
        pattern = rule.pattern
        source = getattr(pattern, "pattern", None)
        if not isinstance(source, str):
            raise MissingDependency(name, "keyword rule is not a regular expression")
        combined = re.compile(rf"(?:{source})|\b(?:{alternation})\b", pattern.flags)
        widened.append(rule.replace(pattern=combined))
    return base.replace("keyword", tuple(widened))


def build_brace_pattern(max_depth=DEFAULT_BRACE_DEPTH):
    return BraceMatcher(max_depth)


def build_spread_pattern(space, braces):
    return SpreadMatcher(space, braces)


def build_tag_pattern(space, braces, spread):
    return TagMatcher(space, braces, spread)


def compose_templating_grammar(markup, go, max_brace_depth=DEFAULT_BRACE_DEPTH):
    """
    Return the templ rule set: markup rules followed by Go rules, with the
    markup tag rule reworked for templ attributes.

    Args:
        markup: The base markup grammar.
        go: The Go grammar, usually already passed through extend_keywords.
        max_brace_depth: Nested brace groups allowed inside a brace group.
    """
    if markup is None:
        raise MissingDependency("markup")
    if go is None:
        raise MissingDependency("go")
    if "tag" not in markup:
        raise MissingDependency("markup", "grammar has no tag rule")

    braces = build_brace_pattern(max_brace_depth)
    spread = build_spread_pattern(SPACE_PATTERN, braces)
    tag_pattern = build_tag_pattern(SPACE_PATTERN, braces, spread)

    grammar = markup.extend(go)
    comments = _rules_of(go, "comment") + _rules_of(markup, "comment")
    if comments:
        grammar = grammar.replace("comment", comments)

    tag = markup["tag"]
    tag_inside = tag.inside

    tag_name = tag_inside["tag-name"]
    tag_name = tag_name.replace(
        pattern=TAG_NAME_PATTERN,
        inside=(tag_name.inside or RuleSet()).extend({
            "class-name": CLASS_NAME_PATTERN,
        }),
    )
    attr_value = tag_inside["attr-value"].replace(pattern=ATTR_VALUE_PATTERN)
    tag_inside = tag_inside.replace("tag-name", tag_name).replace("attr-value", attr_value)
    if _rules_of(go, "comment"):
        tag_inside = tag_inside.extend({"comment": go.rules("comment")})

    tag_inside = tag_inside.insert_before("special-attr", {
        "script": Rule(
            PrefixMatcher("=", braces),
            alias="language-go",
            inside=RuleSet({
                "script-punctuation": Rule(
                    SCRIPT_PUNCTUATION_PATTERN,
                    alias="punctuation",
                    kind=TokenKind.PUNCTUATION,
                ),
            }, rest=ROOT),
        ),
        "spread": Rule(spread, inside=ROOT),
    })

    return grammar.replace("tag", tag.replace(pattern=tag_pattern, inside=tag_inside))


def register_templ(registry, config=None):
    """
    Compose the templ grammar from the registry's base grammars and install
    it together with the plain-text rewrite hook.

    Raises:
        MissingDependency: a base grammar is not registered. Nothing is
            installed in that case.
    """
    config = config or HighlightConfig()
    markup = registry.get(config.markup_grammar)
    go = extend_keywords(registry.get(config.script_grammar), config.extra_keywords, config.script_grammar)
    grammar = compose_templating_grammar(markup, go, config.max_brace_depth)

    registry.register(config.language_id, grammar)
    if registry.add_hook(AFTER_TOKENIZE, RewriteHook(config.language_id)):
        logger.debug("Installed plain-text rewrite for '%s'", config.language_id)
    return grammar

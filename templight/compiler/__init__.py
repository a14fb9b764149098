from .matchers import SPACE_PATTERN, BraceMatcher, SpreadMatcher, TagMatcher, PrefixMatcher, Span
from .rewriter import OpenTagFrame, RewriteHook, rewrite
from .composer import (
    extend_keywords,
    build_brace_pattern,
    build_spread_pattern,
    build_tag_pattern,
    compose_templating_grammar,
    register_templ,
)

__all__ = [
    'SPACE_PATTERN',
    'BraceMatcher',
    'SpreadMatcher',
    'TagMatcher',
    'PrefixMatcher',
    'Span',
    'OpenTagFrame',
    'RewriteHook',
    'rewrite',
    'extend_keywords',
    'build_brace_pattern',
    'build_spread_pattern',
    'build_tag_pattern',
    'compose_templating_grammar',
    'register_templ',
]

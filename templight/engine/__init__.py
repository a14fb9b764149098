from .tokens import TokenKind, Token, stringify
from .grammar import Rule, RuleSet, ROOT
from .tokenizer import tokenize
from .registry import GrammarRegistry, AFTER_TOKENIZE, default_registry
from .languages import markup_grammar, go_grammar

__all__ = [
    'TokenKind',
    'Token',
    'stringify',
    'Rule',
    'RuleSet',
    'ROOT',
    'tokenize',
    'GrammarRegistry',
    'AFTER_TOKENIZE',
    'default_registry',
    'markup_grammar',
    'go_grammar',
]

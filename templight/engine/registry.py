import logging
import threading
from types import MappingProxyType

from ..exceptions import MissingDependency
from .grammar import RuleSet
from .languages import BASE_GRAMMARS
from .tokenizer import tokenize

logger = logging.getLogger(__name__)

AFTER_TOKENIZE = "after-tokenize"


class GrammarRegistry:
    """Process-wide table of installed grammars and tokenization hooks.

    Writers replace the whole table under a lock (copy-on-write); readers
    take a snapshot of the current table without locking, so they observe
    either the previous or the new grammar, never a half-updated one.
    """

    def __init__(self, grammars=None):
        self._lock = threading.Lock()
        self._grammars = MappingProxyType(dict(grammars or {}))
        self._hooks = MappingProxyType({})

    @property
    def languages(self):
        return tuple(self._grammars)

    def __contains__(self, language_id):
        return language_id in self._grammars

    def find(self, language_id):
        return self._grammars.get(language_id)

    def get(self, language_id):
        grammar = self._grammars.get(language_id)
        if grammar is None:
            raise MissingDependency(language_id)
        return grammar

    def register(self, language_id, grammar):
        if not isinstance(grammar, RuleSet):
            raise TypeError(f"Expected a RuleSet for '{language_id}', got {type(grammar).__name__}")
        with self._lock:
            grammars = dict(self._grammars)
            replaced = language_id in grammars
            grammars[language_id] = grammar
            self._grammars = MappingProxyType(grammars)
        if replaced:
            logger.debug("Replaced grammar '%s'", language_id)
        else:
            logger.debug("Registered grammar '%s'", language_id)
        return grammar

    def add_hook(self, event, callback):
        """Install ``callback`` for ``event`` unless an equal one is present."""
        with self._lock:
            hooks = dict(self._hooks)
            callbacks = hooks.get(event, ())
            if callback in callbacks:
                return False
            hooks[event] = callbacks + (callback,)
            self._hooks = MappingProxyType(hooks)
        logger.debug("Added %s hook %r", event, callback)
        return True

    def run_hooks(self, event, env):
        for callback in self._hooks.get(event, ()):
            callback(env)
        return env

    def tokenize(self, text, language_id):
        return tokenize(text, self.get(language_id))

    def highlight(self, text, language_id):
        """Tokenize ``text`` then let the after-tokenize hooks rework the tree."""
        grammar = self.get(language_id)
        env = {
            "code": text,
            "language": language_id,
            "grammar": grammar,
            "tokens": tokenize(text, grammar),
        }
        self.run_hooks(AFTER_TOKENIZE, env)
        return env["tokens"]


def default_registry():
    """A registry holding fresh copies of the base grammars."""
    return GrammarRegistry({name: build() for name, build in BASE_GRAMMARS.items()})

import threading

from .config import HighlightConfig, load_config
from .exceptions import TemplightError, MissingDependency, ConfigError
from .engine import default_registry
from .compiler import register_templ
from .utils.html import render_html

__version__ = "0.1.0"

get_version = lambda: __version__

_registry = None
_registry_lock = threading.Lock()


def create_registry(config=None):
    """A new registry with the base grammars and the templ grammar installed."""
    registry = default_registry()
    register_templ(registry, config)
    return registry


def get_registry():
    """The shared registry, created on first use."""
    global _registry
    if _registry is None:
        with _registry_lock:
            if _registry is None:
                _registry = create_registry()
    return _registry


def highlight(source, registry=None, language_id="templ"):
    """
    Tokenize templ source and return the rewritten token tree.
    """
    registry = registry or get_registry()
    return registry.highlight(source, language_id)


def highlight_html(source, registry=None, language_id="templ"):
    return render_html(highlight(source, registry, language_id))

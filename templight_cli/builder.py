import hashlib
import json
import logging
import os
import pathlib

from templight import create_registry
from templight.compiler import register_templ
from templight.utils.html import render_document

logger = logging.getLogger(__name__)


class BuildCache:
    def __init__(self, cache_file):
        self.cache_file = pathlib.Path(cache_file)
        self.cache = self._load_cache()

    def _load_cache(self):
        if self.cache_file.exists():
            try:
                with open(self.cache_file, 'r') as f:
                    return json.load(f)
            except (OSError, ValueError) as e:
                logger.warning("Ignoring unreadable build cache %s: %s", self.cache_file, e)
                return {}
        return {}

    def save(self):
        self.cache_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.cache_file, 'w') as f:
            json.dump(self.cache, f, indent=2)

    def get_hash(self, file_path):
        hasher = hashlib.md5()
        with open(file_path, 'rb') as f:
            hasher.update(f.read())
        return hasher.hexdigest()

    def is_changed(self, file_path):
        return self.get_hash(file_path) != self.cache.get(str(file_path))

    def update_cache(self, file_path):
        self.cache[str(file_path)] = self.get_hash(file_path)

    def clear(self):
        self.cache = {}


class SiteBuilder:
    """Renders every templ source below ``src_dir`` to ``out_dir`` as HTML."""

    def __init__(self, config, src_dir=".", out_dir=None, registry=None):
        self.config = config
        self.src_dir = pathlib.Path(src_dir).resolve()
        self.out_dir = pathlib.Path(out_dir) if out_dir else self.src_dir / "build"
        self.registry = registry or create_registry(config)
        self.cache = BuildCache(self.src_dir / ".templight" / "cache.json")
        self.generated_files = []

    def find_sources(self):
        sources = []
        for root, dirs, files in os.walk(self.src_dir):
            dirs[:] = sorted(d for d in dirs if d not in self.config.ignore_dirs and not d.startswith('.'))
            for name in sorted(files):
                if os.path.splitext(name)[1] in self.config.watch_extensions:
                    sources.append(pathlib.Path(root) / name)
        return sources

    def output_path(self, source):
        relative = pathlib.Path(source).resolve().relative_to(self.src_dir)
        return self.out_dir / relative.with_suffix(relative.suffix + ".html")

    def render_file(self, source, out_path=None):
        source = pathlib.Path(source)
        text = source.read_text(encoding="utf-8")
        tokens = self.registry.highlight(text, self.config.language_id)
        out_path = pathlib.Path(out_path) if out_path else self.output_path(source)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(render_document(tokens, self.config.language_id, title=source.name), encoding="utf-8")
        return out_path

    def build(self, force=False):
        if force:
            self.cache.clear()
        self.generated_files = []
        skipped = 0
        for source in self.find_sources():
            out_path = self.output_path(source)
            if not self.cache.is_changed(source) and out_path.exists():
                skipped += 1
                continue
            self.render_file(source, out_path)
            self.cache.update_cache(source)
            self.generated_files.append(out_path)
            print(f"  {source.relative_to(self.src_dir)} -> {out_path}")
        self.cache.save()
        logger.debug("Rendered %d file(s), %d unchanged", len(self.generated_files), skipped)
        return self.generated_files

    def reload(self, config):
        """Re-register the grammar for ``config`` and rebuild everything.

        The registry swaps the templ grammar in one step; if composition
        fails the previous grammar stays installed.
        """
        register_templ(self.registry, config)
        self.config = config
        return self.build(force=True)


def build_project(base_dir, config, force=False):
    print(f"Building highlighted sources in {base_dir}...")
    builder = SiteBuilder(config, src_dir=base_dir)
    generated = builder.build(force=force)
    print(f"Build complete: {len(generated)} file(s) written to {builder.out_dir}")
    return builder

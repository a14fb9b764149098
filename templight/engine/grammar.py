"""Rule sets consumed by the tokenizer.

A ``RuleSet`` is an ordered mapping of rule name to a ``Rule`` (or a tuple of
rules sharing one name). Rules are tried in insertion order. Neither class is
mutated after construction: every editing operation returns a new object, so
a rule set installed in a registry can be shared by concurrent readers.
"""

from .tokens import TokenKind


class _Root:
    """Placeholder for the grammar the current tokenization started from."""

    def __repr__(self):
        return "ROOT"

ROOT = _Root()


class Rule:
    def __init__(self, pattern, inside=None, alias=(), lookbehind=False, greedy=False, kind=None):
        if isinstance(alias, str):
            alias = (alias,)
        self.pattern = pattern
        self.inside = inside
        self.alias = tuple(alias)
        self.lookbehind = lookbehind
        self.greedy = greedy
        self.kind = kind

    def replace(self, **changes):
        fields = {
            "pattern": self.pattern,
            "inside": self.inside,
            "alias": self.alias,
            "lookbehind": self.lookbehind,
            "greedy": self.greedy,
            "kind": self.kind,
        }
        unknown = set(changes) - set(fields)
        if unknown:
            raise TypeError(f"Unknown rule fields: {', '.join(sorted(unknown))}")
        fields.update(changes)
        return Rule(**fields)

    def find(self, text):
        """Return ``(start, end)`` of the first match in ``text`` or None."""
        match = self.pattern.search(text)
        if match is None:
            return None
        start, end = match.start(), match.end()
        if self.lookbehind:
            prefix = match.group(1)
            if prefix:
                start += len(prefix)
        return start, end

    def kind_for(self, name):
        if self.kind is not None:
            return self.kind
        kind = TokenKind.from_name(name)
        if kind is None:
            raise ValueError(f"Rule '{name}' has no token kind")
        return kind

    def __repr__(self):
        pattern = getattr(self.pattern, "pattern", self.pattern)
        return f"Rule({pattern!r})"


def _as_rules(value):
    if isinstance(value, Rule):
        return (value,)
    if hasattr(value, "search"):
        return (Rule(value),)
    rules = []
    for item in value:
        rules.extend(_as_rules(item))
    return tuple(rules)


class RuleSet:
    def __init__(self, rules=None, rest=None):
        self._rules = {}
        for name, value in dict(rules or {}).items():
            self._rules[name] = _as_rules(value)
        self.rest = rest

    def __contains__(self, name):
        return name in self._rules

    def __getitem__(self, name):
        rules = self._rules[name]
        if len(rules) == 1:
            return rules[0]
        return rules

    def __iter__(self):
        return iter(self._rules)

    def __len__(self):
        return len(self._rules)

    def get(self, name, default=None):
        if name in self._rules:
            return self[name]
        return default

    def names(self):
        return list(self._rules)

    def rules(self, name):
        """All rules registered under ``name`` as a tuple (possibly empty)."""
        return self._rules.get(name, ())

    def items(self):
        return self._rules.items()

    def copy(self):
        return RuleSet(self._rules, rest=self.rest)

    def extend(self, redef):
        """Copy this set then assign every rule of ``redef`` by name.

        Existing names keep their position, new names are appended.
        """
        rules = dict(self._rules)
        for name, value in dict(redef.items() if isinstance(redef, RuleSet) else redef).items():
            rules[name] = _as_rules(value)
        return RuleSet(rules, rest=self.rest)

    def replace(self, name, value):
        if name not in self._rules:
            raise KeyError(name)
        return self.extend({name: value})

    def without(self, name):
        rules = {key: value for key, value in self._rules.items() if key != name}
        return RuleSet(rules, rest=self.rest)

    def insert_before(self, before, new_rules):
        """Return a copy with ``new_rules`` placed ahead of ``before``.

        Names already present are moved to the insertion point. When
        ``before`` is not a rule of this set the new rules are appended.
        """
        new_rules = {name: _as_rules(value) for name, value in dict(new_rules).items()}
        rules = {}
        inserted = False
        for name, value in self._rules.items():
            if name == before:
                rules.update(new_rules)
                inserted = True
            if name not in new_rules:
                rules[name] = value
        if not inserted:
            rules.update(new_rules)
        return RuleSet(rules, rest=self.rest)

    def with_rest(self, rest):
        return RuleSet(self._rules, rest=rest)

    def __repr__(self):
        return f"RuleSet({', '.join(self._rules)})"

from .grammar import ROOT
from .tokens import Token, stringify

# Matching works like a regex-driven highlighter: every rule of the grammar,
# in order, splits the raw strings left over by the previous rules. Greedy
# rules may swallow tokens produced earlier as long as their match starts
# inside a raw string.


def tokenize(text, grammar):
    """Tokenize ``text`` with ``grammar`` and return a list of items.

    Items are ``Token`` objects or raw strings. Concatenating their text
    always gives back ``text``.
    """
    return _match_grammar(text, grammar, grammar)


def _match_grammar(text, grammar, root):
    items = [text] if text else []
    for name, rule in _iter_rules(grammar, root):
        if rule.greedy:
            items = _apply_greedy(items, name, rule, root)
        else:
            items = _apply(items, name, rule, root)
    return items


def _iter_rules(grammar, root):
    seen = set()
    current = grammar
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        for name, rules in current.items():
            for rule in rules:
                yield name, rule
        rest = current.rest
        current = root if rest is ROOT else rest


def _make_token(name, rule, text, root):
    inside = root if rule.inside is ROOT else rule.inside
    content = _match_grammar(text, inside, root) if inside is not None else text
    return Token(rule.kind_for(name), content, rule.alias, raw_text=text)


def _split(text, name, rule, root):
    pieces = []
    while text:
        span = rule.find(text)
        if span is None:
            break
        start, end = span
        if end <= start:
            break
        if start:
            pieces.append(text[:start])
        pieces.append(_make_token(name, rule, text[start:end], root))
        text = text[end:]
    if text:
        pieces.append(text)
    return pieces


def _apply(items, name, rule, root):
    result = []
    for item in items:
        if isinstance(item, Token):
            result.append(item)
        else:
            result.extend(_split(item, name, rule, root))
    return result


def _apply_greedy(items, name, rule, root):
    items = list(items)
    i = 0
    while i < len(items):
        item = items[i]
        if isinstance(item, Token):
            i += 1
            continue

        lengths = [len(stringify(x)) for x in items[i:]]
        joined = "".join(stringify(x) for x in items[i:])
        span = rule.find(joined)
        if span is None:
            break
        start, end = span
        if end <= start:
            i += 1
            continue

        # locate the item the match starts in
        offset, j = 0, 0
        while offset + lengths[j] <= start:
            offset += lengths[j]
            j += 1
        if j:
            i += j if not isinstance(items[i + j], Token) else j + 1
            continue

        # items[i:i + k + 1] are covered, fully or partly, by the match
        k, covered = 0, lengths[0]
        while covered < end:
            k += 1
            covered += lengths[k]
        text = joined[:covered]
        replacement = []
        if start:
            replacement.append(text[:start])
        replacement.append(_make_token(name, rule, text[start:end], root))
        if end < covered:
            replacement.append(text[end:])
        items[i:i + k + 1] = replacement
        i += len(replacement) - 1 if end < covered else len(replacement)
    return items

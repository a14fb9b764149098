"""Base grammars shipped with the engine: ``markup`` and ``go``."""

import re

from .grammar import Rule, RuleSet
from .tokens import TokenKind

GO_KEYWORDS = (
    "break", "case", "chan", "const", "continue", "default", "defer", "else",
    "fallthrough", "for", "func", "go", "goto", "if", "import", "interface",
    "map", "package", "range", "return", "select", "struct", "switch", "type", "var",
)

GO_BUILTINS = (
    "append", "bool", "byte", "cap", "close", "complex", "complex64", "complex128",
    "copy", "delete", "error", "float32", "float64", "imag", "int", "int8", "int16",
    "int32", "int64", "len", "make", "new", "panic", "print", "println", "real",
    "recover", "rune", "string", "uint", "uint8", "uint16", "uint32", "uint64", "uintptr",
)


def words_pattern(words):
    """Whole-word, case-sensitive alternation of ``words``."""
    ordered = sorted(set(words), key=lambda word: (-len(word), word))
    return re.compile(r"\b(?:" + "|".join(re.escape(word) for word in ordered) + r")\b")


def markup_grammar():
    namespace = Rule(re.compile(r"^[^\s>/:]+:"), kind=TokenKind.NAMESPACE)

    tag_inside = RuleSet({
        "tag-name": Rule(
            re.compile(r"^</?[^\s>/]+"),
            kind=TokenKind.TAG_NAME,
            inside=RuleSet({
                "punctuation": re.compile(r"^</?"),
                "namespace": namespace,
            }),
        ),
        "special-attr": (),
        "attr-value": Rule(
            re.compile(r"""=\s*(?:"[^"]*"|'[^']*'|[^\s'">=]+)"""),
            inside=RuleSet({
                "punctuation": (
                    Rule(re.compile(r"^="), alias="attr-equals"),
                    Rule(re.compile(r"""^(\s*)["']|["']$"""), lookbehind=True),
                ),
            }),
        ),
        "punctuation": re.compile(r"/?>"),
        "attr-name": Rule(
            re.compile(r"[^\s>/]+"),
            inside=RuleSet({"namespace": namespace}),
        ),
    })

    return RuleSet({
        "comment": Rule(re.compile(r"<!--(?:(?!<!--)[\s\S])*?-->"), greedy=True),
        "prolog": Rule(re.compile(r"<\?[\s\S]+?\?>"), greedy=True),
        "doctype": Rule(
            re.compile(r"""<!DOCTYPE(?:[^>"'\[\]]|"[^"]*"|'[^']*')+(?:\[(?:[^<"'\]]|"[^"]*"|'[^']*'|<(?!!--)|<!--(?:[^-]|-(?!->))*-->)*\]\s*)?>""", re.IGNORECASE),
            greedy=True,
            inside=RuleSet({
                "string": re.compile(r""""[^"]*"|'[^']*'"""),
                "punctuation": re.compile(r"^<!|>$|[\[\]]"),
            }),
        ),
        "cdata": Rule(re.compile(r"<!\[CDATA\[[\s\S]*?\]\]>", re.IGNORECASE), greedy=True),
        "tag": Rule(
            re.compile(r"""</?(?!\d)[^\s>/=$<%]+(?:\s(?:\s*[^\s>/=]+(?:\s*=\s*(?:"[^"]*"|'[^']*'|[^\s'">=]+(?=[\s>]))|(?=[\s/>])))+)?\s*/?>"""),
            greedy=True,
            inside=tag_inside,
        ),
        "entity": (
            Rule(re.compile(r"&[\da-z]{1,8};", re.IGNORECASE), alias="named-entity"),
            Rule(re.compile(r"&#x?[\da-f]{1,8};", re.IGNORECASE)),
        ),
    })


def clike_grammar():
    return RuleSet({
        "comment": (
            Rule(re.compile(r"(^|[^\\])/\*[\s\S]*?(?:\*/|$)"), lookbehind=True, greedy=True),
            Rule(re.compile(r"(^|[^\\:])//.*"), lookbehind=True, greedy=True),
        ),
        "string": Rule(re.compile(r"""(["'])(?:\\(?:\r\n|[\s\S])|(?!\1)[^\\\r\n])*\1"""), greedy=True),
        "class-name": Rule(
            re.compile(r"(\b(?:class|extends|implements|instanceof|interface|new|trait)\s+|\bcatch\s+\()[\w.\\]+", re.IGNORECASE),
            lookbehind=True,
            inside=RuleSet({"punctuation": re.compile(r"[.\\]")}),
        ),
        "keyword": re.compile(r"\b(?:break|catch|continue|do|else|finally|for|function|if|in|instanceof|new|null|return|throw|try|while)\b"),
        "boolean": re.compile(r"\b(?:false|true)\b"),
        "function": re.compile(r"\b\w+(?=\()"),
        "number": re.compile(r"\b0x[\da-f]+\b|(?:\b\d+(?:\.\d*)?|\B\.\d+)(?:e[+-]?\d+)?", re.IGNORECASE),
        "operator": re.compile(r"[<>]=?|[!=]=?=?|--?|\+\+?|&&?|\|\|?|[?*/~^%]"),
        "punctuation": re.compile(r"[{}\[\];(),.:]"),
    })


def go_grammar():
    go = clike_grammar().extend({
        "string": Rule(re.compile(r'(^|[^\\])"(?:\\.|[^"\\\r\n])*"|`[^`]*`'), lookbehind=True, greedy=True),
        "keyword": words_pattern(GO_KEYWORDS),
        "boolean": re.compile(r"\b(?:_|false|iota|nil|true)\b"),
        "number": (
            re.compile(r"\b0(?:b[01_]+|o[0-7_]+)i?\b", re.IGNORECASE),
            re.compile(r"\b0x(?:[a-f\d_]+(?:\.[a-f\d_]*)?|\.[a-f\d_]+)(?:p[+-]?\d+(?:_\d+)*)?i?(?!\w)", re.IGNORECASE),
            re.compile(r"(?:\b\d[\d_]*(?:\.[\d_]*)?|\B\.\d[\d_]*)(?:e[+-]?[\d_]+)?i?(?!\w)", re.IGNORECASE),
        ),
        "operator": re.compile(r"[*/%^!=]=?|\+[=+]?|-[=-]?|\|[=|]?|&(?:=|&|\^=?)?|>(?:>=?|=)?|<(?:<=?|=|-)?|:=|\.\.\."),
        "builtin": words_pattern(GO_BUILTINS),
    })
    go = go.insert_before("string", {
        "char": Rule(re.compile(r"'(?:\\.|[^'\\\r\n]){0,10}'"), greedy=True),
    })
    return go.without("class-name")


BASE_GRAMMARS = {
    "markup": markup_grammar,
    "go": go_grammar,
}

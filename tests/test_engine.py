import unittest
import sys
import os
import re

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../')))

from templight.engine import (
    GrammarRegistry, Rule, RuleSet, Token, TokenKind, ROOT,
    default_registry, markup_grammar, go_grammar, stringify, tokenize,
)
from templight.exceptions import MissingDependency


def kinds(items):
    return [item.kind if isinstance(item, Token) else str for item in items]


class TestRuleSet(unittest.TestCase):
    def setUp(self):
        self.rules = RuleSet({
            "comment": re.compile(r"#.*"),
            "number": re.compile(r"\d+"),
        })

    def test_extend_keeps_position_and_appends_new_names(self):
        extended = self.rules.extend({"number": re.compile(r"\d"), "keyword": re.compile(r"if")})
        self.assertEqual(extended.names(), ["comment", "number", "keyword"])
        self.assertEqual(extended["number"].pattern.pattern, r"\d")
        # receiver is untouched
        self.assertEqual(self.rules.names(), ["comment", "number"])
        self.assertEqual(self.rules["number"].pattern.pattern, r"\d+")

    def test_insert_before(self):
        inserted = self.rules.insert_before("number", {"string": re.compile(r'"[^"]*"')})
        self.assertEqual(inserted.names(), ["comment", "string", "number"])
        self.assertEqual(self.rules.names(), ["comment", "number"])

    def test_insert_before_unknown_name_appends(self):
        inserted = self.rules.insert_before("missing", {"string": re.compile(r'"')})
        self.assertEqual(inserted.names(), ["comment", "number", "string"])

    def test_replace_requires_existing_name(self):
        with self.assertRaises(KeyError):
            self.rules.replace("keyword", re.compile("x"))

    def test_multiple_rules_under_one_name(self):
        rules = RuleSet({"number": (re.compile(r"0x\w+"), re.compile(r"\d+"))})
        self.assertEqual(len(rules.rules("number")), 2)
        self.assertIsInstance(rules["number"], tuple)

    def test_rule_replace(self):
        rule = Rule(re.compile("a"), alias="x", greedy=True)
        changed = rule.replace(pattern=re.compile("b"))
        self.assertEqual(changed.pattern.pattern, "b")
        self.assertEqual(changed.alias, ("x",))
        self.assertTrue(changed.greedy)
        self.assertEqual(rule.pattern.pattern, "a")
        with self.assertRaises(TypeError):
            rule.replace(colour="red")


class TestTokenize(unittest.TestCase):
    def test_splits_strings_in_rule_order(self):
        grammar = RuleSet({
            "keyword": re.compile(r"\bif\b"),
            "number": re.compile(r"\d+"),
        })
        items = tokenize("if 42 then", grammar)
        self.assertEqual(items, [
            Token(TokenKind.KEYWORD, "if"),
            " ",
            Token(TokenKind.NUMBER, "42"),
            " then",
        ])

    def test_lookbehind_drops_first_group(self):
        grammar = RuleSet({
            "comment": Rule(re.compile(r"(^|[^\\:])//.*"), lookbehind=True),
        })
        items = tokenize("a // note", grammar)
        self.assertEqual(items, ["a ", Token(TokenKind.COMMENT, "// note")])

    def test_greedy_rule_swallows_earlier_tokens(self):
        grammar = RuleSet({
            "number": re.compile(r"\d+"),
            "string": Rule(re.compile(r'"[^"]*"'), greedy=True),
        })
        items = tokenize('x "a 1 b" 2', grammar)
        self.assertEqual(items, [
            "x ",
            Token(TokenKind.STRING, '"a 1 b"'),
            " ",
            Token(TokenKind.NUMBER, "2"),
        ])

    def test_greedy_rule_does_not_start_inside_a_token(self):
        grammar = RuleSet({
            "comment": re.compile(r"#.*"),
            "string": Rule(re.compile(r'"[^"]*"'), greedy=True),
        })
        items = tokenize('# "quoted"\n"real"', grammar)
        self.assertEqual(items, [
            Token(TokenKind.COMMENT, '# "quoted"'),
            "\n",
            Token(TokenKind.STRING, '"real"'),
        ])

    def test_inside_grammar_with_root_as_rest(self):
        grammar = RuleSet({
            "string": Rule(
                re.compile(r"\[[^\]]*\]"),
                inside=RuleSet({"punctuation": re.compile(r"^\[|\]$")}, rest=ROOT),
            ),
            "number": re.compile(r"\d+"),
        })
        items = tokenize("[1] 2", grammar)
        self.assertEqual(items, [
            Token(TokenKind.STRING, [
                Token(TokenKind.PUNCTUATION, "["),
                Token(TokenKind.NUMBER, "1"),
                Token(TokenKind.PUNCTUATION, "]"),
            ]),
            " ",
            Token(TokenKind.NUMBER, "2"),
        ])

    def test_rule_without_kind_is_rejected(self):
        grammar = RuleSet({"mystery": re.compile("x")})
        with self.assertRaises(ValueError):
            tokenize("x", grammar)

    def test_empty_input(self):
        self.assertEqual(tokenize("", markup_grammar()), [])

    def test_markup_tag_structure(self):
        items = tokenize('<a href="x">go</a>', markup_grammar())
        self.assertEqual(kinds(items), [TokenKind.TAG, str, TokenKind.TAG])
        opening = items[0]
        self.assertEqual(kinds(opening.content), [
            TokenKind.TAG_NAME, str, TokenKind.ATTR_NAME, TokenKind.ATTR_VALUE, TokenKind.PUNCTUATION,
        ])
        self.assertEqual(opening.content[0].content, [Token(TokenKind.PUNCTUATION, "<"), "a"])
        equals = opening.content[3].content[0]
        self.assertEqual(equals.alias, ("attr-equals",))

    def test_go_grammar(self):
        items = tokenize('func main() { x := "s" }', go_grammar())
        found = {(item.kind, item.content) for item in items if isinstance(item, Token)}
        self.assertIn((TokenKind.KEYWORD, "func"), found)
        self.assertIn((TokenKind.FUNCTION, "main"), found)
        self.assertIn((TokenKind.OPERATOR, ":="), found)
        self.assertIn((TokenKind.STRING, '"s"'), found)
        self.assertIn((TokenKind.PUNCTUATION, "{"), found)

    def test_raw_text_round_trip(self):
        source = '<!DOCTYPE html>\n<!-- c --><p class=x>&amp; "q"</p>'
        items = tokenize(source, markup_grammar())
        self.assertEqual(stringify(items), source)


class TestGrammarRegistry(unittest.TestCase):
    def test_get_missing_raises(self):
        registry = GrammarRegistry()
        with self.assertRaises(MissingDependency) as ctx:
            registry.get("markup")
        self.assertEqual(ctx.exception.name, "markup")
        self.assertIsNone(registry.find("markup"))

    def test_default_registry_has_base_grammars(self):
        registry = default_registry()
        self.assertIn("markup", registry)
        self.assertIn("go", registry)

    def test_register_replaces_whole_grammar(self):
        registry = GrammarRegistry()
        first = RuleSet({"number": re.compile(r"\d+")})
        second = RuleSet({"keyword": re.compile(r"if")})
        registry.register("toy", first)
        held = registry.get("toy")
        registry.register("toy", second)
        self.assertIs(registry.get("toy"), second)
        # a reader holding the old grammar still sees it intact
        self.assertIs(held, first)
        self.assertEqual(held.names(), ["number"])

    def test_register_rejects_non_rule_sets(self):
        with self.assertRaises(TypeError):
            GrammarRegistry().register("toy", {"number": r"\d+"})

    def test_hooks_run_after_tokenize_and_are_deduplicated(self):
        registry = GrammarRegistry({"toy": RuleSet({"number": re.compile(r"\d+")})})
        calls = []

        def hook(env):
            calls.append(env["language"])
            env["tokens"] = [stringify(env["tokens"])]

        self.assertTrue(registry.add_hook("after-tokenize", hook))
        self.assertFalse(registry.add_hook("after-tokenize", hook))
        tokens = registry.highlight("a 1", "toy")
        self.assertEqual(calls, ["toy"])
        self.assertEqual(tokens, ["a 1"])


if __name__ == '__main__':
    unittest.main()

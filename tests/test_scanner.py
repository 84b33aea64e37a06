from __future__ import annotations

from metricscan.scanner import extract_arguments, find_matching_brace, split_top_level


def test_extract_arguments_keeps_nested_calls_and_strings():
    text = 'counter(scenarioName, stepName, "a, (b)", mapOf("k" to listOf(1, 2)))'
    args = extract_arguments(text, text.index("("))

    assert args == ["scenarioName", "stepName", '"a, (b)"', 'mapOf("k" to listOf(1, 2))']


def test_extract_arguments_handles_escaped_quotes_and_lambdas():
    text = r'info("say \"hi\", now", { a, b -> a + b })'
    args = extract_arguments(text, text.index("("))

    assert args == [r'"say \"hi\", now"', "{ a, b -> a + b }"]


def test_extract_arguments_multiline_named():
    text = """timer(
        scenarioName = "",
        name = TIMER_NAME,
    )"""
    args = extract_arguments(text, text.index("("))

    assert args == ['scenarioName = ""', "name = TIMER_NAME"]


def test_extract_arguments_degrades_on_bad_input():
    assert extract_arguments("counter()", 7) == []
    assert extract_arguments('counter(a, "b', 7) == []
    assert extract_arguments("counter(a, b", 7) == []
    assert extract_arguments("counter(a)", 0) == []
    assert extract_arguments("x", 5) == []


def test_find_matching_brace_skips_strings_and_comments():
    text = 'apply { val s = "}" // } here\n /* { } } */ call("\\"}") }'
    close = find_matching_brace(text, text.index("{"))

    assert close == len(text) - 1


def test_find_matching_brace_nested_and_unmatched():
    text = "run { a { b } c }"
    assert find_matching_brace(text, 4) == len(text) - 1
    assert find_matching_brace(text, text.index("{", 5)) == text.index("}")
    assert find_matching_brace("run { a { b }", 4) == -1
    assert find_matching_brace("run ( a )", 4) == -1


def test_split_top_level():
    assert split_top_level('1, "a,b", listOf(2, 3), [4, 5]') == ["1", '"a,b"', "listOf(2, 3)", "[4, 5]"]
    assert split_top_level("") == []

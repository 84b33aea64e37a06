from __future__ import annotations

from metricscan.models import SourceText
from metricscan.symbols import apply_overrides, build_symbol_table, extract_variables


SAMPLE = """
class MyStep(private val redisMethod: String) {
    private val meterPrefix = "redis-lettuce-poll-$redisMethod"
    val plain = "plain"
    internal val typed: String = "typed.value"
    private val computed = prefix + "-x"
    private val number = 12

    companion object {
        private const val TIMER_NAME = "kafka.events.export"
        val plain = "second"
    }
}
"""


def test_extract_variables_collects_string_literals():
    variables = extract_variables(SAMPLE)

    assert variables["meterPrefix"] == "redis-lettuce-poll-$redisMethod"
    assert variables["typed"] == "typed.value"
    assert variables["TIMER_NAME"] == "kafka.events.export"
    assert "computed" not in variables
    assert "number" not in variables
    assert "redisMethod" not in variables


def test_later_declarations_win():
    assert extract_variables(SAMPLE)["plain"] == "second"


def test_overrides_only_apply_to_matching_class():
    variables = {"plain": "declared"}
    apply_overrides(
        variables,
        {"MyStep.plain": "overridden", "MyStep.redisMethod": "scan", "Other.flag": "x"},
        "MyStep",
    )

    assert variables == {"plain": "overridden", "redisMethod": "scan"}


def test_build_symbol_table_uses_file_stem():
    source = SourceText(path="src/main/kotlin/MyStep.kt", text=SAMPLE)
    table = build_symbol_table(source, {"MyStep.redisMethod": "scan", "MyStepX.plain": "no"})

    assert table["redisMethod"] == "scan"
    assert table["plain"] == "second"

import math

import pytest

from prng import PseudoRandom
from rules import (
    ConfigError,
    Grammar,
    Rule,
    RuleIndex,
    grammar_from_dict,
    make_grammar,
    select_rule,
)


class FixedRandom:
    """Random source returning canned values and counting calls."""

    def __init__(self, *values: float) -> None:
        self.values = list(values) or [0.5]
        self.calls = 0

    def next(self) -> float:
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


class TestMakeGrammar:
    def test_basic(self) -> None:
        g = make_grammar("X", [Rule("X", "F[+X]", 1), Rule("F", "FF", 0)])
        assert isinstance(g, Grammar)
        assert g.axiom == "X"
        assert g.rules[0] == Rule("X", "F[+X]", 1.0)
        assert isinstance(g.rules[1].probability, float)

    def test_tuple_rules_accepted(self) -> None:
        g = make_grammar("X", [("X", "FX"), ("F", "FF", 2)])
        assert g.rules == (Rule("X", "FX", 0.0), Rule("F", "FF", 2.0))

    def test_empty_axiom(self) -> None:
        with pytest.raises(ConfigError):
            make_grammar("", [Rule("F", "FF", 0)])

    def test_empty_rules(self) -> None:
        with pytest.raises(ConfigError):
            make_grammar("F", [])

    def test_rules_not_a_list(self) -> None:
        with pytest.raises(ConfigError):
            make_grammar("F", 7)  # type: ignore[arg-type]

    def test_multichar_input(self) -> None:
        with pytest.raises(ConfigError):
            make_grammar("F", [Rule("FF", "F", 0)])

    def test_non_string_output(self) -> None:
        with pytest.raises(ConfigError):
            make_grammar("F", [Rule("F", None, 0)])

    @pytest.mark.parametrize("p", [-1, math.nan, math.inf, "1", True])
    def test_bad_probability(self, p: object) -> None:
        with pytest.raises(ConfigError):
            make_grammar("F", [Rule("F", "FF", p)])

    def test_config_error_is_value_error(self) -> None:
        assert issubclass(ConfigError, ValueError)


class TestGrammarFromDict:
    def test_basic(self) -> None:
        g = grammar_from_dict(
            {
                "axiom": "X",
                "rules": [
                    {"input": "X", "output": "F[+X]", "probability": 1},
                    {"input": "F", "output": "FF"},
                ],
            }
        )
        assert g.axiom == "X"
        assert g.rules[1].probability == 0.0

    def test_missing_axiom(self) -> None:
        with pytest.raises(ConfigError):
            grammar_from_dict({"rules": [{"input": "F", "output": "FF"}]})

    def test_rules_not_a_list(self) -> None:
        with pytest.raises(ConfigError):
            grammar_from_dict({"axiom": "F", "rules": {"F": "FF"}})

    def test_rule_missing_output(self) -> None:
        with pytest.raises(ConfigError):
            grammar_from_dict({"axiom": "F", "rules": [{"input": "F"}]})


class TestRuleIndex:
    def test_groups_by_input_in_order(self) -> None:
        rules = [Rule("X", "a", 1), Rule("F", "b", 1), Rule("X", "c", 2)]
        index = RuleIndex(rules)
        assert index.rules_for("X") == [rules[0], rules[2]]
        assert index.rules_for("F") == [rules[1]]
        assert len(index) == 2
        assert "X" in index

    def test_unsorted_rules_need_no_preparation(self) -> None:
        rules = [Rule("Z", "z", 0), Rule("A", "a", 0), Rule("Z", "y", 0)]
        assert [r.output for r in RuleIndex(rules).rules_for("Z")] == ["z", "y"]

    def test_missing_symbol_is_empty(self) -> None:
        index = RuleIndex([Rule("F", "FF", 0)])
        assert index.rules_for("+") == []
        assert "+" not in index

    def test_empty_rules_rejected(self) -> None:
        with pytest.raises(ConfigError):
            RuleIndex([])


class TestSelectRule:
    def test_zero_probabilities_pick_first_without_randomness(self) -> None:
        rules = [Rule("F", "A", 0), Rule("F", "B", 0)]
        rng = FixedRandom()
        for _ in range(1000):
            assert select_rule(rules, rng) is rules[0]
        assert rng.calls == 0

    def test_one_draw_per_call(self) -> None:
        rules = [Rule("F", "A", 1), Rule("F", "B", 3)]
        rng = FixedRandom(0.1, 0.9)
        for _ in range(50):
            select_rule(rules, rng)
        assert rng.calls == 50

    def test_cumulative_walk(self) -> None:
        rules = [Rule("F", "A", 1), Rule("F", "B", 3)]
        # r = next() * 4
        assert select_rule(rules, FixedRandom(0.2)) is rules[0]
        assert select_rule(rules, FixedRandom(0.3)) is rules[1]

    def test_cumulative_must_strictly_exceed(self) -> None:
        rules = [Rule("F", "A", 1), Rule("F", "B", 3)]
        # r == 1.0 equals the first cumulative value, so the second wins
        assert select_rule(rules, FixedRandom(0.25)) is rules[1]

    def test_zero_weight_rule_never_chosen(self) -> None:
        rules = [Rule("F", "A", 1), Rule("F", "B", 0)]
        for value in (0.0, 0.5, 0.999, 1.0):
            assert select_rule(rules, FixedRandom(value)) is rules[0]

    def test_weighted_frequencies(self) -> None:
        rules = [Rule("F", "A", 1), Rule("F", "B", 3)]
        rng = PseudoRandom("selector")
        n = 100000
        second = sum(select_rule(rules, rng) is rules[1] for _ in range(n))
        assert 0.72 <= second / n <= 0.78

    def test_empty_candidates_is_a_contract_violation(self) -> None:
        with pytest.raises(ValueError):
            select_rule([], FixedRandom())

import pytest
from packages.engine import (
    RuleSet, compile_rules, check_word, filter_candidates, explain_rejection, classify_line,
)

SCENARIO_A = "O AT 3\nA IN WORD\nNO S, T, R, E\nLENGTH: 5"


# --- compiler ---
def test_compile_scenario_a():
    r = compile_rules(SCENARIO_A)
    assert dict(r.exact) == {2: "O"}
    assert dict(r.present) == {"A": ()}
    assert set(r.absent) == {"S", "T", "R", "E"}
    assert r.length == 5


def test_compile_is_case_insensitive_and_whitespace_tolerant():
    r = compile_rules("  o   at 3 \n\n a in  word \n no s,t , r,e\nlength:5")
    assert r == compile_rules(SCENARIO_A)


def test_compile_twice_is_identical():
    assert compile_rules(SCENARIO_A) == compile_rules(SCENARIO_A)
    assert compile_rules(SCENARIO_A).to_dict() == compile_rules(SCENARIO_A).to_dict()


@pytest.mark.parametrize("text", ["", None, "hello there\nthe word is nice", "O AT\nLENGTH five"])
def test_compile_empty_or_unrecognized_gives_default(text):
    r = compile_rules(text)
    assert r == RuleSet.build()
    assert r.length == 5 and not r.exact and not r.present and r.absent == ()


def test_present_with_not_at_scenario_b():
    r = compile_rules("A IN WORD, NOT AT 1, 2, 3\nLENGTH: 5")
    assert r.present["A"] == (0, 1, 2)
    # A at index 3 is allowed
    assert explain_rejection("TITAN", r) is None


def test_present_not_at_drops_zero():
    r = compile_rules("E in word, not at 0, 2")
    assert r.present["E"] == (1,)


def test_exact_out_of_range_dropped_rest_compiles():
    r = compile_rules("A AT 0\nO AT 3\nNO X")
    assert dict(r.exact) == {2: "O"}
    assert r.absent == ("X",)


def test_exact_same_position_later_rule_wins():
    r = compile_rules("O AT 3\nI AT 3")
    assert dict(r.exact) == {2: "I"}


def test_exact_ninth_position_accepted():
    r = compile_rules("Z AT 9\nLENGTH: 9")
    assert dict(r.exact) == {8: "Z"}
    assert r.length == 9


def test_absent_keeps_single_letters_only():
    r = compile_rules("NO S, TR, E, S")
    assert r.absent == ("S", "E", "S")


def test_length_zero_ignored():
    assert compile_rules("LENGTH: 0").length == 5


def test_first_matching_line_rule_wins():
    assert classify_line("O AT 3") == "exact"
    assert classify_line("NO S, T") == "absent"
    assert classify_line("A IN WORD, NOT AT 2") == "present"
    assert classify_line("LENGTH: 6") == "length"
    assert classify_line("A AT 0") is None
    assert classify_line("WHATEVER") is None


def test_rules_are_read_only():
    r = compile_rules(SCENARIO_A)
    with pytest.raises(TypeError):
        r.exact[0] = "X"
    with pytest.raises(Exception):
        r.length = 6


# --- evaluator ---
@pytest.mark.parametrize("word,expected", [
    ("AVOID", None),
    ("GROAN", "absent"),  # R is ruled out
    ("STORE", "absent"),
    ("GROANS", "length"),
    ("GRAIN", "exact"),
    ("BLOOD", "present"),
    ("ABOUT", "absent"),
])
def test_explain_rejection_scenario_a(word, expected):
    assert explain_rejection(word, compile_rules(SCENARIO_A)) == expected


def test_check_word_lowercase_input():
    assert check_word("avoid", compile_rules(SCENARIO_A)) is True


def test_present_at_banned_position_rejected():
    r = compile_rules("A IN WORD, NOT AT 1, 2, 3")
    assert check_word("TITAN", r) is True
    assert check_word("ABOUT", r) is False
    assert check_word("CRONY", r) is False


def test_letter_absent_and_present_always_rejected_by_absent_check():
    r = compile_rules("A IN WORD\nNO A")
    for w in ["AAAAA", "TITAN", "CRONY"]:
        assert explain_rejection(w, r) in ("absent", "present")
    assert explain_rejection("TITAN", r) == "absent"


def test_evaluation_is_deterministic():
    r = compile_rules(SCENARIO_A)
    words = ["AVOID", "STORE", "AFOUL", "AVOID"]
    first = [check_word(w, r) for w in words]
    second = [check_word(w, r) for w in reversed(words)][::-1]
    assert first == second


def test_filter_candidates_preserves_order():
    r = compile_rules(SCENARIO_A)
    words = ["STORE", "GROAN", "afoul", "BLOAT", "AVOID"]
    assert filter_candidates(words, r) == ["AFOUL", "AVOID"]

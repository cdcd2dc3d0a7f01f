from career_bot.choices import resolve_choice

OPTIONS = ["Linear regression", "K-means", "Decision tree", "Naive Bayes"]


def test_resolve_choice_letter():
    assert resolve_choice("b", OPTIONS) == 1
    assert resolve_choice("C)", OPTIONS) == 2


def test_resolve_choice_number_is_one_based():
    assert resolve_choice("1", OPTIONS) == 0
    assert resolve_choice("4.", OPTIONS) == 3


def test_resolve_choice_option_text():
    assert resolve_choice("  k-means ", OPTIONS) == 1


def test_resolve_choice_rejects_out_of_range_and_free_text():
    assert resolve_choice("E", OPTIONS) is None
    assert resolve_choice("5", OPTIONS) is None
    assert resolve_choice("I am not sure", OPTIONS) is None
    assert resolve_choice("a", []) is None

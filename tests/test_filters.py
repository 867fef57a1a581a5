from sqlalchemy.dialects import postgresql

from recipe_catalog import models
from recipe_catalog.filters import (
    CONTAINS,
    Comparison,
    Pagination,
    SearchFilters,
    build_conditions,
    build_predicate,
    paginate,
    parse_comparison,
)


def test_parse_comparison_prefixes():
    assert parse_comparison(">=4.5") == (Comparison.GE, "4.5")
    assert parse_comparison("<=400") == (Comparison.LE, "400")
    assert parse_comparison(">4") == (Comparison.GT, "4")
    assert parse_comparison("<60") == (Comparison.LT, "60")
    assert parse_comparison("=3") == (Comparison.EQ, "3")
    # no operator means equality
    assert parse_comparison("4.5") == (Comparison.EQ, "4.5")


def test_parse_comparison_prefers_two_char_operators():
    # ">=" must not be read as ">" followed by "=4"
    assert parse_comparison(">=10")[0] is Comparison.GE
    assert parse_comparison("<= 10") == (Comparison.LE, "10")


def test_paginate_defaults_and_clamp():
    assert paginate() == Pagination(page=1, limit=10)
    assert paginate("3", "20") == Pagination(page=3, limit=20)
    assert paginate("1", "100").limit == 50
    assert paginate(2, 500) == Pagination(page=2, limit=50)


def test_paginate_invalid_values_fall_back():
    assert paginate("abc", "xyz") == Pagination(page=1, limit=10)
    assert paginate("0", "0") == Pagination(page=1, limit=10)
    assert paginate("-2", "-5") == Pagination(page=1, limit=10)
    assert paginate("", "") == Pagination(page=1, limit=10)


def test_paginate_custom_limits():
    assert paginate(None, None, default_limit=5, max_limit=20).limit == 5
    assert paginate(None, "30", default_limit=5, max_limit=20).limit == 20


def test_pagination_offset():
    assert Pagination(page=1, limit=10).offset == 0
    assert Pagination(page=2, limit=3).offset == 3
    assert Pagination(page=5, limit=50).offset == 200


def test_build_conditions_text_and_numeric():
    filters = SearchFilters(
        title="pie", cuisine="Southern", rating=">=4.5",
        total_time="<60", calories="<=400",
    )
    conditions = build_conditions(filters)
    assert [(c.column.key, c.op, c.value) for c in conditions] == [
        ("title", CONTAINS, "pie"),
        ("cuisine", CONTAINS, "Southern"),
        ("rating", Comparison.GE, 4.5),
        ("total_time", Comparison.LT, 60),
        ("calories", Comparison.LE, 400),
    ]


def test_build_conditions_drops_unparseable_values():
    filters = SearchFilters(rating=">=abc", total_time="soon", calories="<=lots")
    assert build_conditions(filters) == []


def test_build_conditions_ignores_empty_values():
    assert build_conditions(SearchFilters(title="", cuisine="", rating="")) == []


def test_rating_rejects_non_finite():
    assert build_conditions(SearchFilters(rating="nan")) == []
    assert build_conditions(SearchFilters(rating=">inf")) == []


def test_calories_uses_first_digit_run():
    conditions = build_conditions(SearchFilters(calories="<=400 kcal"))
    assert len(conditions) == 1
    assert conditions[0].column is models.Recipe.calories
    assert conditions[0].value == 400


def test_values_are_bound_not_inlined():
    hostile = "x'; DROP TABLE recipes; --"
    clauses = build_predicate(SearchFilters(title=hostile, rating=">=4"))
    for clause in clauses:
        compiled = clause.compile(dialect=postgresql.dialect())
        assert "DROP" not in str(compiled)
    params = clauses[0].compile(dialect=postgresql.dialect()).params
    assert any("DROP TABLE" in str(v) for v in params.values())


def test_paginate_caps_huge_page():
    pagination = paginate("99999999999999999999", "50")
    assert pagination.limit == 50
    assert pagination.offset <= 2 ** 63 - 1


def test_out_of_range_numbers_drop_the_filter():
    assert build_conditions(SearchFilters(calories="<=99999999999")) == []
    assert build_conditions(SearchFilters(total_time=">1e20")) == []

"""Tokenizerのテスト."""

from sqlbind.parser.tokenizer import VARIABLE_PATTERN, StatementVariable, tokenize


class TestTokenizeBasic:
    """基本的なプレースホルダの抽出を検証する."""

    def test_single(self) -> None:
        variables = tokenize("SELECT * FROM table WHERE key = :key")
        assert len(variables) == 1
        v = variables[0]
        assert v.name == "key"
        assert v.position == 1

    def test_name_excludes_colon(self) -> None:
        variables = tokenize("WHERE id = :id")
        assert variables[0].name == "id"

    def test_alphanumeric_name(self) -> None:
        variables = tokenize("WHERE a = :user1Id")
        assert variables[0].name == "user1Id"

    def test_name_stops_at_underscore(self) -> None:
        variables = tokenize("WHERE a = :user_id")
        assert variables[0].name == "user"

    def test_case_sensitive(self) -> None:
        variables = tokenize("WHERE a = :Key AND b = :key")
        assert [v.name for v in variables] == ["Key", "key"]

    def test_no_placeholder(self) -> None:
        assert tokenize("SELECT * FROM table") == []

    def test_span_includes_lead_in(self) -> None:
        sql = "key = :key"
        v = tokenize(sql)[0]
        assert sql[v.start : v.end] == " :key"

    def test_variable_is_frozen_dataclass(self) -> None:
        v = StatementVariable(name="a", position=1, start=0, end=3)
        assert v == StatementVariable(name="a", position=1, start=0, end=3)


class TestTokenizePositions:
    """位置番号の採番を検証する."""

    def test_repeated_name(self) -> None:
        variables = tokenize("SELECT * FROM t WHERE a > :x AND b < :y AND c = :x")
        assert [(v.name, v.position) for v in variables] == [("x", 1), ("y", 2), ("x", 3)]

    def test_positions_are_sequential(self) -> None:
        variables = tokenize("INSERT INTO t VALUES (:a, :b, :c, :d)")
        assert [v.position for v in variables] == [1, 2, 3, 4]


class TestTokenizeBoundary:
    """マッチ規則の境界を検証する."""

    def test_space_separated(self) -> None:
        variables = tokenize("SELECT :a :b")
        assert [(v.name, v.position) for v in variables] == [("a", 1), ("b", 2)]

    def test_parenthesized_space_separated(self) -> None:
        variables = tokenize("f(:a :b)")
        assert [v.name for v in variables] == ["a", "b"]

    def test_start_of_text_not_recognized(self) -> None:
        variables = tokenize(":a :b")
        assert [v.name for v in variables] == ["b"]
        assert variables[0].position == 1

    def test_adjacent_only_first(self) -> None:
        variables = tokenize("(:a:b)")
        assert [v.name for v in variables] == ["a"]

    def test_double_colon_cast(self) -> None:
        assert tokenize("SELECT x::int FROM t") == []

    def test_colon_followed_by_digit(self) -> None:
        assert tokenize("SELECT '12:30' FROM t") == []

    def test_pattern_constant(self) -> None:
        assert VARIABLE_PATTERN == r"[^:]:([a-zA-Z][a-zA-Z0-9]*)"

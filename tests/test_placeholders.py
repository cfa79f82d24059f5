"""플레이스홀더 변환 테스트"""

import pytest

from app.infra.db.base import StorageError, check_params
from app.infra.db.placeholders import code_only, count_placeholders, to_numbered


class TestToNumbered:
    """`?` -> `$n` 변환"""

    @pytest.mark.parametrize(
        "query, expected, count",
        [
            ("SELECT 1", "SELECT 1", 0),
            ("SELECT * FROM users WHERE id = ?", "SELECT * FROM users WHERE id = $1", 1),
            (
                "INSERT INTO users (email, password, name) VALUES (?, ?, ?)",
                "INSERT INTO users (email, password, name) VALUES ($1, $2, $3)",
                3,
            ),
        ],
    )
    def test_numbers_left_to_right(self, query, expected, count):
        assert to_numbered(query) == (expected, count)

    def test_ignores_question_mark_in_string_literal(self):
        """문자열 리터럴 안의 ?는 그대로"""
        query = "SELECT * FROM history WHERE cv_text = 'why?' AND user_id = ?"

        translated, count = to_numbered(query)

        assert translated == "SELECT * FROM history WHERE cv_text = 'why?' AND user_id = $1"
        assert count == 1

    def test_handles_escaped_quote(self):
        """'' 이스케이프 뒤의 플레이스홀더도 번호가 붙음"""
        query = "SELECT 'it''s ?' AS a, ? AS b"

        translated, count = to_numbered(query)

        assert translated == "SELECT 'it''s ?' AS a, $1 AS b"
        assert count == 1

    def test_ignores_quoted_identifier_and_comments(self):
        query = 'SELECT "odd?col" FROM t -- really?\nWHERE a = ? /* and? */ AND b = ?'

        translated, count = to_numbered(query)

        assert translated == 'SELECT "odd?col" FROM t -- really?\nWHERE a = $1 /* and? */ AND b = $2'
        assert count == 2

    def test_many_placeholders_keep_order(self):
        """10개 이상이어도 번호가 순서대로"""
        query = ", ".join("?" for _ in range(12))

        translated, count = to_numbered(query)

        assert translated == ", ".join(f"${i}" for i in range(1, 13))
        assert count == 12


class TestCheckParams:
    """플레이스홀더/파라미터 개수 검증"""

    @pytest.mark.parametrize(
        "query, params",
        [
            ("SELECT 1", ()),
            ("SELECT ?", (1,)),
            ("SELECT ?, ?", (1, 2)),
        ],
    )
    def test_matching_counts_pass(self, query, params):
        check_params(query, params)

    @pytest.mark.parametrize(
        "query, params",
        [
            ("SELECT 1", (1,)),
            ("SELECT ?", ()),
            ("SELECT ?, ?", (1,)),
        ],
    )
    def test_mismatch_raises(self, query, params):
        with pytest.raises(StorageError):
            check_params(query, params)

    def test_count_placeholders(self):
        assert count_placeholders("UPDATE users SET name = ?, bio = ? WHERE id = ?") == 3


class TestCodeOnly:
    """리터럴/주석 제거"""

    @pytest.mark.parametrize(
        "query, hidden",
        [
            ("INSERT INTO t (a) VALUES ('returning')", "returning"),
            ('SELECT "weird?name" FROM t', "weird"),
            ("SELECT 1 -- returning id\n", "returning"),
            ("SELECT /* RETURNING */ 1", "RETURNING"),
        ],
    )
    def test_hides_literals_and_comments(self, query, hidden):
        assert hidden not in code_only(query)

    def test_keeps_sql_body(self):
        query = "INSERT INTO t (a) VALUES ('x') RETURNING id"

        assert code_only(query) == "INSERT INTO t (a) VALUES ( ) RETURNING id"

    def test_unterminated_literal(self):
        assert code_only("SELECT 'abc") == "SELECT  "

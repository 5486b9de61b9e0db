"""
Tests for student search queries.
"""

from unittest.mock import MagicMock

import pytest

from app.modules.students.repository import StudentRepository, _contains_pattern


@pytest.fixture
def empty_result(mock_db):
    result = MagicMock()
    result.scalars.return_value.all.return_value = []
    mock_db.execute.return_value = result
    return mock_db


class TestContainsPattern:
    def test_plain_text(self):
        assert _contains_pattern("Patil") == "%Patil%"

    def test_wildcards_are_literal(self):
        assert _contains_pattern("100%") == "%100\\%%"
        assert _contains_pattern("10_A") == "%10\\_A%"

    def test_backslash_is_escaped(self):
        assert _contains_pattern("A\\B") == "%A\\\\B%"


class TestSearch:
    @pytest.mark.asyncio
    async def test_name_wildcards_do_not_match_everything(self, empty_result):
        await StudentRepository.search(empty_result, 3, name="%", standard="_")

        statement = empty_result.execute.call_args.args[0]
        compiled = statement.compile()

        assert "ESCAPE" in str(compiled)
        assert "%\\%%" in compiled.params.values()
        assert "%\\_%" in compiled.params.values()
        assert 3 in compiled.params.values()

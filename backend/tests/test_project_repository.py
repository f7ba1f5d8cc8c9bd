"""
Portfolio Backend — Project Repository Tests
==============================================

What we test:
    ✅ Listing SQL: ORDER BY featured DESC, "order" ASC, created_at DESC
    ✅ Search SQL: case-insensitive match on title, description and tech
    ✅ LIKE wildcards in the query are escaped
    ✅ Driver errors translated (DataError → 400, others → 500)
    ✅ delete_by_id reports whether a row was removed
"""

import re
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import DataError, OperationalError

from app.exceptions import DatabaseError, ValidationError
from app.repositories.project_repository import ProjectRepository, build_search_query


def compile_pg(query):
    return query.compile(dialect=postgresql.dialect())


class TestBuildSearchQuery:

    def test_listing_order(self):
        sql = str(compile_pg(build_search_query()))
        assert 'ORDER BY projects.featured DESC, projects."order" ASC, projects.created_at DESC' in sql

    @pytest.mark.parametrize("q", [None, "", "   "])
    def test_blank_query_has_no_filter(self, q):
        sql = str(compile_pg(build_search_query(q)))
        assert "WHERE" not in sql

    def test_search_covers_title_description_and_tech(self):
        sql = str(compile_pg(build_search_query("react")))

        for column in ("title", "description"):
            assert re.search(
                rf"lower\(projects\.{column}\) LIKE|projects\.{column} ILIKE", sql
            )
        assert "array_to_string(projects.tech" in sql
        assert " OR " in sql

    def test_query_is_trimmed(self):
        params = compile_pg(build_search_query("  react ")).params
        assert "react" in params.values()

    def test_wildcards_are_escaped(self):
        params = compile_pg(build_search_query("50%_off")).params
        assert "50/%/_off" in params.values()


class TestRepositoryWrites:

    @pytest.mark.asyncio
    async def test_create_flushes_and_refreshes(self, mock_db_session):
        repo = ProjectRepository(mock_db_session)

        project = await repo.create(title="Hi", description="0123456789", tech=["Go"])

        mock_db_session.add.assert_called_once_with(project)
        mock_db_session.flush.assert_awaited_once()
        mock_db_session.refresh.assert_awaited_once_with(project)
        assert project.tech == ["Go"]

    @pytest.mark.asyncio
    async def test_data_error_becomes_validation_error(self, mock_db_session):
        mock_db_session.flush.side_effect = DataError("INSERT", {}, Exception("value too long"))
        repo = ProjectRepository(mock_db_session)

        with pytest.raises(ValidationError) as exc_info:
            await repo.create(title="Hi", description="0123456789")
        assert exc_info.value.errors[0]["field"] == "body"

    @pytest.mark.asyncio
    async def test_other_errors_become_database_error(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))
        repo = ProjectRepository(mock_db_session)

        with pytest.raises(DatabaseError) as exc_info:
            await repo.find("x")
        assert exc_info.value.context["operation"] == "find"

    @pytest.mark.asyncio
    async def test_delete_by_id(self, mock_db_session):
        result = MagicMock()
        result.rowcount = 1
        mock_db_session.execute.return_value = result
        repo = ProjectRepository(mock_db_session)

        assert await repo.delete_by_id(uuid4()) is True

        result.rowcount = 0
        assert await repo.delete_by_id(uuid4()) is False

    @pytest.mark.asyncio
    async def test_find_by_id(self, mock_db_session):
        sentinel = object()
        result = MagicMock()
        result.scalar_one_or_none.return_value = sentinel
        mock_db_session.execute.return_value = result

        assert await ProjectRepository(mock_db_session).find_by_id(uuid4()) is sentinel

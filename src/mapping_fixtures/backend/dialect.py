# src/mapping_fixtures/backend/dialect.py
from typing import List, Optional, Sequence, Tuple


class SQLDialect:
    """Identifier quoting and the few statement shapes a read-only query context needs."""

    quote_char = '"'
    placeholder = '?'

    def format_identifier(self, identifier: str) -> str:
        """Quote an identifier, doubling any embedded quote character"""
        q = self.quote_char
        return f"{q}{identifier.replace(q, q + q)}{q}"

    def get_placeholder(self) -> str:
        return self.placeholder

    def qualify(self, table: str, schema: Optional[str] = None) -> str:
        if schema:
            return f"{self.format_identifier(schema)}.{self.format_identifier(table)}"
        return self.format_identifier(table)

    def format_select(self,
                      columns: Sequence[Tuple[str, str]],
                      table: str,
                      schema: Optional[str] = None,
                      order_by: Optional[Sequence[str]] = None,
                      limit: Optional[int] = None) -> str:
        """SELECT the given (column, alias) pairs from one table."""
        select_list = ', '.join(
            f"{self.format_identifier(column)} AS {self.format_identifier(alias)}"
            for column, alias in columns
        )
        sql = f"SELECT {select_list} FROM {self.qualify(table, schema)}"
        if order_by:
            sql += f" ORDER BY {', '.join(self.format_identifier(c) for c in order_by)}"
        if limit is not None:
            sql += f" LIMIT {int(limit)}"
        return sql

    def format_count(self,
                     table: str,
                     schema: Optional[str] = None,
                     columns: Optional[Sequence[str]] = None) -> str:
        """COUNT rows of a table.

        Naming columns counts through a derived table selecting them, so a missing
        column fails the same way it would for a plain SELECT. NULLs are still counted.
        """
        alias = self.format_identifier('count')
        if not columns:
            return f"SELECT COUNT(*) AS {alias} FROM {self.qualify(table, schema)}"
        select_list = ', '.join(self.format_identifier(c) for c in columns)
        return (f"SELECT COUNT(*) AS {alias} FROM "
                f"(SELECT {select_list} FROM {self.qualify(table, schema)}) AS {self.format_identifier('t')}")

    def format_insert(self, table: str, columns: List[str], schema: Optional[str] = None) -> str:
        fields = ', '.join(self.format_identifier(c) for c in columns)
        placeholders = ', '.join(self.get_placeholder() for _ in columns)
        return f"INSERT INTO {self.qualify(table, schema)} ({fields}) VALUES ({placeholders})"


class SQLiteDialect(SQLDialect):
    quote_char = '"'
    placeholder = '?'


class MySQLDialect(SQLDialect):
    quote_char = '`'
    placeholder = '%s'

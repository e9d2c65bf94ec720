'''
Dialect-aware SQL helpers.
'''
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

def month_bucket(db: AsyncSession, column) -> ColumnElement[str]:
    """
    Returns a SQL expression turning a date/timestamp column into its
    'YYYY-MM' month label, on the dialect the session is bound to.
    """
    dialect = db.bind.dialect.name if db.bind is not None else "postgresql"
    if dialect == "sqlite":
        return func.strftime('%Y-%m', column)
    return func.to_char(column, 'YYYY-MM')

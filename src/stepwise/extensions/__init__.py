"""
Optional extensions. Import the one you need; each checks its dependency.

    stepwise.extensions.sqlalchemy   SQLAlchemyTransactions  (pip install stepwise[sqlalchemy])
    stepwise.extensions.psycopg      PsycopgTransactions     (pip install stepwise[psycopg])
    stepwise.extensions.sqlite       SQLiteTransactions
    stepwise.extensions.validation   Validation              (pydantic)
"""

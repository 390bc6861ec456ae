"""Alembic environment for the ``kv_store`` schema.

Migrations run synchronously over psycopg2; ``DATABASE_URL`` wins over the
URL in ``alembic.ini``.
"""

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from leak_db.config import sync_url
from leak_db.models import Base

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

url = sync_url(os.getenv("DATABASE_URL") or config.get_main_option("sqlalchemy.url"))


def run() -> None:
    if context.is_offline_mode():
        context.configure(url=url, target_metadata=Base.metadata, literal_binds=True)
        with context.begin_transaction():
            context.run_migrations()
        return

    engine = create_engine(url, poolclass=pool.NullPool)
    with engine.connect() as connection:
        context.configure(connection=connection, target_metadata=Base.metadata, compare_type=True)
        with context.begin_transaction():
            context.run_migrations()


run()

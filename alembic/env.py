from logging.config import fileConfig
from sqlalchemy import create_engine
from sqlalchemy.engine import URL
from alembic import context

from app.config import get_settings

# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
config = context.config

# Interpret the config file for Python logging.
if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def database_url() -> str:
    """Build the migration URL from the same settings the API connects with."""
    db = get_settings().db_config
    return URL.create(
        "postgresql",
        username=db["user"],
        password=db["password"],
        host=db["host"],
        port=db["port"],
        database=db["dbname"],
    ).render_as_string(hide_password=False)


config.set_main_option("sqlalchemy.url", database_url().replace("%", "%%"))

# Raw SQL migrations; no metadata for autogenerate.
target_metadata = None


def run_migrations_offline():
    url = config.get_main_option("sqlalchemy.url")
    context.configure(url=url, target_metadata=target_metadata, literal_binds=True, compare_type=True)

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    connectable = create_engine(config.get_main_option("sqlalchemy.url"), future=True)

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata, compare_type=True)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

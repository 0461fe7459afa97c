import logging

from sqlalchemy import engine_from_config, pool

from alembic import context

from budget_api.core.config import settings
from budget_api.core.logging_config import configure_logging
from budget_api.db.base import Base  # imports every model

config = context.config

# Same log format as the API; alembic's own progress lines stay at INFO
configure_logging(settings.LOG_LEVEL)
logging.getLogger("alembic").setLevel(logging.INFO)

target_metadata = Base.metadata
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)


def _configure_kwargs(url: str) -> dict:
    # SQLite can't ALTER most columns in place, so autogenerate emits batch ops there
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "render_as_batch": url.startswith("sqlite"),
    }


def run_migrations_offline() -> None:
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_kwargs(url),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, **_configure_kwargs(settings.DATABASE_URL))
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

from pathlib import Path

from sqlalchemy import inspect

from coaching.config import settings
from coaching.database import engine
from coaching.models import Base


def apply_migrations():
    url = settings.resolved_database_url
    print(f"Using DB: {url}")

    if url.startswith("sqlite:///"):
        Path(url.replace("sqlite:///", "")).parent.mkdir(parents=True, exist_ok=True)

    existing = set(inspect(engine).get_table_names())
    missing = [name for name in Base.metadata.tables if name not in existing]

    # create_all only adds missing tables; existing ones are left untouched
    Base.metadata.create_all(engine)

    for name in missing:
        print(f"✔ Created table {name}")

    print("Schema is up to date.")


if __name__ == "__main__":
    apply_migrations()

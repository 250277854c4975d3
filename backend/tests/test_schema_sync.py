from pathlib import Path
from uuid import uuid4

from sqlalchemy import Column, Index, Integer, MetaData, String, Table, create_engine, inspect

from app.utils.schema_sync import sync_missing_schema_objects


def _metadata(with_email: bool) -> MetaData:
    metadata = MetaData()
    columns = [
        Column("id", Integer, primary_key=True),
        Column("name", String(100), nullable=False),
    ]
    if with_email:
        columns.append(Column("email", String(150), nullable=False))
    table = Table("sync_target", metadata, *columns)
    if with_email:
        Index("idx_sync_target_name", table.c.name)
    return metadata


def test_sync_missing_schema_objects_adds_column_and_index():
    db_path = Path(f"./schema_sync_{uuid4().hex}.db").resolve()
    engine = create_engine(f"sqlite:///{db_path}")
    _metadata(with_email=False).create_all(engine)

    try:
        added = sync_missing_schema_objects(engine, _metadata(with_email=True))
        assert added == ["sync_target.email", "sync_target:idx_sync_target_name"]

        inspector = inspect(engine)
        column_names = {row["name"] for row in inspector.get_columns("sync_target")}
        index_names = {row.get("name") for row in inspector.get_indexes("sync_target")}
        assert "email" in column_names
        assert "idx_sync_target_name" in index_names

        # 두 번째 실행은 아무것도 추가하지 않는다.
        assert sync_missing_schema_objects(engine, _metadata(with_email=True)) == []
    finally:
        engine.dispose()
        if db_path.exists():
            db_path.unlink()


def test_sync_skips_tables_not_yet_created():
    db_path = Path(f"./schema_sync_{uuid4().hex}.db").resolve()
    engine = create_engine(f"sqlite:///{db_path}")
    try:
        assert sync_missing_schema_objects(engine, _metadata(with_email=True)) == []
    finally:
        engine.dispose()
        if db_path.exists():
            db_path.unlink()

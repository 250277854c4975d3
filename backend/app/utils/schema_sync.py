"""런타임 스키마 동기화 유틸리티."""

from __future__ import annotations

import logging

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.schema import CreateColumn, CreateIndex, MetaData

logger = logging.getLogger(__name__)


def sync_missing_schema_objects(engine: Engine, metadata: MetaData) -> list[str]:
    """모델 메타데이터 기준으로 기존 테이블에 누락된 컬럼/인덱스를 추가하고 추가된 항목을 반환한다.

    신규 테이블은 ``create_all`` 이 만들기 때문에 여기서는 건너뛴다.
    """
    inspector = inspect(engine)
    existing_tables = set(inspector.get_table_names())
    preparer = engine.dialect.identifier_preparer
    added: list[str] = []

    with engine.begin() as conn:
        for table in metadata.sorted_tables:
            if table.name not in existing_tables:
                continue

            present_columns = {col["name"] for col in inspector.get_columns(table.name)}
            for column in table.columns:
                if column.name in present_columns:
                    continue
                # NOT NULL 컬럼은 기존 행 때문에 실패하므로 nullable로 추가한다.
                ddl = str(CreateColumn(column).compile(dialect=engine.dialect)).strip()
                ddl = ddl.replace(" NOT NULL", "")
                conn.execute(text(f"ALTER TABLE {preparer.format_table(table)} ADD COLUMN {ddl}"))
                added.append(f"{table.name}.{column.name}")

            present_indexes = {idx.get("name") for idx in inspector.get_indexes(table.name)}
            for index in table.indexes:
                if index.name and index.name not in present_indexes:
                    conn.execute(CreateIndex(index))
                    added.append(f"{table.name}:{index.name}")

    for item in added:
        logger.info("[schema] added %s", item)
    return added

"""Catalog queries used by the schema inspector."""

LIST_TABLES_QUERY = """
SELECT
  t.table_name,
  t.table_schema,
  t.table_type,
  COALESCE(s.n_live_tup, 0) AS estimated_rows
FROM information_schema.tables AS t
LEFT JOIN pg_stat_user_tables AS s
  ON s.relname = t.table_name
  AND s.schemaname = t.table_schema
WHERE t.table_schema NOT IN ('information_schema', 'pg_catalog')
  AND t.table_type = 'BASE TABLE'
ORDER BY t.table_schema, t.table_name;
"""

TABLE_COLUMNS_QUERY = """
SELECT
  c.column_name,
  c.data_type,
  c.is_nullable,
  c.column_default,
  pk.column_name IS NOT NULL AS is_primary_key,
  fk.column_name IS NOT NULL AS is_foreign_key,
  fk.foreign_table_name,
  fk.foreign_column_name
FROM information_schema.columns AS c
LEFT JOIN (
  SELECT DISTINCT kcu.column_name, kcu.table_name, kcu.table_schema
  FROM information_schema.table_constraints AS tc
  JOIN information_schema.key_column_usage AS kcu
    ON kcu.constraint_name = tc.constraint_name
    AND kcu.table_schema = tc.table_schema
  WHERE tc.constraint_type = 'PRIMARY KEY'
) AS pk
  ON pk.column_name = c.column_name
  AND pk.table_name = c.table_name
  AND pk.table_schema = c.table_schema
LEFT JOIN (
  SELECT DISTINCT ON (kcu.table_schema, kcu.table_name, kcu.column_name)
    kcu.column_name,
    kcu.table_name,
    kcu.table_schema,
    ccu.table_name AS foreign_table_name,
    ccu.column_name AS foreign_column_name
  FROM information_schema.table_constraints AS tc
  JOIN information_schema.key_column_usage AS kcu
    ON kcu.constraint_name = tc.constraint_name
    AND kcu.table_schema = tc.table_schema
  JOIN information_schema.constraint_column_usage AS ccu
    ON ccu.constraint_name = tc.constraint_name
    AND ccu.table_schema = tc.table_schema
  WHERE tc.constraint_type = 'FOREIGN KEY'
  ORDER BY kcu.table_schema, kcu.table_name, kcu.column_name, tc.constraint_name
) AS fk
  ON fk.column_name = c.column_name
  AND fk.table_name = c.table_name
  AND fk.table_schema = c.table_schema
WHERE c.table_name = %(table_name)s
  AND c.table_schema = %(schema_name)s
ORDER BY c.ordinal_position;
"""

TABLE_INDEXES_QUERY = """
SELECT indexname, indexdef
FROM pg_indexes
WHERE tablename = %(table_name)s
  AND schemaname = %(schema_name)s
ORDER BY indexname;
"""

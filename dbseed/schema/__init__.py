from dbseed.schema.materialize import create_schema_ddl, materialize

__all__ = ["create_schema_ddl", "materialize"]

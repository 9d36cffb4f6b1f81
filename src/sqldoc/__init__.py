"""sqldoc: JSON document tables on SQLite."""

__version__ = "0.1.0"

from sqldoc.cache import MemoCache, default_cache, memoize
from sqldoc.config import SqldocConfig, load_config
from sqldoc.ddl import create_index, create_table, expr_to_name
from sqldoc.documents import Document, JSONValue, merge_patch, new_id
from sqldoc.engine import connect
from sqldoc.errors import CompositionError, ConfigError, SqldocError
from sqldoc.filters import asc, desc, field, limit, order_by, where
from sqldoc.fragments import Fragment, FragmentBuilder, Statement, query_args, sql
from sqldoc.paths import path_for, to_data
from sqldoc.table import Table
from sqldoc.typed import ModelTable

__all__ = [
    "__version__",
    "Table",
    "ModelTable",
    "Fragment",
    "FragmentBuilder",
    "Statement",
    "sql",
    "query_args",
    "to_data",
    "path_for",
    "field",
    "where",
    "order_by",
    "asc",
    "desc",
    "limit",
    "create_table",
    "create_index",
    "expr_to_name",
    "Document",
    "JSONValue",
    "merge_patch",
    "new_id",
    "connect",
    "SqldocConfig",
    "load_config",
    "MemoCache",
    "default_cache",
    "memoize",
    "SqldocError",
    "CompositionError",
    "ConfigError",
]

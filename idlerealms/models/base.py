import datetime as dt
import uuid

# Re-export the application's SQLAlchemy instance
from ..db import db

# Convenience exports
Model = db.Model
metadata = db.metadata


def gen_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> dt.datetime:
    """Naive UTC timestamp, the form every DateTime column stores."""
    return dt.datetime.now(dt.timezone.utc).replace(tzinfo=None)


def sql_in(column: str, values) -> str:
    """CHECK constraint body restricting ``column`` to ``values``."""
    return f"{column} IN ({', '.join(repr(v) for v in values)})"

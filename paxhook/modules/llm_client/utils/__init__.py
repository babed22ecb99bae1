from .json_repair import JsonRepair, dumps_compact
from .schema_normalizer import normalize_schema, unwrap_envelope

__all__ = ["JsonRepair", "dumps_compact", "normalize_schema", "unwrap_envelope"]

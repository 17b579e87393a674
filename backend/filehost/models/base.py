"""Base class for records kept in memory and written to snapshots."""
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class StoredModel(BaseModel):
    """Immutable record. Snapshot and API JSON use camelCase keys."""
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "frozen": True,
    }

import enum
import uuid
from datetime import datetime, timezone


class VariantType(str, enum.Enum):
    """Dimension a product variant varies along."""
    WEIGHT = "weight"
    PCS = "pcs"
    PRICE = "price"
    FLAVOR = "flavor"
    SIZE = "size"

    @classmethod
    def values(cls) -> list:
        return [member.value for member in cls]


class ChangeType(str, enum.Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


def new_id() -> str:
    """Primary keys are stored as stringified UUID4 values."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)

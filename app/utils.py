import uuid

from fastapi import HTTPException, status


def is_valid_object_id(value: str) -> bool:
    try:
        uuid.UUID(str(value))
    except (ValueError, TypeError):
        return False
    return True


def parse_object_id(value: str, entity: str) -> str:
    """Normalize a record id, or answer 400 when it cannot address any record."""
    if not is_valid_object_id(value):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {entity} ID",
        )
    return str(uuid.UUID(str(value)))

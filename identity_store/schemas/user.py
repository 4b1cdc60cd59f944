from typing import Dict, Optional

from pydantic import BaseModel


class UserCreate(BaseModel):
    one: Optional[str] = None
    two: Optional[str] = None

    model_config = {"extra": "forbid"}


class UserPatch(BaseModel):
    """Partial update of the text fields.

    A field left out of the payload keeps its stored value; a field sent as
    ``null`` clears it.
    """

    one: Optional[str] = None
    two: Optional[str] = None

    model_config = {"extra": "forbid"}

    def changes(self) -> Dict[str, Optional[str]]:
        return self.model_dump(exclude_unset=True)


class UserIdentifiers(BaseModel):
    id: int
    internal_id: int

    model_config = {"from_attributes": True}


class UserResponse(BaseModel):
    id: int
    internal_id: int
    one: Optional[str]
    two: Optional[str]

    model_config = {"from_attributes": True}

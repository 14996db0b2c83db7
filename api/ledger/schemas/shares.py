from pydantic import BaseModel, ConfigDict, constr


class ShareIn(BaseModel):
    sharee_id: constr(min_length=1, max_length=64)
    aggregate: bool = False


class SharedUserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sharee_id: str
    aggregate: bool

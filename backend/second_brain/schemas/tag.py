from pydantic import BaseModel


class Tag(BaseModel):
    id: str
    title: str

    class Config:
        from_attributes = True

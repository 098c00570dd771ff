from pydantic import BaseModel


class DeleteAllDataResponse(BaseModel):
    message: str
    interactions_deleted: int
    stats_deleted: bool

from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import datetime
import uuid


class User(BaseModel):
    id: uuid.UUID
    email: EmailStr
    full_name: Optional[str] = None
    timezone: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

from typing import Literal

from pydantic import BaseModel, EmailStr


class ExportEmailsRequest(BaseModel):
    format: Literal["text", "csv"] = "text"


class GrantPremiumRequest(BaseModel):
    email: EmailStr
    plan: Literal["monthly", "annual", "lifetime"]

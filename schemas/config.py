from pydantic import Field
from schemas.common import CamelModel


class ConnectionOverride(CamelModel):
    database_url: str = Field(..., min_length=1)

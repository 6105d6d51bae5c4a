"""
Pydantic schemas for canonical university records
"""

from pydantic import BaseModel, Field, validator
from typing import Optional, List, Dict, Any, Tuple

# Upstream record as returned by the directory API. Keys: name, country,
# alpha_two_code, domains, web_pages, state-province (nullable).
RawUniversity = Dict[str, Any]

IdentityKey = Tuple[str, str]


class University(BaseModel):
    """
    Canonical university record.

    This is the only shape that is persisted and served. It is serialized
    with camel-case keys (``alphaTwoCode``, ``webPages``, ``stateProvince``).
    """

    name: str = ""
    country: str = ""
    alpha_two_code: str = Field("", alias="alphaTwoCode")
    domains: List[str] = Field(default_factory=list)
    web_pages: List[str] = Field(default_factory=list, alias="webPages")
    state_province: Optional[str] = Field(None, alias="stateProvince")

    @validator("name", "country", "alpha_two_code", pre=True)
    def coerce_text(cls, v):
        """Null text is stored as an empty string"""
        if v is None:
            return ""
        if isinstance(v, str):
            return v
        return str(v)

    @validator("domains", "web_pages", pre=True)
    def clean_list(cls, v):
        """Ensure list of strings; null lists become empty, null entries are dropped"""
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        if isinstance(v, (list, tuple)):
            return [t if isinstance(t, str) else str(t) for t in v if t is not None]
        return []

    @validator("state_province", pre=True)
    def coerce_state(cls, v):
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @property
    def identity_key(self) -> IdentityKey:
        """(name, country code) pair identifying a university"""
        return (self.name, self.alpha_two_code)

    def to_json_dict(self) -> Dict[str, Any]:
        """Camel-cased dictionary as written to the snapshot file"""
        return self.model_dump(by_alias=True)

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "name": "Harvard University",
                "country": "United States",
                "alphaTwoCode": "US",
                "domains": ["harvard.edu"],
                "webPages": ["https://www.harvard.edu"],
                "stateProvince": "Massachusetts",
            }
        }

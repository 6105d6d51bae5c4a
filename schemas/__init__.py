"""
Pydantic schemas for data validation and serialization.

Schemas:
    university: Canonical university record and identity key
    api: API endpoint response schemas (pages, run summaries, health)

Usage:
    from schemas.university import University
    from schemas.api import ETLRunSummary, HealthCheckResponse

Example:
    uni = University(
        name="Harvard University",
        country="United States",
        alpha_two_code="US",
        domains=None,
    )
    assert uni.domains == []
    assert uni.identity_key == ("Harvard University", "US")
    assert "alphaTwoCode" in uni.to_json_dict()
"""

__all__ = [
    "University",
    "RawUniversity",
    "IdentityKey",
    "ETLRunSummary",
    "UniversityPageResponse",
    "SnapshotInfo",
    "HealthCheckResponse",
]

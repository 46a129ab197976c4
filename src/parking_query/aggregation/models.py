"""
Record models produced by the aggregators.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class FacilityRecord(BaseModel):
    """Snapshot of one parking facility."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(..., description="rdfs:label of the facility")
    identifier: str = Field(..., description="Label lowercased with spaces replaced by hyphens")
    source_uri: str = Field(..., description="Subject IRI of the facility")
    capacity: int = Field(..., ge=0, description="Total number of parking spaces")
    dataset_url: str = Field(..., description="Cataloged dataset endpoint the record came from")


class MeasurementRecord(BaseModel):
    """Vacant-spaces observation of one facility at one instant."""

    model_config = ConfigDict(frozen=True)

    facility_uri: str = Field(..., description="Subject IRI of the measured facility")
    timestamp: datetime = Field(..., description="Observation time (timezone aware)")
    vacant_spaces: int = Field(..., description="Number of vacant spaces")
    page_url: str = Field(..., description="Page the measurement was read from")


def facility_identifier(label: str) -> str:
    """Derive a facility identifier from its label."""
    return label.replace(" ", "-").lower()

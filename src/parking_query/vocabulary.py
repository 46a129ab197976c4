"""
Vocabulary - IRIs the query core matches on.

Covers DCAT catalog descriptions, DATEX II parking terms, and the
multidimensional-interface and Hydra terms used by interval pages.
"""

from dataclasses import asdict, dataclass, fields, replace
from typing import Optional


@dataclass(frozen=True)
class Vocabulary:
    """Building blocks for fact patterns."""
    dcat_dataset: str = "http://www.w3.org/ns/dcat#Dataset"
    dcat_distribution: str = "http://www.w3.org/ns/dcat#distribution"
    dcat_download_url: str = "http://www.w3.org/ns/dcat#downloadURL"
    rdf_type: str = "http://www.w3.org/1999/02/22-rdf-syntax-ns#type"
    rdfs_label: str = "http://www.w3.org/2000/01/rdf-schema#label"
    urban_parking_site: str = "http://vocab.datex.org/terms#UrbanParkingSite"
    number_of_spaces: str = "http://vocab.datex.org/terms#parkingNumberOfSpaces"
    number_of_vacant_spaces: str = "http://vocab.datex.org/terms#parkingNumberOfVacantSpaces"
    has_range_gate: str = (
        "http://semweb.datasciencelab.be/ns/multidimensional-interface/hasRangeGate"
    )
    generated_at_time: str = "http://www.w3.org/ns/prov#generatedAtTime"
    hydra_previous: str = "http://www.w3.org/ns/hydra/core#previous"

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "Vocabulary":
        """Create a vocabulary, overriding defaults with known keys only."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown vocabulary terms: {', '.join(sorted(unknown))}")
        return replace(cls(), **data)

    def to_dict(self) -> dict:
        return asdict(self)


DEFAULT_VOCABULARY = Vocabulary()

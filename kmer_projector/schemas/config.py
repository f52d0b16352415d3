from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from kmer_projector.core.exceptions import ConfigurationError
from kmer_projector.kmers.factory import KmerAlgorithm


class AnnotationConfig(BaseModel):
    """Parameters of a projection run. They govern proposal admission, not algorithm shape."""
    kmer_size: int = Field(default=8, ge=2, description="Protein kmer length")
    min_strength: float = Field(
        default=0.20,
        ge=0.0,
        lt=1.0,
        description="Minimum acceptable proposal strength (0 to 1)",
    )
    max_fuzz: float = Field(
        default=1.5,
        gt=1.0,
        description="Maximum length increase factor for proteins",
    )
    min_evidence: int = Field(default=0, ge=0, description="Minimum base pairs of evidence for a proposal")
    max_genomes: int = Field(default=10, ge=1, description="Maximum number of close genomes to scan")
    algorithm: KmerAlgorithm = Field(default="aggressive", description="Contig kmer retrieval policy")
    workers: int = Field(default=1, ge=1, description="Genomes annotated in parallel in batch mode")

    model_config = ConfigDict(extra="forbid")

    @field_validator("algorithm", mode="before")
    @classmethod
    def _lower_algorithm(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value


def build_config(**values: Any) -> AnnotationConfig:
    """Build a configuration, reporting bad values as ConfigurationError."""
    try:
        return AnnotationConfig(**values)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid annotation parameters: {exc}") from exc

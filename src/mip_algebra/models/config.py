"""Configuration data models."""

from typing import Dict, Any
from pydantic import BaseModel, Field


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class SolverConfig(BaseModel):
    """Solver configuration."""
    default: str = "cbc"
    timeout: int = Field(3600, description="Timeout for solver in seconds")
    parameters: Dict[str, Any] = Field(
        default_factory=dict, description="Backend-specific solver parameters"
    )


class ValidationConfig(BaseModel):
    """Solution validation configuration."""
    enabled: bool = True
    tolerance: float = Field(1e-6, description="Numerical tolerance for checks")


class Config(BaseModel):
    """Main configuration container."""
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    solvers: SolverConfig = Field(default_factory=SolverConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create config from dictionary."""
        return cls.model_validate(data)

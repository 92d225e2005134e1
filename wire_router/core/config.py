"""
Configuration management for the wire router with Pydantic validation
"""

from typing import Dict, Union, Optional, Any, Literal
from pathlib import Path
import os
import re
import yaml
from pydantic import BaseModel, Field, model_validator, ConfigDict

from ..exceptions import ConfigurationError


# ============================================================================
# Pydantic Models for Configuration Validation
# ============================================================================

class RoutingOptions(BaseModel):
    """Path planner settings"""
    grid_size: int = Field(20, gt=0, description="Grid cell size in canvas units")
    bend_penalty: float = Field(2.5, ge=0, description="Extra cost per direction change, in grid cells")
    length_weight: float = Field(1.0, gt=0, description="Cost per grid step")
    wire_crossing_penalty: float = Field(5.0, ge=0, description="Extra cost for entering a cell occupied by a wire")
    obstacle_buffer: float = Field(10, ge=0, description="Padding around components before rasterizing")
    max_iterations: int = Field(10000, gt=0, description="Node expansions before a search gives up")
    routing_strategy: Literal['shortest', 'minimal_bends', 'balanced', 'grid_aligned'] = Field(
        'balanced', description="Strategy preset"
    )
    dijkstra_search_margin: Optional[int] = Field(
        10, ge=0, description="Cells around the endpoints' box that Dijkstra explores (None = whole canvas)"
    )
    auto_canvas_margin: float = Field(100, ge=0, description="Margin of the implicit canvas used before set_obstacles")


class QualityOptions(BaseModel):
    """Route quality scoring"""
    bend_factor: float = Field(0.1, ge=0, le=1, description="Quality lost per bend")
    fallback_quality: float = Field(0.1, ge=0, le=1, description="Quality of the direct fallback segment")


class CollisionOptions(BaseModel):
    """Collision detection settings"""
    wire_buffer: float = Field(5, ge=0, description="Lateral tolerance for overlapping wires")
    component_buffer: float = Field(10, ge=0, description="Clearance required around components")
    endpoint_tolerance: float = Field(20, ge=0, description="Distance from a component center that marks it as a wire endpoint")
    junction_tolerance: float = Field(5, ge=0, description="Shared endpoint distance treated as an intentional junction")
    crossing_severity: float = Field(0.8, ge=0, le=1)
    overlap_severity: float = Field(1.0, ge=0, le=1)
    junction_severity: float = Field(0.1, ge=0, le=1)
    high_threshold: float = Field(0.7, ge=0, le=1, description="Severity above which a wire-wire collision is 'high'")
    medium_threshold: float = Field(0.3, ge=0, le=1, description="Severity above which a wire-wire collision is 'medium'")

    @model_validator(mode='after')
    def validate_thresholds(self):
        """Ensure medium_threshold <= high_threshold"""
        if self.medium_threshold > self.high_threshold:
            raise ValueError(
                f"medium_threshold ({self.medium_threshold}) cannot be greater than "
                f"high_threshold ({self.high_threshold})"
            )
        return self


class JunctionOptions(BaseModel):
    """Junction manager settings"""
    tolerance: float = Field(2, gt=0, description="Distance within which points are the same junction")


class LoggingOptions(BaseModel):
    """Logging settings used by the CLI"""
    level: Literal['DEBUG', 'INFO', 'WARNING', 'ERROR'] = 'INFO'
    file: Optional[str] = Field(None, description="Optional log file path")


class RouterConfigModel(BaseModel):
    """Pydantic model for router configuration validation"""
    model_config = ConfigDict(extra='ignore')  # Ignore extra fields in YAML

    version: Optional[Union[int, float, str]] = None
    project: Optional[str] = None

    routing: RoutingOptions = Field(default_factory=RoutingOptions)
    quality: QualityOptions = Field(default_factory=QualityOptions)
    collision: CollisionOptions = Field(default_factory=CollisionOptions)
    junctions: JunctionOptions = Field(default_factory=JunctionOptions)
    logging: LoggingOptions = Field(default_factory=LoggingOptions)


# ============================================================================
# Environment Variable Substitution
# ============================================================================

def _substitute_env_vars(value: Any) -> Any:
    """
    Recursively substitute environment variables in configuration values

    Supports ${VAR_NAME} and ${VAR_NAME:-default_value}

    Args:
        value: Configuration value (can be str, dict, list, or other)

    Returns:
        Value with environment variables substituted
    """
    if isinstance(value, str):
        def replace_with_default(match):
            var_name = match.group(1)
            default_value = match.group(3)
            env_value = os.environ.get(var_name)
            if env_value is not None:
                return env_value
            elif default_value is not None:
                return default_value
            else:
                raise ConfigurationError(f"Environment variable '{var_name}' is not set and no default value provided")

        return re.sub(r'\$\{([A-Za-z_][A-Za-z0-9_]*)(:-([^}]*))?\}', replace_with_default, value)

    elif isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [_substitute_env_vars(item) for item in value]

    else:
        return value


# ============================================================================
# RouterConfig Class (wrapper around Pydantic model)
# ============================================================================

class RouterConfig:
    """Configuration for one routing engine with validation"""

    def __init__(self, config_dict: Optional[Dict] = None):
        """Initialize from dictionary (parsed from YAML) with Pydantic validation"""
        config_dict = _substitute_env_vars(config_dict or {})

        try:
            self._model = RouterConfigModel(**config_dict)
        except Exception as e:
            raise ConfigurationError(f"Configuration validation failed: {str(e)}") from e

        self.project = self._model.project
        self.routing = self._model.routing
        self.quality = self._model.quality
        self.collision = self._model.collision
        self.junctions = self._model.junctions
        self.log_level = self._model.logging.level
        self.log_file = Path(self._model.logging.file) if self._model.logging.file else None

    def with_routing(self, **overrides) -> 'RouterConfig':
        """Copy of this config with some routing options replaced"""
        data = self.to_dict()
        data['routing'].update(overrides)
        return RouterConfig(data)

    @classmethod
    def from_yaml(cls, yaml_path: Union[str, Path]) -> 'RouterConfig':
        """Load configuration from YAML file with validation"""
        try:
            with open(yaml_path, 'r') as f:
                config_dict = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse YAML file: {str(e)}") from e
        except FileNotFoundError:
            raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

        return cls(config_dict)

    def to_dict(self) -> Dict:
        """Convert config back to dictionary"""
        return self._model.model_dump()

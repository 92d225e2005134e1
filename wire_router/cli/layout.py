"""
Layout file loading for the CLI
"""

from pathlib import Path
from typing import List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..core.geometry import Rectangle
from ..core.models import ComponentBounds, Connection
from ..exceptions import ConfigurationError


class Layout(BaseModel):
    """Diagram snapshot read from a YAML layout file

    Example:
        canvas: {x: 0, y: 0, width: 800, height: 600}
        components:
          - id: panel
            bounds: {x: 40, y: 40, width: 80, height: 60}
        connections:
          - id: feed
            from_component_id: panel
            to_component_id: inverter
            connection_type: dc
    """
    model_config = ConfigDict(extra='ignore')

    canvas: Optional[Rectangle] = None
    components: List[ComponentBounds] = Field(default_factory=list)
    connections: List[Connection] = Field(default_factory=list)

    @model_validator(mode='after')
    def validate_references(self):
        """Ensure unique ids and that connections reference known components"""
        component_ids = [component.id for component in self.components]
        duplicates = {cid for cid in component_ids if component_ids.count(cid) > 1}
        if duplicates:
            raise ValueError(f"Duplicate component ids: {sorted(duplicates)}")

        known = set(component_ids)
        for connection in self.connections:
            missing = {connection.from_component_id, connection.to_component_id} - known
            if missing:
                raise ValueError(
                    f"Connection '{connection.id}' references unknown components: {sorted(missing)}"
                )
        return self


def load_layout(layout_path: Union[str, Path]) -> Layout:
    """
    Load and validate a layout file

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigurationError: If the file is not valid YAML or fails validation
    """
    try:
        with open(layout_path, 'r') as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse layout file: {str(e)}") from e
    except FileNotFoundError:
        raise FileNotFoundError(f"Layout file not found: {layout_path}")

    try:
        return Layout(**data)
    except Exception as e:
        raise ConfigurationError(f"Layout validation failed: {str(e)}") from e

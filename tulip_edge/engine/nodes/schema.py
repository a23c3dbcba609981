from enum import Enum
from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, field_validator

# --- Enums ---
class NodeCategory(str, Enum):
    TULIP = "tulip"

# --- Models ---
class SelectOption(BaseModel):
    label: str
    value: Any
    description: Optional[str] = None

class NodeInput(BaseModel):
    """
    Definition of a single configuration field of the node.
    """
    name: str
    type: str # string, number, boolean, select, json, typed, credential
    label: str
    default: Optional[Any] = None
    description: Optional[str] = None
    required: bool = False
    placeholder: Optional[str] = None

    options: Optional[Union[List[SelectOption], List[Dict[str, Any]]]] = None

class NodeOutput(BaseModel):
    name: str
    type: str
    label: Optional[str] = None
    description: Optional[str] = None

class NodeManifest(BaseModel):
    """
    Node package manifest (manifest.json).
    """
    id: str
    name: str
    version: str
    description: str = ""
    category: NodeCategory = NodeCategory.TULIP

    icon: Optional[str] = None

    inputs: List[NodeInput]
    outputs: List[NodeOutput]

    credentials: Optional[List[str]] = None
    tags: List[str] = []
    author: str = "tulip-edge"

    @field_validator("id")
    def id_has_namespace(cls, v):
        if "." not in v:
            raise ValueError(f"Node id '{v}' must be namespaced, e.g. 'tulip.tables'")
        return v

    def input_defaults(self) -> Dict[str, Any]:
        """Configured defaults of the inputs that declare one."""
        return {i.name: i.default for i in self.inputs if i.default is not None}

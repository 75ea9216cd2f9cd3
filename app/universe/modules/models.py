from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from universe.strings import dasherize


class Extension(BaseModel):
    """Ein entdecktes Extension-Paket. Nach der Discovery unveränderlich."""
    model_config = ConfigDict(frozen=True, extra="allow")

    name: str = Field(..., min_length=1, description="Eindeutiger Paketname, z.B. 'fleet_ops_engine'")
    extension: Optional[str] = Field(default=None, description="Kurzname für Routen, z.B. 'fleet-ops'")
    version: str = Field(default="0.0.0")
    description: str = Field(default="Keine Beschreibung")
    dependencies: List[str] = Field(default_factory=list, description="Deklarierte Extension-Abhängigkeiten")

    @model_validator(mode="before")
    @classmethod
    def _default_short_name(cls, data):
        if isinstance(data, dict) and not data.get("extension") and data.get("name"):
            data = dict(data)
            data["extension"] = short_name(data["name"])
        return data


class ExtensionDefinition(BaseModel):
    """Die exportierte Definition ('base') eines Extension-Moduls."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    module_prefix: str = Field(..., min_length=1)
    # Wenn gesetzt, ersetzt es den aus dem Namen abgeleiteten Mount-Point
    mounted_engine_route_prefix: Optional[str] = None
    engine_dependencies: List[str] = Field(default_factory=list)
    # services / externalRoutes als Liste oder Mapping
    dependencies: Dict[str, Any] = Field(default_factory=dict)

    setup_extension: Optional[Callable] = None
    boot: Optional[Callable] = None


def short_name(name: str) -> str:
    """'@scope/fleet-ops-engine' -> 'fleet-ops'"""
    segments = name.split("/")
    mount_name = segments[1] if len(segments) > 1 else segments[0]
    mount_name = dasherize(mount_name)
    if mount_name.endswith("-engine"):
        mount_name = mount_name[:-len("-engine")]
    return mount_name

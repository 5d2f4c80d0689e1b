"""
Top-level entry points: CAD input + machining settings -> toolpath / G-code.

Accepts the raw dictionaries produced by the CAD front-end as well as parsed
models:

- a single element mapping (or ``Element``) is machined on its own; group and
  component kinds are scheduled per child;
- a list of elements is machined as one anonymous component.
"""

from typing import Any, Mapping, Sequence, Union

from slicecam.core.config import MachiningSettings
from slicecam.core.logging import get_logger
from slicecam.geometry.elements import Element, Group, parse_element
from slicecam.slicing.component_toolpath import generate_component_toolpath
from slicecam.slicing.milling_toolpath import MillingToolpathGenerator
from slicecam.slicing.toolpath import Toolpath

logger = get_logger(__name__)

ElementInput = Union[Element, Mapping[str, Any]]
SettingsInput = Union[MachiningSettings, Mapping[str, Any]]


def _resolve_settings(settings: SettingsInput) -> MachiningSettings:
    if isinstance(settings, MachiningSettings):
        return settings
    return MachiningSettings.from_dict(settings)


def generate_toolpath(
    target: Union[ElementInput, Sequence[ElementInput]],
    settings: SettingsInput,
    unify: bool = True,
) -> Toolpath:
    """
    Generate the toolpath for an element, a component, or a list of elements.

    Args:
        target: Element mapping/model, or a list of them.
        settings: ``MachiningSettings`` or a mapping accepted by
            ``MachiningSettings.from_dict``.
        unify: Try a boolean union before scheduling multi-element input.

    Raises:
        ConfigurationError: If the settings are invalid.
        GeometryError: If an element mapping is malformed.
    """
    machining = _resolve_settings(settings)

    if isinstance(target, (Element, Mapping)):
        element = parse_element(target)
        logger.debug("generating_toolpath", element_type=element.type)
        if isinstance(element, Group):
            return generate_component_toolpath(element, machining, unify=unify)
        return MillingToolpathGenerator(machining).generate(element)

    group = Group(elements=[parse_element(item) for item in target])
    logger.debug("generating_toolpath", element_type="group", elements=len(group.elements))
    return generate_component_toolpath(group, machining, unify=unify)


def generate_gcode(
    target: Union[ElementInput, Sequence[ElementInput]],
    settings: SettingsInput,
    unify: bool = True,
) -> str:
    """Generate the toolpath and render it as a G-code string."""
    return generate_toolpath(target, settings, unify=unify).to_gcode()

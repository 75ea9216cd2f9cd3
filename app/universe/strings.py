"""String-Helfer für Slugs, Routen und interne Registry-Namen."""
import re

_DECAMELIZE = re.compile(r"([a-z\d])([A-Z])")
_DASHERIZE = re.compile(r"[ _]")
_CAMELIZE = re.compile(r"[-_.\s]+(.)?")
_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


def decamelize(value: str) -> str:
    """'innerHTML' -> 'inner_html'"""
    return _DECAMELIZE.sub(r"\1_\2", value).lower()


def dasherize(value: str) -> str:
    """'Fleet Settings' -> 'fleet-settings', 'fleetOps' -> 'fleet-ops'"""
    return _DASHERIZE.sub("-", decamelize(value))


def camelize(value: str) -> str:
    """'fleet-ops' -> 'fleetOps'"""
    result = _CAMELIZE.sub(lambda m: m.group(1).upper() if m.group(1) else "", value)
    return result[:1].lower() + result[1:]


def dasherize_route(route: str) -> str:
    """Dasherized jedes Segment einer Punkt-getrennten Route."""
    return ".".join(dasherize(segment) for segment in route.split("."))


def internal_registry_name(registry_name: str) -> str:
    """'fleet-ops' -> 'fleetOpsRegistry'"""
    return f"{camelize(_NON_ALNUM.sub('-', registry_name))}Registry"

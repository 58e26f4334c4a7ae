"""Credential sources for sfbrowser."""

from typing import Dict, Type, List, Optional, Protocol

from ..core.models import OrgInfo, OrgSummary


class CredentialSource(Protocol):
    """Contract consumed by the org manager.

    All three calls are synchronous and may raise ``OrgNotFoundError`` or
    ``SalesforceCLIError``.
    """

    def org_display(self, org_alias: str) -> OrgInfo:
        ...

    def org_open_url(self, org_alias: str, target_path: Optional[str] = None) -> str:
        ...

    def org_list(self) -> List[OrgSummary]:
        ...


# Dictionary of available credential sources
SOURCES: Dict[str, Type] = {}


def register_source(name: str):
    """Decorator to register a credential source class."""
    def decorator(cls: Type) -> Type:
        SOURCES[name.lower()] = cls
        return cls
    return decorator


def get_source(name: str = "sf", **kwargs) -> CredentialSource:
    """Get an instance of the named credential source.

    Raises:
        KeyError: If no source is registered under that name
    """
    name = name.lower()
    if name not in SOURCES:
        raise KeyError(f"Credential source '{name}' not found")
    return SOURCES[name](**kwargs)


def list_available_sources() -> List[str]:
    return list(SOURCES.keys())


from . import sfcli  # noqa: E402,F401

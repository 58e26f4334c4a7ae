from dataclasses import dataclass
from typing import Optional, Dict, Any


@dataclass
class OrgInfo:
    """Org details reported by ``sf org display``."""
    id: str
    access_token: str
    instance_url: str
    username: str
    status: str = ""
    client_id: Optional[str] = None
    alias: Optional[str] = None
    expiration_date: Optional[str] = None
    dev_hub_id: Optional[str] = None
    edition: Optional[str] = None
    org_name: Optional[str] = None

    def to_dict(self, include_token: bool = False) -> Dict[str, Any]:
        """Convert to a dictionary for protocol responses.

        The access token is left out unless explicitly requested.
        """
        data = {
            'id': self.id,
            'instanceUrl': self.instance_url,
            'username': self.username,
            'status': self.status,
            'alias': self.alias,
            'orgName': self.org_name,
            'edition': self.edition,
            'expirationDate': self.expiration_date,
        }
        if include_token:
            data['accessToken'] = self.access_token
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OrgInfo':
        """Create an OrgInfo from the ``result`` object of the CLI JSON output."""
        return cls(
            id=data.get('id', ''),
            access_token=data.get('accessToken', ''),
            instance_url=(data.get('instanceUrl') or '').rstrip('/'),
            username=data.get('username', ''),
            status=data.get('connectedStatus') or data.get('status') or '',
            client_id=data.get('clientId'),
            alias=data.get('alias'),
            expiration_date=data.get('expirationDate'),
            dev_hub_id=data.get('devHubId'),
            edition=data.get('edition'),
            org_name=data.get('orgName') or data.get('name'),
        )


@dataclass
class OrgSummary:
    """One locally authenticated org as listed by ``sf org list``."""
    alias: str
    username: str
    is_active: bool
    org_id: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'alias': self.alias,
            'username': self.username,
            'isActive': self.is_active,
            'orgId': self.org_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OrgSummary':
        return cls(
            alias=data.get('alias') or '',
            username=data.get('username', ''),
            is_active=bool(data.get('isDefaultUsername', False)),
            org_id=data.get('orgId', ''),
        )

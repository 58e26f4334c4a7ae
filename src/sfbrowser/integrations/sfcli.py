import subprocess
import json
import logging
import shutil
from typing import List, Dict, Optional, Any

from ..core.errors import OrgNotFoundError, SalesforceCLIError
from ..core.models import OrgInfo, OrgSummary
from . import register_source

logger = logging.getLogger(__name__)

# Fragments of sf CLI error names/messages that mean "this alias is unknown"
ORG_NOT_FOUND_MARKERS = (
    "noorgfound",
    "namedorgnotfound",
    "no org",
    "no authorization information found",
    "not found",
)


def _is_org_not_found(payload: Any) -> bool:
    if isinstance(payload, dict):
        text = " ".join(str(payload.get(k) or "") for k in ("name", "message", "code"))
    else:
        text = str(payload)
    text = text.lower()
    return any(marker in text for marker in ORG_NOT_FOUND_MARKERS)


@register_source("sf")
class SalesforceCLI:
    """Credential source backed by the Salesforce ``sf`` command line tool."""

    def __init__(self, sf_path: Optional[str] = None):
        """Initialize the CLI wrapper.

        Args:
            sf_path: Explicit path to the ``sf`` executable. Looked up on PATH
                lazily when omitted.
        """
        self._sf_path = sf_path

    @property
    def sf_path(self) -> str:
        if not self._sf_path:
            self._sf_path = self._find_sf()
        return self._sf_path

    @staticmethod
    def _find_sf() -> str:
        """Find the sf CLI executable."""
        for name in ("sf", "sf.cmd"):
            path = shutil.which(name)
            if path:
                logger.info(f"Found SF CLI at {path}")
                return path
        raise SalesforceCLIError(
            "SF CLI not found. Please install it from "
            "https://developer.salesforce.com/tools/salesforcecli",
            suggestion="Install the sf CLI or set SFB_SF_PATH to its location.",
        )

    def _run_command(self, command: List[str], org_alias: Optional[str] = None) -> Dict[str, Any]:
        """Run an sf command with ``--json`` and return the parsed envelope.

        sf writes a JSON envelope to stdout even when it exits non-zero, so the
        exit code alone is not used to decide success.
        """
        args = [self.sf_path] + command + ["--json"]
        logger.debug(f"Running: {' '.join(args[:4])} ...")
        try:
            result = subprocess.run(args, capture_output=True, text=True)
        except OSError as e:
            raise SalesforceCLIError(f"Failed to run SF CLI: {e}")

        stdout = (result.stdout or "").strip()
        try:
            payload = json.loads(stdout) if stdout else {}
        except json.JSONDecodeError:
            payload = None

        if payload is None or (result.returncode != 0 and not payload):
            error_msg = (result.stderr or "").strip() or stdout or f"exit code {result.returncode}"
            if org_alias and _is_org_not_found(error_msg):
                raise OrgNotFoundError(org_alias)
            logger.error(f"SF CLI error: {error_msg}")
            raise SalesforceCLIError(f"SF CLI command failed: {error_msg}")

        status = payload.get("status", result.returncode)
        if status != 0 or result.returncode != 0:
            if org_alias and _is_org_not_found(payload):
                raise OrgNotFoundError(org_alias)
            message = payload.get("message") or stdout
            logger.error(f"SF CLI returned status {status}: {message}")
            raise SalesforceCLIError(f"SF CLI returned status {status}: {message}")

        return payload

    def org_display(self, org_alias: str) -> OrgInfo:
        """Get org details including the access token."""
        payload = self._run_command(["org", "display", "--target-org", org_alias], org_alias)
        return OrgInfo.from_dict(payload.get("result") or {})

    def org_open_url(self, org_alias: str, target_path: Optional[str] = None) -> str:
        """Get a one-time frontdoor URL that authenticates a browser session."""
        command = ["org", "open", "--target-org", org_alias, "--url-only"]
        if target_path:
            command += ["--path", target_path]
        payload = self._run_command(command, org_alias)
        url = (payload.get("result") or {}).get("url")
        if not url:
            raise SalesforceCLIError(f"SF CLI did not return a frontdoor URL for {org_alias}")
        return url

    def org_list(self) -> List[OrgSummary]:
        """List all locally authenticated orgs, non-scratch first."""
        payload = self._run_command(["org", "list"])
        result = payload.get("result") or {}
        orgs: List[OrgSummary] = []
        for key in ("nonScratchOrgs", "scratchOrgs"):
            for org in result.get(key) or []:
                orgs.append(OrgSummary.from_dict(org))
        return orgs

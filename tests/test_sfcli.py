from __future__ import annotations

import json
import subprocess
from typing import List

import pytest

from sfbrowser.core.errors import OrgNotFoundError, SalesforceCLIError
from sfbrowser.integrations import get_source, list_available_sources
from sfbrowser.integrations import sfcli
from sfbrowser.integrations.sfcli import SalesforceCLI


def fake_run(monkeypatch: pytest.MonkeyPatch, stdout: str, returncode: int = 0, stderr: str = "") -> List[list]:
    calls: List[list] = []

    def run(args, capture_output=False, text=False):  # noqa: ANN001
        calls.append(args)
        return subprocess.CompletedProcess(args, returncode, stdout=stdout, stderr=stderr)

    monkeypatch.setattr(sfcli.subprocess, "run", run)
    return calls


def test_sf_source_is_registered() -> None:
    assert "sf" in list_available_sources()
    assert isinstance(get_source("sf", sf_path="/usr/bin/sf"), SalesforceCLI)


def test_org_display_parses_result(monkeypatch: pytest.MonkeyPatch) -> None:
    payload = {
        "status": 0,
        "result": {
            "id": "00D000000000001",
            "accessToken": "00D!token",
            "instanceUrl": "https://acme.my.salesforce.com/",
            "username": "admin@acme.example",
            "connectedStatus": "Connected",
            "alias": "dev",
        },
    }
    calls = fake_run(monkeypatch, json.dumps(payload))

    info = SalesforceCLI(sf_path="/usr/bin/sf").org_display("dev")
    assert calls[0] == ["/usr/bin/sf", "org", "display", "--target-org", "dev", "--json"]
    assert info.instance_url == "https://acme.my.salesforce.com"
    assert info.access_token == "00D!token"
    assert info.status == "Connected"
    assert "accessToken" not in info.to_dict()


def test_error_envelope_on_nonzero_exit_is_org_not_found(monkeypatch: pytest.MonkeyPatch) -> None:
    payload = {"status": 1, "name": "NoOrgFound", "message": "No authorization information found for qa."}
    fake_run(monkeypatch, json.dumps(payload), returncode=1)
    with pytest.raises(OrgNotFoundError):
        SalesforceCLI(sf_path="/usr/bin/sf").org_display("qa")


def test_other_failures_are_cli_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    fake_run(monkeypatch, "", returncode=2, stderr="segfault")
    with pytest.raises(SalesforceCLIError) as excinfo:
        SalesforceCLI(sf_path="/usr/bin/sf").org_list()
    assert "segfault" in excinfo.value.message


def test_org_open_url_passes_the_path(monkeypatch: pytest.MonkeyPatch) -> None:
    url = "https://acme.my.salesforce.com/secur/frontdoor.jsp?otp=x"
    calls = fake_run(monkeypatch, json.dumps({"status": 0, "result": {"url": url}}))
    assert SalesforceCLI(sf_path="/usr/bin/sf").org_open_url("dev", "/lightning/page/home") == url
    assert calls[0][-3:] == ["--path", "/lightning/page/home", "--json"]


def test_org_list_merges_scratch_orgs(monkeypatch: pytest.MonkeyPatch) -> None:
    payload = {
        "status": 0,
        "result": {
            "nonScratchOrgs": [{"alias": "prod", "username": "a@b.c", "orgId": "00D1", "isDefaultUsername": True}],
            "scratchOrgs": [{"username": "s@b.c", "orgId": "00D2"}],
        },
    }
    fake_run(monkeypatch, json.dumps(payload))
    orgs = SalesforceCLI(sf_path="/usr/bin/sf").org_list()
    assert [org.to_dict() for org in orgs] == [
        {"alias": "prod", "username": "a@b.c", "isActive": True, "orgId": "00D1"},
        {"alias": "", "username": "s@b.c", "isActive": False, "orgId": "00D2"},
    ]


def test_missing_binary(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(sfcli.shutil, "which", lambda name: None)
    with pytest.raises(SalesforceCLIError):
        SalesforceCLI().org_list()

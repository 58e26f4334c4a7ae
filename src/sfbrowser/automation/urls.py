"""Path construction for Lightning Experience and Setup pages.

Every method returns a path relative to the instance URL; ``full_url`` joins
one onto the stored instance. Nothing here touches the network.
"""
from typing import Optional
from urllib.parse import urlencode


OBJECT_MANAGER_SECTIONS = {
    "Fields": "FieldsAndRelationships",
    "PageLayouts": "PageLayouts",
    "ValidationRules": "ValidationRules",
    "Triggers": "ApexTriggers",
    "LightningPages": "LightningRecordPages",
    "Buttons": "ButtonsLinksActions",
}

SETUP_SECTIONS = {
    "Users": "ManageUsers",
    "Profiles": "Profiles",
    "PermSets": "PermSets",
    "PermissionSets": "PermSets",
    "Roles": "Roles",
    "ObjectManager": "ObjectManager",
    "Apps": "NavigationMenus",
    "Flows": "Flows",
    "ApexClasses": "ApexClasses",
    "CustomSettings": "CustomSettings",
    "CustomMetadata": "CustomMetadata",
}


def setup_section(name: str) -> str:
    """Map a friendly setup section name to its setup node; unknown names pass through."""
    return SETUP_SECTIONS.get(name, name)


def frontdoor_url(instance_url: str, access_token: str, ret_url: Optional[str] = None) -> str:
    params = {"sid": access_token}
    if ret_url:
        params["retURL"] = ret_url
    return f"{instance_url}/secur/frontdoor.jsp?{urlencode(params)}"


class UrlBuilder:
    def __init__(self, instance_url: str):
        self.instance_url = instance_url

    @property
    def instance_url(self) -> str:
        return self._instance_url

    @instance_url.setter
    def instance_url(self, value: str) -> None:
        self._instance_url = value.rstrip("/")

    def object_home(self, object_name: str, list_view: Optional[str] = None) -> str:
        path = f"/lightning/o/{object_name}/list"
        if list_view:
            path += f"?filterName={list_view}"
        return path

    def record_view(self, record_id: str) -> str:
        return f"/lightning/r/{record_id}/view"

    def record_edit(self, record_id: str) -> str:
        return f"/lightning/r/{record_id}/edit"

    def new_record(self, object_name: str, record_type_id: Optional[str] = None) -> str:
        path = f"/lightning/o/{object_name}/new"
        if record_type_id:
            path += f"?recordTypeId={record_type_id}"
        return path

    def home(self) -> str:
        return "/lightning/page/home"

    def setup_home(self) -> str:
        return "/lightning/setup/SetupOneHome/home"

    def setup_page(self, setup_node: str) -> str:
        return f"/lightning/setup/{setup_node}/home"

    def object_manager(self, object_name: str, section: Optional[str] = None) -> str:
        path = f"/lightning/setup/ObjectManager/{object_name}"
        if section:
            path += f"/{OBJECT_MANAGER_SECTIONS.get(section, section)}/view"
        return path

    def flow_builder(self, flow_id: Optional[str] = None) -> str:
        if flow_id:
            return f"/builder_platform_interaction/flowBuilder.app?flowId={flow_id}"
        return "/lightning/setup/Flows/home"

    def users(self) -> str:
        return "/lightning/setup/ManageUsers/home"

    def permission_sets(self) -> str:
        return "/lightning/setup/PermSets/home"

    def profiles(self) -> str:
        return "/lightning/setup/Profiles/home"

    def profile(self, profile_id: str) -> str:
        return f"/lightning/setup/Profiles/page?address=%2F{profile_id}"

    def permission_set(self, perm_set_id: str) -> str:
        return f"/lightning/setup/PermSets/page?address=%2F{perm_set_id}"

    def apex_classes(self) -> str:
        return "/lightning/setup/ApexClasses/home"

    def custom_settings(self) -> str:
        return "/lightning/setup/CustomSettings/home"

    def custom_metadata_types(self) -> str:
        return "/lightning/setup/CustomMetadata/home"

    def app_manager(self) -> str:
        return "/lightning/setup/NavigationMenus/home"

    def lightning_app_builder(self, page_id: Optional[str] = None) -> str:
        if page_id:
            return f"/visualEditor/appBuilder.app?pageId={page_id}"
        return "/lightning/setup/FlexiPageList/home"

    def developer_console(self) -> str:
        return "/_ui/common/apex/debug/ApexCSIPage"

    def full_url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        if not path.startswith("/"):
            path = "/" + path
        return f"{self.instance_url}{path}"

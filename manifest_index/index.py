import re
from typing import Dict, List, Optional, Tuple

from manifest_index import log
from manifest_index.config_loader import Settings
from manifest_index.element import XmlDocument, XmlElement

ROOT = "/manifest"
APP = ROOT + "/application"
ACTIVITY = APP + "/activity"
INTENT_FILTER = "intent-filter"
USES_PERMISSION = ROOT + "/uses-permission"
USES_SDK = ROOT + "/uses-sdk"

NAME = "name"
PACKAGE = "package"
ENABLED = "enabled"
RW_PERM = "permission"
R_PERM = "readPermission"
W_PERM = "writePermission"
TARGET_SDK = "targetSdkVersion"
ANDROID_PREFIX = "android:"

COMPONENT_TAGS = ("activity", "service", "receiver", "provider")

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_PLAIN_TAG = re.compile(r"[A-Za-z_][\w-]*")


class ManifestError(ValueError):
    """The manifest lacks the structure every query depends on."""


def _segments(name: str) -> List[str]:
    # trailing empty segments do not count: "a." has a single segment
    return name.rstrip(".").split(".")


def class_name(package: str, name: str) -> str:
    """
    Expands a component name from the manifest into a fully-qualified one.

    "com.app.Main" is returned unchanged, ".Main" becomes package + ".Main"
    and "Login" becomes package + ".Login".
    """
    parts = _segments(name)
    if len(parts) > 1 and parts[0]:
        return name
    if "." in name:
        return package + name
    return package + "." + name


def attribute(element: XmlElement, name: str) -> Optional[str]:
    """Plain attribute first, then its android: namespaced form."""
    value = element.attribute(name)
    if value is None:
        value = element.attribute(ANDROID_PREFIX + name)
    return value


def lookup_name(element: Optional[XmlElement]) -> Optional[str]:
    if element is None:
        return None
    return attribute(element, NAME)


def _ends_with(name: Optional[str], marker: str) -> bool:
    return name is not None and _segments(name)[-1] == marker


def _to_int(value: Optional[str]) -> int:
    if value is None:
        return 0
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else 0


class ManifestIndex:
    def __init__(self, manifest_path: str, settings: Optional[Settings] = None):
        self.manifest_path = manifest_path
        self.settings = settings or Settings()
        self.doc = XmlDocument.parse(manifest_path, self.settings.manifest.namespaces)
        self.package_name = self._read_package()

    def _read_package(self) -> str:
        manifests = self.doc.query(ROOT)
        if not manifests:
            log.error(f"No <manifest> root element in {self.manifest_path}")
            raise ManifestError(f"{self.manifest_path}: root element is not <manifest>")
        package = manifests[0].attribute(PACKAGE)
        if not package:
            log.error(f"Missing package attribute in {self.manifest_path}")
            raise ManifestError(f"{self.manifest_path}: <manifest> has no package attribute")
        if not self.doc.query(APP):
            log.error(f"No <application> element in {self.manifest_path}")
            raise ManifestError(f"{self.manifest_path}: <application> element is missing")
        log.debug(f"Loaded manifest for package {package}")
        return package

    def _application(self) -> Optional[XmlElement]:
        apps = self.doc.query(APP)
        return apps[0] if apps else None

    def _activities_with(self, entry_tag: str, marker: str) -> List[str]:
        """Names of activities owning an intent-filter entry whose name ends in marker."""
        names = []
        for activity in self.doc.query(ACTIVITY):
            entries = activity.query(INTENT_FILTER + "/" + entry_tag)
            if not any(_ends_with(lookup_name(entry), marker) for entry in entries):
                continue
            activity_name = lookup_name(activity)
            if activity_name is None:
                log.debug(f"Skipping {marker} entry whose activity has no name")
                continue
            if activity_name not in names:
                names.append(activity_name)
        return names

    def find_launcher(self) -> Optional[str]:
        """The activity declaring both a MAIN action and a LAUNCHER category."""
        main_acts = self._activities_with("action", "MAIN")
        launchers = set(self._activities_with("category", "LAUNCHER"))
        both = [name for name in main_acts if name in launchers]
        if not both:
            log.info("No launcher activity found.")
            return None
        launcher = class_name(self.package_name, both[0])
        log.info(f"Launcher activity: {launcher}")
        return launcher

    def find_components(self, tag: str) -> Tuple[Dict[str, str], List[str]]:
        """
        Splits the enabled components of one kind into protected ones, mapped
        to the permission guarding them, and unprotected ones.

        A component's own permission wins over readPermission, which wins over
        writePermission; without any of those the application's permission
        applies.
        """
        protected_comps: Dict[str, str] = {}
        unprotected_comps: Dict[str, None] = {}
        if not _PLAIN_TAG.fullmatch(tag or ""):
            log.warning(f"Ignoring component query for invalid tag {tag!r}")
            return protected_comps, []

        app = self._application()
        app_perm = attribute(app, RW_PERM) if app is not None else None
        comps = app.children(tag) if app is not None else []

        for comp in comps:
            if attribute(comp, ENABLED) == "false":
                continue
            raw_name = lookup_name(comp)
            if raw_name is None:
                log.debug(f"Skipping <{tag}> without a name")
                continue
            comp_name = class_name(self.package_name, raw_name)
            comp_perm = (
                attribute(comp, RW_PERM)
                or attribute(comp, R_PERM)
                or attribute(comp, W_PERM)
                or app_perm
            )
            # the last entry for a name wins across both outputs
            if comp_perm:
                protected_comps[comp_name] = comp_perm
                unprotected_comps.pop(comp_name, None)
            else:
                unprotected_comps[comp_name] = None
                protected_comps.pop(comp_name, None)

        log.info(
            f"Found {len(protected_comps)} protected and {len(unprotected_comps)} unprotected <{tag}> components."
        )
        return protected_comps, list(unprotected_comps)

    def components(self) -> Dict[str, Tuple[Dict[str, str], List[str]]]:
        return {tag: self.find_components(tag) for tag in COMPONENT_TAGS}

    def application_class_name(self) -> Optional[str]:
        name = lookup_name(self._application())
        if name is None:
            return None
        return class_name(self.package_name, name)

    def permissions(self) -> List[str]:
        perms = []
        for perm in self.doc.query(USES_PERMISSION):
            name = lookup_name(perm)
            if name is None:
                log.debug("Skipping <uses-permission> without a name")
                continue
            perms.append(name)
        log.info(f"Found {len(perms)} permissions.")
        return perms

    def sdk_version(self) -> int:
        version = self.settings.manifest.min_sdk_floor
        for sdk in self.doc.query(USES_SDK):
            version = max(version, _to_int(attribute(sdk, TARGET_SDK)))
        return version

    def save(self, file_name: str) -> str:
        try:
            self.doc.write(file_name)
        except OSError as e:
            log.error(f"Failed to save manifest to {file_name}: {e}")
            raise
        log.success(f"Manifest saved to {file_name}")
        return f"saved to {file_name}\n"

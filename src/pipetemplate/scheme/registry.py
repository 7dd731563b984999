"""
Scheme — Registry of object kinds the decoder understands.

Each kind is registered under a group and one or more versions. The
scheme answers "which kind is this object" and "do we know this
apiVersion/kind pair".
"""

from dataclasses import dataclass
from typing import Iterable

from pipetemplate.vocabulary import ResourceGroup
from pipetemplate.scheme.kinds import BASE_KINDS, ORIGIN_KINDS, classify_kind


class SchemeError(Exception):
    """Base for decoder, scheme and accessor failures."""


class UnknownKindError(SchemeError):
    pass


@dataclass(frozen=True)
class GroupVersionKind:
    """Fully qualified object kind."""
    group: str
    version: str
    kind: str

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version

    @property
    def resource_group(self) -> ResourceGroup:
        return classify_kind(self.kind)


def parse_api_version(api_version: str) -> tuple[str, str]:
    """Split "group/version" into its parts; legacy "v1" has no group."""
    if "/" in api_version:
        group, version = api_version.split("/", 1)
        return group, version
    return "", api_version


class Scheme:
    """
    Kind registry.

    Lookups are keyed by (apiVersion, kind); a kind may be known under
    several apiVersions.
    """

    def __init__(self):
        self._known: dict[tuple[str, str], GroupVersionKind] = {}

    def register(self, kind: str, api_versions: Iterable[str]) -> None:
        """Register `kind` under every apiVersion in `api_versions`."""
        for api_version in api_versions:
            group, version = parse_api_version(api_version)
            self._known[(api_version, kind)] = GroupVersionKind(group, version, kind)

    def recognizes(self, api_version: str, kind: str) -> bool:
        return (api_version, kind) in self._known

    def kinds(self) -> set[str]:
        return {gvk.kind for gvk in self._known.values()}

    def object_kind(self, obj) -> GroupVersionKind:
        """
        Resolve the registered kind of a decoded object.

        Raises UnknownKindError if the object's apiVersion/kind pair is not
        registered.
        """
        api_version = getattr(obj, "api_version", "")
        kind = getattr(obj, "kind", "")
        gvk = self._known.get((api_version, kind))
        if gvk is None:
            raise UnknownKindError(f"unknown kind {kind!r} in version {api_version!r}")
        return gvk


_ORIGIN_GROUPS: dict[str, str] = {
    "Build": "build.openshift.io",
    "BuildConfig": "build.openshift.io",
    "BuildRequest": "build.openshift.io",
    "DeploymentConfig": "apps.openshift.io",
    "ImageStream": "image.openshift.io",
    "ImageStreamImport": "image.openshift.io",
    "ImageStreamMapping": "image.openshift.io",
    "ImageStreamTag": "image.openshift.io",
    "Route": "route.openshift.io",
    "Template": "template.openshift.io",
    "Project": "project.openshift.io",
    "ProjectRequest": "project.openshift.io",
    "User": "user.openshift.io",
    "Group": "user.openshift.io",
    "Identity": "user.openshift.io",
    "OAuthClient": "oauth.openshift.io",
    "EgressNetworkPolicy": "network.openshift.io",
}


def create_default_scheme() -> Scheme:
    """
    Scheme with every base and origin kind registered.

    Base kinds use the legacy "v1" apiVersion. Origin kinds are known both
    under legacy "v1" and under their own group, when they have one.
    """
    scheme = Scheme()
    for kind in BASE_KINDS:
        scheme.register(kind, ["v1"])
    for kind in ORIGIN_KINDS:
        versions = ["v1"]
        group = _ORIGIN_GROUPS.get(kind, "authorization.openshift.io")
        versions.append(f"{group}/v1")
        scheme.register(kind, versions)
    return scheme

"""
Kinds — Static kind tables and kind → resource pluralization.
"""

from pipetemplate.vocabulary import ResourceGroup


# Kinds served by the core orchestration API (/api/v1).
BASE_KINDS: frozenset[str] = frozenset({
    "Binding",
    "ConfigMap",
    "Endpoints",
    "Event",
    "LimitRange",
    "Namespace",
    "PersistentVolume",
    "PersistentVolumeClaim",
    "Pod",
    "PodTemplate",
    "ReplicationController",
    "ResourceQuota",
    "Secret",
    "Service",
    "ServiceAccount",
})

# Kinds served by the platform API group (/oapi/v1).
ORIGIN_KINDS: frozenset[str] = frozenset({
    "Build",
    "BuildConfig",
    "BuildRequest",
    "ClusterPolicy",
    "ClusterPolicyBinding",
    "ClusterRole",
    "ClusterRoleBinding",
    "DeploymentConfig",
    "EgressNetworkPolicy",
    "Group",
    "Identity",
    "ImageStream",
    "ImageStreamImport",
    "ImageStreamMapping",
    "ImageStreamTag",
    "OAuthClient",
    "Policy",
    "PolicyBinding",
    "Project",
    "ProjectRequest",
    "Role",
    "RoleBinding",
    "Route",
    "Template",
    "User",
})


# Kinds whose resource name is already plural.
UNPLURALIZED_SUFFIXES = ("endpoints",)


def is_kind_in_origin_group(kind: str) -> bool:
    """True if `kind` belongs to the platform API group."""
    return kind in ORIGIN_KINDS


def classify_kind(kind: str) -> ResourceGroup:
    """Resolve which API group creates resources of `kind`."""
    return ResourceGroup.ORIGIN if is_kind_in_origin_group(kind) else ResourceGroup.BASE


def kind_to_resource(kind: str) -> str:
    """
    Convert a kind to its plural resource name.

    Lowercases the kind, then: trailing "s" takes "es", trailing "y"
    becomes "ies", anything else takes "s".
    """
    if not kind:
        return ""
    lowered = kind.lower()
    if any(lowered.endswith(suffix) for suffix in UNPLURALIZED_SUFFIXES):
        return lowered
    if lowered.endswith("s"):
        return lowered + "es"
    if lowered.endswith("y"):
        return lowered[:-1] + "ies"
    return lowered + "s"

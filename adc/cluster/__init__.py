"""Remote gateway clients.

Exports:
    Cluster        -- Protocol: handle exposing one ResourceClient per kind.
    ResourceClient -- Protocol: list/create/update/delete for one kind.
    ClusterError   -- Raised on transport or admin API failures.
    ApisixCluster  -- httpx-backed APISIX admin API implementation.
"""

from adc.cluster.apisix import ApisixCluster
from adc.cluster.base import Cluster, ClusterError, ResourceClient

__all__ = ["ApisixCluster", "Cluster", "ClusterError", "ResourceClient"]

from .alerts import AlertsClient as AlertsClient
from .api_access import ApiAccessClient as ApiAccessClient
from .nerdstorage import NerdStorageClient as NerdStorageClient
from .workloads import WorkloadsClient as WorkloadsClient

__all__ = [
    "AlertsClient",
    "ApiAccessClient",
    "NerdStorageClient",
    "WorkloadsClient",
]

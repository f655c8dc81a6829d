# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

"""
common: Defines infra provisioning constants and shared data types.

"""

from enum import Enum

ARM_ENDPOINT = "https://management.azure.com/"

DEFAULT_LOCATION = "eastus"
INFRA_NO_PREFLIGHT_ENV_KEY = "HCP_INFRA_NO_PREFLIGHT"

# Network
VIRTUAL_NETWORK_ADDRESS_PREFIX = "10.0.0.0/16"
VIRTUAL_NETWORK_SUBNET_ADDRESS_PREFIX = "10.0.0.0/24"
VIRTUAL_NETWORK_SUBNET_NAME = "default"
VIRTUAL_NETWORK_LINK_LOCATION = "global"
PRIVATE_DNS_ZONE_LOCATION = "global"

# Identity
CONTRIBUTOR_ROLE_NAME = "Contributor"
ROLE_ASSIGNMENT_MAX_ATTEMPTS = 100
ROLE_ASSIGNMENT_RETRY_DELAY_SEC = 1

# Egress
LB_HEALTH_PROBE_PORT = 30595
LB_HEALTH_PROBE_PATH = "/healthz"
LB_HEALTH_PROBE_INTERVAL_SEC = 5
LB_HEALTH_PROBE_COUNT = 2
LB_OUTBOUND_ALLOCATED_PORTS = 1024
LB_IDLE_TIMEOUT_MIN = 4

# Boot image
RHCOS_IMAGE_HOST_PREFIX = "https://rhcos.blob.core.windows.net"
STORAGE_ACCOUNT_PREFIX = "cluster"
STORAGE_ACCOUNT_SUFFIX_LENGTH = 5
IMAGE_CONTAINER_NAME = "vhd"
IMAGE_BLOB_NAME = "rhcos.x86_64.vhd"
BLOB_COPY_POLL_SEC = 5

REQUIRED_RP_NAMESPACES = frozenset(
    [
        "Microsoft.Compute",
        "Microsoft.ManagedIdentity",
        "Microsoft.Network",
        "Microsoft.Storage",
    ]
)


class BlobCopyStatus(Enum):
    """
    Status of a server side blob copy.
    """

    pending = "pending"
    success = "success"
    aborted = "aborted"
    failed = "failed"

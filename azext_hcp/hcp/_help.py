# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------
"""
Help content for hosted cluster infrastructure commands.
"""

from knack.help_files import helps

from .providers.infra.common import INFRA_NO_PREFLIGHT_ENV_KEY, RHCOS_IMAGE_HOST_PREFIX


def load_hcp_help():
    helps[
        "hcp"
    ] = """
        type: group
        short-summary: Manage hosted control plane clusters on Azure.
    """

    helps[
        "hcp infra"
    ] = """
        type: group
        short-summary: Provision the Azure infrastructure of a hosted cluster.
    """

    helps[
        "hcp infra create"
    ] = f"""
        type: command
        short-summary: Create the Azure infrastructure a hosted cluster's nodes run on.
        long-summary: |
                      The following resources are created, or resolved when an existing one is provided:

                      - A resource group '{{name}}-{{infra-id}}'.
                      - A user-assigned managed identity bound to the 'Contributor' role of the resource group.
                      - A virtual network with a single subnet and a network security group.
                      - A private DNS zone '{{name}}-azurecluster.{{base-domain}}' linked to the virtual network.
                      - A public IP address and load balancer providing outbound connectivity.
                      - A compute image copied from a RHCOS VHD hosted at {RHCOS_IMAGE_HOST_PREFIX}.

                      The ids of the provisioned infrastructure are returned, and optionally written
                      to a yaml file with --output-file.

                      Resources are not deleted when a step fails.

                      Pre-flight checks can be skipped by setting the '{INFRA_NO_PREFLIGHT_ENV_KEY}'
                      environment variable to 'true'.

        examples:
        - name: Usage with minimum input.
          text: >
             az hcp infra create -n mycluster --infra-id abc12 --base-domain example.com
             --rhcos-image https://rhcos.blob.core.windows.net/imagebucket/rhcos.x86_64.vhd
        - name: Provision into an existing resource group and network security group, writing the result to a file.
          text: >
             az hcp infra create -n mycluster --infra-id abc12 --base-domain example.com
             --rhcos-image https://rhcos.blob.core.windows.net/imagebucket/rhcos.x86_64.vhd
             --rg myresourcegroup --nsg mynsg --output-file ./infra.yaml
        - name: Reuse an existing virtual network and authenticate with a service principal credentials file.
          text: >
             az hcp infra create -n mycluster --infra-id abc12 --base-domain example.com
             --rhcos-image https://rhcos.blob.core.windows.net/imagebucket/rhcos.x86_64.vhd
             --vnet-id /subscriptions/mysub/resourceGroups/myrg/providers/Microsoft.Network/virtualNetworks/myvnet
             --azure-creds ./creds.json
    """

# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from typing import Dict, NamedTuple, Optional, Union

from azure.cli.core.azclierror import InvalidArgumentValueError, RequiredArgumentMissingError
from knack.log import get_logger

from ...util.az_client import parse_resource_id
from .common import DEFAULT_LOCATION, RHCOS_IMAGE_HOST_PREFIX

logger = get_logger(__name__)


class ReuseNetwork(NamedTuple):
    vnet_id: str


class CreateNetwork(NamedTuple):
    vnet_name: str
    nsg_name: str
    location: str
    existing_nsg: bool = False


NetworkPlan = Union[ReuseNetwork, CreateNetwork]


class InfraOutput:
    """
    Aggregated identifiers of the provisioned infrastructure, consumed by hosted cluster creation.
    """

    def __init__(self, base_domain: str, location: str, infra_id: str):
        self.base_domain = base_domain
        self.public_zone_id: str = ""
        self.private_zone_id: str = ""
        self.location = location
        self.resource_group_name: str = ""
        self.vnet_id: str = ""
        self.vnet_name: str = ""
        self.subnet_id: str = ""
        self.boot_image_id: str = ""
        self.infra_id = infra_id
        self.machine_identity_id: str = ""
        self.security_group_id: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "baseDomain": self.base_domain,
            "publicZoneID": self.public_zone_id,
            "privateZoneID": self.private_zone_id,
            "region": self.location,
            "resourceGroupName": self.resource_group_name,
            "vnetID": self.vnet_id,
            "vnetName": self.vnet_name,
            "subnetID": self.subnet_id,
            "bootImageID": self.boot_image_id,
            "infraID": self.infra_id,
            "machineIdentityID": self.machine_identity_id,
            "securityGroupID": self.security_group_id,
        }


class InfraTargets:
    def __init__(
        self,
        name: str,
        infra_id: str,
        base_domain: str,
        rhcos_image: str,
        location: Optional[str] = None,
        resource_group_name: Optional[str] = None,
        resource_group_tags: Optional[Dict[str, str]] = None,
        vnet_id: Optional[str] = None,
        network_security_group: Optional[str] = None,
        output_file: Optional[str] = None,
        **_,
    ):
        self.name = name
        self.infra_id = infra_id
        self.base_domain = base_domain
        self.rhcos_image = rhcos_image
        self.location = location or DEFAULT_LOCATION
        self.resource_group_name = resource_group_name
        self.resource_group_tags = resource_group_tags or {}
        self.vnet_id = vnet_id
        self.network_security_group = network_security_group
        self.output_file = output_file

    def validate(self):
        """
        Input checks that must pass before any remote call is made.
        """
        for attr, flag in [
            ("name", "--name"),
            ("infra_id", "--infra-id"),
            ("base_domain", "--base-domain"),
            ("rhcos_image", "--rhcos-image"),
        ]:
            if not getattr(self, attr):
                raise RequiredArgumentMissingError(f"{flag} is required.")

        if self.network_security_group and not self.resource_group_name:
            raise RequiredArgumentMissingError(
                "--resource-group-name is required when using --network-security-group."
            )
        if self.vnet_id:
            parse_resource_id(self.vnet_id)
        ensure_trusted_image_source(self.rhcos_image)

    @property
    def default_resource_group_name(self) -> str:
        return f"{self.name}-{self.infra_id}"

    @property
    def identity_name(self) -> str:
        return f"{self.name}-{self.infra_id}"

    @property
    def vnet_name(self) -> str:
        return f"{self.name}-{self.infra_id}"

    @property
    def nsg_name(self) -> str:
        return self.network_security_group or f"{self.name}-{self.infra_id}-nsg"

    @property
    def private_zone_name(self) -> str:
        return f"{self.name}-azurecluster.{self.base_domain}"

    @property
    def zone_link_name(self) -> str:
        return f"{self.name}-{self.infra_id}"

    @property
    def egress_name(self) -> str:
        return self.infra_id

    @property
    def network_plan(self) -> NetworkPlan:
        if self.vnet_id:
            if self.network_security_group:
                logger.warning(
                    "Ignoring --network-security-group '%s', the security group of the existing "
                    "virtual network subnet is used.",
                    self.network_security_group,
                )
            return ReuseNetwork(vnet_id=self.vnet_id)
        return CreateNetwork(
            vnet_name=self.vnet_name,
            nsg_name=self.nsg_name,
            location=self.location,
            existing_nsg=bool(self.network_security_group),
        )


def ensure_trusted_image_source(source_url: str):
    # The blob copy API reports a disallowed source only as 'One of the request inputs is out of range'.
    if not source_url or not source_url.startswith(RHCOS_IMAGE_HOST_PREFIX):
        raise InvalidArgumentValueError(
            f"The image source url must be from the '{RHCOS_IMAGE_HOST_PREFIX}' azure blob storage, "
            "otherwise upload will fail with an 'One of the request inputs is out of range' error."
        )

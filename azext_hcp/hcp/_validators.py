# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------


from argparse import Namespace
from azure.cli.core.azclierror import InvalidArgumentValueError, RequiredArgumentMissingError

from .providers.infra.targets import ensure_trusted_image_source


def _validate_resource_name_chars(value: str, flag: str):
    import re

    # derived resource names are {name}-{infra-id}
    if not re.fullmatch(r"[a-zA-Z0-9\-]+", value):
        raise InvalidArgumentValueError(
            f"Invalid {flag} '{value}'. Only alphanumeric characters and hyphens are allowed."
        )


def validate_cluster_name(namespace: Namespace):
    if hasattr(namespace, "name") and namespace.name:
        _validate_resource_name_chars(namespace.name, "--name")


def validate_infra_id(namespace: Namespace):
    if hasattr(namespace, "infra_id") and namespace.infra_id:
        _validate_resource_name_chars(namespace.infra_id, "--infra-id")


def validate_network_security_group(namespace: Namespace):
    if getattr(namespace, "network_security_group", None) and not getattr(namespace, "resource_group_name", None):
        raise RequiredArgumentMissingError(
            "--resource-group-name is required when using --network-security-group."
        )


def validate_rhcos_image(namespace: Namespace):
    if hasattr(namespace, "rhcos_image") and namespace.rhcos_image:
        ensure_trusted_image_source(namespace.rhcos_image)

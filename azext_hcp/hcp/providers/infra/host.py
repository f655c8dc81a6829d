# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------


from typing import Dict, List, NamedTuple

import requests
from azure.cli.core.azclierror import ValidationError
from knack.log import get_logger

from .common import ARM_ENDPOINT

logger = get_logger(__name__)


class EndpointConnections(NamedTuple):
    connect_map: Dict[str, bool]

    @property
    def failed_connections(self) -> List[str]:
        return [endpoint for endpoint in self.connect_map if not self.connect_map[endpoint]]

    def throw_if_failure(self):
        failed_conns = self.failed_connections
        if failed_conns:
            raise ValidationError(get_connectivity_error(failed_conns))


def check_connectivity(url: str, timeout: int = 20) -> bool:
    try:
        req = requests.head(url=url, timeout=timeout)
        req.raise_for_status()
        return True
    except requests.HTTPError:
        # HTTPError implies an http server response
        return True
    except requests.ConnectionError:
        return False


def get_connectivity_error(endpoints: List[str], protocol: str = "https", direction: str = "outbound") -> str:
    endpoints_list_format = ""
    for ep in endpoints:
        endpoints_list_format += f"* {ep}\n"

    return (
        f"\nUnable to verify {direction} {protocol} connectivity to:\n"
        f"\n{endpoints_list_format}\n"
        "Ensure host, proxy and/or firewall config allows connection.\n"
        "\nThe 'HTTP_PROXY' and 'HTTPS_PROXY' environment variables can be used for the CLI client.\n"
    )


def preflight_http_connections(endpoints: List[str]) -> EndpointConnections:
    """
    Tests connectivity for each endpoint in the provided list.
    """
    endpoint_connect_map = {}
    for endpoint in endpoints or []:
        endpoint_connect_map[endpoint] = check_connectivity(url=endpoint)

    return EndpointConnections(connect_map=endpoint_connect_map)


def verify_cli_client_connections():
    preflight_http_connections([ARM_ENDPOINT]).throw_if_failure()

# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from typing import Optional

import pytest
import responses
from azure.core.exceptions import HttpResponseError


@pytest.fixture
def mocked_get_subscription_id(mocker):
    from .generators import get_zeroed_subscription

    patched = mocker.patch("azure.cli.core.commands.client_factory.get_subscription_id", autospec=True)
    patched.return_value = get_zeroed_subscription()
    yield patched


@pytest.fixture
def mocked_cmd(mocker, mocked_get_subscription_id):
    az_cli_mock = mocker.patch("azure.cli.core.AzCli", autospec=True, **{"data": {"command": "az"}})
    config = {"cli_ctx": az_cli_mock}
    patched = mocker.patch("azure.cli.core.commands.AzCliCommand", autospec=True, **config)
    yield patched


@pytest.fixture
def mocked_sleep(mocker):
    yield {
        "az_client": mocker.patch("azext_hcp.hcp.util.az_client.sleep"),
        "common": mocker.patch("azext_hcp.hcp.util.common.sleep"),
    }


def get_http_error(status_code: int, code: Optional[str] = None, message: str = "error") -> HttpResponseError:
    """
    Builds a provider error resembling what the management clients raise.
    """
    error = HttpResponseError(message=message)
    error.status_code = status_code
    if code:
        error.error = type("ODataError", (), {"code": code, "message": message})()
    return error


def get_done_poller(mocker, result=None):
    poller = mocker.Mock()
    poller.done.return_value = True
    poller.result.return_value = result
    return poller


@pytest.fixture
def mocked_responses():
    with responses.RequestsMock() as rsps:
        yield rsps

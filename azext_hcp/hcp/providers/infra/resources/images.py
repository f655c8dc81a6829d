# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from time import sleep
from typing import TYPE_CHECKING, Optional

from azure.cli.core.azclierror import AzureResponseError, ResourceNotFoundError
from azure.core.exceptions import HttpResponseError
from knack.log import get_logger

from ....util.az_client import (
    get_blob_client,
    get_compute_mgmt_client,
    get_storage_mgmt_client,
    wait_for_terminal_state,
)
from ....util.common import url_safe_random_chars
from ..common import (
    BLOB_COPY_POLL_SEC,
    IMAGE_BLOB_NAME,
    IMAGE_CONTAINER_NAME,
    STORAGE_ACCOUNT_PREFIX,
    STORAGE_ACCOUNT_SUFFIX_LENGTH,
    BlobCopyStatus,
)
from ..targets import ensure_trusted_image_source

logger = get_logger(__name__)

if TYPE_CHECKING:
    from azure.core.credentials import TokenCredential


class BootImages:
    """
    Stages a RHCOS VHD into a new storage account and registers it as a compute image.
    """

    def __init__(self, subscription_id: str, credential: Optional["TokenCredential"] = None):
        self.storage_mgmt_client = get_storage_mgmt_client(subscription_id=subscription_id, credential=credential)
        self.compute_mgmt_client = get_compute_mgmt_client(subscription_id=subscription_id, credential=credential)

    def create(
        self,
        image_url: str,
        resource_group_name: str,
        location: str,
        copy_poll_sec: float = BLOB_COPY_POLL_SEC,
        **kwargs,
    ) -> str:
        ensure_trusted_image_source(image_url)

        account_name = self.create_storage_account(
            resource_group_name=resource_group_name, location=location, **kwargs
        )
        logger.info("Successfully created storage account %s", account_name)

        self.create_container(account_name=account_name, resource_group_name=resource_group_name)
        logger.info("Successfully created blob container %s", IMAGE_CONTAINER_NAME)

        account_key = self.get_account_key(account_name=account_name, resource_group_name=resource_group_name)
        blob_url = self.copy_blob(
            source_url=image_url, account_name=account_name, account_key=account_key, poll_sec=copy_poll_sec
        )
        logger.info("Successfully copied image blob to %s", blob_url)

        image_id = self.create_image(
            blob_url=blob_url, resource_group_name=resource_group_name, location=location, **kwargs
        )
        logger.info("Successfully created boot image %s", image_id)
        return image_id

    def create_storage_account(self, resource_group_name: str, location: str, **kwargs) -> str:
        account_name = f"{STORAGE_ACCOUNT_PREFIX}{url_safe_random_chars(STORAGE_ACCOUNT_SUFFIX_LENGTH, lower=True)}"
        parameters = {
            "location": location,
            "kind": "StorageV2",
            "sku": {"name": "Premium_LRS", "tier": "Standard"},
        }
        try:
            poller = self.storage_mgmt_client.storage_accounts.begin_create(
                resource_group_name=resource_group_name,
                account_name=account_name,
                parameters=parameters,
            )
            storage_account = wait_for_terminal_state(poller, **kwargs)
        except HttpResponseError as e:
            raise AzureResponseError(f"failed to create storage account '{account_name}': {e.message}")

        return storage_account.name

    def create_container(self, account_name: str, resource_group_name: str):
        try:
            return self.storage_mgmt_client.blob_containers.create(
                resource_group_name=resource_group_name,
                account_name=account_name,
                container_name=IMAGE_CONTAINER_NAME,
                blob_container={},
            )
        except HttpResponseError as e:
            raise AzureResponseError(f"failed to create blob container '{IMAGE_CONTAINER_NAME}': {e.message}")

    def get_account_key(self, account_name: str, resource_group_name: str) -> str:
        try:
            keys_result = self.storage_mgmt_client.storage_accounts.list_keys(
                resource_group_name=resource_group_name,
                account_name=account_name,
                expand="kerb",
            )
        except HttpResponseError as e:
            raise AzureResponseError(f"failed to list storage account keys for '{account_name}': {e.message}")

        keys = keys_result.keys if keys_result else None
        if not keys or not keys[0].value:
            raise ResourceNotFoundError("no storage account keys exist")
        return keys[0].value

    def copy_blob(self, source_url: str, account_name: str, account_key: str, poll_sec: float = BLOB_COPY_POLL_SEC):
        blob_client = get_blob_client(
            account_name=account_name,
            account_key=account_key,
            container_name=IMAGE_CONTAINER_NAME,
            blob_name=IMAGE_BLOB_NAME,
        )
        try:
            blob_client.start_copy_from_url(source_url, metadata={"source_uri": source_url})
            while True:
                copy_props = blob_client.get_blob_properties().copy
                status = (copy_props.status or "").lower()
                if status != BlobCopyStatus.pending.value:
                    break
                logger.debug("Blob copy into %s is %s, progress %s", account_name, status, copy_props.progress)
                sleep(poll_sec)
        except HttpResponseError as e:
            raise AzureResponseError(f"failed to copy image blob into storage account '{account_name}': {e.message}")

        if status != BlobCopyStatus.success.value:
            raise AzureResponseError(
                f"image blob copy into storage account '{account_name}' ended with status '{status}': "
                f"{copy_props.status_description}"
            )
        return blob_client.url

    def create_image(self, blob_url: str, resource_group_name: str, location: str, **kwargs) -> str:
        parameters = {
            "location": location,
            "properties": {
                "storageProfile": {
                    "osDisk": {
                        "osType": "Linux",
                        "osState": "Generalized",
                        "blobUri": blob_url,
                    },
                },
                "hyperVGeneration": "V1",
            },
        }
        try:
            poller = self.compute_mgmt_client.images.begin_create_or_update(
                resource_group_name=resource_group_name,
                image_name=IMAGE_BLOB_NAME,
                parameters=parameters,
            )
            image = wait_for_terminal_state(poller, **kwargs)
        except HttpResponseError as e:
            raise AzureResponseError(f"failed to create boot image: {e.message}")

        return image.id

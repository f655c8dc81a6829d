# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

import json
import os
from typing import Any, Callable, Optional, Union

import yaml
from azure.cli.core.azclierror import FileOperationError
from knack.log import get_logger

logger = get_logger(__name__)


def read_file_content(file_path: str, read_as_binary: bool = False) -> Union[bytes, str]:
    from pathlib import Path

    logger.debug("Processing %s", file_path)
    pure_path = Path(os.path.abspath(os.path.expanduser(file_path)))

    if not pure_path.exists():
        raise FileOperationError(f"{file_path} does not exist.")

    if not pure_path.is_file():
        raise FileOperationError(f"{file_path} is not a file.")

    if read_as_binary:
        logger.debug("Reading %s as binary", file_path)
        return pure_path.read_bytes()

    # Try with 'utf-8-sig' first, so that BOM in WinOS won't cause trouble.
    for encoding in ["utf-8-sig", "utf-8"]:
        try:
            logger.debug("Reading %s as %s", file_path, encoding)
            return pure_path.read_text(encoding=encoding)
        except (UnicodeError, UnicodeDecodeError):
            pass

    raise FileOperationError(f"Failed to decode file {file_path}.")


def deserialize_file_content(file_path: str) -> Any:
    """
    Loads json or yaml file content. Files without a known extension are tried as json, then yaml.
    """
    extension = file_path.split(".")[-1].lower()
    valid_extension = extension in ["json", "yaml", "yml"]
    content = read_file_content(file_path)
    result = None
    if not valid_extension or extension == "json":
        result = _try_loading_as(
            loader=json.loads, content=content, error_type=json.JSONDecodeError, raise_error=valid_extension
        )
    if (not result and not valid_extension) or extension in ["yaml", "yml"]:
        # yaml is a superset of json, so this also catches json files with odd extensions
        result = _try_loading_as(loader=yaml.safe_load, content=content, error_type=yaml.YAMLError)
    if result is not None:
        return result
    raise FileOperationError(f"File contents for {file_path} cannot be read.")


def write_content_to_file(content: str, file_path: str) -> str:
    file_path = os.path.abspath(os.path.expanduser(file_path))
    output_dir = os.path.dirname(file_path)
    if output_dir and not os.path.exists(output_dir):
        os.makedirs(output_dir, exist_ok=True)
    if os.path.exists(file_path):
        logger.warning(f"The file {file_path} will be overwritten.")
    with open(file_path, "w", encoding="utf-8") as f:
        f.write(content)

    return file_path


def _try_loading_as(loader: Callable, content: str, error_type: Exception, raise_error: bool = True) -> Optional[Any]:
    try:
        return loader(content)
    except error_type as e:
        if raise_error:
            raise FileOperationError(e)

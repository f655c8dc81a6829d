# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from .common import (
    is_env_flag_enabled,
    retry,
    url_safe_random_chars,
)
from .file_operations import (
    deserialize_file_content,
    read_file_content,
    write_content_to_file,
)

__all__ = [
    "deserialize_file_content",
    "is_env_flag_enabled",
    "read_file_content",
    "retry",
    "url_safe_random_chars",
    "write_content_to_file",
]

# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

"""
common: Defines common utility functions and components.

"""

from time import sleep
from typing import Callable, Optional, TypeVar

from knack.log import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def retry(
    fn: Callable[[], T],
    max_attempts: int,
    backoff: float = 1.0,
    should_retry: Optional[Callable[[Exception], bool]] = None,
    description: str = "operation",
) -> T:
    """
    Invokes fn until it returns, sleeping a fixed backoff (seconds) between attempts.

    The error of the final attempt is raised once max_attempts is reached. When should_retry is
    provided, an error it rejects is raised immediately.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1.")

    attempt = 0
    while True:
        attempt += 1
        try:
            return fn()
        except Exception as e:
            if attempt >= max_attempts:
                logger.debug("%s failed after %s attempts.", description, attempt)
                raise
            if should_retry and not should_retry(e):
                logger.debug("%s failed with a non-retryable error on attempt %s.", description, attempt)
                raise
            logger.debug("%s attempt %s/%s failed, retrying: %s", description, attempt, max_attempts, e)
            if backoff:
                sleep(backoff)


def url_safe_random_chars(count: int, lower: bool = False) -> str:
    import secrets

    token = ""
    while len(token) < count:
        _t = secrets.token_urlsafe()
        _t = _t.replace("-", "")
        _t = _t.replace("_", "")
        token += _t

    token = token[:count]
    return token.lower() if lower else token


def is_env_flag_enabled(env_flag_key: str) -> bool:
    from os import getenv

    return getenv(env_flag_key, "false").lower() in ["true", "1", "y"]

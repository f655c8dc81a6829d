#!/usr/bin/env python
# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

import re
import os.path
from io import open
from setuptools import setup, find_packages


EXTENSION_REF_NAME = "azext_hcp"

# Version extraction inspired from 'requests'
with open(os.path.join(EXTENSION_REF_NAME, "constants.py"), "r", encoding="utf-8") as fd:
    constants_raw = fd.read()
    VERSION = re.search(r'^VERSION\s*=\s*[\'"]([^\'"]*)[\'"]', constants_raw, re.MULTILINE).group(1)
    PACKAGE_NAME = re.search(r'^EXTENSION_NAME\s*=\s*[\'"]([^\'"]*)[\'"]', constants_raw, re.MULTILINE).group(1)


if not VERSION:
    raise RuntimeError("Cannot find version information")

if not PACKAGE_NAME:
    raise RuntimeError("Cannot find package information")


DEPENDENCIES = [
    "rich>=13.6,<15.0",
    "requests>=2.31",
    "PyYAML>=6.0",
    "azure-identity>=1.14.1",
    "azure-mgmt-resource>=23.0.0",
    "azure-mgmt-authorization>=4.0.0",
    "azure-mgmt-msi>=7.0.0",
    "azure-mgmt-network>=25.0.0",
    "azure-mgmt-dns>=8.1.0",
    "azure-mgmt-privatedns>=1.1.0",
    "azure-mgmt-storage>=21.0.0",
    "azure-mgmt-compute>=30.0.0",
    "azure-storage-blob>=12.19.0",
]

TEST_DEPENDENCIES = [
    "azure-cli-core>=2.60.0",
    "pytest>=7.4",
    "pytest-mock>=3.12",
    "responses>=0.23",
]

CLASSIFIERS = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Programming Language :: Python",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3.9",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
]

short_description = "The Azure hosted control plane infrastructure extension for Azure CLI."

setup(
    name=PACKAGE_NAME,
    version=VERSION,
    python_requires=">=3.9",
    description=short_description,
    long_description="{} Provisions the Azure network, identity and boot image resources a hosted cluster "
    "needs before bring-up.".format(short_description),
    license="MIT",
    author="Microsoft",
    classifiers=CLASSIFIERS,
    packages=find_packages(exclude=["tests", "*.tests", "*.tests.*", "scripts"]),
    package_data={
        EXTENSION_REF_NAME: [
            "azext_metadata.json",
        ]
    },
    install_requires=DEPENDENCIES,
    extras_require={"test": TEST_DEPENDENCIES},
    zip_safe=False,
)

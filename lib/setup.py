#!/usr/bin/env python3

# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""
Setup configuration for iam_provisioning_common package.

This shared library provides utilities for the LogUserCredentials Lambda:
- Event parsing for IAM CreateUser events
- SSM Parameter Store and Secrets Manager lookups
- The user creation notifier
"""

from setuptools import find_packages, setup

setup(
    name="iam_provisioning_common",
    version="0.1.0",
    description="Shared utilities for the IAM provisioning Lambda functions",
    packages=find_packages(),
    python_requires=">=3.12",
    install_requires=[
        "boto3>=1.34.0",
    ],
    author="Development Team",
    license="MIT-0",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
    ],
)

# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Setup configuration for the Blockflow parallel execution engine
"""

from setuptools import setup, find_packages

setup(
    name="blockflow-parallel",
    version="1.0.0",
    description="Parallel-block scheduling and completion tracking for graph workflows",
    packages=find_packages(include=["blockflow", "blockflow.*"]),
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
        ]
    },
)

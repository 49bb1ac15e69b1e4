#!/usr/bin/env python
# read the contents of your README file
from pathlib import Path

from setuptools import find_packages, setup

this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text()

# single source of the version number
version = {}
exec((this_directory / "chainderive" / "_version.py").read_text(), version)

setup(
    name="chainderive",
    version=version["__version__"],
    description="Availability-aware, lazily built derive queries for chain API clients",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["chainderive", "chainderive.*"]),
    python_requires=">=3.9",
    install_requires=["pandas"],
    extras_require={"test": ["pytest"]},
)

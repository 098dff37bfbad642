"""Module setup."""

import os
import runpy
from setuptools import setup, find_packages

PACKAGE_NAME = "di_conformance"
version_meta = runpy.run_path("./{}/version.py".format(PACKAGE_NAME))
VERSION = version_meta["__version__"]


with open(os.path.abspath("./README.md"), "r") as fh:
    long_description = fh.read()


def parse_requirements(filename):
    """Load requirements from a pip requirements file."""
    lineiter = (line.strip() for line in open(filename))
    return [
        line
        for line in lineiter
        if line and not line.startswith("#") and not line.startswith("git+")
    ]


if __name__ == "__main__":
    setup(
        name="di-conformance",
        version=VERSION,
        description="Data Integrity proof conformance harness for VC API vendors",
        long_description=long_description,
        long_description_content_type="text/markdown",
        packages=find_packages(include=[PACKAGE_NAME, f"{PACKAGE_NAME}.*"]),
        include_package_data=True,
        package_data={
            f"{PACKAGE_NAME}.config": ["default_logging_config.ini"],
        },
        install_requires=parse_requirements("requirements.txt"),
        extras_require={
            "test": parse_requirements("requirements.dev.txt"),
        },
        python_requires=">=3.9",
        classifiers=[
            "Programming Language :: Python :: 3",
            "License :: OSI Approved :: Apache Software License",
            "Operating System :: OS Independent",
        ],
        scripts=["bin/di-conformance"],
    )

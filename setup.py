# Copyright Contributors to the Cellarium project.
# SPDX-License-Identifier: BSD-3-Clause

import os
import re

import setuptools

PROJECT_PATH = os.path.dirname(os.path.abspath(__file__))


def get_version() -> str:
    with open(os.path.join(PROJECT_PATH, "cellarium", "norm", "__init__.py")) as fh:
        match = re.search(r'^__version__ = "([^"]+)"', fh.read(), re.MULTILINE)
    if match is None:
        raise RuntimeError("Unable to find __version__ in cellarium/norm/__init__.py")
    return match.group(1)


with open(os.path.join(PROJECT_PATH, "README.rst"), "r") as fh:
    long_description = fh.read()

# tests
LINT_REQUIRE = [
    "black",
    "flake8",
    "isort",
]
MYPY_REQUIRE = [
    "mypy",
]
TEST_REQUIRE = [
    "pytest",
    "pytest-xdist",
]

setuptools.setup(
    name="cellarium-norm",
    version=get_version(),
    description="Size-factor normalization of single-cell count matrices",
    long_description=long_description,
    long_description_content_type="text/x-rst",
    url="https://cellarium.ai",
    packages=setuptools.find_namespace_packages(include=["cellarium.*"]),
    include_package_data=True,
    install_requires=[
        "anndata",
        "boltons>=21.0.0",
        "dask[array]",
        "numpy",
        "pandas",
        "scipy",
        "torch>=2.0.0",
    ],
    extras_require={
        "lint": LINT_REQUIRE,
        "mypy": MYPY_REQUIRE,
        "test": TEST_REQUIRE,
        "dev": LINT_REQUIRE + MYPY_REQUIRE + TEST_REQUIRE,
    },
    keywords="anndata single-cell normalization size-factors",
    license="BSD-3-Clause",
    classifiers=[
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: BSD License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
    ],
    python_requires=">=3.10",
)

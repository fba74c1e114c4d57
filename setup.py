#!/usr/bin/env python

"""
Install vareval with pip from a local copy of the repo:
 `cd vareval/`
 `pip install .`

Or, for developers, install in editable mode w/ test deps:
 `pip install -e .[test]`
"""

import re
from setuptools import setup, find_packages


# Fetch version from the package __init__.py
INITFILE = "vareval/__init__.py"
CUR_VERSION = re.search(r"^__version__ = ['\"]([^'\"]*)['\"]",
                        open(INITFILE, "r").read(),
                        re.M).group(1)

setup(
    name="vareval",
    version=CUR_VERSION,
    author="vareval developers",
    description="Genotype concordance of variant calls against a truth set",
    long_description=open('README.rst').read(),
    long_description_content_type='text/x-rst',
    packages=find_packages(),
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "pandas",
        "pysam",
        "loguru",
        "pydantic>=2",
        "ipython",
    ],
    extras_require={"test": ["pytest"]},
    entry_points={'console_scripts': ['vareval = vareval.__main__:main']},
    license='GPL',
    classifiers=[
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
    ],
)

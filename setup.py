#!/usr/bin/env python3
"""
Setup script for gitrail
"""
from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="gitrail",
    version="0.1.0",
    description="A terminal git dashboard with a lane based commit graph",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "pygit2",
    ],
    extras_require={
        "test": ["pytest"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: POSIX",
        "Environment :: Console :: Curses",
        "Topic :: Software Development :: Version Control :: Git",
    ],
    python_requires=">=3.9",
    entry_points={
        "console_scripts": [
            "gitrail=gitrail.app:main",
        ],
    },
)

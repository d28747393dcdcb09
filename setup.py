#!/usr/bin/env python3
"""
Setup configuration for soundcloud-api
A client library and command-line tool for the SoundCloud REST API
"""

from setuptools import setup, find_packages

# Read README for long description
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Core requirements (always installed)
core_requirements = [
    "requests>=2.31.0",
    "pyyaml>=6.0.1",
    "click>=8.1.7",
    "rich-click>=1.7.0",
    "tqdm>=4.66.1",
]

setup(
    name="soundcloud-api",
    version="0.1.0",
    author="soundcloud-api Team",
    description="Client library and CLI for the SoundCloud REST API",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["soundcloud_api", "soundcloud_api.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Sound/Audio",
        "Topic :: Internet :: WWW/HTTP",
    ],
    python_requires=">=3.10",
    install_requires=core_requirements,
    extras_require={
        "dev": [
            "pytest>=7.4.3",
            "black>=23.11.0",
            "flake8>=6.1.0",
            "mypy>=1.7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "soundcloud=soundcloud_api.cli:main",
        ],
    },
    keywords="soundcloud api client oauth upload music cli",
)

#!/usr/bin/env python3
"""
Setup configuration for votequeue
A shared, vote-ranked playback queue client for the terminal
"""

from setuptools import setup, find_packages

# Read README for long description
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Core requirements (always installed)
core_requirements = [
    "click>=8.1.7",
    "requests>=2.31.0",
    "pyyaml>=6.0.1",
    "tqdm>=4.66.1",
    "rich>=13.7.0",
    "rich-click>=1.7.0",
]

setup(
    name="vote-queue",
    version="0.1.0",
    author="votequeue Team",
    description="Shared playback queue ranked by participant votes, kept in sync with a queue service",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Video",
        "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
    ],
    python_requires=">=3.10",
    install_requires=core_requirements,
    extras_require={
        "dev": [
            "pytest>=7.4.3",
            "hypothesis>=6.90.0",
            "black>=23.11.0",
            "flake8>=6.1.0",
            "mypy>=1.7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "votequeue=votequeue.cli:main",
        ],
    },
    keywords="youtube queue voting playlist party cli",
)

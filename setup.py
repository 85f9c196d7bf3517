"""
Setup script for wordcastle.

Word Castle is a terminal vocabulary trainer. Learners work through
word packs, and every learned word is scheduled for review on a fixed
interval ladder (1 hour, 1 day, 3 days, 1 week, 2 weeks, 1 month)
until it graduates.

The 'wordcastle' command is the entry point.
"""

from setuptools import find_packages, setup

setup(
    name="wordcastle",
    version="1.0.0",
    description="Terminal vocabulary trainer with spaced-repetition review",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="Word Castle",
    packages=find_packages(include=["wordcastle", "wordcastle.*"]),
    package_data={"wordcastle": ["data/*.json"]},
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "wordcastle=wordcastle.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="vocabulary spaced-repetition cli education",
)

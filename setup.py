"""
Setup configuration for window-probe.

Retry scheduling for accessibility attribute queries and window classification.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read long description from README if it exists
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text() if readme_file.exists() else ""

setup(
    name="window-probe",
    version="1.0.0",
    description="Retrying attribute queries and window classification for window switchers",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["window_probe", "window_probe.*"]),
    install_requires=[
        "pydantic>=2.0",
        "click",
        "rich",
    ],
    python_requires=">=3.11",
    entry_points={
        "console_scripts": [
            "window-probe=window_probe.__main__:cli",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
        ],
    },
)

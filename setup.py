"""Setup script for Judicial CF Score Analysis package."""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="judicial-cfscores",
    version="0.1.0",
    author="Judicial CF Score Analysis Project",
    description="Descriptive analysis of US state judges' campaign-finance ideology scores",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["judicial_cfscores", "judicial_cfscores.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Information Analysis",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.10",
    install_requires=requirements,
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "judicial-cfscores=judicial_cfscores.main:main",
        ],
    },
)

"""Setup script for the catan-rules engine."""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="catan-rules",
    version="1.0.0",
    author="Ali Bekheet",
    description="A rules engine for Settlers of Catan with a game-manager API and HTTP transport",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    classifiers=[
        "Development Status :: 4 - Beta",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Games/Entertainment :: Board Games",
    ],
    python_requires=">=3.10",
    install_requires=[
        "numpy>=1.20.0",
        "networkx>=2.6.0",
        "fastapi>=0.95.0",
        "pydantic>=1.10",
        "uvicorn>=0.20.0",
    ],
    extras_require={
        "test": [
            "pytest>=6.0",
            "httpx>=0.23",
        ],
        "dev": [
            "pytest>=6.0",
            "httpx>=0.23",
            "black>=21.0",
            "isort>=5.0",
            "mypy>=0.900",
            "flake8>=3.8",
        ],
    },
    entry_points={
        "console_scripts": [
            "catan-rules-server=catan_rules.web.server:main",
        ],
    },
)

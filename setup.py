"""
Options Greeks & Portfolio Risk Engine
Setup configuration for package installation
"""

from setuptools import setup, find_packages

setup(
    name="options-greeks-risk",
    version="0.1.0",
    description="Black-Scholes Greeks, contract risk classification and portfolio risk aggregation for option books",
    author="",
    python_requires=">=3.10",
    packages=find_packages(exclude=["tests", "tests.*", "scripts", "configs"]),
    install_requires=[
        "pandas>=2.0.0",
        "numpy>=1.24.0",
        "pyarrow>=12.0.0",
        "python-dateutil>=2.8.2",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
            "pytest-mock>=3.11.0",
        ],
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
            "pytest-mock>=3.11.0",
            "black>=23.0.0",
            "ruff>=0.1.0",
            "mypy>=1.5.0",
            "ipython>=8.14.0",
        ]
    },
)

"""Setup script for the Invoice Numbering service."""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="invoice-numbering",
    version="0.1.0",
    description="Per-seller invoice number generation with configurable templates and reset periods",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["invoice_numbering", "invoice_numbering.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Framework :: FastAPI",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.10",
    install_requires=[
        "fastapi>=0.110.0,<0.137",
        "uvicorn>=0.27.0",
        "sqlalchemy>=2.0.0",
        "alembic>=1.12.0",
        "click>=8.1.0",
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        "python-jose[cryptography]>=3.3.0",
        "python-dotenv>=1.0.0",
        "loguru>=0.7.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "httpx>=0.25.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "invoice-numbering=invoice_numbering.cli:cli",
        ],
    },
)

"""Setup script for the Ad Exchange Buyer II examples API."""

from setuptools import setup, find_packages

setup(
    name="adexchangebuyer-examples",
    version="0.1.0",
    description="Filter set and client buyer examples for the Ad Exchange Buyer II API",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.109.0",
        "uvicorn[standard]>=0.27.0",
        "google-api-python-client>=2.100.0",
        "google-auth>=2.23.0",
        "tenacity>=8.2.3",
        "pydantic>=2.5.0",
        "pydantic-settings>=2.1.0",
        "python-dotenv>=1.0.0",
        "cryptography>=41.0.7",
        "pyjwt[crypto]>=2.8.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
            "httpx>=0.25.0",
            "httplib2>=0.19.0",
        ],
    },
)

from setuptools import setup, find_packages

setup(
    name="secure-storage",
    version="0.1.0",
    description="Sanitizing, allow-listed key-value storage",
    packages=find_packages(include=["secure_storage", "secure_storage.*"]),
    install_requires=[
        "pydantic>=2.0.0",   # For configuration validation
        "orjson>=3.9.0",     # For faster JSON handling
        "cachetools>=5.3.0", # For in-memory caching of sanitized strings
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
        ],
    },
    python_requires=">=3.10",
)

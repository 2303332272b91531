"""
Setup script for the drawturn-engine package.

Installs the drawturn game engine from src/. The Anthropic-backed drawing
evaluator is optional and pulled in by the "llm" extra.
"""

from setuptools import setup, find_packages

setup(
    name="drawturn-engine",
    version="1.0.0",
    description="Turn-based drawing game engine: per-room state machine, phase timers and scoring",
    author="drawturn maintainers",
    license="MIT",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "python-dotenv>=1.0.0",
        "pydantic>=2.5.0",
    ],
    extras_require={
        "llm": ["anthropic>=0.18.0"],
        "test": ["pytest>=7.0"],
        "all": [
            "anthropic>=0.18.0",
        ],
    },
    # SQLite schema shipped next to the store
    package_data={
        "drawturn._store": ["schema.sql"],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)

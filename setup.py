"""Setup script for dialectic Python package."""

from setuptools import setup, find_packages

setup(
    name="dialectic",
    version="0.2.0",
    description="Dialectic thinking - performer/evaluator MCP tool server",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "claude-agent-sdk>=0.1.0",
        "mcp>=1.17.0,<2",
        "pyyaml>=6.0",
    ],
    extras_require={
        "dev": ["pytest", "black", "mypy"],
    },
    entry_points={
        "console_scripts": [
            "dialectic-server=dialectic.server:main",
            "dialectic-replay=dialectic.replay:main",
        ],
    },
)

from setuptools import find_packages, setup

setup(
    name="dirstream",
    version="0.1.0",
    description="Incremental recursive directory scanner with live terminal output",
    python_requires=">=3.12",
    packages=find_packages(include=["dirstream", "dirstream.*"]),
    install_requires=[
        "result>=0.17",
        "rich>=13.7",
        "textual>=0.80",
        "typer>=0.12",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "dirstream=dirstream.cli:main",
        ],
    },
)

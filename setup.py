from setuptools import setup, find_packages

setup(
    name="watjai",
    version="0.1.0",
    description="Three-lead ECG acquisition core with derived twelve-lead reconstruction",
    author="",
    python_requires=">=3.9",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "numpy>=1.21.0",
        "rich>=12.5.0",
        "pydantic>=2.0.0",
        "pyyaml>=6.0.0",
        "pypubsub>=4.0.3",
        "aiohttp>=3.8.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "watjai=watjai.main:main",
        ],
    },
)

from setuptools import setup, find_packages

setup(
    name="kotoba",
    version="0.1.0",
    description="Desktop dictation core: recording sessions, transcription and formatting",
    author="",
    python_requires=">=3.9",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "numpy>=1.21.0",
        "scipy>=1.7.0",
        "google-cloud-speech>=2.16.0",
        "google-auth>=2.10.0",
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
            "kotoba=kotoba.main:main",
        ],
    },
)

# setup.py
from setuptools import setup, find_packages

setup(
    name="duesoon",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "python-dateutil",
        "PySide6",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-qt",
        ],
    },
    entry_points={
        "console_scripts": [
            "duesoon=duesoon.main:run_wizard",
        ],
    },
)

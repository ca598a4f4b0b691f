"""
Setup for FarmOps Backend package.
This makes 'farmops' an installable Python package.
"""
from setuptools import setup, find_packages

setup(
    name="farmops-backend",
    version="1.0.0",
    packages=find_packages(include=["farmops", "farmops.*"]),
    install_requires=[
        line.strip()
        for line in open('farmops/requirements.txt')
        if line.strip() and not line.startswith('#')
    ],
    extras_require={
        "test": ["pytest>=7.4"],
    },
    package_data={"farmops": ["requirements.txt"]},
    python_requires=">=3.9",
)

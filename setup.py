from setuptools import setup, find_packages

setup(
    name="cachemodel",
    version="0.1",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        'numpy',
    ],
    extras_require={
        'test': ['pytest'],
    },
)

from setuptools import setup, find_packages

setup(
    name="resiliency-simulator",
    version="0.1.0",
    description="Discrete event simulation of request pipelines for resiliency sensitivity analysis",
    author="adamfilli",
    packages=find_packages(include=["resiliencysim", "resiliencysim.*"]),
    install_requires=[
        "matplotlib",
        "pandas"
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["resiliencysim=resiliencysim.cli:main"],
    },
    include_package_data=True,
    python_requires=">=3.11",
)

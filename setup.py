from setuptools import setup, find_packages

setup(
    name="sinroute",
    version="0.1.0",
    description="Client-side routing for Python apps running in the browser",
    author="Sinroute Team",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=[],
    extras_require={
        "test": ["pytest"],
    },
)

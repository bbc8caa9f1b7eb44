from setuptools import find_packages, setup

setup(
    name="hyperanf",
    packages=find_packages(include=["hyperanf"]),
    version="0.2.0",
    description="HyperANF implementation",
    author="Nick Cui",
    python_requires=">=3.8",
    install_requires=["numpy", "xxhash"],
    extras_require={"test": ["pytest", "HLL"]},
    entry_points={"console_scripts": ["hyperanf=hyperanf.cli:main"]},
)

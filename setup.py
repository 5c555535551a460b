from setuptools import find_packages, setup

setup(
    name="binimpurity",
    version="0.1.0",
    description="Sufficient-statistics impurity metrics for histogram decision-tree training",
    packages=find_packages(include=["binimpurity", "binimpurity.*"]),
    python_requires=">=3.10",
    install_requires=["numpy>=1.22"],
    extras_require={"test": ["pytest>=7"]},
)

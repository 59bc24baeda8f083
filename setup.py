from setuptools import setup, find_packages

setup(
    name="handlegraph",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "numpy>=1.26",
        "networkx>=3.2",
        "tqdm",
        "psutil",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    author="",
    author_email="",
    description="Compact DNA sequences and handle graph interfaces for bidirected variation graphs",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    python_requires=">=3.10",
)

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="cleardir",
    version="0.1.0",
    author="Marcel Keienborg",
    author_email="marcel@keienb.org",
    description="Delete duplicate files in a directory, keeping the one with the shortest name",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["cleardir", "cleardir.*"]),
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.7",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Environment :: Console",
        "Topic :: System :: Filesystems",
        "Topic :: Utilities",
    ],
    python_requires=">=3.7",
    install_requires=[
        "rich",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "cleardir=cleardir.cli:main",
        ],
    },
    keywords="duplicate files sha256 cleanup cli utility",
)

# setup.py
from setuptools import setup, find_packages

setup(
    name="gocombiner",
    version="1.0.0",
    description="Combine the main packages of a Go module into one multi-call program",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "tree-sitter>=0.22",
        "tree-sitter-go>=0.21",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'gocombiner=gocombiner.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)

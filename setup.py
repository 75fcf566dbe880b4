# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="scanex",
    version="0.1.0",
    description="Dependency-aware code bundler: discovers related source files and bundles them into one document",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["scanex", "scanex.*"]),
    python_requires=">=3.10",
    install_requires=[
        "tiktoken",
        "tree-sitter>=0.25",
        "tree-sitter-javascript",
        "tree-sitter-typescript",
        "tree-sitter-ruby",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        'console_scripts': [
            'scanex=scanex.interface.cli.app:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)

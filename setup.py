# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="slnpack",
    version="0.1.0",
    description="Render .sln solution structures and extract their sources into token-bounded text files",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["slnpack", "slnpack.*"]),
    python_requires=">=3.9",
    install_requires=[
        "tiktoken",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        'console_scripts': [
            'slnpack=slnpack.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)

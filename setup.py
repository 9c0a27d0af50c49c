from setuptools import setup
from pathlib import Path

this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding="utf-8")

setup(
    name="codetyper",
    version="0.1.0",
    description="Human-like typing of source code into live auto-indenting editors",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=["codetyper", "codetyper.indent", "codetyper.keyboard", "codetyper.adapters"],
    install_requires=[
        "zendriver",
        "Pillow",
    ],
    extras_require={
        "test": ["pytest"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.10",
)

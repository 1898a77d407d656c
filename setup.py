from setuptools import setup
from pathlib import Path

this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding="utf-8")

setup(
    name="tracekit",
    version="0.1.0",
    description="Connect-the-dots pointer trajectory capture and a reactive dot-field background",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=["tracekit", "tracekit.task", "tracekit.field"],
    install_requires=[
        "Pillow>=10.1",
    ],
    extras_require={
        "test": ["pytest"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
)

"""
Setup script for typequest-engine.

TypeQuest Engine is the typing-performance and progression core of the
TypeQuest typing tutor. It turns a stream of keystroke events into
speed/accuracy metrics, runs the per-exercise and per-lesson state
machines, and synthesizes remedial drills when a learner fails a lesson.

The 'typequest' command is a small developer CLI for replaying keystroke
logs and previewing generated drills.
"""

from setuptools import find_packages, setup

setup(
    name="typequest-engine",
    version="1.0.0",
    description="Deterministic typing-performance and progression engine for TypeQuest",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="TypeQuest",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "typequest=typequest.cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="typing tutor wpm accuracy education progression",
)
